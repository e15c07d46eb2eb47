"""Recurring puja series scheduled by a community."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from temple_hub.db.session import Base
from temple_hub.db.time import new_id, utcnow

PUJA_STATUS_ACTIVE = "active"
PUJA_STATUS_CANCELLED = "cancelled"


class PujaSeries(Base):
    """A recurring ritual; ``schedule_config`` holds the recurrence rule as sent by the client."""

    __tablename__ = "puja_series"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    community_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # aarti | havan | puja | special_ceremony | festival | other
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=PUJA_STATUS_ACTIVE)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    schedule_config: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)
    registration_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    priest_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, onupdate=utcnow)
