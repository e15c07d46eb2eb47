"""SQLAlchemy models for communities and their memberships."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from temple_hub.db.session import Base
from temple_hub.db.time import new_id, utcnow

MEMBER_ROLE_DEFAULT = "member"
MEMBER_STATUS_ACTIVE = "active"


class Community(Base):
    """Community metadata with a denormalized active-member counter."""

    __tablename__ = "communities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Maintained with atomic increments; recount_members() repairs drift.
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<Community {self.name}>"


class Membership(Base):
    """Active membership of a person in a community.

    Name, email, phone, skills and experience are copied from the approved
    application so the row keeps a snapshot even if the application changes.
    """

    __tablename__ = "community_members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    community_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    # Unauthenticated applicants have no user id.
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # One membership per application; NULL for members added directly.
    application_id: Mapped[str | None] = mapped_column(String(36), nullable=True, unique=True, index=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    experience: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(40), nullable=False, default=MEMBER_ROLE_DEFAULT)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=MEMBER_STATUS_ACTIVE)
    is_lead: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lead_position: Mapped[str | None] = mapped_column(Text, nullable=True)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Membership community={self.community_id} email={self.email} role={self.role}>"
