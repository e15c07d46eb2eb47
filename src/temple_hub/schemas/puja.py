"""Puja series schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PujaType = Literal["aarti", "havan", "puja", "special_ceremony", "festival", "other"]


class PujaSeriesCreate(BaseModel):
    """Puja series body. Used for both create and full replacement."""

    community_id: str
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    type: PujaType
    start_date: datetime
    end_date: datetime | None = None
    schedule_config: dict[str, Any]
    duration_minutes: int = Field(60, ge=15, le=480)
    max_participants: int | None = Field(None, ge=1)
    registration_required: bool = False
    priest_id: str | None = None
    location: str | None = None
    created_by: str | None = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v


class PujaSeriesResponse(BaseModel):
    id: str
    community_id: str
    name: str
    description: str | None
    type: str
    status: str
    start_date: datetime
    end_date: datetime | None
    schedule_config: dict[str, Any]
    duration_minutes: int
    max_participants: int | None
    registration_required: bool
    priest_id: str | None
    location: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)
