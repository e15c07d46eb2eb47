"""Community-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import PartialUpdate


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    owner_id: str | None = None
    status: str = "active"


class CommunityUpdate(PartialUpdate):
    """Partial update of community metadata; member_count is not writable."""

    required_fields = frozenset({"name", "status"})

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    status: str | None = None
    owner_id: str | None = None


class CommunityResponse(BaseModel):
    """Schema for community information returned by the API."""

    id: str
    name: str
    description: str | None
    status: str
    owner_id: str | None
    member_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
