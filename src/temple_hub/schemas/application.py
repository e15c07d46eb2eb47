"""Application (join request) schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class ApplicationCreate(BaseModel):
    """Payload submitted by someone asking to join a community."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = None
    message: str | None = None
    why_join: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience: str | None = None
    user_id: str | None = Field(None, description="Set when the applicant is signed in")

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v


class ApplicationApproval(BaseModel):
    reviewed_by: str | None = None


class ApplicationRejection(BaseModel):
    reviewed_by: str | None = None
    review_notes: str | None = None


class ApplicationResponse(BaseModel):
    """Application as returned by the API."""

    id: str
    community_id: str
    user_id: str | None
    name: str
    email: str
    phone: str | None
    message: str | None
    why_join: str | None
    skills: list[str]
    experience: str | None
    status: str
    applied_at: datetime
    reviewed_at: datetime | None
    reviewed_by: str | None
    review_notes: str | None

    model_config = ConfigDict(from_attributes=True)


class ReconcileResponse(BaseModel):
    """Outcome of re-provisioning memberships for approved applications."""

    community_id: str
    provisioned: int
    member_count: int

    model_config = ConfigDict(from_attributes=True)
