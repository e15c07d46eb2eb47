"""Membership schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from .common import PartialUpdate


class MemberCreate(BaseModel):
    """Directly add a member without going through an application.

    At least one of ``user_id`` or ``email`` identifies the person.
    """

    user_id: str | None = None
    email: EmailStr | None = None
    full_name: str | None = None
    phone: str | None = None
    role: str = "member"
    skills: list[str] = Field(default_factory=list)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @model_validator(mode="after")
    def _require_identity(self) -> "MemberCreate":
        if not self.user_id and not self.email:
            raise ValueError("Either user_id or email is required")
        return self


class MemberUpdate(PartialUpdate):
    required_fields = frozenset({"role", "is_lead", "status"})

    role: str | None = None
    is_lead: bool | None = None
    lead_position: str | None = None
    status: str | None = None


class MemberResponse(BaseModel):
    id: str
    community_id: str
    user_id: str | None
    application_id: str | None
    email: str | None
    full_name: str | None
    phone: str | None
    skills: list[str]
    experience: str | None
    role: str
    status: str
    is_lead: bool
    lead_position: str | None
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)
