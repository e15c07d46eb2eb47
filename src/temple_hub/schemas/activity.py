"""Task and event schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import PartialUpdate


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: str | None = None
    status: str = "todo"
    priority: str = "medium"
    assigned_to: list[str] = Field(default_factory=list)
    due_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    created_by: str | None = None


class TaskUpdate(PartialUpdate):
    required_fields = frozenset({"title", "status", "priority", "assigned_to", "tags"})

    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    assigned_to: list[str] | None = None
    due_date: datetime | None = None
    tags: list[str] | None = None
    completed_at: datetime | None = None


class TaskResponse(BaseModel):
    id: str
    community_id: str
    title: str
    description: str | None
    status: str
    priority: str
    assigned_to: list[str]
    due_date: datetime | None
    tags: list[str]
    created_by: str | None
    completed_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: str | None = None
    location: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    organizer_id: str | None = None


class EventUpdate(PartialUpdate):
    required_fields = frozenset({"title", "start_date", "status"})

    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None
    location: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    status: str | None = None


class EventResponse(BaseModel):
    id: str
    community_id: str
    title: str
    description: str | None
    location: str | None
    start_date: datetime
    end_date: datetime | None
    organizer_id: str | None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
