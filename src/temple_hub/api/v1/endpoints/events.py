"""Community calendar endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status
from sqlalchemy.orm import Session

from temple_hub.core.errors import NotFoundError, ValidationError, ensure_identifier
from temple_hub.models import Community, Event
from temple_hub.schemas.activity import EventCreate, EventResponse, EventUpdate
from temple_hub.schemas.common import Envelope, MessageEnvelope, listing, ok

from ..dependencies import CommunityDep, SessionDep

router = APIRouter(prefix="/communities", tags=["events"])


def _get_event(db: Session, community: Community, event_id: str) -> Event:
    event_id = ensure_identifier(event_id, label="event ID")
    event = db.get(Event, event_id)
    if event is None or event.community_id != community.id:
        raise NotFoundError("Event not found", meta={"event_id": event_id})
    return event


@router.get("/{community_id}/events", response_model=Envelope[list[EventResponse]])
async def list_events(community: CommunityDep, db: SessionDep) -> dict[str, object]:
    """List events in chronological order."""
    events = (
        db.query(Event)
        .filter(Event.community_id == community.id)
        .order_by(Event.start_date)
        .all()
    )
    return listing(events)


@router.post(
    "/{community_id}/events",
    response_model=Envelope[EventResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_event(community: CommunityDep, payload: EventCreate, db: SessionDep) -> dict[str, object]:
    """Create a published event."""
    if payload.end_date and payload.end_date < payload.start_date:
        raise ValidationError("end_date must not be before start_date")
    event = Event(community_id=community.id, status="published", **payload.model_dump())
    db.add(event)
    db.commit()
    db.refresh(event)
    return ok(event, "Event created successfully")


@router.put("/{community_id}/events/{event_id}", response_model=Envelope[EventResponse])
async def update_event(
    community: CommunityDep,
    event_id: str,
    changes: EventUpdate,
    db: SessionDep,
) -> dict[str, object]:
    """Update an event."""
    event = _get_event(db, community, event_id)
    for key, value in changes.changes().items():
        setattr(event, key, value)
    db.commit()
    db.refresh(event)
    return ok(event, "Event updated successfully")


@router.delete("/{community_id}/events/{event_id}", response_model=MessageEnvelope)
async def delete_event(community: CommunityDep, event_id: str, db: SessionDep) -> dict[str, object]:
    """Delete an event."""
    event = _get_event(db, community, event_id)
    db.delete(event)
    db.commit()
    return {"success": True, "message": "Event deleted successfully"}
