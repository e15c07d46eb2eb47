"""Donation receipt endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from temple_hub.core.errors import NotFoundError, ensure_identifier
from temple_hub.models import Donation
from temple_hub.schemas.common import Envelope, MessageEnvelope, listing, ok
from temple_hub.schemas.finance import DonationCreate, DonationResponse, DonationStats
from temple_hub.services.finance import donation_stats

from ..dependencies import SessionDep

router = APIRouter(prefix="/donations", tags=["donations"])


def _get_donation(db: Session, donation_id: str) -> Donation:
    donation_id = ensure_identifier(donation_id, label="donation ID")
    donation = db.get(Donation, donation_id)
    if donation is None:
        raise NotFoundError("Donation not found", meta={"donation_id": donation_id})
    return donation


@router.get("/", response_model=Envelope[list[DonationResponse]])
async def list_donations(
    db: SessionDep,
    source: str | None = None,
    provider: str | None = None,
) -> dict[str, object]:
    """List donations, newest first."""
    query = db.query(Donation)
    if source:
        query = query.filter(Donation.source == source)
    if provider:
        query = query.filter(Donation.provider == provider)
    return listing(query.order_by(desc(Donation.created_at)).all())


@router.get("/stats", response_model=Envelope[DonationStats])
async def get_donation_stats(db: SessionDep) -> dict[str, object]:
    """Return donation totals by source and payment method."""
    return ok(donation_stats(db))


@router.get("/{donation_id}", response_model=Envelope[DonationResponse])
async def get_donation(donation_id: str, db: SessionDep) -> dict[str, object]:
    """Get a donation by ID."""
    return ok(_get_donation(db, donation_id))


@router.post(
    "/",
    response_model=Envelope[DonationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_donation(payload: DonationCreate, db: SessionDep) -> dict[str, object]:
    """Record a donation receipt."""
    donation = Donation(**payload.model_dump())
    db.add(donation)
    db.commit()
    db.refresh(donation)
    return ok(donation, "Donation recorded successfully")


@router.put("/{donation_id}", response_model=Envelope[DonationResponse])
async def update_donation(donation_id: str, payload: DonationCreate, db: SessionDep) -> dict[str, object]:
    """Replace a donation receipt; the body is validated like a new donation."""
    donation = _get_donation(db, donation_id)
    for key, value in payload.model_dump().items():
        setattr(donation, key, value)
    db.commit()
    db.refresh(donation)
    return ok(donation, "Donation updated successfully")


@router.delete("/{donation_id}", response_model=MessageEnvelope)
async def delete_donation(donation_id: str, db: SessionDep) -> dict[str, object]:
    """Delete a donation."""
    donation = _get_donation(db, donation_id)
    db.delete(donation)
    db.commit()
    return {"success": True, "message": "Donation deleted successfully"}
