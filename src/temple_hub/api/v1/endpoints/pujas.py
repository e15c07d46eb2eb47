"""Puja series endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, status
from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from temple_hub.core.errors import NotFoundError, ValidationError, ensure_identifier
from temple_hub.models import PujaSeries
from temple_hub.models.puja import PUJA_STATUS_CANCELLED
from temple_hub.repositories import CommunityRepository
from temple_hub.schemas.common import Envelope, MessageEnvelope, PagedEnvelope, ok, paged
from temple_hub.schemas.puja import PujaSeriesCreate, PujaSeriesResponse

from ..dependencies import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pujas", tags=["pujas"])


def _get_series(db: Session, series_id: str) -> PujaSeries:
    series_id = ensure_identifier(series_id, label="puja series ID")
    series = db.get(PujaSeries, series_id)
    if series is None:
        raise NotFoundError("Puja series not found", meta={"puja_series_id": series_id})
    return series


def _require_community(db: Session, community_id: str) -> None:
    if CommunityRepository(db).get(community_id) is None:
        raise ValidationError(
            "Valid community ID is required",
            meta={"community_id": community_id},
        )


@router.get("/", response_model=PagedEnvelope[list[PujaSeriesResponse]])
async def list_puja_series(
    db: SessionDep,
    community_id: str | None = None,
    status: str | None = None,
    type: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
) -> dict[str, object]:
    """List puja series newest first, one page at a time; ``all`` disables a filter."""
    conditions = []
    if community_id and community_id != "all":
        conditions.append(PujaSeries.community_id == community_id)
    if status and status != "all":
        conditions.append(PujaSeries.status == status)
    if type and type != "all":
        conditions.append(PujaSeries.type == type)

    total = db.scalar(select(func.count()).select_from(PujaSeries).where(*conditions)) or 0
    rows = db.scalars(
        select(PujaSeries)
        .where(*conditions)
        .order_by(desc(PujaSeries.created_at))
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return paged(list(rows), page=page, limit=limit, total=int(total))


@router.get("/{series_id}", response_model=Envelope[PujaSeriesResponse])
async def get_puja_series(series_id: str, db: SessionDep) -> dict[str, object]:
    """Get a puja series by ID."""
    return ok(_get_series(db, series_id))


@router.post(
    "/",
    response_model=Envelope[PujaSeriesResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_puja_series(payload: PujaSeriesCreate, db: SessionDep) -> dict[str, object]:
    """Create a puja series for an existing community."""
    community_id = ensure_identifier(payload.community_id, label="community ID")
    _require_community(db, community_id)
    series = PujaSeries(**payload.model_dump(exclude={"community_id"}), community_id=community_id)
    db.add(series)
    db.commit()
    db.refresh(series)
    logger.info("Puja series %s created for community %s", series.id, community_id)
    return ok(series, "Puja series created successfully")


@router.put("/{series_id}", response_model=Envelope[PujaSeriesResponse])
async def update_puja_series(series_id: str, payload: PujaSeriesCreate, db: SessionDep) -> dict[str, object]:
    """Replace a puja series; the body is validated like a new series."""
    series = _get_series(db, series_id)
    community_id = ensure_identifier(payload.community_id, label="community ID")
    if community_id != series.community_id:
        _require_community(db, community_id)
    for key, value in payload.model_dump(exclude={"community_id"}).items():
        setattr(series, key, value)
    series.community_id = community_id
    db.commit()
    db.refresh(series)
    return ok(series, "Puja series updated successfully")


@router.post("/{series_id}/cancel", response_model=Envelope[PujaSeriesResponse])
async def cancel_puja_series(series_id: str, db: SessionDep) -> dict[str, object]:
    """Mark a puja series cancelled. Cancelling twice is harmless."""
    series = _get_series(db, series_id)
    series.status = PUJA_STATUS_CANCELLED
    db.commit()
    db.refresh(series)
    return ok(series, "Puja series cancelled successfully")


@router.delete("/{series_id}", response_model=MessageEnvelope)
async def delete_puja_series(series_id: str, db: SessionDep) -> dict[str, object]:
    """Delete a puja series."""
    series = _get_series(db, series_id)
    db.delete(series)
    db.commit()
    return {"success": True, "message": "Puja series deleted successfully"}
