"""System health and activity endpoints."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from temple_hub.core.settings import settings
from temple_hub.models import (
    Application,
    ApplicationStatus,
    Community,
    Donation,
    Event,
    Expense,
    Membership,
    PujaSeries,
    Task,
    Transaction,
)

from ..dependencies import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
async def get_system_health(db: SessionDep) -> dict[str, object]:
    """Health check including database connectivity.

    Args:
        db: Database session

    Returns:
        Dictionary with overall status, component health, and version info
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        db_status = f"unhealthy: {e}"

    return {
        "success": db_status == "healthy",
        "status": "healthy" if db_status == "healthy" else "unhealthy",
        "timestamp": int(time.time()),
        "components": {"database": db_status},
        "version": settings.app_version,
    }


@router.get("/status")
async def get_system_status() -> dict[str, object]:
    """Get overall service status for monitoring dashboards."""
    return {
        "success": True,
        "service": "temple-hub",
        "version": settings.app_version,
        "status": "operational",
        "timestamp": int(time.time()),
        "environment": "development" if settings.debug else "production",
    }


@router.get("/activity-stats")
async def get_activity_stats(db: SessionDep) -> dict[str, object]:
    """Row counts across the main tables."""
    pending = (
        db.query(Application)
        .filter(Application.status == ApplicationStatus.PENDING.value)
        .count()
    )
    data = {
        "communities": db.query(Community).count(),
        "members": db.query(Membership).count(),
        "applications": db.query(Application).count(),
        "pending_applications": pending,
        "tasks": db.query(Task).count(),
        "events": db.query(Event).count(),
        "puja_series": db.query(PujaSeries).count(),
        "transactions": db.query(Transaction).count(),
        "expenses": db.query(Expense).count(),
        "donations": db.query(Donation).count(),
    }
    return {"success": True, "data": {key: int(value or 0) for key, value in data.items()}}
