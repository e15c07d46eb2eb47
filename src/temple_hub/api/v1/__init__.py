"""Version 1 API endpoints."""

from .endpoints import (
    applications_router,
    communities_router,
    donations_router,
    events_router,
    expenses_router,
    finance_router,
    members_router,
    pujas_router,
    system_router,
    tasks_router,
)

__all__ = [
    "communities_router",
    "members_router",
    "applications_router",
    "tasks_router",
    "events_router",
    "pujas_router",
    "finance_router",
    "expenses_router",
    "donations_router",
    "system_router",
]
