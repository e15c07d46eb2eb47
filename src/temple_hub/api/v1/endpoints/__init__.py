"""API endpoint modules for version 1."""

from .applications import router as applications_router
from .communities import router as communities_router
from .donations import router as donations_router
from .events import router as events_router
from .expenses import router as expenses_router
from .finance import router as finance_router
from .members import router as members_router
from .pujas import router as pujas_router
from .system import router as system_router
from .tasks import router as tasks_router

__all__ = [
    "applications_router",
    "communities_router",
    "donations_router",
    "events_router",
    "expenses_router",
    "finance_router",
    "members_router",
    "pujas_router",
    "system_router",
    "tasks_router",
]
