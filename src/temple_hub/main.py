# src/temple_hub/main.py
"""Main entry point for the Temple Hub application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from temple_hub.api.errors import register_exception_handlers
from temple_hub.api.v1 import (
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
from temple_hub.core.logging import configure_logging
from temple_hub.core.settings import settings
from temple_hub.db.session import create_tables

configure_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Temple Hub API",
    description="Community management backend for temple communities",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(communities_router, prefix="/api/v1")
app.include_router(members_router, prefix="/api/v1")
app.include_router(applications_router, prefix="/api/v1")
app.include_router(tasks_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(pujas_router, prefix="/api/v1")
app.include_router(finance_router, prefix="/api/v1")
app.include_router(expenses_router, prefix="/api/v1")
app.include_router(donations_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
        logger.info("Database tables ensured")
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Temple Hub API",
        "version": settings.app_version,
        "description": "Community management backend for temple communities",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("temple_hub.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
