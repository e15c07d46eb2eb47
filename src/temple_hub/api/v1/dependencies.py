"""Shared API dependencies for sessions, path lookups and services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from temple_hub.core.errors import ensure_identifier
from temple_hub.db.session import get_db
from temple_hub.models import Community
from temple_hub.repositories import CommunityRepository
from temple_hub.services.application_workflow import ApplicationWorkflow

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_community(community_id: str, db: SessionDep) -> Community:
    """Resolve the ``community_id`` path parameter to a community.

    Raises:
        InvalidIdentifierError: if the id is blank or a client placeholder.
        NotFoundError: if no community has this id.
    """
    community_id = ensure_identifier(community_id, label="community ID")
    return CommunityRepository(db).get_or_404(community_id)


def get_workflow(db: SessionDep) -> ApplicationWorkflow:
    """Build the application review workflow bound to the request session."""
    return ApplicationWorkflow(db)


CommunityDep = Annotated[Community, Depends(get_community)]
WorkflowDep = Annotated[ApplicationWorkflow, Depends(get_workflow)]
