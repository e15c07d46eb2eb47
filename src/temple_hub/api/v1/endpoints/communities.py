"""Community-related endpoints for the Temple Hub API."""

from __future__ import annotations

from fastapi import APIRouter, status

from temple_hub.core.errors import ConflictError
from temple_hub.repositories import CommunityRepository
from temple_hub.schemas.common import Envelope, listing, ok
from temple_hub.schemas.community import CommunityCreate, CommunityResponse, CommunityUpdate

from ..dependencies import CommunityDep, SessionDep

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/", response_model=Envelope[list[CommunityResponse]])
async def list_communities(db: SessionDep) -> dict[str, object]:
    """List all communities."""
    return listing(CommunityRepository(db).list_all())


@router.get("/{community_id}", response_model=Envelope[CommunityResponse])
async def get_community(community: CommunityDep) -> dict[str, object]:
    """Get a specific community by ID."""
    return ok(community)


@router.post(
    "/",
    response_model=Envelope[CommunityResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_community(community_data: CommunityCreate, db: SessionDep) -> dict[str, object]:
    """Create a new community."""
    repo = CommunityRepository(db)
    if repo.get_by_name(community_data.name):
        raise ConflictError("Community name already exists", meta={"name": community_data.name})

    community = repo.create(**community_data.model_dump())
    db.commit()
    db.refresh(community)
    return ok(community, "Community created successfully")


@router.put("/{community_id}", response_model=Envelope[CommunityResponse])
async def update_community(
    community: CommunityDep,
    changes: CommunityUpdate,
    db: SessionDep,
) -> dict[str, object]:
    """Update community metadata."""
    repo = CommunityRepository(db)
    update_data = changes.changes()

    new_name = update_data.get("name")
    if new_name and new_name != community.name and repo.get_by_name(new_name):
        raise ConflictError("Community name already exists", meta={"name": new_name})

    repo.update(community, **update_data)
    db.commit()
    db.refresh(community)
    return ok(community, "Community updated successfully")
