"""Membership endpoints nested under a community."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from temple_hub.core.errors import ConflictError, NotFoundError, ensure_identifier
from temple_hub.models import Community, Membership
from temple_hub.models.community import MEMBER_STATUS_ACTIVE
from temple_hub.repositories import CommunityRepository, MembershipRepository
from temple_hub.schemas.common import Envelope, MessageEnvelope, listing, ok
from temple_hub.schemas.membership import MemberCreate, MemberResponse, MemberUpdate

from ..dependencies import CommunityDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/communities", tags=["members"])


def _member_in_community(repo: MembershipRepository, community: Community, member_id: str) -> Membership:
    member_id = ensure_identifier(member_id, label="member ID")
    membership = repo.get(member_id)
    if membership is None or membership.community_id != community.id:
        raise NotFoundError("Member not found", meta={"member_id": member_id})
    return membership


@router.get("/{community_id}/members", response_model=Envelope[list[MemberResponse]])
async def list_members(
    community: CommunityDep,
    db: SessionDep,
    role: str | None = None,
    status: str = "active",
    search: str | None = None,
) -> dict[str, object]:
    """List members, filtered by role, status (``all`` for any) and a name/email search."""
    members = MembershipRepository(db).list_by_community(
        community.id, role=role, status=status, search=search
    )
    return listing(members)


@router.post(
    "/{community_id}/members",
    response_model=Envelope[MemberResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_member(community: CommunityDep, payload: MemberCreate, db: SessionDep) -> dict[str, object]:
    """Add a member directly and bump the community's member count."""
    repo = MembershipRepository(db)
    if repo.find_existing(community.id, user_id=payload.user_id, email=payload.email):
        raise ConflictError("User is already a member")

    membership = repo.create(community.id, **payload.model_dump())
    CommunityRepository(db).increment_member_count(community.id, 1)
    db.commit()
    db.refresh(membership)
    logger.info("Member %s added to community %s", membership.id, community.id)
    return ok(membership, "Member added successfully")


@router.put("/{community_id}/members/{member_id}", response_model=Envelope[MemberResponse])
async def update_member(
    community: CommunityDep,
    member_id: str,
    changes: MemberUpdate,
    db: SessionDep,
) -> dict[str, object]:
    """Change a member's role or lead status."""
    repo = MembershipRepository(db)
    membership = _member_in_community(repo, community, member_id)
    was_active = membership.status == MEMBER_STATUS_ACTIVE
    repo.update(membership, **changes.changes())
    is_active = membership.status == MEMBER_STATUS_ACTIVE
    if was_active != is_active:
        CommunityRepository(db).increment_member_count(community.id, 1 if is_active else -1)
    db.commit()
    db.refresh(membership)
    return ok(membership, "Member updated successfully")


@router.delete("/{community_id}/members/{member_id}", response_model=MessageEnvelope)
async def remove_member(community: CommunityDep, member_id: str, db: SessionDep) -> dict[str, object]:
    """Remove a member and decrement the community's member count."""
    repo = MembershipRepository(db)
    membership = _member_in_community(repo, community, member_id)
    was_active = membership.status == MEMBER_STATUS_ACTIVE
    repo.delete(membership)
    if was_active:
        CommunityRepository(db).increment_member_count(community.id, -1)
    db.commit()
    logger.info("Member %s removed from community %s", member_id, community.id)
    return {"success": True, "message": "Member removed successfully"}


@router.get("/{community_id}/leads", response_model=Envelope[list[MemberResponse]])
async def list_leads(community: CommunityDep, db: SessionDep) -> dict[str, object]:
    """List active members flagged as leads, ordered by position."""
    return listing(MembershipRepository(db).list_leads(community.id))
