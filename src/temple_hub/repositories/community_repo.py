"""Data access helpers for community metadata and the member counter."""
from __future__ import annotations

from typing import Any

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from temple_hub.core.errors import NotFoundError
from temple_hub.db.time import utcnow
from temple_hub.models.community import Community
from temple_hub.repositories.membership_repo import MembershipRepository

__all__ = ["CommunityRepository"]


class CommunityRepository:
    """Thin wrapper around database access for community rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, community_id: str) -> Community | None:
        return self.session.get(Community, community_id)

    def get_or_404(self, community_id: str) -> Community:
        community = self.get(community_id)
        if community is None:
            raise NotFoundError("Community not found", meta={"community_id": community_id})
        return community

    def get_by_name(self, name: str) -> Community | None:
        return self.session.scalars(select(Community).where(Community.name == name)).first()

    def list_all(self) -> list[Community]:
        return list(self.session.scalars(select(Community).order_by(Community.created_at.desc())))

    def create(self, **fields: Any) -> Community:
        community = Community(**fields)
        self.session.add(community)
        self.session.flush()
        return community

    def update(self, community: Community, **changes: Any) -> Community:
        for key, value in changes.items():
            setattr(community, key, value)
        self.session.flush()
        return community

    def get_member_count(self, community_id: str) -> int:
        """Return the stored counter, read from the database rather than the identity map."""
        count = self.session.scalar(select(Community.member_count).where(Community.id == community_id))
        if count is None:
            raise NotFoundError("Community not found", meta={"community_id": community_id})
        return int(count)

    def set_member_count(self, community_id: str, value: int) -> None:
        self.session.execute(
            update(Community)
            .where(Community.id == community_id)
            .values(member_count=max(0, int(value)), updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )

    def increment_member_count(self, community_id: str, delta: int = 1) -> None:
        """Adjust the counter with a single UPDATE, never going below zero."""
        adjusted = Community.member_count + delta
        self.session.execute(
            update(Community)
            .where(Community.id == community_id)
            .values(
                member_count=case((adjusted < 0, 0), else_=adjusted),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session="fetch")
        )

    def recount_members(self, community_id: str) -> int:
        """Store the number of active membership rows as the counter and return it."""
        count = MembershipRepository(self.session).count_active(community_id)
        self.set_member_count(community_id, count)
        return count
