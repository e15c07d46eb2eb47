"""Data access helpers for community memberships."""
from __future__ import annotations

from typing import Any

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.orm import Session

from temple_hub.models.community import MEMBER_STATUS_ACTIVE, Membership

__all__ = ["MembershipRepository"]

STATUS_ANY = "all"


class MembershipRepository:
    """Persistence boundary for membership rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, member_id: str) -> Membership | None:
        return self.session.get(Membership, member_id)

    def create(self, community_id: str, **fields: Any) -> Membership:
        """Insert a membership row. No duplicate check is made here."""
        membership = Membership(
            community_id=community_id,
            skills=list(fields.pop("skills", None) or []),
            **fields,
        )
        self.session.add(membership)
        self.session.flush()
        return membership

    def list_by_community(
        self,
        community_id: str,
        *,
        role: str | None = None,
        status: str | None = MEMBER_STATUS_ACTIVE,
        search: str | None = None,
    ) -> list[Membership]:
        """Return memberships of a community.

        Args:
            community_id: Community to list.
            role: Only members with this role.
            status: Only members with this status; ``None`` or ``"all"`` lists every status.
            search: Case-insensitive substring matched against full name and email.
        """
        stmt = select(Membership).where(Membership.community_id == community_id)
        if role:
            stmt = stmt.where(Membership.role == role)
        if status and status != STATUS_ANY:
            stmt = stmt.where(Membership.status == status)
        if search:
            stmt = stmt.where(
                or_(
                    Membership.full_name.icontains(search, autoescape=True),
                    Membership.email.icontains(search, autoescape=True),
                )
            )
        stmt = stmt.order_by(Membership.joined_at.desc())
        return list(self.session.scalars(stmt))

    def list_leads(self, community_id: str) -> list[Membership]:
        stmt = (
            select(Membership)
            .where(
                Membership.community_id == community_id,
                Membership.is_lead.is_(True),
                Membership.status == MEMBER_STATUS_ACTIVE,
            )
            .order_by(Membership.lead_position)
        )
        return list(self.session.scalars(stmt))

    def find_existing(
        self,
        community_id: str,
        *,
        user_id: str | None = None,
        email: str | None = None,
    ) -> Membership | None:
        """Return a membership matching either the user id or the email."""
        clauses = []
        if user_id:
            clauses.append(Membership.user_id == user_id)
        if email:
            clauses.append(func.lower(Membership.email) == email.strip().lower())
        if not clauses:
            return None
        stmt = select(Membership).where(Membership.community_id == community_id, or_(*clauses))
        return self.session.scalars(stmt).first()

    def find_by_application(self, application_id: str) -> Membership | None:
        stmt = select(Membership).where(Membership.application_id == application_id)
        return self.session.scalars(stmt).first()

    def count_active(self, community_id: str) -> int:
        stmt = select(func.count()).select_from(Membership).where(
            Membership.community_id == community_id,
            Membership.status == MEMBER_STATUS_ACTIVE,
        )
        return int(self.session.scalar(stmt) or 0)

    def update(self, membership: Membership, **changes: Any) -> Membership:
        """Apply partial changes; dropping lead status clears the lead position."""
        for key, value in changes.items():
            setattr(membership, key, value)
        if changes.get("is_lead") is False:
            membership.lead_position = None
        self.session.flush()
        return membership

    def delete(self, membership: Membership) -> None:
        self.session.delete(membership)
        self.session.flush()

    @staticmethod
    def _matching(community_id: str, user_id_or_email: str):
        needle = user_id_or_email.strip()
        return and_(
            Membership.community_id == community_id,
            or_(
                Membership.user_id == needle,
                func.lower(Membership.email) == needle.lower(),
            ),
        )

    def count_active_matching(self, community_id: str, user_id_or_email: str) -> int:
        """Count active memberships that ``delete_by_criteria`` would remove."""
        stmt = select(func.count()).select_from(Membership).where(
            self._matching(community_id, user_id_or_email),
            Membership.status == MEMBER_STATUS_ACTIVE,
        )
        return int(self.session.scalar(stmt) or 0)

    def delete_by_criteria(self, community_id: str, user_id_or_email: str) -> int:
        """Delete memberships whose user id or email matches; returns rows removed.

        Matching nothing is not an error.
        """
        stmt = (
            delete(Membership)
            .where(self._matching(community_id, user_id_or_email))
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return int(result.rowcount or 0)
