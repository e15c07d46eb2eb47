"""Data access helpers for membership applications."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from temple_hub.core.errors import NotFoundError, ValidationError
from temple_hub.db.time import is_uuid, utcnow
from temple_hub.models.application import Application, ApplicationStatus
from temple_hub.models.community import Membership

__all__ = ["ApplicationRepository"]


class ApplicationRepository:
    """Persistence boundary for applications, scoped by community.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, application_id: str) -> Application | None:
        return self.session.get(Application, application_id)

    def list_by_community(
        self,
        community_id: str,
        status: ApplicationStatus | str | None = None,
    ) -> list[Application]:
        """Return every application of a community, newest first."""
        stmt = select(Application).where(Application.community_id == community_id)
        if status is not None:
            stmt = stmt.where(Application.status == ApplicationStatus(status).value)
        stmt = stmt.order_by(Application.applied_at.desc())
        return list(self.session.scalars(stmt))

    def list_approved_without_membership(self, community_id: str) -> list[Application]:
        """Return approved applications that have no provisioned membership."""
        provisioned = select(Membership.application_id).where(
            Membership.community_id == community_id,
            Membership.application_id.is_not(None),
        )
        stmt = (
            select(Application)
            .where(
                Application.community_id == community_id,
                Application.status == ApplicationStatus.APPROVED.value,
                Application.id.not_in(provisioned),
            )
            .order_by(Application.reviewed_at)
        )
        return list(self.session.scalars(stmt))

    def find_by_email(self, community_id: str, email: str) -> Application | None:
        """Return an existing application for the same community and email."""
        stmt = select(Application).where(
            Application.community_id == community_id,
            func.lower(Application.email) == email.strip().lower(),
        )
        return self.session.scalars(stmt).first()

    def create(self, community_id: str | None, **fields: Any) -> Application:
        """Insert a new pending application.

        Raises:
            ValidationError: if ``community_id`` is missing or not a UUID.
        """
        if not is_uuid(community_id):
            raise ValidationError(
                "community_id is missing or malformed",
                meta={"community_id": community_id},
            )
        fields.pop("status", None)
        fields.pop("applied_at", None)
        application = Application(
            community_id=community_id,
            status=ApplicationStatus.PENDING.value,
            applied_at=utcnow(),
            skills=list(fields.pop("skills", None) or []),
            **fields,
        )
        self.session.add(application)
        self.session.flush()
        return application

    def update_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        reviewer_id: str | None = None,
        notes: str | None = None,
    ) -> Application:
        """Overwrite the review fields of an application.

        The prior status is not inspected here.

        Raises:
            NotFoundError: if no application has this id.
        """
        application = self.get(application_id)
        if application is None:
            raise NotFoundError("Application not found", meta={"application_id": application_id})
        now = utcnow()
        application.status = ApplicationStatus(status).value
        application.reviewed_at = now
        application.reviewed_by = reviewer_id
        application.review_notes = notes
        application.updated_at = now
        self.session.flush()
        return application

    def transition_status(
        self,
        application_id: str,
        expected: ApplicationStatus,
        status: ApplicationStatus,
        reviewer_id: str | None = None,
        notes: str | None = None,
    ) -> Application | None:
        """Move an application from ``expected`` to ``status`` in one conditional UPDATE.

        Returns ``None`` when the row is no longer in ``expected`` (or is gone),
        which is how a concurrent reviewer that got there first shows up.
        """
        now = utcnow()
        result = self.session.execute(
            update(Application)
            .where(
                Application.id == application_id,
                Application.status == ApplicationStatus(expected).value,
            )
            .values(
                status=ApplicationStatus(status).value,
                reviewed_at=now,
                reviewed_by=reviewer_id,
                review_notes=notes,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None
        application = self.get(application_id)
        self.session.refresh(application)
        return application
