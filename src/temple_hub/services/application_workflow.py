"""Application review workflow.

An application starts ``pending`` and is reviewed by an admin:

* ``approve`` moves it to ``approved`` and provisions a membership row built
  from the application's own fields.
* ``reject`` moves it to ``rejected``. Rejecting an application that was
  already approved revokes the membership that approval created.

Every other move (approving twice, approving or rejecting a rejected
application) raises :class:`InvalidTransitionError`.

The status write is a conditional UPDATE on the status that was read, and
``community_members.application_id`` is unique, so two reviewers racing on the
same application yield one transition and one membership.

The status change is committed on its own before membership provisioning or
revocation runs. Those secondary writes happen in a second commit; when they
fail the failure is logged and swallowed so the review itself still succeeds.
:meth:`ApplicationWorkflow.reconcile` provisions whatever was missed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from temple_hub.core.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ensure_identifier,
)
from temple_hub.core.settings import settings
from temple_hub.db.time import utcnow
from temple_hub.models.application import Application, ApplicationStatus
from temple_hub.models.community import MEMBER_STATUS_ACTIVE, Membership
from temple_hub.repositories.application_repo import ApplicationRepository
from temple_hub.repositories.community_repo import CommunityRepository
from temple_hub.repositories.membership_repo import MembershipRepository
from temple_hub.schemas.application import ApplicationCreate

logger = logging.getLogger(__name__)

# Legal moves: (current status, requested status).
_TRANSITIONS: frozenset[tuple[ApplicationStatus, ApplicationStatus]] = frozenset(
    {
        (ApplicationStatus.PENDING, ApplicationStatus.APPROVED),
        (ApplicationStatus.PENDING, ApplicationStatus.REJECTED),
        (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED),
    }
)


@dataclass
class ReconcileReport:
    """Result of a reconciliation pass over one community."""

    community_id: str
    provisioned: int
    member_count: int


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    return (current, target) in _TRANSITIONS


class ApplicationWorkflow:
    """Coordinates application review across the three stores."""

    def __init__(
        self,
        db: Session,
        applications: ApplicationRepository | None = None,
        memberships: MembershipRepository | None = None,
        communities: CommunityRepository | None = None,
    ) -> None:
        self.db = db
        self.applications = applications or ApplicationRepository(db)
        self.memberships = memberships or MembershipRepository(db)
        self.communities = communities or CommunityRepository(db)

    def submit(self, community_id: str, payload: ApplicationCreate) -> Application:
        """Create a pending application after the duplicate-email check.

        Raises:
            InvalidIdentifierError: if ``community_id`` is a placeholder.
            NotFoundError: if the community does not exist.
            ConflictError: if this email already applied to this community.
        """
        community_id = ensure_identifier(community_id, label="community ID")
        self.communities.get_or_404(community_id)

        if self.applications.find_by_email(community_id, payload.email):
            raise ConflictError(
                "An application with this email already exists for this community",
                meta={"email": payload.email},
            )

        application = self.applications.create(community_id, **payload.model_dump())
        self.db.commit()
        self.db.refresh(application)
        logger.info("Application %s submitted to community %s", application.id, community_id)
        return application

    def approve(
        self,
        application_id: str | None,
        reviewer_id: str | None = None,
        community_id: str | None = None,
    ) -> Application:
        """Approve a pending application and provision its membership.

        Args:
            application_id: Application to approve.
            reviewer_id: Optional id of the reviewing admin.
            community_id: When given, the application must belong to it.

        Returns:
            The approved application.

        Raises:
            InvalidIdentifierError: before any database access for placeholder ids.
            NotFoundError: if the application does not exist.
            InvalidTransitionError: if the application is not pending.
        """
        application_id = ensure_identifier(application_id, label="application ID")
        application = self._load(application_id, community_id)
        current = self._guard(application, ApplicationStatus.APPROVED)

        application = self._apply(application_id, current, ApplicationStatus.APPROVED, reviewer_id)
        self.db.commit()
        logger.info("Application %s approved by %s", application_id, reviewer_id or "unknown reviewer")

        self._provision_membership(application)
        self.db.refresh(application)
        return application

    def reject(
        self,
        application_id: str | None,
        reviewer_id: str | None = None,
        notes: str | None = None,
        community_id: str | None = None,
    ) -> Application:
        """Reject an application; revoke the membership if it had been approved.

        Raises:
            InvalidIdentifierError: before any database access for placeholder ids.
            NotFoundError: if the application does not exist.
            InvalidTransitionError: if the application is already rejected.
        """
        application_id = ensure_identifier(application_id, label="application ID")
        application = self._load(application_id, community_id)
        previous = self._guard(application, ApplicationStatus.REJECTED)

        application = self._apply(application_id, previous, ApplicationStatus.REJECTED, reviewer_id, notes)
        self.db.commit()
        logger.info("Application %s rejected by %s", application_id, reviewer_id or "unknown reviewer")

        if previous is ApplicationStatus.APPROVED:
            self._revoke_membership(application)
        self.db.refresh(application)
        return application

    def reconcile(self, community_id: str) -> ReconcileReport:
        """Provision memberships missing for approved applications and resync the counter."""
        community_id = ensure_identifier(community_id, label="community ID")
        self.communities.get_or_404(community_id)

        provisioned = 0
        for application in self.applications.list_approved_without_membership(community_id):
            self.memberships.create(**self._membership_fields(application))
            provisioned += 1
        member_count = self.communities.recount_members(community_id)
        self.db.commit()

        if provisioned:
            logger.info("Reconciled %d missing memberships in community %s", provisioned, community_id)
        return ReconcileReport(community_id=community_id, provisioned=provisioned, member_count=member_count)

    def _load(self, application_id: str, community_id: str | None) -> Application:
        application = self.applications.get(application_id)
        if application is None or (community_id and application.community_id != community_id):
            raise NotFoundError("Application not found", meta={"application_id": application_id})
        return application

    @staticmethod
    def _guard(application: Application, target: ApplicationStatus) -> ApplicationStatus:
        current = application.current_status
        if not can_transition(current, target):
            raise InvalidTransitionError(current.value, target.value)
        return current

    def _apply(
        self,
        application_id: str,
        current: ApplicationStatus,
        target: ApplicationStatus,
        reviewer_id: str | None,
        notes: str | None = None,
    ) -> Application:
        """Write the new status only if nobody changed it since it was read."""
        application = self.applications.transition_status(
            application_id, current, target, reviewer_id, notes
        )
        if application is None:
            self.db.rollback()
            latest = self.applications.get(application_id)
            if latest is None:
                raise NotFoundError("Application not found", meta={"application_id": application_id})
            raise InvalidTransitionError(latest.status, target.value)
        return application

    @staticmethod
    def _membership_fields(application: Application) -> dict[str, object]:
        return {
            "community_id": application.community_id,
            "user_id": application.user_id,
            "application_id": application.id,
            "email": application.email,
            "full_name": application.name,
            "phone": application.phone,
            "skills": list(application.skills or []),
            "experience": application.experience,
            "role": settings.default_member_role,
            "status": MEMBER_STATUS_ACTIVE,
            "joined_at": utcnow(),
        }

    def _provision_membership(self, application: Application) -> Membership | None:
        try:
            existing = self.memberships.find_by_application(application.id)
            if existing is not None:
                logger.info("Membership for application %s already exists, skipping", application.id)
                return existing
            membership = self.memberships.create(**self._membership_fields(application))
            self.communities.increment_member_count(application.community_id, 1)
            self.db.commit()
        except IntegrityError:
            # A concurrent approval inserted the row first; its commit carried the increment.
            self.db.rollback()
            logger.info("Membership for application %s was provisioned concurrently", application.id)
            return self.memberships.find_by_application(application.id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning(
                "Could not provision membership for approved application %s: %s",
                application.id,
                exc,
            )
            return None
        logger.info("Membership %s provisioned for application %s", membership.id, application.id)
        return membership

    def _revoke_membership(self, application: Application) -> None:
        try:
            membership = self.memberships.find_by_application(application.id)
            if membership is not None:
                removed = 1 if membership.status == MEMBER_STATUS_ACTIVE else 0
                self.memberships.delete(membership)
            else:
                needle = application.user_id or application.email
                removed = self.memberships.count_active_matching(application.community_id, needle)
                self.memberships.delete_by_criteria(application.community_id, needle)
            if removed:
                self.communities.increment_member_count(application.community_id, -removed)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning(
                "Could not revoke membership for rejected application %s: %s",
                application.id,
                exc,
            )
            return
        logger.info("Revoked %d membership(s) for application %s", removed, application.id)
