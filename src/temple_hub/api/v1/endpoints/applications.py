"""Membership application endpoints nested under a community."""

from __future__ import annotations

from fastapi import APIRouter, status

from temple_hub.core.errors import ValidationError, ensure_identifier
from temple_hub.models import ApplicationStatus
from temple_hub.repositories import ApplicationRepository
from temple_hub.schemas.application import (
    ApplicationApproval,
    ApplicationCreate,
    ApplicationRejection,
    ApplicationResponse,
    ReconcileResponse,
)
from temple_hub.schemas.common import Envelope, listing, ok

from ..dependencies import CommunityDep, SessionDep, WorkflowDep

router = APIRouter(prefix="/communities", tags=["applications"])

STATUS_ANY = "all"


def _parse_status_filter(value: str) -> ApplicationStatus | None:
    if value == STATUS_ANY:
        return None
    try:
        return ApplicationStatus(value)
    except ValueError as err:
        raise ValidationError(
            f"Unknown application status: {value!r}",
            meta={"allowed": [STATUS_ANY, *(s.value for s in ApplicationStatus)]},
        ) from err


@router.get("/{community_id}/applications", response_model=Envelope[list[ApplicationResponse]])
async def list_applications(
    community: CommunityDep,
    db: SessionDep,
    status: str = STATUS_ANY,
) -> dict[str, object]:
    """List a community's applications, newest first, optionally by status."""
    applications = ApplicationRepository(db).list_by_community(
        community.id, _parse_status_filter(status)
    )
    return listing(applications)


@router.post(
    "/{community_id}/applications",
    response_model=Envelope[ApplicationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    community_id: str,
    payload: ApplicationCreate,
    workflow: WorkflowDep,
) -> dict[str, object]:
    """Submit an application to join a community."""
    application = workflow.submit(community_id, payload)
    return ok(application, "Application submitted successfully")


@router.put(
    "/{community_id}/applications/{application_id}/approve",
    response_model=Envelope[ApplicationResponse],
)
async def approve_application(
    community_id: str,
    application_id: str,
    workflow: WorkflowDep,
    review: ApplicationApproval | None = None,
) -> dict[str, object]:
    """Approve an application; the applicant becomes an active member."""
    application_id = ensure_identifier(application_id, label="application ID")
    community_id = ensure_identifier(community_id, label="community ID")
    reviewer = review.reviewed_by if review else None
    application = workflow.approve(application_id, reviewer, community_id=community_id)
    return ok(application, "Application approved successfully")


@router.put(
    "/{community_id}/applications/{application_id}/reject",
    response_model=Envelope[ApplicationResponse],
)
async def reject_application(
    community_id: str,
    application_id: str,
    workflow: WorkflowDep,
    review: ApplicationRejection | None = None,
) -> dict[str, object]:
    """Reject an application, revoking membership if it was approved earlier."""
    application_id = ensure_identifier(application_id, label="application ID")
    community_id = ensure_identifier(community_id, label="community ID")
    review = review or ApplicationRejection()
    application = workflow.reject(
        application_id,
        review.reviewed_by,
        review.review_notes,
        community_id=community_id,
    )
    return ok(application, "Application rejected successfully")


@router.post(
    "/{community_id}/applications/reconcile",
    response_model=Envelope[ReconcileResponse],
)
async def reconcile_memberships(community_id: str, workflow: WorkflowDep) -> dict[str, object]:
    """Provision memberships that failed to be created when their application was approved."""
    report = workflow.reconcile(community_id)
    return ok(report, "Memberships reconciled")
