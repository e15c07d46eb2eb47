# tests/test_workflow.py
"""Tests for the application review workflow service."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from temple_hub.core.errors import (
    ConflictError,
    InvalidIdentifierError,
    InvalidTransitionError,
    NotFoundError,
)
from temple_hub.models import ApplicationStatus
from temple_hub.repositories import ApplicationRepository, CommunityRepository, MembershipRepository
from temple_hub.schemas.application import ApplicationCreate
from temple_hub.services.application_workflow import ApplicationWorkflow, can_transition


@pytest.fixture()
def workflow(db_session) -> ApplicationWorkflow:
    return ApplicationWorkflow(db_session)


class _CountingApplications(ApplicationRepository):
    """Records every lookup so tests can assert the store was never touched."""

    def __init__(self, session) -> None:
        super().__init__(session)
        self.calls = 0

    def get(self, application_id):
        self.calls += 1
        return super().get(application_id)


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (ApplicationStatus.PENDING, ApplicationStatus.APPROVED, True),
        (ApplicationStatus.PENDING, ApplicationStatus.REJECTED, True),
        (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED, True),
        (ApplicationStatus.APPROVED, ApplicationStatus.APPROVED, False),
        (ApplicationStatus.REJECTED, ApplicationStatus.APPROVED, False),
        (ApplicationStatus.REJECTED, ApplicationStatus.REJECTED, False),
    ],
)
def test_transition_table(current, target, allowed) -> None:
    assert can_transition(current, target) is allowed


def test_submit_and_approve(workflow, db_session, community) -> None:
    application = workflow.submit(
        community.id,
        ApplicationCreate(name="Gopal", email="gopal@example.org", user_id="user-7"),
    )
    assert application.is_pending()

    approved = workflow.approve(application.id, "admin-1")
    assert approved.status == ApplicationStatus.APPROVED.value
    assert approved.reviewed_by == "admin-1"

    membership = MembershipRepository(db_session).find_by_application(application.id)
    assert membership is not None
    assert membership.user_id == "user-7"
    assert CommunityRepository(db_session).get_member_count(community.id) == 1


def test_submit_duplicate(workflow, community, pending_application) -> None:
    with pytest.raises(ConflictError):
        workflow.submit(community.id, ApplicationCreate(name="Again", email="Lakshmi@Example.org"))


def test_submit_unknown_community(workflow) -> None:
    with pytest.raises(NotFoundError):
        workflow.submit("0e0e0e0e-0000-4000-8000-000000000000", ApplicationCreate(name="Asha", email="asha@example.org"))


@pytest.mark.parametrize("bad_id", [None, "", "  ", "undefined", "null"])
def test_placeholder_ids_never_reach_the_store(db_session, bad_id) -> None:
    applications = _CountingApplications(db_session)
    workflow = ApplicationWorkflow(db_session, applications=applications)

    with pytest.raises(InvalidIdentifierError):
        workflow.approve(bad_id)
    with pytest.raises(InvalidIdentifierError):
        workflow.reject(bad_id)
    assert applications.calls == 0


def test_approve_twice_keeps_single_membership(workflow, db_session, community, pending_application) -> None:
    workflow.approve(pending_application.id)
    with pytest.raises(InvalidTransitionError) as exc_info:
        workflow.approve(pending_application.id)

    assert exc_info.value.meta["current_status"] == "approved"
    assert len(MembershipRepository(db_session).list_by_community(community.id)) == 1
    assert CommunityRepository(db_session).get_member_count(community.id) == 1


def test_approve_is_idempotent_when_membership_exists(workflow, db_session, community, pending_application) -> None:
    MembershipRepository(db_session).create(
        community.id, application_id=pending_application.id, email=pending_application.email
    )
    db_session.commit()

    workflow.approve(pending_application.id)
    assert len(MembershipRepository(db_session).list_by_community(community.id)) == 1


def test_reject_approved_revokes(workflow, db_session, community, pending_application) -> None:
    workflow.approve(pending_application.id)
    rejected = workflow.reject(pending_application.id, "admin-2", "Duplicate person")

    assert rejected.status == ApplicationStatus.REJECTED.value
    assert rejected.review_notes == "Duplicate person"
    assert MembershipRepository(db_session).find_by_application(pending_application.id) is None
    assert CommunityRepository(db_session).get_member_count(community.id) == 0


def test_revoke_falls_back_to_email_match(workflow, db_session, community, pending_application) -> None:
    workflow.approve(pending_application.id)
    membership = MembershipRepository(db_session).find_by_application(pending_application.id)
    membership.application_id = None
    db_session.commit()

    workflow.reject(pending_application.id)
    assert MembershipRepository(db_session).list_by_community(community.id) == []
    assert CommunityRepository(db_session).get_member_count(community.id) == 0


def test_approve_rejected_application(workflow, pending_application) -> None:
    workflow.reject(pending_application.id)
    with pytest.raises(InvalidTransitionError):
        workflow.approve(pending_application.id)


def test_approve_with_wrong_community(workflow, other_community, pending_application) -> None:
    with pytest.raises(NotFoundError):
        workflow.approve(pending_application.id, community_id=other_community.id)


def test_provisioning_failure_is_swallowed(
    workflow, db_session, community, pending_application, monkeypatch
) -> None:
    def _fail(self, community_id, **fields):
        raise OperationalError("INSERT INTO community_members", {}, Exception("database is locked"))

    monkeypatch.setattr(MembershipRepository, "create", _fail)
    approved = workflow.approve(pending_application.id)
    assert approved.status == ApplicationStatus.APPROVED.value
    monkeypatch.undo()

    assert MembershipRepository(db_session).find_by_application(pending_application.id) is None
    assert CommunityRepository(db_session).get_member_count(community.id) == 0

    report = workflow.reconcile(community.id)
    assert report.provisioned == 1
    assert report.member_count == 1
    assert MembershipRepository(db_session).find_by_application(pending_application.id) is not None


def test_reconcile_repairs_counter_drift(workflow, db_session, community, member) -> None:
    CommunityRepository(db_session).set_member_count(community.id, 7)
    db_session.commit()

    report = workflow.reconcile(community.id)
    assert report.provisioned == 0
    assert report.member_count == 1


def test_concurrent_approve_loses_cleanly(workflow, db_session, community, pending_application, monkeypatch) -> None:
    workflow.approve(pending_application.id, "admin-1")

    # Second reviewer read the application while it was still pending.
    monkeypatch.setattr(
        ApplicationWorkflow,
        "_guard",
        staticmethod(lambda application, target: ApplicationStatus.PENDING),
    )
    with pytest.raises(InvalidTransitionError) as exc_info:
        workflow.approve(pending_application.id, "admin-2")

    assert exc_info.value.meta["current_status"] == "approved"
    assert ApplicationRepository(db_session).get(pending_application.id).reviewed_by == "admin-1"
    assert len(MembershipRepository(db_session).list_by_community(community.id)) == 1
    assert CommunityRepository(db_session).get_member_count(community.id) == 1


def test_concurrent_reject_after_approve_is_refused(workflow, db_session, pending_application, monkeypatch) -> None:
    workflow.reject(pending_application.id, "admin-1")

    monkeypatch.setattr(
        ApplicationWorkflow,
        "_guard",
        staticmethod(lambda application, target: ApplicationStatus.PENDING),
    )
    with pytest.raises(InvalidTransitionError):
        workflow.reject(pending_application.id, "admin-2", "late")

    assert ApplicationRepository(db_session).get(pending_application.id).review_notes is None


def test_membership_inserted_concurrently_is_not_counted_twice(
    workflow, db_session, community, pending_application, monkeypatch, caplog
) -> None:
    # Another approval already inserted the membership but this one did not see it.
    MembershipRepository(db_session).create(
        community.id, application_id=pending_application.id, email=pending_application.email
    )
    db_session.commit()
    monkeypatch.setattr(MembershipRepository, "find_by_application", lambda self, application_id: None)

    with caplog.at_level("INFO", logger="temple_hub.services.application_workflow"):
        approved = workflow.approve(pending_application.id)
    monkeypatch.undo()

    assert approved.status == ApplicationStatus.APPROVED.value
    assert "provisioned concurrently" in caplog.text
    assert len(MembershipRepository(db_session).list_by_community(community.id)) == 1
    assert CommunityRepository(db_session).get_member_count(community.id) == 0


def test_revoke_fallback_decrements_active_rows_only(workflow, db_session, community, member, pending_application) -> None:
    workflow.approve(pending_application.id)
    assert CommunityRepository(db_session).get_member_count(community.id) == 2

    memberships = MembershipRepository(db_session)
    memberships.create(community.id, email="LAKSHMI@example.org", status="inactive")
    memberships.find_by_application(pending_application.id).application_id = None
    db_session.commit()

    workflow.reject(pending_application.id)

    remaining = memberships.list_by_community(community.id, status="all")
    assert [m.id for m in remaining] == [member.id]
    assert CommunityRepository(db_session).get_member_count(community.id) == 1
