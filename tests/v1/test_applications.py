# tests/v1/test_applications.py
"""Tests for application submission and review endpoints."""

import logging

import pytest
from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from temple_hub.models import Application, Community, Membership
from temple_hub.repositories.membership_repo import MembershipRepository


def _base(community_id: str) -> str:
    return f"/api/v1/communities/{community_id}/applications"


def _members(db_session, community_id: str) -> list[Membership]:
    return list(db_session.scalars(select(Membership).where(Membership.community_id == community_id)))


def _member_count(db_session, community_id: str) -> int:
    return db_session.scalar(select(Community.member_count).where(Community.id == community_id))


def test_submit_application(client, community) -> None:
    response = client.post(
        _base(community.id),
        json={
            "name": "Meera Iyer",
            "email": " meera@example.org ",
            "skills": ["flowers"],
            "why_join": "Seva",
        },
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Application submitted successfully"
    assert body["data"]["status"] == "pending"
    assert body["data"]["email"] == "meera@example.org"
    assert body["data"]["community_id"] == community.id
    assert body["data"]["reviewed_at"] is None


def test_submit_duplicate_email_conflicts(client, community, pending_application) -> None:
    response = client.post(
        _base(community.id),
        json={"name": "Someone Else", "email": "LAKSHMI@example.org"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "request.conflict"


def test_same_email_may_apply_to_another_community(client, other_community, pending_application) -> None:
    response = client.post(
        _base(other_community.id),
        json={"name": "Lakshmi Rao", "email": "lakshmi@example.org"},
    )
    assert response.status_code == status.HTTP_201_CREATED


def test_submit_to_unknown_community(client) -> None:
    response = client.post(
        _base("3f1b2c4d-0000-4000-8000-000000000000"),
        json={"name": "Nobody", "email": "nobody@example.org"},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "resource.not_found"


def test_list_applications_with_status_filter(client, community, make_application) -> None:
    first = make_application(community)
    make_application(community)
    client.put(f"{_base(community.id)}/{first.id}/approve")

    everything = client.get(_base(community.id)).json()
    assert everything["total"] == 2

    pending = client.get(_base(community.id), params={"status": "pending"}).json()
    assert pending["total"] == 1
    assert all(row["status"] == "pending" for row in pending["data"])

    approved = client.get(_base(community.id), params={"status": "approved"}).json()
    assert [row["id"] for row in approved["data"]] == [first.id]


def test_list_applications_rejects_unknown_status(client, community) -> None:
    response = client.get(_base(community.id), params={"status": "archived"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "allowed" in response.json()


def test_approve_creates_membership(client, db_session, community, pending_application) -> None:
    response = client.put(
        f"{_base(community.id)}/{pending_application.id}/approve",
        json={"reviewed_by": "admin-1"},
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["message"] == "Application approved successfully"
    assert body["data"]["status"] == "approved"
    assert body["data"]["reviewed_by"] == "admin-1"
    assert body["data"]["reviewed_at"] is not None

    members = _members(db_session, community.id)
    assert len(members) == 1
    membership = members[0]
    assert membership.email == "lakshmi@example.org"
    assert membership.full_name == "Lakshmi Rao"
    assert membership.application_id == pending_application.id
    assert membership.role == "member"
    assert membership.status == "active"
    assert membership.skills == ["cooking", "music"]
    assert _member_count(db_session, community.id) == 1


def test_approve_without_body(client, db_session, community, pending_application) -> None:
    response = client.put(f"{_base(community.id)}/{pending_application.id}/approve")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["reviewed_by"] is None


def test_reject_stores_notes_without_membership(client, db_session, community, pending_application) -> None:
    response = client.put(
        f"{_base(community.id)}/{pending_application.id}/reject",
        json={"reviewed_by": "admin-1", "review_notes": "Incomplete details"},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["status"] == "rejected"
    assert data["review_notes"] == "Incomplete details"
    assert _members(db_session, community.id) == []
    assert _member_count(db_session, community.id) == 0


@pytest.mark.parametrize("bad_id", ["undefined", "null", "%20"])
@pytest.mark.parametrize("action", ["approve", "reject"])
def test_placeholder_application_id_is_rejected(client, db_session, community, bad_id, action) -> None:
    response = client.put(f"{_base(community.id)}/{bad_id}/{action}")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "request.invalid_identifier"
    assert "received_id" in body
    assert "hint" in body
    assert db_session.scalar(select(Application.id)) is None


def test_placeholder_community_id_is_rejected(client) -> None:
    response = client.get(_base("undefined"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["received_id"] == "undefined"


def test_approve_unknown_application(client, community) -> None:
    response = client.put(f"{_base(community.id)}/5b7c0e0a-1111-4111-8111-111111111111/approve")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_approve_application_from_other_community(client, other_community, pending_application) -> None:
    response = client.put(f"{_base(other_community.id)}/{pending_application.id}/approve")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_double_approve_is_invalid_transition(client, db_session, community, pending_application) -> None:
    url = f"{_base(community.id)}/{pending_application.id}/approve"
    assert client.put(url).status_code == status.HTTP_200_OK

    response = client.put(url)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "application.invalid_transition"
    assert body["current_status"] == "approved"
    assert body["requested_status"] == "approved"
    assert len(_members(db_session, community.id)) == 1
    assert _member_count(db_session, community.id) == 1


def test_reject_after_approve_revokes_membership(client, db_session, community, pending_application) -> None:
    base = f"{_base(community.id)}/{pending_application.id}"
    client.put(f"{base}/approve")
    assert _member_count(db_session, community.id) == 1

    response = client.put(f"{base}/reject", json={"review_notes": "Approved by mistake"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["status"] == "rejected"
    assert _members(db_session, community.id) == []
    assert _member_count(db_session, community.id) == 0


def test_rejected_application_cannot_be_approved(client, community, pending_application) -> None:
    base = f"{_base(community.id)}/{pending_application.id}"
    client.put(f"{base}/reject")

    assert client.put(f"{base}/approve").status_code == status.HTTP_400_BAD_REQUEST
    assert client.put(f"{base}/reject").status_code == status.HTTP_400_BAD_REQUEST


def test_membership_failure_does_not_fail_approval(
    client, db_session, community, pending_application, monkeypatch, caplog
) -> None:
    def _broken_create(self, community_id, **fields):
        raise OperationalError("INSERT INTO community_members", {}, Exception("disk I/O error"))

    monkeypatch.setattr(MembershipRepository, "create", _broken_create)

    with caplog.at_level(logging.WARNING, logger="temple_hub.services.application_workflow"):
        response = client.put(f"{_base(community.id)}/{pending_application.id}/approve")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["status"] == "approved"
    assert _members(db_session, community.id) == []
    assert _member_count(db_session, community.id) == 0
    assert any("Could not provision membership" in r.getMessage() for r in caplog.records)

    monkeypatch.undo()
    reconciled = client.post(f"{_base(community.id)}/reconcile")
    assert reconciled.status_code == status.HTTP_200_OK
    assert reconciled.json()["data"] == {
        "community_id": community.id,
        "provisioned": 1,
        "member_count": 1,
    }
    assert len(_members(db_session, community.id)) == 1


def test_reconcile_with_nothing_missing(client, community, pending_application) -> None:
    client.put(f"{_base(community.id)}/{pending_application.id}/approve")
    response = client.post(f"{_base(community.id)}/reconcile")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["provisioned"] == 0
    assert response.json()["data"]["member_count"] == 1


@pytest.mark.parametrize("email", ["   ", "not-an-email", "meera@", "@example.org"])
def test_submit_application_rejects_bad_email(client, db_session, community, email) -> None:
    response = client.post(_base(community.id), json={"name": "Meera Iyer", "email": email})
    assert response.status_code == 422
    assert response.json()["error"] == "request.validation_error"
    assert db_session.scalars(select(Application)).all() == []
