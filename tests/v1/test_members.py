# tests/v1/test_members.py
"""Tests for membership endpoints."""

import pytest
from fastapi import status
from sqlalchemy import select

from temple_hub.models import Community


def _base(community_id: str) -> str:
    return f"/api/v1/communities/{community_id}/members"


def _member_count(db_session, community_id: str) -> int:
    return db_session.scalar(select(Community.member_count).where(Community.id == community_id))


def test_list_members(client, community, member) -> None:
    response = client.get(_base(community.id))
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["total"] == 1
    assert body["data"][0]["email"] == "ravi@example.org"


def test_search_members(client, community, member) -> None:
    assert client.get(_base(community.id), params={"search": "RAVI"}).json()["total"] == 1
    assert client.get(_base(community.id), params={"search": "100%"}).json()["total"] == 0


def test_list_members_filters_by_status(client, db_session, community, member) -> None:
    member.status = "inactive"
    db_session.commit()

    assert client.get(_base(community.id)).json()["total"] == 0
    assert client.get(_base(community.id), params={"status": "all"}).json()["total"] == 1


def test_add_member(client, db_session, community) -> None:
    response = client.post(
        _base(community.id),
        json={"email": "priya@example.org", "full_name": "Priya", "role": "volunteer"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["role"] == "volunteer"
    assert data["status"] == "active"
    assert data["application_id"] is None
    assert _member_count(db_session, community.id) == 1


def test_add_member_requires_identity(client, community) -> None:
    response = client.post(_base(community.id), json={"full_name": "Nobody"})
    assert response.status_code == 422


def test_add_existing_member_conflicts(client, db_session, community, member) -> None:
    response = client.post(_base(community.id), json={"user_id": "user-42"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "User is already a member"
    assert _member_count(db_session, community.id) == 1


def test_update_member_lead(client, community, member) -> None:
    response = client.put(
        f"{_base(community.id)}/{member.id}",
        json={"is_lead": True, "lead_position": "Kitchen"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["is_lead"] is True

    leads = client.get(f"/api/v1/communities/{community.id}/leads").json()
    assert [lead["id"] for lead in leads["data"]] == [member.id]

    response = client.put(f"{_base(community.id)}/{member.id}", json={"is_lead": False})
    assert response.json()["data"]["lead_position"] is None


def test_deactivating_member_decrements_count(client, db_session, community, member) -> None:
    response = client.put(f"{_base(community.id)}/{member.id}", json={"status": "inactive"})
    assert response.status_code == status.HTTP_200_OK
    assert _member_count(db_session, community.id) == 0


def test_remove_member(client, db_session, community, member) -> None:
    response = client.delete(f"{_base(community.id)}/{member.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "message": "Member removed successfully"}
    assert _member_count(db_session, community.id) == 0


def test_member_of_other_community_not_found(client, other_community, member) -> None:
    response = client.delete(f"{_base(other_community.id)}/{member.id}")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_placeholder_member_id(client, community) -> None:
    response = client.put(f"{_base(community.id)}/undefined", json={"role": "admin"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_add_member_rejects_bad_email(client, db_session, community) -> None:
    response = client.post(_base(community.id), json={"email": "priya-at-example", "full_name": "Priya"})
    assert response.status_code == 422
    assert response.json()["error"] == "request.validation_error"
    assert _member_count(db_session, community.id) == 0


@pytest.mark.parametrize("field", ["role", "status", "is_lead"])
def test_update_member_rejects_null(client, db_session, community, member, field) -> None:
    response = client.put(f"{_base(community.id)}/{member.id}", json={field: None})
    assert response.status_code == 422
    assert response.json()["error"] == "request.validation_error"
    db_session.refresh(member)
    assert member.role is not None
    assert member.status == "active"
