# tests/v1/test_events.py
"""Tests for community events."""

import pytest
from fastapi import status


def _base(community_id: str) -> str:
    return f"/api/v1/communities/{community_id}/events"


def test_events_listed_chronologically(client, community) -> None:
    for title, start in [("Diwali", "2026-11-08T18:00:00"), ("Navaratri", "2026-10-22T18:00:00")]:
        response = client.post(_base(community.id), json={"title": title, "start_date": start})
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["status"] == "published"

    titles = [e["title"] for e in client.get(_base(community.id)).json()["data"]]
    assert titles == ["Navaratri", "Diwali"]


def test_event_end_before_start_rejected(client, community) -> None:
    response = client.post(
        _base(community.id),
        json={
            "title": "Backwards",
            "start_date": "2026-11-08T18:00:00",
            "end_date": "2026-11-08T17:00:00",
        },
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "request.validation_error"


def test_update_and_delete_event(client, community) -> None:
    created = client.post(
        _base(community.id),
        json={"title": "Satsang", "start_date": "2026-12-01T10:00:00"},
    ).json()["data"]

    updated = client.put(
        f"{_base(community.id)}/{created['id']}",
        json={"location": "Main hall", "status": "cancelled"},
    ).json()["data"]
    assert updated["location"] == "Main hall"
    assert updated["status"] == "cancelled"

    assert client.delete(f"{_base(community.id)}/{created['id']}").status_code == status.HTTP_200_OK
    assert client.get(_base(community.id)).json()["total"] == 0


def test_unknown_event(client, community) -> None:
    response = client.delete(f"{_base(community.id)}/does-not-exist")
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.parametrize("field", ["title", "start_date", "status"])
def test_update_event_rejects_null(client, community, field) -> None:
    created = client.post(
        _base(community.id),
        json={"title": "Satsang", "start_date": "2026-12-01T10:00:00"},
    ).json()["data"]

    response = client.put(f"{_base(community.id)}/{created['id']}", json={field: None})
    assert response.status_code == 422
    assert response.json()["error"] == "request.validation_error"
