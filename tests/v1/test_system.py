"""Tests for system endpoints."""

from fastapi import status
from fastapi.testclient import TestClient


def test_system_health(client: TestClient) -> None:
    r = client.get("/api/v1/system/health")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["status"] == "healthy"
    assert data["components"]["database"] == "healthy"


def test_system_status(client: TestClient, test_settings) -> None:
    r = client.get("/api/v1/system/status")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["status"] == "operational"
    assert data["version"] == test_settings.app_version


def test_activity_stats(client: TestClient, community, pending_application, member) -> None:
    r = client.get("/api/v1/system/activity-stats")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()["data"]
    assert data["communities"] == 1
    assert data["applications"] == 1
    assert data["pending_applications"] == 1
    assert data["members"] == 1
    assert data["donations"] == 0
