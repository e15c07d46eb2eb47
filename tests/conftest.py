# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from temple_hub.core.settings import Settings
from temple_hub.db.session import Base
from temple_hub.db.session import get_db as app_get_session
from temple_hub.main import app as fastapi_app
from temple_hub.models import Application, Community, Membership
from temple_hub.repositories import ApplicationRepository

TEST_DB_URL = "sqlite://"

_APPLICANT_COUNTER = count(1)
_TEST_SETTINGS_INSTANCE = Settings()


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    # Real commits and rollbacks: the approval workflow relies on both.
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


@pytest.fixture()
def community(db_session: Session) -> Iterator[Community]:
    """Create a default test community."""
    community = Community(
        name="Sri Venkateswara Temple",
        description="Test community description",
        owner_id="owner-1",
    )
    db_session.add(community)
    db_session.commit()
    db_session.refresh(community)
    yield community


@pytest.fixture()
def other_community(db_session: Session) -> Iterator[Community]:
    """Create a second community for cross-community checks."""
    community = Community(name="Ganesh Mandir")
    db_session.add(community)
    db_session.commit()
    db_session.refresh(community)
    yield community


@pytest.fixture()
def make_application(db_session: Session) -> Callable[..., Application]:
    """Return a factory that persists a pending application."""

    def _make(community: Community, **overrides: Any) -> Application:
        n = next(_APPLICANT_COUNTER)
        fields: dict[str, Any] = {
            "name": f"Applicant {n}",
            "email": f"applicant{n}@example.org",
            "phone": "+1-555-0100",
            "skills": ["cooking", "music"],
            "experience": "Volunteered at festivals",
        }
        fields.update(overrides)
        application = ApplicationRepository(db_session).create(community.id, **fields)
        db_session.commit()
        db_session.refresh(application)
        return application

    return _make


@pytest.fixture()
def pending_application(community: Community, make_application) -> Application:
    """A single pending application in the default community."""
    return make_application(community, name="Lakshmi Rao", email="lakshmi@example.org")


@pytest.fixture()
def member(db_session: Session, community: Community) -> Iterator[Membership]:
    """An active member added directly, with the counter kept in step."""
    membership = Membership(
        community_id=community.id,
        user_id="user-42",
        email="ravi@example.org",
        full_name="Ravi Kumar",
    )
    db_session.add(membership)
    community.member_count = 1
    db_session.commit()
    db_session.refresh(membership)
    yield membership
