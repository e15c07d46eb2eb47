"""Tests for the engine factory and the table helpers."""

from fastapi.testclient import TestClient
from sqlalchemy import inspect

import temple_hub.main as main_module
from temple_hub.core.settings import settings
from temple_hub.db import session as db_session_module
from temple_hub.db.session import Base, build_engine, create_tables, drop_tables


def test_build_engine_allows_sqlite_across_threads() -> None:
    engine = build_engine("sqlite://")
    try:
        with engine.connect() as conn:
            assert conn.exec_driver_sql("SELECT 1").scalar() == 1
        assert engine.dialect.name == "sqlite"
    finally:
        engine.dispose()


def test_create_and_drop_tables_on_given_engine() -> None:
    # In-memory SQLite keeps one connection per thread, so the schema survives between calls.
    engine = build_engine("sqlite://")
    try:
        create_tables(engine)
        tables = set(inspect(engine).get_table_names())
        assert set(Base.metadata.tables) <= tables
        assert {"community_members", "puja_series", "expenses"} <= tables

        drop_tables(engine)
        assert inspect(engine).get_table_names() == []
    finally:
        engine.dispose()


def test_create_tables_defaults_to_app_engine(monkeypatch) -> None:
    engine = build_engine("sqlite://")
    monkeypatch.setattr(db_session_module, "engine", engine)
    try:
        create_tables()
        assert "community_applications" in inspect(engine).get_table_names()
        drop_tables()
        assert inspect(engine).get_table_names() == []
    finally:
        engine.dispose()


def test_startup_creates_tables_when_enabled(app, monkeypatch) -> None:
    calls: list[object] = []
    monkeypatch.setattr(settings, "auto_create_tables", True)
    monkeypatch.setattr(main_module, "create_tables", lambda *args: calls.append(args))

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200

    assert calls == [()]


def test_startup_skips_tables_by_default(app, monkeypatch) -> None:
    calls: list[object] = []
    monkeypatch.setattr(settings, "auto_create_tables", False)
    monkeypatch.setattr(main_module, "create_tables", lambda *args: calls.append(args))

    with TestClient(app):
        pass

    assert calls == []
