"""Tests for the ``albook`` command line."""
from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from sqlalchemy import create_engine, inspect

from albook import cli
from albook.db import session as db_session
from albook.db.migrate import current_revision, head_revision


@pytest.fixture()
def cli_environment(monkeypatch):
    monkeypatch.setattr(cli, "_configure_logging", lambda level: None)
    engine = db_session.engine
    try:
        yield
    finally:
        db_session.engine.dispose()
        db_session.engine = engine
        db_session.SessionLocal.configure(bind=engine)


def _tables(path: Path) -> set[str]:
    engine = create_engine(f"sqlite:///{path}")
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_migrate_creates_schema(tmp_path: Path, cli_environment) -> None:
    db_path = tmp_path / "cli.db"

    assert cli.main(["migrate", "--db", str(db_path)]) == 0

    assert db_path.exists()
    assert {"exercises", "alembic_version"} <= _tables(db_path)
    assert db_session.engine.url.database == str(db_path)


def test_migrate_twice_is_a_no_op(tmp_path: Path, cli_environment) -> None:
    db_path = tmp_path / "cli.db"

    cli.main(["migrate", "--db", str(db_path)])
    assert cli.main(["migrate", "--db", str(db_path)]) == 0

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        with engine.connect() as conn:
            assert current_revision(conn) == head_revision()
    finally:
        engine.dispose()


def test_serve_migrates_and_runs_uvicorn(tmp_path: Path, monkeypatch, cli_environment) -> None:
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    db_path = tmp_path / "serve.db"
    static_dir = tmp_path / "web"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<html></html>")

    exit_code = cli.main(
        ["serve", "--db", str(db_path), "--port", "2200", "--static", str(static_dir)]
    )

    assert exit_code == 0
    assert "exercises" in _tables(db_path)
    assert isinstance(calls["app"], FastAPI)
    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 2200
    assert any(getattr(route, "name", None) == "static" for route in calls["app"].routes)


def test_command_is_required(cli_environment) -> None:
    with pytest.raises(SystemExit):
        cli.main([])
