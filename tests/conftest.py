"""Pytest fixtures for service and API tests."""

from collections.abc import Generator
from datetime import timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from albook.api import deps
from albook.db import models  # noqa: F401  # Imported for side effects
from albook.db.base import Base
from albook.db.models import Exercise
from albook.db.repository import ExerciseRepository
from albook.main import create_app
from albook.services.exercises import ExerciseService


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[Exercise.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[Exercise.__table__])


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.query(Exercise).delete()
        db.commit()
        db.close()


@pytest.fixture()
def repository(db_session: Session) -> ExerciseRepository:
    return ExerciseRepository(db_session)


@pytest.fixture()
def service(repository: ExerciseRepository) -> ExerciseService:
    return ExerciseService(repository, page_size=10, tz=timezone.utc)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app(run_migrations=False)

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[deps.get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
