"""Shared fixtures: an isolated in-memory SQLite database per test."""
import os

# Configure before any bedtracker module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_ON_STARTUP"] = "false"

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bedtracker.models import Base  # noqa: E402
from bedtracker.models.base import get_db  # noqa: E402


@pytest.fixture()
def session_factory(monkeypatch):
    """Fresh schema on a private in-memory engine; module-level factories are patched to it."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestSession = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    import bedtracker.seed as seed
    import bedtracker.models.base as mb

    monkeypatch.setattr(seed, "engine", test_engine)
    monkeypatch.setattr(seed, "SessionLocal", TestSession)
    monkeypatch.setattr(mb, "engine", test_engine)
    monkeypatch.setattr(mb, "SessionLocal", TestSession)

    yield TestSession
    test_engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    from fastapi.testclient import TestClient
    from bedtracker.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_patient(**overrides):
    payload = {
        "name": "Asha Verma",
        "age": 42,
        "gender": "female",
        "bloodGroup": "O+",
        "phoneNo": "555-0100",
        "address": "12 Station Road",
        "bedType": "General Bed",
    }
    payload.update(overrides)
    return payload
