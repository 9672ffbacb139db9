from __future__ import annotations

import os
import tempfile

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["TIMEZONE"] = "UTC"
os.environ["SESSION_COOKIE_NAME"] = "sid"
os.environ["LOG_FILE"] = os.path.join(tempfile.gettempdir(), "expense_tracker_tests.log")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import expense_tracker.accounts.config.models  # noqa: F401  # Ensure models are registered with metadata
import expense_tracker.accounts.expenses.models  # noqa: F401
import expense_tracker.users.models  # noqa: F401
from expense_tracker import database
from expense_tracker.database import Base
from expense_tracker.main import app
from expense_tracker.users import crud as user_crud


@pytest.fixture()
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory):
    session: Session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[database.get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_client(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "alice", "password": "pw123", "relation": "self"},
    )
    assert response.status_code == 201
    return client


@pytest.fixture()
def user(db_session):
    return user_crud.create_user(db_session, "alice", "pw123", "self")
