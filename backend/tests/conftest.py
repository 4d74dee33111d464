"""Shared fixtures.

Every test that touches the store gets a fresh in-memory SQLite database
installed as the process-wide engine, so API and service tests see the same
rows and nothing leaks between tests.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from auth.utils import create_token  # noqa: E402
from db.database import create_tables, dispose_engine, get_session_factory, init_engine  # noqa: E402
from db.models import User  # noqa: E402


def _make_user(db, username: str) -> User:
    user = User(
        username=username,
        username_normalized=username.lower(),
        password_hash="hash",
        display_name=username.title(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def store():
    init_engine("sqlite://", poolclass=StaticPool)
    create_tables()
    yield
    dispose_engine()


@pytest.fixture()
def no_store():
    init_engine("")
    yield
    dispose_engine()


@pytest.fixture()
def db(store):
    session = get_session_factory()()
    yield session
    session.close()


@pytest.fixture()
def user(db) -> User:
    return _make_user(db, "planner")


@pytest.fixture()
def other_user(db) -> User:
    return _make_user(db, "intruder")


def _client_for(user: User) -> TestClient:
    from main import app

    client = TestClient(app)
    client.headers.update({"Authorization": f"Bearer {create_token(user.id)}"})
    return client


@pytest.fixture()
def client(user) -> TestClient:
    return _client_for(user)


@pytest.fixture()
def other_client(other_user) -> TestClient:
    return _client_for(other_user)


@pytest.fixture()
def anon_client(store) -> TestClient:
    from main import app

    return TestClient(app)
