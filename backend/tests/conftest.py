"""Shared pytest fixtures for backend tests."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Iterator

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
for path in (ROOT_DIR, ROOT_DIR / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("IDENTITY_JWT_SECRET", "test-identity-secret-with-enough-entropy")

from app.config import get_settings
from app.core.security import ExternalIdentity
from app.database import get_db
from app.main import app
from app.models import Base, User
from app.services.identity import resolve_identity


def make_token(subject: str, *, expires_in: int = 3600, **claims: Any) -> str:
    """Sign an identity token the way the external provider would."""

    settings = get_settings()
    payload: dict[str, Any] = {
        "sub": subject,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        **claims,
    }
    return jwt.encode(payload, settings.identity_jwt_secret, algorithm=settings.identity_jwt_algorithm)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def test_engine() -> Iterator[Engine]:
    """Provide an in-memory SQLite engine for isolated tests."""

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(test_engine) -> sessionmaker[Session]:
    """Return a session factory bound to the test engine."""

    return sessionmaker(bind=test_engine, future=True)


@pytest.fixture()
def db_session(session_factory) -> Iterator[Session]:
    """Yield a SQLAlchemy session for unit tests."""

    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Create users through the identity resolver."""

    def _make_user(handle: str, **fields: Any) -> User:
        identity = ExternalIdentity(subject=f"ext-{handle}", username=handle, **fields)
        return resolve_identity(db_session, identity)

    return _make_user


@pytest.fixture()
def client(session_factory) -> Iterator[TestClient]:
    """Yield a FastAPI TestClient with the database dependency overridden."""

    def override_get_db() -> Iterator[Session]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def login(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Sync an identity through the API and return its user plus auth headers."""

    def _login(username: str, **claims: Any) -> dict[str, Any]:
        token = make_token(f"ext-{username}", username=username, **claims)
        headers = auth_headers(token)
        response = client.post("/api/identity/sync", headers=headers)
        assert response.status_code == 200, response.text
        return {"user": response.json()["data"], "headers": headers, "token": token}

    return _login
