"""Shared pytest fixtures for the API and core tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

# Settings are read once at import time, so the environment has to be in
# place before anything from ``rauta`` is imported.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="rauta-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{(_TMP_DIR / 'test.db').as_posix()}"
os.environ["COOKIE_SECRET"] = "test-cookie-secret-that-is-long-enough-for-hs256"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["TOTP_ISSUER"] = "Rauta Test"

from fastapi.testclient import TestClient  # noqa: E402

from rauta.core.config import settings  # noqa: E402
from rauta.core.security import SessionIssuer, get_session_issuer, hash_password  # noqa: E402
from rauta.database import Base, SessionLocal, engine, generate_id  # noqa: E402
from rauta.main import app  # noqa: E402
import rauta.models.audit_log  # noqa: F401, E402
import rauta.models.category  # noqa: F401, E402
import rauta.models.product  # noqa: F401, E402
import rauta.models.two_factor  # noqa: F401, E402
from rauta.models.user import User  # noqa: E402

TEST_SECRET = "per-test-signing-secret-0123456789abcdef"


@pytest.fixture()
def issuer() -> SessionIssuer:
    """Session issuer the app is wired to during a test."""

    return SessionIssuer(TEST_SECRET, ttl_seconds=3600)


@pytest.fixture(autouse=True)
def _database():
    """Fresh schema for every test."""

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(issuer: SessionIssuer):
    """Test client whose session cookies are signed with ``TEST_SECRET``."""

    app.dependency_overrides[get_session_issuer] = lambda: issuer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session):
    """Factory that persists a password account and returns it."""

    def _make(email: str, password: str = "secret1", role: str = "user", name: str = "Test") -> User:
        user = User(
            id=generate_id("user"),
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=role,
            login_method="email",
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def login_as(client: TestClient, issuer: SessionIssuer):
    """Put a valid session cookie for *user* on the test client."""

    def _login(user: User) -> None:
        client.cookies.clear()
        client.cookies.set(settings.session_cookie_name, issuer.issue(user.id, user.email))

    return _login


@pytest.fixture()
def admin(make_user) -> User:
    return make_user("admin@example.com", "adminpw1", role="admin", name="Admin")


@pytest.fixture()
def regular_user(make_user) -> User:
    return make_user("user@example.com", "userpw1", role="user", name="Regular")
