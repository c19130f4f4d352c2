"""Shared helpers for tests: settings, an in-memory database and an app wired to it."""

from typing import Any

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import create_db_engine, create_session_factory
from app.core.security import hash_password
from app.main import create_app
from app.models import Base, User, UserRole
from app.repositories import users

DEFAULT_PASSWORD = "Passw0rdX"

TEST_SETTINGS: dict[str, Any] = {
    "APP_ENV": "dev",
    "DATABASE_URL": "sqlite://",
    "JWT_SECRET": "test-access-secret",
    "JWT_REFRESH_SECRET": "test-refresh-secret",
    "JWT_ALGORITHM": "HS256",
    "JWT_EXPIRES_IN": "15m",
    "JWT_REFRESH_EXPIRES_IN": "7d",
    "BCRYPT_ROUNDS": 4,
    "RATE_LIMIT_ENABLED": False,
    "TOKEN_CLEANUP_ENABLED": True,
}


def make_settings(**overrides: Any) -> Settings:
    """Settings for tests: fast bcrypt, in-memory SQLite, rate limiting off."""
    return Settings(**{**TEST_SETTINGS, **overrides})


def make_session(settings: Settings | None = None) -> Session:
    """Session on a fresh in-memory database with all tables created."""
    settings = settings or make_settings()
    engine = create_db_engine(settings)
    Base.metadata.create_all(engine)
    return create_session_factory(engine)()


def make_app(**overrides: Any) -> FastAPI:
    """Application on a fresh in-memory database with all tables created."""
    app = create_app(make_settings(**overrides))
    Base.metadata.create_all(app.state.engine)
    return app


def make_client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def create_user(
    app: FastAPI,
    email: str,
    password: str = DEFAULT_PASSWORD,
    name: str = "Test User",
    role: UserRole = UserRole.USER,
) -> User:
    """Insert a user directly through the repository (bypasses the API)."""
    session = app.state.session_factory()
    try:
        return users.create(
            session,
            email=email,
            password_hash=hash_password(password, app.state.settings.BCRYPT_ROUNDS),
            name=name,
            role=role,
        )
    finally:
        session.close()


def login(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
    """Log in through the API and return {"accessToken", "refreshToken"}."""
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["tokens"]


def bearer(tokens: dict[str, str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {tokens['accessToken']}"}
