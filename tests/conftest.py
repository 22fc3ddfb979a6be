"""
Pytest configuration and fixtures for the InfluenceTie API tests.
"""

import os

# Settings are read at import time, so the environment is prepared first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["GOOGLE_CLIENT_ID"] = ""
os.environ["GOOGLE_CLIENT_SECRET"] = ""
os.environ["FRONTEND_URL"] = "http://frontend.test"

from datetime import datetime, timedelta
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.config import _enable_sqlite_foreign_keys, get_db
from database.models import Base, User, utcnow
from server import app

PASSWORD = "Secret123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", _enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def load_user(db, email: str) -> User:
    """Read the row as committed by the API, not a stale identity-map copy."""
    db.expire_all()
    return db.query(User).filter(User.email == email).first()


def iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat()


@pytest.fixture
def register(client):
    """Register an account through the API and return {id, email, token, user}."""
    counter = {"n": 0}

    def _register(role: str = "INFLUENCER", **overrides: Any) -> Dict[str, Any]:
        counter["n"] += 1
        payload = {
            "email": f"{role.lower()}{counter['n']}@example.com",
            "password": PASSWORD,
            "firstName": "Test",
            "lastName": f"User{counter['n']}",
            "role": role,
        }
        if role == "BRAND":
            payload["companyName"] = f"Brand Co {counter['n']}"
        payload.update(overrides)

        response = client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {
            "id": data["user"]["id"],
            "email": data["user"]["email"],
            "token": data["token"],
            "user": data["user"],
            "headers": auth_headers(data["token"]),
        }

    return _register


@pytest.fixture
def brand(register):
    return register("BRAND")


@pytest.fixture
def influencer(register):
    return register("INFLUENCER", instagramHandle="test_creator")


@pytest.fixture
def make_campaign(client):
    """Create a campaign for the given brand, optionally switching it to ACTIVE."""

    def _make(owner: Dict[str, Any], activate: bool = True, **overrides: Any) -> Dict[str, Any]:
        now = utcnow()
        payload = {
            "title": "Summer Launch",
            "description": "Promote our summer collection",
            "budget": 5000,
            "category": "Fashion",
            "startDate": iso(now + timedelta(days=1)),
            "endDate": iso(now + timedelta(days=30)),
        }
        payload.update(overrides)

        response = client.post("/api/v1/campaigns", json=payload, headers=owner["headers"])
        assert response.status_code == 201, response.text
        campaign = response.json()["data"]["campaign"]

        if activate:
            response = client.put(
                f"/api/v1/campaigns/{campaign['id']}",
                json={"status": "ACTIVE"},
                headers=owner["headers"],
            )
            assert response.status_code == 200, response.text
            campaign = response.json()["data"]["campaign"]
        return campaign

    return _make
