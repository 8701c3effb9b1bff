"""Shared test fixtures."""

import os

# Must be set before the app modules read their settings.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["API_KEY"] = "test-api-key"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["APP_MODE"] = "debug"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app import db_models  # noqa: E402,F401
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.storage import (  # noqa: E402
    BirthdayStorage,
    CategoryStorage,
    UserStorage,
    seed_categories,
)

TEST_SECRET_KEY = "test-secret-key"
TEST_API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def fresh_database():
    """Rebuild the schema and default categories for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    seed_categories(session)
    session.commit()
    session.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.commit()
    session.close()


@pytest.fixture
def user_storage(db_session):
    return UserStorage(db_session)


@pytest.fixture
def category_storage(db_session):
    return CategoryStorage(db_session)


@pytest.fixture
def birthday_storage(db_session):
    return BirthdayStorage(db_session)


@pytest.fixture
def client():
    """Provide a FastAPI TestClient."""
    from app.main import app

    with TestClient(app) as c:
        yield c


def register(client, name, email, password):
    response = client.post(
        "/api/v1/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def login_headers(client, email, password):
    response = client.post(
        "/api/v1/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def alice(client):
    """Register and return the user Alice."""
    return register(client, "Alice", "alice@example.com", "alicepass123")


@pytest.fixture
def bob(client):
    """Register and return the user Bob."""
    return register(client, "Bob", "bob@example.com", "bobpass123")


@pytest.fixture
def alice_headers(client, alice):
    return login_headers(client, "alice@example.com", "alicepass123")


@pytest.fixture
def bob_headers(client, bob):
    return login_headers(client, "bob@example.com", "bobpass123")


@pytest.fixture
def admin_headers():
    return {"X-API-Key": TEST_API_KEY}
