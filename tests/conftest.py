
import pytest
from typing import Generator
from fastapi.testclient import TestClient

from app import crud, schemas
from app.core.config import Settings
from app.main import create_app

TEST_SECRET_KEY = "test-secret-key"


@pytest.fixture
def settings() -> Settings:
    # In-memory database per test, cheap hashing, no .env lookup
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        SECRET_KEY=TEST_SECRET_KEY,
        BCRYPT_ROUNDS=4,
        ENVIRONMENT="testing",
        CORS_ORIGINS=["http://localhost:3000"],
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> Generator:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app, client) -> Generator:
    session = app.state.context.session_factory()
    yield session
    session.close()


@pytest.fixture
def hasher(app):
    return app.state.context.hasher


@pytest.fixture
def tokens(app):
    return app.state.context.tokens


def make_user(db, hasher, username: str, password: str = "testpass"):
    """Create a user directly via CRUD."""
    return crud.create_user(db, schemas.UserCreate(username=username, password=password), hasher)


def login(client: TestClient, username: str, password: str = "testpass") -> dict:
    """Log in and return auth headers."""
    resp = client.post("/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, f"Login failed: {resp.json()}"
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def create_recipe(client: TestClient, headers: dict, **fields) -> str:
    fields.setdefault("title", "Test Recipe")
    resp = client.post("/recipes", json=fields, headers=headers)
    assert resp.status_code == 200, resp.json()
    return resp.json()["id"]
