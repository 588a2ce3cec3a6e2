"""Pytest configuration and fixtures."""

import os
import tempfile

# Uploads go to a scratch directory; must be set before the app reads settings
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="codelogs-uploads-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from codelogs.config import get_settings  # noqa: E402
from codelogs.database import Base, get_db  # noqa: E402
from codelogs.main import app  # noqa: E402

API = f"/{get_settings().api_namespace}"
PASSWORD = "secret1"  # noqa: S105

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/codelogs", "/codelogs_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def user_payload(name: str, **overrides) -> dict:
    """Valid registration body for user ``name``; overrides may replace any field."""
    payload = {
        "username": name,
        "email": f"{name}@example.com",
        "phone": "+97112345678",
        "dob": "2000-01-01",
        "password": PASSWORD,
    }
    payload.update(overrides)
    return payload


def login(client: TestClient, username: str, password: str = PASSWORD):
    """Log ``client`` in; the session cookie is kept by the client."""
    return client.post(f"{API}/login", json={"username": username, "password": password})


def create_post(client: TestClient, **fields) -> dict:
    """Create a post as whoever ``client`` is logged in as."""
    data = {"title": "Hello", "code": "print(1)", "language": "python"}
    data.update(fields)
    response = client.post(f"{API}/contents", data=data)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(client):
    """Factory for extra clients, each with its own cookie jar."""
    clients = []

    def _make() -> TestClient:
        extra = TestClient(app)
        clients.append(extra)
        return extra

    yield _make
    for extra in clients:
        extra.close()


@pytest.fixture
def register(client):
    """Register a user and return the response body."""

    def _register(username: str, **overrides) -> dict:
        response = client.post(f"{API}/users", json=user_payload(username, **overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def alice(client, register):
    """The default client, logged in as alice."""
    register("alice")
    response = login(client, "alice")
    assert response.status_code == 200
    return client


@pytest.fixture
def bob(make_client, register):
    """A second client, logged in as bob."""
    register("bob")
    bob_client = make_client()
    response = login(bob_client, "bob")
    assert response.status_code == 200
    return bob_client


@pytest.fixture
def anonymous(make_client):
    """A client with no session."""
    return make_client()
