"""Shared fixtures: in-memory store, API client and authenticated users."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from tasktracker.api.deps import get_db_session
from tasktracker.main import create_app
from tasktracker.models.user import User
from tasktracker.services.security import hash_password, issue_token


@pytest.fixture
def engine():
    """Create a fresh in-memory database per test."""
    # Import all models to register them
    from tasktracker.models import Task, User  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create a test database session."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(db_session: Session):
    """API client whose requests share the test session."""
    app = create_app()

    def override_session():
        return db_session

    app.dependency_overrides[get_db_session] = override_session
    return TestClient(app)


@pytest.fixture
def make_user(db_session: Session):
    """Factory creating users with a known password."""

    def _make_user(username: str, email: str | None = None, password: str = "secret1") -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            hashed_password=hash_password(password),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def alice(make_user) -> User:
    return make_user("alice", "alice@x.com")


@pytest.fixture
def bob(make_user) -> User:
    return make_user("bob", "bob@x.com")


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user.id)}"}


@pytest.fixture
def alice_headers(alice: User) -> dict[str, str]:
    return auth_headers(alice)


@pytest.fixture
def bob_headers(bob: User) -> dict[str, str]:
    return auth_headers(bob)
