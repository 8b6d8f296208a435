"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import UTC, datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.database import Base, get_db, init_db, new_object_id  # noqa: E402
from src.main import app  # noqa: E402
from src.models.todo import Todo  # noqa: E402
from src.models.user import User, UserToken  # noqa: E402
from src.services.auth import create_token, get_password_hash  # noqa: E402

# In-memory SQLite shared across threads so TestClient requests see the same data
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class SeedUser(dict):
    """Seeded user data plus the plaintext password and its token."""

    @property
    def id(self) -> str:
        return self["_id"]

    @property
    def token(self) -> str:
        return self["tokens"][0]["token"]

    @property
    def headers(self) -> dict[str, str]:
        return {"x-auth": self.token}


def _make_users() -> list[SeedUser]:
    user_one_id = new_object_id()
    user_two_id = new_object_id()
    return [
        SeedUser(
            _id=user_one_id,
            email="gmail@test.com",
            password="gmailtest",
            tokens=[{"access": "auth", "token": create_token(user_one_id)}],
        ),
        SeedUser(
            _id=user_two_id,
            email="yahoo@test.com",
            password="yahootest",
            tokens=[{"access": "auth", "token": create_token(user_two_id)}],
        ),
    ]


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    init_db(bind=engine)
    yield


@pytest.fixture(scope="function")
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


@pytest.fixture
def users(db) -> list[SeedUser]:
    """Two users, each holding one auth token. The second has no todos yet."""
    seeded = _make_users()
    for data in seeded:
        db.add(
            User(
                id=data.id,
                email=data["email"],
                password_hash=get_password_hash(data["password"]),
                tokens=[UserToken(access=t["access"], token=t["token"]) for t in data["tokens"]],
            )
        )
    db.commit()
    return seeded


@pytest.fixture
def todos(db, users) -> list[dict]:
    """One open todo for the first user, one completed todo for the second."""
    seeded = [
        {
            "_id": new_object_id(),
            "text": "first test todo",
            "completed": False,
            "completed_at": None,
            "_creator": users[0].id,
        },
        {
            "_id": new_object_id(),
            "text": "second test todo",
            "completed": True,
            "completed_at": datetime.now(UTC),
            "_creator": users[1].id,
        },
    ]
    for data in seeded:
        db.add(
            Todo(
                id=data["_id"],
                text=data["text"],
                completed=data["completed"],
                completed_at=data["completed_at"],
                owner_id=data["_creator"],
            )
        )
    db.commit()
    return seeded


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
