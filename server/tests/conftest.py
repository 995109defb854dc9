"""Pytest configuration and fixtures for venue vote tests."""

import os
from collections.abc import Generator

# The app's lifespan opens the store from settings; keep it in memory.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from venue_votes.api.deps import get_db  # noqa: E402
from venue_votes.main import app  # noqa: E402
from venue_votes.models.base import Base  # noqa: E402
from venue_votes.models.vote import Vote  # noqa: E402

# Use SQLite in-memory for tests (fast, isolated)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session here, let the db fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_votes(db: Session) -> list[Vote]:
    """Two votes for RoofBar and one for NightMarket, in that order."""
    votes = [
        Vote(voter_name="alice", venue_name="RoofBar", category="Nightlife"),
        Vote(voter_name="bob", venue_name="RoofBar", category="Nightlife"),
        Vote(voter_name="alice", venue_name="NightMarket", category="Food"),
    ]
    db.add_all(votes)
    db.commit()
    return votes
