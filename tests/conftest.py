"""
Shared pytest fixtures.

Environment variables are set before any application module is imported so
that core.config and the db engine pick up test values.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ROOM_SWEEPER_ENABLED"] = "false"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base, get_db
from core.auth import create_access_token
from core.roles import UserRole
from models.user import User
from models.challenge_room import ChallengeRoom  # noqa: F401
from models.room_participant import RoomParticipant  # noqa: F401
from models.room_solve import RoomSolve  # noqa: F401
from models.timer_session import TimerSession, TimerSolve  # noqa: F401
from models.user_stats import UserEventStats  # noqa: F401
from models.contact_message import ContactMessage  # noqa: F401
from tests.helpers import NOW


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_user(db_session):
    """Factory fixture: make_user("Alice") -> persisted User"""
    counter = {"n": 0}

    def _make_user(name: str = None, role: UserRole = UserRole.USER, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            wca_id=kwargs.pop("wca_id", f"2020TEST{n:02d}"),
            wca_user_id=kwargs.pop("wca_user_id", 1000 + n),
            name=name or f"Cuber {n}",
            role=role,
            created_at=NOW,
            **kwargs
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def client(db_session):
    """TestClient using the test session for every request"""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User):
        token = create_access_token(data={"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
