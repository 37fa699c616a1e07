"""
Pytest configuration and fixtures for backend tests.
"""

import os

# The application engine is built at import time; keep it off the server database.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crud_api.main import app
from crud_api.models import (
    Base, Blog, ChatGroup, ChatMessage, Comment, Departments, Enterprise,
    Master, Note, User,
)
from shared.config.constants import ACTOR_HEADER
from shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ACTOR_ID = 42


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def actor_id():
    """Id of the acting user sent by `actor_headers`."""
    return ACTOR_ID


@pytest.fixture
def actor_headers():
    """Headers identifying the acting user."""
    return {ACTOR_HEADER: str(ACTOR_ID)}


@pytest.fixture
def make(db_session):
    """
    Factory for persisted rows.

    Usage:
        group = make(ChatGroup, name="General")
    """
    def _make(model, **fields):
        obj = model(**fields)
        db_session.add(obj)
        db_session.commit()
        db_session.refresh(obj)
        return obj

    return _make


# =============================================================================
# Seed scenarios (return ids: cascades expire or delete the rows)
# =============================================================================


@pytest.fixture
def seed_chat(make):
    """One group with two messages, plus an unrelated group with one message."""
    group = make(ChatGroup, name="General")
    other = make(ChatGroup, name="Random")
    messages = [
        make(ChatMessage, group_id=group.id, message="hello"),
        make(ChatMessage, group_id=group.id, message="world"),
    ]
    stranger = make(ChatMessage, group_id=other.id, message="unrelated")
    return {
        "group": group.id,
        "other": other.id,
        "messages": [m.id for m in messages],
        "stranger": stranger.id,
    }


@pytest.fixture
def seed_thread(make):
    """Comment chain C1 <- C2 <- C3 and an unrelated top-level comment."""
    c1 = make(Comment, comment="root")
    c2 = make(Comment, comment="reply", parent_item=c1.id)
    c3 = make(Comment, comment="reply to reply", parent_item=c2.id)
    unrelated = make(Comment, comment="another thread")
    return {"c1": c1.id, "c2": c2.id, "c3": c3.id, "unrelated": unrelated.id}


@pytest.fixture
def seed_master(make):
    """Master hierarchy: country -> region -> city."""
    country = make(Master, name="Country", code="CL")
    region = make(Master, name="Region", code="RM", parent_id=country.id)
    city = make(Master, name="City", code="STGO", parent_id=region.id)
    return {"country": country.id, "region": region.id, "city": city.id}


@pytest.fixture
def seed_enterprise(make):
    """Enterprise with two departments and one note filed against it."""
    enterprise = make(Enterprise, name="Clinic")
    departments = [
        make(Departments, name="Cardiology", enterprises=enterprise.id),
        make(Departments, name="Radiology", enterprises=enterprise.id),
    ]
    note = make(Note, title="Visit", encounter_id=enterprise.id)
    return {
        "enterprise": enterprise.id,
        "departments": [d.id for d in departments],
        "note": note.id,
    }


@pytest.fixture
def seed_users(db_session, make):
    """
    A self-registered admin (added_by itself), a user created by the admin
    and a blog post written by that user.
    """
    admin = make(User, username="admin")
    admin.added_by = admin.id
    db_session.commit()
    editor = make(User, username="editor", added_by=admin.id)
    post = make(Blog, title="Hello", added_by=editor.id)
    return {"admin": admin.id, "editor": editor.id, "post": post.id}
