"""Shared fixtures: an in-memory database per test and an authenticated API client."""

import os

# Settings are read at import time; provide a throwaway database and signing key.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key-8f2c1d9a7b6e5f4a")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from wardnotes.core.database import get_session
from wardnotes.core.security import issue_access_token
from wardnotes.main import app
from wardnotes.models import FlashcardDeck, User


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_user(session: Session, email: str) -> User:
    user = User(email=email, password=User.hash_password("correct-horse"), full_name="Test User")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_deck(session: Session, user: User, name: str = "Cardiology") -> FlashcardDeck:
    deck = FlashcardDeck(user_id=user.id, name=name)
    session.add(deck)
    session.commit()
    session.refresh(deck)
    return deck


@pytest.fixture()
def user(session):
    return make_user(session, "resident@example.com")


@pytest.fixture()
def other_user(session):
    return make_user(session, "registrar@example.com")


@pytest.fixture()
def auth_headers(user):
    return {"Authorization": f"Bearer {issue_access_token(user.id)}"}


@pytest.fixture()
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {issue_access_token(other_user.id)}"}


@pytest.fixture()
def deck(session, user):
    return make_deck(session, user)
