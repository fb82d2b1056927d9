"""Shared fixtures: an in-memory database wired into a fresh app per test."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "umutisafe-test-secret")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="umutisafe-uploads-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from umutisafe.core.security import create_user_token
from umutisafe.crud import crud_user
from umutisafe.database import Base
from umutisafe.main import create_app
from umutisafe.schemas.user import UserCreate
from umutisafe.services import account_notifications


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def app(engine):
    return create_app(engine=engine)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to SMTP."""
    outbox = []

    def fake_send_email(*, to_email, subject, html_content, text_content=None):
        outbox.append({"to": to_email, "subject": subject, "text": text_content})

    monkeypatch.setattr(account_notifications, "send_email", fake_send_email)
    return outbox


@pytest.fixture
def make_user(db):
    """Create an account straight through the CRUD layer."""

    def _make_user(
        email,
        *,
        role="user",
        name="Test Person",
        password="password123",
        approved=True,
        active=True,
        **extra,
    ):
        user = crud_user.create_user(
            db,
            user_in=UserCreate(name=name, email=email, password=password, role=role),
        )
        updates = {"is_approved": approved, "is_active": active}
        updates.update(extra)
        return crud_user.update(db, db_obj=user, obj_in=updates)

    return _make_user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user.id)}"}


@pytest.fixture
def admin(make_user):
    return make_user("admin@umutisafe.gov.rw", role="admin", name="Alice Admin")


@pytest.fixture
def citizen(make_user):
    return make_user("jean@gmail.com", name="Jean Baptiste")


@pytest.fixture
def chw(make_user):
    return make_user(
        "claudine.chw@gmail.com",
        role="chw",
        name="Claudine Uwase",
        sector="Remera",
        availability="available",
    )
