"""
Shared pytest fixtures for the governance platform test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - make_user / member / admin: persisted users
    - auth_headers: Bearer header for a user (real session row)
    - make_proposal: persisted proposal factory
"""

import pytest

from app import create_app
from app.models import db as _db
from app.models.auth import User
from app.models.governance import Proposal
from app.services.session_service import create_session


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.session.remove()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def make_user():
    counter = {"n": 0}

    def _make(role="member", is_active=True, display_name=None, avatar_url=None):
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.org",
            display_name=display_name or f"User {counter['n']}",
            role=role,
            is_active=is_active,
            avatar_url=avatar_url,
        )
        _db.session.add(user)
        _db.session.commit()
        return user

    return _make


@pytest.fixture()
def member(make_user):
    return make_user(display_name="Ada Member", avatar_url="https://img.example.org/ada.png")


@pytest.fixture()
def admin(make_user):
    return make_user(role="admin", display_name="Root Admin")


@pytest.fixture()
def auth_headers():
    """Return a function: user -> {"Authorization": "Bearer <token>"}."""

    def _headers(user):
        token = create_session(user.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def make_proposal(make_user):
    def _make(status="open", author=None, **kwargs):
        author = author or make_user()
        proposal = Proposal(
            title=kwargs.pop("title", "Pilot a community dividend"),
            content=kwargs.pop("content", "Distribute surplus to members monthly."),
            proposal_type=kwargs.pop("proposal_type", "policy"),
            status=status,
            author_id=author.id,
            **kwargs,
        )
        _db.session.add(proposal)
        _db.session.commit()
        return proposal

    return _make
