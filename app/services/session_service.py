"""
Session Service — bearer-token lookup for the request pipeline.

Raw tokens are never stored: the ``sessions`` table holds the SHA-256 hex
digest, and every lookup hashes the presented token first.

Login, registration and password handling are not part of this service;
``create_session`` exists for tests and operator tooling.
"""

import hashlib
import secrets
from datetime import timedelta

from flask import current_app

from app.models import _utcnow, db
from app.models.auth import Session, User

DEFAULT_SESSION_TTL_HOURS = 24 * 7


def hash_token(token: str) -> str:
    """SHA-256 hash of a bearer token (what the sessions table stores)."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "displayName": user.display_name,
        "role": user.role,
        "avatarUrl": user.avatar_url,
    }


def get_current_user(token: str | None) -> dict | None:
    """
    Resolve a bearer token to its user.

    Returns None for a missing token, an unknown or expired session, or an
    inactive user. Never raises for bad credentials.
    """
    if not token:
        return None
    user = db.session.execute(
        db.select(User)
        .join(Session, Session.user_id == User.id)
        .where(
            Session.token_hash == hash_token(token),
            Session.expires_at > _utcnow(),
            User.is_active.is_(True),
        )
        .limit(1)
    ).scalar_one_or_none()
    return _user_payload(user) if user else None


def create_session(
    user_id: str,
    ttl_hours: int | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> str:
    """Persist a session for ``user_id`` and return the raw bearer token."""
    if ttl_hours is None:
        ttl_hours = current_app.config.get("SESSION_TTL_HOURS", DEFAULT_SESSION_TTL_HOURS)
    token = secrets.token_urlsafe(32)
    db.session.add(Session(
        user_id=user_id,
        token_hash=hash_token(token),
        expires_at=_utcnow() + timedelta(hours=ttl_hours),
        ip_address=ip_address,
        user_agent=user_agent,
    ))
    db.session.commit()
    return token


def purge_expired_sessions() -> int:
    """Delete sessions past their expiry. Returns the number removed."""
    result = db.session.execute(db.delete(Session).where(Session.expires_at <= _utcnow()))
    db.session.commit()
    return result.rowcount or 0
