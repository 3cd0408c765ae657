"""
Session Identity Service

Ties a browser session to a user.

How it fits together:
=====================
1. The signed session cookie (Starlette SessionMiddleware) carries an
   opaque random token under the "sid" key
2. The user_sessions table stores an HMAC-SHA256 of that token, keyed with
   SESSION_SECRET, plus the user id and an expiry
3. serialize_user() runs on login: new token, new row, token into cookie
4. deserialize_user() runs on every request: token → row → full User
5. destroy_session() runs on logout: row deleted, cookie session cleared

Because the row is deleted on logout, a copy of the old cookie no longer
resolves to anyone.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload
from starlette.requests import Request

from app.config import get_settings
from app.models import User, UserSession

logger = logging.getLogger(__name__)
settings = get_settings()

SESSION_KEY = "sid"

# Avoid a write on every page view just to refresh last_seen_at.
LAST_SEEN_RESOLUTION = timedelta(minutes=5)


def generate_session_token() -> tuple[str, str]:
    """
    Generate a new session token.

    Returns:
        Tuple of (token, token_hash)
        - token: goes into the signed cookie
        - token_hash: stored in the database
    """
    token = secrets.token_urlsafe(32)
    return token, hash_session_token(token)


def hash_session_token(token: str) -> str:
    """Keyed SHA-256 of a session token (64 hex characters)."""
    return hmac.new(
        settings.session_secret.encode(),
        token.encode(),
        hashlib.sha256,
    ).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def serialize_user(request: Request, db: Session, user: User) -> UserSession:
    """
    Establish the user's identity on this browser session.

    Any identity already attached to the session is discarded first, so a
    login always starts from a fresh token.
    """
    _discard_current(request, db)

    token, token_hash = generate_session_token()
    now = datetime.now(UTC)

    record = UserSession(
        token_hash=token_hash,
        user_id=user.id,
        expires_at=now + timedelta(seconds=settings.session_max_age),
        last_seen_at=now,
    )
    user.last_login_at = now

    db.add(record)
    db.commit()
    db.refresh(record)

    request.session[SESSION_KEY] = token
    logger.info(f"Session started for user {user.username}")

    return record


def deserialize_user(request: Request, db: Session) -> User | None:
    """
    Resolve the session token to the full User record.

    Returns:
        The logged-in User, or None for anonymous, unknown or expired
        sessions (stale tokens are removed from the cookie).
    """
    token = request.session.get(SESSION_KEY)
    if not token:
        return None

    stmt = (
        select(UserSession)
        .options(joinedload(UserSession.user))
        .where(UserSession.token_hash == hash_session_token(token))
    )
    record = db.execute(stmt).scalar_one_or_none()

    if record is None:
        request.session.pop(SESSION_KEY, None)
        return None

    now = datetime.now(UTC)
    if _as_utc(record.expires_at) <= now:
        logger.info(f"Expired session for user id {record.user_id}")
        db.delete(record)
        db.commit()
        request.session.pop(SESSION_KEY, None)
        return None

    if record.last_seen_at is None or now - _as_utc(record.last_seen_at) > LAST_SEEN_RESOLUTION:
        record.last_seen_at = now
        db.commit()

    return record.user


def destroy_session(request: Request, db: Session) -> None:
    """Log out: delete the server-side record and empty the cookie session."""
    _discard_current(request, db)
    request.session.clear()


def _discard_current(request: Request, db: Session) -> None:
    token = request.session.pop(SESSION_KEY, None)
    if not token:
        return
    db.execute(
        delete(UserSession).where(UserSession.token_hash == hash_session_token(token))
    )
    db.commit()
