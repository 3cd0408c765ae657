"""
Authentication Service

A small pluggable authenticator with named strategies.

Strategies:
===========
- "login": look the user up by username and check the password
- "signup": make sure the username is free, hash the password, create the user

Routers call authenticator.authenticate(name, ...). The outcome is always a
redirect:
- success: the user is serialized into the session (see services.sessions)
  and sent to the success URL
- failure: the strategy's message is flashed on the "info" channel and the
  user is sent to the failure URL

Authentication failures are reported to the user, never raised.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from fastapi import status
from fastapi.responses import RedirectResponse
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.requests import Request

from app.models import User
from app.services.flash import flash
from app.services.security import hash_password, verify_password
from app.services.sessions import serialize_user

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    """Submitted username/password plus any extra profile fields."""

    username: str
    password: str
    profile: dict[str, str] = field(default_factory=dict)


@dataclass
class AuthResult:
    """Outcome of a strategy: a user on success, a message on failure."""

    user: User | None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.user is not None


class AuthStrategy(Protocol):
    def verify(self, db: Session, credentials: Credentials) -> AuthResult:
        ...


class UnknownStrategyError(LookupError):
    """Raised when authenticate() is asked for a strategy never registered."""


def find_user_by_username(db: Session, username: str) -> User | None:
    stmt = select(User).where(User.username == username)
    return db.execute(stmt).scalar_one_or_none()


# =============================================================================
# Strategies
# =============================================================================
class LocalLoginStrategy:
    """Username + password against the stored bcrypt hash."""

    def verify(self, db: Session, credentials: Credentials) -> AuthResult:
        user = find_user_by_username(db, credentials.username)

        if user is None:
            logger.warning(f"Login failed: user not found for {credentials.username}")
            return AuthResult(None, "User not found.")

        if not verify_password(credentials.password, user.hashed_password):
            logger.warning(f"Login failed: incorrect password for {credentials.username}")
            return AuthResult(None, "Invalid password")

        return AuthResult(user)


class LocalSignupStrategy:
    """Create a local account if the username is still free."""

    def verify(self, db: Session, credentials: Credentials) -> AuthResult:
        if find_user_by_username(db, credentials.username) is not None:
            logger.info(f"Signup refused: {credentials.username} already exists")
            return AuthResult(None, "User already exists")

        user = User(
            username=credentials.username,
            hashed_password=hash_password(credentials.password),
            email=credentials.profile.get("email", ""),
            first_name=credentials.profile.get("first_name", ""),
            family_name=credentials.profile.get("family_name", ""),
        )
        db.add(user)

        # The unique index settles two signups racing for the same name.
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Signup refused: {credentials.username} taken concurrently")
            return AuthResult(None, "User already exists")

        db.refresh(user)
        logger.info(f"New user registered: {user.username}")

        return AuthResult(user)


# =============================================================================
# Authenticator
# =============================================================================
class Authenticator:
    """Registry of named strategies."""

    def __init__(self) -> None:
        self._strategies: dict[str, AuthStrategy] = {}

    def use(self, name: str, strategy: AuthStrategy) -> None:
        self._strategies[name] = strategy

    def authenticate(
        self,
        name: str,
        request: Request,
        db: Session,
        credentials: Credentials,
        *,
        success_redirect: str,
        failure_redirect: str,
    ) -> RedirectResponse:
        """
        Run a strategy and turn its outcome into a redirect.

        Raises:
            UnknownStrategyError: If no strategy is registered under name
        """
        strategy = self._strategies.get(name)
        if strategy is None:
            raise UnknownStrategyError(name)

        result = strategy.verify(db, credentials)

        if not result.ok:
            flash(request, result.message or "Authentication failed", "info")
            return RedirectResponse(failure_redirect, status_code=status.HTTP_303_SEE_OTHER)

        serialize_user(request, db, result.user)
        return RedirectResponse(success_redirect, status_code=status.HTTP_303_SEE_OTHER)


authenticator = Authenticator()
authenticator.use("login", LocalLoginStrategy())
authenticator.use("signup", LocalSignupStrategy())
