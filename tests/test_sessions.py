"""
Tests for the Session Identity and Authentication Services

These call the services directly with a bare Starlette request whose
scope carries an in-memory session dict.
"""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select
from starlette.requests import Request

from app.models import User, UserSession
from app.services.auth import (
    Authenticator,
    Credentials,
    LocalLoginStrategy,
    UnknownStrategyError,
)
from app.services.flash import flash, get_flashed_messages
from app.services.security import hash_password, verify_password
from app.services.sessions import (
    SESSION_KEY,
    deserialize_user,
    destroy_session,
    hash_session_token,
    serialize_user,
)


def make_request(session: dict | None = None) -> Request:
    return Request({"type": "http", "session": {} if session is None else session})


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("SecurePass123")

        assert hashed != "SecurePass123"
        assert verify_password("SecurePass123", hashed)
        assert not verify_password("WrongPass", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("SecurePass123", "not-a-bcrypt-hash")


class TestSessionTokens:
    def test_token_hash_is_keyed_and_stable(self):
        assert hash_session_token("abc") == hash_session_token("abc")
        assert hash_session_token("abc") != hash_session_token("abd")
        assert len(hash_session_token("abc")) == 64

    def test_round_trip(self, db_session, sample_user):
        request = make_request()

        record = serialize_user(request, db_session, sample_user)

        token = request.session[SESSION_KEY]
        assert record.token_hash == hash_session_token(token)
        assert record.token_hash != token
        assert deserialize_user(make_request({SESSION_KEY: token}), db_session).id == sample_user.id

    def test_unknown_token_is_dropped(self, db_session):
        request = make_request({SESSION_KEY: "forged"})

        assert deserialize_user(request, db_session) is None
        assert SESSION_KEY not in request.session

    def test_expired_session(self, db_session, sample_user):
        request = make_request()
        record = serialize_user(request, db_session, sample_user)
        record.expires_at = datetime.now(UTC) - timedelta(seconds=1)
        db_session.commit()

        assert deserialize_user(request, db_session) is None
        assert db_session.execute(select(func.count(UserSession.id))).scalar_one() == 0

    def test_destroy_session(self, db_session, sample_user):
        request = make_request()
        serialize_user(request, db_session, sample_user)
        token = request.session[SESSION_KEY]
        flash(request, "pending")

        destroy_session(request, db_session)

        assert request.session == {}
        assert deserialize_user(make_request({SESSION_KEY: token}), db_session) is None


class TestFlash:
    def test_messages_are_grouped_and_popped(self):
        request = make_request()
        flash(request, "one")
        flash(request, "two")
        flash(request, "careful", "warning")

        assert get_flashed_messages(request) == ["one", "two"]
        assert get_flashed_messages(request) == []
        assert get_flashed_messages(request, "warning") == ["careful"]
        assert request.session == {}


class TestAuthenticator:
    def test_unknown_strategy(self, db_session):
        with pytest.raises(UnknownStrategyError):
            Authenticator().authenticate(
                "github",
                make_request(),
                db_session,
                Credentials(username="x", password="y"),
                success_redirect="/",
                failure_redirect="/users/login",
            )

    def test_failure_flashes_and_redirects(self, db_session, sample_user):
        authenticator = Authenticator()
        authenticator.use("login", LocalLoginStrategy())
        request = make_request()

        response = authenticator.authenticate(
            "login",
            request,
            db_session,
            Credentials(username="testuser", password="WrongPass"),
            success_redirect="/users/profile",
            failure_redirect="/users/login",
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/users/login"
        assert get_flashed_messages(request) == ["Invalid password"]
        assert SESSION_KEY not in request.session

    def test_success_establishes_session(self, db_session, sample_user):
        authenticator = Authenticator()
        authenticator.use("login", LocalLoginStrategy())
        request = make_request()

        response = authenticator.authenticate(
            "login",
            request,
            db_session,
            Credentials(username="testuser", password="SecurePass123"),
            success_redirect="/users/profile",
            failure_redirect="/users/login",
        )

        assert response.headers["location"] == "/users/profile"
        assert deserialize_user(request, db_session).username == "testuser"
        assert isinstance(db_session.get(User, sample_user.id).last_login_at, datetime)
