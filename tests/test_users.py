"""
Tests for User Account Pages

Tests for:
- POST /users/signup
- POST /users/login
- GET /users/logout
- GET /users/profile
"""

from unittest.mock import patch

from fastapi import status
from sqlalchemy import func, select

from app.config import get_settings
from app.models import User, UserSession

SIGNUP_FORM = {
    "username": "newreader",
    "password": "ReaderPass1",
    "first_name": "Ada",
    "family_name": "Lovelace",
    "email": "ada@example.com",
}


def user_count(db_session) -> int:
    return db_session.execute(select(func.count(User.id))).scalar_one()


def session_count(db_session) -> int:
    return db_session.execute(select(func.count(UserSession.id))).scalar_one()


class TestSignup:
    """Tests for /users/signup."""

    def test_signup_form(self, client):
        response = client.get("/users/signup")

        assert response.status_code == status.HTTP_200_OK
        assert "Sign Up" in response.text

    def test_signup_creates_user_and_logs_in(self, client, db_session):
        response = client.post("/users/signup", data=SIGNUP_FORM, follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/"

        user = db_session.execute(select(User)).scalar_one()
        assert user.username == "newreader"
        assert user.email == "ada@example.com"
        assert user.hashed_password != "ReaderPass1"
        assert session_count(db_session) == 1

        profile = client.get("/users/profile")
        assert profile.status_code == status.HTTP_200_OK
        assert "newreader" in profile.text

    def test_signup_existing_username(self, client, db_session, sample_user):
        """A taken username never creates a second user."""
        data = {**SIGNUP_FORM, "username": "testuser"}

        response = client.post("/users/signup", data=data, follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/users/signup"
        assert user_count(db_session) == 1

        page = client.get("/users/signup")
        assert "User already exists" in page.text

    def test_signup_losing_username_race(self, client, db_session, sample_user):
        """The unique index refuses a name taken after the existence check."""
        data = {**SIGNUP_FORM, "username": "testuser"}

        with patch("app.services.auth.find_user_by_username", return_value=None):
            response = client.post("/users/signup", data=data, follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/users/signup"
        assert user_count(db_session) == 1
        assert db_session.get(User, sample_user.id) is not None
        assert session_count(db_session) == 0

        page = client.get("/users/signup")
        assert "User already exists" in page.text

    def test_signup_validation_errors(self, client, db_session):
        data = {
            "username": "abc",
            "password": "123",
            "first_name": "",
            "family_name": "Love-lace",
            "email": "not-an-email",
        }

        response = client.post("/users/signup", data=data)

        assert response.status_code == status.HTTP_200_OK
        assert "username must be more than 6 characters" in response.text
        assert "password must be more than 6 characters" in response.text
        assert "First name must be specified." in response.text
        assert "Family name has non-alphanumeric characters." in response.text
        assert "Invalid email" in response.text
        assert user_count(db_session) == 0

    def test_signup_errors_never_echo_password(self, client):
        data = {**SIGNUP_FORM, "email": "broken", "password": "SecretValue99"}

        response = client.post("/users/signup", data=data)

        assert "Invalid email" in response.text
        assert "SecretValue99" not in response.text
        assert 'value="newreader"' in response.text

    def test_signup_escaped_username_too_long(self, client, db_session):
        """The escaped username has to fit the username column."""
        data = {**SIGNUP_FORM, "username": "&&&&&&"}

        response = client.post("/users/signup", data=data, follow_redirects=False)

        assert response.status_code == status.HTTP_200_OK
        assert "username is too long" in response.text
        assert user_count(db_session) == 0


class TestLogin:
    """Tests for /users/login."""

    def test_login_success(self, logged_in_client, db_session):
        assert session_count(db_session) == 1

        response = logged_in_client.get("/users/profile")
        assert response.status_code == status.HTTP_200_OK
        assert "testuser@example.com" in response.text

    def test_login_wrong_password(self, client, db_session, sample_user):
        """The right username with the wrong password never logs in."""
        response = client.post(
            "/users/login",
            data={"username": "testuser", "password": "WrongPass"},
            follow_redirects=False,
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/users/login"
        assert session_count(db_session) == 0

        page = client.get("/users/login")
        assert "Invalid password" in page.text

    def test_login_unknown_user(self, client, db_session):
        response = client.post(
            "/users/login",
            data={"username": "nobody", "password": "whatever"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/users/login"
        page = client.get("/users/login")
        assert "User not found." in page.text

    def test_flash_is_shown_once(self, client, sample_user):
        client.post(
            "/users/login",
            data={"username": "testuser", "password": "nope"},
            follow_redirects=False,
        )

        first = client.get("/users/login")
        second = client.get("/users/login")

        assert "Invalid password" in first.text
        assert "Invalid password" not in second.text

    def test_login_records_last_login(self, logged_in_client, db_session, sample_user):
        db_session.refresh(sample_user)
        assert sample_user.last_login_at is not None

    def test_relogin_replaces_session(self, logged_in_client, db_session):
        logged_in_client.post(
            "/users/login",
            data={"username": "testuser", "password": "SecurePass123"},
        )

        assert session_count(db_session) == 1


class TestLogout:
    """Tests for /users/logout."""

    def test_logout_destroys_session(self, logged_in_client, db_session):
        response = logged_in_client.get("/users/logout", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/users/login"
        assert session_count(db_session) == 0

    def test_replayed_cookie_after_logout(self, logged_in_client):
        """A copy of the pre-logout cookie no longer identifies anyone."""
        cookie_name = get_settings().session_cookie_name
        stale_cookie = logged_in_client.cookies.get(cookie_name)
        assert stale_cookie

        logged_in_client.get("/users/logout")

        logged_in_client.cookies.clear()
        logged_in_client.cookies.set(cookie_name, stale_cookie)

        response = logged_in_client.get("/users/profile", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/users/login"
        assert "testuser@example.com" not in response.text


class TestProfile:
    """Tests for /users/profile."""

    def test_profile_requires_login(self, client):
        response = client.get("/users/profile", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/users/login"

        page = client.get("/users/login")
        assert "Please log in to view your profile." in page.text

    def test_profile_shows_user(self, logged_in_client):
        response = logged_in_client.get("/users/profile")

        assert response.status_code == status.HTTP_200_OK
        assert "testuser" in response.text
        assert "User, Test" in response.text

    def test_layout_shows_logged_in_user(self, logged_in_client):
        response = logged_in_client.get("/")

        assert "Log out" in response.text
        assert "Sign up" not in response.text
