"""
Users Router

Handles the account pages:
- Signup (GET form, POST create account through the "signup" strategy)
- Login (GET form, POST through the "login" strategy)
- Logout (destroy the session)
- Profile (current user's details, login required)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged, stored or echoed back into forms
- Sessions are server-side; logout deletes the session record
- Signup and login submissions are rate limited
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import RedirectResponse

from app.config import get_settings
from app.dependencies import DbSession, OptionalUser
from app.rendering import render
from app.schemas import LoginForm, SignupForm, sanitize_values, validate_form
from app.services.auth import Credentials, authenticator
from app.services.flash import flash, get_flashed_messages
from app.services.rate_limiter import limiter
from app.services.sessions import destroy_session

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)

SIGNUP_TITLE = "Sign Up"
LOGIN_TITLE = "Log In"


# -------------------------------------------------------------------------
# Signup
# -------------------------------------------------------------------------
@router.get("/signup", summary="Signup form")
def user_signup_get(request: Request):
    return render(
        request,
        "signup.html",
        {"title": SIGNUP_TITLE, "info": get_flashed_messages(request, "info")},
    )


@router.post("/signup", summary="Create an account")
@limiter.limit(settings.rate_limit_auth)
def user_signup_post(
    request: Request,
    db: DbSession,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    first_name: Annotated[str, Form()] = "",
    family_name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
):
    """
    Register a new user.

    1. Validates and sanitizes every field
    2. On errors, re-renders the form with the submitted values
    3. Otherwise hands over to the "signup" strategy, which checks the
       username is free, hashes the password and logs the new user in
    """
    submitted = {
        "username": username,
        "password": password,
        "first_name": first_name,
        "family_name": family_name,
        "email": email,
    }
    form, errors = validate_form(SignupForm, submitted)

    if errors:
        values = sanitize_values({k: v for k, v in submitted.items() if k != "password"})
        return render(
            request,
            "signup.html",
            {"title": SIGNUP_TITLE, "values": values, "errors": errors},
        )

    credentials = Credentials(
        username=form.username,
        password=form.password,
        profile={
            "email": form.email,
            "first_name": form.first_name,
            "family_name": form.family_name,
        },
    )
    return authenticator.authenticate(
        "signup",
        request,
        db,
        credentials,
        success_redirect="/",
        failure_redirect="/users/signup",
    )


# -------------------------------------------------------------------------
# Login
# -------------------------------------------------------------------------
@router.get("/login", summary="Login form")
def user_login_get(request: Request):
    return render(
        request,
        "login.html",
        {"title": LOGIN_TITLE, "info": get_flashed_messages(request, "info")},
    )


@router.post("/login", summary="Log in")
@limiter.limit(settings.rate_limit_auth)
def user_login_post(
    request: Request,
    db: DbSession,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Sanitize the credentials and run the "login" strategy."""
    form, errors = validate_form(
        LoginForm,
        {"username": username, "password": password},
    )

    if errors:
        return render(
            request,
            "login.html",
            {
                "title": LOGIN_TITLE,
                "values": sanitize_values({"username": username}),
                "errors": errors,
            },
        )

    return authenticator.authenticate(
        "login",
        request,
        db,
        Credentials(username=form.username, password=form.password),
        success_redirect="/users/profile",
        failure_redirect="/users/login",
    )


# -------------------------------------------------------------------------
# Logout
# -------------------------------------------------------------------------
@router.get("/logout", summary="Log out")
def user_logout(request: Request, db: DbSession, current_user: OptionalUser):
    """Invalidate the identity of this session and destroy the session."""
    if current_user is not None:
        logger.info(f"User logged out: {current_user.username}")

    destroy_session(request, db)
    request.state.user = None

    return RedirectResponse("/users/login", status_code=status.HTTP_303_SEE_OTHER)


# -------------------------------------------------------------------------
# Profile
# -------------------------------------------------------------------------
@router.get("/profile", summary="Current user's profile")
def user_profile(request: Request, current_user: OptionalUser):
    if current_user is None:
        flash(request, "Please log in to view your profile.", "info")
        return RedirectResponse("/users/login", status_code=status.HTTP_303_SEE_OTHER)

    return render(
        request,
        "profile.html",
        {"title": "Profile", "user": current_user},
    )
