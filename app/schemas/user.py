"""
User Form Schemas

Schemas:
- SignupForm: Registration form (username, password, names, email)
- LoginForm: Credentials only; sanitized, never rejected here (wrong
  credentials are reported by the login strategy through a flash message)

Passwords are trimmed but never HTML-escaped: they are hashed, not shown.
"""

from typing import Annotated

from pydantic import BaseModel

from app.schemas.validation import (
    Alphanumeric,
    EmailAddress,
    Escape,
    Length,
    Trim,
)


class SignupForm(BaseModel):
    """Schema for the signup form."""

    username: Annotated[
        str,
        Trim,
        Length(6, 18, message="username must be more than 6 characters"),
        Escape,
        Length(max_length=18, message="username is too long"),
    ]
    password: Annotated[
        str,
        Trim,
        Length(6, message="password must be more than 6 characters"),
    ]
    first_name: Annotated[
        str,
        Trim,
        Length(1, 100, message="First name must be specified."),
        Alphanumeric(message="First name has non-alphanumeric characters."),
        Escape,
    ]
    family_name: Annotated[
        str,
        Trim,
        Length(1, 100, message="Family name must be specified."),
        Alphanumeric(message="Family name has non-alphanumeric characters."),
        Escape,
    ]
    email: Annotated[
        str,
        Trim,
        EmailAddress(message="Invalid email"),
        Escape,
        Length(max_length=255, message="Email is too long"),
    ]


class LoginForm(BaseModel):
    """Schema for the login form."""

    username: Annotated[str, Trim, Escape]
    password: Annotated[str, Trim]
