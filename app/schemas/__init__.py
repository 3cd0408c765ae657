"""
Pydantic Schemas Package

This package contains the Pydantic models that validate and sanitize
submitted HTML forms.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Validation: Each form declares its own rules and user-facing messages
2. Sanitization: Values are trimmed and escaped before they reach the ORM
3. Decoupling: Database schema can evolve independently of the forms
"""

from app.schemas.author import AuthorForm
from app.schemas.book import BookForm
from app.schemas.book_instance import BookInstanceForm
from app.schemas.genre import GenreForm
from app.schemas.user import LoginForm, SignupForm
from app.schemas.validation import FieldError, sanitize_values, validate_form

__all__ = [
    "AuthorForm",
    "BookForm",
    "BookInstanceForm",
    "GenreForm",
    "LoginForm",
    "SignupForm",
    "FieldError",
    "sanitize_values",
    "validate_form",
]
