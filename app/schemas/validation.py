"""
Declarative Form Rules

HTML forms are validated with Pydantic models whose fields are built from
small reusable rules attached with Annotated:

    title: Annotated[str, Trim, Length(min_length=1, message="Title must not be empty."), Escape]

Rules run in the order they are listed:
- Trim (BeforeValidator): strip surrounding whitespace
- Length / Alphanumeric / OneOf / EmailAddress (AfterValidator): checks that
  raise a PydanticCustomError carrying the exact message shown to the user
- Escape (AfterValidator): HTML-escape the cleaned value before it is
  persisted

A Length listed after Escape checks the escaped text, which is what the
column has to hold ("&" is stored as "&amp;").

Pydantic collects one error per failing field, so validate_form() can turn
a ValidationError into the list of field errors a template displays next to
the form.
"""

import html
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, BeforeValidator, ValidationError
from pydantic_core import PydanticCustomError

FormT = TypeVar("FormT", bound=BaseModel)


@dataclass(frozen=True)
class FieldError:
    """A single validation failure, shaped for the form templates."""

    param: str
    msg: str
    value: Any = None


# =============================================================================
# Sanitizers
# =============================================================================
def _trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _escape(value: Any) -> Any:
    return html.escape(value, quote=True) if isinstance(value, str) else value


Trim = BeforeValidator(_trim)
Escape = AfterValidator(_escape)


# =============================================================================
# Validators
# =============================================================================
def Length(
    min_length: int = 0,
    max_length: int | None = None,
    *,
    message: str,
) -> AfterValidator:
    """Require the string length to fall within [min_length, max_length]."""

    def check(value: str) -> str:
        if len(value) < min_length:
            raise PydanticCustomError("length", message)
        if max_length is not None and len(value) > max_length:
            raise PydanticCustomError("length", message)
        return value

    return AfterValidator(check)


def Alphanumeric(*, message: str) -> AfterValidator:
    """Require letters and digits only."""

    def check(value: str) -> str:
        if not value.isalnum():
            raise PydanticCustomError("alphanumeric", message)
        return value

    return AfterValidator(check)


def OneOf(choices: Iterable[str], *, message: str) -> AfterValidator:
    allowed = frozenset(choices)

    def check(value: str) -> str:
        if value not in allowed:
            raise PydanticCustomError("choice", message)
        return value

    return AfterValidator(check)


def EmailAddress(*, message: str) -> AfterValidator:
    """Check e-mail syntax and return the normalized address."""

    def check(value: str) -> str:
        try:
            result = validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("email", message)
        return result.normalized

    return AfterValidator(check)


def OptionalISODate(*, message: str) -> BeforeValidator:
    """
    Parse an ISO-8601 date, treating a blank value as "not provided".

    Full timestamps are accepted; only the calendar date is kept.
    """

    def parse(value: Any) -> date | None:
        if value is None or isinstance(value, date):
            return value
        text = str(value).strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise PydanticCustomError("date", message)

    return BeforeValidator(parse)


def DefaultIfBlank(default: str) -> BeforeValidator:
    def fill(value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        return value

    return BeforeValidator(fill)


# =============================================================================
# Form Processing
# =============================================================================
def validate_form(
    form_cls: type[FormT],
    data: Mapping[str, Any],
) -> tuple[FormT | None, list[FieldError]]:
    """
    Validate submitted form data.

    Returns:
        (form, []) when every rule passes, otherwise (None, errors) where
        errors holds one FieldError per failing field in declaration order.
    """
    try:
        return form_cls.model_validate(dict(data)), []
    except ValidationError as exc:
        errors = [
            FieldError(
                param=str(error["loc"][0]) if error["loc"] else "",
                msg=error["msg"],
                value=error.get("input"),
            )
            for error in exc.errors()
        ]
        return None, errors


def sanitize_values(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Trim and escape submitted values so they can be echoed into a form.

    Lists (multi-select fields) are sanitized item by item.
    """
    clean: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, list):
            clean[key] = [_escape(_trim(item)) for item in value]
        else:
            clean[key] = _escape(_trim(value))
    return clean

