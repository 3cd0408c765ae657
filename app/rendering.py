"""
Template Rendering

Server-side HTML rendering with Jinja2 (via FastAPI's Jinja2Templates).

Every page gets the same base context:
- request: required by Jinja2Templates (url_for etc.)
- current_user: the user resolved for THIS request (request.state.user),
  passed explicitly instead of living in application-wide globals
- errors: field errors for form pages (empty list by default)
- values: form values to fill back in (empty by default)

Text that users typed was HTML-escaped by the form schemas before it was
stored, so templates print it through the `sanitized` filter instead of
escaping it a second time.
"""

import logging
import traceback
from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates
from jinja2 import Undefined
from markupsafe import Markup
from starlette.requests import Request
from starlette.responses import Response

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def mark_sanitized(value: Any) -> Markup:
    """Mark a value that was escaped on input as safe for output."""
    if value is None or isinstance(value, Undefined):
        return Markup("")
    return Markup(value)


templates.env.filters["sanitized"] = mark_sanitized
templates.env.globals["app_name"] = settings.app_name


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
) -> Response:
    """Render a template with the per-request base context."""
    page_context: dict[str, Any] = {
        "current_user": getattr(request.state, "user", None),
        "errors": [],
        "values": {},
    }
    page_context.update(context or {})
    return templates.TemplateResponse(
        request,
        name,
        page_context,
        status_code=status_code,
    )


def render_error(
    request: Request,
    status_code: int,
    message: str,
    exc: BaseException | None = None,
) -> Response:
    """
    Render the error page.

    The stack trace is only included outside production.
    """
    stack = None
    if exc is not None and not settings.is_production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return render(
        request,
        "error.html",
        {
            "title": "Error",
            "status": status_code,
            "message": message,
            "stack": stack,
        },
        status_code=status_code,
    )
