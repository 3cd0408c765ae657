"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Common Dependency Patterns used here:
- Database sessions (per-request)
- Current user (resolved from the session cookie on every request)
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import User
from app.services.sessions import deserialize_user

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def book_list(db: Session = Depends(get_db)):
#
# You can write:
#   def book_list(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Session Authentication
# =============================================================================
def load_current_user(request: Request, db: DbSession) -> User | None:
    """
    Resolve the logged-in user for this request.

    Registered as an application-wide dependency, so every route runs it.
    The result is stored on request.state (per request, never on the app)
    where the template renderer and route handlers pick it up.

    Returns:
        User object if the session is authenticated, None otherwise
    """
    user = deserialize_user(request, db)
    request.state.user = user
    return user


# Type alias for cleaner route signatures
OptionalUser = Annotated[User | None, Depends(load_current_user)]
