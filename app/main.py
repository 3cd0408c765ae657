"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() function returns configured app
   - Easier to test (can create multiple instances)

2. Lifespan Events
   - startup: Log configuration before accepting requests
   - shutdown: Release pooled database connections

3. Middleware Stack
   - Sessions: Signed cookie carrying the session token and flash messages

4. Application-wide Dependencies
   - The current user is resolved for every request and stored on
     request.state, where the templates pick it up

5. Exception Handlers
   - Render the error page instead of JSON
   - Log errors for debugging
   - Stack traces only outside production
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from app import __version__
from app.config import get_settings
from app.database import engine
from app.dependencies import DbSession, load_current_user
from app.rendering import render_error
from app.routers import (
    authors_router,
    book_instances_router,
    books_router,
    genres_router,
    index_router,
    users_router,
)
from app.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
# Configure logging before creating the app
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    engine.dispose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="Server-rendered catalog of a local library.",
        version=__version__,
        lifespan=lifespan,
        # Every page resolves the logged-in user (if any) up front
        dependencies=[Depends(load_current_user)],
        # HTML application; no public API schema
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # Attach the limiter to the app state so it can be accessed by decorators
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # -------------------------------------------------------------------------
    # Session Middleware
    # -------------------------------------------------------------------------
    # The cookie payload is signed (itsdangerous) with COOKIE_SECRET.
    # It only carries the opaque session token and pending flash messages;
    # the session record itself lives in the user_sessions table.
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.cookie_secret,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_production,
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> Response:
        """Render 404s (and any other HTTP error) as the error page."""
        if exc.status_code >= 500:
            logger.error(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")

        response = render_error(request, exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> Response:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error for debugging while showing users a generic
        message (plus the stack trace outside production).
        """
        logger.error(f"Database error: {exc}")
        return render_error(
            request,
            500,
            "A database error occurred. Please try again later.",
            exc,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> Response:
        """Catch-all exception handler."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return render_error(request, 500, "An internal error occurred.", exc)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(index_router)
    app.include_router(users_router)
    app.include_router(books_router)
    app.include_router(authors_router)
    app.include_router(genres_router)
    app.include_router(book_instances_router)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
    )
    def health_check(db: DbSession) -> dict:
        """
        Health check endpoint.

        Used by load balancers and monitoring. Reports whether the
        database answers a trivial query.
        """
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as exc:
            logger.warning(f"Health check database error: {exc}")
            database = "unavailable"

        return {
            "status": "healthy" if database == "ok" else "degraded",
            "app": settings.app_name,
            "version": __version__,
            "environment": settings.environment,
            "database": database,
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "auth_limit": settings.rate_limit_auth,
            },
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn app.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# This allows running the app directly with: python -m app.main
# In production, use: uvicorn app.main:app --host 0.0.0.0 --port 3000

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
