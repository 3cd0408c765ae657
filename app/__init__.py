"""
Local Library Application Package

Server-rendered catalog of a local library: books, authors, genres and
physical copies, plus user accounts.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- rendering.py: Jinja2 template rendering
- models/: SQLAlchemy ORM models
- schemas/: Pydantic form validation and sanitization
- routers/: Page handlers
- services/: Authentication, sessions, flash messages, rate limiting
- templates/: Jinja2 page templates
- utils/: Date formatting helpers
"""

__version__ = "0.1.0"
