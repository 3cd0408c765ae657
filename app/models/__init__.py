"""
SQLAlchemy Models Package

This package contains all database models for the library catalog.

Model Relationships:
- Author -> Book: One-to-Many (a book has exactly one author)
- Genre <-> Book: Many-to-Many (a book can belong to several genres)
- Book -> BookInstance: One-to-Many (physical copies of a book)
- User -> UserSession: One-to-Many (server-side login sessions)

Import all models here so Alembic discovers them for migrations.
"""

from app.models.author import Author
from app.models.genre import Genre
from app.models.book import Book, book_genres
from app.models.book_instance import BookInstance, BookInstanceStatus
from app.models.user import User
from app.models.user_session import UserSession

__all__ = [
    "Author",
    "Genre",
    "Book",
    "book_genres",
    "BookInstance",
    "BookInstanceStatus",
    "User",
    "UserSession",
]
