"""
Book Model

The central model of the catalog.

This file also contains the association table for the many-to-many
relationship between books and genres (book_genres).

Foreign Keys and Deletes
========================
References that protect dependents use ON DELETE RESTRICT:
- books.author_id → authors.id
- book_genres.genre_id → genres.id

The routers check for dependents before deleting; the constraint makes the
database refuse a delete that races with a newly inserted dependent.
Rows in book_genres disappear with their book (ON DELETE CASCADE).
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.author import Author
    from app.models.book_instance import BookInstance
    from app.models.genre import Genre


# =============================================================================
# Association Tables
# =============================================================================
book_genres = Table(
    "book_genres",
    Base.metadata,
    Column(
        "book_id",
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "genre_id",
        Integer,
        ForeignKey("genres.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
    comment="Association table linking books to their genres",
)


class Book(Base):
    """
    Book model representing titles held by the library.

    Table: books

    Fields:
    - title: Book title (required)
    - summary: Short description shown on the detail page
    - isbn: International Standard Book Number

    Relationships:
    - author: Many-to-One (exactly one author)
    - genres: Many-to-Many (zero or more genres)
    - instances: One-to-Many (physical copies of this book)

    Example:
        book = Book(
            title="1984",
            summary="A dystopian novel...",
            isbn="9780451524935",
            author=orwell,
            genres=[dystopian],
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    summary: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book summary"
    )

    isbn: Mapped[str] = mapped_column(
        String(20),
        index=True,
        nullable=False,
        comment="International Standard Book Number"
    )

    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
        comment="Author of the book"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    author: Mapped["Author"] = relationship(
        "Author",
        back_populates="books",
    )

    genres: Mapped[list["Genre"]] = relationship(
        "Genre",
        secondary=book_genres,
        back_populates="books",
        order_by="Genre.name",
    )

    instances: Mapped[list["BookInstance"]] = relationship(
        "BookInstance",
        back_populates="book",
    )

    @property
    def url(self) -> str:
        return f"/catalog/books/{self.id}"

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"
