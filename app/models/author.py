"""
Author Model

Represents an author in the library catalog.

Display fields (full name, formatted dates, lifespan, url) are plain
Python properties computed from the stored columns at read time; they
are never persisted.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.utils import format_input_date, format_long_date, whole_years_between

# TYPE_CHECKING is True only during type checking (mypy, IDE)
# This prevents circular imports at runtime while enabling type hints
if TYPE_CHECKING:
    from app.models.book import Book


class Author(Base):
    """
    Author model representing writers in the catalog.

    Table: authors

    Relationships:
    - books: One-to-Many (each book references exactly one author)

    Example:
        author = Author(
            first_name="George",
            family_name="Orwell",
            date_of_birth=date(1903, 6, 25),
            date_of_death=date(1950, 1, 21),
        )
        author.name      # 'Orwell, George'
        author.lifespan  # '46'
    """

    __tablename__ = "authors"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Author's given name"
    )

    family_name: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Author's family name (used for sorting)"
    )

    # Date (not DateTime) because we only care about the day
    date_of_birth: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Date of birth, if known"
    )

    date_of_death: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Date of death, if known"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the author record was last updated"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # No delete cascade: an author with books cannot be removed.
    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="author",
        order_by="Book.title",
    )

    # -------------------------------------------------------------------------
    # Derived Display Fields
    # -------------------------------------------------------------------------
    @property
    def name(self) -> str:
        """Full name as 'Family, First'."""
        return f"{self.family_name}, {self.first_name}"

    @property
    def birth_day(self) -> str:
        return format_long_date(self.date_of_birth)

    @property
    def death_day(self) -> str:
        return format_long_date(self.date_of_death)

    @property
    def birth_day_for_fill_in(self) -> str:
        return format_input_date(self.date_of_birth)

    @property
    def death_day_for_fill_in(self) -> str:
        return format_input_date(self.date_of_death)

    @property
    def lifespan(self) -> str:
        """Whole years lived, or '' unless both dates are known."""
        if self.date_of_birth is None or self.date_of_death is None:
            return ""
        return str(whole_years_between(self.date_of_birth, self.date_of_death))

    @property
    def url(self) -> str:
        return f"/catalog/authors/{self.id}"

    # -------------------------------------------------------------------------
    # String Representation
    # -------------------------------------------------------------------------
    def __repr__(self) -> str:
        """Developer-friendly string representation."""
        return f"Author(id={self.id}, name='{self.name}')"
