"""
BookInstance Model

A physical, loanable copy of a Book, tracked independently with its own
imprint, status and due-back date.
"""

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.utils import format_input_date, format_long_date

if TYPE_CHECKING:
    from app.models.book import Book


class BookInstanceStatus(str, Enum):
    """
    Lifecycle states of a physical copy.

    - AVAILABLE: On the shelf, can be borrowed
    - MAINTENANCE: Being repaired (default for new copies)
    - LOANED: Currently borrowed
    - RESERVED: Held for a patron
    """
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


# Labels shown to patrons (zh-TW).
STATUS_LABELS = {
    BookInstanceStatus.AVAILABLE.value: "可借閱",
    BookInstanceStatus.MAINTENANCE.value: "書本保養中",
    BookInstanceStatus.LOANED.value: "已被借閱",
    BookInstanceStatus.RESERVED.value: "已被預約",
}

UNKNOWN_STATUS_LABEL = "No value found"


class BookInstance(Base):
    """
    Book instance model.

    Table: book_instances

    Relationships:
    - book: Many-to-One (every copy references an existing book)

    Example:
        copy = BookInstance(book=book, imprint="Penguin, 2008",
                            status=BookInstanceStatus.AVAILABLE.value)
        copy.status_name  # '可借閱'
    """

    __tablename__ = "book_instances"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
        comment="The book this copy belongs to"
    )

    imprint: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Publisher and edition information"
    )

    status: Mapped[str] = mapped_column(
        String(20),
        index=True,
        default=BookInstanceStatus.MAINTENANCE.value,
        nullable=False,
        comment="Available, Maintenance, Loaned or Reserved"
    )

    due_back: Mapped[date] = mapped_column(
        Date,
        default=date.today,
        nullable=False,
        comment="Date the copy is expected back"
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
    book: Mapped["Book"] = relationship(
        "Book",
        back_populates="instances",
    )

    # -------------------------------------------------------------------------
    # Derived Display Fields
    # -------------------------------------------------------------------------
    @property
    def status_name(self) -> str:
        """Localized label for the current status."""
        return STATUS_LABELS.get(self.status, UNKNOWN_STATUS_LABEL)

    @property
    def due_back_formatted(self) -> str:
        return format_long_date(self.due_back)

    @property
    def due_back_for_fill_in(self) -> str:
        return format_input_date(self.due_back)

    @property
    def url(self) -> str:
        return f"/catalog/bookinstances/{self.id}"

    def __repr__(self) -> str:
        return (
            f"BookInstance(id={self.id}, book_id={self.book_id}, "
            f"status='{self.status}')"
        )
