"""
Book Instance Form Schemas
"""

from datetime import date
from typing import Annotated

from pydantic import BaseModel

from app.models.book_instance import BookInstanceStatus
from app.schemas.validation import (
    DefaultIfBlank,
    Escape,
    Length,
    OneOf,
    OptionalISODate,
    Trim,
)


class BookInstanceForm(BaseModel):
    """
    Schema for the book instance create/update form.

    A blank status falls back to Maintenance; a blank due-back date is left
    as None so the model default (today) applies on create.
    """

    book: Annotated[
        str,
        Trim,
        Length(1, message="Book must be specified"),
        Escape,
    ]
    imprint: Annotated[
        str,
        Trim,
        Length(1, 255, message="Imprint must be specified"),
        Escape,
        Length(max_length=255, message="Imprint is too long"),
    ]
    status: Annotated[
        str,
        DefaultIfBlank(BookInstanceStatus.MAINTENANCE.value),
        Trim,
        OneOf(
            [s.value for s in BookInstanceStatus],
            message="Invalid status",
        ),
    ] = BookInstanceStatus.MAINTENANCE.value
    due_back: Annotated[
        date | None,
        OptionalISODate(message="Invalid date"),
    ] = None
