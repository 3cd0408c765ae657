"""
Author Form Schemas

The same form backs both create and update.
"""

from datetime import date
from typing import Annotated

from pydantic import BaseModel

from app.schemas.validation import (
    Alphanumeric,
    Escape,
    Length,
    OptionalISODate,
    Trim,
)


class AuthorForm(BaseModel):
    """Schema for the author create/update form."""

    first_name: Annotated[
        str,
        Trim,
        Length(1, 100, message="First name must be specified."),
        Alphanumeric(message="First name has non-alphanumeric characters."),
        Escape,
    ]
    family_name: Annotated[
        str,
        Trim,
        Length(1, 100, message="Family name must be specified."),
        Alphanumeric(message="Family name has non-alphanumeric characters."),
        Escape,
    ]
    date_of_birth: Annotated[
        date | None,
        OptionalISODate(message="Invalid date of birth"),
    ] = None
    date_of_death: Annotated[
        date | None,
        OptionalISODate(message="Invalid date of death"),
    ] = None
