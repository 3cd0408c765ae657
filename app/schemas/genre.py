"""
Genre Form Schemas
"""

from typing import Annotated

from pydantic import BaseModel

from app.schemas.validation import Escape, Length, Trim


class GenreForm(BaseModel):
    """Schema for the genre create/update form."""

    name: Annotated[
        str,
        Trim,
        Length(1, 100, message="Genre name required"),
        Escape,
        Length(max_length=100, message="Genre name is too long"),
    ]
