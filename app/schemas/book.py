"""
Book Form Schemas

Reference fields (author, genre) arrive as id strings from <select> and
checkbox inputs. The schema only checks that they are present and
well-formed; the router verifies that the referenced rows exist.
"""

from typing import Annotated, Any

from pydantic import BaseModel, field_validator

from app.schemas.validation import Escape, Length, Trim


class BookForm(BaseModel):
    """Schema for the book create/update form."""

    title: Annotated[
        str,
        Trim,
        Length(1, 500, message="Title must not be empty."),
        Escape,
        Length(max_length=500, message="Title is too long"),
    ]
    author: Annotated[
        str,
        Trim,
        Length(1, message="Author must not be empty."),
        Escape,
    ]
    summary: Annotated[
        str,
        Trim,
        Length(50, 200, message="Summary must be between 50 and 200 characters."),
        Escape,
    ]
    isbn: Annotated[
        str,
        Trim,
        Length(1, 20, message="ISBN must not be empty"),
        Escape,
        Length(max_length=20, message="ISBN is too long"),
    ]
    genre: list[Annotated[str, Trim, Escape]] = []

    @field_validator("genre", mode="before")
    @classmethod
    def genre_as_list(cls, v: Any) -> list:
        """A single checked box arrives as a scalar; none arrives as None."""
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [item for item in v if item]
        return [v] if v else []
