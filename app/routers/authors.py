"""
Authors Router

List, detail, create, update and delete pages for authors.
Follows the same patterns as the books router.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.dependencies import DbSession
from app.models import Author, Book
from app.rendering import render
from app.schemas import AuthorForm, FieldError, sanitize_values, validate_form

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/catalog/authors",
    tags=["Authors"],
)

CREATE_TITLE = "Create Author"
UPDATE_TITLE = "Update Author"
DELETE_TITLE = "Delete Author"


def find_author(db: Session, author_id: int) -> Author | None:
    stmt = (
        select(Author)
        .options(selectinload(Author.books))
        .where(Author.id == author_id)
    )
    return db.execute(stmt).scalar_one_or_none()


def get_author_or_404(db: Session, author_id: int) -> Author:
    """Get an author by ID or raise 404."""
    author = find_author(db, author_id)
    if author is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Author not found",
        )
    return author


def author_books(db: Session, author_id: int) -> list[Book]:
    stmt = select(Book).where(Book.author_id == author_id).order_by(Book.title)
    return list(db.execute(stmt).scalars().all())


def check_lifespan(form: AuthorForm, submitted: dict[str, str]) -> list[FieldError]:
    """An author cannot die before being born."""
    born, died = form.date_of_birth, form.date_of_death
    if born is not None and died is not None and died < born:
        return [
            FieldError(
                param="date_of_death",
                msg="Date of death must not be before date of birth",
                value=submitted["date_of_death"],
            )
        ]
    return []


def author_values(author: Author) -> dict[str, str]:
    """Form values for an existing author."""
    return {
        "first_name": author.first_name,
        "family_name": author.family_name,
        "date_of_birth": author.birth_day_for_fill_in,
        "date_of_death": author.death_day_for_fill_in,
    }


# -------------------------------------------------------------------------
# List
# -------------------------------------------------------------------------
@router.get("", summary="List all authors")
def author_list(request: Request, db: DbSession):
    stmt = select(Author).order_by(Author.family_name, Author.first_name)
    authors = db.execute(stmt).scalars().all()
    return render(
        request,
        "author_list.html",
        {"title": "Author List", "author_list": authors},
    )


# -------------------------------------------------------------------------
# Create
# -------------------------------------------------------------------------
@router.get("/create", summary="Author create form")
def author_create_get(request: Request):
    return render(
        request,
        "author_form.html",
        {"title": CREATE_TITLE, "values": {}},
    )


@router.post("/create", summary="Create an author")
def author_create_post(
    request: Request,
    db: DbSession,
    first_name: Annotated[str, Form()] = "",
    family_name: Annotated[str, Form()] = "",
    date_of_birth: Annotated[str, Form()] = "",
    date_of_death: Annotated[str, Form()] = "",
):
    submitted = {
        "first_name": first_name,
        "family_name": family_name,
        "date_of_birth": date_of_birth,
        "date_of_death": date_of_death,
    }
    form, errors = validate_form(AuthorForm, submitted)
    if form is not None:
        errors = check_lifespan(form, submitted)

    if errors:
        return render(
            request,
            "author_form.html",
            {
                "title": CREATE_TITLE,
                "values": sanitize_values(submitted),
                "errors": errors,
            },
        )

    author = Author(
        first_name=form.first_name,
        family_name=form.family_name,
        date_of_birth=form.date_of_birth,
        date_of_death=form.date_of_death,
    )
    db.add(author)
    db.commit()
    db.refresh(author)

    logger.info(f"Created author {author.id}: {author.name}")

    return RedirectResponse(author.url, status_code=status.HTTP_303_SEE_OTHER)


# -------------------------------------------------------------------------
# Detail
# -------------------------------------------------------------------------
@router.get("/{author_id:int}", summary="Author detail")
def author_detail(request: Request, author_id: int, db: DbSession):
    author = get_author_or_404(db, author_id)
    return render(
        request,
        "author_detail.html",
        {
            "title": "Author Detail",
            "author": author,
            "author_books": author_books(db, author_id),
        },
    )


# -------------------------------------------------------------------------
# Delete
# -------------------------------------------------------------------------
@router.get("/{author_id:int}/delete", summary="Author delete confirmation")
def author_delete_get(request: Request, author_id: int, db: DbSession):
    author = find_author(db, author_id)
    if author is None:
        return RedirectResponse("/catalog/authors", status_code=status.HTTP_303_SEE_OTHER)

    return render(
        request,
        "author_delete.html",
        {
            "title": DELETE_TITLE,
            "author": author,
            "author_books": author_books(db, author_id),
        },
    )


@router.post("/{author_id:int}/delete", summary="Delete an author")
def author_delete_post(request: Request, author_id: int, db: DbSession):
    """
    Delete an author who has no books.

    While books still reference the author, nothing is removed and the
    confirmation page is shown again listing them.
    """
    author = find_author(db, author_id)
    if author is None:
        return RedirectResponse("/catalog/authors", status_code=status.HTTP_303_SEE_OTHER)

    blockers = author_books(db, author_id)
    if not blockers:
        try:
            db.execute(delete(Author).where(Author.id == author_id))
            db.commit()
        except IntegrityError:
            # A book by this author was added after the check above
            db.rollback()
            blockers = author_books(db, author_id)
        else:
            logger.info(f"Deleted author {author_id}")
            return RedirectResponse("/catalog/authors", status_code=status.HTTP_303_SEE_OTHER)

    return render(
        request,
        "author_delete.html",
        {"title": DELETE_TITLE, "author": author, "author_books": blockers},
    )


# -------------------------------------------------------------------------
# Update
# -------------------------------------------------------------------------
@router.get("/{author_id:int}/update", summary="Author update form")
def author_update_get(request: Request, author_id: int, db: DbSession):
    author = get_author_or_404(db, author_id)
    return render(
        request,
        "author_form.html",
        {"title": UPDATE_TITLE, "author": author, "values": author_values(author)},
    )


@router.post("/{author_id:int}/update", summary="Update an author")
def author_update_post(
    request: Request,
    author_id: int,
    db: DbSession,
    first_name: Annotated[str, Form()] = "",
    family_name: Annotated[str, Form()] = "",
    date_of_birth: Annotated[str, Form()] = "",
    date_of_death: Annotated[str, Form()] = "",
):
    """
    Overwrite an author's fields, keeping the same id.

    A blank date clears the stored value.
    """
    author = get_author_or_404(db, author_id)

    submitted = {
        "first_name": first_name,
        "family_name": family_name,
        "date_of_birth": date_of_birth,
        "date_of_death": date_of_death,
    }
    form, errors = validate_form(AuthorForm, submitted)
    if form is not None:
        errors = check_lifespan(form, submitted)

    if errors:
        return render(
            request,
            "author_form.html",
            {
                "title": UPDATE_TITLE,
                "author": author,
                "values": sanitize_values(submitted),
                "errors": errors,
            },
        )

    author.first_name = form.first_name
    author.family_name = form.family_name
    author.date_of_birth = form.date_of_birth
    author.date_of_death = form.date_of_death
    db.commit()

    return RedirectResponse(author.url, status_code=status.HTTP_303_SEE_OTHER)
