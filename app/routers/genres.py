"""
Genres Router

List, detail, create, update and delete pages for genres.
Follows the same patterns as the books router.

Genre names are kept unique here, not in the database: create redirects to
the existing genre of the same name, update refuses a name another genre
already uses.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.dependencies import DbSession
from app.models import Book, Genre, book_genres
from app.rendering import render
from app.schemas import FieldError, GenreForm, sanitize_values, validate_form

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/catalog/genres",
    tags=["Genres"],
)

CREATE_TITLE = "Create Genre"
UPDATE_TITLE = "Update Genre"
DELETE_TITLE = "Delete Genre"


def find_genre(db: Session, genre_id: int) -> Genre | None:
    stmt = (
        select(Genre)
        .options(selectinload(Genre.books))
        .where(Genre.id == genre_id)
    )
    return db.execute(stmt).scalar_one_or_none()


def get_genre_or_404(db: Session, genre_id: int) -> Genre:
    """Get a genre by ID or raise 404."""
    genre = find_genre(db, genre_id)
    if genre is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Genre not found",
        )
    return genre


def find_genre_by_name(db: Session, name: str) -> Genre | None:
    stmt = select(Genre).where(func.lower(Genre.name) == name.lower()).limit(1)
    return db.execute(stmt).scalars().first()


def genre_books(db: Session, genre_id: int) -> list[Book]:
    stmt = (
        select(Book)
        .join(book_genres, book_genres.c.book_id == Book.id)
        .where(book_genres.c.genre_id == genre_id)
        .order_by(Book.title)
    )
    return list(db.execute(stmt).scalars().all())


# -------------------------------------------------------------------------
# List & Detail
# -------------------------------------------------------------------------
@router.get("", summary="List all genres")
def genre_list(request: Request, db: DbSession):
    genres = db.execute(select(Genre).order_by(Genre.name)).scalars().all()
    return render(
        request,
        "genre_list.html",
        {"title": "Genre List", "genre_list": genres},
    )


# -------------------------------------------------------------------------
# Create
# -------------------------------------------------------------------------
@router.get("/create", summary="Genre create form")
def genre_create_get(request: Request):
    return render(
        request,
        "genre_form.html",
        {"title": CREATE_TITLE, "values": {}},
    )


@router.post("/create", summary="Create a genre")
def genre_create_post(
    request: Request,
    db: DbSession,
    name: Annotated[str, Form()] = "",
):
    """
    Create a new genre.

    If a genre with the same name already exists, no new record is saved
    and the browser is sent to the existing genre instead.
    """
    form, errors = validate_form(GenreForm, {"name": name})

    if errors:
        return render(
            request,
            "genre_form.html",
            {
                "title": CREATE_TITLE,
                "values": sanitize_values({"name": name}),
                "errors": errors,
            },
        )

    existing = find_genre_by_name(db, form.name)
    if existing is not None:
        return RedirectResponse(existing.url, status_code=status.HTTP_303_SEE_OTHER)

    genre = Genre(name=form.name)
    db.add(genre)
    db.commit()
    db.refresh(genre)

    logger.info(f"Created genre {genre.id}: {genre.name}")

    return RedirectResponse(genre.url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{genre_id:int}", summary="Genre detail")
def genre_detail(request: Request, genre_id: int, db: DbSession):
    genre = get_genre_or_404(db, genre_id)
    return render(
        request,
        "genre_detail.html",
        {
            "title": f"Genre: {genre.name}",
            "genre": genre,
            "genre_books": genre_books(db, genre_id),
        },
    )


# -------------------------------------------------------------------------
# Delete
# -------------------------------------------------------------------------
@router.get("/{genre_id:int}/delete", summary="Genre delete confirmation")
def genre_delete_get(request: Request, genre_id: int, db: DbSession):
    genre = find_genre(db, genre_id)
    if genre is None:
        return RedirectResponse("/catalog/genres", status_code=status.HTTP_303_SEE_OTHER)

    return render(
        request,
        "genre_delete.html",
        {
            "title": DELETE_TITLE,
            "genre": genre,
            "genre_books": genre_books(db, genre_id),
        },
    )


@router.post("/{genre_id:int}/delete", summary="Delete a genre")
def genre_delete_post(request: Request, genre_id: int, db: DbSession):
    """
    Delete a genre that no book belongs to.

    While books still reference the genre, nothing is removed and the
    confirmation page is shown again listing them.
    """
    genre = find_genre(db, genre_id)
    if genre is None:
        return RedirectResponse("/catalog/genres", status_code=status.HTTP_303_SEE_OTHER)

    blockers = genre_books(db, genre_id)
    if not blockers:
        try:
            db.execute(delete(Genre).where(Genre.id == genre_id))
            db.commit()
        except IntegrityError:
            # A book was filed under the genre after the check above
            db.rollback()
            blockers = genre_books(db, genre_id)
        else:
            logger.info(f"Deleted genre {genre_id}")
            return RedirectResponse("/catalog/genres", status_code=status.HTTP_303_SEE_OTHER)

    return render(
        request,
        "genre_delete.html",
        {"title": DELETE_TITLE, "genre": genre, "genre_books": blockers},
    )


# -------------------------------------------------------------------------
# Update
# -------------------------------------------------------------------------
@router.get("/{genre_id:int}/update", summary="Genre update form")
def genre_update_get(request: Request, genre_id: int, db: DbSession):
    genre = get_genre_or_404(db, genre_id)
    return render(
        request,
        "genre_form.html",
        {"title": UPDATE_TITLE, "genre": genre, "values": {"name": genre.name}},
    )


@router.post("/{genre_id:int}/update", summary="Update a genre")
def genre_update_post(
    request: Request,
    genre_id: int,
    db: DbSession,
    name: Annotated[str, Form()] = "",
):
    genre = get_genre_or_404(db, genre_id)
    form, errors = validate_form(GenreForm, {"name": name})

    if not errors:
        clash = find_genre_by_name(db, form.name)
        if clash is not None and clash.id != genre.id:
            errors = [FieldError(param="name", msg="Genre already exists", value=name)]

    if errors:
        return render(
            request,
            "genre_form.html",
            {
                "title": UPDATE_TITLE,
                "genre": genre,
                "values": sanitize_values({"name": name}),
                "errors": errors,
            },
        )

    genre.name = form.name
    db.commit()

    return RedirectResponse(genre.url, status_code=status.HTTP_303_SEE_OTHER)
