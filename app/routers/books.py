"""
Books Router

List, detail, create, update and delete pages for books.

This is the most involved catalog router, demonstrating:
- Form validation with field-level error messages
- Re-rendering a form with the submitted (sanitized) values
- Resolving submitted reference ids to existing rows
- Many-to-many updates (genres)
- Delete guarded by dependent records (book instances)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.dependencies import DbSession
from app.models import Author, Book, BookInstance, Genre
from app.rendering import render
from app.schemas import BookForm, FieldError, sanitize_values, validate_form
from app.utils import parse_id

logger = logging.getLogger(__name__)

# =============================================================================
# Router Configuration
# =============================================================================
# Paths use the :int convertor so that /create never matches a detail
# route and a non-numeric id is a plain 404.

router = APIRouter(
    prefix="/catalog/books",
    tags=["Books"],
)

CREATE_TITLE = "Create Book"
UPDATE_TITLE = "Update Book"
DELETE_TITLE = "Delete Book"


# =============================================================================
# Helper Functions
# =============================================================================
def find_book(db: Session, book_id: int) -> Book | None:
    stmt = (
        select(Book)
        .options(
            selectinload(Book.author),
            selectinload(Book.genres),
            selectinload(Book.instances),
        )
        .where(Book.id == book_id)
    )
    return db.execute(stmt).scalar_one_or_none()


def get_book_or_404(db: Session, book_id: int) -> Book:
    """
    Get a book by ID or raise 404.

    Eagerly loads author, genres and instances for the detail page.

    Raises:
        HTTPException: 404 if book not found
    """
    book = find_book(db, book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found",
        )
    return book


def book_instances(db: Session, book_id: int) -> list[BookInstance]:
    stmt = (
        select(BookInstance)
        .where(BookInstance.book_id == book_id)
        .order_by(BookInstance.id)
    )
    return list(db.execute(stmt).scalars().all())


def form_choices(db: Session) -> dict:
    """Authors and genres offered by the book form."""
    authors = db.execute(
        select(Author).order_by(Author.family_name, Author.first_name)
    ).scalars().all()
    genres = db.execute(select(Genre).order_by(Genre.name)).scalars().all()
    return {"authors": authors, "genres": genres}


def resolve_references(
    db: Session,
    form: BookForm,
) -> tuple[Author | None, list[Genre], list[FieldError]]:
    """
    Look up the author and genres a valid form points at.

    Returns:
        Tuple of (author, genres, errors). Errors are reported against the
        author/genre fields when an id is malformed or no such row exists.
    """
    errors: list[FieldError] = []

    author_id = parse_id(form.author)
    author = db.get(Author, author_id) if author_id is not None else None
    if author is None:
        errors.append(
            FieldError(param="author", msg="Selected author does not exist", value=form.author)
        )

    genres: list[Genre] = []
    parsed = [parse_id(g) for g in form.genre]
    wanted = {g for g in parsed if g is not None}
    if wanted:
        genres = list(
            db.execute(
                select(Genre).where(Genre.id.in_(wanted)).order_by(Genre.name)
            ).scalars().all()
        )
    if None in parsed or len(genres) != len(wanted):
        errors.append(
            FieldError(param="genre", msg="Selected genre does not exist", value=",".join(form.genre))
        )

    return author, genres, errors


def submitted_values(submitted: dict) -> dict:
    """Sanitized copy of a submitted form, keeping genre as a list of ids."""
    values = sanitize_values({k: v for k, v in submitted.items() if k != "genre"})
    values["genre"] = [str(g) for g in submitted["genre"]]
    return values


def book_values(book: Book) -> dict:
    """Form values for an existing book."""
    return {
        "title": book.title,
        "author": str(book.author_id),
        "summary": book.summary,
        "isbn": book.isbn,
        "genre": [str(g.id) for g in book.genres],
    }


# =============================================================================
# List
# =============================================================================
@router.get("", summary="List all books")
def book_list(request: Request, db: DbSession):
    """List every book, ordered by title, with its author."""
    stmt = select(Book).options(selectinload(Book.author)).order_by(Book.title)
    books = db.execute(stmt).scalars().all()
    return render(
        request,
        "book_list.html",
        {"title": "Book List", "book_list": books},
    )


# =============================================================================
# Create
# =============================================================================
@router.get("/create", summary="Book create form")
def book_create_get(request: Request, db: DbSession):
    return render(
        request,
        "book_form.html",
        {"title": CREATE_TITLE, "values": {"genre": []}, **form_choices(db)},
    )


@router.post("/create", summary="Create a book")
def book_create_post(
    request: Request,
    db: DbSession,
    title: Annotated[str, Form()] = "",
    author: Annotated[str, Form()] = "",
    summary: Annotated[str, Form()] = "",
    isbn: Annotated[str, Form()] = "",
    genre: Annotated[list[str] | None, Form()] = None,
):
    """
    Create a new book.

    Validation errors re-render the form with the submitted values and
    every author and genre to choose from, genres already ticked.
    """
    submitted = {
        "title": title,
        "author": author,
        "summary": summary,
        "isbn": isbn,
        "genre": genre or [],
    }
    form, errors = validate_form(BookForm, submitted)

    book_author, genres = None, []
    if form is not None:
        book_author, genres, errors = resolve_references(db, form)

    if errors:
        return render(
            request,
            "book_form.html",
            {
                "title": CREATE_TITLE,
                "values": submitted_values(submitted),
                "errors": errors,
                **form_choices(db),
            },
        )

    book = Book(
        title=form.title,
        summary=form.summary,
        isbn=form.isbn,
        author=book_author,
        genres=genres,
    )
    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Created book {book.id}: {book.title}")

    return RedirectResponse(book.url, status_code=status.HTTP_303_SEE_OTHER)


# =============================================================================
# Detail
# =============================================================================
@router.get("/{book_id:int}", summary="Book detail")
def book_detail(request: Request, book_id: int, db: DbSession):
    book = get_book_or_404(db, book_id)
    return render(
        request,
        "book_detail.html",
        {
            "title": book.title,
            "book": book,
            "book_instances": book_instances(db, book_id),
        },
    )


# =============================================================================
# Delete
# =============================================================================
@router.get("/{book_id:int}/delete", summary="Book delete confirmation")
def book_delete_get(request: Request, book_id: int, db: DbSession):
    book = find_book(db, book_id)
    if book is None:
        return RedirectResponse("/catalog/books", status_code=status.HTTP_303_SEE_OTHER)

    return render(
        request,
        "book_delete.html",
        {
            "title": DELETE_TITLE,
            "book": book,
            "book_instances": book_instances(db, book_id),
        },
    )


@router.post("/{book_id:int}/delete", summary="Delete a book")
def book_delete_post(request: Request, book_id: int, db: DbSession):
    """
    Delete a book that has no copies.

    While copies still reference the book, nothing is removed and the
    confirmation page is shown again listing them. The book's genre links
    go with it.
    """
    book = find_book(db, book_id)
    if book is None:
        return RedirectResponse("/catalog/books", status_code=status.HTTP_303_SEE_OTHER)

    blockers = book_instances(db, book_id)
    if not blockers:
        try:
            db.execute(delete(Book).where(Book.id == book_id))
            db.commit()
        except IntegrityError:
            # A copy was added after the check above
            db.rollback()
            blockers = book_instances(db, book_id)
        else:
            logger.info(f"Deleted book {book_id}")
            return RedirectResponse("/catalog/books", status_code=status.HTTP_303_SEE_OTHER)

    return render(
        request,
        "book_delete.html",
        {"title": DELETE_TITLE, "book": book, "book_instances": blockers},
    )


# =============================================================================
# Update
# =============================================================================
@router.get("/{book_id:int}/update", summary="Book update form")
def book_update_get(request: Request, book_id: int, db: DbSession):
    book = get_book_or_404(db, book_id)
    return render(
        request,
        "book_form.html",
        {
            "title": UPDATE_TITLE,
            "book": book,
            "values": book_values(book),
            **form_choices(db),
        },
    )


@router.post("/{book_id:int}/update", summary="Update a book")
def book_update_post(
    request: Request,
    book_id: int,
    db: DbSession,
    title: Annotated[str, Form()] = "",
    author: Annotated[str, Form()] = "",
    summary: Annotated[str, Form()] = "",
    isbn: Annotated[str, Form()] = "",
    genre: Annotated[list[str] | None, Form()] = None,
):
    """
    Overwrite a book's fields, keeping the same id.

    The genre set is replaced by exactly the genres submitted, so unticking
    every box clears it.
    """
    book = get_book_or_404(db, book_id)

    submitted = {
        "title": title,
        "author": author,
        "summary": summary,
        "isbn": isbn,
        "genre": genre or [],
    }
    form, errors = validate_form(BookForm, submitted)

    book_author, genres = None, []
    if form is not None:
        book_author, genres, errors = resolve_references(db, form)

    if errors:
        return render(
            request,
            "book_form.html",
            {
                "title": UPDATE_TITLE,
                "book": book,
                "values": submitted_values(submitted),
                "errors": errors,
                **form_choices(db),
            },
        )

    book.title = form.title
    book.summary = form.summary
    book.isbn = form.isbn
    book.author = book_author
    book.genres = genres
    db.commit()

    return RedirectResponse(book.url, status_code=status.HTTP_303_SEE_OTHER)
