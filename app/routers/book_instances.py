"""
Book Instances Router

List, detail, create, update and delete pages for the physical copies of
books. Nothing depends on a copy, so deletes are never blocked.
"""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from app.dependencies import DbSession
from app.models import Book, BookInstance, BookInstanceStatus
from app.models.book_instance import STATUS_LABELS
from app.rendering import render
from app.schemas import BookInstanceForm, FieldError, sanitize_values, validate_form
from app.utils import parse_id

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/catalog/bookinstances",
    tags=["Book Instances"],
)

CREATE_TITLE = "Create BookInstance"
UPDATE_TITLE = "Update BookInstance"
DELETE_TITLE = "Delete BookInstance"

# (value, label) pairs for the status <select>
STATUS_CHOICES = [(s.value, STATUS_LABELS[s.value]) for s in BookInstanceStatus]


def find_book_instance(db: Session, instance_id: int) -> BookInstance | None:
    stmt = (
        select(BookInstance)
        .options(selectinload(BookInstance.book))
        .where(BookInstance.id == instance_id)
    )
    return db.execute(stmt).scalar_one_or_none()


def get_book_instance_or_404(db: Session, instance_id: int) -> BookInstance:
    """Get a book instance by ID or raise 404."""
    book_instance = find_book_instance(db, instance_id)
    if book_instance is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book copy not found",
        )
    return book_instance


def form_choices(db: Session) -> dict:
    books = db.execute(select(Book).order_by(Book.title)).scalars().all()
    return {"book_list": books, "status_choices": STATUS_CHOICES}


def resolve_book(db: Session, form: BookInstanceForm) -> tuple[Book | None, list[FieldError]]:
    book_id = parse_id(form.book)
    book = db.get(Book, book_id) if book_id is not None else None
    if book is None:
        return None, [FieldError(param="book", msg="Book must be specified", value=form.book)]
    return book, []


def book_instance_values(book_instance: BookInstance) -> dict[str, str]:
    """Form values for an existing copy."""
    return {
        "book": str(book_instance.book_id),
        "imprint": book_instance.imprint,
        "status": book_instance.status,
        "due_back": book_instance.due_back_for_fill_in,
    }


# -------------------------------------------------------------------------
# List
# -------------------------------------------------------------------------
@router.get("", summary="List all book instances")
def book_instance_list(request: Request, db: DbSession):
    stmt = (
        select(BookInstance)
        .options(selectinload(BookInstance.book))
        .order_by(BookInstance.id)
    )
    instances = db.execute(stmt).scalars().all()
    return render(
        request,
        "bookinstance_list.html",
        {"title": "Book Instance List", "bookinstance_list": instances},
    )


# -------------------------------------------------------------------------
# Create
# -------------------------------------------------------------------------
@router.get("/create", summary="Book instance create form")
def book_instance_create_get(
    request: Request,
    db: DbSession,
    book: str = "",
):
    """Show the form, optionally with a book preselected (?book=<id>)."""
    values = {"book": book, "status": BookInstanceStatus.MAINTENANCE.value}
    return render(
        request,
        "bookinstance_form.html",
        {"title": CREATE_TITLE, "values": sanitize_values(values), **form_choices(db)},
    )


@router.post("/create", summary="Create a book instance")
def book_instance_create_post(
    request: Request,
    db: DbSession,
    book: Annotated[str, Form()] = "",
    imprint: Annotated[str, Form()] = "",
    status_: Annotated[str, Form(alias="status")] = "",
    due_back: Annotated[str, Form()] = "",
):
    """
    Create a new copy of an existing book.

    A blank status means Maintenance and a blank due-back date means today.
    """
    submitted = {
        "book": book,
        "imprint": imprint,
        "status": status_,
        "due_back": due_back,
    }
    form, errors = validate_form(BookInstanceForm, submitted)

    copy_of = None
    if form is not None:
        copy_of, errors = resolve_book(db, form)

    if errors:
        return render(
            request,
            "bookinstance_form.html",
            {
                "title": CREATE_TITLE,
                "values": sanitize_values(submitted),
                "errors": errors,
                **form_choices(db),
            },
        )

    book_instance = BookInstance(
        book=copy_of,
        imprint=form.imprint,
        status=form.status,
        due_back=form.due_back or date.today(),
    )
    db.add(book_instance)
    db.commit()
    db.refresh(book_instance)

    logger.info(f"Created book instance {book_instance.id} of book {copy_of.id}")

    return RedirectResponse(book_instance.url, status_code=status.HTTP_303_SEE_OTHER)


# -------------------------------------------------------------------------
# Detail
# -------------------------------------------------------------------------
@router.get("/{instance_id:int}", summary="Book instance detail")
def book_instance_detail(request: Request, instance_id: int, db: DbSession):
    book_instance = get_book_instance_or_404(db, instance_id)
    return render(
        request,
        "bookinstance_detail.html",
        {
            "title": f"Copy: {book_instance.book.title}",
            "bookinstance": book_instance,
        },
    )


# -------------------------------------------------------------------------
# Delete
# -------------------------------------------------------------------------
@router.get("/{instance_id:int}/delete", summary="Book instance delete confirmation")
def book_instance_delete_get(request: Request, instance_id: int, db: DbSession):
    book_instance = find_book_instance(db, instance_id)
    if book_instance is None:
        return RedirectResponse(
            "/catalog/bookinstances", status_code=status.HTTP_303_SEE_OTHER
        )

    return render(
        request,
        "bookinstance_delete.html",
        {"title": DELETE_TITLE, "bookinstance": book_instance},
    )


@router.post("/{instance_id:int}/delete", summary="Delete a book instance")
def book_instance_delete_post(request: Request, instance_id: int, db: DbSession):
    result = db.execute(delete(BookInstance).where(BookInstance.id == instance_id))
    db.commit()

    if result.rowcount:
        logger.info(f"Deleted book instance {instance_id}")

    return RedirectResponse("/catalog/bookinstances", status_code=status.HTTP_303_SEE_OTHER)


# -------------------------------------------------------------------------
# Update
# -------------------------------------------------------------------------
@router.get("/{instance_id:int}/update", summary="Book instance update form")
def book_instance_update_get(request: Request, instance_id: int, db: DbSession):
    book_instance = get_book_instance_or_404(db, instance_id)
    return render(
        request,
        "bookinstance_form.html",
        {
            "title": UPDATE_TITLE,
            "bookinstance": book_instance,
            "values": book_instance_values(book_instance),
            **form_choices(db),
        },
    )


@router.post("/{instance_id:int}/update", summary="Update a book instance")
def book_instance_update_post(
    request: Request,
    instance_id: int,
    db: DbSession,
    book: Annotated[str, Form()] = "",
    imprint: Annotated[str, Form()] = "",
    status_: Annotated[str, Form(alias="status")] = "",
    due_back: Annotated[str, Form()] = "",
):
    book_instance = get_book_instance_or_404(db, instance_id)

    submitted = {
        "book": book,
        "imprint": imprint,
        "status": status_,
        "due_back": due_back,
    }
    form, errors = validate_form(BookInstanceForm, submitted)

    copy_of = None
    if form is not None:
        copy_of, errors = resolve_book(db, form)

    if errors:
        return render(
            request,
            "bookinstance_form.html",
            {
                "title": UPDATE_TITLE,
                "bookinstance": book_instance,
                "values": sanitize_values(submitted),
                "errors": errors,
                **form_choices(db),
            },
        )

    book_instance.book = copy_of
    book_instance.imprint = form.imprint
    book_instance.status = form.status
    book_instance.due_back = form.due_back or date.today()
    db.commit()

    return RedirectResponse(book_instance.url, status_code=status.HTTP_303_SEE_OTHER)
