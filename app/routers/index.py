"""
Index Router

The catalog home page: how many records of each kind the library holds.
"""

from fastapi import APIRouter, Request
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.dependencies import DbSession
from app.models import Author, Book, BookInstance, BookInstanceStatus, Genre
from app.rendering import render

router = APIRouter(tags=["Home"])


def count_rows(db: Session, stmt) -> int:
    return db.execute(stmt).scalar_one()


@router.get("/", summary="Catalog home page")
def index(request: Request, db: DbSession):
    """
    Show the record counts.

    The counts are independent queries on the request's session; they all
    finish before the page is rendered.
    """
    counts = {
        "book_count": count_rows(db, select(func.count(Book.id))),
        "book_instance_count": count_rows(db, select(func.count(BookInstance.id))),
        "book_instance_available_count": count_rows(
            db,
            select(func.count(BookInstance.id)).where(
                BookInstance.status == BookInstanceStatus.AVAILABLE.value
            ),
        ),
        "author_count": count_rows(db, select(func.count(Author.id))),
        "genre_count": count_rows(db, select(func.count(Genre.id))),
    }
    return render(
        request,
        "index.html",
        {"title": "Local Library Home", "data": counts},
    )
