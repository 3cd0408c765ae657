#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development and testing.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing catalog data (optional)
3. Creates sample authors, genres, books and copies
4. Establishes relationships between them

Text is stored HTML-escaped, the same way the catalog forms store it.
"""

import html
import sys
from datetime import date
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.database import SessionLocal, create_tables
from app.models import Author, Book, BookInstance, BookInstanceStatus, Genre, book_genres


def clear_data(db: Session) -> None:
    """Clear all existing catalog data (dependents first)."""
    print("Clearing existing data...")
    db.execute(delete(BookInstance))
    db.execute(delete(book_genres))
    db.execute(delete(Book))
    db.execute(delete(Author))
    db.execute(delete(Genre))
    db.commit()
    print("Data cleared.")


def create_authors(db: Session) -> dict[str, Author]:
    """Create sample authors."""
    print("Creating authors...")
    authors_data = [
        {"first_name": "Patrick", "family_name": "Rothfuss", "date_of_birth": date(1973, 6, 6)},
        {"first_name": "Ben", "family_name": "Bova", "date_of_birth": date(1932, 11, 8)},
        {
            "first_name": "Isaac",
            "family_name": "Asimov",
            "date_of_birth": date(1920, 1, 2),
            "date_of_death": date(1992, 4, 6),
        },
        {"first_name": "Bob", "family_name": "Billings"},
        {"first_name": "Jim", "family_name": "Jones", "date_of_birth": date(1971, 12, 16)},
    ]

    authors = {}
    for data in authors_data:
        author = Author(**data)
        db.add(author)
        authors[data["family_name"]] = author

    db.commit()
    for author in authors.values():
        db.refresh(author)

    print(f"Created {len(authors)} authors.")
    return authors


def create_genres(db: Session) -> dict[str, Genre]:
    """Create sample genres."""
    print("Creating genres...")
    names = ["Fantasy", "Science Fiction", "French Poetry"]

    genres = {}
    for name in names:
        genre = Genre(name=name)
        db.add(genre)
        genres[name] = genre

    db.commit()
    for genre in genres.values():
        db.refresh(genre)

    print(f"Created {len(genres)} genres.")
    return genres


def create_books(
    db: Session,
    authors: dict[str, Author],
    genres: dict[str, Genre],
) -> dict[str, Book]:
    """Create sample books with author and genre relationships."""
    print("Creating books...")

    books_data = [
        {
            "title": "The Name of the Wind (The Kingkiller Chronicle, #1)",
            "summary": "I have stolen princesses back from sleeping barrow kings. "
                       "I burned down the town of Trebon. I have spent the night with Felurian.",
            "isbn": "9781473211896",
            "author": "Rothfuss",
            "genres": ["Fantasy"],
        },
        {
            "title": "The Wise Man's Fear (The Kingkiller Chronicle, #2)",
            "summary": "Picking up the tale of Kvothe Kingkiller once again, we follow him "
                       "into exile, into political intrigue, courtship and adventure.",
            "isbn": "9788401352836",
            "author": "Rothfuss",
            "genres": ["Fantasy"],
        },
        {
            "title": "The Slow Regard of Silent Things (Kingkiller Chronicle)",
            "summary": "Deep below the University, there is a dark place. "
                       "Few people know of it: a broken web of ancient passageways.",
            "isbn": "9780756411336",
            "author": "Rothfuss",
            "genres": ["Fantasy"],
        },
        {
            "title": "Apes and Angels",
            "summary": "Humankind headed out to the stars not for conquest, nor exploration, "
                       "nor even for curiosity. Humans went to the stars in a desperate crusade.",
            "isbn": "9780765379528",
            "author": "Bova",
            "genres": ["Science Fiction"],
        },
        {
            "title": "Death Wave",
            "summary": "In Ben Bova's previous novel New Earth, Jordan Kell led the first "
                       "human mission beyond the solar system to meet a new civilization.",
            "isbn": "9780765379504",
            "author": "Bova",
            "genres": ["Science Fiction"],
        },
        {
            "title": "Test Book 1",
            "summary": "Summary of test book 1, long enough to satisfy the catalog form rules.",
            "isbn": "ISBN111111",
            "author": "Billings",
            "genres": ["French Poetry", "Fantasy"],
        },
        {
            "title": "Test Book 2",
            "summary": "Summary of test book 2, long enough to satisfy the catalog form rules.",
            "isbn": "ISBN222222",
            "author": "Billings",
            "genres": [],
        },
    ]

    books = {}
    for data in books_data:
        book = Book(
            title=html.escape(data["title"]),
            summary=html.escape(data["summary"]),
            isbn=data["isbn"],
            author=authors[data["author"]],
            genres=[genres[name] for name in data["genres"]],
        )
        db.add(book)
        books[data["title"]] = book

    db.commit()
    for book in books.values():
        db.refresh(book)

    print(f"Created {len(books)} books.")
    return books


def create_book_instances(db: Session, books: dict[str, Book]) -> list[BookInstance]:
    """Create physical copies in every status."""
    print("Creating book instances...")

    status = BookInstanceStatus
    copies_data = [
        ("The Name of the Wind (The Kingkiller Chronicle, #1)", "London Gollancz, 2014.", status.AVAILABLE, None),
        ("The Wise Man's Fear (The Kingkiller Chronicle, #2)", " Gollancz, 2011.", status.LOANED, date(2026, 11, 1)),
        ("The Slow Regard of Silent Things (Kingkiller Chronicle)", "Gollancz, 2015.", status.AVAILABLE, None),
        ("Apes and Angels", "New York Tom Doherty Associates, 2016.", status.AVAILABLE, None),
        ("Apes and Angels", "New York Tom Doherty Associates, 2016.", status.AVAILABLE, None),
        ("Death Wave", "New York, NY Tom Doherty Associates, LLC, 2015.", status.AVAILABLE, None),
        ("Death Wave", "New York, NY Tom Doherty Associates, LLC, 2015.", status.MAINTENANCE, None),
        ("Death Wave", "New York, NY Tom Doherty Associates, LLC, 2015.", status.LOANED, date(2026, 12, 15)),
        ("Test Book 1", "Imprint XXX2", status.RESERVED, None),
        ("Test Book 2", "Imprint XXX3", status.MAINTENANCE, None),
    ]

    copies = []
    for title, imprint, copy_status, due_back in copies_data:
        copy = BookInstance(
            book=books[title],
            imprint=html.escape(imprint.strip()),
            status=copy_status.value,
            due_back=due_back or date.today(),
        )
        db.add(copy)
        copies.append(copy)

    db.commit()

    print(f"Created {len(copies)} book instances.")
    return copies


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing catalog data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        authors = create_authors(db)
        genres = create_genres(db)
        books = create_books(db, authors, genres)
        copies = create_book_instances(db, books)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(authors)}")
        print(f"  - Genres: {len(genres)}")
        print(f"  - Books: {len(books)}")
        print(f"  - Copies: {len(copies)}")
        print("\nYou can now browse the catalog at http://localhost:3000/catalog/books")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
