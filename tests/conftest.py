"""
pytest Fixtures for Local Library Tests

This file contains shared fixtures used across all test files.

WHAT ARE FIXTURES?
==================
Fixtures are reusable test setup/teardown functions.
They provide:
- Test data (sample books, authors, copies, users)
- Test resources (database connections, HTTP clients)
- Setup/cleanup logic (create/drop tables)

For database tests, we use:
- session scope for engine (expensive to create)
- function scope for sessions (isolation between tests)
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, sets test secrets and keeps bcrypt fast
import os

os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SESSION_SECRET"] = "test-session-secret-for-unit-tests-at-least-32-chars"
os.environ["COOKIE_SECRET"] = "test-cookie-secret-for-unit-tests-at-least-32-chars"
os.environ["BCRYPT_ROUNDS"] = "4"

from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Author, Book, BookInstance, BookInstanceStatus, Genre, User
from app.services.security import hash_password

SUMMARY = (
    "A dystopian novel about surveillance, propaganda and the quiet "
    "erasure of truth in a totalitarian state."
)

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# We use SQLite in-memory for tests because:
# - Fast: No disk I/O, runs in memory
# - Isolated: Each test run starts fresh
# - Simple: No external database needed
#
# Foreign keys are enforced on every SQLite connection (see app.database),
# so the RESTRICT constraints behave as they do on PostgreSQL.


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the connection alive for the entire session.
    Without it, SQLite in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN and would let a SAVEPOINT open (and RELEASE
    # commit) the outer transaction. Take over BEGIN so SAVEPOINTs nest
    # inside the per-test transaction.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is wrapped in a transaction that's rolled back,
    ensuring test isolation without needing to recreate tables.

    Commits and rollbacks issued by the app run inside a SAVEPOINT, so a
    handler that rolls back keeps the rows the fixtures created.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        join_transaction_mode="create_savepoint",
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    The client keeps cookies between requests, like a browser.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_author(db_session: Session) -> Author:
    """Create a sample author for testing."""
    author = Author(
        first_name="George",
        family_name="Orwell",
        date_of_birth=date(1903, 6, 25),
        date_of_death=date(1950, 1, 21),
    )
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_genre(db_session: Session) -> Genre:
    """Create a sample genre for testing."""
    genre = Genre(name="Science Fiction")
    db_session.add(genre)
    db_session.commit()
    db_session.refresh(genre)
    return genre


@pytest.fixture
def sample_book(
    db_session: Session,
    sample_author: Author,
    sample_genre: Genre,
) -> Book:
    """
    Create a sample book with author and genre.

    This fixture depends on sample_author and sample_genre fixtures.
    pytest automatically resolves these dependencies.
    """
    book = Book(
        title="1984",
        summary=SUMMARY,
        isbn="9780451524935",
        author=sample_author,
        genres=[sample_genre],
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def sample_book_instance(db_session: Session, sample_book: Book) -> BookInstance:
    """Create an available copy of the sample book."""
    book_instance = BookInstance(
        book=sample_book,
        imprint="Secker and Warburg, 1949",
        status=BookInstanceStatus.AVAILABLE.value,
        due_back=date(2026, 1, 1),
    )
    db_session.add(book_instance)
    db_session.commit()
    db_session.refresh(book_instance)
    return book_instance


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    user = User(
        username="testuser",
        hashed_password=hash_password("SecurePass123"),
        email="testuser@example.com",
        first_name="Test",
        family_name="User",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def logged_in_client(client: TestClient, sample_user: User) -> TestClient:
    """A client whose cookie carries an authenticated session."""
    response = client.post(
        "/users/login",
        data={"username": "testuser", "password": "SecurePass123"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/users/profile"
    return client
