"""
Test Suite for the Local Library

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_books.py, test_authors.py, test_genres.py, test_book_instances.py:
  catalog pages under /catalog
- test_users.py: signup, login, logout and profile pages
- test_sessions.py: session, flash and authentication services
- test_validation.py: form schemas
- test_models.py: display fields and date helpers
- test_main.py: home page, health check, error pages

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
