"""
Tests for the Home Page, Health Check and Error Pages
"""

from fastapi import status

from app.models import BookInstance


class TestIndex:
    def test_home_page_counts(self, client, db_session, sample_book_instance, sample_book):
        db_session.add(BookInstance(book=sample_book, imprint="Penguin", status="Loaned"))
        db_session.commit()

        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert "<strong>Books:</strong> 1" in response.text
        assert "<strong>Copies:</strong> 2" in response.text
        assert "<strong>Copies available:</strong> 1" in response.text
        assert "<strong>Authors:</strong> 1" in response.text
        assert "<strong>Genres:</strong> 1" in response.text

    def test_layout_for_anonymous_visitor(self, client):
        response = client.get("/")

        assert "Log in" in response.text
        assert "Sign up" in response.text


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "ok"
        assert data["rate_limiting"]["enabled"] is False


class TestErrorPages:
    def test_unknown_route_renders_error_page(self, client):
        response = client.get("/no/such/page")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "text/html" in response.headers["content-type"]
        assert "Not Found" in response.text

    def test_wrong_method(self, client):
        response = client.delete("/catalog/books")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert "Method Not Allowed" in response.text
