"""
Tests for Book Instance Pages

Tests for /catalog/bookinstances pages.
"""

from datetime import date

from fastapi import status
from sqlalchemy import func, select

from app.models import BookInstance


def instance_count(db_session) -> int:
    return db_session.execute(select(func.count(BookInstance.id))).scalar_one()


class TestListBookInstances:
    """Tests for GET /catalog/bookinstances."""

    def test_list_empty(self, client):
        response = client.get("/catalog/bookinstances")

        assert response.status_code == status.HTTP_200_OK
        assert "There are no book copies in this library." in response.text

    def test_list_shows_book_and_status(self, client, sample_book_instance):
        response = client.get("/catalog/bookinstances")

        assert "1984 : Secker and Warburg, 1949" in response.text
        assert "可借閱" in response.text


class TestBookInstanceDetail:
    """Tests for GET /catalog/bookinstances/{id}."""

    def test_detail(self, client, sample_book_instance):
        response = client.get(f"/catalog/bookinstances/{sample_book_instance.id}")

        assert response.status_code == status.HTTP_200_OK
        assert "Copy: 1984" in response.text
        assert "可借閱" in response.text

    def test_detail_shows_due_date_when_not_available(
        self, client, db_session, sample_book_instance
    ):
        sample_book_instance.status = "Loaned"
        sample_book_instance.due_back = date(2024, 3, 1)
        db_session.commit()

        response = client.get(sample_book_instance.url)

        assert "已被借閱" in response.text
        assert "March 1st, 2024" in response.text

    def test_detail_not_found(self, client):
        response = client.get("/catalog/bookinstances/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "Book copy not found" in response.text


class TestCreateBookInstance:
    """Tests for /catalog/bookinstances/create."""

    def test_create_form_lists_books(self, client, sample_book):
        response = client.get("/catalog/bookinstances/create")

        assert response.status_code == status.HTTP_200_OK
        assert "1984" in response.text
        assert "書本保養中" in response.text

    def test_create_form_preselects_book(self, client, sample_book):
        response = client.get(f"/catalog/bookinstances/create?book={sample_book.id}")

        assert f'value="{sample_book.id}" selected' in response.text

    def test_create_available_copy_shows_localized_label(self, client, db_session, sample_book):
        response = client.post(
            "/catalog/bookinstances/create",
            data={
                "book": str(sample_book.id),
                "imprint": "Penguin, 2008",
                "status": "Available",
                "due_back": "2026-05-01",
            },
            follow_redirects=False,
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        book_instance = db_session.execute(select(BookInstance)).scalar_one()
        assert response.headers["location"] == f"/catalog/bookinstances/{book_instance.id}"
        assert book_instance.status == "Available"
        assert book_instance.due_back == date(2026, 5, 1)

        detail = client.get(response.headers["location"])
        assert "可借閱" in detail.text

    def test_blank_status_and_due_back_use_defaults(self, client, db_session, sample_book):
        response = client.post(
            "/catalog/bookinstances/create",
            data={"book": str(sample_book.id), "imprint": "Penguin, 2008"},
            follow_redirects=False,
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        book_instance = db_session.execute(select(BookInstance)).scalar_one()
        assert book_instance.status == "Maintenance"
        assert book_instance.due_back == date.today()

    def test_missing_fields(self, client, db_session):
        response = client.post(
            "/catalog/bookinstances/create",
            data={"book": "", "imprint": "", "status": "Lost", "due_back": "soon"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert "Book must be specified" in response.text
        assert "Imprint must be specified" in response.text
        assert "Invalid status" in response.text
        assert "Invalid date" in response.text
        assert instance_count(db_session) == 0

    def test_unknown_book(self, client, db_session):
        response = client.post(
            "/catalog/bookinstances/create",
            data={"book": "99999", "imprint": "Penguin, 2008"},
        )

        assert "Book must be specified" in response.text
        assert instance_count(db_session) == 0

    def test_non_ascii_digit_book_id(self, client, db_session, sample_book):
        response = client.post(
            "/catalog/bookinstances/create",
            data={"book": "²", "imprint": "Penguin, 2008"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert "Book must be specified" in response.text
        assert instance_count(db_session) == 0


class TestUpdateBookInstance:
    """Tests for /catalog/bookinstances/{id}/update."""

    def test_update_form_prefilled(self, client, sample_book_instance):
        response = client.get(f"/catalog/bookinstances/{sample_book_instance.id}/update")

        assert response.status_code == status.HTTP_200_OK
        assert 'value="2026-01-01"' in response.text
        assert 'value="Available" selected' in response.text

    def test_update_status(self, client, db_session, sample_book_instance, sample_book):
        response = client.post(
            f"/catalog/bookinstances/{sample_book_instance.id}/update",
            data={
                "book": str(sample_book.id),
                "imprint": "Secker and Warburg, 1949",
                "status": "Reserved",
                "due_back": "2026-02-01",
            },
            follow_redirects=False,
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        db_session.refresh(sample_book_instance)
        assert sample_book_instance.status == "Reserved"
        assert sample_book_instance.status_name == "已被預約"
        assert instance_count(db_session) == 1

    def test_update_missing_copy(self, client):
        response = client.post(
            "/catalog/bookinstances/99999/update",
            data={"book": "1", "imprint": "x"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "Book copy not found" in response.text


class TestDeleteBookInstance:
    """Tests for /catalog/bookinstances/{id}/delete."""

    def test_delete_page(self, client, sample_book_instance):
        response = client.get(f"/catalog/bookinstances/{sample_book_instance.id}/delete")

        assert response.status_code == status.HTTP_200_OK
        assert "Do you really want to delete this copy?" in response.text

    def test_delete_page_missing_copy_redirects(self, client):
        response = client.get("/catalog/bookinstances/99999/delete", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/catalog/bookinstances"

    def test_delete_copy(self, client, db_session, sample_book_instance):
        response = client.post(
            f"/catalog/bookinstances/{sample_book_instance.id}/delete",
            follow_redirects=False,
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/catalog/bookinstances"
        assert instance_count(db_session) == 0
