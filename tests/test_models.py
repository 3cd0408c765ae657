"""
Tests for Model Display Fields and Date Helpers
"""

from datetime import date

import pytest

from app.models import Author, BookInstance
from app.utils import format_long_date, ordinal, whole_years_between


class TestDateHelpers:
    @pytest.mark.parametrize(
        "day, expected",
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"), (13, "13th"), (22, "22nd")],
    )
    def test_ordinal(self, day, expected):
        assert ordinal(day) == expected

    def test_format_long_date(self):
        assert format_long_date(date(1903, 6, 25)) == "June 25th, 1903"
        assert format_long_date(None) == ""

    def test_whole_years_between(self):
        assert whole_years_between(date(1903, 6, 25), date(1950, 1, 21)) == 46
        assert whole_years_between(date(1900, 1, 1), date(1950, 1, 1)) == 50


class TestAuthorDisplay:
    def test_name_and_dates(self):
        author = Author(
            id=7,
            first_name="George",
            family_name="Orwell",
            date_of_birth=date(1903, 6, 25),
        )

        assert author.name == "Orwell, George"
        assert author.birth_day == "June 25th, 1903"
        assert author.death_day == ""
        assert author.birth_day_for_fill_in == "1903-06-25"
        assert author.url == "/catalog/authors/7"

    def test_lifespan_needs_both_dates(self):
        author = Author(first_name="A", family_name="B", date_of_birth=date(1900, 1, 1))

        assert author.lifespan == ""

        author.date_of_death = date(1950, 6, 1)
        assert author.lifespan == "50"


class TestBookInstanceDisplay:
    @pytest.mark.parametrize(
        "value, label",
        [
            ("Available", "可借閱"),
            ("Maintenance", "書本保養中"),
            ("Loaned", "已被借閱"),
            ("Reserved", "已被預約"),
            ("Lost", "No value found"),
        ],
    )
    def test_status_name(self, value, label):
        assert BookInstance(status=value).status_name == label

    def test_due_back_formatting(self):
        book_instance = BookInstance(id=3, due_back=date(2024, 3, 1))

        assert book_instance.due_back_formatted == "March 1st, 2024"
        assert book_instance.due_back_for_fill_in == "2024-03-01"
        assert book_instance.url == "/catalog/bookinstances/3"

    def test_due_back_defaults_to_today(self, db_session, sample_book):
        book_instance = BookInstance(book=sample_book, imprint="Penguin")
        db_session.add(book_instance)
        db_session.commit()

        assert book_instance.due_back == date.today()
        assert book_instance.status == "Maintenance"
