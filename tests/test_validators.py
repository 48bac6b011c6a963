import pytest
from marshmallow import ValidationError, missing

from models.schemas.author import AuthorCreateSchema, AuthorUpdateSchema
from models.schemas.book import BookCreateSchema, BookUpdateSchema
from models.schemas.common import (
    normalize_isbn,
    parse_optional_year,
    parse_page_count,
    validate_email,
    validate_title,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("978-0-306-40615-7", "9780306406157"),
        ("0 306 40615 2", "0306406152"),
        ("  0-8044-2957-x ", "080442957X"),
        ("9780306406157", "9780306406157"),
    ],
)
def test_normalize_isbn_strips_separators(raw, expected):
    assert normalize_isbn(raw) == expected


@pytest.mark.parametrize("raw", ["12345", "978030640615", "97803064061578", "X123456789", "abcdefghij", "   ", ""])
def test_normalize_isbn_rejects_malformed(raw):
    with pytest.raises(ValidationError):
        normalize_isbn(raw)


def test_validate_title_requires_three_characters():
    validate_title("Dune")
    with pytest.raises(ValidationError, match="at least 3"):
        validate_title("It")
    with pytest.raises(ValidationError, match="required"):
        validate_title("")


@pytest.mark.parametrize("email", ["a@b.co", "first.last@example.org"])
def test_validate_email_accepts(email):
    validate_email(email)


@pytest.mark.parametrize("email", ["plain", "a@b", "a b@c.de", "@example.com"])
def test_validate_email_rejects(email):
    with pytest.raises(ValidationError):
        validate_email(email)


def test_parse_page_count():
    assert parse_page_count(None) is None
    assert parse_page_count("") is None
    assert parse_page_count(" 320 ") == 320
    assert parse_page_count(12) == 12
    for bad in ("abc", "12abc", 0, "-3", 2.5, True):
        with pytest.raises(ValidationError):
            parse_page_count(bad)


def test_parse_optional_year_is_lenient():
    assert parse_optional_year("1969") == 1969
    assert parse_optional_year(2001) == 2001
    assert parse_optional_year("") is None
    assert parse_optional_year("soon") is None
    assert parse_optional_year(0) is None
    assert parse_optional_year(-5) is None


def test_book_create_schema_trims_and_normalizes():
    data = BookCreateSchema().load({
        "title": "  The Dispossessed  ",
        "isbn": "978-0-06-051275-3",
        "description": "   ",
        "genre": " Science Fiction ",
        "pages": "387",
        "publishedYear": "1974",
        "authorId": " abc ",
        "ignored": "extra keys are dropped",
    })
    assert data == {
        "title": "The Dispossessed",
        "isbn": "9780060512753",
        "description": None,
        "genre": "Science Fiction",
        "pages": 387,
        "published_year": 1974,
        "author_id": "abc",
    }


def test_book_create_schema_reports_missing_fields():
    with pytest.raises(ValidationError) as exc:
        BookCreateSchema().load({})
    assert set(exc.value.messages) == {"title", "isbn", "authorId"}


def test_book_update_schema_builds_patch_with_only_supplied_fields():
    patch = BookUpdateSchema().load({"genre": None, "pages": "120"})
    assert patch.changes() == {"genre": None, "pages": 120}
    assert patch.title is missing


def test_update_schemas_reject_empty_patch():
    with pytest.raises(ValidationError):
        BookUpdateSchema().load({})
    with pytest.raises(ValidationError):
        AuthorUpdateSchema().load({})


def test_author_create_schema_defaults_optional_fields():
    data = AuthorCreateSchema().load({"name": " Octavia Butler ", "email": " octavia@example.com ", "birthYear": "x"})
    assert data == {
        "name": "Octavia Butler",
        "email": "octavia@example.com",
        "bio": None,
        "nationality": None,
        "birth_year": None,
    }


def test_schemas_reject_non_object_bodies():
    with pytest.raises(ValidationError):
        AuthorCreateSchema().load(["not", "an", "object"])
