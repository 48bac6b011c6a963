from dataclasses import dataclass, fields as dc_fields
from typing import Any

from marshmallow import Schema, fields, post_load, missing, ValidationError

from models.schemas.common import (
    InputSchema,
    TrimmedString,
    OptionalYear,
    validate_name,
    validate_email,
)


@dataclass
class AuthorPatch:
    """Fields of a partial author update. `missing` means "leave unchanged"."""
    name: Any = missing
    email: Any = missing
    bio: Any = missing
    nationality: Any = missing
    birth_year: Any = missing

    def changes(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in dc_fields(self)
            if getattr(self, f.name) is not missing
        }

    def apply(self, author) -> None:
        for key, value in self.changes().items():
            setattr(author, key, value)


class AuthorCreateSchema(InputSchema):
    name = TrimmedString(
        required=True,
        validate=validate_name,
        error_messages={"required": "Name is required.", "null": "Name is required."},
    )
    email = TrimmedString(
        required=True,
        validate=validate_email,
        error_messages={"required": "Email is required.", "null": "Email is required."},
    )
    bio = TrimmedString(allow_none=True, empty_as_none=True, load_default=None)
    nationality = TrimmedString(allow_none=True, empty_as_none=True, load_default=None)
    birth_year = OptionalYear(data_key="birthYear", allow_none=True, load_default=None)


class AuthorUpdateSchema(InputSchema):
    # All optional, but validate if present
    name = TrimmedString(validate=validate_name, error_messages={"null": "Name cannot be empty."})
    email = TrimmedString(validate=validate_email, error_messages={"null": "Email cannot be empty."})
    bio = TrimmedString(allow_none=True, empty_as_none=True)
    nationality = TrimmedString(allow_none=True, empty_as_none=True)
    birth_year = OptionalYear(data_key="birthYear", allow_none=True)

    @post_load
    def _make_patch(self, data, **kwargs):
        if not data:
            raise ValidationError("No fields provided to update.")
        return AuthorPatch(**data)


class AuthorBriefSchema(Schema):
    id = fields.String()
    name = fields.String()
    email = fields.String()


class AuthorOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    email = fields.String()
    bio = fields.String(allow_none=True)
    nationality = fields.String(allow_none=True)
    birth_year = fields.Integer(data_key="birthYear", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
    book_count = fields.Method("get_book_count", data_key="bookCount")
    # Resolved through the marshmallow class registry (models.schemas.book)
    books = fields.List(fields.Nested("BookOutSchema", exclude=("author",)))

    def get_book_count(self, obj):
        return len(obj.books)


def _book_year(book):
    if book is None:
        return None
    return {"title": book.title, "year": book.published_year}


class AuthorStatsSchema(Schema):
    """Renders services.author_stats.AuthorStats."""
    total_books = fields.Integer(data_key="totalBooks")
    first_book = fields.Function(lambda s: _book_year(s.first_book), data_key="firstBook")
    latest_book = fields.Function(lambda s: _book_year(s.latest_book), data_key="latestBook")
    average_pages = fields.Integer(data_key="averagePages")
    genres = fields.List(fields.String())
    longest_book = fields.Function(lambda s: s.longest_summary(), data_key="longestBook")
    shortest_book = fields.Function(lambda s: s.shortest_summary(), data_key="shortestBook")
