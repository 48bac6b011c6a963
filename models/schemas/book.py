from dataclasses import dataclass, fields as dc_fields
from typing import Any

from marshmallow import Schema, fields, post_load, missing, ValidationError

from models.schemas.author import AuthorBriefSchema
from models.schemas.common import (
    InputSchema,
    TrimmedString,
    Isbn,
    PageCount,
    OptionalYear,
    validate_title,
)


@dataclass
class BookPatch:
    """Fields of a partial book update. `missing` means "leave unchanged"."""
    title: Any = missing
    isbn: Any = missing
    description: Any = missing
    published_year: Any = missing
    genre: Any = missing
    pages: Any = missing
    author_id: Any = missing

    def changes(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in dc_fields(self)
            if getattr(self, f.name) is not missing
        }

    def apply(self, book) -> None:
        for key, value in self.changes().items():
            setattr(book, key, value)


def validate_author_id(value: str) -> None:
    if not value:
        raise ValidationError("Author is required.")


class AuthorBookCreateSchema(InputSchema):
    """Book payload for /authors/<id>/books: the author comes from the URL."""
    title = TrimmedString(
        required=True,
        validate=validate_title,
        error_messages={"required": "Title is required.", "null": "Title is required."},
    )
    isbn = Isbn(required=True, error_messages={"required": "ISBN is required.", "null": "ISBN is required."})
    description = TrimmedString(allow_none=True, empty_as_none=True, load_default=None)
    published_year = OptionalYear(data_key="publishedYear", allow_none=True, load_default=None)
    genre = TrimmedString(allow_none=True, empty_as_none=True, load_default=None)
    pages = PageCount(allow_none=True, load_default=None)


class BookCreateSchema(AuthorBookCreateSchema):
    author_id = TrimmedString(
        data_key="authorId",
        required=True,
        validate=validate_author_id,
        error_messages={"required": "Author is required.", "null": "Author is required."},
    )


class BookUpdateSchema(InputSchema):
    # All optional, but validate if present; explicit null clears optional fields
    title = TrimmedString(validate=validate_title, error_messages={"null": "Title cannot be empty."})
    isbn = Isbn(error_messages={"null": "ISBN cannot be empty."})
    description = TrimmedString(allow_none=True, empty_as_none=True)
    published_year = OptionalYear(data_key="publishedYear", allow_none=True)
    genre = TrimmedString(allow_none=True, empty_as_none=True)
    pages = PageCount(allow_none=True)
    author_id = TrimmedString(
        data_key="authorId",
        validate=validate_author_id,
        error_messages={"null": "Author cannot be empty."},
    )

    @post_load
    def _make_patch(self, data, **kwargs):
        if not data:
            raise ValidationError("No fields provided to update.")
        return BookPatch(**data)


class BookOutSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    isbn = fields.String()  # already normalized in DB
    description = fields.String(allow_none=True)
    published_year = fields.Integer(data_key="publishedYear", allow_none=True)
    genre = fields.String(allow_none=True)
    pages = fields.Integer(allow_none=True)
    author_id = fields.String(data_key="authorId")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
    author = fields.Nested(AuthorBriefSchema)


class BookBriefSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    published_year = fields.Integer(data_key="publishedYear", allow_none=True)
    genre = fields.String(allow_none=True)
    pages = fields.Integer(allow_none=True)
