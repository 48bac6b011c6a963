"""
Field-level validation and normalization.

Plain functions first (no I/O, no store access), then thin marshmallow
fields that wrap them so schemas can declare them like any other field.
"""
from __future__ import annotations

import re

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load

ISBN_SEPARATORS = re.compile(r"[-\s]")
ISBN_PATTERN = re.compile(r"^\d{10}$|^\d{13}$|^\d{9}[\dXx]$", re.ASCII)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$", re.ASCII)

TITLE_MIN_LENGTH = 3


def clean_string(value):
    return value.strip() if isinstance(value, str) else value


def empty_to_none(value):
    value = clean_string(value)
    return value if value not in ("", None) else None


def normalize_isbn(raw) -> str:
    if raw is None or not isinstance(raw, str) or not raw.strip():
        raise ValidationError("ISBN is required.")
    digits = ISBN_SEPARATORS.sub("", raw.strip())
    if not ISBN_PATTERN.match(digits):
        raise ValidationError("Invalid ISBN. It must have 10 or 13 digits.")
    # Only the ISBN-10 check character can be a letter
    return digits.upper()


def validate_title(value: str) -> None:
    if not value:
        raise ValidationError("Title is required.")
    if len(value) < TITLE_MIN_LENGTH:
        raise ValidationError(f"Title must be at least {TITLE_MIN_LENGTH} characters long.")


def validate_name(value: str) -> None:
    if not value:
        raise ValidationError("Name is required.")


def validate_email(value: str) -> None:
    if not value:
        raise ValidationError("Email is required.")
    if not EMAIL_PATTERN.match(value):
        raise ValidationError("Invalid email.")


def _to_int(value):
    """Return value as int, or None when it is not an integral number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def parse_page_count(value):
    """Absent/empty -> None; otherwise a positive integer or ValidationError."""
    if empty_to_none(value) is None:
        return None
    number = _to_int(clean_string(value))
    if number is None:
        raise ValidationError("Number of pages must be a number.")
    if number < 1:
        raise ValidationError("Number of pages must be greater than 0.")
    return number


def parse_optional_year(value):
    """Lenient year parsing: anything that is not a positive integer becomes None."""
    if empty_to_none(value) is None:
        return None
    number = _to_int(clean_string(value))
    if number is None or number < 1:
        return None
    return number


class TrimmedString(fields.String):
    """String stripped of surrounding whitespace; optionally '' -> None."""

    def __init__(self, *args, empty_as_none: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.empty_as_none = empty_as_none

    def _deserialize(self, value, attr, data, **kwargs):
        value = super()._deserialize(value, attr, data, **kwargs).strip()
        if self.empty_as_none and not value:
            return None
        return value


class Isbn(fields.String):
    def _deserialize(self, value, attr, data, **kwargs):
        return normalize_isbn(super()._deserialize(value, attr, data, **kwargs))


class PageCount(fields.Field):
    def _deserialize(self, value, attr, data, **kwargs):
        return parse_page_count(value)


class OptionalYear(fields.Field):
    def _deserialize(self, value, attr, data, **kwargs):
        return parse_optional_year(value)


class InputSchema(Schema):
    """Base for request payloads: unknown keys are ignored, body must be an object."""

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def _require_object(self, data, **kwargs):
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object.")
        return data
