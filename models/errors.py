"""
Error taxonomy shared by the store gateway and the HTTP layer.

Every failure that leaves a handler is one of these four kinds:
- INVALID_INPUT (400): malformed or missing field, unsupported sort key
- NOT_FOUND (404): referenced author/book does not exist
- CONFLICT (409): unique constraint on email or ISBN
- INTERNAL (500): unexpected store or runtime failure

Raw SQLAlchemy errors are turned into these right after the failing call
(see translate_store_error), so nothing above models/ sees a driver error.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    code = "INTERNAL"
    status = 500
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details


class InvalidInputError(CatalogError):
    code = "INVALID_INPUT"
    status = 400
    message = "Invalid input"


class InvalidSortFieldError(InvalidInputError):
    message = "Invalid sort field"


class NotFoundError(CatalogError):
    code = "NOT_FOUND"
    status = 404
    message = "Resource not found"


class ConflictError(CatalogError):
    code = "CONFLICT"
    status = 409
    message = "Unique constraint violated"


class InternalError(CatalogError):
    pass


def _conflict_message(lower_msg: str) -> str:
    if "isbn" in lower_msg:
        return "A book with this ISBN already exists"
    if "email" in lower_msg:
        return "This email is already registered"
    return ConflictError.message


def translate_store_error(err: SQLAlchemyError) -> CatalogError:
    """Map a SQLAlchemy error onto the taxonomy."""
    raw = str(getattr(err, "orig", None) or err)
    lower_msg = raw.lower()
    logger.warning("Store error: %s", raw)

    if isinstance(err, IntegrityError):
        # sqlite says "UNIQUE constraint failed", postgres "unique constraint"/"duplicate key"
        if "unique" in lower_msg or "duplicate key" in lower_msg:
            return ConflictError(_conflict_message(lower_msg), details=raw)
        if "foreign key" in lower_msg:
            return NotFoundError("Referenced author does not exist", details=raw)
        return InvalidInputError("Constraint violated", details=raw)
    return InternalError(details=raw)
