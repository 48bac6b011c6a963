from flask import jsonify, current_app, request
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
import logging

from models.errors import CatalogError, InvalidInputError, InternalError, translate_store_error

logger = logging.getLogger(__name__)


def error_response(code: str, message: str, status: int, details: str | None = None):
    payload = {"error": message, "code": code}
    # details never leave the server outside development
    if details and current_app and current_app.debug:
        payload["details"] = details
    return jsonify(payload), status


def _flatten_messages(messages, prefix=""):
    """Yield 'field: message' strings from marshmallow's nested error dict."""
    if isinstance(messages, dict):
        for key, value in messages.items():
            if key == "_schema":
                label = prefix
            else:
                label = f"{prefix}.{key}" if prefix else str(key)
            yield from _flatten_messages(value, label)
    elif isinstance(messages, (list, tuple)):
        for item in messages:
            yield from _flatten_messages(item, prefix)
    else:
        yield f"{prefix}: {messages}" if prefix else str(messages)


def catalog_error_response(err: CatalogError):
    if err.status >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.path, err.message, err.details)
    else:
        logger.warning("%s %s -> %s %s: %s", request.method, request.path, err.status, err.code, err.message)
    return error_response(err.code, err.message, err.status, details=err.details)


def register_error_handlers(app):
    # Taxonomy errors raised by handlers, services and the store gateway
    @app.errorhandler(CatalogError)
    def handle_catalog_error(err: CatalogError):
        return catalog_error_response(err)

    # Marshmallow validation errors map to 400 INVALID_INPUT
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        messages = list(_flatten_messages(err.messages)) or ["Invalid input"]
        return catalog_error_response(InvalidInputError(messages[0], details="; ".join(messages)))

    # Store errors that escaped DBStorage.save() (failed queries, lost connections)
    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(err: SQLAlchemyError):
        return catalog_error_response(translate_store_error(err))

    # 404 Not Found (unknown route, non-integer book id)
    @app.errorhandler(404)
    def not_found(e):
        logger.warning("%s %s -> 404", request.method, request.path)
        return error_response("NOT_FOUND", "Resource not found", 404)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        logger.warning("%s %s -> %s: %s", request.method, request.path, err.code, err.description)
        status = err.code or 400
        code = "INTERNAL" if status >= 500 else "INVALID_INPUT"
        return error_response(code, err.description or err.name, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.path, exc_info=err)
        return error_response(
            InternalError.code,
            InternalError.message,
            500,
            details=f"{err.__class__.__name__}: {err}",
        )
