from flask import Blueprint

from models import storage
from models.author import Author
from models.book import Book

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up and the database answers
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            version:
              type: string
              example: 1.0.0
            authors:
              type: integer
            books:
              type: integer
    """
    return {
        "status": "ok",
        "version": "1.0.0",
        "authors": storage.count(Author),
        "books": storage.count(Book),
    }, 200
