from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify
from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from models import storage
from models.author import Author
from models.book import Book
from models.errors import ConflictError, NotFoundError
from models.schemas.author import (
    AuthorCreateSchema,
    AuthorUpdateSchema,
    AuthorOutSchema,
    AuthorStatsSchema,
)
from models.schemas.book import AuthorBookCreateSchema, BookOutSchema, BookBriefSchema
from services.author_stats import summarize_books
from .books import ensure_isbn_available

logger = logging.getLogger(__name__)

bp = Blueprint("authors", __name__)

create_schema = AuthorCreateSchema()
update_schema = AuthorUpdateSchema()
out_schema = AuthorOutSchema()
out_list_schema = AuthorOutSchema(many=True)
stats_schema = AuthorStatsSchema()
book_create_schema = AuthorBookCreateSchema()
book_out_schema = BookOutSchema()
book_brief_list_schema = BookBriefSchema(many=True)


def get_author_or_404(author_id: str) -> Author:
    author = storage.get(Author, author_id)
    if not author:
        raise NotFoundError("Author not found")
    return author


def ensure_email_available(session, email: str, exclude_id: str | None = None) -> None:
    q = session.query(Author).filter(Author.email == email)
    if exclude_id:
        q = q.filter(Author.id != exclude_id)
    if session.query(q.exists()).scalar():
        raise ConflictError("This email is already registered")


def query_authors(session, term: str | None):
    query = session.query(Author).options(selectinload(Author.books))
    term = (term or "").strip()
    if term:
        query = query.filter(
            or_(
                Author.name.icontains(term, autoescape=True),
                Author.email.icontains(term, autoescape=True),
                Author.bio.icontains(term, autoescape=True),
                Author.nationality.icontains(term, autoescape=True),
            )
        )
    return query.order_by(Author.name.asc()).all()


@bp.post("/authors")
def create_author():
    """
    Create an author
    ---
    tags: [Authors]
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, email]
          properties:
            name: { type: string, maxLength: 128 }
            email: { type: string }
            bio: { type: string }
            nationality: { type: string }
            birthYear: { type: integer }
    responses:
      201: { description: Created }
      400: { description: Invalid input }
      409: { description: Email already registered }
    """
    session = storage.get_session()
    data = create_schema.load(request.get_json(silent=True) or {})
    ensure_email_available(session, data["email"])

    a = Author(**data)
    storage.new(a)
    storage.save()
    logger.info("Created author %s", a.id)
    return jsonify(out_schema.dump(a)), 201


@bp.get("/authors")
def list_authors():
    """
    List authors with their books and book counts
    ---
    tags: [Authors]
    parameters:
      - in: query
        name: search
        type: string
        description: "Case-insensitive substring of name, email, bio or nationality"
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    rows = query_authors(session, request.args.get("search"))
    return jsonify(out_list_schema.dump(rows))


@bp.get("/authors/search")
def search_authors():
    """
    Search authors
    ---
    tags: [Authors]
    parameters:
      - in: query
        name: q
        type: string
        description: "Case-insensitive substring of name, email, bio or nationality"
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    rows = query_authors(session, request.args.get("q"))
    return jsonify(out_list_schema.dump(rows))


@bp.get("/authors/<author_id>")
def get_author(author_id: str):
    """
    Get an author by id, with books (newest first)
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    a = get_author_or_404(author_id)
    return jsonify(out_schema.dump(a))


@bp.route("/authors/<author_id>", methods=["PUT", "PATCH"])
def update_author(author_id: str):
    """
    Update an author (partial)
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 128 }
            email: { type: string }
            bio: { type: string }
            nationality: { type: string }
            birthYear: { type: integer }
    responses:
      200: { description: OK }
      400: { description: Invalid input or no fields supplied }
      404: { description: Not found }
      409: { description: Email already registered }
    """
    session = storage.get_session()
    patch = update_schema.load(request.get_json(silent=True) or {})
    a = get_author_or_404(author_id)

    if patch.changes().get("email") not in (None, a.email):
        ensure_email_available(session, patch.email, exclude_id=a.id)

    patch.apply(a)
    storage.new(a)
    storage.save()
    return jsonify(out_schema.dump(a))


@bp.delete("/authors/<author_id>")
def delete_author(author_id: str):
    """
    Delete an author and all of their books
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    a = get_author_or_404(author_id)
    storage.delete(a)
    storage.save()
    logger.info("Deleted author %s", author_id)
    return jsonify({"message": "Author deleted successfully"})


@bp.get("/authors/<author_id>/stats")
def author_stats(author_id: str):
    """
    Statistics over an author's books
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200:
        description: >
          totalBooks, firstBook/latestBook ({title, year}), averagePages,
          genres, longestBook/shortestBook ({title, pages})
      404: { description: Not found }
    """
    session = storage.get_session()
    a = get_author_or_404(author_id)
    books = (
        session.query(Book)
        .filter(Book.author_id == a.id)
        .order_by(Book.published_year.asc(), Book.id.asc())
        .all()
    )
    stats = summarize_books(books)
    return jsonify({"authorId": a.id, "authorName": a.name, **stats_schema.dump(stats)})


@bp.get("/authors/<author_id>/books")
def list_author_books(author_id: str):
    """
    List the books of one author (newest first)
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    session = storage.get_session()
    a = get_author_or_404(author_id)
    books = (
        session.query(Book)
        .filter(Book.author_id == a.id)
        .order_by(Book.published_year.desc(), Book.id.desc())
        .all()
    )
    return jsonify({
        "author": {"id": a.id, "name": a.name},
        "totalBooks": len(books),
        "books": book_brief_list_schema.dump(books),
    })


@bp.post("/authors/<author_id>/books")
def create_author_book(author_id: str):
    """
    Create a book for this author
    ---
    tags: [Authors]
    consumes:
      - application/json
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, isbn]
          properties:
            title: { type: string, minLength: 3 }
            isbn: { type: string, description: "ISBN-10 or ISBN-13, separators allowed" }
            description: { type: string }
            publishedYear: { type: integer }
            genre: { type: string }
            pages: { type: integer, minimum: 1 }
    responses:
      201: { description: Created }
      400: { description: Invalid input }
      404: { description: Author not found }
      409: { description: Book with same ISBN already exists }
    """
    session = storage.get_session()
    a = get_author_or_404(author_id)
    data = book_create_schema.load(request.get_json(silent=True) or {})
    ensure_isbn_available(session, data["isbn"])

    b = Book(author_id=a.id, **data)
    storage.new(b)
    storage.save()
    logger.info("Created book %s for author %s", b.id, a.id)
    return jsonify(book_out_schema.dump(b)), 201
