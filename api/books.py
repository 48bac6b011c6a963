from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify
from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from models import storage
from models.author import Author
from models.book import Book
from models.errors import ConflictError, NotFoundError
from models.schemas.book import BookCreateSchema, BookUpdateSchema, BookOutSchema
from services.book_search import SearchParams, search_books

logger = logging.getLogger(__name__)

bp = Blueprint("books", __name__)

# Schemas
book_create_schema = BookCreateSchema()
book_update_schema = BookUpdateSchema()
book_out_schema = BookOutSchema()
books_out_schema = BookOutSchema(many=True)


def get_book_or_404(book_id: int) -> Book:
    b = storage.get(Book, book_id)
    if not b:
        raise NotFoundError("Book not found")
    return b


def ensure_author_exists(author_id: str) -> None:
    if not storage.get(Author, author_id):
        raise NotFoundError("The specified author does not exist")


def ensure_isbn_available(session, isbn: str, exclude_id: int | None = None) -> None:
    q = session.query(Book).filter(Book.isbn == isbn)
    if exclude_id is not None:
        q = q.filter(Book.id != exclude_id)
    if session.query(q.exists()).scalar():
        raise ConflictError("A book with this ISBN already exists")


def apply_filters(query):
    genre = request.args.get("genre")
    author_id = request.args.get("authorId")
    q = (request.args.get("search") or "").strip()

    if genre:
        query = query.filter(Book.genre == genre)
    if author_id:
        query = query.filter(Book.author_id == author_id)
    if q:
        # Case-insensitive search across title, description, genre and ISBN
        query = query.filter(
            or_(
                Book.title.icontains(q, autoescape=True),
                Book.description.icontains(q, autoescape=True),
                Book.genre.icontains(q, autoescape=True),
                Book.isbn.icontains(q, autoescape=True),
            )
        )
    return query


@bp.post("/books")
def create_book():
    """
    Create a new book
    ---
    tags:
      - Books
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, isbn, authorId]
          properties:
            title: { type: string, minLength: 3 }
            isbn: { type: string, description: "ISBN-10 or ISBN-13, separators allowed" }
            description: { type: string }
            publishedYear: { type: integer }
            genre: { type: string }
            pages: { type: integer, minimum: 1 }
            authorId: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Invalid input
      404:
        description: Author not found
      409:
        description: Book with same ISBN already exists
    """
    session = storage.get_session()
    payload = request.get_json(silent=True) or {}
    data = book_create_schema.load(payload)

    ensure_author_exists(data["author_id"])
    ensure_isbn_available(session, data["isbn"])

    b = Book(**data)
    storage.new(b)
    storage.save()
    logger.info("Created book %s (isbn=%s)", b.id, b.isbn)
    return jsonify(book_out_schema.dump(b)), 201


@bp.get("/books")
def list_books():
    """
    List books (unpaginated), newest first
    ---
    tags:
      - Books
    parameters:
      - in: query
        name: genre
        type: string
      - in: query
        name: authorId
        type: string
      - in: query
        name: search
        type: string
        description: "Case-insensitive substring of title, description, genre or ISBN"
    responses:
      200:
        description: List of books
    """
    session = storage.get_session()
    query = apply_filters(session.query(Book).options(joinedload(Book.author)))
    rows = query.order_by(Book.created_at.desc(), Book.id.desc()).all()
    return jsonify(books_out_schema.dump(rows))


@bp.get("/books/search")
def search():
    """
    Search books with filtering, sorting and pagination
    ---
    tags:
      - Books
    parameters:
      - in: query
        name: search
        type: string
        description: "Case-insensitive substring of title, description or ISBN"
      - in: query
        name: genre
        type: string
      - in: query
        name: authorName
        type: string
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
        maximum: 50
      - in: query
        name: sortBy
        type: string
        enum: [title, publishedYear, createdAt]
        default: createdAt
      - in: query
        name: order
        type: string
        enum: [asc, desc]
        default: desc
    responses:
      200:
        description: "{data, pagination: {page, limit, total, totalPages, hasNext, hasPrev}}"
      400:
        description: Unsupported sort field
    """
    params = SearchParams.from_args(request.args)
    rows, pagination = search_books(storage.get_session(), params)
    return jsonify({"data": books_out_schema.dump(rows), "pagination": pagination.to_dict()})


@bp.get("/books/<int:book_id>")
def get_book(book_id: int):
    """
    Get a single book by id
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
    responses:
      200:
        description: Book found
      404:
        description: Not found
    """
    b = get_book_or_404(book_id)
    return jsonify(book_out_schema.dump(b))


@bp.route("/books/<int:book_id>", methods=["PUT", "PATCH"])
def update_book(book_id: int):
    """
    Update a book (partial)
    ---
    tags:
      - Books
    consumes:
      - application/json
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
    responses:
      200:
        description: Updated
      400:
        description: Invalid input or no fields supplied
      404:
        description: Book or target author not found
      409:
        description: Conflict (duplicate ISBN)
    """
    session = storage.get_session()
    payload = request.get_json(silent=True) or {}
    patch = book_update_schema.load(payload)
    b = get_book_or_404(book_id)

    changes = patch.changes()
    if "author_id" in changes:
        ensure_author_exists(changes["author_id"])
    if "isbn" in changes and changes["isbn"] != b.isbn:
        ensure_isbn_available(session, changes["isbn"], exclude_id=b.id)

    patch.apply(b)
    storage.new(b)
    storage.save()
    return jsonify(book_out_schema.dump(b))


@bp.delete("/books/<int:book_id>")
def delete_book(book_id: int):
    """
    Delete a book
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
    responses:
      200:
        description: Deleted
      404:
        description: Not found
    """
    b = get_book_or_404(book_id)
    storage.delete(b)
    storage.save()
    logger.info("Deleted book %s", book_id)
    return jsonify({"message": "Book deleted successfully"})
