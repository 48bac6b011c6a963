"""
Paginated book search.

SearchParams.from_args() turns raw query-string values into bounded search
parameters (rejecting unknown sort keys before any query is built), and
search_books() runs one COUNT plus one sorted, offset/limit fetch.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from models.author import Author
from models.book import Book
from models.errors import InvalidSortFieldError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50
DEFAULT_SORT = "createdAt"
DEFAULT_ORDER = "desc"

# Sorting allowlist: API field -> SQLAlchemy column
SORT_COLUMNS = {
    "title": Book.title,
    "publishedYear": Book.published_year,
    "createdAt": Book.created_at,
}


def _int_or_default(raw, default: int) -> int:
    """Parse an int query value; blanks, garbage and zero fall back to `default`."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value or default


@dataclass
class SearchParams:
    search: str = ""
    genre: Optional[str] = None
    author_name: str = ""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = DEFAULT_SORT
    order: str = DEFAULT_ORDER

    @classmethod
    def from_args(cls, args) -> "SearchParams":
        sort_by = args.get("sortBy") or DEFAULT_SORT
        if sort_by not in SORT_COLUMNS:
            raise InvalidSortFieldError(
                "Invalid sort field",
                details=f"Unsupported sort field: {sort_by}. Allowed: {', '.join(SORT_COLUMNS)}",
            )
        page = max(DEFAULT_PAGE, _int_or_default(args.get("page"), DEFAULT_PAGE))
        limit = min(MAX_LIMIT, max(1, _int_or_default(args.get("limit"), DEFAULT_LIMIT)))
        order = "asc" if (args.get("order") or "").lower() == "asc" else "desc"
        return cls(
            search=(args.get("search") or "").strip(),
            genre=args.get("genre") or None,
            author_name=(args.get("authorName") or "").strip(),
            page=page,
            limit=limit,
            sort_by=sort_by,
            order=order,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


def paginate(total: int, page: int, limit: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))


def apply_filters(query, params: SearchParams):
    if params.search:
        query = query.filter(
            or_(
                Book.title.icontains(params.search, autoescape=True),
                Book.description.icontains(params.search, autoescape=True),
                Book.isbn.icontains(params.search, autoescape=True),
            )
        )
    if params.genre:
        query = query.filter(Book.genre == params.genre)
    if params.author_name:
        query = query.join(Book.author).filter(
            Author.name.icontains(params.author_name, autoescape=True)
        )
    return query


def order_clause(params: SearchParams) -> list:
    column = SORT_COLUMNS[params.sort_by]
    if params.order == "asc":
        return [column.asc(), Book.id.asc()]
    return [column.desc(), Book.id.desc()]


def search_books(session, params: SearchParams) -> Tuple[List[Book], Pagination]:
    query = apply_filters(session.query(Book), params)

    total = query.count()
    # Pages past the end skip the fetch; huge offsets overflow SQLite INTEGER
    if params.offset >= total:
        return [], paginate(total, params.page, params.limit)
    rows = (
        query.options(joinedload(Book.author))
        .order_by(*order_clause(params))
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return rows, paginate(total, params.page, params.limit)
