"""
Per-author statistics derived from the author's book list.

summarize_books() is pure: it reads title/published_year/pages/genre from
whatever objects it is handed (ORM rows in production, simple namespaces in
tests) and never touches the store.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence


def page_count(book) -> int:
    """Pages used for averaging and comparison; a missing count counts as 0."""
    return book.pages or 0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class AuthorStats:
    total_books: int = 0
    first_book: Optional[Any] = None
    latest_book: Optional[Any] = None
    average_pages: int = 0
    longest_book: Optional[Any] = None
    shortest_book: Optional[Any] = None
    genres: List[str] = field(default_factory=list)

    def longest_summary(self) -> Optional[dict]:
        return _pages_summary(self.longest_book)

    def shortest_summary(self) -> Optional[dict]:
        return _pages_summary(self.shortest_book)


def _pages_summary(book) -> Optional[dict]:
    if book is None:
        return None
    return {"title": book.title, "pages": page_count(book)}


def summarize_books(books: Sequence) -> AuthorStats:
    """
    Compute statistics over `books`, which must already be ordered by
    published year ascending. The order is trusted, not re-sorted:
    first/latest are simply the ends of the sequence, and the longest and
    shortest book keep the first occurrence when page counts tie.
    """
    if not books:
        return AuthorStats()

    longest = shortest = books[0]
    genres: List[str] = []
    total_pages = 0
    for book in books:
        pages = page_count(book)
        total_pages += pages
        if pages > page_count(longest):
            longest = book
        if pages < page_count(shortest):
            shortest = book
        if book.genre is not None and book.genre not in genres:
            genres.append(book.genre)

    return AuthorStats(
        total_books=len(books),
        first_book=books[0],
        latest_book=books[-1],
        average_pages=round_half_up(total_pages / len(books)),
        longest_book=longest,
        shortest_book=shortest,
        genres=genres,
    )
