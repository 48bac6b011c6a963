from types import SimpleNamespace

from models.schemas.author import AuthorStatsSchema
from services.author_stats import summarize_books, round_half_up


def book(title, year=None, pages=None, genre=None):
    return SimpleNamespace(title=title, published_year=year, pages=pages, genre=genre)


def test_empty_list_yields_zero_and_nulls():
    stats = AuthorStatsSchema().dump(summarize_books([]))
    assert stats == {
        "totalBooks": 0,
        "firstBook": None,
        "latestBook": None,
        "averagePages": 0,
        "genres": [],
        "longestBook": None,
        "shortestBook": None,
    }


def test_missing_pages_count_as_zero():
    books = [book("One", 1990, 100), book("Two", 1995, None), book("Three", 2000, 300)]
    stats = AuthorStatsSchema().dump(summarize_books(books))

    assert stats["totalBooks"] == 3
    assert stats["averagePages"] == 133
    assert stats["longestBook"] == {"title": "Three", "pages": 300}
    assert stats["shortestBook"] == {"title": "Two", "pages": 0}


def test_first_and_latest_follow_input_order():
    books = [book("Early", 1968), book("Middle", 1974), book("Late", 2001)]
    stats = summarize_books(books)
    assert stats.first_book.title == "Early"
    assert stats.latest_book.title == "Late"

    rendered = AuthorStatsSchema().dump(stats)
    assert rendered["firstBook"] == {"title": "Early", "year": 1968}
    assert rendered["latestBook"] == {"title": "Late", "year": 2001}


def test_ties_keep_first_occurrence():
    books = [book("A", 1, 200), book("B", 2, 200), book("C", 3, 50), book("D", 4, 50)]
    stats = summarize_books(books)
    assert stats.longest_book.title == "A"
    assert stats.shortest_book.title == "C"


def test_genres_are_distinct_in_first_appearance_order():
    books = [
        book("A", genre="Fantasy"),
        book("B", genre=None),
        book("C", genre="Science Fiction"),
        book("D", genre="Fantasy"),
    ]
    assert summarize_books(books).genres == ["Fantasy", "Science Fiction"]


def test_average_rounds_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(133.33) == 133
    stats = summarize_books([book("A", pages=1), book("B", pages=2)])
    assert stats.average_pages == 2
