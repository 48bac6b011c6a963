import pytest

from models.errors import InvalidInputError, InvalidSortFieldError
from services.book_search import SearchParams, paginate

from tests.conftest import API


def test_params_defaults():
    params = SearchParams.from_args({})
    assert (params.page, params.limit, params.sort_by, params.order) == (1, 10, "createdAt", "desc")
    assert params.offset == 0


@pytest.mark.parametrize(
    "args, page, limit",
    [
        ({"page": "3", "limit": "5"}, 3, 5),
        ({"page": "0", "limit": "0"}, 1, 10),
        ({"page": "-4", "limit": "-2"}, 1, 1),
        ({"page": "abc", "limit": "many"}, 1, 10),
        ({"limit": "500"}, 1, 50),
    ],
)
def test_params_clamp_page_and_limit(args, page, limit):
    params = SearchParams.from_args(args)
    assert (params.page, params.limit) == (page, limit)


def test_order_defaults_to_desc_unless_asc():
    assert SearchParams.from_args({"order": "ASC"}).order == "asc"
    assert SearchParams.from_args({"order": "sideways"}).order == "desc"


def test_unknown_sort_field_is_invalid_input():
    with pytest.raises(InvalidSortFieldError) as exc:
        SearchParams.from_args({"sortBy": "unknownField"})
    assert isinstance(exc.value, InvalidInputError)
    assert exc.value.code == "INVALID_INPUT"
    assert exc.value.status == 400


@pytest.mark.parametrize(
    "total, page, limit, total_pages, has_next, has_prev",
    [
        (0, 1, 10, 0, False, False),
        (25, 1, 10, 3, True, False),
        (25, 3, 10, 3, False, True),
        (25, 7, 10, 3, False, True),
        (10, 1, 10, 1, False, False),
    ],
)
def test_paginate(total, page, limit, total_pages, has_next, has_prev):
    p = paginate(total, page, limit)
    assert p.total_pages == total_pages
    assert p.to_dict()["hasNext"] is has_next
    assert p.to_dict()["hasPrev"] is has_prev


@pytest.fixture
def catalog(make_author, make_book):
    le_guin = make_author(name="Ursula K. Le Guin", email="ursula@example.com")
    herbert = make_author(name="Frank Herbert", email="frank@example.com")
    make_book(le_guin["id"], title="A Wizard of Earthsea", publishedYear=1968, genre="Fantasy")
    make_book(le_guin["id"], title="The Left Hand of Darkness", publishedYear=1969, genre="Science Fiction",
              description="Winter on the planet Gethen")
    make_book(le_guin["id"], title="The Dispossessed", publishedYear=1974, genre="Science Fiction")
    make_book(herbert["id"], title="Dune", publishedYear=1965, genre="Science Fiction",
              description="Desert planet Arrakis")
    make_book(herbert["id"], title="Dune Messiah", publishedYear=1969, genre="Science Fiction")
    return {"le_guin": le_guin, "herbert": herbert}


def test_search_envelope_and_page_bounds(client, catalog):
    resp = client.get(f"{API}/books/search?limit=2&page=2&sortBy=title&order=asc")
    assert resp.status_code == 200
    body = resp.get_json()
    assert [b["title"] for b in body["data"]] == ["Dune Messiah", "The Dispossessed"]
    assert body["pagination"] == {
        "page": 2, "limit": 2, "total": 5, "totalPages": 3, "hasNext": True, "hasPrev": True,
    }


def test_search_out_of_range_page_is_empty(client, catalog):
    body = client.get(f"{API}/books/search?page=9&limit=2").get_json()
    assert body["data"] == []
    assert body["pagination"]["total"] == 5
    assert body["pagination"]["hasNext"] is False
    assert body["pagination"]["hasPrev"] is True


def test_search_text_matches_title_description_and_isbn(client, catalog):
    body = client.get(f"{API}/books/search?search=PLANET&sortBy=publishedYear&order=asc").get_json()
    assert [b["title"] for b in body["data"]] == ["Dune", "The Left Hand of Darkness"]

    isbn = body["data"][0]["isbn"]
    by_isbn = client.get(f"{API}/books/search?search={isbn[-6:]}").get_json()
    assert [b["isbn"] for b in by_isbn["data"]] == [isbn]


def test_search_filters_by_genre_and_author_name(client, catalog):
    body = client.get(
        f"{API}/books/search",
        query_string={"genre": "Science Fiction", "authorName": "le guin", "sortBy": "publishedYear"},
    ).get_json()
    assert [b["title"] for b in body["data"]] == ["The Dispossessed", "The Left Hand of Darkness"]
    assert all(b["author"]["name"] == "Ursula K. Le Guin" for b in body["data"])


def test_search_wildcards_are_literal(client, catalog):
    body = client.get(f"{API}/books/search?search=%25").get_json()
    assert body["data"] == []
    assert body["pagination"]["totalPages"] == 0


def test_search_rejects_unknown_sort_field(client, catalog):
    resp = client.get(f"{API}/books/search?sortBy=unknownField")
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "INVALID_INPUT"


def test_search_huge_page_is_empty_not_an_error(client, catalog):
    resp = client.get(f"{API}/books/search?page=1000000000000000000&limit=10")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["data"] == []
    assert body["pagination"]["page"] == 1000000000000000000
    assert body["pagination"]["total"] == 5
    assert body["pagination"]["hasNext"] is False
