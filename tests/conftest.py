import pytest

from api import create_app
from models import storage

API = "/api/v1"


@pytest.fixture
def app():
    # Testing config points DBStorage at a fresh in-memory SQLite database
    app = create_app("testing")
    yield app
    storage.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_author(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "name": f"Author {counter['n']}",
            "email": f"author{counter['n']}@example.com",
        }
        payload.update(overrides)
        resp = client.post(f"{API}/authors", json=payload)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _make


@pytest.fixture
def make_book(client):
    counter = {"n": 0}

    def _make(author_id, **overrides):
        counter["n"] += 1
        payload = {
            "title": f"Book number {counter['n']}",
            "isbn": f"978{counter['n']:010d}",
            "authorId": author_id,
        }
        payload.update(overrides)
        resp = client.post(f"{API}/books", json=payload)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _make


@pytest.fixture
def author(make_author):
    return make_author(name="Ursula K. Le Guin", email="ursula@example.com", nationality="American")
