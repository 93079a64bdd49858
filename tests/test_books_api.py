from datetime import date
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from bookshelf.api.books import get_book_repository
from bookshelf.main import app
from bookshelf.repositories.books import SqlBookRepository
from tests.helpers import shelf_rows


@pytest.fixture()
def shelf(memory_repo):
    memory_repo.create(title="The Left Hand of Darkness", year=1969, genres=["sci-fi", "drama"])
    memory_repo.create(title="Dune", year=1965, genres=["sci-fi"])
    memory_repo.create(title="The Big Sleep", year=1939, genres=["noir", "crime"])
    memory_repo.create(title="Kindred", year=1979, genres=["sci-fi", "drama", "noir"])
    return memory_repo


class SpyRepository:
    def __init__(self):
        self.calls = 0

    def get_all(self, criteria, query):
        self.calls += 1
        return []


def test_list_books_empty(client):
    r = client.get("/v1/books")
    assert r.status_code == 200
    assert r.json() == {"books": []}


def test_list_books_shape(client, shelf):
    r = client.get("/v1/books")
    assert r.status_code == 200
    books = r.json()["books"]
    assert [b["title"] for b in books] == ["The Left Hand of Darkness", "Dune", "The Big Sleep", "Kindred"]
    # created_at is never serialized
    assert set(books[0]) == {"id", "title", "year", "genres", "version"}


def test_list_books_sorted_descending(client, shelf):
    r = client.get("/v1/books", params={"sort": "-year"})
    assert r.status_code == 200
    assert [b["year"] for b in r.json()["books"]] == [1979, 1969, 1965, 1939]


def test_list_books_title_search(client, shelf):
    r = client.get("/v1/books", params={"title": "big sleep"})
    assert r.status_code == 200
    assert [b["title"] for b in r.json()["books"]] == ["The Big Sleep"]


def test_list_books_genres_csv_is_trimmed(client, shelf):
    r = client.get("/v1/books", params={"genres": " sci-fi , drama ,"})
    assert r.status_code == 200
    assert [b["title"] for b in r.json()["books"]] == ["The Left Hand of Darkness", "Kindred"]


def test_list_books_pagination(client, shelf):
    r = client.get("/v1/books", params={"page": 2, "page_size": 3})
    assert r.status_code == 200
    assert [b["title"] for b in r.json()["books"]] == ["Kindred"]


def test_list_books_page_past_end_is_empty(client, shelf):
    r = client.get("/v1/books", params={"page": 50, "page_size": 10})
    assert r.status_code == 200
    assert r.json() == {"books": []}


def test_list_books_walks_all_pages(client, memory_repo):
    for title, year, genres in shelf_rows(250):
        memory_repo.create(title=title, year=year, genres=genres)

    seen = []
    for page in range(1, 14):
        r = client.get("/v1/books", params={"page": page, "page_size": 20, "sort": "-year"})
        assert r.status_code == 200
        seen.extend(r.json()["books"])

    assert len(seen) == 250
    assert len({b["id"] for b in seen}) == 250
    assert [(b["year"], b["id"]) for b in seen] == sorted(((b["year"], b["id"]) for b in seen), key=lambda t: (-t[0], t[1]))


def test_list_books_aggregates_validation_errors(client):
    r = client.get("/v1/books", params={"page": 0, "page_size": 101, "sort": "rating"})
    assert r.status_code == 422
    assert r.json() == {
        "error": {
            "page": "must be greater than zero",
            "page_size": "must be a maximum of 100",
            "sort": "invalid sort value",
        }
    }


def test_list_books_non_integer_page(client):
    r = client.get("/v1/books", params={"page": "abc", "sort": "-price"})
    assert r.status_code == 422
    assert r.json() == {
        "error": {
            "page": "must be an integer value",
            "sort": "invalid sort value",
        }
    }


def test_list_books_sort_injection_rejected(client):
    r = client.get("/v1/books", params={"sort": "id; DROP TABLE books"})
    assert r.status_code == 422
    assert r.json()["error"] == {"sort": "invalid sort value"}


def test_invalid_list_never_reaches_repository(client):
    spy = SpyRepository()
    app.dependency_overrides[get_book_repository] = lambda: spy

    r = client.get("/v1/books", params={"page_size": 0})
    assert r.status_code == 422
    assert spy.calls == 0

    r = client.get("/v1/books")
    assert r.status_code == 200
    assert spy.calls == 1


def test_list_books_store_failure_is_opaque(client):
    session = MagicMock()
    session.scalars.side_effect = OperationalError("SELECT", {}, Exception("connection refused on 10.0.0.7"))
    app.dependency_overrides[get_book_repository] = lambda: SqlBookRepository(session)

    r = client.get("/v1/books")
    assert r.status_code == 500
    assert r.json() == {"error": "the server encountered a problem and could not process your request"}
    assert "10.0.0.7" not in r.text


def test_service_errors_logged_as_structured_events(client, monkeypatch):
    logger = MagicMock()
    monkeypatch.setattr("bookshelf.api.error_handlers.logger", logger)

    assert client.get("/v1/books?page=0").status_code == 422
    event, = logger.info.call_args.args
    assert event == "api.service_error"
    assert logger.info.call_args.kwargs["extra"]["kind"] == "validation_failed"
    assert logger.info.call_args.kwargs["extra"]["path"] == "/v1/books"

    session = MagicMock()
    session.scalars.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    app.dependency_overrides[get_book_repository] = lambda: SqlBookRepository(session)
    assert client.get("/v1/books").status_code == 500
    event, = logger.error.call_args.args
    assert event == "api.service_error"
    assert logger.error.call_args.kwargs["extra"] == {"kind": "execution", "method": "GET", "path": "/v1/books"}


def test_get_book(client, shelf):
    r = client.get("/v1/books/2")
    assert r.status_code == 200
    assert r.json()["book"] == {"id": 2, "title": "Dune", "year": 1965, "genres": ["sci-fi"], "version": 1}


@pytest.mark.parametrize("book_id", [0, -3, 999])
def test_get_book_not_found(client, shelf, book_id):
    r = client.get(f"/v1/books/{book_id}")
    assert r.status_code == 404
    assert r.json() == {"error": "the requested resource could not be found"}


def test_create_book(client):
    r = client.post("/v1/books", json={"title": "Solaris", "year": 1961, "genres": ["sci-fi"]})
    assert r.status_code == 201
    body = r.json()["book"]
    assert body["title"] == "Solaris"
    assert body["version"] == 1
    assert r.headers["Location"] == f"/v1/books/{body['id']}"

    r = client.get(f"/v1/books/{body['id']}")
    assert r.status_code == 200


def test_create_book_reports_every_field(client):
    r = client.post("/v1/books", json={"year": date.today().year + 1, "genres": ["a", "a"]})
    assert r.status_code == 422
    assert r.json() == {
        "error": {
            "title": "must be provided",
            "year": "must not be in the future",
            "genres": "must not contain duplicate values",
        }
    }


def test_create_book_missing_genres(client):
    r = client.post("/v1/books", json={"title": "Untitled", "year": 2001})
    assert r.status_code == 422
    assert r.json()["error"] == {"genres": "must be provided"}


def test_delete_book(client, shelf):
    r = client.delete("/v1/books/1")
    assert r.status_code == 204

    r = client.get("/v1/books/1")
    assert r.status_code == 404

    r = client.delete("/v1/books/1")
    assert r.status_code == 404


def test_root_endpoint(client):
    r = client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert data["name"] == "Bookshelf Service"
    assert data["status"] == "ok"
    assert "docs" in data
    assert "health" in data
