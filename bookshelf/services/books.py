from __future__ import annotations

import logging
from datetime import date

from bookshelf.core.errors import ServiceError
from bookshelf.core.filters import ListQuerySpec, SearchCriteria
from bookshelf.core.validator import ValidationSet, unique
from bookshelf.models.book import Book
from bookshelf.repositories.books import BookRepository

logger = logging.getLogger(__name__)

BOOK_SORT_SAFELIST = ("id", "title", "year", "-id", "-title", "-year")

MIN_YEAR = 1888
MAX_TITLE_BYTES = 500
MAX_GENRES = 5


def validate_book(v: ValidationSet, *, title: str, year: int, genres: list[str] | None) -> None:
    v.check(title != "", "title", "must be provided")
    v.check(len(title.encode("utf-8")) <= MAX_TITLE_BYTES, "title", "must not be more than 500 bytes long")

    v.check(year != 0, "year", "must be provided")
    v.check(year >= MIN_YEAR, "year", "must be greater than 1888")
    v.check(year <= date.today().year, "year", "must not be in the future")

    v.check(genres is not None, "genres", "must be provided")
    genres = genres or []
    v.check(len(genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(len(genres) <= MAX_GENRES, "genres", "must not contain more than 5 genres")
    v.check(unique(genres), "genres", "must not contain duplicate values")


class BookService:
    def __init__(self, repo: BookRepository):
        self.repo = repo

    def create_book(self, *, title: str, year: int, genres: list[str] | None) -> Book:
        v = ValidationSet()
        validate_book(v, title=title, year=year, genres=genres)
        if not v.valid:
            logger.info("books.create.invalid", extra={"fields": sorted(v.errors)})
            raise ServiceError.validation_failed(v.errors)

        return self.repo.create(title=title, year=year, genres=genres)

    def get_book(self, book_id: int) -> Book:
        return self.repo.get_by_id(book_id)

    def list_books(
        self,
        criteria: SearchCriteria,
        spec: ListQuerySpec,
        v: ValidationSet | None = None,
    ) -> list[Book]:
        """
        `v` may already hold failures from reading the query string; they are
        reported together with the pagination/sort checks and nothing is queried.
        """
        try:
            query = spec.resolve(v)
        except ServiceError as exc:
            logger.info("books.list.invalid", extra={"errors": exc.errors})
            raise

        return self.repo.get_all(criteria, query)

    def delete_book(self, book_id: int) -> None:
        self.repo.delete(book_id)
