"""
Book persistence.

BookRepository is the seam the service layer depends on. SqlBookRepository
is the PostgreSQL implementation; InMemoryBookRepository (see
bookshelf.repositories.memory) mirrors its semantics for tests.
"""
from __future__ import annotations

import logging
import time
from typing import Iterable, Protocol

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookshelf.core.errors import ServiceError
from bookshelf.core.filters import ResolvedListQuery, SearchCriteria
from bookshelf.models.book import Book
from bookshelf.repositories.book_query import build_search_query

logger = logging.getLogger(__name__)


class BookRepository(Protocol):
    def create(self, *, title: str, year: int, genres: Iterable[str]) -> Book: ...

    def get_by_id(self, book_id: int) -> Book: ...

    def get_all(self, criteria: SearchCriteria, query: ResolvedListQuery) -> list[Book]: ...

    def delete(self, book_id: int) -> None: ...


class SqlBookRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, *, title: str, year: int, genres: Iterable[str]) -> Book:
        book = Book(title=title, year=year, genres=list(genres))
        try:
            self.db.add(book)
            self.db.commit()
            self.db.refresh(book)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("books.create.failed", extra={"title": title})
            raise ServiceError.execution() from exc

        logger.info("books.create.success", extra={"book_id": book.id})
        return book

    def get_by_id(self, book_id: int) -> Book:
        if book_id < 1:
            raise ServiceError.not_found()

        try:
            book = self.db.get(Book, book_id)
        except SQLAlchemyError as exc:
            logger.exception("books.get.failed", extra={"book_id": book_id})
            raise ServiceError.execution() from exc

        if book is None:
            raise ServiceError.not_found()
        return book

    def get_all(self, criteria: SearchCriteria, query: ResolvedListQuery) -> list[Book]:
        """
        Run the search and return every matching row for the requested page.
        No rows is an empty list, not an error. Any driver or mapping failure
        aborts the whole call.
        """
        stmt = build_search_query(criteria, query)
        start = time.perf_counter()
        try:
            books = list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception(
                "books.list.failed",
                extra={"sort": query.sort, "page": query.page, "page_size": query.page_size},
            )
            raise ServiceError.execution() from exc

        logger.debug(
            "books.list.success",
            extra={
                "count": len(books),
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return books

    def delete(self, book_id: int) -> None:
        if book_id < 1:
            raise ServiceError.not_found()

        try:
            result = self.db.execute(delete(Book).where(Book.id == book_id))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("books.delete.failed", extra={"book_id": book_id})
            raise ServiceError.execution() from exc

        if result.rowcount == 0:
            raise ServiceError.not_found()
        logger.info("books.delete.success", extra={"book_id": book_id})
