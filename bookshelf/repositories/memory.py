from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable

from bookshelf.core.errors import ServiceError
from bookshelf.core.filters import ResolvedListQuery, SearchCriteria
from bookshelf.models.book import Book
from bookshelf.repositories.book_query import sort_column

# letters and digits; underscores split words, hyphens join them into a compound
_WORD_RE = re.compile(r"[^\W_]+(?:-[^\W_]+)*")


def simple_tokens(text: str) -> set[str]:
    """
    Lower-cased tokens as the 'simple' text search config produces them.

    A hyphenated word yields the whole compound plus each part, so
    "Sci-Fi" gives {"sci-fi", "sci", "fi"}.
    """
    tokens = set()
    for word in _WORD_RE.findall(text.lower()):
        tokens.add(word)
        if "-" in word:
            tokens.update(word.split("-"))
    return tokens


def title_matches(title: str, search: str) -> bool:
    if not search:
        return True
    wanted = simple_tokens(search)
    # plainto_tsquery of punctuation only is an empty query, which matches nothing
    if not wanted:
        return False
    return wanted <= simple_tokens(title)


def genres_match(stored: Iterable[str], wanted: Iterable[str]) -> bool:
    return set(wanted) <= set(stored)


class InMemoryBookRepository:
    """
    BookRepository kept in a list. Same filtering, ordering and paging
    behaviour as SqlBookRepository, without a database.
    """

    def __init__(self, books: Iterable[Book] = ()):
        self._books: list[Book] = []
        self._next_id = 1
        for book in books:
            self._store(book)

    def _store(self, book: Book) -> Book:
        if book.id is None:
            book.id = self._next_id
        self._next_id = max(self._next_id, book.id + 1)
        if book.created_at is None:
            book.created_at = datetime.now(timezone.utc)
        if book.version is None:
            book.version = 1
        self._books.append(book)
        return book

    def create(self, *, title: str, year: int, genres: Iterable[str]) -> Book:
        return self._store(Book(title=title, year=year, genres=list(genres)))

    def get_by_id(self, book_id: int) -> Book:
        for book in self._books:
            if book.id == book_id:
                return book
        raise ServiceError.not_found()

    def get_all(self, criteria: SearchCriteria, query: ResolvedListQuery) -> list[Book]:
        key = sort_column(query.sort_column).key

        rows = [
            b for b in self._books
            if title_matches(b.title, criteria.title) and genres_match(b.genres, criteria.genres)
        ]
        # list.sort is stable (also with reverse=True), so the id order survives as the tiebreak
        rows.sort(key=lambda b: b.id)
        rows.sort(key=lambda b: getattr(b, key), reverse=query.sort_direction == "DESC")

        return rows[query.offset:query.offset + query.limit]

    def delete(self, book_id: int) -> None:
        book = self.get_by_id(book_id)
        self._books.remove(book)
