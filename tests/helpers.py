from bookshelf.core.filters import ListQuerySpec, ResolvedListQuery
from bookshelf.models.book import Book
from bookshelf.services.books import BOOK_SORT_SAFELIST


def make_book(title: str, year: int = 2000, genres: list[str] | None = None) -> Book:
    return Book(title=title, year=year, genres=list(genres or ["fiction"]))


def resolved(page: int = 1, page_size: int = 20, sort: str = "id") -> ResolvedListQuery:
    return ListQuerySpec(
        page=page,
        page_size=page_size,
        sort=sort,
        sort_safelist=BOOK_SORT_SAFELIST,
    ).resolve()


def shelf_rows(n: int = 250) -> list[tuple[str, int, list[str]]]:
    """
    `n` books with heavily duplicated years and titles so that ordering
    depends on the id tiebreak.
    """
    rows = []
    for i in range(n):
        rows.append((f"Volume {i % 7}", 1990 + (i % 5), ["sci-fi"] if i % 2 else ["drama"]))
    return rows


def walk_pages(fetch, *, page_size: int, sort: str) -> list:
    """Call fetch(query) page by page until an empty page comes back."""
    out = []
    page = 1
    while True:
        batch = fetch(resolved(page=page, page_size=page_size, sort=sort))
        if not batch:
            return out
        out.extend(batch)
        page += 1
