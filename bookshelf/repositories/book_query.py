from __future__ import annotations

from sqlalchemy import Select, func, literal_column, select
from sqlalchemy.sql.elements import ColumnElement

from bookshelf.core.filters import ResolvedListQuery, SearchCriteria
from bookshelf.models.book import Book

# Matches the expression of the ix_books_title_tsv index
TEXT_SEARCH_CONFIG = literal_column("'simple'::regconfig")


def sort_column(name: str) -> ColumnElement:
    try:
        return Book.__table__.c[name]
    except KeyError:
        raise ValueError(f"books has no sortable column {name!r}") from None


def build_search_query(criteria: SearchCriteria, query: ResolvedListQuery) -> Select:
    """
    SELECT books.* FROM books
    WHERE to_tsvector('simple', title) @@ plainto_tsquery('simple', :title)   -- only when title given
      AND genres @> :genres                                                   -- only when genres given
    ORDER BY <sort column> <ASC|DESC>, id ASC
    LIMIT :limit OFFSET :offset

    Filter values are always bound parameters; the ORDER BY term comes from the
    resolved (safelisted) sort key.
    """
    stmt = select(Book)

    if criteria.title:
        tsv = func.to_tsvector(TEXT_SEARCH_CONFIG, Book.title)
        tsq = func.plainto_tsquery(TEXT_SEARCH_CONFIG, criteria.title)
        stmt = stmt.where(tsv.bool_op("@@")(tsq))

    if criteria.genres:
        stmt = stmt.where(Book.genres.contains(list(criteria.genres)))

    column = sort_column(query.sort_column)
    primary = column.desc() if query.sort_direction == "DESC" else column.asc()

    # id tiebreak keeps page boundaries stable when the primary key has duplicates
    return stmt.order_by(primary, Book.id.asc()).limit(query.limit).offset(query.offset)
