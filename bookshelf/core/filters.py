"""
Pagination, sorting and search inputs for list endpoints.

ORDER BY cannot be sent as a bind parameter, so the sort key is the one piece
of user input that ends up in the statement text. It is only ever read from a
ResolvedListQuery, which can only be built for a key present in the safelist.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from bookshelf.core.errors import ServiceError
from bookshelf.core.validator import ValidationSet, permitted_value

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class SearchCriteria:
    title: str = ""
    genres: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # accept any iterable of genres, store it immutably
        object.__setattr__(self, "genres", tuple(self.genres))


@dataclass(frozen=True)
class ListQuerySpec:
    page: int = 1
    page_size: int = 20
    sort: str = "id"
    sort_safelist: tuple[str, ...] = ("id",)

    def validate(self, v: ValidationSet) -> None:
        v.check(self.page > 0, "page", "must be greater than zero")
        v.check(self.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
        v.check(self.page_size > 0, "page_size", "must be greater than zero")
        v.check(self.page_size <= MAX_PAGE_SIZE, "page_size", "must be a maximum of 100")
        v.check(permitted_value(self.sort, *self.sort_safelist), "sort", "invalid sort value")

    def resolve(self, v: ValidationSet | None = None) -> "ResolvedListQuery":
        """
        Validate into `v` (a fresh set when omitted) and return the resolved query.
        Raises ServiceError(VALIDATION_FAILED) carrying every recorded failure,
        including ones the caller put into `v` before calling.
        """
        v = v if v is not None else ValidationSet()
        self.validate(v)
        if not v.valid:
            raise ServiceError.validation_failed(v.errors)
        return ResolvedListQuery(
            page=self.page,
            page_size=self.page_size,
            sort=self.sort,
            sort_safelist=tuple(self.sort_safelist),
        )


@dataclass(frozen=True)
class ResolvedListQuery:
    page: int
    page_size: int
    sort: str
    sort_safelist: tuple[str, ...]

    def __post_init__(self):
        if self.sort not in self.sort_safelist:
            raise ValueError(f"unsafe sort parameter: {self.sort!r}")
        if not (1 <= self.page <= MAX_PAGE) or not (1 <= self.page_size <= MAX_PAGE_SIZE):
            raise ValueError("page and page_size must be validated before resolving")

    @property
    def sort_column(self) -> str:
        return self.sort.removeprefix("-")

    @property
    def sort_direction(self) -> str:
        return "DESC" if self.sort.startswith("-") else "ASC"

    @property
    def limit(self) -> int:
        return self.page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
