from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from bookshelf.core.filters import ListQuerySpec, SearchCriteria
from bookshelf.core.request import read_csv, read_int, read_string
from bookshelf.core.validator import ValidationSet
from bookshelf.db.session import get_db
from bookshelf.models.book import Book
from bookshelf.repositories.books import BookRepository, SqlBookRepository
from bookshelf.schemas.book import BookCreate, BookEnvelope, BookListOut, BookOut
from bookshelf.schemas.errors import ErrorResponse, ValidationErrorResponse
from bookshelf.services.books import BOOK_SORT_SAFELIST, BookService

router = APIRouter(prefix="/v1/books", tags=["books"])


def get_book_repository(db: Session = Depends(get_db)) -> BookRepository:
    return SqlBookRepository(db)


def get_book_service(repo: BookRepository = Depends(get_book_repository)) -> BookService:
    return BookService(repo)


def to_out(b: Book) -> BookOut:
    return BookOut(
        id=b.id,
        title=b.title,
        year=b.year,
        genres=list(b.genres or []),
        version=b.version,
    )


@router.get(
    "",
    response_model=BookListOut,
    responses={422: {"model": ValidationErrorResponse}, 500: {"model": ErrorResponse}},
)
def list_books(
    title: str | None = Query(default=None, description="Full-text search on title"),
    genres: str | None = Query(default=None, description="Comma-separated genres; all must match"),
    page: str | None = Query(default=None, description="Page number, 1 to 10,000,000 (default 1)"),
    page_size: str | None = Query(default=None, description="Page size, 1 to 100 (default 20)"),
    sort: str | None = Query(default=None, description=f"One of {', '.join(BOOK_SORT_SAFELIST)}"),
    service: BookService = Depends(get_book_service),
):
    """
    List books with optional title search and genre filter.

    Integer parsing failures are reported together with the range and sort
    checks in a single 422 response.
    """
    v = ValidationSet()
    criteria = SearchCriteria(
        title=read_string(title, ""),
        genres=read_csv(genres),
    )
    spec = ListQuerySpec(
        page=read_int(page, "page", 1, v),
        page_size=read_int(page_size, "page_size", 20, v),
        sort=read_string(sort, "id"),
        sort_safelist=BOOK_SORT_SAFELIST,
    )

    books = service.list_books(criteria, spec, v)
    return BookListOut(books=[to_out(b) for b in books])


@router.get(
    "/{book_id}",
    response_model=BookEnvelope,
    responses={404: {"model": ErrorResponse}},
)
def get_book(book_id: int, service: BookService = Depends(get_book_service)):
    return BookEnvelope(book=to_out(service.get_book(book_id)))


@router.post(
    "",
    response_model=BookEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ValidationErrorResponse}},
)
def create_book(
    payload: BookCreate,
    response: Response,
    service: BookService = Depends(get_book_service),
):
    book = service.create_book(title=payload.title, year=payload.year, genres=payload.genres)
    response.headers["Location"] = f"/v1/books/{book.id}"
    return BookEnvelope(book=to_out(book))


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
def delete_book(book_id: int, service: BookService = Depends(get_book_service)):
    service.delete_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
