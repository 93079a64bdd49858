from pydantic import BaseModel, Field


class BookOut(BaseModel):
    # created_at is deliberately not exposed
    id: int
    title: str
    year: int
    genres: list[str]
    version: int


class BookCreate(BaseModel):
    """Defaults let missing fields reach the service validator, which reports them all at once."""
    title: str = ""
    year: int = 0
    genres: list[str] | None = Field(default=None, description="1 to 5 unique genres")


class BookEnvelope(BaseModel):
    book: BookOut


class BookListOut(BaseModel):
    books: list[BookOut]
