from bookshelf.db.session import SessionLocal
from bookshelf.models.book import Book

BOOKS = [
    ("The Left Hand of Darkness", 1969, ["sci-fi", "drama"]),
    ("Dune", 1965, ["sci-fi", "adventure"]),
    ("The Big Sleep", 1939, ["noir", "crime"]),
    ("Kindred", 1979, ["sci-fi", "drama", "historical"]),
    ("The Maltese Falcon", 1930, ["noir", "crime", "drama"]),
    ("Solaris", 1961, ["sci-fi"]),
]

def upsert_book(db, title: str, year: int, genres: list[str]) -> Book:
    book = db.query(Book).filter(Book.title == title, Book.year == year).one_or_none()
    if book:
        return book

    book = Book(title=title, year=year, genres=genres)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book

def main():
    db = SessionLocal()
    try:
        seeded = [upsert_book(db, *row) for row in BOOKS]
        print("Seeded books:")
        for b in seeded:
            print(b.id, b.title, b.year, ",".join(b.genres))
    finally:
        db.close()

if __name__ == "__main__":
    main()
