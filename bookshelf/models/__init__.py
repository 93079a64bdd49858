from bookshelf.models.book import Book

__all__ = [ "Book" ]
