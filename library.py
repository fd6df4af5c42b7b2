import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from book import BookRecord
from config import settings

logger = logging.getLogger(__name__)

SEED_BOOKS: List[Dict[str, Any]] = [
    {"id": "B-101", "title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "qty": 5, "status": "Available"},
    {"id": "B-102", "title": "Clean Code", "author": "Robert C. Martin", "qty": 2, "status": "Available"},
    {"id": "B-103", "title": "Introduction to Algorithms", "author": "Thomas H. Cormen", "qty": 0, "status": "Issued"},
    {"id": "B-104", "title": "Design Patterns", "author": "Erich Gamma", "qty": 3, "status": "Available"},
]


class LibraryError(Exception):
    """Base class for expected catalog failures."""

    message = "Library operation failed."

    def __init__(self, book_id: str, message: Optional[str] = None) -> None:
        self.book_id = book_id
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DuplicateIdError(LibraryError):
    message = "Book ID already exists!"


class NotFoundError(LibraryError, LookupError):
    message = "Book ID not found."


class OutOfStockError(LibraryError):
    message = "Book is currently out of stock."


class InvalidBookError(LibraryError, ValueError):
    message = "Invalid book details."


@dataclass
class OperationResult:
    book: Optional[BookRecord] = None
    error: Optional[LibraryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> BookRecord:
        if self.error is not None:
            raise self.error
        return self.book


class Library:
    """Owns the ordered catalog of book records and every mutation on it."""

    def __init__(self, books: Optional[Iterable[BookRecord]] = None) -> None:
        self.books: List[BookRecord] = []
        for book in books or []:
            result = self.add_book(book.id, book.title, book.author, book.quantity)
            if not result.ok:
                raise result.error

    @classmethod
    def with_seed(cls) -> "Library":
        """Build a fresh catalog from the fixed seed list."""
        return cls(BookRecord.from_dict(row) for row in SEED_BOOKS)

    # ------------------------- Core operations ------------------------- #
    def add_book(self, book_id: str, title: str, author: str, quantity: int) -> OperationResult:
        if not book_id:
            return self._reject("add", InvalidBookError(book_id, "Book ID cannot be empty."))
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            return self._reject("add", InvalidBookError(book_id, "Quantity must be a non-negative whole number."))
        if self.find_book(book_id) is not None:
            return self._reject("add", DuplicateIdError(book_id))

        book = BookRecord(id=book_id, title=title, author=author, quantity=quantity)
        self.books.append(book)
        logger.info("Added %s (%r, qty %d)", book_id, title, quantity)
        return OperationResult(book=book)

    def issue_book(self, book_id: str, borrower: str) -> OperationResult:
        book = self.find_book(book_id)
        if book is None:
            return self._reject("issue", NotFoundError(book_id))
        if book.quantity <= 0:
            return self._reject("issue", OutOfStockError(book_id))

        book.quantity -= 1
        logger.info("Issued %s to %s, %d left", book_id, borrower, book.quantity)
        return OperationResult(book=book)

    def return_book(self, book_id: str) -> OperationResult:
        book = self.find_book(book_id)
        if book is None:
            return self._reject("return", NotFoundError(book_id))

        # No ceiling: total owned copies are not tracked separately.
        book.quantity += 1
        logger.info("Returned %s, %d available", book_id, book.quantity)
        return OperationResult(book=book)

    def delete_book(self, book_id: str) -> OperationResult:
        book = self.find_book(book_id)
        if book is None:
            return self._reject("delete", NotFoundError(book_id, "Could not find book to delete."))

        self.books.remove(book)
        logger.info("Deleted %s", book_id)
        return OperationResult(book=book)

    # ------------------------- Queries ------------------------- #
    def list_books(self) -> List[BookRecord]:
        return list(self.books)

    def find_book(self, book_id: str) -> Optional[BookRecord]:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def search_books(self, query: str) -> List[BookRecord]:
        """Records whose id, title or author contains ``query``, in catalog order."""
        if not query:
            return self.list_books()
        return [book for book in self.books if book.matches(query)]

    def get_statistics(self) -> Dict[str, Any]:
        available = sum(1 for book in self.books if book.is_available)
        return {
            "total_titles": len(self.books),
            "total_copies": sum(book.quantity for book in self.books),
            "available_titles": available,
            "out_of_stock_titles": len(self.books) - available,
            "unique_authors": len({book.author for book in self.books}),
        }

    def __len__(self) -> int:
        return len(self.books)

    # ------------------------- Utilities ------------------------- #
    @staticmethod
    def _reject(operation: str, error: LibraryError) -> OperationResult:
        logger.info("%s %r rejected: %s (%s)", operation, error.book_id, type(error).__name__, error.message)
        return OperationResult(error=error)


def create_library(load_seed: Optional[bool] = None) -> Library:
    """Startup factory: seeded unless LIBRARY_SEED turns it off."""
    if load_seed is None:
        load_seed = settings.load_seed
    return Library.with_seed() if load_seed else Library()
