from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator

from book import BookRecord
from config import configure_logging, settings
from library import (
    DuplicateIdError,
    InvalidBookError,
    Library,
    LibraryError,
    NotFoundError,
    OperationResult,
    OutOfStockError,
    create_library,
)
from utils.messages import error_message, success_message
from utils.validators import BookIdValidator, TextValidator

ERROR_STATUS = {
    NotFoundError: 404,
    DuplicateIdError: 409,
    OutOfStockError: 409,
    InvalidBookError: 422,
}


# --- Modeller ---
class BookModel(BaseModel):
    id: str
    title: str
    author: str
    quantity: int
    status: str


class BookCreateModel(BaseModel):
    id: str = Field(min_length=1, description="Unique catalog id, e.g. B-105")
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    quantity: int = Field(ge=0, description="Copies on the shelf")

    @field_validator("id")
    @classmethod
    def _strip_id(cls, value: str) -> str:
        return BookIdValidator.normalize_id(value)

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        if not TextValidator.validate_title(value):
            raise ValueError("Title cannot be empty.")
        return value.strip()

    @field_validator("author")
    @classmethod
    def _check_author(cls, value: str) -> str:
        if not TextValidator.validate_author(value):
            raise ValueError("Please enter a valid author name.")
        return value.strip()


class IssueModel(BaseModel):
    borrower: str = Field(min_length=1, description="Student receiving the copy")

    @field_validator("borrower")
    @classmethod
    def _check_borrower(cls, value: str) -> str:
        if not TextValidator.validate_author(value):
            raise ValueError("Please enter the student's name.")
        return value.strip()


class NotificationModel(BaseModel):
    message: str
    notification_timeout: float
    book: Optional[BookModel] = None


class StatsModel(BaseModel):
    total_titles: int
    total_copies: int
    available_titles: int
    out_of_stock_titles: int
    unique_authors: int


def _book_model(book: BookRecord) -> BookModel:
    return BookModel(**book.to_dict())


def _status_for(error: LibraryError) -> int:
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status_code
    return 400


def _respond(result: OperationResult, operation: str, borrower: Optional[str] = None) -> NotificationModel:
    """Turn a store result into a toast payload, or an HTTP error carrying the toast text."""
    if not result.ok:
        raise HTTPException(status_code=_status_for(result.error), detail=error_message(result.error))
    return NotificationModel(
        message=success_message(operation, result.book, borrower=borrower),
        notification_timeout=settings.notification_timeout,
        book=_book_model(result.book),
    )


def get_library(request: Request) -> Library:
    return request.app.state.library


def create_app(library: Optional[Library] = None) -> FastAPI:
    """Build the API around one catalog; a fresh seeded store is created when none is given."""
    configure_logging()
    app = FastAPI(title=f"{settings.app_name} API", version=settings.app_version, debug=settings.debug)
    app.state.library = library if library is not None else create_library()

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health(lib: Library = Depends(get_library)):
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "total_books": len(lib),
        }

    @app.get("/books", response_model=List[BookModel])
    def list_books(
        q: str = Query("", description="Case-insensitive text matched against id, title and author"),
        lib: Library = Depends(get_library),
    ):
        """List the catalog in insertion order, optionally filtered."""
        return [_book_model(book) for book in lib.search_books(q)]

    @app.get("/books/{book_id}", response_model=BookModel)
    def get_book(book_id: str, lib: Library = Depends(get_library)):
        book = lib.find_book(book_id)
        if book is None:
            raise HTTPException(status_code=404, detail=error_message(NotFoundError(book_id)))
        return _book_model(book)

    @app.post("/books", response_model=NotificationModel, status_code=201)
    def add_book(payload: BookCreateModel, lib: Library = Depends(get_library)):
        result = lib.add_book(payload.id, payload.title, payload.author, payload.quantity)
        return _respond(result, "add")

    @app.post("/books/{book_id}/issue", response_model=NotificationModel)
    def issue_book(book_id: str, payload: IssueModel, lib: Library = Depends(get_library)):
        borrower = payload.borrower
        return _respond(lib.issue_book(book_id, borrower), "issue", borrower=borrower)

    @app.post("/books/{book_id}/return", response_model=NotificationModel)
    def return_book(book_id: str, lib: Library = Depends(get_library)):
        return _respond(lib.return_book(book_id), "return")

    @app.delete("/books/{book_id}", response_model=NotificationModel)
    def delete_book(book_id: str, lib: Library = Depends(get_library)):
        return _respond(lib.delete_book(book_id), "delete")

    @app.get("/stats", response_model=StatsModel)
    def get_library_stats(lib: Library = Depends(get_library)):
        return StatsModel(**lib.get_statistics())

    return app


app = create_app()
