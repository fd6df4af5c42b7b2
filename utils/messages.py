"""Notification texts shared by the terminal and HTTP front ends."""

from typing import Optional

from book import BookRecord
from library import LibraryError


def success_message(operation: str, book: BookRecord, borrower: Optional[str] = None) -> str:
    if operation == "add":
        return "Success: New book added to library."
    if operation == "issue":
        return f"Success: Issued '{book.title}' to {borrower}."
    if operation == "return":
        return "Success: Book returned safely."
    if operation == "delete":
        return "Success: Book entry deleted."
    raise ValueError(f"Unknown operation: {operation}")


def error_message(error: LibraryError) -> str:
    return f"Error: {error.message}"
