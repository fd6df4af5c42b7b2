from __future__ import annotations

STATUS_AVAILABLE = "Available"
STATUS_OUT_OF_STOCK = "Out of Stock"


class BookRecord:
    """A single catalog entry. Availability is derived from the quantity held."""

    def __init__(self, id: str, title: str, author: str, quantity: int = 0) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.quantity = quantity

    @property
    def status(self) -> str:
        return STATUS_AVAILABLE if self.quantity > 0 else STATUS_OUT_OF_STOCK

    @property
    def is_available(self) -> bool:
        return self.quantity > 0

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against id, title and author."""
        needle = query.lower()
        return (
            needle in self.id.lower()
            or needle in self.title.lower()
            or needle in self.author.lower()
        )

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({self.id}, qty {self.quantity})"

    def __repr__(self) -> str:
        return f"BookRecord(id={self.id!r}, title={self.title!r}, quantity={self.quantity})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "quantity": self.quantity,
            "status": self.status,
        }

    @staticmethod
    def from_dict(data: dict) -> "BookRecord":
        # Seed rows may carry "qty" and a stored "status"; the status is dropped
        # because it is always recomputed from the quantity.
        quantity = data.get("quantity", data.get("qty", 0))
        return BookRecord(
            id=data["id"],
            title=data["title"],
            author=data["author"],
            quantity=int(quantity),
        )
