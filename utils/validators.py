from typing import Optional, Union


class BookIdValidator:
    """Catalog ids are compared exactly; only surrounding whitespace is dropped."""

    @staticmethod
    def normalize_id(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.strip()

    @staticmethod
    def is_valid_id(book_id: Optional[str]) -> bool:
        return bool(BookIdValidator.normalize_id(book_id))


class QuantityValidator:

    @staticmethod
    def parse_quantity(raw: Union[str, int, None]) -> Optional[int]:
        """Parse a form value into a copy count; None when it is not a whole number >= 0."""
        if raw is None or isinstance(raw, bool):
            return None
        if isinstance(raw, int):
            return raw if raw >= 0 else None
        text = str(raw).strip()
        if not text.isdecimal():
            return None
        return int(text)


class TextValidator:
    """Very basic text checks for the title and author form fields."""

    @staticmethod
    def _is_non_blank(text: Optional[str]) -> bool:
        return text is not None and bool(text.strip())

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        return TextValidator._is_non_blank(title)

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        # must not be digits only
        if not TextValidator._is_non_blank(author):
            return False
        return not author.strip().isdigit()
