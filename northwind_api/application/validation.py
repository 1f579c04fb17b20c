"""Guard functions called at the top of every service entry point."""

from decimal import Decimal
from typing import Optional, Union

from .exceptions import InvalidArgumentError

Number = Union[int, float, Decimal]


def normalize_paging(page_number: int, page_size: int, default_page_size: int) -> tuple[int, int]:
    """Clamp invalid paging input instead of failing: page 0 becomes 1, size 0 becomes the default."""
    if page_number is None or page_number <= 0:
        page_number = 1
    if page_size is None or page_size <= 0:
        page_size = default_page_size
    return page_number, page_size


def require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise InvalidArgumentError(field, f"{field} is required.")
    return value.strip()


def require_non_negative(value: Optional[Number], field: str) -> Number:
    if value is None:
        raise InvalidArgumentError(field, f"{field} is required.")
    if value < 0:
        raise InvalidArgumentError(field, f"{field} cannot be negative.")
    return value


def require_quantity(value: Optional[int], field: str = "quantity") -> int:
    if value is None or value < 1:
        raise InvalidArgumentError(field, f"{field} must be >= 1.")
    return value


def require_positive_id(value: Optional[int], field: str) -> int:
    if value is None or value <= 0:
        raise InvalidArgumentError(field, f"{field} must be a positive identifier.")
    return value
