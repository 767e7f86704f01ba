"""
Input checks run by use cases before any repository call.

The HTTP schemas enforce the same bounds; these checks keep the use
cases safe when called from elsewhere (scripts, tests, other adapters).
"""

from decimal import Decimal
from typing import Optional

from app.domain.marketplace.errors import InvalidInputError


def require_positive(field: str, value: Decimal) -> Decimal:
    """Raise InvalidInputError unless value > 0."""
    if value <= 0:
        raise InvalidInputError(field, "must be greater than 0")
    return value


def require_non_negative(field: str, value: Decimal) -> Decimal:
    """Raise InvalidInputError if value < 0."""
    if value < 0:
        raise InvalidInputError(field, "must not be negative")
    return value


def require_text(field: str, value: Optional[str], min_length: int = 1) -> str:
    """Raise InvalidInputError unless value has at least min_length non-blank chars."""
    if value is None or len(value.strip()) < min_length:
        raise InvalidInputError(field, f"must be at least {min_length} characters")
    return value.strip()
