"""
Domain-specific errors for the marketplace bounded context.

All errors raised from the domain and application layers are defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from typing import Any


class MarketplaceDomainError(Exception):
    """Base error for all marketplace domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidInputError(MarketplaceDomainError):
    """Raised when a command carries a malformed or out-of-range field."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason


class EntityNotFoundError(MarketplaceDomainError):
    """Raised when a referenced entity does not exist in the expected state."""

    def __init__(self, entity: str, identifier: Any) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.identifier = identifier


class CapacityExceededError(MarketplaceDomainError):
    """Raised when an allocation would exceed its parent's capacity."""

    def __init__(self, requested_total: Any, capacity: Any) -> None:
        super().__init__("land area not enough")
        self.requested_total = requested_total
        self.capacity = capacity


class DuplicateEntityError(MarketplaceDomainError):
    """Raised when a write would break a uniqueness rule."""

    def __init__(self, entity: str, detail: str = "already exists") -> None:
        super().__init__(f"{entity} {detail}")
        self.entity = entity
        self.detail = detail


class StorageError(MarketplaceDomainError):
    """Raised when a repository read or write fails.

    The underlying reason is kept for logs and never sent to clients.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Storage failure during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class ConcurrentUpdateError(MarketplaceDomainError):
    """Raised when a record changed between being read and being written."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} was modified concurrently, retry the update")
        self.entity = entity
