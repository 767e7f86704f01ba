"""
Generic CRUD skeleton shared by every marketplace use case.

Implements the repeated fetch-validate-mutate-refetch sequence once,
parameterized by entity type. Subclasses add reference checks and
mutation hooks; bespoke rules (capacity, history) stay in the domain.

Every mutating path runs inside the transaction manager, so a failure
at any step leaves storage untouched.
"""

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from app.domain.marketplace.errors import EntityNotFoundError, StorageError
from app.domain.marketplace.ports import Repository, TransactionManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CrudUseCase(Generic[T]):
    """Fetch/list/create/update/delete/restore for one entity type.

    Attributes:
        entity_name: Human-readable name used in not-found messages.
    """

    entity_name = "record"

    def __init__(self, repository: Repository[T], tx_manager: TransactionManager) -> None:
        self._repository = repository
        self._tx = tx_manager

    # ── reads ────────────────────────────────────────────────────

    def get(self, record_id: Any) -> T:
        """Return the active record or raise EntityNotFoundError."""
        entity = self._repository.get_by_id(record_id)
        if entity is None:
            raise EntityNotFoundError(self.entity_name, record_id)
        return entity

    def list_all(self) -> list[T]:
        return self._repository.list_all()

    # ── writes ───────────────────────────────────────────────────

    def _create(self, entity: T, check: Optional[Callable[[], None]] = None) -> T:
        """Run reference checks, insert, and return the re-fetched record."""
        with self._tx.transaction():
            if check is not None:
                check()
            stored = self._repository.add(entity)
            created = self._refetch(stored.id)
        logger.info("Created %s id=%s", self.entity_name, created.id)
        return created

    def _update(self, record_id: Any, mutate: Callable[[T], T]) -> T:
        """Fetch the active record, apply mutate(), persist, re-fetch.

        mutate() may raise a domain error to abort before any write.
        """
        with self._tx.transaction():
            current = self.get(record_id)
            self._repository.update(mutate(current))
            updated = self._refetch(record_id)
        logger.info("Updated %s id=%s", self.entity_name, record_id)
        return updated

    def delete(self, record_id: Any) -> None:
        """Soft-delete an active record."""
        with self._tx.transaction():
            self.get(record_id)
            self._repository.soft_delete(record_id)
        logger.info("Deleted %s id=%s", self.entity_name, record_id)

    def restore(self, record_id: Any) -> T:
        """Re-activate a soft-deleted record and return it."""
        with self._tx.transaction():
            deleted = self._repository.get_deleted_by_id(record_id)
            if deleted is None:
                raise EntityNotFoundError(f"deleted {self.entity_name}", record_id)
            self._before_restore(deleted)
            self._repository.restore(record_id)
            restored = self._refetch(record_id)
        logger.info("Restored %s id=%s", self.entity_name, record_id)
        return restored

    def _before_restore(self, deleted: T) -> None:
        """Hook: validate a soft-deleted record before it is re-activated."""

    def _refetch(self, record_id: Any) -> T:
        entity = self._repository.get_by_id(record_id)
        if entity is None:
            raise StorageError(
                "refetch", f"{self.entity_name} {record_id} missing after write"
            )
        return entity


def require(repository: Repository[Any], record_id: Any, entity_name: str) -> Any:
    """Return a referenced active record or raise EntityNotFoundError."""
    entity = repository.get_by_id(record_id)
    if entity is None:
        raise EntityNotFoundError(entity_name, record_id)
    return entity
