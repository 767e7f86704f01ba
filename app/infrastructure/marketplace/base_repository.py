"""
Base repository adapters.

Rows map to domain entities by field name: every dataclass field of the
entity has a column of the same name on the model. Repositories flush
but never commit; the transaction manager owns commit and rollback.
"""

import logging
from dataclasses import fields
from typing import Any, Generic, NoReturn, Optional, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.domain.marketplace.errors import (
    ConcurrentUpdateError,
    DuplicateEntityError,
    StorageError,
)
from app.infrastructure.marketplace.models import Base, utcnow

E = TypeVar("E")
M = TypeVar("M", bound=Base)

# Columns maintained by the ORM, never copied from an entity on write.
MANAGED_COLUMNS = frozenset({"created_at", "updated_at", "deleted_at"})


class SqlAlchemyRepository(Generic[E, M]):
    """Common get/list/add/update over one model class.

    Subclasses set entity_type, model_type and entity_name. Soft-delete
    filtering applies when the model has a deleted_at column.
    """

    entity_type: type
    model_type: type
    entity_name = "record"

    def __init__(self, session: Session) -> None:
        self._session = session
        self._logger = logging.getLogger(f"repository.{self.entity_name}")

    @property
    def _soft_deletes(self) -> bool:
        return hasattr(self.model_type, "deleted_at")

    @property
    def _listing_order(self):
        return getattr(self.model_type, "created_at", self.model_type.id)

    # ── mapping ──────────────────────────────────────────────────

    def _to_entity(self, row: M) -> E:
        return self.entity_type(
            **{f.name: getattr(row, f.name) for f in fields(self.entity_type)}
        )

    def _column_values(self, entity: E) -> dict[str, Any]:
        values = {
            f.name: getattr(entity, f.name)
            for f in fields(self.entity_type)
            if f.name not in MANAGED_COLUMNS
        }
        if values.get("id") is None:
            values.pop("id", None)
        return values

    # ── query helpers ────────────────────────────────────────────

    def _active(self) -> Select:
        stmt = select(self.model_type)
        if self._soft_deletes:
            stmt = stmt.where(self.model_type.deleted_at.is_(None))
        return stmt

    def _deleted(self) -> Select:
        return select(self.model_type).where(self.model_type.deleted_at.is_not(None))

    def _fetch_row(self, stmt: Select, operation: str) -> Optional[M]:
        try:
            return self._session.scalars(stmt).first()
        except SQLAlchemyError as exc:
            self._handle_db_error(exc, operation)

    def _fetch_locked(self, record_id: Any, operation: str) -> Optional[E]:
        """Load an active row with SELECT ... FOR UPDATE.

        populate_existing refreshes a row already held by the session, so the
        caller sees the values committed before the lock was granted.
        """
        stmt = (
            self._active()
            .where(self.model_type.id == record_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self._fetch_one(stmt, operation)

    def _fetch_one(self, stmt: Select, operation: str) -> Optional[E]:
        row = self._fetch_row(stmt, operation)
        return self._to_entity(row) if row is not None else None

    def _fetch_all(self, stmt: Select, operation: str) -> list[E]:
        try:
            rows = self._session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            self._handle_db_error(exc, operation)
        return [self._to_entity(row) for row in rows]

    def _flush(self, operation: str) -> None:
        try:
            self._session.flush()
        except SQLAlchemyError as exc:
            self._handle_db_error(exc, operation)

    def _handle_db_error(self, error: SQLAlchemyError, operation: str) -> NoReturn:
        """Translate a SQLAlchemy error into a domain error and raise it."""
        if isinstance(error, StaleDataError):
            self._logger.warning("Stale %s write in %s", self.entity_name, operation)
            raise ConcurrentUpdateError(self.entity_name) from error
        self._logger.error("Database error in %s: %s", operation, error)
        if isinstance(error, IntegrityError):
            message = str(error.orig).lower()
            if "unique" in message or "duplicate" in message:
                raise DuplicateEntityError(self.entity_name) from error
        raise StorageError(f"{self.entity_name} {operation}", str(error)) from error

    # ── Repository port ──────────────────────────────────────────

    def get_by_id(self, record_id: Any) -> Optional[E]:
        return self._fetch_one(
            self._active().where(self.model_type.id == record_id), "get_by_id"
        )

    def list_all(self) -> list[E]:
        return self._fetch_all(self._active().order_by(self._listing_order), "list_all")

    def add(self, entity: E) -> E:
        row = self.model_type(**self._column_values(entity))
        self._session.add(row)
        self._flush("add")
        self._logger.debug("Added %s id=%s", self.entity_name, row.id)
        return self._to_entity(row)

    def update(self, entity: E) -> None:
        row = self._fetch_row(
            self._active().where(self.model_type.id == entity.id), "update"
        )
        if row is None:
            raise StorageError(f"{self.entity_name} update", f"{entity.id} not found")
        for name, value in self._column_values(entity).items():
            setattr(row, name, value)
        self._flush("update")

    # ── SoftDeleteRepository port ────────────────────────────────

    def get_deleted_by_id(self, record_id: Any) -> Optional[E]:
        return self._fetch_one(
            self._deleted().where(self.model_type.id == record_id), "get_deleted_by_id"
        )

    def soft_delete(self, record_id: Any) -> None:
        row = self._fetch_row(
            self._active().where(self.model_type.id == record_id), "soft_delete"
        )
        if row is None:
            raise StorageError(f"{self.entity_name} delete", f"{record_id} not found")
        row.deleted_at = utcnow()
        self._flush("soft_delete")

    def restore(self, record_id: Any) -> None:
        row = self._fetch_row(
            self._deleted().where(self.model_type.id == record_id), "restore"
        )
        if row is None:
            raise StorageError(f"{self.entity_name} restore", f"{record_id} not found")
        row.deleted_at = None
        self._flush("restore")


class SqlAlchemyHistoryRepository(SqlAlchemyRepository[E, M]):
    """Append-only history rows.

    Timestamps are copied from the snapshot, so they are written as-is
    rather than treated as managed columns.
    """

    def _column_values(self, entity: E) -> dict[str, Any]:
        return {f.name: getattr(entity, f.name) for f in fields(self.entity_type)}

    def add(self, history: E) -> None:
        self._session.add(self.model_type(**self._column_values(history)))
        self._flush("add")

    def list_by_commodity_and_region(self, commodity_id, region_id) -> list[E]:
        stmt = (
            select(self.model_type)
            .where(
                self.model_type.commodity_id == commodity_id,
                self.model_type.region_id == region_id,
            )
            .order_by(self.model_type.updated_at, self.model_type.revision)
        )
        return self._fetch_all(stmt, "list_by_commodity_and_region")
