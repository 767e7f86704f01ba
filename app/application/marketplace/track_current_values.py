"""
Use case: Track prices, demands and supplies with shadow history.

Input: CreateCurrentValueCommand / UpdateCurrentValueCommand / pair ids
Output: the current record, or the full value-over-time timeline
Side effects: Every update appends one history row holding the
pre-update value, then overwrites the current record.
Failure cases: InvalidInputError, EntityNotFoundError,
DuplicateEntityError, ConcurrentUpdateError, StorageError.

The snapshot-then-update sequence runs in one transaction for all
three record kinds: if either write fails, neither is kept. The record
is read under a row lock, so concurrent updates of one record apply
one after the other and each leaves its own history row.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from decimal import Decimal
from typing import Generic, TypeVar
from uuid import UUID, uuid4

from app.application.marketplace.crud import CrudUseCase, require
from app.application.marketplace.dtos import (
    CreateCurrentValueCommand,
    UpdateCurrentValueCommand,
)
from app.application.marketplace.validation import (
    require_non_negative,
    require_positive,
    require_text,
)
from app.domain.marketplace.entities import DEFAULT_UNIT, Demand, Price, Supply
from app.domain.marketplace.errors import DuplicateEntityError, EntityNotFoundError
from app.domain.marketplace.history import build_timeline, snapshot_before_update
from app.domain.marketplace.ports import (
    CommodityRepository,
    CurrentValueRepository,
    HistoryRepository,
    RegionRepository,
    TransactionManager,
)

logger = logging.getLogger(__name__)

C = TypeVar("C", Price, Demand, Supply)
H = TypeVar("H")


class CurrentValueUseCase(CrudUseCase[C], Generic[C, H], ABC):
    """Create, update-with-history, read and soft-delete current records.

    Subclasses choose the record type and how a create command maps to it.

    Attributes:
        zero_allowed: Whether a value of 0 is valid (quantities) or not (prices).
    """

    zero_allowed = True

    def __init__(
        self,
        repository: CurrentValueRepository[C],
        history_repo: HistoryRepository[H],
        commodity_repo: CommodityRepository,
        region_repo: RegionRepository,
        tx_manager: TransactionManager,
    ) -> None:
        super().__init__(repository, tx_manager)
        self._current_repo = repository
        self._history_repo = history_repo
        self._commodity_repo = commodity_repo
        self._region_repo = region_repo

    @abstractmethod
    def _build(self, command: CreateCurrentValueCommand, value: Decimal) -> C:
        """Build a new current record from a create command."""

    def _validate_value(self, value: Decimal) -> Decimal:
        if self.zero_allowed:
            return require_non_negative("value", value)
        return require_positive("value", value)

    def _ensure_pair_free(self, commodity_id: UUID, region_id: UUID) -> None:
        if self._current_repo.get_by_commodity_and_region(commodity_id, region_id):
            raise DuplicateEntityError(
                self.entity_name, "already exists for this commodity and region"
            )

    # ── writes ───────────────────────────────────────────────────

    def create(self, command: CreateCurrentValueCommand) -> C:
        record = self._build(command, self._validate_value(command.value))

        def check() -> None:
            require(self._commodity_repo, command.commodity_id, "commodity")
            require(self._region_repo, command.region_id, "region")
            self._ensure_pair_free(command.commodity_id, command.region_id)

        return self._create(record, check=check)

    def update_current(self, command: UpdateCurrentValueCommand) -> C:
        """Snapshot the current record into history, then apply the new value.

        Raises:
            InvalidInputError: If the value is out of range.
            EntityNotFoundError: If no active record has this id.
            StorageError: If the history insert or the update fails; nothing
                is written in that case.
            ConcurrentUpdateError: If another update of the same record
                committed after this one read it.
        """
        value = self._validate_value(command.value)

        with self._tx.transaction():
            logger.info("Starting %s update transaction", self.entity_name)
            current = self._current_repo.get_for_update(command.record_id)
            if current is None:
                raise EntityNotFoundError(self.entity_name, command.record_id)

            self._history_repo.add(snapshot_before_update(current))
            logger.info(
                "%s history created for revision=%d", self.entity_name, current.revision
            )

            self._current_repo.update(
                replace(
                    current,
                    **{current.value_field: value, "revision": current.revision + 1},
                )
            )
            updated = self._refetch(current.id)

        logger.info("%s update transaction completed", self.entity_name)
        return updated

    def _before_restore(self, deleted: C) -> None:
        self._ensure_pair_free(deleted.commodity_id, deleted.region_id)

    # ── reads ────────────────────────────────────────────────────

    def list_by_commodity(self, commodity_id: UUID) -> list[C]:
        return self._current_repo.list_by_commodity(commodity_id)

    def list_by_region(self, region_id: UUID) -> list[C]:
        return self._current_repo.list_by_region(region_id)

    def get_current(self, commodity_id: UUID, region_id: UUID) -> C:
        record = self._current_repo.get_by_commodity_and_region(commodity_id, region_id)
        if record is None:
            raise EntityNotFoundError(self.entity_name, (commodity_id, region_id))
        return record

    def get_history(self, commodity_id: UUID, region_id: UUID) -> list[H]:
        """Return the value-over-time timeline of a (commodity, region) pair.

        Persisted history rows in chronological order followed by one
        entry built from the current record.
        """
        history = self._history_repo.list_by_commodity_and_region(
            commodity_id, region_id
        )
        current = self.get_current(commodity_id, region_id)
        return build_timeline(history, current)


class PriceUseCase(CurrentValueUseCase[Price, H]):
    entity_name = "price"
    zero_allowed = False

    def _build(self, command: CreateCurrentValueCommand, value: Decimal) -> Price:
        return Price(
            id=uuid4(),
            commodity_id=command.commodity_id,
            region_id=command.region_id,
            price=value,
        )


class DemandUseCase(CurrentValueUseCase[Demand, H]):
    entity_name = "demand"

    def _build(self, command: CreateCurrentValueCommand, value: Decimal) -> Demand:
        return Demand(
            id=uuid4(),
            commodity_id=command.commodity_id,
            region_id=command.region_id,
            quantity=value,
            unit=require_text("unit", command.unit or DEFAULT_UNIT),
        )


class SupplyUseCase(CurrentValueUseCase[Supply, H]):
    entity_name = "supply"

    def _build(self, command: CreateCurrentValueCommand, value: Decimal) -> Supply:
        return Supply(
            id=uuid4(),
            commodity_id=command.commodity_id,
            region_id=command.region_id,
            quantity=value,
            unit=require_text("unit", command.unit or DEFAULT_UNIT),
        )
