"""
Use case: Allocate land area to commodities.

Input: CreateLandCommodityCommand / UpdateLandCommodityCommand / ids
Output: LandCommodity
Side effects: Inserts, updates, soft-deletes or restores land_commodities rows.
Failure cases: InvalidInputError, EntityNotFoundError, CapacityExceededError.

Create, update and restore share one protocol: lock the parent land,
sum its active allocations, run the capacity check, and only then
write. All of it happens in a single transaction, so a rejection
writes nothing and concurrent allocations on one land serialise on
the land row lock.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from uuid import UUID, uuid4

from app.application.marketplace.crud import CrudUseCase, require
from app.application.marketplace.dtos import (
    CreateLandCommodityCommand,
    UpdateLandCommodityCommand,
)
from app.application.marketplace.validation import require_positive
from app.domain.marketplace.capacity import check_capacity
from app.domain.marketplace.entities import Land, LandCommodity
from app.domain.marketplace.errors import CapacityExceededError, EntityNotFoundError
from app.domain.marketplace.ports import (
    CommodityRepository,
    LandCommodityRepository,
    LandRepository,
    TransactionManager,
)

logger = logging.getLogger(__name__)

ZERO = Decimal(0)


class LandCommodityUseCase(CrudUseCase[LandCommodity]):
    """Capacity-checked allocation of land area to commodities."""

    entity_name = "land commodity"

    def __init__(
        self,
        land_commodity_repo: LandCommodityRepository,
        land_repo: LandRepository,
        commodity_repo: CommodityRepository,
        tx_manager: TransactionManager,
    ) -> None:
        super().__init__(land_commodity_repo, tx_manager)
        self._land_commodity_repo = land_commodity_repo
        self._land_repo = land_repo
        self._commodity_repo = commodity_repo

    def create(self, command: CreateLandCommodityCommand) -> LandCommodity:
        """Allocate a new area on a land.

        Raises:
            InvalidInputError: If land_area is not positive.
            EntityNotFoundError: If the commodity or land does not exist.
            CapacityExceededError: If the land has not enough free area.
        """
        land_area = require_positive("land_area", command.land_area)

        with self._tx.transaction():
            require(self._commodity_repo, command.commodity_id, "commodity")
            land = self._lock_land(command.land_id)
            self._ensure_fits(land, prior_own_amount=ZERO, requested=land_area)

            stored = self._land_commodity_repo.add(
                LandCommodity(
                    id=uuid4(),
                    land_id=land.id,
                    commodity_id=command.commodity_id,
                    land_area=land_area,
                )
            )
            created = self._refetch(stored.id)

        logger.info(
            "Allocated land_area=%s on land=%s to commodity=%s",
            land_area,
            land.id,
            command.commodity_id,
        )
        return created

    def update(self, command: UpdateLandCommodityCommand) -> LandCommodity:
        """Change the land, commodity and area of an active allocation.

        The allocation's stored area is excluded from the target land's
        total only when it already counts against that land.
        """
        land_area = require_positive("land_area", command.land_area)

        with self._tx.transaction():
            current = self.get(command.land_commodity_id)
            require(self._commodity_repo, command.commodity_id, "commodity")
            land = self._lock_land(command.land_id)

            prior = current.land_area if current.land_id == land.id else ZERO
            self._ensure_fits(land, prior_own_amount=prior, requested=land_area)

            self._land_commodity_repo.update(
                replace(
                    current,
                    land_id=land.id,
                    commodity_id=command.commodity_id,
                    land_area=land_area,
                )
            )
            updated = self._refetch(current.id)

        logger.info(
            "Updated allocation=%s land_area=%s -> %s",
            current.id,
            current.land_area,
            land_area,
        )
        return updated

    def _before_restore(self, deleted: LandCommodity) -> None:
        # The deleted row is not part of the active total, so its whole
        # stored area is requested again.
        land = self._lock_land(deleted.land_id)
        self._ensure_fits(land, prior_own_amount=ZERO, requested=deleted.land_area)

    def list_by_land(self, land_id: UUID) -> list[LandCommodity]:
        return self._land_commodity_repo.list_by_land(land_id)

    def list_by_commodity(self, commodity_id: UUID) -> list[LandCommodity]:
        return self._land_commodity_repo.list_by_commodity(commodity_id)

    # ── helpers ──────────────────────────────────────────────────

    def _lock_land(self, land_id: UUID) -> Land:
        land = self._land_repo.get_for_update(land_id)
        if land is None:
            raise EntityNotFoundError("land", land_id)
        return land

    def _ensure_fits(
        self, land: Land, prior_own_amount: Decimal, requested: Decimal
    ) -> None:
        existing = self._land_commodity_repo.sum_land_area_by_land(land.id)
        decision = check_capacity(existing, prior_own_amount, requested, land.land_area)
        if not decision.accepted:
            logger.warning(
                "Allocation rejected on land=%s: total %s exceeds capacity %s",
                land.id,
                decision.effective_total,
                decision.capacity,
            )
            raise CapacityExceededError(
                requested_total=decision.effective_total,
                capacity=decision.capacity,
            )
