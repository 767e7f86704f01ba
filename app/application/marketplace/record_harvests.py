"""
Use case: Record harvests from land-commodity allocations.

Input: CreateHarvestCommand / UpdateHarvestCommand
Output: Harvest
Side effects: Inserts a harvest and marks its allocation as harvested,
in one transaction.
Failure cases: InvalidInputError, EntityNotFoundError.
"""

import logging
from dataclasses import replace
from uuid import UUID, uuid4

from app.application.marketplace.crud import CrudUseCase, require
from app.application.marketplace.dtos import CreateHarvestCommand, UpdateHarvestCommand
from app.application.marketplace.validation import require_positive, require_text
from app.domain.marketplace.entities import Harvest
from app.domain.marketplace.ports import (
    HarvestRepository,
    LandCommodityRepository,
    TransactionManager,
)

logger = logging.getLogger(__name__)


class HarvestUseCase(CrudUseCase[Harvest]):
    """Create, read, update, delete and restore harvests."""

    entity_name = "harvest"

    def __init__(
        self,
        harvest_repo: HarvestRepository,
        land_commodity_repo: LandCommodityRepository,
        tx_manager: TransactionManager,
    ) -> None:
        super().__init__(harvest_repo, tx_manager)
        self._harvest_repo = harvest_repo
        self._land_commodity_repo = land_commodity_repo

    def create(self, command: CreateHarvestCommand) -> Harvest:
        quantity = require_positive("quantity", command.quantity)
        unit = require_text("unit", command.unit)

        with self._tx.transaction():
            allocation = require(
                self._land_commodity_repo, command.land_commodity_id, "land commodity"
            )
            stored = self._harvest_repo.add(
                Harvest(
                    id=uuid4(),
                    land_commodity_id=allocation.id,
                    quantity=quantity,
                    unit=unit,
                    harvest_date=command.harvest_date,
                )
            )
            if not allocation.harvested:
                self._land_commodity_repo.update(replace(allocation, harvested=True))
            created = self._refetch(stored.id)

        logger.info(
            "Recorded harvest=%s for allocation=%s", created.id, allocation.id
        )
        return created

    def update(self, command: UpdateHarvestCommand) -> Harvest:
        changes = {}
        if command.quantity is not None:
            changes["quantity"] = require_positive("quantity", command.quantity)
        if command.unit is not None:
            changes["unit"] = require_text("unit", command.unit)
        if command.harvest_date is not None:
            changes["harvest_date"] = command.harvest_date
        return self._update(command.harvest_id, lambda h: replace(h, **changes))

    def _before_restore(self, deleted: Harvest) -> None:
        require(self._land_commodity_repo, deleted.land_commodity_id, "land commodity")

    def list_by_land_commodity(self, land_commodity_id: UUID) -> list[Harvest]:
        return self._harvest_repo.list_by_land_commodity(land_commodity_id)

    def list_by_land(self, land_id: UUID) -> list[Harvest]:
        return self._harvest_repo.list_by_land(land_id)

    def list_by_commodity(self, commodity_id: UUID) -> list[Harvest]:
        return self._harvest_repo.list_by_commodity(commodity_id)
