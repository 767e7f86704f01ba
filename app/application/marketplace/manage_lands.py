"""
Use case: Manage land parcels.

Input: CreateLandCommand / UpdateLandCommand
Output: Land
Side effects: Inserts or updates the lands table.
Failure cases: EntityNotFoundError, InvalidInputError,
CapacityExceededError (shrinking a land below its active allocations).
"""

from dataclasses import replace
from decimal import Decimal
from uuid import UUID, uuid4

from app.application.marketplace.crud import CrudUseCase, require
from app.application.marketplace.dtos import CreateLandCommand, UpdateLandCommand
from app.application.marketplace.validation import require_positive, require_text
from app.domain.marketplace.capacity import ensure_capacity
from app.domain.marketplace.entities import Land
from app.domain.marketplace.ports import (
    CityRepository,
    LandCommodityRepository,
    LandRepository,
    TransactionManager,
)


class LandUseCase(CrudUseCase[Land]):
    """Register, read, resize, delete and restore lands."""

    entity_name = "land"

    def __init__(
        self,
        land_repo: LandRepository,
        city_repo: CityRepository,
        land_commodity_repo: LandCommodityRepository,
        tx_manager: TransactionManager,
    ) -> None:
        super().__init__(land_repo, tx_manager)
        self._land_repo = land_repo
        self._city_repo = city_repo
        self._land_commodity_repo = land_commodity_repo

    def create(self, command: CreateLandCommand) -> Land:
        land = Land(
            id=uuid4(),
            user_id=command.user_id,
            city_id=command.city_id,
            land_area=require_positive("land_area", command.land_area),
            certificate=require_text("certificate", command.certificate),
        )
        return self._create(
            land, check=lambda: require(self._city_repo, command.city_id, "city")
        )

    def update(self, command: UpdateLandCommand) -> Land:
        """Change area and certificate.

        The new area must still hold every active allocation on the land.
        """
        land_area = require_positive("land_area", command.land_area)
        certificate = require_text("certificate", command.certificate)

        def mutate(land: Land) -> Land:
            allocated = self._land_commodity_repo.sum_land_area_by_land(land.id)
            ensure_capacity(allocated, Decimal(0), Decimal(0), land_area)
            return replace(land, land_area=land_area, certificate=certificate)

        with self._tx.transaction():
            self._land_repo.get_for_update(command.land_id)
            return self._update(command.land_id, mutate)

    def list_by_user(self, user_id: UUID) -> list[Land]:
        return self._land_repo.list_by_user(user_id)
