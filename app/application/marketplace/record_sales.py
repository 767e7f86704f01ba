"""
Use case: Record commodity sales.

Input: CreateSaleCommand / UpdateSaleCommand
Output: Sale
Side effects: Inserts or updates the sales table.
Failure cases: InvalidInputError, EntityNotFoundError.
"""

from dataclasses import replace
from uuid import UUID, uuid4

from app.application.marketplace.crud import CrudUseCase, require
from app.application.marketplace.dtos import CreateSaleCommand, UpdateSaleCommand
from app.application.marketplace.validation import require_positive, require_text
from app.domain.marketplace.entities import Sale
from app.domain.marketplace.ports import (
    CityRepository,
    CommodityRepository,
    SaleRepository,
    TransactionManager,
)


class SaleUseCase(CrudUseCase[Sale]):
    """Create, read, update, delete and restore sales."""

    entity_name = "sale"

    def __init__(
        self,
        sale_repo: SaleRepository,
        commodity_repo: CommodityRepository,
        city_repo: CityRepository,
        tx_manager: TransactionManager,
    ) -> None:
        super().__init__(sale_repo, tx_manager)
        self._sale_repo = sale_repo
        self._commodity_repo = commodity_repo
        self._city_repo = city_repo

    def create(self, command: CreateSaleCommand) -> Sale:
        sale = Sale(
            id=uuid4(),
            commodity_id=command.commodity_id,
            city_id=command.city_id,
            quantity=require_positive("quantity", command.quantity),
            unit=require_text("unit", command.unit),
            price=require_positive("price", command.price),
            sale_date=command.sale_date,
        )

        def check() -> None:
            require(self._city_repo, command.city_id, "city")
            require(self._commodity_repo, command.commodity_id, "commodity")

        return self._create(sale, check=check)

    def update(self, command: UpdateSaleCommand) -> Sale:
        changes = {}
        if command.quantity is not None:
            changes["quantity"] = require_positive("quantity", command.quantity)
        if command.unit is not None:
            changes["unit"] = require_text("unit", command.unit)
        if command.price is not None:
            changes["price"] = require_positive("price", command.price)
        if command.sale_date is not None:
            changes["sale_date"] = command.sale_date
        return self._update(command.sale_id, lambda s: replace(s, **changes))

    def list_by_commodity(self, commodity_id: UUID) -> list[Sale]:
        return self._sale_repo.list_by_commodity(commodity_id)

    def list_by_city(self, city_id: int) -> list[Sale]:
        return self._sale_repo.list_by_city(city_id)
