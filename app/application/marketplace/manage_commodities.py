"""
Use case: Manage commodities.

Input: CreateCommodityCommand / UpdateCommodityCommand
Output: Commodity
Side effects: Inserts or updates the commodities table.
Failure cases: EntityNotFoundError, InvalidInputError, DuplicateEntityError
(name and code are unique).
"""

from dataclasses import replace
from uuid import uuid4

from app.application.marketplace.crud import CrudUseCase
from app.application.marketplace.dtos import (
    CreateCommodityCommand,
    UpdateCommodityCommand,
)
from app.application.marketplace.validation import require_text
from app.domain.marketplace.entities import Commodity

MIN_TEXT_LENGTH = 3


class CommodityUseCase(CrudUseCase[Commodity]):
    """Create, read, partially update, delete and restore commodities."""

    entity_name = "commodity"

    def create(self, command: CreateCommodityCommand) -> Commodity:
        commodity = Commodity(
            id=uuid4(),
            name=require_text("name", command.name, MIN_TEXT_LENGTH),
            code=require_text("code", command.code, MIN_TEXT_LENGTH),
            description=require_text(
                "description", command.description, MIN_TEXT_LENGTH
            ),
        )
        return self._create(commodity)

    def update(self, command: UpdateCommodityCommand) -> Commodity:
        changes = {
            field: require_text(field, value, MIN_TEXT_LENGTH)
            for field, value in (
                ("name", command.name),
                ("code", command.code),
                ("description", command.description),
            )
            if value is not None
        }
        return self._update(
            command.commodity_id, lambda commodity: replace(commodity, **changes)
        )
