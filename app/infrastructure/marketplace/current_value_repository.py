"""
Adapter: Price, demand and supply persistence with their history tables.

Implements CurrentValueRepository and HistoryRepository ports for each
of the three record kinds. History rows are insert-only. Current rows
are read under a row lock before an update, and the revision version
counter rejects a write based on a stale read.
"""

from typing import Optional
from uuid import UUID

from app.domain.marketplace.entities import (
    Demand,
    DemandHistory,
    Price,
    PriceHistory,
    Supply,
    SupplyHistory,
)
from app.domain.marketplace.ports import CurrentValueRepository, HistoryRepository
from app.infrastructure.marketplace.base_repository import (
    E,
    M,
    SqlAlchemyHistoryRepository,
    SqlAlchemyRepository,
)
from app.infrastructure.marketplace.models import (
    DemandHistoryModel,
    DemandModel,
    PriceHistoryModel,
    PriceModel,
    SupplyHistoryModel,
    SupplyModel,
)


class _CurrentValueRepository(SqlAlchemyRepository[E, M]):
    """Queries shared by the price, demand and supply tables."""

    def get_for_update(self, record_id: UUID) -> Optional[E]:
        return self._fetch_locked(record_id, "get_for_update")

    def list_by_commodity(self, commodity_id: UUID) -> list[E]:
        stmt = (
            self._active()
            .where(self.model_type.commodity_id == commodity_id)
            .order_by(self.model_type.created_at)
        )
        return self._fetch_all(stmt, "list_by_commodity")

    def list_by_region(self, region_id: UUID) -> list[E]:
        stmt = (
            self._active()
            .where(self.model_type.region_id == region_id)
            .order_by(self.model_type.created_at)
        )
        return self._fetch_all(stmt, "list_by_region")

    def get_by_commodity_and_region(
        self, commodity_id: UUID, region_id: UUID
    ) -> Optional[E]:
        stmt = self._active().where(
            self.model_type.commodity_id == commodity_id,
            self.model_type.region_id == region_id,
        )
        return self._fetch_one(stmt, "get_by_commodity_and_region")


class PriceRepositoryAdapter(
    _CurrentValueRepository[Price, PriceModel], CurrentValueRepository[Price]
):
    entity_type = Price
    model_type = PriceModel
    entity_name = "price"


class PriceHistoryRepositoryAdapter(
    SqlAlchemyHistoryRepository[PriceHistory, PriceHistoryModel],
    HistoryRepository[PriceHistory],
):
    entity_type = PriceHistory
    model_type = PriceHistoryModel
    entity_name = "price history"


class DemandRepositoryAdapter(
    _CurrentValueRepository[Demand, DemandModel], CurrentValueRepository[Demand]
):
    entity_type = Demand
    model_type = DemandModel
    entity_name = "demand"


class DemandHistoryRepositoryAdapter(
    SqlAlchemyHistoryRepository[DemandHistory, DemandHistoryModel],
    HistoryRepository[DemandHistory],
):
    entity_type = DemandHistory
    model_type = DemandHistoryModel
    entity_name = "demand history"


class SupplyRepositoryAdapter(
    _CurrentValueRepository[Supply, SupplyModel], CurrentValueRepository[Supply]
):
    entity_type = Supply
    model_type = SupplyModel
    entity_name = "supply"


class SupplyHistoryRepositoryAdapter(
    SqlAlchemyHistoryRepository[SupplyHistory, SupplyHistoryModel],
    HistoryRepository[SupplyHistory],
):
    entity_type = SupplyHistory
    model_type = SupplyHistoryModel
    entity_name = "supply history"
