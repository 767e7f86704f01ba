"""
Adapter: Sale persistence.

Implements SaleRepository port.
"""

from uuid import UUID

from app.domain.marketplace.entities import Sale
from app.domain.marketplace.ports import SaleRepository
from app.infrastructure.marketplace.base_repository import SqlAlchemyRepository
from app.infrastructure.marketplace.models import SaleModel


class SaleRepositoryAdapter(SqlAlchemyRepository[Sale, SaleModel], SaleRepository):
    entity_type = Sale
    model_type = SaleModel
    entity_name = "sale"

    def list_by_commodity(self, commodity_id: UUID) -> list[Sale]:
        stmt = (
            self._active()
            .where(SaleModel.commodity_id == commodity_id)
            .order_by(SaleModel.sale_date, SaleModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_commodity")

    def list_by_city(self, city_id: int) -> list[Sale]:
        stmt = (
            self._active()
            .where(SaleModel.city_id == city_id)
            .order_by(SaleModel.sale_date, SaleModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_city")
