"""
Adapter: Harvest persistence.

Implements HarvestRepository port. Listing by land or by commodity goes
through the harvest's land-commodity allocation.
"""

from uuid import UUID

from app.domain.marketplace.entities import Harvest
from app.domain.marketplace.ports import HarvestRepository
from app.infrastructure.marketplace.base_repository import SqlAlchemyRepository
from app.infrastructure.marketplace.models import HarvestModel, LandCommodityModel


class HarvestRepositoryAdapter(
    SqlAlchemyRepository[Harvest, HarvestModel], HarvestRepository
):
    entity_type = Harvest
    model_type = HarvestModel
    entity_name = "harvest"

    def _through_allocation(self):
        return self._active().join(
            LandCommodityModel,
            HarvestModel.land_commodity_id == LandCommodityModel.id,
        )

    def list_by_land_commodity(self, land_commodity_id: UUID) -> list[Harvest]:
        stmt = (
            self._active()
            .where(HarvestModel.land_commodity_id == land_commodity_id)
            .order_by(HarvestModel.harvest_date, HarvestModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_land_commodity")

    def list_by_land(self, land_id: UUID) -> list[Harvest]:
        stmt = (
            self._through_allocation()
            .where(LandCommodityModel.land_id == land_id)
            .order_by(HarvestModel.harvest_date, HarvestModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_land")

    def list_by_commodity(self, commodity_id: UUID) -> list[Harvest]:
        stmt = (
            self._through_allocation()
            .where(LandCommodityModel.commodity_id == commodity_id)
            .order_by(HarvestModel.harvest_date, HarvestModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_commodity")
