"""
Adapter: Commodity persistence.

Implements CommodityRepository port. Names and codes are unique across
all rows, including soft-deleted ones.
"""

from app.domain.marketplace.entities import Commodity
from app.domain.marketplace.ports import CommodityRepository
from app.infrastructure.marketplace.base_repository import SqlAlchemyRepository
from app.infrastructure.marketplace.models import CommodityModel


class CommodityRepositoryAdapter(
    SqlAlchemyRepository[Commodity, CommodityModel], CommodityRepository
):
    entity_type = Commodity
    model_type = CommodityModel
    entity_name = "commodity"
