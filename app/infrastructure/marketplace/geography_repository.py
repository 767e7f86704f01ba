"""
Adapter: Province, city and region persistence.

Implements ProvinceRepository, CityRepository and RegionRepository ports.
"""

from app.domain.marketplace.entities import City, Province, Region
from app.domain.marketplace.ports import (
    CityRepository,
    ProvinceRepository,
    RegionRepository,
)
from app.infrastructure.marketplace.base_repository import SqlAlchemyRepository
from app.infrastructure.marketplace.models import CityModel, ProvinceModel, RegionModel


class ProvinceRepositoryAdapter(
    SqlAlchemyRepository[Province, ProvinceModel], ProvinceRepository
):
    entity_type = Province
    model_type = ProvinceModel
    entity_name = "province"


class CityRepositoryAdapter(SqlAlchemyRepository[City, CityModel], CityRepository):
    entity_type = City
    model_type = CityModel
    entity_name = "city"

    def list_by_province(self, province_id: int) -> list[City]:
        stmt = (
            self._active()
            .where(CityModel.province_id == province_id)
            .order_by(CityModel.id)
        )
        return self._fetch_all(stmt, "list_by_province")


class RegionRepositoryAdapter(
    SqlAlchemyRepository[Region, RegionModel], RegionRepository
):
    entity_type = Region
    model_type = RegionModel
    entity_name = "region"

    def list_by_province(self, province_id: int) -> list[Region]:
        stmt = (
            self._active()
            .where(RegionModel.province_id == province_id)
            .order_by(RegionModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_province")
