"""
Adapter: Land and land-commodity persistence.

Implements LandRepository and LandCommodityRepository ports.
get_for_update() takes a row lock (SELECT ... FOR UPDATE) so capacity
checks against the same land run one at a time. SQLite ignores the lock.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.domain.marketplace.entities import Land, LandCommodity
from app.domain.marketplace.ports import LandCommodityRepository, LandRepository
from app.infrastructure.marketplace.base_repository import SqlAlchemyRepository
from app.infrastructure.marketplace.models import LandCommodityModel, LandModel

CENT = Decimal("0.01")


class LandRepositoryAdapter(SqlAlchemyRepository[Land, LandModel], LandRepository):
    entity_type = Land
    model_type = LandModel
    entity_name = "land"

    def get_for_update(self, land_id: UUID) -> Optional[Land]:
        return self._fetch_locked(land_id, "get_for_update")

    def list_by_user(self, user_id: UUID) -> list[Land]:
        stmt = (
            self._active()
            .where(LandModel.user_id == user_id)
            .order_by(LandModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_user")


class LandCommodityRepositoryAdapter(
    SqlAlchemyRepository[LandCommodity, LandCommodityModel], LandCommodityRepository
):
    entity_type = LandCommodity
    model_type = LandCommodityModel
    entity_name = "land commodity"

    def list_by_land(self, land_id: UUID) -> list[LandCommodity]:
        stmt = (
            self._active()
            .where(LandCommodityModel.land_id == land_id)
            .order_by(LandCommodityModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_land")

    def list_by_commodity(self, commodity_id: UUID) -> list[LandCommodity]:
        stmt = (
            self._active()
            .where(LandCommodityModel.commodity_id == commodity_id)
            .order_by(LandCommodityModel.created_at)
        )
        return self._fetch_all(stmt, "list_by_commodity")

    def sum_land_area_by_land(self, land_id: UUID) -> Decimal:
        stmt = select(func.coalesce(func.sum(LandCommodityModel.land_area), 0)).where(
            LandCommodityModel.land_id == land_id,
            LandCommodityModel.deleted_at.is_(None),
        )
        try:
            total = self._session.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            self._handle_db_error(exc, "sum_land_area_by_land")
        # SQLite returns int or float here; Postgres returns Decimal.
        return Decimal(str(total)).quantize(CENT)
