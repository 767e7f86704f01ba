"""
ORM models for the marketplace tables.

Column names match the domain entity field names one-to-one, which lets
the repository base class map rows to entities generically.
Timestamps are set application-side so history ordering does not depend
on the database clock resolution.

Price, demand and supply rows use `revision` as the ORM version counter:
an UPDATE only matches the revision it was read at, so a concurrent
writer that got there first makes the flush fail instead of being
overwritten. A partial unique index keeps one live row per pair.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

AMOUNT = Numeric(14, 2)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for all marketplace models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
        Decimal: AMOUNT,
        date: Date,
    }


class TimestampMixin:
    """created_at / updated_at maintained on insert and update."""

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )


class SoftDeleteMixin:
    """deleted_at is NULL for active rows."""

    deleted_at: Mapped[Optional[datetime]] = mapped_column(default=None, index=True)


class ProvinceModel(Base):
    __tablename__ = "provinces"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class CityModel(Base):
    __tablename__ = "cities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    province_id: Mapped[int] = mapped_column(ForeignKey("provinces.id"), index=True)
    name: Mapped[str] = mapped_column(String(100))


class RegionModel(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "regions"

    id: Mapped[UUID] = mapped_column(primary_key=True)
    province_id: Mapped[int] = mapped_column(ForeignKey("provinces.id"), index=True)
    city_id: Mapped[int] = mapped_column(ForeignKey("cities.id"))


class CommodityModel(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "commodities"

    id: Mapped[UUID] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    code: Mapped[str] = mapped_column(String(50), unique=True)
    description: Mapped[str] = mapped_column(String(255))


class LandModel(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "lands"

    id: Mapped[UUID] = mapped_column(primary_key=True)
    user_id: Mapped[UUID] = mapped_column(index=True)
    city_id: Mapped[int] = mapped_column(ForeignKey("cities.id"))
    land_area: Mapped[Decimal]
    certificate: Mapped[str] = mapped_column(String(255))


class LandCommodityModel(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "land_commodities"

    id: Mapped[UUID] = mapped_column(primary_key=True)
    land_id: Mapped[UUID] = mapped_column(ForeignKey("lands.id"), index=True)
    commodity_id: Mapped[UUID] = mapped_column(ForeignKey("commodities.id"), index=True)
    land_area: Mapped[Decimal]
    harvested: Mapped[bool] = mapped_column(Boolean, default=False)


class HarvestModel(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "harvests"

    id: Mapped[UUID] = mapped_column(primary_key=True)
    land_commodity_id: Mapped[UUID] = mapped_column(
        ForeignKey("land_commodities.id"), index=True
    )
    quantity: Mapped[Decimal]
    unit: Mapped[str] = mapped_column(String(20))
    harvest_date: Mapped[date]


class SaleModel(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "sales"

    id: Mapped[UUID] = mapped_column(primary_key=True)
    commodity_id: Mapped[UUID] = mapped_column(ForeignKey("commodities.id"), index=True)
    city_id: Mapped[int] = mapped_column(ForeignKey("cities.id"), index=True)
    quantity: Mapped[Decimal]
    unit: Mapped[str] = mapped_column(String(20))
    price: Mapped[Decimal]
    sale_date: Mapped[date]


# ── Current values and their history ────────────────────────────


def _live_pair_index(table: str) -> Index:
    """At most one active record per (commodity, region); deleted rows keep theirs."""
    live = text("deleted_at IS NULL")
    return Index(
        f"uq_{table}_live_commodity_region",
        "commodity_id",
        "region_id",
        unique=True,
        postgresql_where=live,
        sqlite_where=live,
    )


class CommodityRegionMixin:
    commodity_id: Mapped[UUID] = mapped_column(ForeignKey("commodities.id"))
    region_id: Mapped[UUID] = mapped_column(ForeignKey("regions.id"))


class HistoryMixin(CommodityRegionMixin):
    """History rows copy the snapshotted record's timestamps verbatim."""

    id: Mapped[UUID] = mapped_column(primary_key=True)
    revision: Mapped[int]
    created_at: Mapped[datetime]
    updated_at: Mapped[datetime]
    recorded_at: Mapped[datetime] = mapped_column(default=utcnow)


class PriceModel(CommodityRegionMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "prices"
    __table_args__ = (_live_pair_index("prices"),)

    id: Mapped[UUID] = mapped_column(primary_key=True)
    price: Mapped[Decimal]
    revision: Mapped[int] = mapped_column(default=1)

    __mapper_args__ = {"version_id_col": revision, "version_id_generator": False}


class PriceHistoryModel(HistoryMixin, Base):
    __tablename__ = "price_histories"
    __table_args__ = (
        Index("ix_price_histories_commodity_region", "commodity_id", "region_id"),
    )

    price: Mapped[Decimal]


class DemandModel(CommodityRegionMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "demands"
    __table_args__ = (_live_pair_index("demands"),)

    id: Mapped[UUID] = mapped_column(primary_key=True)
    quantity: Mapped[Decimal]
    unit: Mapped[str] = mapped_column(String(20), default="kg")
    revision: Mapped[int] = mapped_column(default=1)

    __mapper_args__ = {"version_id_col": revision, "version_id_generator": False}


class DemandHistoryModel(HistoryMixin, Base):
    __tablename__ = "demand_histories"
    __table_args__ = (
        Index("ix_demand_histories_commodity_region", "commodity_id", "region_id"),
    )

    quantity: Mapped[Decimal]
    unit: Mapped[str] = mapped_column(String(20))


class SupplyModel(CommodityRegionMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "supplies"
    __table_args__ = (_live_pair_index("supplies"),)

    id: Mapped[UUID] = mapped_column(primary_key=True)
    quantity: Mapped[Decimal]
    unit: Mapped[str] = mapped_column(String(20), default="kg")
    revision: Mapped[int] = mapped_column(default=1)

    __mapper_args__ = {"version_id_col": revision, "version_id_generator": False}


class SupplyHistoryModel(HistoryMixin, Base):
    __tablename__ = "supply_histories"
    __table_args__ = (
        Index("ix_supply_histories_commodity_region", "commodity_id", "region_id"),
    )

    quantity: Mapped[Decimal]
    unit: Mapped[str] = mapped_column(String(20))
