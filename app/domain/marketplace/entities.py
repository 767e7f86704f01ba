"""
Domain entities for the marketplace bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
Mutation produces a new instance via dataclasses.replace().
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, Optional
from uuid import UUID

DEFAULT_UNIT = "kg"


@dataclass(frozen=True)
class Province:
    """A top-level administrative area. Ids are assigned by storage."""

    id: Optional[int]
    name: str


@dataclass(frozen=True)
class City:
    """A city inside a province."""

    id: Optional[int]
    province_id: int
    name: str


@dataclass(frozen=True)
class Region:
    """A marketplace region: the (province, city) pair prices are quoted in."""

    id: UUID
    province_id: int
    city_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class Commodity:
    """A tradable agricultural product."""

    id: UUID
    name: str
    code: str
    description: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class Land:
    """A parcel of land owned by a user.

    land_area is the capacity ceiling for allocations against this land.
    """

    id: UUID
    user_id: UUID
    city_id: int
    land_area: Decimal
    certificate: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class LandCommodity:
    """An allocation of part of a land's area to grow a commodity."""

    id: UUID
    land_id: UUID
    commodity_id: UUID
    land_area: Decimal
    harvested: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class Harvest:
    """A harvest collected from a land-commodity allocation."""

    id: UUID
    land_commodity_id: UUID
    quantity: Decimal
    unit: str
    harvest_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class Sale:
    """A recorded sale of a commodity in a city."""

    id: UUID
    commodity_id: UUID
    city_id: int
    quantity: Decimal
    unit: str
    price: Decimal
    sale_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


# ── Current values with shadow history ──────────────────────────
#
# A current record is the single live value for a (commodity, region)
# pair. `revision` starts at 1 and increases by one on every update;
# history rows keep the revision they were snapshotted from, which
# gives the timeline its order.


@dataclass(frozen=True)
class Price:
    """Current price of a commodity in a region."""

    value_field: ClassVar[str] = "price"

    id: UUID
    commodity_id: UUID
    region_id: UUID
    price: Decimal
    revision: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class PriceHistory:
    """A price as it was before one update of the current record."""

    id: UUID
    commodity_id: UUID
    region_id: UUID
    price: Decimal
    revision: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Demand:
    """Current demanded quantity of a commodity in a region."""

    value_field: ClassVar[str] = "quantity"

    id: UUID
    commodity_id: UUID
    region_id: UUID
    quantity: Decimal
    unit: str = DEFAULT_UNIT
    revision: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class DemandHistory:
    """A demand as it was before one update of the current record."""

    id: UUID
    commodity_id: UUID
    region_id: UUID
    quantity: Decimal
    unit: str
    revision: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Supply:
    """Current supplied quantity of a commodity in a region."""

    value_field: ClassVar[str] = "quantity"

    id: UUID
    commodity_id: UUID
    region_id: UUID
    quantity: Decimal
    unit: str = DEFAULT_UNIT
    revision: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class SupplyHistory:
    """A supply as it was before one update of the current record."""

    id: UUID
    commodity_id: UUID
    region_id: UUID
    quantity: Decimal
    unit: str
    revision: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
