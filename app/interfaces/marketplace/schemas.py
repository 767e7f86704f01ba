"""
Pydantic schemas for marketplace API request/response validation.

These schemas enforce input validation and define the API contract.
Every response is wrapped in a {"data": ...} envelope.
No business logic belongs here.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Generic, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

T = TypeVar("T")

NAME_MAX_LEN = 100
UNIT_MAX_LEN = 20
AMOUNT_DIGITS = 14
AMOUNT_PLACES = 2


def _amount(description: str, **constraints):
    return Field(
        ...,
        max_digits=AMOUNT_DIGITS,
        decimal_places=AMOUNT_PLACES,
        description=description,
        **constraints,
    )


# ── Envelopes ───────────────────────────────────────────────────


class DataResponse(BaseModel, Generic[T]):
    """Success envelope."""

    data: T


class MessageView(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response schema.

    Attributes:
        error: Short error description.
        detail: Optional additional detail (never internal).
    """

    error: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Health check response schema.

    Attributes:
        status: "ok", or "degraded" when the database does not answer.
        version: Application version.
        database: "ok" or "unavailable".
        cache: Active cache backend, "redis" or "memory".
    """

    status: str
    version: str
    database: str
    cache: str


# ── Geography ───────────────────────────────────────────────────


class ProvinceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)


class ProvinceView(BaseModel):
    id: int
    name: str


class CityCreateRequest(BaseModel):
    province_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)


class CityUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)


class CityView(BaseModel):
    id: int
    province_id: int
    name: str


class RegionRequest(BaseModel):
    """Request schema for creating or updating a region.

    Attributes:
        province_id: Province the region lies in.
        city_id: City of the region; must belong to the province.
    """

    province_id: int = Field(..., ge=1)
    city_id: int = Field(..., ge=1)


class RegionView(BaseModel):
    id: UUID
    province_id: int
    city_id: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


# ── Commodities ─────────────────────────────────────────────────


class CommodityCreateRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=NAME_MAX_LEN)
    code: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=3, max_length=255)


class CommodityUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    name: Optional[str] = Field(default=None, min_length=3, max_length=NAME_MAX_LEN)
    code: Optional[str] = Field(default=None, min_length=3, max_length=50)
    description: Optional[str] = Field(default=None, min_length=3, max_length=255)


class CommodityView(BaseModel):
    id: UUID
    name: str
    code: str
    description: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


# ── Lands and allocations ───────────────────────────────────────


class LandCreateRequest(BaseModel):
    """Request schema for registering a land.

    Attributes:
        user_id: Owner reference.
        city_id: City the land lies in.
        land_area: Total area, the ceiling for commodity allocations.
        certificate: Ownership certificate number.
    """

    user_id: UUID
    city_id: int = Field(..., ge=1)
    land_area: Decimal = _amount("Total land area", gt=0)
    certificate: str = Field(..., min_length=1, max_length=255)


class LandUpdateRequest(BaseModel):
    land_area: Decimal = _amount("Total land area", gt=0)
    certificate: str = Field(..., min_length=1, max_length=255)


class LandView(BaseModel):
    id: UUID
    user_id: UUID
    city_id: int
    land_area: Decimal
    certificate: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class LandCommodityRequest(BaseModel):
    """Request schema for allocating land area to a commodity.

    land_area is validated again by the use case before any lookup.
    """

    land_id: UUID
    commodity_id: UUID
    land_area: Decimal = _amount("Allocated area")


class LandCommodityView(BaseModel):
    id: UUID
    land_id: UUID
    commodity_id: UUID
    land_area: Decimal
    harvested: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


# ── Harvests and sales ──────────────────────────────────────────


class HarvestCreateRequest(BaseModel):
    land_commodity_id: UUID
    quantity: Decimal = _amount("Harvested quantity", gt=0)
    unit: str = Field(..., min_length=1, max_length=UNIT_MAX_LEN)
    harvest_date: date


class HarvestUpdateRequest(BaseModel):
    quantity: Optional[Decimal] = Field(
        default=None, gt=0, max_digits=AMOUNT_DIGITS, decimal_places=AMOUNT_PLACES
    )
    unit: Optional[str] = Field(default=None, min_length=1, max_length=UNIT_MAX_LEN)
    harvest_date: Optional[date] = None


class HarvestView(BaseModel):
    id: UUID
    land_commodity_id: UUID
    quantity: Decimal
    unit: str
    harvest_date: date
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class SaleCreateRequest(BaseModel):
    commodity_id: UUID
    city_id: int = Field(..., ge=1)
    quantity: Decimal = _amount("Sold quantity", gt=0)
    unit: str = Field(..., min_length=1, max_length=UNIT_MAX_LEN)
    price: Decimal = _amount("Sale price", gt=0)
    sale_date: date


class SaleUpdateRequest(BaseModel):
    quantity: Optional[Decimal] = Field(
        default=None, gt=0, max_digits=AMOUNT_DIGITS, decimal_places=AMOUNT_PLACES
    )
    unit: Optional[str] = Field(default=None, min_length=1, max_length=UNIT_MAX_LEN)
    price: Optional[Decimal] = Field(
        default=None, gt=0, max_digits=AMOUNT_DIGITS, decimal_places=AMOUNT_PLACES
    )
    sale_date: Optional[date] = None


class SaleView(BaseModel):
    id: UUID
    commodity_id: UUID
    city_id: int
    quantity: Decimal
    unit: str
    price: Decimal
    sale_date: date
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


# ── Prices, demands, supplies ───────────────────────────────────


class PriceCreateRequest(BaseModel):
    commodity_id: UUID
    region_id: UUID
    price: Decimal = _amount("Price per unit", gt=0)


class PriceUpdateRequest(BaseModel):
    price: Decimal = _amount("New price per unit", gt=0)


class PriceView(BaseModel):
    id: UUID
    commodity_id: UUID
    region_id: UUID
    price: Decimal
    revision: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class PriceHistoryView(BaseModel):
    """One point of a price timeline.

    The last entry of a timeline carries the current record's id.
    """

    id: UUID
    commodity_id: UUID
    region_id: UUID
    price: Decimal
    revision: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class QuantityCreateRequest(BaseModel):
    """Request schema for creating a demand or supply record.

    Attributes:
        quantity: Demanded or supplied quantity (zero allowed).
        unit: Quantity unit, "kg" when omitted.
    """

    commodity_id: UUID
    region_id: UUID
    quantity: Decimal = _amount("Quantity", ge=0)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=UNIT_MAX_LEN)


class QuantityUpdateRequest(BaseModel):
    quantity: Decimal = _amount("New quantity", ge=0)


class DemandView(BaseModel):
    id: UUID
    commodity_id: UUID
    region_id: UUID
    quantity: Decimal
    unit: str
    revision: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class DemandHistoryView(BaseModel):
    id: UUID
    commodity_id: UUID
    region_id: UUID
    quantity: Decimal
    unit: str
    revision: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class SupplyView(BaseModel):
    id: UUID
    commodity_id: UUID
    region_id: UUID
    quantity: Decimal
    unit: str
    revision: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class SupplyHistoryView(BaseModel):
    id: UUID
    commodity_id: UUID
    region_id: UUID
    quantity: Decimal
    unit: str
    revision: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
