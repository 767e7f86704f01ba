"""
Commands for the marketplace application layer.

Commands carry validated input from the interface layer to use cases.
They are plain dataclasses with no behavior. Optional fields on update
commands mean "leave unchanged".
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class CreateProvinceCommand:
    name: str


@dataclass(frozen=True)
class UpdateProvinceCommand:
    province_id: int
    name: str


@dataclass(frozen=True)
class CreateCityCommand:
    province_id: int
    name: str


@dataclass(frozen=True)
class UpdateCityCommand:
    city_id: int
    name: str


@dataclass(frozen=True)
class CreateRegionCommand:
    province_id: int
    city_id: int


@dataclass(frozen=True)
class UpdateRegionCommand:
    region_id: UUID
    province_id: int
    city_id: int


@dataclass(frozen=True)
class CreateCommodityCommand:
    name: str
    code: str
    description: str


@dataclass(frozen=True)
class UpdateCommodityCommand:
    commodity_id: UUID
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class CreateLandCommand:
    """Input for registering a land parcel.

    Attributes:
        user_id: Owner reference. Users are managed outside this service.
        city_id: City the land lies in.
        land_area: Total area, the capacity ceiling for allocations.
        certificate: Ownership certificate number.
    """

    user_id: UUID
    city_id: int
    land_area: Decimal
    certificate: str


@dataclass(frozen=True)
class UpdateLandCommand:
    land_id: UUID
    land_area: Decimal
    certificate: str


@dataclass(frozen=True)
class CreateLandCommodityCommand:
    """Input for allocating part of a land to a commodity.

    Attributes:
        land_id: Parent land whose area is being claimed.
        commodity_id: Commodity to grow.
        land_area: Requested area, must be positive.
    """

    land_id: UUID
    commodity_id: UUID
    land_area: Decimal


@dataclass(frozen=True)
class UpdateLandCommodityCommand:
    land_commodity_id: UUID
    land_id: UUID
    commodity_id: UUID
    land_area: Decimal


@dataclass(frozen=True)
class CreateHarvestCommand:
    land_commodity_id: UUID
    quantity: Decimal
    unit: str
    harvest_date: date


@dataclass(frozen=True)
class UpdateHarvestCommand:
    harvest_id: UUID
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    harvest_date: Optional[date] = None


@dataclass(frozen=True)
class CreateSaleCommand:
    commodity_id: UUID
    city_id: int
    quantity: Decimal
    unit: str
    price: Decimal
    sale_date: date


@dataclass(frozen=True)
class UpdateSaleCommand:
    sale_id: UUID
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    price: Optional[Decimal] = None
    sale_date: Optional[date] = None


@dataclass(frozen=True)
class CreateCurrentValueCommand:
    """Input for creating a price, demand or supply record.

    Attributes:
        commodity_id: Commodity the value refers to.
        region_id: Region the value refers to.
        value: The price or quantity.
        unit: Quantity unit; ignored for prices.
    """

    commodity_id: UUID
    region_id: UUID
    value: Decimal
    unit: Optional[str] = None


@dataclass(frozen=True)
class UpdateCurrentValueCommand:
    record_id: UUID
    value: Decimal
