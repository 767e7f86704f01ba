"""
Entity-to-view mapping for the marketplace API.

One explicit function per entity, so the wire format never follows
storage or domain field changes by accident.
"""

from app.domain.marketplace.entities import (
    City,
    Commodity,
    Demand,
    DemandHistory,
    Harvest,
    Land,
    LandCommodity,
    Price,
    PriceHistory,
    Province,
    Region,
    Sale,
    Supply,
    SupplyHistory,
)
from app.interfaces.marketplace.schemas import (
    CityView,
    CommodityView,
    DemandHistoryView,
    DemandView,
    HarvestView,
    LandCommodityView,
    LandView,
    MessageView,
    PriceHistoryView,
    PriceView,
    ProvinceView,
    RegionView,
    SaleView,
    SupplyHistoryView,
    SupplyView,
)


def province_view(p: Province) -> ProvinceView:
    return ProvinceView(id=p.id, name=p.name)


def city_view(c: City) -> CityView:
    return CityView(id=c.id, province_id=c.province_id, name=c.name)


def region_view(r: Region) -> RegionView:
    return RegionView(
        id=r.id,
        province_id=r.province_id,
        city_id=r.city_id,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def commodity_view(c: Commodity) -> CommodityView:
    return CommodityView(
        id=c.id,
        name=c.name,
        code=c.code,
        description=c.description,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


def land_view(land: Land) -> LandView:
    return LandView(
        id=land.id,
        user_id=land.user_id,
        city_id=land.city_id,
        land_area=land.land_area,
        certificate=land.certificate,
        created_at=land.created_at,
        updated_at=land.updated_at,
    )


def land_commodity_view(lc: LandCommodity) -> LandCommodityView:
    return LandCommodityView(
        id=lc.id,
        land_id=lc.land_id,
        commodity_id=lc.commodity_id,
        land_area=lc.land_area,
        harvested=lc.harvested,
        created_at=lc.created_at,
        updated_at=lc.updated_at,
    )


def harvest_view(h: Harvest) -> HarvestView:
    return HarvestView(
        id=h.id,
        land_commodity_id=h.land_commodity_id,
        quantity=h.quantity,
        unit=h.unit,
        harvest_date=h.harvest_date,
        created_at=h.created_at,
        updated_at=h.updated_at,
    )


def sale_view(s: Sale) -> SaleView:
    return SaleView(
        id=s.id,
        commodity_id=s.commodity_id,
        city_id=s.city_id,
        quantity=s.quantity,
        unit=s.unit,
        price=s.price,
        sale_date=s.sale_date,
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def price_view(p: Price) -> PriceView:
    return PriceView(
        id=p.id,
        commodity_id=p.commodity_id,
        region_id=p.region_id,
        price=p.price,
        revision=p.revision,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


def price_history_view(p: PriceHistory) -> PriceHistoryView:
    return PriceHistoryView(
        id=p.id,
        commodity_id=p.commodity_id,
        region_id=p.region_id,
        price=p.price,
        revision=p.revision,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


def demand_view(d: Demand) -> DemandView:
    return DemandView(
        id=d.id,
        commodity_id=d.commodity_id,
        region_id=d.region_id,
        quantity=d.quantity,
        unit=d.unit,
        revision=d.revision,
        created_at=d.created_at,
        updated_at=d.updated_at,
    )


def demand_history_view(d: DemandHistory) -> DemandHistoryView:
    return DemandHistoryView(
        id=d.id,
        commodity_id=d.commodity_id,
        region_id=d.region_id,
        quantity=d.quantity,
        unit=d.unit,
        revision=d.revision,
        created_at=d.created_at,
        updated_at=d.updated_at,
    )


def supply_view(s: Supply) -> SupplyView:
    return SupplyView(
        id=s.id,
        commodity_id=s.commodity_id,
        region_id=s.region_id,
        quantity=s.quantity,
        unit=s.unit,
        revision=s.revision,
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def supply_history_view(s: SupplyHistory) -> SupplyHistoryView:
    return SupplyHistoryView(
        id=s.id,
        commodity_id=s.commodity_id,
        region_id=s.region_id,
        quantity=s.quantity,
        unit=s.unit,
        revision=s.revision,
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def deleted_message(entity_name: str) -> MessageView:
    return MessageView(message=f"{entity_name} deleted")
