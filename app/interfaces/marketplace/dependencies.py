"""
Dependency injection for the marketplace bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the marketplace context.

One session per request: FastAPI caches get_session within a request,
so every repository and the transaction manager of one use case share it.
"""

from functools import lru_cache
from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from app.application.marketplace.allocate_land_commodity import LandCommodityUseCase
from app.application.marketplace.manage_commodities import CommodityUseCase
from app.application.marketplace.manage_geography import (
    CityUseCase,
    ProvinceUseCase,
    RegionUseCase,
)
from app.application.marketplace.manage_lands import LandUseCase
from app.application.marketplace.record_harvests import HarvestUseCase
from app.application.marketplace.record_sales import SaleUseCase
from app.application.marketplace.track_current_values import (
    DemandUseCase,
    PriceUseCase,
    SupplyUseCase,
)
from app.core.config import settings
from app.infrastructure.marketplace.commodity_repository import (
    CommodityRepositoryAdapter,
)
from app.infrastructure.marketplace.current_value_repository import (
    DemandHistoryRepositoryAdapter,
    DemandRepositoryAdapter,
    PriceHistoryRepositoryAdapter,
    PriceRepositoryAdapter,
    SupplyHistoryRepositoryAdapter,
    SupplyRepositoryAdapter,
)
from app.infrastructure.marketplace.database import (
    SqlAlchemyTransactionManager,
    build_session_factory,
    get_engine,
)
from app.infrastructure.marketplace.geography_repository import (
    CityRepositoryAdapter,
    ProvinceRepositoryAdapter,
    RegionRepositoryAdapter,
)
from app.infrastructure.marketplace.harvest_repository import HarvestRepositoryAdapter
from app.infrastructure.marketplace.land_repository import (
    LandCommodityRepositoryAdapter,
    LandRepositoryAdapter,
)
from app.infrastructure.marketplace.sale_repository import SaleRepositoryAdapter
from app.shared.cache import CacheClient


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker[Session]:
    return build_session_factory(get_engine())


def get_session() -> Iterator[Session]:
    """Yield a request-scoped session and close it afterwards."""
    session = _session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_tx_manager(
    session: Session = Depends(get_session),
) -> SqlAlchemyTransactionManager:
    return SqlAlchemyTransactionManager(session)


@lru_cache(maxsize=1)
def get_cache() -> CacheClient:
    """Return the process-wide list cache."""
    return CacheClient(
        redis_url=settings.redis_url,
        default_ttl=settings.cache_ttl_seconds,
    )


def get_province_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> ProvinceUseCase:
    """Build ProvinceUseCase with its infrastructure dependencies."""
    return ProvinceUseCase(ProvinceRepositoryAdapter(session), tx)


def get_city_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> CityUseCase:
    """Build CityUseCase with its infrastructure dependencies."""
    return CityUseCase(
        CityRepositoryAdapter(session), ProvinceRepositoryAdapter(session), tx
    )


def get_region_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> RegionUseCase:
    """Build RegionUseCase with its infrastructure dependencies."""
    return RegionUseCase(
        RegionRepositoryAdapter(session),
        ProvinceRepositoryAdapter(session),
        CityRepositoryAdapter(session),
        tx,
    )


def get_commodity_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> CommodityUseCase:
    """Build CommodityUseCase with its infrastructure dependencies."""
    return CommodityUseCase(CommodityRepositoryAdapter(session), tx)


def get_land_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> LandUseCase:
    """Build LandUseCase with its infrastructure dependencies."""
    return LandUseCase(
        LandRepositoryAdapter(session),
        CityRepositoryAdapter(session),
        LandCommodityRepositoryAdapter(session),
        tx,
    )


def get_land_commodity_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> LandCommodityUseCase:
    """Build LandCommodityUseCase with its infrastructure dependencies."""
    return LandCommodityUseCase(
        LandCommodityRepositoryAdapter(session),
        LandRepositoryAdapter(session),
        CommodityRepositoryAdapter(session),
        tx,
    )


def get_harvest_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> HarvestUseCase:
    """Build HarvestUseCase with its infrastructure dependencies."""
    return HarvestUseCase(
        HarvestRepositoryAdapter(session),
        LandCommodityRepositoryAdapter(session),
        tx,
    )


def get_sale_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> SaleUseCase:
    """Build SaleUseCase with its infrastructure dependencies."""
    return SaleUseCase(
        SaleRepositoryAdapter(session),
        CommodityRepositoryAdapter(session),
        CityRepositoryAdapter(session),
        tx,
    )


def get_price_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> PriceUseCase:
    """Build PriceUseCase with its infrastructure dependencies."""
    return PriceUseCase(
        PriceRepositoryAdapter(session),
        PriceHistoryRepositoryAdapter(session),
        CommodityRepositoryAdapter(session),
        RegionRepositoryAdapter(session),
        tx,
    )


def get_demand_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> DemandUseCase:
    """Build DemandUseCase with its infrastructure dependencies."""
    return DemandUseCase(
        DemandRepositoryAdapter(session),
        DemandHistoryRepositoryAdapter(session),
        CommodityRepositoryAdapter(session),
        RegionRepositoryAdapter(session),
        tx,
    )


def get_supply_use_case(
    session: Session = Depends(get_session),
    tx: SqlAlchemyTransactionManager = Depends(get_tx_manager),
) -> SupplyUseCase:
    """Build SupplyUseCase with its infrastructure dependencies."""
    return SupplyUseCase(
        SupplyRepositoryAdapter(session),
        SupplyHistoryRepositoryAdapter(session),
        CommodityRepositoryAdapter(session),
        RegionRepositoryAdapter(session),
        tx,
    )
