"""
Aggregate router for the marketplace bounded context.

Collects every marketplace sub-router under one APIRouter so the
application factory mounts the context with a single include.
"""

from fastapi import APIRouter

from app.interfaces.marketplace import commodities, harvests, sales
from app.interfaces.marketplace.geography import (
    cities_router,
    provinces_router,
    regions_router,
)
from app.interfaces.marketplace.lands import land_commodities_router, lands_router
from app.interfaces.marketplace.market_values import (
    demands_router,
    prices_router,
    supplies_router,
)

router = APIRouter()

for sub_router in (
    provinces_router,
    cities_router,
    regions_router,
    commodities.router,
    lands_router,
    land_commodities_router,
    harvests.router,
    sales.router,
    prices_router,
    demands_router,
    supplies_router,
):
    router.include_router(sub_router)
