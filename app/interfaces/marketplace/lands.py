"""
FastAPI routes for lands and land-commodity allocations.

All routes delegate to use cases. No business logic here.
Capacity rejections surface as 400 through the centralized error handlers.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.application.marketplace.allocate_land_commodity import LandCommodityUseCase
from app.application.marketplace.dtos import (
    CreateLandCommand,
    CreateLandCommodityCommand,
    UpdateLandCommand,
    UpdateLandCommodityCommand,
)
from app.application.marketplace.manage_lands import LandUseCase
from app.interfaces.marketplace.dependencies import (
    get_cache,
    get_land_commodity_use_case,
    get_land_use_case,
)
from app.interfaces.marketplace.presenters import (
    deleted_message,
    land_commodity_view,
    land_view,
)
from app.interfaces.marketplace.schemas import (
    DataResponse,
    ErrorResponse,
    LandCommodityRequest,
    LandCommodityView,
    LandCreateRequest,
    LandUpdateRequest,
    LandView,
    MessageView,
)
from app.shared.cache import CacheClient

LANDS_CACHE = "lands:"
LAND_COMMODITIES_CACHE = "land_commodities:"

WRITE_ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
NOT_FOUND = {404: {"model": ErrorResponse}}

lands_router = APIRouter(prefix="/lands", tags=["lands"])
land_commodities_router = APIRouter(prefix="/land_commodities", tags=["land commodities"])


# ── Lands ───────────────────────────────────────────────────────


@lands_router.post(
    "",
    response_model=DataResponse[LandView],
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS,
    summary="Register a land",
)
def create_land(
    request: LandCreateRequest,
    use_case: LandUseCase = Depends(get_land_use_case),
    cache: CacheClient = Depends(get_cache),
):
    land = use_case.create(
        CreateLandCommand(
            user_id=request.user_id,
            city_id=request.city_id,
            land_area=request.land_area,
            certificate=request.certificate,
        )
    )
    cache.invalidate(LANDS_CACHE)
    return {"data": land_view(land)}


@lands_router.get("", response_model=DataResponse[list[LandView]], summary="List lands")
def list_lands(
    use_case: LandUseCase = Depends(get_land_use_case),
    cache: CacheClient = Depends(get_cache),
):
    data = cache.get_or_set(
        f"{LANDS_CACHE}all",
        lambda: [land_view(land).model_dump(mode="json") for land in use_case.list_all()],
    )
    return {"data": data}


@lands_router.get(
    "/user/{user_id}",
    response_model=DataResponse[list[LandView]],
    summary="List the lands of an owner",
)
def list_lands_by_user(user_id: UUID, use_case: LandUseCase = Depends(get_land_use_case)):
    return {"data": [land_view(land) for land in use_case.list_by_user(user_id)]}


@lands_router.get(
    "/{land_id}",
    response_model=DataResponse[LandView],
    responses=NOT_FOUND,
    summary="Get a land",
)
def get_land(land_id: UUID, use_case: LandUseCase = Depends(get_land_use_case)):
    return {"data": land_view(use_case.get(land_id))}


@lands_router.patch(
    "/{land_id}",
    response_model=DataResponse[LandView],
    responses=WRITE_ERRORS,
    summary="Update a land",
    description="The new area must still hold every active allocation on the land.",
)
def update_land(
    land_id: UUID,
    request: LandUpdateRequest,
    use_case: LandUseCase = Depends(get_land_use_case),
    cache: CacheClient = Depends(get_cache),
):
    land = use_case.update(
        UpdateLandCommand(
            land_id=land_id,
            land_area=request.land_area,
            certificate=request.certificate,
        )
    )
    cache.invalidate(LANDS_CACHE)
    return {"data": land_view(land)}


@lands_router.delete(
    "/{land_id}",
    response_model=DataResponse[MessageView],
    responses=NOT_FOUND,
    summary="Soft-delete a land",
)
def delete_land(
    land_id: UUID,
    use_case: LandUseCase = Depends(get_land_use_case),
    cache: CacheClient = Depends(get_cache),
):
    use_case.delete(land_id)
    cache.invalidate(LANDS_CACHE)
    return {"data": deleted_message("land")}


@lands_router.patch(
    "/{land_id}/restore",
    response_model=DataResponse[LandView],
    responses=NOT_FOUND,
    summary="Restore a soft-deleted land",
)
def restore_land(
    land_id: UUID,
    use_case: LandUseCase = Depends(get_land_use_case),
    cache: CacheClient = Depends(get_cache),
):
    land = use_case.restore(land_id)
    cache.invalidate(LANDS_CACHE)
    return {"data": land_view(land)}


# ── Land commodities ────────────────────────────────────────────


@land_commodities_router.post(
    "",
    response_model=DataResponse[LandCommodityView],
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS,
    summary="Allocate land area to a commodity",
    description=(
        "Rejected with 'land area not enough' when the land's active "
        "allocations plus the requested area would exceed its total area."
    ),
)
def create_land_commodity(
    request: LandCommodityRequest,
    use_case: LandCommodityUseCase = Depends(get_land_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    allocation = use_case.create(
        CreateLandCommodityCommand(
            land_id=request.land_id,
            commodity_id=request.commodity_id,
            land_area=request.land_area,
        )
    )
    cache.invalidate(LAND_COMMODITIES_CACHE)
    return {"data": land_commodity_view(allocation)}


@land_commodities_router.get(
    "",
    response_model=DataResponse[list[LandCommodityView]],
    summary="List land-commodity allocations",
)
def list_land_commodities(
    use_case: LandCommodityUseCase = Depends(get_land_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    data = cache.get_or_set(
        f"{LAND_COMMODITIES_CACHE}all",
        lambda: [
            land_commodity_view(lc).model_dump(mode="json") for lc in use_case.list_all()
        ],
    )
    return {"data": data}


@land_commodities_router.get(
    "/land/{land_id}",
    response_model=DataResponse[list[LandCommodityView]],
    summary="List the allocations on a land",
)
def list_land_commodities_by_land(
    land_id: UUID,
    use_case: LandCommodityUseCase = Depends(get_land_commodity_use_case),
):
    return {"data": [land_commodity_view(lc) for lc in use_case.list_by_land(land_id)]}


@land_commodities_router.get(
    "/commodity/{commodity_id}",
    response_model=DataResponse[list[LandCommodityView]],
    summary="List the allocations growing a commodity",
)
def list_land_commodities_by_commodity(
    commodity_id: UUID,
    use_case: LandCommodityUseCase = Depends(get_land_commodity_use_case),
):
    return {
        "data": [
            land_commodity_view(lc) for lc in use_case.list_by_commodity(commodity_id)
        ]
    }


@land_commodities_router.get(
    "/{land_commodity_id}",
    response_model=DataResponse[LandCommodityView],
    responses=NOT_FOUND,
    summary="Get a land-commodity allocation",
)
def get_land_commodity(
    land_commodity_id: UUID,
    use_case: LandCommodityUseCase = Depends(get_land_commodity_use_case),
):
    return {"data": land_commodity_view(use_case.get(land_commodity_id))}


@land_commodities_router.patch(
    "/{land_commodity_id}",
    response_model=DataResponse[LandCommodityView],
    responses=WRITE_ERRORS,
    summary="Update a land-commodity allocation",
)
def update_land_commodity(
    land_commodity_id: UUID,
    request: LandCommodityRequest,
    use_case: LandCommodityUseCase = Depends(get_land_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    allocation = use_case.update(
        UpdateLandCommodityCommand(
            land_commodity_id=land_commodity_id,
            land_id=request.land_id,
            commodity_id=request.commodity_id,
            land_area=request.land_area,
        )
    )
    cache.invalidate(LAND_COMMODITIES_CACHE)
    return {"data": land_commodity_view(allocation)}


@land_commodities_router.delete(
    "/{land_commodity_id}",
    response_model=DataResponse[MessageView],
    responses=NOT_FOUND,
    summary="Soft-delete a land-commodity allocation",
)
def delete_land_commodity(
    land_commodity_id: UUID,
    use_case: LandCommodityUseCase = Depends(get_land_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    use_case.delete(land_commodity_id)
    cache.invalidate(LAND_COMMODITIES_CACHE)
    return {"data": deleted_message("land commodity")}


@land_commodities_router.patch(
    "/{land_commodity_id}/restore",
    response_model=DataResponse[LandCommodityView],
    responses=WRITE_ERRORS,
    summary="Restore a soft-deleted land-commodity allocation",
    description="The restored area must still fit on its land.",
)
def restore_land_commodity(
    land_commodity_id: UUID,
    use_case: LandCommodityUseCase = Depends(get_land_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    allocation = use_case.restore(land_commodity_id)
    cache.invalidate(LAND_COMMODITIES_CACHE)
    return {"data": land_commodity_view(allocation)}
