"""
FastAPI routes for harvests.

All routes delegate to use cases. No business logic here.
Creating a harvest marks its allocation harvested, so harvest writes
also invalidate the cached allocation list.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.application.marketplace.dtos import CreateHarvestCommand, UpdateHarvestCommand
from app.application.marketplace.record_harvests import HarvestUseCase
from app.interfaces.marketplace.dependencies import get_cache, get_harvest_use_case
from app.interfaces.marketplace.lands import LAND_COMMODITIES_CACHE
from app.interfaces.marketplace.presenters import deleted_message, harvest_view
from app.interfaces.marketplace.schemas import (
    DataResponse,
    ErrorResponse,
    HarvestCreateRequest,
    HarvestUpdateRequest,
    HarvestView,
    MessageView,
)
from app.shared.cache import CacheClient

HARVESTS_CACHE = "harvests:"

router = APIRouter(prefix="/harvests", tags=["harvests"])


def _invalidate(cache: CacheClient) -> None:
    cache.invalidate(HARVESTS_CACHE)
    cache.invalidate(LAND_COMMODITIES_CACHE)


@router.post(
    "",
    response_model=DataResponse[HarvestView],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Record a harvest",
)
def create_harvest(
    request: HarvestCreateRequest,
    use_case: HarvestUseCase = Depends(get_harvest_use_case),
    cache: CacheClient = Depends(get_cache),
):
    harvest = use_case.create(
        CreateHarvestCommand(
            land_commodity_id=request.land_commodity_id,
            quantity=request.quantity,
            unit=request.unit,
            harvest_date=request.harvest_date,
        )
    )
    _invalidate(cache)
    return {"data": harvest_view(harvest)}


@router.get("", response_model=DataResponse[list[HarvestView]], summary="List harvests")
def list_harvests(
    use_case: HarvestUseCase = Depends(get_harvest_use_case),
    cache: CacheClient = Depends(get_cache),
):
    data = cache.get_or_set(
        f"{HARVESTS_CACHE}all",
        lambda: [harvest_view(h).model_dump(mode="json") for h in use_case.list_all()],
    )
    return {"data": data}


@router.get(
    "/land_commodity/{land_commodity_id}",
    response_model=DataResponse[list[HarvestView]],
    summary="List the harvests of an allocation",
)
def list_harvests_by_land_commodity(
    land_commodity_id: UUID, use_case: HarvestUseCase = Depends(get_harvest_use_case)
):
    return {
        "data": [
            harvest_view(h) for h in use_case.list_by_land_commodity(land_commodity_id)
        ]
    }


@router.get(
    "/land/{land_id}",
    response_model=DataResponse[list[HarvestView]],
    summary="List the harvests collected on a land",
)
def list_harvests_by_land(
    land_id: UUID, use_case: HarvestUseCase = Depends(get_harvest_use_case)
):
    return {"data": [harvest_view(h) for h in use_case.list_by_land(land_id)]}


@router.get(
    "/commodity/{commodity_id}",
    response_model=DataResponse[list[HarvestView]],
    summary="List the harvests of a commodity",
)
def list_harvests_by_commodity(
    commodity_id: UUID, use_case: HarvestUseCase = Depends(get_harvest_use_case)
):
    return {"data": [harvest_view(h) for h in use_case.list_by_commodity(commodity_id)]}


@router.get(
    "/{harvest_id}",
    response_model=DataResponse[HarvestView],
    responses={404: {"model": ErrorResponse}},
    summary="Get a harvest",
)
def get_harvest(harvest_id: UUID, use_case: HarvestUseCase = Depends(get_harvest_use_case)):
    return {"data": harvest_view(use_case.get(harvest_id))}


@router.patch(
    "/{harvest_id}",
    response_model=DataResponse[HarvestView],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update a harvest",
)
def update_harvest(
    harvest_id: UUID,
    request: HarvestUpdateRequest,
    use_case: HarvestUseCase = Depends(get_harvest_use_case),
    cache: CacheClient = Depends(get_cache),
):
    harvest = use_case.update(
        UpdateHarvestCommand(
            harvest_id=harvest_id,
            quantity=request.quantity,
            unit=request.unit,
            harvest_date=request.harvest_date,
        )
    )
    _invalidate(cache)
    return {"data": harvest_view(harvest)}


@router.delete(
    "/{harvest_id}",
    response_model=DataResponse[MessageView],
    responses={404: {"model": ErrorResponse}},
    summary="Soft-delete a harvest",
)
def delete_harvest(
    harvest_id: UUID,
    use_case: HarvestUseCase = Depends(get_harvest_use_case),
    cache: CacheClient = Depends(get_cache),
):
    use_case.delete(harvest_id)
    _invalidate(cache)
    return {"data": deleted_message("harvest")}


@router.patch(
    "/{harvest_id}/restore",
    response_model=DataResponse[HarvestView],
    responses={404: {"model": ErrorResponse}},
    summary="Restore a soft-deleted harvest",
)
def restore_harvest(
    harvest_id: UUID,
    use_case: HarvestUseCase = Depends(get_harvest_use_case),
    cache: CacheClient = Depends(get_cache),
):
    harvest = use_case.restore(harvest_id)
    _invalidate(cache)
    return {"data": harvest_view(harvest)}
