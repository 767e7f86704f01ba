"""
FastAPI routes for commodities.

All routes delegate to use cases. No business logic here.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.application.marketplace.dtos import (
    CreateCommodityCommand,
    UpdateCommodityCommand,
)
from app.application.marketplace.manage_commodities import CommodityUseCase
from app.interfaces.marketplace.dependencies import get_cache, get_commodity_use_case
from app.interfaces.marketplace.presenters import commodity_view, deleted_message
from app.interfaces.marketplace.schemas import (
    CommodityCreateRequest,
    CommodityUpdateRequest,
    CommodityView,
    DataResponse,
    ErrorResponse,
    MessageView,
)
from app.shared.cache import CacheClient

COMMODITIES_CACHE = "commodities:"

router = APIRouter(prefix="/commodities", tags=["commodities"])


@router.post(
    "",
    response_model=DataResponse[CommodityView],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create a commodity",
    description="Register a tradable commodity. Name and code must be unique.",
)
def create_commodity(
    request: CommodityCreateRequest,
    use_case: CommodityUseCase = Depends(get_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    commodity = use_case.create(
        CreateCommodityCommand(
            name=request.name,
            code=request.code,
            description=request.description,
        )
    )
    cache.invalidate(COMMODITIES_CACHE)
    return {"data": commodity_view(commodity)}


@router.get(
    "", response_model=DataResponse[list[CommodityView]], summary="List commodities"
)
def list_commodities(
    use_case: CommodityUseCase = Depends(get_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    data = cache.get_or_set(
        f"{COMMODITIES_CACHE}all",
        lambda: [commodity_view(c).model_dump(mode="json") for c in use_case.list_all()],
    )
    return {"data": data}


@router.get(
    "/{commodity_id}",
    response_model=DataResponse[CommodityView],
    responses={404: {"model": ErrorResponse}},
    summary="Get a commodity",
)
def get_commodity(
    commodity_id: UUID, use_case: CommodityUseCase = Depends(get_commodity_use_case)
):
    return {"data": commodity_view(use_case.get(commodity_id))}


@router.patch(
    "/{commodity_id}",
    response_model=DataResponse[CommodityView],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update a commodity",
    description="Partial update: omitted fields keep their stored value.",
)
def update_commodity(
    commodity_id: UUID,
    request: CommodityUpdateRequest,
    use_case: CommodityUseCase = Depends(get_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    commodity = use_case.update(
        UpdateCommodityCommand(
            commodity_id=commodity_id,
            name=request.name,
            code=request.code,
            description=request.description,
        )
    )
    cache.invalidate(COMMODITIES_CACHE)
    return {"data": commodity_view(commodity)}


@router.delete(
    "/{commodity_id}",
    response_model=DataResponse[MessageView],
    responses={404: {"model": ErrorResponse}},
    summary="Soft-delete a commodity",
)
def delete_commodity(
    commodity_id: UUID,
    use_case: CommodityUseCase = Depends(get_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    use_case.delete(commodity_id)
    cache.invalidate(COMMODITIES_CACHE)
    return {"data": deleted_message("commodity")}


@router.patch(
    "/{commodity_id}/restore",
    response_model=DataResponse[CommodityView],
    responses={404: {"model": ErrorResponse}},
    summary="Restore a soft-deleted commodity",
)
def restore_commodity(
    commodity_id: UUID,
    use_case: CommodityUseCase = Depends(get_commodity_use_case),
    cache: CacheClient = Depends(get_cache),
):
    commodity = use_case.restore(commodity_id)
    cache.invalidate(COMMODITIES_CACHE)
    return {"data": commodity_view(commodity)}
