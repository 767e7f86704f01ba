"""
FastAPI routes for sales.

All routes delegate to use cases. No business logic here.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.application.marketplace.dtos import CreateSaleCommand, UpdateSaleCommand
from app.application.marketplace.record_sales import SaleUseCase
from app.interfaces.marketplace.dependencies import get_cache, get_sale_use_case
from app.interfaces.marketplace.presenters import deleted_message, sale_view
from app.interfaces.marketplace.schemas import (
    DataResponse,
    ErrorResponse,
    MessageView,
    SaleCreateRequest,
    SaleUpdateRequest,
    SaleView,
)
from app.shared.cache import CacheClient

SALES_CACHE = "sales:"

router = APIRouter(prefix="/sales", tags=["sales"])


@router.post(
    "",
    response_model=DataResponse[SaleView],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Record a sale",
)
def create_sale(
    request: SaleCreateRequest,
    use_case: SaleUseCase = Depends(get_sale_use_case),
    cache: CacheClient = Depends(get_cache),
):
    sale = use_case.create(
        CreateSaleCommand(
            commodity_id=request.commodity_id,
            city_id=request.city_id,
            quantity=request.quantity,
            unit=request.unit,
            price=request.price,
            sale_date=request.sale_date,
        )
    )
    cache.invalidate(SALES_CACHE)
    return {"data": sale_view(sale)}


@router.get("", response_model=DataResponse[list[SaleView]], summary="List sales")
def list_sales(
    use_case: SaleUseCase = Depends(get_sale_use_case),
    cache: CacheClient = Depends(get_cache),
):
    data = cache.get_or_set(
        f"{SALES_CACHE}all",
        lambda: [sale_view(s).model_dump(mode="json") for s in use_case.list_all()],
    )
    return {"data": data}


@router.get(
    "/commodity/{commodity_id}",
    response_model=DataResponse[list[SaleView]],
    summary="List the sales of a commodity",
)
def list_sales_by_commodity(
    commodity_id: UUID, use_case: SaleUseCase = Depends(get_sale_use_case)
):
    return {"data": [sale_view(s) for s in use_case.list_by_commodity(commodity_id)]}


@router.get(
    "/city/{city_id}",
    response_model=DataResponse[list[SaleView]],
    summary="List the sales in a city",
)
def list_sales_by_city(city_id: int, use_case: SaleUseCase = Depends(get_sale_use_case)):
    return {"data": [sale_view(s) for s in use_case.list_by_city(city_id)]}


@router.get(
    "/{sale_id}",
    response_model=DataResponse[SaleView],
    responses={404: {"model": ErrorResponse}},
    summary="Get a sale",
)
def get_sale(sale_id: UUID, use_case: SaleUseCase = Depends(get_sale_use_case)):
    return {"data": sale_view(use_case.get(sale_id))}


@router.patch(
    "/{sale_id}",
    response_model=DataResponse[SaleView],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update a sale",
)
def update_sale(
    sale_id: UUID,
    request: SaleUpdateRequest,
    use_case: SaleUseCase = Depends(get_sale_use_case),
    cache: CacheClient = Depends(get_cache),
):
    sale = use_case.update(
        UpdateSaleCommand(
            sale_id=sale_id,
            quantity=request.quantity,
            unit=request.unit,
            price=request.price,
            sale_date=request.sale_date,
        )
    )
    cache.invalidate(SALES_CACHE)
    return {"data": sale_view(sale)}


@router.delete(
    "/{sale_id}",
    response_model=DataResponse[MessageView],
    responses={404: {"model": ErrorResponse}},
    summary="Soft-delete a sale",
)
def delete_sale(
    sale_id: UUID,
    use_case: SaleUseCase = Depends(get_sale_use_case),
    cache: CacheClient = Depends(get_cache),
):
    use_case.delete(sale_id)
    cache.invalidate(SALES_CACHE)
    return {"data": deleted_message("sale")}


@router.patch(
    "/{sale_id}/restore",
    response_model=DataResponse[SaleView],
    responses={404: {"model": ErrorResponse}},
    summary="Restore a soft-deleted sale",
)
def restore_sale(
    sale_id: UUID,
    use_case: SaleUseCase = Depends(get_sale_use_case),
    cache: CacheClient = Depends(get_cache),
):
    sale = use_case.restore(sale_id)
    cache.invalidate(SALES_CACHE)
    return {"data": sale_view(sale)}
