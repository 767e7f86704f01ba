"""
FastAPI routes for prices, demands and supplies.

The three record kinds share one route layout, built by
build_market_value_router(). Every update keeps the previous value in
the history table; /history returns those rows followed by the current
value.
"""

from typing import Any, Callable
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from app.application.marketplace.dtos import (
    CreateCurrentValueCommand,
    UpdateCurrentValueCommand,
)
from app.application.marketplace.track_current_values import CurrentValueUseCase
from app.interfaces.marketplace.dependencies import (
    get_cache,
    get_demand_use_case,
    get_price_use_case,
    get_supply_use_case,
)
from app.interfaces.marketplace.presenters import (
    deleted_message,
    demand_history_view,
    demand_view,
    price_history_view,
    price_view,
    supply_history_view,
    supply_view,
)
from app.interfaces.marketplace.schemas import (
    DataResponse,
    DemandHistoryView,
    DemandView,
    ErrorResponse,
    MessageView,
    PriceCreateRequest,
    PriceHistoryView,
    PriceUpdateRequest,
    PriceView,
    QuantityCreateRequest,
    QuantityUpdateRequest,
    SupplyHistoryView,
    SupplyView,
)
from app.shared.cache import CacheClient
from app.shared.security.rate_limiting import HEAVY_RATE_LIMIT, limiter

NOT_FOUND = {404: {"model": ErrorResponse}}
WRITE_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def build_market_value_router(
    *,
    resource: str,
    entity_name: str,
    value_field: str,
    get_use_case: Callable[..., CurrentValueUseCase],
    create_request: type[BaseModel],
    update_request: type[BaseModel],
    view: Callable[[Any], BaseModel],
    view_model: type[BaseModel],
    history_view: Callable[[Any], BaseModel],
    history_view_model: type[BaseModel],
) -> APIRouter:
    """Build the CRUD, current-value and history routes of one record kind.

    Args:
        resource: URL segment and cache prefix, e.g. "prices".
        entity_name: Singular name used in summaries and delete messages.
        value_field: Request field carrying the value ("price" or "quantity").
        get_use_case: FastAPI dependency returning the use case.
        create_request: Request body model for create.
        update_request: Request body model for update.
        view: Maps a current record to its view model.
        view_model: Response model of a current record.
        history_view: Maps a history record to its view model.
        history_view_model: Response model of a history record.

    Returns:
        An APIRouter mounted at /{resource}.
    """
    router = APIRouter(prefix=f"/{resource}", tags=[resource])
    cache_prefix = f"{resource}:"

    @router.post(
        "",
        name=f"create_{entity_name}",
        response_model=DataResponse[view_model],
        status_code=status.HTTP_201_CREATED,
        responses=WRITE_ERRORS,
        summary=f"Create a {entity_name}",
        description=f"At most one active {entity_name} per commodity and region.",
    )
    def create(
        body: create_request,
        use_case: CurrentValueUseCase = Depends(get_use_case),
        cache: CacheClient = Depends(get_cache),
    ):
        record = use_case.create(
            CreateCurrentValueCommand(
                commodity_id=body.commodity_id,
                region_id=body.region_id,
                value=getattr(body, value_field),
                unit=getattr(body, "unit", None),
            )
        )
        cache.invalidate(cache_prefix)
        return {"data": view(record)}

    @router.get(
        "",
        name=f"list_{resource}",
        response_model=DataResponse[list[view_model]],
        summary=f"List {resource}",
    )
    def list_all(
        use_case: CurrentValueUseCase = Depends(get_use_case),
        cache: CacheClient = Depends(get_cache),
    ):
        data = cache.get_or_set(
            f"{cache_prefix}all",
            lambda: [view(r).model_dump(mode="json") for r in use_case.list_all()],
        )
        return {"data": data}

    @router.get(
        "/commodity/{commodity_id}",
        name=f"list_{resource}_by_commodity",
        response_model=DataResponse[list[view_model]],
        summary=f"List {resource} of a commodity across regions",
    )
    def list_by_commodity(
        commodity_id: UUID, use_case: CurrentValueUseCase = Depends(get_use_case)
    ):
        return {"data": [view(r) for r in use_case.list_by_commodity(commodity_id)]}

    @router.get(
        "/region/{region_id}",
        name=f"list_{resource}_by_region",
        response_model=DataResponse[list[view_model]],
        summary=f"List {resource} of a region across commodities",
    )
    def list_by_region(
        region_id: UUID, use_case: CurrentValueUseCase = Depends(get_use_case)
    ):
        return {"data": [view(r) for r in use_case.list_by_region(region_id)]}

    @router.get(
        "/current/commodity/{commodity_id}/region/{region_id}",
        name=f"current_{entity_name}",
        response_model=DataResponse[view_model],
        responses=NOT_FOUND,
        summary=f"Get the current {entity_name} of a commodity in a region",
    )
    def get_current(
        commodity_id: UUID,
        region_id: UUID,
        use_case: CurrentValueUseCase = Depends(get_use_case),
    ):
        return {"data": view(use_case.get_current(commodity_id, region_id))}

    def get_history(
        request: Request,
        commodity_id: UUID,
        region_id: UUID,
        use_case: CurrentValueUseCase = Depends(get_use_case),
    ):
        timeline = use_case.get_history(commodity_id, region_id)
        return {"data": [history_view(h) for h in timeline]}

    # slowapi keys limits by function name; keep it unique per record kind.
    get_history.__name__ = get_history.__qualname__ = f"{entity_name}_history"
    router.get(
        "/history/commodity/{commodity_id}/region/{region_id}",
        name=f"{entity_name}_history",
        response_model=DataResponse[list[history_view_model]],
        responses=NOT_FOUND,
        summary=f"Get the {entity_name} timeline of a commodity in a region",
        description=(
            "Previous values in chronological order, followed by the current "
            "value. The last entry carries the current record's id."
        ),
    )(limiter.limit(HEAVY_RATE_LIMIT)(get_history))

    @router.get(
        "/{record_id}",
        name=f"get_{entity_name}",
        response_model=DataResponse[view_model],
        responses=NOT_FOUND,
        summary=f"Get a {entity_name}",
    )
    def get_one(record_id: UUID, use_case: CurrentValueUseCase = Depends(get_use_case)):
        return {"data": view(use_case.get(record_id))}

    @router.patch(
        "/{record_id}",
        name=f"update_{entity_name}",
        response_model=DataResponse[view_model],
        responses=WRITE_ERRORS,
        summary=f"Update a {entity_name}",
        description="The previous value is kept in the history table.",
    )
    def update(
        record_id: UUID,
        body: update_request,
        use_case: CurrentValueUseCase = Depends(get_use_case),
        cache: CacheClient = Depends(get_cache),
    ):
        record = use_case.update_current(
            UpdateCurrentValueCommand(
                record_id=record_id, value=getattr(body, value_field)
            )
        )
        cache.invalidate(cache_prefix)
        return {"data": view(record)}

    @router.delete(
        "/{record_id}",
        name=f"delete_{entity_name}",
        response_model=DataResponse[MessageView],
        responses=NOT_FOUND,
        summary=f"Soft-delete a {entity_name}",
    )
    def delete(
        record_id: UUID,
        use_case: CurrentValueUseCase = Depends(get_use_case),
        cache: CacheClient = Depends(get_cache),
    ):
        use_case.delete(record_id)
        cache.invalidate(cache_prefix)
        return {"data": deleted_message(entity_name)}

    @router.patch(
        "/{record_id}/restore",
        name=f"restore_{entity_name}",
        response_model=DataResponse[view_model],
        responses=WRITE_ERRORS,
        summary=f"Restore a soft-deleted {entity_name}",
    )
    def restore(
        record_id: UUID,
        use_case: CurrentValueUseCase = Depends(get_use_case),
        cache: CacheClient = Depends(get_cache),
    ):
        record = use_case.restore(record_id)
        cache.invalidate(cache_prefix)
        return {"data": view(record)}

    return router


prices_router = build_market_value_router(
    resource="prices",
    entity_name="price",
    value_field="price",
    get_use_case=get_price_use_case,
    create_request=PriceCreateRequest,
    update_request=PriceUpdateRequest,
    view=price_view,
    view_model=PriceView,
    history_view=price_history_view,
    history_view_model=PriceHistoryView,
)

demands_router = build_market_value_router(
    resource="demands",
    entity_name="demand",
    value_field="quantity",
    get_use_case=get_demand_use_case,
    create_request=QuantityCreateRequest,
    update_request=QuantityUpdateRequest,
    view=demand_view,
    view_model=DemandView,
    history_view=demand_history_view,
    history_view_model=DemandHistoryView,
)

supplies_router = build_market_value_router(
    resource="supplies",
    entity_name="supply",
    value_field="quantity",
    get_use_case=get_supply_use_case,
    create_request=QuantityCreateRequest,
    update_request=QuantityUpdateRequest,
    view=supply_view,
    view_model=SupplyView,
    history_view=supply_history_view,
    history_view_model=SupplyHistoryView,
)
