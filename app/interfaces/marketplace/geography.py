"""
FastAPI routes for provinces, cities and regions.

All routes delegate to use cases. No business logic here.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.application.marketplace.dtos import (
    CreateCityCommand,
    CreateProvinceCommand,
    CreateRegionCommand,
    UpdateCityCommand,
    UpdateProvinceCommand,
    UpdateRegionCommand,
)
from app.application.marketplace.manage_geography import (
    CityUseCase,
    ProvinceUseCase,
    RegionUseCase,
)
from app.interfaces.marketplace.dependencies import (
    get_cache,
    get_city_use_case,
    get_province_use_case,
    get_region_use_case,
)
from app.interfaces.marketplace.presenters import (
    city_view,
    deleted_message,
    province_view,
    region_view,
)
from app.interfaces.marketplace.schemas import (
    CityCreateRequest,
    CityUpdateRequest,
    CityView,
    DataResponse,
    ErrorResponse,
    MessageView,
    ProvinceRequest,
    ProvinceView,
    RegionRequest,
    RegionView,
)
from app.shared.cache import CacheClient

PROVINCES_CACHE = "provinces:"
CITIES_CACHE = "cities:"
REGIONS_CACHE = "regions:"

NOT_FOUND = {404: {"model": ErrorResponse}}
INVALID = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}

provinces_router = APIRouter(prefix="/provinces", tags=["provinces"])
cities_router = APIRouter(prefix="/cities", tags=["cities"])
regions_router = APIRouter(prefix="/regions", tags=["regions"])


# ── Provinces ───────────────────────────────────────────────────


@provinces_router.post(
    "",
    response_model=DataResponse[ProvinceView],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create a province",
)
def create_province(
    request: ProvinceRequest,
    use_case: ProvinceUseCase = Depends(get_province_use_case),
    cache: CacheClient = Depends(get_cache),
):
    province = use_case.create(CreateProvinceCommand(name=request.name))
    cache.invalidate(PROVINCES_CACHE)
    return {"data": province_view(province)}


@provinces_router.get(
    "", response_model=DataResponse[list[ProvinceView]], summary="List provinces"
)
def list_provinces(
    use_case: ProvinceUseCase = Depends(get_province_use_case),
    cache: CacheClient = Depends(get_cache),
):
    data = cache.get_or_set(
        f"{PROVINCES_CACHE}all",
        lambda: [province_view(p).model_dump(mode="json") for p in use_case.list_all()],
    )
    return {"data": data}


@provinces_router.get(
    "/{province_id}",
    response_model=DataResponse[ProvinceView],
    responses=NOT_FOUND,
    summary="Get a province",
)
def get_province(
    province_id: int, use_case: ProvinceUseCase = Depends(get_province_use_case)
):
    return {"data": province_view(use_case.get(province_id))}


@provinces_router.patch(
    "/{province_id}",
    response_model=DataResponse[ProvinceView],
    responses=INVALID,
    summary="Rename a province",
)
def update_province(
    province_id: int,
    request: ProvinceRequest,
    use_case: ProvinceUseCase = Depends(get_province_use_case),
    cache: CacheClient = Depends(get_cache),
):
    province = use_case.update(
        UpdateProvinceCommand(province_id=province_id, name=request.name)
    )
    cache.invalidate(PROVINCES_CACHE)
    return {"data": province_view(province)}


# ── Cities ──────────────────────────────────────────────────────


@cities_router.post(
    "",
    response_model=DataResponse[CityView],
    status_code=status.HTTP_201_CREATED,
    responses=INVALID,
    summary="Create a city",
)
def create_city(
    request: CityCreateRequest,
    use_case: CityUseCase = Depends(get_city_use_case),
    cache: CacheClient = Depends(get_cache),
):
    city = use_case.create(
        CreateCityCommand(province_id=request.province_id, name=request.name)
    )
    cache.invalidate(CITIES_CACHE)
    return {"data": city_view(city)}


@cities_router.get("", response_model=DataResponse[list[CityView]], summary="List cities")
def list_cities(
    use_case: CityUseCase = Depends(get_city_use_case),
    cache: CacheClient = Depends(get_cache),
):
    data = cache.get_or_set(
        f"{CITIES_CACHE}all",
        lambda: [city_view(c).model_dump(mode="json") for c in use_case.list_all()],
    )
    return {"data": data}


@cities_router.get(
    "/province/{province_id}",
    response_model=DataResponse[list[CityView]],
    summary="List the cities of a province",
)
def list_cities_by_province(
    province_id: int, use_case: CityUseCase = Depends(get_city_use_case)
):
    return {"data": [city_view(c) for c in use_case.list_by_province(province_id)]}


@cities_router.get(
    "/{city_id}",
    response_model=DataResponse[CityView],
    responses=NOT_FOUND,
    summary="Get a city",
)
def get_city(city_id: int, use_case: CityUseCase = Depends(get_city_use_case)):
    return {"data": city_view(use_case.get(city_id))}


@cities_router.patch(
    "/{city_id}",
    response_model=DataResponse[CityView],
    responses=INVALID,
    summary="Rename a city",
)
def update_city(
    city_id: int,
    request: CityUpdateRequest,
    use_case: CityUseCase = Depends(get_city_use_case),
    cache: CacheClient = Depends(get_cache),
):
    city = use_case.update(UpdateCityCommand(city_id=city_id, name=request.name))
    cache.invalidate(CITIES_CACHE)
    return {"data": city_view(city)}


# ── Regions ─────────────────────────────────────────────────────


@regions_router.post(
    "",
    response_model=DataResponse[RegionView],
    status_code=status.HTTP_201_CREATED,
    responses=INVALID,
    summary="Create a region",
)
def create_region(
    request: RegionRequest,
    use_case: RegionUseCase = Depends(get_region_use_case),
    cache: CacheClient = Depends(get_cache),
):
    region = use_case.create(
        CreateRegionCommand(province_id=request.province_id, city_id=request.city_id)
    )
    cache.invalidate(REGIONS_CACHE)
    return {"data": region_view(region)}


@regions_router.get(
    "", response_model=DataResponse[list[RegionView]], summary="List regions"
)
def list_regions(
    use_case: RegionUseCase = Depends(get_region_use_case),
    cache: CacheClient = Depends(get_cache),
):
    data = cache.get_or_set(
        f"{REGIONS_CACHE}all",
        lambda: [region_view(r).model_dump(mode="json") for r in use_case.list_all()],
    )
    return {"data": data}


@regions_router.get(
    "/province/{province_id}",
    response_model=DataResponse[list[RegionView]],
    summary="List the regions of a province",
)
def list_regions_by_province(
    province_id: int, use_case: RegionUseCase = Depends(get_region_use_case)
):
    return {"data": [region_view(r) for r in use_case.list_by_province(province_id)]}


@regions_router.get(
    "/{region_id}",
    response_model=DataResponse[RegionView],
    responses=NOT_FOUND,
    summary="Get a region",
)
def get_region(region_id: UUID, use_case: RegionUseCase = Depends(get_region_use_case)):
    return {"data": region_view(use_case.get(region_id))}


@regions_router.patch(
    "/{region_id}",
    response_model=DataResponse[RegionView],
    responses=INVALID,
    summary="Move a region to another province and city",
)
def update_region(
    region_id: UUID,
    request: RegionRequest,
    use_case: RegionUseCase = Depends(get_region_use_case),
    cache: CacheClient = Depends(get_cache),
):
    region = use_case.update(
        UpdateRegionCommand(
            region_id=region_id,
            province_id=request.province_id,
            city_id=request.city_id,
        )
    )
    cache.invalidate(REGIONS_CACHE)
    return {"data": region_view(region)}


@regions_router.delete(
    "/{region_id}",
    response_model=DataResponse[MessageView],
    responses=NOT_FOUND,
    summary="Soft-delete a region",
)
def delete_region(
    region_id: UUID,
    use_case: RegionUseCase = Depends(get_region_use_case),
    cache: CacheClient = Depends(get_cache),
):
    use_case.delete(region_id)
    cache.invalidate(REGIONS_CACHE)
    return {"data": deleted_message("region")}


@regions_router.patch(
    "/{region_id}/restore",
    response_model=DataResponse[RegionView],
    responses=NOT_FOUND,
    summary="Restore a soft-deleted region",
)
def restore_region(
    region_id: UUID,
    use_case: RegionUseCase = Depends(get_region_use_case),
    cache: CacheClient = Depends(get_cache),
):
    region = use_case.restore(region_id)
    cache.invalidate(REGIONS_CACHE)
    return {"data": region_view(region)}
