"""
Use cases: Manage provinces, cities and regions.

Reference geography that prices, demands, supplies, lands and sales
point at. Provinces and cities are never deleted; regions are
soft-deletable.

Failure cases: EntityNotFoundError, InvalidInputError, DuplicateEntityError.
"""

from dataclasses import replace
from uuid import uuid4

from app.application.marketplace.crud import CrudUseCase, require
from app.application.marketplace.dtos import (
    CreateCityCommand,
    CreateProvinceCommand,
    CreateRegionCommand,
    UpdateCityCommand,
    UpdateProvinceCommand,
    UpdateRegionCommand,
)
from app.application.marketplace.validation import require_text
from app.domain.marketplace.entities import City, Province, Region
from app.domain.marketplace.errors import InvalidInputError
from app.domain.marketplace.ports import (
    CityRepository,
    ProvinceRepository,
    RegionRepository,
    TransactionManager,
)


class ProvinceUseCase(CrudUseCase[Province]):
    """Create, read and rename provinces."""

    entity_name = "province"

    def create(self, command: CreateProvinceCommand) -> Province:
        name = require_text("name", command.name)
        return self._create(Province(id=None, name=name))

    def update(self, command: UpdateProvinceCommand) -> Province:
        name = require_text("name", command.name)
        return self._update(command.province_id, lambda p: replace(p, name=name))


class CityUseCase(CrudUseCase[City]):
    """Create, read and rename cities."""

    entity_name = "city"

    def __init__(
        self,
        city_repo: CityRepository,
        province_repo: ProvinceRepository,
        tx_manager: TransactionManager,
    ) -> None:
        super().__init__(city_repo, tx_manager)
        self._city_repo = city_repo
        self._province_repo = province_repo

    def create(self, command: CreateCityCommand) -> City:
        name = require_text("name", command.name)
        return self._create(
            City(id=None, province_id=command.province_id, name=name),
            check=lambda: require(self._province_repo, command.province_id, "province"),
        )

    def update(self, command: UpdateCityCommand) -> City:
        name = require_text("name", command.name)
        return self._update(command.city_id, lambda c: replace(c, name=name))

    def list_by_province(self, province_id: int) -> list[City]:
        require(self._province_repo, province_id, "province")
        return self._city_repo.list_by_province(province_id)


class RegionUseCase(CrudUseCase[Region]):
    """Regions pair a province with one of its cities."""

    entity_name = "region"

    def __init__(
        self,
        region_repo: RegionRepository,
        province_repo: ProvinceRepository,
        city_repo: CityRepository,
        tx_manager: TransactionManager,
    ) -> None:
        super().__init__(region_repo, tx_manager)
        self._region_repo = region_repo
        self._province_repo = province_repo
        self._city_repo = city_repo

    def _check_location(self, province_id: int, city_id: int) -> None:
        require(self._province_repo, province_id, "province")
        city = require(self._city_repo, city_id, "city")
        if city.province_id != province_id:
            raise InvalidInputError(
                "city_id", f"city {city_id} is not in province {province_id}"
            )

    def create(self, command: CreateRegionCommand) -> Region:
        region = Region(
            id=uuid4(), province_id=command.province_id, city_id=command.city_id
        )
        return self._create(
            region,
            check=lambda: self._check_location(command.province_id, command.city_id),
        )

    def update(self, command: UpdateRegionCommand) -> Region:
        def mutate(region: Region) -> Region:
            self._check_location(command.province_id, command.city_id)
            return replace(
                region, province_id=command.province_id, city_id=command.city_id
            )

        return self._update(command.region_id, mutate)

    def list_by_province(self, province_id: int) -> list[Region]:
        require(self._province_repo, province_id, "province")
        return self._region_repo.list_by_province(province_id)
