"""
Port interfaces (ABCs) for the marketplace bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.

Read methods return None (or an empty list) when nothing matches;
storage failures surface as StorageError.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from decimal import Decimal
from typing import Any, Generic, Optional, TypeVar
from uuid import UUID

from app.domain.marketplace.entities import (
    City,
    Commodity,
    Harvest,
    Land,
    LandCommodity,
    Province,
    Region,
    Sale,
)

T = TypeVar("T")
H = TypeVar("H")


class Repository(ABC, Generic[T]):
    """Port for plain persistence of one entity type."""

    @abstractmethod
    def get_by_id(self, record_id: Any) -> Optional[T]:
        """Return the active record with this id, or None."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[T]:
        """Return all active records."""
        raise NotImplementedError

    @abstractmethod
    def add(self, entity: T) -> T:
        """Insert a new record and return it as stored."""
        raise NotImplementedError

    @abstractmethod
    def update(self, entity: T) -> None:
        """Overwrite the mutable fields of an active record."""
        raise NotImplementedError


class SoftDeleteRepository(Repository[T]):
    """Port for entities that are marked deleted rather than removed."""

    @abstractmethod
    def get_deleted_by_id(self, record_id: Any) -> Optional[T]:
        """Return the record only if it is currently soft-deleted."""
        raise NotImplementedError

    @abstractmethod
    def soft_delete(self, record_id: Any) -> None:
        """Mark an active record deleted."""
        raise NotImplementedError

    @abstractmethod
    def restore(self, record_id: Any) -> None:
        """Clear the deleted marker of a soft-deleted record."""
        raise NotImplementedError


class ProvinceRepository(Repository[Province]):
    """Port for provinces."""


class CityRepository(Repository[City]):
    """Port for cities."""

    @abstractmethod
    def list_by_province(self, province_id: int) -> list[City]:
        """Return the cities of a province."""
        raise NotImplementedError


class RegionRepository(SoftDeleteRepository[Region]):
    """Port for regions."""

    @abstractmethod
    def list_by_province(self, province_id: int) -> list[Region]:
        """Return the active regions of a province."""
        raise NotImplementedError


class CommodityRepository(SoftDeleteRepository[Commodity]):
    """Port for commodities."""


class LandRepository(SoftDeleteRepository[Land]):
    """Port for lands."""

    @abstractmethod
    def get_for_update(self, land_id: UUID) -> Optional[Land]:
        """Return the active land and lock its row until the transaction ends.

        Allocation writes against the same land serialise on this lock.
        """
        raise NotImplementedError

    @abstractmethod
    def list_by_user(self, user_id: UUID) -> list[Land]:
        """Return the active lands owned by a user."""
        raise NotImplementedError


class LandCommodityRepository(SoftDeleteRepository[LandCommodity]):
    """Port for land-commodity allocations."""

    @abstractmethod
    def list_by_land(self, land_id: UUID) -> list[LandCommodity]:
        """Return the active allocations against a land."""
        raise NotImplementedError

    @abstractmethod
    def list_by_commodity(self, commodity_id: UUID) -> list[LandCommodity]:
        """Return the active allocations growing a commodity."""
        raise NotImplementedError

    @abstractmethod
    def sum_land_area_by_land(self, land_id: UUID) -> Decimal:
        """Return the allocated area of all active allocations on a land (0 if none)."""
        raise NotImplementedError


class HarvestRepository(SoftDeleteRepository[Harvest]):
    """Port for harvests."""

    @abstractmethod
    def list_by_land_commodity(self, land_commodity_id: UUID) -> list[Harvest]:
        """Return active harvests of one allocation."""
        raise NotImplementedError

    @abstractmethod
    def list_by_land(self, land_id: UUID) -> list[Harvest]:
        """Return active harvests of every allocation on a land."""
        raise NotImplementedError

    @abstractmethod
    def list_by_commodity(self, commodity_id: UUID) -> list[Harvest]:
        """Return active harvests of every allocation growing a commodity."""
        raise NotImplementedError


class SaleRepository(SoftDeleteRepository[Sale]):
    """Port for sales."""

    @abstractmethod
    def list_by_commodity(self, commodity_id: UUID) -> list[Sale]:
        """Return active sales of a commodity."""
        raise NotImplementedError

    @abstractmethod
    def list_by_city(self, city_id: int) -> list[Sale]:
        """Return active sales in a city."""
        raise NotImplementedError


class CurrentValueRepository(SoftDeleteRepository[T]):
    """Port for current-value records (price, demand, supply)."""

    @abstractmethod
    def get_for_update(self, record_id: UUID) -> Optional[T]:
        """Return the active record and lock it until the transaction ends.

        A stale revision is detected on write: update() raises
        ConcurrentUpdateError when the stored revision no longer matches.
        """
        raise NotImplementedError

    @abstractmethod
    def list_by_commodity(self, commodity_id: UUID) -> list[T]:
        """Return active records of a commodity across regions."""
        raise NotImplementedError

    @abstractmethod
    def list_by_region(self, region_id: UUID) -> list[T]:
        """Return active records of a region across commodities."""
        raise NotImplementedError

    @abstractmethod
    def get_by_commodity_and_region(
        self, commodity_id: UUID, region_id: UUID
    ) -> Optional[T]:
        """Return the live record for a (commodity, region) pair, or None."""
        raise NotImplementedError


class HistoryRepository(ABC, Generic[H]):
    """Port for append-only history rows. Rows are never updated or deleted."""

    @abstractmethod
    def add(self, history: H) -> None:
        """Insert one history row."""
        raise NotImplementedError

    @abstractmethod
    def list_by_commodity_and_region(
        self, commodity_id: UUID, region_id: UUID
    ) -> list[H]:
        """Return the history rows of a pair in chronological order."""
        raise NotImplementedError


class TransactionManager(ABC):
    """Port for running a group of repository calls atomically."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Return a context manager: commit on normal exit, roll back on error.

        Nested use joins the outermost transaction.
        """
        raise NotImplementedError
