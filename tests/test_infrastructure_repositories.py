"""
Tests for the SQLAlchemy repository adapters and transaction manager.

Runs against in-memory SQLite. SQLite ignores FOR UPDATE, so concurrent
writes are covered through the revision version check, using two
sessions on a file-backed database. The other tests cover mapping, soft
delete, aggregation, history ordering and rollback.
"""

import random
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import create_engine

from app.application.marketplace.allocate_land_commodity import LandCommodityUseCase
from app.application.marketplace.dtos import (
    CreateLandCommodityCommand,
    UpdateCurrentValueCommand,
    UpdateLandCommodityCommand,
)
from app.application.marketplace.track_current_values import PriceUseCase
from app.domain.marketplace.entities import (
    City,
    Commodity,
    Land,
    LandCommodity,
    Price,
    PriceHistory,
    Province,
    Region,
)
from app.domain.marketplace.errors import (
    CapacityExceededError,
    ConcurrentUpdateError,
    DuplicateEntityError,
    EntityNotFoundError,
    StorageError,
)
from app.domain.marketplace.history import snapshot_before_update
from app.infrastructure.marketplace.commodity_repository import (
    CommodityRepositoryAdapter,
)
from app.infrastructure.marketplace.current_value_repository import (
    PriceHistoryRepositoryAdapter,
    PriceRepositoryAdapter,
)
from app.infrastructure.marketplace.database import (
    SqlAlchemyTransactionManager,
    build_session_factory,
)
from app.infrastructure.marketplace.geography_repository import (
    CityRepositoryAdapter,
    ProvinceRepositoryAdapter,
    RegionRepositoryAdapter,
)
from app.infrastructure.marketplace.land_repository import (
    LandCommodityRepositoryAdapter,
    LandRepositoryAdapter,
)
from app.infrastructure.marketplace.models import Base

D = Decimal


def _seed_world(session, tx) -> dict:
    """One province, city, region, commodity and a 100-unit land."""
    with tx.transaction():
        province = ProvinceRepositoryAdapter(session).add(Province(id=None, name="North"))
        city = CityRepositoryAdapter(session).add(
            City(id=None, province_id=province.id, name="Harbor")
        )
        region = RegionRepositoryAdapter(session).add(
            Region(id=uuid4(), province_id=province.id, city_id=city.id)
        )
        commodity = CommodityRepositoryAdapter(session).add(
            Commodity(id=uuid4(), name="Rice", code="RCE", description="White rice")
        )
        land = LandRepositoryAdapter(session).add(
            Land(
                id=uuid4(),
                user_id=uuid4(),
                city_id=city.id,
                land_area=D("100"),
                certificate="CERT-1",
            )
        )
    return {
        "province": province,
        "city": city,
        "region": region,
        "commodity": commodity,
        "land": land,
    }


@pytest.fixture
def world(session, tx):
    return _seed_world(session, tx)


class TestGeographyRepositories:
    """Tests for province, city and region adapters."""

    def test_province_id_assigned_by_storage(self, world) -> None:
        assert isinstance(world["province"].id, int)

    def test_cities_listed_by_province(self, session, world) -> None:
        cities = CityRepositoryAdapter(session).list_by_province(world["province"].id)
        assert [c.name for c in cities] == ["Harbor"]

    def test_region_soft_delete_and_restore(self, session, tx, world) -> None:
        repo = RegionRepositoryAdapter(session)
        region_id = world["region"].id

        with tx.transaction():
            repo.soft_delete(region_id)
        assert repo.get_by_id(region_id) is None
        assert repo.list_all() == []
        assert repo.get_deleted_by_id(region_id) is not None

        with tx.transaction():
            repo.restore(region_id)
        restored = repo.get_by_id(region_id)
        assert restored is not None
        assert restored.deleted_at is None


class TestCommodityRepository:
    """Tests for CommodityRepositoryAdapter."""

    def test_timestamps_set_on_insert(self, world) -> None:
        commodity = world["commodity"]
        assert commodity.created_at is not None
        assert commodity.updated_at is not None
        assert commodity.deleted_at is None

    def test_duplicate_name_is_reported(self, session, world) -> None:
        repo = CommodityRepositoryAdapter(session)
        with pytest.raises(DuplicateEntityError):
            repo.add(
                Commodity(id=uuid4(), name="Rice", code="RC2", description="Again")
            )
        session.rollback()

    def test_update_of_missing_row_fails(self, session) -> None:
        repo = CommodityRepositoryAdapter(session)
        with pytest.raises(StorageError):
            repo.update(Commodity(id=uuid4(), name="Ghost", code="GHO", description="x"))


class TestLandCommodityRepository:
    """Tests for allocation totals."""

    def test_sum_is_zero_without_allocations(self, session, world) -> None:
        repo = LandCommodityRepositoryAdapter(session)
        assert repo.sum_land_area_by_land(world["land"].id) == D("0")

    def test_sum_skips_deleted_allocations(self, session, tx, world) -> None:
        repo = LandCommodityRepositoryAdapter(session)
        land_id, commodity_id = world["land"].id, world["commodity"].id
        with tx.transaction():
            kept = repo.add(
                LandCommodity(
                    id=uuid4(), land_id=land_id, commodity_id=commodity_id, land_area=D("60.50")
                )
            )
            dropped = repo.add(
                LandCommodity(
                    id=uuid4(), land_id=land_id, commodity_id=commodity_id, land_area=D("20")
                )
            )
            repo.soft_delete(dropped.id)

        assert repo.sum_land_area_by_land(land_id) == D("60.50")
        assert [lc.id for lc in repo.list_by_land(land_id)] == [kept.id]
        assert [lc.id for lc in repo.list_by_commodity(commodity_id)] == [kept.id]

    def test_locked_read_returns_land(self, session, world) -> None:
        land = LandRepositoryAdapter(session).get_for_update(world["land"].id)
        assert land is not None
        assert land.land_area == D("100")


class TestPriceHistoryRepository:
    """Tests for history ordering."""

    def test_history_ordered_by_time_then_revision(self, session, tx, world) -> None:
        repo = PriceHistoryRepositoryAdapter(session)
        commodity_id, region_id = world["commodity"].id, world["region"].id
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)

        def entry(value: str, revision: int, minutes: int) -> PriceHistory:
            stamp = base + timedelta(minutes=minutes)
            return PriceHistory(
                id=uuid4(),
                commodity_id=commodity_id,
                region_id=region_id,
                price=D(value),
                revision=revision,
                created_at=base,
                updated_at=stamp,
            )

        with tx.transaction():
            repo.add(entry("120", 2, minutes=5))
            repo.add(entry("100", 1, minutes=0))
            repo.add(entry("110", 3, minutes=5))

        history = repo.list_by_commodity_and_region(commodity_id, region_id)

        assert [h.revision for h in history] == [1, 2, 3]
        assert repo.list_by_commodity_and_region(commodity_id, uuid4()) == []


class TestTransactionManager:
    """Tests for SqlAlchemyTransactionManager."""

    def test_exception_rolls_back_all_writes(self, session, tx, world) -> None:
        repo = CommodityRepositoryAdapter(session)

        with pytest.raises(RuntimeError):
            with tx.transaction():
                repo.add(
                    Commodity(id=uuid4(), name="Corn", code="CRN", description="Yellow")
                )
                raise RuntimeError("boom")

        assert [c.name for c in repo.list_all()] == ["Rice"]

    def test_nested_transactions_commit_once(self, session, tx, world) -> None:
        repo = CommodityRepositoryAdapter(session)
        with tx.transaction():
            with tx.transaction():
                repo.add(
                    Commodity(id=uuid4(), name="Corn", code="CRN", description="Yellow")
                )
        session.expire_all()
        assert sorted(c.name for c in repo.list_all()) == ["Corn", "Rice"]


# ── Protocols end to end on SQLite ──────────────────────────────


def _allocation_use_case(session, tx) -> LandCommodityUseCase:
    return LandCommodityUseCase(
        LandCommodityRepositoryAdapter(session),
        LandRepositoryAdapter(session),
        CommodityRepositoryAdapter(session),
        tx,
    )


def _add_land(session, tx, world, area: str) -> Land:
    with tx.transaction():
        return LandRepositoryAdapter(session).add(
            Land(
                id=uuid4(),
                user_id=uuid4(),
                city_id=world["city"].id,
                land_area=D(area),
                certificate="CERT-2",
            )
        )


class TestAllocationOnSqlite:
    """Capacity-checked allocation against real repositories."""

    def test_capacity_never_exceeded_over_random_operations(
        self, session, tx, world
    ) -> None:
        """Random creates, updates, deletes and restores keep the land within capacity."""
        use_case = _allocation_use_case(session, tx)
        repo = LandCommodityRepositoryAdapter(session)
        land, commodity = world["land"], world["commodity"]
        rng = random.Random(20240601)
        active: list = []
        deleted: list = []

        for _ in range(80):
            action = rng.choice(["create", "create", "update", "delete", "restore"])
            amount = D(rng.randint(1, 4000)) / 100
            try:
                if action == "restore" and deleted:
                    record_id = deleted[rng.randrange(len(deleted))]
                    try:
                        use_case.restore(record_id)
                    except CapacityExceededError:
                        assert repo.get_deleted_by_id(record_id) is not None
                    else:
                        deleted.remove(record_id)
                        active.append(record_id)
                elif action == "create" or not active:
                    created = use_case.create(
                        CreateLandCommodityCommand(
                            land_id=land.id, commodity_id=commodity.id, land_area=amount
                        )
                    )
                    active.append(created.id)
                elif action == "update":
                    use_case.update(
                        UpdateLandCommodityCommand(
                            land_commodity_id=rng.choice(active),
                            land_id=land.id,
                            commodity_id=commodity.id,
                            land_area=amount,
                        )
                    )
                else:
                    victim = active.pop(rng.randrange(len(active)))
                    use_case.delete(victim)
                    deleted.append(victim)
            except CapacityExceededError:
                pass

            assert repo.sum_land_area_by_land(land.id) <= land.land_area
            assert sorted(lc.id for lc in repo.list_by_land(land.id)) == sorted(active)

    def test_rejected_allocation_writes_nothing(self, session, tx, world) -> None:
        use_case = _allocation_use_case(session, tx)
        land, commodity = world["land"], world["commodity"]
        use_case.create(
            CreateLandCommodityCommand(
                land_id=land.id, commodity_id=commodity.id, land_area=D("60")
            )
        )

        with pytest.raises(CapacityExceededError):
            use_case.create(
                CreateLandCommodityCommand(
                    land_id=land.id, commodity_id=commodity.id, land_area=D("41")
                )
            )

        assert len(use_case.list_by_land(land.id)) == 1
        use_case.create(
            CreateLandCommodityCommand(
                land_id=land.id, commodity_id=commodity.id, land_area=D("40")
            )
        )
        assert LandCommodityRepositoryAdapter(session).sum_land_area_by_land(
            land.id
        ) == D("100")

    def test_update_may_grow_into_space_a_rejected_request_left(
        self, session, tx, world
    ) -> None:
        """1000 land: 700 accepted, 400 refused, the 700 grown to 900."""
        use_case = _allocation_use_case(session, tx)
        repo = LandCommodityRepositoryAdapter(session)
        land = _add_land(session, tx, world, "1000")
        commodity = world["commodity"]

        first = use_case.create(
            CreateLandCommodityCommand(
                land_id=land.id, commodity_id=commodity.id, land_area=D("700")
            )
        )
        with pytest.raises(CapacityExceededError, match="land area not enough"):
            use_case.create(
                CreateLandCommodityCommand(
                    land_id=land.id, commodity_id=commodity.id, land_area=D("400")
                )
            )
        assert [lc.id for lc in use_case.list_by_land(land.id)] == [first.id]

        grown = use_case.update(
            UpdateLandCommodityCommand(
                land_commodity_id=first.id,
                land_id=land.id,
                commodity_id=commodity.id,
                land_area=D("900"),
            )
        )

        assert grown.land_area == D("900")
        assert repo.sum_land_area_by_land(land.id) == D("900")

    def test_restore_that_would_overfill_land_is_refused(
        self, session, tx, world
    ) -> None:
        """A deleted 500 cannot come back while 900 of 1000 is allocated."""
        use_case = _allocation_use_case(session, tx)
        repo = LandCommodityRepositoryAdapter(session)
        land = _add_land(session, tx, world, "1000")
        commodity = world["commodity"]

        dropped = use_case.create(
            CreateLandCommodityCommand(
                land_id=land.id, commodity_id=commodity.id, land_area=D("500")
            )
        )
        use_case.delete(dropped.id)
        use_case.create(
            CreateLandCommodityCommand(
                land_id=land.id, commodity_id=commodity.id, land_area=D("900")
            )
        )

        with pytest.raises(CapacityExceededError, match="land area not enough"):
            use_case.restore(dropped.id)

        assert repo.sum_land_area_by_land(land.id) == D("900")
        assert repo.get_by_id(dropped.id) is None
        assert repo.get_deleted_by_id(dropped.id) is not None


class TestPriceHistoryOnSqlite:
    """Shadow-history updates against real repositories."""

    def _use_case(self, session, tx) -> PriceUseCase:
        return PriceUseCase(
            PriceRepositoryAdapter(session),
            PriceHistoryRepositoryAdapter(session),
            CommodityRepositoryAdapter(session),
            RegionRepositoryAdapter(session),
            tx,
        )

    def _seed_price(self, session, tx, world, value: str = "100") -> Price:
        with tx.transaction():
            return PriceRepositoryAdapter(session).add(
                Price(
                    id=uuid4(),
                    commodity_id=world["commodity"].id,
                    region_id=world["region"].id,
                    price=D(value),
                )
            )

    def test_updates_build_timeline(self, session, tx, world) -> None:
        use_case = self._use_case(session, tx)
        price = self._seed_price(session, tx, world)

        use_case.update_current(UpdateCurrentValueCommand(record_id=price.id, value=D("120")))
        use_case.update_current(UpdateCurrentValueCommand(record_id=price.id, value=D("150")))

        timeline = use_case.get_history(world["commodity"].id, world["region"].id)

        assert [t.price for t in timeline] == [D("100"), D("120"), D("150")]
        assert [t.revision for t in timeline] == [1, 2, 3]
        assert timeline[-1].id == price.id
        assert use_case.get(price.id).revision == 3

    def test_failed_history_insert_leaves_price_unchanged(
        self, session, tx, world
    ) -> None:
        use_case = self._use_case(session, tx)
        price = self._seed_price(session, tx, world)

        class FailingHistory(PriceHistoryRepositoryAdapter):
            def add(self, history):
                raise StorageError("price history add", "simulated")

        use_case._history_repo = FailingHistory(session)

        with pytest.raises(StorageError):
            use_case.update_current(
                UpdateCurrentValueCommand(record_id=price.id, value=D("999"))
            )

        session.expire_all()
        stored = PriceRepositoryAdapter(session).get_by_id(price.id)
        assert stored.price == D("100")
        assert stored.revision == 1
        assert PriceHistoryRepositoryAdapter(session).list_by_commodity_and_region(
            world["commodity"].id, world["region"].id
        ) == []

    def test_deleted_price_has_no_history(self, session, tx, world) -> None:
        use_case = self._use_case(session, tx)
        price = self._seed_price(session, tx, world)
        use_case.delete(price.id)

        with pytest.raises(EntityNotFoundError):
            use_case.get_history(world["commodity"].id, world["region"].id)

    def test_second_live_price_for_pair_is_duplicate(self, session, tx, world) -> None:
        """Storage keeps one live record per pair even without the use-case check."""
        repo = PriceRepositoryAdapter(session)
        first = self._seed_price(session, tx, world)

        with pytest.raises(DuplicateEntityError):
            repo.add(replace(first, id=uuid4(), price=D("90")))
        session.rollback()

        with tx.transaction():
            repo.soft_delete(first.id)
        replacement = self._seed_price(session, tx, world, "90")
        assert repo.get_by_commodity_and_region(
            world["commodity"].id, world["region"].id
        ).id == replacement.id


# ── Two sessions on one database ────────────────────────────────


@pytest.fixture
def two_sessions(tmp_path):
    """Two sessions on a file-backed database, like two concurrent requests."""
    engine = create_engine(f"sqlite:///{tmp_path / 'marketplace.db'}")
    Base.metadata.create_all(engine)
    factory = build_session_factory(engine)
    first, second = factory(), factory()
    yield first, second
    first.close()
    second.close()
    engine.dispose()


def _price_use_case(session) -> PriceUseCase:
    return PriceUseCase(
        PriceRepositoryAdapter(session),
        PriceHistoryRepositoryAdapter(session),
        CommodityRepositoryAdapter(session),
        RegionRepositoryAdapter(session),
        SqlAlchemyTransactionManager(session),
    )


class TestConcurrentPriceUpdates:
    """Two writers updating the same price record."""

    def _seed(self, session) -> tuple[dict, Price]:
        tx = SqlAlchemyTransactionManager(session)
        world = _seed_world(session, tx)
        with tx.transaction():
            price = PriceRepositoryAdapter(session).add(
                Price(
                    id=uuid4(),
                    commodity_id=world["commodity"].id,
                    region_id=world["region"].id,
                    price=D("100"),
                )
            )
        return world, price

    def test_write_over_stale_read_is_refused(self, two_sessions) -> None:
        """A reads 100, B commits 200, A's write of 300 based on 100 fails."""
        session_a, session_b = two_sessions
        world, price = self._seed(session_a)
        stale = PriceRepositoryAdapter(session_a).get_by_id(price.id)

        _price_use_case(session_b).update_current(
            UpdateCurrentValueCommand(record_id=price.id, value=D("200"))
        )

        tx_a = SqlAlchemyTransactionManager(session_a)
        with pytest.raises(ConcurrentUpdateError):
            with tx_a.transaction():
                PriceHistoryRepositoryAdapter(session_a).add(
                    snapshot_before_update(stale)
                )
                PriceRepositoryAdapter(session_a).update(
                    replace(stale, price=D("300"), revision=stale.revision + 1)
                )

        timeline = _price_use_case(session_b).get_history(
            world["commodity"].id, world["region"].id
        )
        assert [t.price for t in timeline] == [D("100"), D("200")]
        assert [t.revision for t in timeline] == [1, 2]

    def test_update_after_other_commit_builds_on_it(self, two_sessions) -> None:
        """A reads 100, B commits 200, A's update of 300 keeps 200 in history."""
        session_a, session_b = two_sessions
        world, price = self._seed(session_a)
        use_case_a = _price_use_case(session_a)
        assert use_case_a.get(price.id).price == D("100")

        _price_use_case(session_b).update_current(
            UpdateCurrentValueCommand(record_id=price.id, value=D("200"))
        )
        updated = use_case_a.update_current(
            UpdateCurrentValueCommand(record_id=price.id, value=D("300"))
        )

        assert updated.price == D("300")
        assert updated.revision == 3
        timeline = use_case_a.get_history(world["commodity"].id, world["region"].id)
        assert [t.price for t in timeline] == [D("100"), D("200"), D("300")]
        assert [t.revision for t in timeline] == [1, 2, 3]
