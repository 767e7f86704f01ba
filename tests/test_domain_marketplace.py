"""
Tests for the marketplace domain layer.

Tests the capacity checker, the history recorder and error classes in
isolation. No external dependencies or IO required.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from app.domain.marketplace.capacity import (
    CAPACITY_EXCEEDED_REASON,
    check_capacity,
    ensure_capacity,
)
from app.domain.marketplace.entities import (
    Demand,
    DemandHistory,
    Price,
    PriceHistory,
    Supply,
    SupplyHistory,
)
from app.domain.marketplace.errors import (
    CapacityExceededError,
    ConcurrentUpdateError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidInputError,
    StorageError,
)
from app.domain.marketplace.history import (
    build_timeline,
    current_as_history,
    snapshot_before_update,
)

D = Decimal


class TestCheckCapacity:
    """Tests for check_capacity() and ensure_capacity()."""

    def test_accepts_when_total_fits(self) -> None:
        """60 existing + 40 requested on a 100 land fits exactly."""
        decision = check_capacity(D("60"), D("0"), D("40"), D("100"))
        assert decision.accepted
        assert decision.effective_total == D("100")
        assert decision.remaining == D("0")
        assert decision.reason is None

    def test_rejects_one_unit_over(self) -> None:
        decision = check_capacity(D("60"), D("0"), D("41"), D("100"))
        assert not decision.accepted
        assert decision.effective_total == D("101")
        assert decision.reason == CAPACITY_EXCEEDED_REASON

    def test_prior_amount_is_excluded_on_update(self) -> None:
        """Growing a 60 allocation to 70 on a 100 land with another 30 fits."""
        decision = check_capacity(D("90"), D("60"), D("70"), D("100"))
        assert decision.accepted
        assert decision.effective_total == D("100")

    def test_update_over_capacity_rejected(self) -> None:
        decision = check_capacity(D("90"), D("60"), D("71"), D("100"))
        assert not decision.accepted

    def test_fractional_amounts(self) -> None:
        assert check_capacity(D("0.10"), D("0"), D("0.20"), D("0.30")).accepted
        assert not check_capacity(D("0.10"), D("0"), D("0.21"), D("0.30")).accepted

    def test_ensure_capacity_raises_with_totals(self) -> None:
        with pytest.raises(CapacityExceededError) as exc_info:
            ensure_capacity(D("50"), D("0"), D("60"), D("100"))
        assert exc_info.value.message == "land area not enough"
        assert exc_info.value.requested_total == D("110")
        assert exc_info.value.capacity == D("100")

    def test_ensure_capacity_returns_decision(self) -> None:
        decision = ensure_capacity(D("0"), D("0"), D("100"), D("100"))
        assert decision.accepted


def _price(**overrides) -> Price:
    values = dict(
        id=uuid4(),
        commodity_id=uuid4(),
        region_id=uuid4(),
        price=D("100"),
        revision=3,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Price(**values)


class TestHistoryRecorder:
    """Tests for snapshot_before_update() and build_timeline()."""

    def test_snapshot_copies_state_with_fresh_id(self) -> None:
        current = _price()
        snapshot = snapshot_before_update(current)

        assert isinstance(snapshot, PriceHistory)
        assert snapshot.id != current.id
        assert snapshot.commodity_id == current.commodity_id
        assert snapshot.region_id == current.region_id
        assert snapshot.price == D("100")
        assert snapshot.revision == 3
        assert snapshot.created_at == current.created_at
        assert snapshot.updated_at == current.updated_at

    def test_snapshot_of_demand_keeps_unit(self) -> None:
        demand = Demand(
            id=uuid4(),
            commodity_id=uuid4(),
            region_id=uuid4(),
            quantity=D("5"),
            unit="ton",
        )
        snapshot = snapshot_before_update(demand)
        assert isinstance(snapshot, DemandHistory)
        assert snapshot.quantity == D("5")
        assert snapshot.unit == "ton"

    def test_snapshot_of_supply(self) -> None:
        supply = Supply(id=uuid4(), commodity_id=uuid4(), region_id=uuid4(), quantity=D("0"))
        snapshot = snapshot_before_update(supply)
        assert isinstance(snapshot, SupplyHistory)
        assert snapshot.unit == "kg"

    def test_snapshots_get_distinct_ids(self) -> None:
        current = _price()
        assert snapshot_before_update(current).id != snapshot_before_update(current).id

    def test_current_entry_keeps_current_id(self) -> None:
        current = _price()
        entry = current_as_history(current)
        assert entry.id == current.id
        assert entry.price == current.price

    def test_timeline_is_history_then_current(self) -> None:
        """Value 100 updated to 120 then 150 reads back as 100, 120, 150."""
        first = _price(price=D("100"), revision=1)
        second = _price(id=first.id, price=D("120"), revision=2)
        current = _price(id=first.id, price=D("150"), revision=3)
        history = [snapshot_before_update(first), snapshot_before_update(second)]

        timeline = build_timeline(history, current)

        assert [t.price for t in timeline] == [D("100"), D("120"), D("150")]
        assert len(timeline) == len(history) + 1
        assert timeline[-1].id == current.id

    def test_timeline_without_history(self) -> None:
        current = _price()
        timeline = build_timeline([], current)
        assert len(timeline) == 1
        assert timeline[0].id == current.id

    def test_unknown_record_type_rejected(self) -> None:
        with pytest.raises(TypeError):
            snapshot_before_update(object())


class TestEntities:
    """Tests for entity defaults and immutability."""

    def test_current_records_start_at_revision_one(self) -> None:
        assert _price(revision=1).revision == 1
        demand = Demand(id=uuid4(), commodity_id=uuid4(), region_id=uuid4(), quantity=D("1"))
        assert demand.revision == 1
        assert demand.unit == "kg"

    def test_entities_are_frozen(self) -> None:
        price = _price()
        with pytest.raises(FrozenInstanceError):
            price.price = D("1")  # type: ignore[misc]

    def test_value_field_names_the_amount(self) -> None:
        assert Price.value_field == "price"
        assert Demand.value_field == "quantity"
        assert Supply.value_field == "quantity"


class TestDomainErrors:
    """Tests for domain error classes."""

    def test_invalid_input_message(self) -> None:
        err = InvalidInputError("land_area", "must be greater than 0")
        assert err.message == "Invalid land_area: must be greater than 0"
        assert err.field == "land_area"

    def test_not_found_message(self) -> None:
        err = EntityNotFoundError("land", "abc")
        assert err.message == "land not found"
        assert err.identifier == "abc"

    def test_duplicate_message(self) -> None:
        assert DuplicateEntityError("commodity").message == "commodity already exists"

    def test_concurrent_update_message(self) -> None:
        err = ConcurrentUpdateError("price")
        assert err.entity == "price"
        assert err.message == "price was modified concurrently, retry the update"

    def test_storage_error_keeps_reason(self) -> None:
        err = StorageError("commit", "connection reset")
        assert err.reason == "connection reset"
        assert "commit" in err.message
