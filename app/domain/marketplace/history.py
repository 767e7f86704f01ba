"""
Shadow history for current-value records (price, demand, supply).

Before a current record is overwritten, its pre-update state is copied
into an append-only history entity. Reading the timeline appends the
current record as the most recent entry.
"""

from dataclasses import fields
from typing import Union
from uuid import UUID, uuid4

from app.domain.marketplace.entities import (
    Demand,
    DemandHistory,
    Price,
    PriceHistory,
    Supply,
    SupplyHistory,
)

CurrentRecord = Union[Price, Demand, Supply]
HistoryRecord = Union[PriceHistory, DemandHistory, SupplyHistory]

HISTORY_TYPES: dict[type, type] = {
    Price: PriceHistory,
    Demand: DemandHistory,
    Supply: SupplyHistory,
}


def _as_history(current: CurrentRecord, history_id: UUID) -> HistoryRecord:
    try:
        history_type = HISTORY_TYPES[type(current)]
    except KeyError:
        raise TypeError(f"No history type for {type(current).__name__}") from None

    values = {
        f.name: getattr(current, f.name)
        for f in fields(history_type)
        if f.name != "id"
    }
    return history_type(id=history_id, **values)


def snapshot_before_update(current: CurrentRecord) -> HistoryRecord:
    """Build the history row recording a current record's pre-update state.

    The snapshot gets a fresh id and copies commodity, region, value
    fields, revision and the record's own created/updated timestamps.

    Args:
        current: The persisted current record, fetched fresh.

    Returns:
        A new history entity, not yet persisted.
    """
    return _as_history(current, uuid4())


def current_as_history(current: CurrentRecord) -> HistoryRecord:
    """Build the synthetic final timeline entry for a current record.

    Keeps the current record's id so clients can tell it apart from
    persisted history rows.
    """
    return _as_history(current, current.id)


def build_timeline(
    history: list[HistoryRecord], current: CurrentRecord
) -> list[HistoryRecord]:
    """Return the complete timeline: persisted rows, then the current entry.

    history must already be in chronological order; its length plus one
    is the length of the result.
    """
    return [*history, current_as_history(current)]
