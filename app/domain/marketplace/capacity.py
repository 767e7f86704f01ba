"""
Capacity checking for allocations against a parent resource.

Pure functions: the caller fetches the current allocation total and the
parent's capacity, this module only decides. Used by land-commodity
create (prior amount 0), update (prior amount = stored amount) and
restore (prior amount 0, the restored row is not in the active total).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from app.domain.marketplace.errors import CapacityExceededError

CAPACITY_EXCEEDED_REASON = "land area not enough"


@dataclass(frozen=True)
class CapacityDecision:
    """Outcome of a capacity check.

    Attributes:
        accepted: True when the effective total fits the ceiling.
        effective_total: existing - prior own amount + requested.
        capacity: The parent's capacity ceiling.
        reason: Rejection reason, None when accepted.
    """

    accepted: bool
    effective_total: Decimal
    capacity: Decimal
    reason: Optional[str] = None

    @property
    def remaining(self) -> Decimal:
        """Capacity left after applying the request (negative on reject)."""
        return self.capacity - self.effective_total


def check_capacity(
    existing_total: Decimal,
    prior_own_amount: Decimal,
    requested_amount: Decimal,
    capacity_ceiling: Decimal,
) -> CapacityDecision:
    """Decide whether a requested amount fits the remaining capacity.

    The boundary is inclusive: an effective total equal to the ceiling
    is accepted.

    Args:
        existing_total: Sum of active allocations as currently persisted.
        prior_own_amount: The allocation's own stored amount when it is
            already part of existing_total, otherwise 0.
        requested_amount: The new amount being requested.
        capacity_ceiling: The parent's total capacity.

    Returns:
        A CapacityDecision.
    """
    effective_total = existing_total - prior_own_amount + requested_amount
    if effective_total <= capacity_ceiling:
        return CapacityDecision(
            accepted=True,
            effective_total=effective_total,
            capacity=capacity_ceiling,
        )
    return CapacityDecision(
        accepted=False,
        effective_total=effective_total,
        capacity=capacity_ceiling,
        reason=CAPACITY_EXCEEDED_REASON,
    )


def ensure_capacity(
    existing_total: Decimal,
    prior_own_amount: Decimal,
    requested_amount: Decimal,
    capacity_ceiling: Decimal,
) -> CapacityDecision:
    """Like check_capacity(), but raise on rejection.

    Raises:
        CapacityExceededError: If the effective total exceeds the ceiling.
    """
    decision = check_capacity(
        existing_total, prior_own_amount, requested_amount, capacity_ceiling
    )
    if not decision.accepted:
        raise CapacityExceededError(
            requested_total=decision.effective_total,
            capacity=decision.capacity,
        )
    return decision
