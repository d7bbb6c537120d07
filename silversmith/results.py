"""
Silversmith Result Types.

Structured results for batch moves and order fulfillment.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from silversmith.models import Order, ProductionBatch


class MoveOutcome(enum.Enum):
    """Which path a stage move took."""

    MOVED = "moved"  # whole batch changed stage in place
    SPLIT = "split"  # part of the batch went to a new row


@dataclass
class MoveResult:
    """
    Outcome of a stage move.

    MOVED: batch is the same row, now at the target stage; remainder is None
    SPLIT: batch is the new row at the target stage; remainder is the
           original row, still at from_stage with the decremented quantity
    """

    outcome: MoveOutcome
    batch: ProductionBatch
    from_stage: str
    to_stage: str
    quantity: int
    remainder: ProductionBatch | None = None

    @property
    def was_split(self) -> bool:
        return self.outcome is MoveOutcome.SPLIT


@dataclass
class FulfillmentResult:
    """Batches created by one send to production."""

    order: Order
    batches: list[ProductionBatch] = field(default_factory=list)

    @property
    def total_quantity(self) -> int:
        return sum(b.quantity for b in self.batches)
