"""Detectors that decide when a query can no longer be answered."""

from __future__ import annotations

from collections import deque
from enum import Enum

from rail_carts.config.constants import INTERSECTION_PERIOD
from rail_carts.domain.track import Snapshot


class TerminationReason(str, Enum):
    """Reason labels attached to NonTerminatingRunError."""

    TOO_FEW_CARTS = "too_few_carts"
    EVEN_CART_COUNT = "even_cart_count"
    NO_CARTS_LEFT = "no_carts_left"
    TICK_LIMIT = "tick_limit"
    REPEATED_STATE = "repeated_state"


def state_key(snapshot: Snapshot) -> tuple[tuple[int, int, str, int], ...]:
    """Reduce a snapshot to the part that determines all future ticks.

    Turn counters only matter modulo the intersection period.
    """
    return tuple(
        (state.x, state.y, state.direction.value, state.turns % INTERSECTION_PERIOD)
        for state in snapshot
    )


class RepeatedStateDetector:
    """Detect a cart state seen within the last ``history_size`` observations.

    The simulation is deterministic, so a recurring state means the run has
    entered a cycle and will repeat it forever.
    """

    def __init__(self, history_size: int) -> None:
        if history_size < 1:
            raise ValueError("history_size must be >= 1")
        self.history_size = history_size
        self._order: deque[tuple[tuple[int, int, str, int], ...]] = deque()
        self._seen: set[tuple[tuple[int, int, str, int], ...]] = set()

    def observe(self, snapshot: Snapshot) -> bool:
        """Return True if this snapshot repeats one still held in history."""
        key = state_key(snapshot)
        if key in self._seen:
            return True
        self._order.append(key)
        self._seen.add(key)
        if len(self._order) > self.history_size:
            self._seen.discard(self._order.popleft())
        return False
