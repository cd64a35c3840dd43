"""Configuration and result dataclasses for cart simulation runs."""

from __future__ import annotations

from dataclasses import dataclass, field

from rail_carts.config.constants import CYCLE_HISTORY_SIZE, DEFAULT_MAX_TICKS

__all__ = [
    "QueryFailure",
    "RunConfig",
    "SimulationResult",
]

# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QueryFailure:
    """Why one query could not be answered."""

    reason: str
    """A ``TerminationReason`` value."""
    message: str
    tick: int
    """Tick at which the query gave up."""

    def to_dict(self) -> dict[str, str | int]:
        return {"reason": self.reason, "message": self.message, "tick": self.tick}


@dataclass(frozen=True)
class SimulationResult:
    """Answers to both queries for one layout.

    Each query succeeds or fails on its own: an unanswered query leaves its
    position and tick as None and records a ``QueryFailure`` instead.
    """

    run_id: str
    initial_carts: int
    first_collision: tuple[int, int] | None
    first_collision_tick: int | None
    last_cart: tuple[int, int] | None
    last_cart_tick: int | None
    first_collision_failure: QueryFailure | None = None
    last_cart_failure: QueryFailure | None = None
    collisions: tuple[tuple[int, int, int], ...] = field(default=())
    """Every collision as ``(tick, x, y)`` in the order it happened."""
    final_render: str = ""
    """Textual snapshot of the layout once the run stopped."""

    @property
    def complete(self) -> bool:
        """True when both queries were answered."""
        return self.first_collision_failure is None and self.last_cart_failure is None


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunConfig:
    """Runtime knobs shared by both queries."""

    max_ticks: int | None = DEFAULT_MAX_TICKS
    """Tick ceiling per query; None runs until the goal or a detected cycle."""
    detect_cycles: bool = True
    cycle_history_size: int = CYCLE_HISTORY_SIZE
    write_tick_log: bool = False

    def __post_init__(self) -> None:
        if self.max_ticks is not None and self.max_ticks < 1:
            raise ValueError("max_ticks must be >= 1")
        if self.cycle_history_size < 1:
            raise ValueError("cycle_history_size must be >= 1")
