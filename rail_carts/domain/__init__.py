"""Domain layer: track values, movement rules, the rail grid and run detectors."""

from rail_carts.domain.errors import (
    DerailmentError,
    ImpossibleMovementError,
    LayoutParseError,
    NonTerminatingRunError,
    TickLimitExceededError,
    TrackInvariantError,
)
from rail_carts.domain.filters import RepeatedStateDetector, TerminationReason
from rail_carts.domain.movement import resolve, target
from rail_carts.domain.track import Cart, CartState, Direction, Snapshot, TrackType
from rail_carts.domain.track_grid import TrackGrid

__all__ = [
    "Cart",
    "CartState",
    "DerailmentError",
    "Direction",
    "ImpossibleMovementError",
    "LayoutParseError",
    "NonTerminatingRunError",
    "RepeatedStateDetector",
    "Snapshot",
    "TerminationReason",
    "TickLimitExceededError",
    "TrackGrid",
    "TrackInvariantError",
    "resolve",
    "target",
]
