"""Value types for rail layouts: directions, track segments, carts and snapshots.

Enum values are the layout symbols themselves, so ``Direction("^")`` and
``TrackType("+")`` parse a single character and ``.value`` renders it back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """Heading of a cart."""

    UP = "^"
    DOWN = "v"
    LEFT = "<"
    RIGHT = ">"

    @property
    def offset(self) -> tuple[int, int]:
        """Unit vector ``(dx, dy)``; y grows downward."""
        return _OFFSETS[self]

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)


_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class TrackType(str, Enum):
    """Fixed rail segment occupying one cell."""

    CURVE_FORWARD = "/"
    CURVE_BACKWARD = "\\"
    HORIZONTAL = "-"
    VERTICAL = "|"
    INTERSECTION = "+"

    @classmethod
    def under_cart(cls, direction: Direction) -> TrackType:
        """Infer the straight segment a cart initially sits on."""
        return cls.HORIZONTAL if direction.is_horizontal else cls.VERTICAL


@dataclass
class Cart:
    """A cart owned by the grid cell it occupies."""

    direction: Direction
    turns: int = 0
    """Number of intersections crossed so far."""
    moved: bool = False
    """Set once the cart has moved in the current tick; cleared every tick."""


@dataclass(frozen=True)
class CartState:
    """Immutable view of a single cart at one point in time."""

    x: int
    y: int
    direction: Direction
    turns: int


Snapshot = tuple[CartState, ...]
"""Cart states in reading order capturing every live cart after one tick."""
