"""Movement rules: outgoing heading for a cart leaving a track segment.

Straight segments and curves are a single table lookup keyed by
``(TrackType, incoming Direction)``. Intersections rotate the incoming
heading according to how many intersections the cart has crossed, cycling
left, straight, right.
"""

from __future__ import annotations

from typing import Callable

from rail_carts.config.constants import INTERSECTION_PERIOD
from rail_carts.domain.errors import ImpossibleMovementError
from rail_carts.domain.track import Direction, TrackType

UP, DOWN, LEFT, RIGHT = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT

# (track_type, incoming) -> outgoing, for every segment except intersections
TRANSITIONS: dict[tuple[TrackType, Direction], Direction] = {
    (TrackType.HORIZONTAL, LEFT): LEFT,
    (TrackType.HORIZONTAL, RIGHT): RIGHT,
    (TrackType.VERTICAL, UP): UP,
    (TrackType.VERTICAL, DOWN): DOWN,
    (TrackType.CURVE_FORWARD, UP): RIGHT,
    (TrackType.CURVE_FORWARD, DOWN): LEFT,
    (TrackType.CURVE_FORWARD, LEFT): DOWN,
    (TrackType.CURVE_FORWARD, RIGHT): UP,
    (TrackType.CURVE_BACKWARD, UP): LEFT,
    (TrackType.CURVE_BACKWARD, DOWN): RIGHT,
    (TrackType.CURVE_BACKWARD, LEFT): UP,
    (TrackType.CURVE_BACKWARD, RIGHT): DOWN,
}

LEFT_TURN: dict[Direction, Direction] = {UP: LEFT, LEFT: DOWN, DOWN: RIGHT, RIGHT: UP}
RIGHT_TURN: dict[Direction, Direction] = {UP: RIGHT, RIGHT: DOWN, DOWN: LEFT, LEFT: UP}


def _straight(direction: Direction) -> Direction:
    return direction


INTERSECTION_TURN_CYCLE: tuple[Callable[[Direction], Direction], ...] = (
    RIGHT_TURN.__getitem__,  # crossings % 3 == 0
    LEFT_TURN.__getitem__,  # crossings % 3 == 1
    _straight,  # crossings % 3 == 2
)
"""Heading change indexed by the post-increment crossing count modulo 3."""


def resolve(track_type: TrackType, incoming: Direction, turns: int) -> tuple[Direction, int]:
    """Return ``(outgoing, turn_delta)`` for a cart leaving ``track_type``.

    ``turns`` is the number of intersections the cart crossed before this
    move. ``turn_delta`` is 1 when the segment is an intersection, else 0.

    Raises:
        ImpossibleMovementError: the cart moves perpendicular to a straight segment.
    """
    if track_type is TrackType.INTERSECTION:
        crossings = turns + 1
        turn = INTERSECTION_TURN_CYCLE[crossings % INTERSECTION_PERIOD]
        return turn(incoming), 1
    try:
        return TRANSITIONS[(track_type, incoming)], 0
    except KeyError:
        raise ImpossibleMovementError(
            f"cart heading {incoming.name} cannot travel along {track_type.name} track"
        ) from None


def target(x: int, y: int, direction: Direction) -> tuple[int, int]:
    """Cell reached by taking one step from ``(x, y)`` towards ``direction``."""
    dx, dy = direction.offset
    return x + dx, y + dy
