"""Tests for rail_carts.domain.movement module."""

from __future__ import annotations

import pytest

from rail_carts.domain.errors import ImpossibleMovementError
from rail_carts.domain.movement import LEFT_TURN, RIGHT_TURN, TRANSITIONS, resolve, target
from rail_carts.domain.track import Direction, TrackType

UP, DOWN, LEFT, RIGHT = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT


class TestStraightTrack:
    @pytest.mark.parametrize(
        ("track_type", "direction"),
        [
            (TrackType.HORIZONTAL, LEFT),
            (TrackType.HORIZONTAL, RIGHT),
            (TrackType.VERTICAL, UP),
            (TrackType.VERTICAL, DOWN),
        ],
    )
    def test_passes_through_unchanged(self, track_type: TrackType, direction: Direction) -> None:
        assert resolve(track_type, direction, turns=0) == (direction, 0)

    @pytest.mark.parametrize(
        ("track_type", "direction"),
        [
            (TrackType.HORIZONTAL, UP),
            (TrackType.HORIZONTAL, DOWN),
            (TrackType.VERTICAL, LEFT),
            (TrackType.VERTICAL, RIGHT),
        ],
    )
    def test_perpendicular_entry_is_fatal(
        self, track_type: TrackType, direction: Direction
    ) -> None:
        with pytest.raises(ImpossibleMovementError, match=direction.name):
            resolve(track_type, direction, turns=0)


class TestCurves:
    def test_curve_forward(self) -> None:
        table = {d: resolve(TrackType.CURVE_FORWARD, d, 0)[0] for d in Direction}
        assert table == {UP: RIGHT, DOWN: LEFT, LEFT: DOWN, RIGHT: UP}

    def test_curve_backward(self) -> None:
        table = {d: resolve(TrackType.CURVE_BACKWARD, d, 0)[0] for d in Direction}
        assert table == {UP: LEFT, DOWN: RIGHT, LEFT: UP, RIGHT: DOWN}

    def test_curves_do_not_count_as_turns(self) -> None:
        assert resolve(TrackType.CURVE_FORWARD, UP, turns=4)[1] == 0

    def test_table_covers_every_non_intersection_entry(self) -> None:
        assert len(TRANSITIONS) == 12
        assert all(track is not TrackType.INTERSECTION for track, _ in TRANSITIONS)


class TestIntersection:
    def test_cycles_left_straight_right(self) -> None:
        outgoing = [resolve(TrackType.INTERSECTION, UP, turns)[0] for turns in range(6)]
        assert outgoing == [LEFT, UP, RIGHT, LEFT, UP, RIGHT]

    @pytest.mark.parametrize("incoming", list(Direction))
    def test_rotation_is_relative_to_heading(self, incoming: Direction) -> None:
        assert resolve(TrackType.INTERSECTION, incoming, 0)[0] == LEFT_TURN[incoming]
        assert resolve(TrackType.INTERSECTION, incoming, 1)[0] == incoming
        assert resolve(TrackType.INTERSECTION, incoming, 2)[0] == RIGHT_TURN[incoming]

    def test_increments_turn_counter(self) -> None:
        assert resolve(TrackType.INTERSECTION, DOWN, turns=7)[1] == 1

    def test_left_and_right_turns_are_inverse(self) -> None:
        for direction in Direction:
            assert RIGHT_TURN[LEFT_TURN[direction]] is direction


class TestTarget:
    def test_unit_offsets(self) -> None:
        assert target(3, 3, UP) == (3, 2)
        assert target(3, 3, DOWN) == (3, 4)
        assert target(3, 3, LEFT) == (2, 3)
        assert target(3, 3, RIGHT) == (4, 3)

    def test_may_leave_the_grid(self) -> None:
        assert target(0, 0, LEFT) == (-1, 0)
