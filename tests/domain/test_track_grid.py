"""Tests for rail_carts.domain.track_grid module."""

from __future__ import annotations

import pytest

from rail_carts.domain.errors import DerailmentError, LayoutParseError
from rail_carts.domain.track import Cart, CartState, Direction, TrackType
from rail_carts.domain.track_grid import TrackGrid

COLLISION_LAYOUT = "\n".join(
    [
        "/->-\\",
        "|   |  /----\\",
        "| /-+--+-\\  |",
        "| | |  | v  |",
        "\\-+-/  \\-+--/",
        "  \\------/",
    ]
)


class TestParse:
    def test_dimensions_use_longest_row(self) -> None:
        grid = TrackGrid.parse(COLLISION_LAYOUT)
        assert grid.height == 6
        assert grid.width == 13

    def test_carts_found(self) -> None:
        grid = TrackGrid.parse(COLLISION_LAYOUT)
        assert grid.count_carts() == 2
        assert grid.cart_positions() == [(2, 0), (9, 3)]

    def test_track_under_cart_inferred(self) -> None:
        grid = TrackGrid.parse(COLLISION_LAYOUT)
        assert grid.cell_at(2, 0) is TrackType.HORIZONTAL
        assert grid.cell_at(9, 3) is TrackType.VERTICAL

    def test_all_track_symbols(self) -> None:
        grid = TrackGrid.parse("/\\-|+")
        assert [grid.cell_at(x, 0) for x in range(5)] == [
            TrackType.CURVE_FORWARD,
            TrackType.CURVE_BACKWARD,
            TrackType.HORIZONTAL,
            TrackType.VERTICAL,
            TrackType.INTERSECTION,
        ]

    def test_new_carts_start_fresh(self) -> None:
        cart = TrackGrid.parse("<").cart_at(0, 0)
        assert cart == Cart(direction=Direction.LEFT, turns=0, moved=False)

    def test_trailing_newline_adds_no_row(self) -> None:
        assert TrackGrid.parse("-\n-\n").height == 2

    def test_empty_layout(self) -> None:
        grid = TrackGrid.parse("")
        assert (grid.width, grid.height) == (0, 0)
        assert grid.count_carts() == 0

    def test_unknown_character_rejected(self) -> None:
        with pytest.raises(LayoutParseError, match="'x'") as excinfo:
            TrackGrid.parse("--\n->x")
        assert (excinfo.value.char, excinfo.value.x, excinfo.value.y) == ("x", 2, 1)

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            TrackGrid.parse("#")


class TestCellAt:
    def test_space_is_absent(self) -> None:
        grid = TrackGrid.parse("- -")
        assert grid.cell_at(1, 0) is None

    def test_short_rows_behave_like_spaces(self) -> None:
        grid = TrackGrid.parse(" |\n-+-\n |")
        assert grid.cell_at(2, 0) is None
        assert grid.cell_at(2, 2) is None
        assert grid.cell_at(2, 1) is TrackType.HORIZONTAL

    def test_out_of_range_is_absent(self) -> None:
        grid = TrackGrid.parse("-+-")
        assert grid.cell_at(3, 0) is None
        assert grid.cell_at(0, 1) is None
        assert grid.cell_at(-1, 0) is None
        assert grid.cell_at(0, -1) is None


class TestCartMoves:
    def test_take_removes_cart(self) -> None:
        grid = TrackGrid.parse("->-")
        cart = grid.take_cart(1, 0)
        assert cart is not None
        assert cart.direction is Direction.RIGHT
        assert grid.count_carts() == 0
        assert grid.take_cart(1, 0) is None

    def test_place_on_track(self) -> None:
        grid = TrackGrid.parse("->-")
        cart = grid.take_cart(1, 0)
        assert cart is not None
        grid.place_cart(2, 0, cart)
        assert grid.cart_positions() == [(2, 0)]

    def test_place_off_track_is_fatal(self) -> None:
        grid = TrackGrid.parse("- -")
        with pytest.raises(DerailmentError, match=r"\(1, 0\)"):
            grid.place_cart(1, 0, Cart(direction=Direction.RIGHT))

    def test_place_outside_grid_is_fatal(self) -> None:
        grid = TrackGrid.parse("-")
        with pytest.raises(DerailmentError):
            grid.place_cart(-1, 0, Cart(direction=Direction.LEFT))

    def test_place_on_occupied_cell_rejected(self) -> None:
        grid = TrackGrid.parse("->")
        with pytest.raises(ValueError, match="occupied"):
            grid.place_cart(1, 0, Cart(direction=Direction.LEFT))


class TestSnapshotAndRender:
    def test_positions_in_reading_order(self) -> None:
        grid = TrackGrid.parse("-<-\n>--\n--v")
        assert grid.cart_positions() == [(1, 0), (0, 1), (2, 2)]

    def test_snapshot_lists_every_cart_in_reading_order(self) -> None:
        grid = TrackGrid.parse("-<-\n>--\n--v")
        grid.carts[(0, 1)].turns = 2
        assert grid.snapshot() == (
            CartState(x=1, y=0, direction=Direction.LEFT, turns=0),
            CartState(x=0, y=1, direction=Direction.RIGHT, turns=2),
            CartState(x=2, y=2, direction=Direction.DOWN, turns=0),
        )

    def test_snapshot_of_empty_grid(self) -> None:
        assert TrackGrid.parse("-+-").snapshot() == ()

    def test_snapshot_is_detached_from_carts(self) -> None:
        grid = TrackGrid.parse("->-")
        snapshot = grid.snapshot()
        grid.carts[(1, 0)].turns = 5
        assert snapshot == (CartState(x=1, y=0, direction=Direction.RIGHT, turns=0),)

    def test_render_round_trips_layout(self) -> None:
        assert TrackGrid.parse(COLLISION_LAYOUT).render() == COLLISION_LAYOUT

    def test_render_shows_moved_cart_over_track(self) -> None:
        grid = TrackGrid.parse("->-")
        cart = grid.take_cart(1, 0)
        assert cart is not None
        grid.place_cart(2, 0, cart)
        assert grid.render() == "-->"
