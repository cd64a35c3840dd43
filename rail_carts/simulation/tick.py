"""Tick engine: advance every cart on the grid by one step.

Carts move in reading order: increasing y, and within a row increasing x.
This order is part of the contract. It decides which cart arrives second at
a shared cell (the collision is reported where the second cart arrives) and
it guarantees that a cart moved into a cell further along the scan is not
moved again in the same tick.
"""

from __future__ import annotations

from rail_carts.domain.errors import ImpossibleMovementError, TrackInvariantError
from rail_carts.domain.movement import resolve, target
from rail_carts.domain.track_grid import TrackGrid


def step_tick(grid: TrackGrid) -> list[tuple[int, int]]:
    """Advance ``grid`` in place by one tick and return the collision cells.

    Collisions are listed in the order they happen. Both carts of a
    collision are removed from the grid.

    Raises:
        DerailmentError: a cart was routed onto a cell without track.
        ImpossibleMovementError: a cart entered a straight segment sideways.
        TrackInvariantError: a cart was found standing on a cell without track.
    """
    for cart in grid.carts.values():
        cart.moved = False

    # An unmoved cart can only sit where it started the tick, so scanning the
    # start-of-tick positions visits every cell that can hold one.
    collisions: list[tuple[int, int]] = []
    for x, y in grid.cart_positions():
        cart = grid.cart_at(x, y)
        if cart is None or cart.moved:
            continue
        grid.take_cart(x, y)
        track_type = grid.cell_at(x, y)
        if track_type is None:
            raise TrackInvariantError(f"cart found on a cell without track at ({x}, {y})")
        try:
            direction, turn_delta = resolve(track_type, cart.direction, cart.turns)
        except ImpossibleMovementError as exc:
            raise ImpossibleMovementError(f"{exc} at ({x}, {y})") from exc
        cart.direction = direction
        cart.turns += turn_delta
        cart.moved = True

        nx_, ny_ = target(x, y, direction)
        if grid.take_cart(nx_, ny_) is not None:
            collisions.append((nx_, ny_))
            continue
        grid.place_cart(nx_, ny_, cart)

    return collisions
