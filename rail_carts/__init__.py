"""Discrete-time mine-cart simulation on a fixed rail layout."""

from rail_carts.domain.track_grid import TrackGrid
from rail_carts.simulation.runner import first_collision, last_surviving_cart, run_simulation

__all__ = [
    "TrackGrid",
    "first_collision",
    "last_surviving_cart",
    "run_simulation",
]
