"""Simulation engine: tick engine, query runner and Parquet run logs."""

from rail_carts.simulation.persistence import CartLogWriter, write_collision_log
from rail_carts.simulation.runner import (
    first_collision,
    last_surviving_cart,
    layout_run_id,
    run_simulation,
)
from rail_carts.simulation.tick import step_tick

__all__ = [
    "CartLogWriter",
    "first_collision",
    "last_surviving_cart",
    "layout_run_id",
    "run_simulation",
    "step_tick",
    "write_collision_log",
]
