"""Configuration layer: constants and typed config dataclasses."""

from rail_carts.config.constants import (
    CART_SYMBOLS,
    CYCLE_HISTORY_SIZE,
    DEFAULT_MAX_TICKS,
    EMPTY_SYMBOL,
    FLUSH_THRESHOLD,
    INTERSECTION_PERIOD,
    RUN_ID_LENGTH,
    TRACK_SYMBOLS,
)
from rail_carts.config.types import QueryFailure, RunConfig, SimulationResult

__all__ = [
    "CART_SYMBOLS",
    "CYCLE_HISTORY_SIZE",
    "DEFAULT_MAX_TICKS",
    "EMPTY_SYMBOL",
    "FLUSH_THRESHOLD",
    "INTERSECTION_PERIOD",
    "RUN_ID_LENGTH",
    "QueryFailure",
    "RunConfig",
    "SimulationResult",
    "TRACK_SYMBOLS",
]
