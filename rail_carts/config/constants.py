"""Centralized domain constants for cart simulations.

Layout symbols and runtime defaults that appear across multiple modules are
defined here. Consuming modules should import from this module rather than
defining their own inline literals.
"""

from __future__ import annotations

TRACK_SYMBOLS: tuple[str, ...] = ("/", "\\", "-", "|", "+")
"""Layout symbols for curve-forward, curve-backward, horizontal, vertical, intersection."""

CART_SYMBOLS: tuple[str, ...] = ("^", "v", "<", ">")
"""Layout symbols for carts facing up, down, left, right."""

EMPTY_SYMBOL = " "
"""Layout symbol for a cell without track."""

DEFAULT_MAX_TICKS: int | None = None
"""Default tick ceiling per query (None = unbounded)."""

CYCLE_HISTORY_SIZE = 4_096
"""Number of recent snapshots kept by the repeated-state detector."""

INTERSECTION_PERIOD = 3
"""Number of distinct turn choices a cart cycles through at intersections."""

FLUSH_THRESHOLD = 8_192
"""Flush cart log rows to Parquet once this in-memory row count is reached."""

RUN_ID_LENGTH = 12
"""Number of hex digits of the layout digest used as run identifier."""
