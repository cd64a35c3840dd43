"""Parquet persistence for cart and collision logs."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from rail_carts.config.constants import FLUSH_THRESHOLD
from rail_carts.domain.track import Snapshot
from rail_carts.io.schemas import CART_LOG_SCHEMA, COLLISION_LOG_SCHEMA


class CartLogWriter:
    """Buffer one row per live cart per tick and stream them to a Parquet file.

    The file is only created once the first rows are flushed, so a run that
    logs nothing leaves nothing behind.
    """

    def __init__(
        self, path: Path, run_id: str, flush_threshold: int = FLUSH_THRESHOLD
    ) -> None:
        if flush_threshold < 1:
            raise ValueError("flush_threshold must be >= 1")
        self.path = path
        self.run_id = run_id
        self.flush_threshold = flush_threshold
        self._columns: dict[str, list[int | str]] = {f.name: [] for f in CART_LOG_SCHEMA}
        self._writer: pq.ParquetWriter | None = None

    @property
    def pending_rows(self) -> int:
        return len(self._columns["run_id"])

    def append(self, tick: int, snapshot: Snapshot) -> None:
        """Buffer ``snapshot`` as the cart rows of ``tick``; flush when the buffer is full."""
        for state in snapshot:
            self._columns["run_id"].append(self.run_id)
            self._columns["tick"].append(tick)
            self._columns["x"].append(state.x)
            self._columns["y"].append(state.y)
            self._columns["direction"].append(state.direction.value)
            self._columns["turns"].append(state.turns)
        if self.pending_rows >= self.flush_threshold:
            self.flush()

    def flush(self) -> None:
        if not self.pending_rows:
            return
        if self._writer is None:
            self._writer = pq.ParquetWriter(self.path, CART_LOG_SCHEMA)
        self._writer.write_table(pa.Table.from_pydict(self._columns, schema=CART_LOG_SCHEMA))
        for values in self._columns.values():
            values.clear()

    def close(self) -> None:
        """Flush remaining rows and close the file."""
        try:
            self.flush()
        finally:
            if self._writer is not None:
                self._writer.close()
                self._writer = None

    def __enter__(self) -> CartLogWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def write_collision_log(
    collisions: list[tuple[int, int, int]], run_id: str, collision_log_path: Path
) -> None:
    """Write every ``(tick, x, y)`` collision of one run."""
    rows = [{"run_id": run_id, "tick": t, "x": x, "y": y} for t, x, y in collisions]
    table = pa.Table.from_pylist(rows, schema=COLLISION_LOG_SCHEMA)
    pq.write_table(table, collision_log_path)
