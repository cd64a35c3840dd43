"""Parquet schema definitions for cart run logs.

Every module that writes or reads run artifacts works against these column
contracts.
"""

from __future__ import annotations

import pyarrow as pa

RUN_PAYLOAD_SCHEMA_VERSION = 1

CART_LOG_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("tick", pa.int64()),
        ("x", pa.int64()),
        ("y", pa.int64()),
        ("direction", pa.string()),
        ("turns", pa.int64()),
    ]
)

COLLISION_LOG_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("tick", pa.int64()),
        ("x", pa.int64()),
        ("y", pa.int64()),
    ]
)
