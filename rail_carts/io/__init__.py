"""I/O layer: Parquet schemas for run logs."""
