"""CLI entrypoint for cart simulations.

This module owns argument parsing, layout reading and result printing. All
simulation logic lives in ``rail_carts.simulation``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rail_carts.config.constants import CYCLE_HISTORY_SIZE
from rail_carts.config.types import RunConfig
from rail_carts.domain.errors import LayoutParseError, TrackInvariantError
from rail_carts.simulation.runner import run_simulation

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Value coercion helpers
# ---------------------------------------------------------------------------


def _coerce_bool(raw: object, key: str) -> bool:
    """Coerce raw value to bool with strict string-check."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_optional_int(raw: object, key: str) -> int | None:
    """Coerce raw value to int or None; rejects booleans and non-integer floats."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"{key} must be an integer value") from exc
    raise ValueError(f"{key} must be an integer value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; None is rejected."""
    value = _coerce_optional_int(raw, key)
    if value is None:
        raise ValueError(f"{key} must be an integer value")
    return value


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="rail_carts",
        description="Simulate carts on a rail layout and report collisions",
    )
    parser.add_argument(
        "layout",
        type=Path,
        nargs="?",
        default=None,
        help="Layout file (reads standard input when omitted)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--max-ticks", type=int, default=None)
    parser.add_argument(
        "--detect-cycles", action=argparse.BooleanOptionalAction, default=None
    )
    parser.add_argument("--cycle-history-size", type=int, default=None)
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument(
        "--tick-log",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write per-tick cart and collision logs to Parquet under --out-dir",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Print the layout with the surviving cart after the run",
    )
    parser.add_argument("--json", action="store_true", help="Print a JSON summary")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def _read_layout(path: Path | None) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text()


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint.

    Supports ``--config path/to/config.json``. CLI arguments override
    config-file values; config-file values override built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")

    try:
        config = RunConfig(
            max_ticks=_coerce_optional_int(
                _get_val(args.max_ticks, "max_ticks", file_cfg, None), "max_ticks"
            ),
            detect_cycles=_coerce_bool(
                _get_val(args.detect_cycles, "detect_cycles", file_cfg, True), "detect_cycles"
            ),
            cycle_history_size=_coerce_int(
                _get_val(
                    args.cycle_history_size, "cycle_history_size", file_cfg, CYCLE_HISTORY_SIZE
                ),
                "cycle_history_size",
            ),
            write_tick_log=_coerce_bool(
                _get_val(args.tick_log, "tick_log", file_cfg, False), "tick_log"
            ),
        )
    except ValueError as exc:
        parser.error(str(exc))
    out_dir_raw = _get_val(args.out_dir, "out_dir", file_cfg, None)
    out_dir = Path(str(out_dir_raw)) if out_dir_raw is not None else None
    if config.write_tick_log and out_dir is None:
        parser.error("--tick-log requires --out-dir")
    if out_dir is not None and not config.write_tick_log:
        logger.warning("--out-dir %s is ignored without --tick-log", out_dir)

    try:
        layout = _read_layout(args.layout)
    except FileNotFoundError:
        parser.error(f"Layout file not found: {args.layout}")

    try:
        result = run_simulation(layout, config=config, out_dir=out_dir)
    except LayoutParseError as exc:
        parser.error(f"invalid layout: {exc}")
    except TrackInvariantError as exc:
        parser.exit(1, f"{parser.prog}: simulation failed: {exc}\n")

    crash = result.first_collision
    survivor = result.last_cart
    if args.json:
        failures = {
            "first_collision": result.first_collision_failure,
            "last_cart": result.last_cart_failure,
        }
        summary = {
            "run_id": result.run_id,
            "initial_carts": result.initial_carts,
            "first_collision": list(crash) if crash is not None else None,
            "first_collision_tick": result.first_collision_tick,
            "last_cart": list(survivor) if survivor is not None else None,
            "last_cart_tick": result.last_cart_tick,
            "collisions": len(result.collisions),
            "failures": {
                query: failure.to_dict()
                for query, failure in failures.items()
                if failure is not None
            },
        }
        print(json.dumps(summary, ensure_ascii=False, indent=2))
    else:
        if crash is not None:
            print("First collision: {},{}".format(*crash))
        if survivor is not None:
            print("Last cart: {},{}".format(*survivor))
    if args.render:
        print(result.final_render)

    # Answered queries are printed above; any unanswered one fails the run.
    errors = []
    if result.first_collision_failure is not None:
        errors.append(f"first collision unanswered: {result.first_collision_failure.message}")
    if result.last_cart_failure is not None:
        errors.append(f"last cart unanswered: {result.last_cart_failure.message}")
    if errors:
        sys.stdout.flush()
        parser.exit(1, "".join(f"{parser.prog}: {line}\n" for line in errors))


if __name__ == "__main__":
    main()
