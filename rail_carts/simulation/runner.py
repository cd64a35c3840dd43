"""Simulation runner: repeated ticks answering the two top-level queries.

- ``first_collision``: where the first collision ever happens.
- ``last_surviving_cart``: where the only cart left stands once every other
  cart has been destroyed.
- ``run_simulation``: both answers from one layout, optionally persisting a
  per-tick cart log and a collision log to Parquet.

The core imposes no tick ceiling of its own. ``RunConfig.max_ticks`` bounds a
query from outside, and the repeated-state detector stops runs that have
entered a cycle.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Callable

from rail_carts.config.constants import RUN_ID_LENGTH
from rail_carts.config.types import QueryFailure, RunConfig, SimulationResult
from rail_carts.domain.errors import NonTerminatingRunError, TickLimitExceededError
from rail_carts.domain.filters import RepeatedStateDetector, TerminationReason
from rail_carts.domain.track_grid import TrackGrid
from rail_carts.io.schemas import RUN_PAYLOAD_SCHEMA_VERSION
from rail_carts.simulation.persistence import CartLogWriter, write_collision_log
from rail_carts.simulation.tick import step_tick

logger = logging.getLogger(__name__)

TickObserver = Callable[[int, list[tuple[int, int]]], None]
"""Called after every tick with the tick number and its collisions."""


def layout_run_id(layout: str) -> str:
    """Build a reproducible run ID from the layout text."""
    return hashlib.sha256(layout.encode("utf-8")).hexdigest()[:RUN_ID_LENGTH]


def _tick_until(
    grid: TrackGrid,
    config: RunConfig,
    done: Callable[[list[tuple[int, int]]], bool],
    start_tick: int,
    on_tick: TickObserver | None,
) -> tuple[int, list[tuple[int, int]]]:
    """Tick until ``done`` accepts a tick's collisions; return that tick and its collisions."""
    detector = (
        RepeatedStateDetector(history_size=config.cycle_history_size)
        if config.detect_cycles
        else None
    )
    tick = start_tick
    while True:
        if config.max_ticks is not None and tick - start_tick >= config.max_ticks:
            raise TickLimitExceededError(
                f"query unanswered after {config.max_ticks} ticks "
                f"({grid.count_carts()} carts left)",
                reason=TerminationReason.TICK_LIMIT.value,
                tick=tick,
            )
        tick += 1
        collisions = step_tick(grid)
        for x, y in collisions:
            logger.debug("tick %d: collision at %d,%d", tick, x, y)
        if on_tick is not None:
            on_tick(tick, collisions)
        if done(collisions):
            return tick, collisions
        if detector is not None and detector.observe(grid.snapshot()):
            raise NonTerminatingRunError(
                f"cart state repeated at tick {tick}; the run cycles forever "
                f"with {grid.count_carts()} carts",
                reason=TerminationReason.REPEATED_STATE.value,
                tick=tick,
            )


def _first_collision(
    grid: TrackGrid,
    config: RunConfig,
    start_tick: int = 0,
    on_tick: TickObserver | None = None,
) -> tuple[tuple[int, int], int]:
    if grid.count_carts() < 2:
        raise NonTerminatingRunError(
            f"a collision needs at least 2 carts, layout has {grid.count_carts()}",
            reason=TerminationReason.TOO_FEW_CARTS.value,
            tick=start_tick,
        )
    tick, collisions = _tick_until(
        grid, config, done=lambda found: bool(found), start_tick=start_tick, on_tick=on_tick
    )
    logger.info("first collision at %d,%d on tick %d", *collisions[0], tick)
    return collisions[0], tick


def _last_surviving_cart(
    grid: TrackGrid,
    config: RunConfig,
    start_tick: int = 0,
    on_tick: TickObserver | None = None,
) -> tuple[tuple[int, int], int]:
    count = grid.count_carts()
    if count == 0:
        raise NonTerminatingRunError(
            "layout has no carts left",
            reason=TerminationReason.NO_CARTS_LEFT.value,
            tick=start_tick,
        )
    if count % 2 == 0:
        raise NonTerminatingRunError(
            f"collisions remove carts in pairs; {count} carts can never reduce to one",
            reason=TerminationReason.EVEN_CART_COUNT.value,
            tick=start_tick,
        )
    tick = start_tick
    if count > 1:
        tick, _ = _tick_until(
            grid,
            config,
            done=lambda _found: grid.count_carts() <= 1,
            start_tick=start_tick,
            on_tick=on_tick,
        )
    positions = grid.cart_positions()
    if len(positions) != 1:
        raise NonTerminatingRunError(
            f"expected exactly one cart after tick {tick}, found {len(positions)}",
            reason=TerminationReason.NO_CARTS_LEFT.value,
            tick=tick,
        )
    logger.info("last cart at %d,%d after tick %d", *positions[0], tick)
    return positions[0], tick


def first_collision(grid: TrackGrid, config: RunConfig | None = None) -> tuple[int, int]:
    """Tick ``grid`` until the first collision and return its ``(x, y)``.

    When one tick produces several collisions, the first in reading order
    wins. The grid is mutated in place.
    """
    position, _ = _first_collision(grid, config or RunConfig())
    return position


def last_surviving_cart(grid: TrackGrid, config: RunConfig | None = None) -> tuple[int, int]:
    """Tick ``grid`` while more than one cart remains; return the survivor's ``(x, y)``.

    Raises:
        NonTerminatingRunError: the cart count is even or zero, the run
            cycles, or ``config.max_ticks`` is exhausted.
    """
    position, _ = _last_surviving_cart(grid, config or RunConfig())
    return position


def _query_failure(exc: NonTerminatingRunError, query: str) -> QueryFailure:
    logger.warning("%s unanswered (%s at tick %d): %s", query, exc.reason, exc.tick, exc)
    return QueryFailure(reason=exc.reason, message=str(exc), tick=exc.tick)


def run_simulation(
    layout: str,
    config: RunConfig | None = None,
    out_dir: Path | None = None,
) -> SimulationResult:
    """Answer both queries for ``layout`` on a single grid.

    The grid is ticked until the first collision and then further until one
    cart is left. The simulation is deterministic, so the answers match two
    independent runs. A query that cannot be answered is recorded as a
    ``QueryFailure`` on the result without discarding the other answer. When
    the first-collision query gives up, the survivor query resumes from the
    tick where it stopped. With ``config.write_tick_log`` the per-tick cart
    log, the collision log and a JSON run payload are written below
    ``out_dir``.

    Raises:
        ValueError: ``write_tick_log`` is enabled without ``out_dir``.
        LayoutParseError: the layout contains an unknown character.
        TrackInvariantError: a cart left the track during a tick.
    """
    run_config = config or RunConfig()
    logs_dir: Path | None = None
    if run_config.write_tick_log:
        if out_dir is None:
            raise ValueError("out_dir is required when write_tick_log is enabled")
        logs_dir = Path(out_dir) / "logs"

    run_id = layout_run_id(layout)
    grid = TrackGrid.parse(layout)
    initial_carts = grid.count_carts()
    logger.info(
        "run %s: %dx%d layout with %d carts", run_id, grid.width, grid.height, initial_carts
    )

    collisions: list[tuple[int, int, int]] = []
    cart_log: CartLogWriter | None = None
    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)
        cart_log = CartLogWriter(logs_dir / "cart_log.parquet", run_id)
        cart_log.append(0, grid.snapshot())

    def on_tick(tick: int, found: list[tuple[int, int]]) -> None:
        collisions.extend((tick, x, y) for x, y in found)
        if cart_log is not None:
            cart_log.append(tick, grid.snapshot())

    crash: tuple[int, int] | None = None
    crash_tick: int | None = None
    crash_failure: QueryFailure | None = None
    survivor: tuple[int, int] | None = None
    survivor_tick: int | None = None
    survivor_failure: QueryFailure | None = None
    try:
        try:
            crash, crash_tick = _first_collision(grid, run_config, on_tick=on_tick)
            resume_tick = crash_tick
        except NonTerminatingRunError as exc:
            crash_failure = _query_failure(exc, "first collision")
            resume_tick = exc.tick
        try:
            survivor, survivor_tick = _last_surviving_cart(
                grid, run_config, start_tick=resume_tick, on_tick=on_tick
            )
        except NonTerminatingRunError as exc:
            survivor_failure = _query_failure(exc, "last cart")
    finally:
        if cart_log is not None:
            cart_log.close()

    result = SimulationResult(
        run_id=run_id,
        initial_carts=initial_carts,
        first_collision=crash,
        first_collision_tick=crash_tick,
        last_cart=survivor,
        last_cart_tick=survivor_tick,
        first_collision_failure=crash_failure,
        last_cart_failure=survivor_failure,
        collisions=tuple(collisions),
        final_render=grid.render(),
    )
    if logs_dir is not None:
        _write_run_artifacts(result, run_config, logs_dir.parent)
    return result


def _write_run_artifacts(result: SimulationResult, config: RunConfig, out_dir: Path) -> None:
    """Persist the collision log and the JSON run payload."""
    logs_dir = out_dir / "logs"
    runs_dir = out_dir / "runs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    runs_dir.mkdir(parents=True, exist_ok=True)
    write_collision_log(list(result.collisions), result.run_id, logs_dir / "collision_log.parquet")
    crash = result.first_collision
    survivor = result.last_cart
    failures = {
        "first_collision": result.first_collision_failure,
        "last_cart": result.last_cart_failure,
    }
    payload = {
        "run_id": result.run_id,
        "first_collision": list(crash) if crash is not None else None,
        "first_collision_tick": result.first_collision_tick,
        "last_cart": list(survivor) if survivor is not None else None,
        "last_cart_tick": result.last_cart_tick,
        "failures": {
            query: failure.to_dict() for query, failure in failures.items() if failure is not None
        },
        "metadata": {
            "initial_carts": result.initial_carts,
            "collision_count": len(result.collisions),
            "max_ticks": config.max_ticks,
            "detect_cycles": config.detect_cycles,
            "cycle_history_size": config.cycle_history_size,
            "schema_version": RUN_PAYLOAD_SCHEMA_VERSION,
        },
    }
    (runs_dir / f"{result.run_id}.json").write_text(
        json.dumps(payload, ensure_ascii=False, indent=2)
    )
