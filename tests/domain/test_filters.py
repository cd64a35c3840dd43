"""Tests for rail_carts.domain.filters module."""

from __future__ import annotations

import pytest

from rail_carts.domain.filters import RepeatedStateDetector, state_key
from rail_carts.domain.track import CartState, Direction


def _snap(x: int, turns: int = 0) -> tuple[CartState, ...]:
    return (CartState(x=x, y=0, direction=Direction.RIGHT, turns=turns),)


def test_detector_ignores_new_states() -> None:
    detector = RepeatedStateDetector(history_size=8)
    assert detector.observe(_snap(0)) is False
    assert detector.observe(_snap(1)) is False
    assert detector.observe(_snap(2)) is False


def test_detector_flags_repeat() -> None:
    detector = RepeatedStateDetector(history_size=8)
    assert detector.observe(_snap(0)) is False
    assert detector.observe(_snap(1)) is False
    assert detector.observe(_snap(0)) is True


def test_turns_compared_modulo_intersection_period() -> None:
    detector = RepeatedStateDetector(history_size=8)
    assert detector.observe(_snap(0, turns=1)) is False
    assert detector.observe(_snap(0, turns=4)) is True


def test_turns_with_different_phase_differ() -> None:
    assert state_key(_snap(0, turns=1)) != state_key(_snap(0, turns=2))


def test_history_is_bounded() -> None:
    detector = RepeatedStateDetector(history_size=2)
    assert detector.observe(_snap(0)) is False
    assert detector.observe(_snap(1)) is False
    assert detector.observe(_snap(2)) is False
    # _snap(0) fell out of the window
    assert detector.observe(_snap(0)) is False


def test_history_size_must_be_positive() -> None:
    with pytest.raises(ValueError, match="history_size must be >= 1"):
        RepeatedStateDetector(history_size=0)
