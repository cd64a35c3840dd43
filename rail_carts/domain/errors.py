"""Exception hierarchy for layout parsing, invariant violations and stuck runs."""

from __future__ import annotations


class LayoutParseError(ValueError):
    """Raised when a layout contains a character that is not a rail or cart symbol."""

    def __init__(self, char: str, x: int, y: int) -> None:
        super().__init__(f"unexpected layout character {char!r} at ({x}, {y})")
        self.char = char
        self.x = x
        self.y = y


class TrackInvariantError(RuntimeError):
    """A cart reached a state the rail rules can never produce on a valid layout."""


class DerailmentError(TrackInvariantError):
    """A cart was routed onto a cell with no track."""

    def __init__(self, x: int, y: int) -> None:
        super().__init__(f"cart moved off the rails at ({x}, {y})")
        self.x = x
        self.y = y


class ImpossibleMovementError(TrackInvariantError):
    """A cart entered a straight segment moving perpendicular to it."""


class NonTerminatingRunError(RuntimeError):
    """The requested query can never be answered for this layout."""

    def __init__(self, message: str, reason: str, tick: int = 0) -> None:
        super().__init__(message)
        self.reason = reason
        self.tick = tick


class TickLimitExceededError(NonTerminatingRunError):
    """The external tick ceiling was reached before the query was answered."""
