"""Rail layout grid: static track array plus the carts currently on it.

Track placement never changes after parsing and is held in a NumPy character
array (``height x width``) padded with spaces for short rows. Carts live in a
coordinate-keyed mapping so that moving a cart is a remove-then-insert and no
cell ever shares a cart with another.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from rail_carts.config.constants import CART_SYMBOLS, EMPTY_SYMBOL, TRACK_SYMBOLS
from rail_carts.domain.errors import DerailmentError, LayoutParseError
from rail_carts.domain.track import Cart, CartState, Direction, Snapshot, TrackType


@dataclass
class TrackGrid:
    """Addressable ``(x, y)`` grid, origin top-left, y increasing downward."""

    tracks: np.ndarray  # (height, width) of single-character track symbols
    carts: dict[tuple[int, int], Cart]  # (x, y) -> cart

    @classmethod
    def parse(cls, text: str) -> TrackGrid:
        """Build a grid from a textual layout, one line per row.

        Raises:
            LayoutParseError: a character is neither track, cart nor space.
        """
        lines = text.splitlines()
        width = max((len(line) for line in lines), default=0)
        tracks = np.full((len(lines), width), EMPTY_SYMBOL, dtype="<U1")
        carts: dict[tuple[int, int], Cart] = {}
        for y, line in enumerate(lines):
            for x, char in enumerate(line):
                if char == EMPTY_SYMBOL:
                    continue
                if char in TRACK_SYMBOLS:
                    tracks[y, x] = char
                elif char in CART_SYMBOLS:
                    direction = Direction(char)
                    tracks[y, x] = TrackType.under_cart(direction).value
                    carts[(x, y)] = Cart(direction=direction)
                else:
                    raise LayoutParseError(char, x, y)
        return cls(tracks=tracks, carts=carts)

    @property
    def width(self) -> int:
        return int(self.tracks.shape[1])

    @property
    def height(self) -> int:
        return int(self.tracks.shape[0])

    def cell_at(self, x: int, y: int) -> TrackType | None:
        """Return the track at ``(x, y)``, or None when absent or out of range."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return None
        symbol = str(self.tracks[y, x])
        if symbol == EMPTY_SYMBOL:
            return None
        return TrackType(symbol)

    def cart_at(self, x: int, y: int) -> Cart | None:
        return self.carts.get((x, y))

    def take_cart(self, x: int, y: int) -> Cart | None:
        """Remove and return the cart at ``(x, y)``, if any."""
        return self.carts.pop((x, y), None)

    def place_cart(self, x: int, y: int, cart: Cart) -> None:
        """Put ``cart`` on ``(x, y)``; the cell must carry track and be free.

        Raises:
            DerailmentError: the cell has no track.
        """
        if self.cell_at(x, y) is None:
            raise DerailmentError(x, y)
        if (x, y) in self.carts:
            raise ValueError(f"cell ({x}, {y}) is already occupied")
        self.carts[(x, y)] = cart

    def count_carts(self) -> int:
        return len(self.carts)

    def cart_positions(self) -> list[tuple[int, int]]:
        """Occupied coordinates in reading order (top to bottom, left to right)."""
        return sorted(self.carts, key=lambda pos: (pos[1], pos[0]))

    def snapshot(self) -> Snapshot:
        """Immutable cart states in reading order."""
        states: list[CartState] = []
        for x, y in self.cart_positions():
            cart = self.carts[(x, y)]
            states.append(CartState(x=x, y=y, direction=cart.direction, turns=cart.turns))
        return tuple(states)

    def render(self) -> str:
        """Textual snapshot: carts drawn over their track, trailing blanks stripped."""
        rows = [list(row) for row in self.tracks.tolist()]
        for (x, y), cart in self.carts.items():
            rows[y][x] = cart.direction.value
        return "\n".join("".join(row).rstrip() for row in rows)
