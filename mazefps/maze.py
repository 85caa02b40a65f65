"""Random maze generation used as the skeleton of game maps."""

from __future__ import annotations

import random
from enum import IntFlag


class OpenWalls(IntFlag):
    """Which sides of a maze cell are open towards a neighbour."""

    UP = 0b0001
    DOWN = 0b0010
    LEFT = 0b0100
    RIGHT = 0b1000

    def opposite(self) -> "OpenWalls":
        """Swap UP with DOWN and LEFT with RIGHT."""
        up_left = (self & (OpenWalls.UP | OpenWalls.LEFT)) << 1
        down_right = (self & (OpenWalls.DOWN | OpenWalls.RIGHT)) >> 1
        return OpenWalls((up_left | down_right) & 0b1111)


_NEIGHBOURS = (
    (0, -1, OpenWalls.UP),
    (0, 1, OpenWalls.DOWN),
    (-1, 0, OpenWalls.LEFT),
    (1, 0, OpenWalls.RIGHT),
)


class Maze:
    """A perfect maze: every cell is reachable from every other by one path.

    ``branching`` is the chance of continuing from the newest open cell
    rather than from a random earlier one; higher values give longer corridors.
    """

    def __init__(
        self,
        width: int,
        height: int,
        branching: float,
        rng: random.Random | None = None,
    ) -> None:
        if not 0.0 <= branching <= 1.0:
            raise ValueError(f"branching must be within 0.0..=1.0, got {branching}")
        if width < 1 or height < 1:
            raise ValueError(f"maze must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.branching = branching
        self._cells = [OpenWalls(0)] * (width * height)
        self._generate(rng if rng is not None else random.Random())

    def cell(self, x: int, y: int) -> OpenWalls:
        """The open sides of the cell at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"maze cell ({x}, {y}) is out of range")
        return self._cells[y * self.width + x]

    def _generate(self, rng: random.Random) -> None:
        stack = [(rng.randrange(self.width), rng.randrange(self.height))]

        while stack:
            if rng.random() < self.branching:
                cx, cy = stack.pop()
            else:
                cx, cy = stack.pop(rng.randrange(len(stack)))

            opened = [
                (cx + dx, cy + dy)
                for dx, dy, direction in _NEIGHBOURS
                if 0 <= cx + dx < self.width
                and 0 <= cy + dy < self.height
                and self._tunnel(cx, cy, cx + dx, cy + dy, direction)
            ]
            rng.shuffle(opened)
            stack.extend(opened)

    def _tunnel(self, cx: int, cy: int, nx: int, ny: int, direction: OpenWalls) -> bool:
        target = ny * self.width + nx
        if self._cells[target]:
            return False
        self._cells[cy * self.width + cx] |= direction
        self._cells[target] |= direction.opposite()
        return True