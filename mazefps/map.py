"""The tile map players move through."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Union

from .components import Position, Vec2
from .defaults import (
    MAP_BRANCHING,
    MAP_DEFAULT_WALL,
    MAP_OPENNESS,
    MAP_SECTOR_COUNT,
    MAP_SECTOR_MAX_SIZE,
    MAP_SECTOR_MIN_SIZE,
)
from .maze import Maze, OpenWalls


class Textured(Enum):
    BRICK1 = auto()
    BRICK2 = auto()
    DOOR = auto()
    INDUSTRIAL = auto()
    ROCKY = auto()
    TECHY = auto()
    URBAN = auto()
    WOOD = auto()


DEFAULT_TEXTURE = Textured[MAP_DEFAULT_WALL]

_RANDOM_TEXTURES = (
    Textured.BRICK1,
    Textured.BRICK2,
    Textured.INDUSTRIAL,
    Textured.ROCKY,
    Textured.TECHY,
    Textured.URBAN,
    Textured.WOOD,
)


@dataclass(frozen=True)
class SolidColor:
    """A wall painted with a single RGB colour."""

    color: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class TexturedWall:
    """A wall drawn with a texture."""

    texture: Textured


# A cell is either empty (None) or a wall.
Cell = Optional[Union[SolidColor, TexturedWall]]


@dataclass
class Map:
    """A rectangular grid of cells stored row by row."""

    width: int
    height: int
    data: list[Cell]

    def __post_init__(self) -> None:
        if len(self.data) != self.width * self.height:
            raise ValueError(
                f"map of {self.width}x{self.height} needs "
                f"{self.width * self.height} cells, got {len(self.data)}"
            )

    def cell(self, x: int, y: int) -> Cell:
        """The cell at (x, y); anything outside the map is empty."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.data[y * self.width + x]
        return None

    def set_cell(self, x: int, y: int, value: Cell) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"map cell ({x}, {y}) is out of range")
        self.data[y * self.width + x] = value

    def empty_cells(self) -> Iterator[tuple[int, int]]:
        """Coordinates of every empty cell, column by column."""
        for x in range(self.width):
            for y in range(self.height):
                if self.cell(x, y) is None:
                    yield x, y

    def random_empty_spot(self, rng: random.Random | None = None) -> Position | None:
        """The centre of a random empty cell, or None if there is none."""
        spots = list(self.empty_cells())
        if not spots:
            return None
        rng = rng if rng is not None else random.Random()
        x, y = rng.choice(spots)
        return Position(Vec2(x + 0.5, y + 0.5))

    def render(self) -> str:
        """Text picture of the map: 'X' for walls, a space for empty cells."""
        rows = []
        for y in range(self.height):
            row = self.data[y * self.width:(y + 1) * self.width]
            rows.append("".join(" " if cell is None else "X" for cell in row) + "\n")
        return "".join(rows)


def blank_map(width: int, height: int) -> Map:
    """A map with every cell empty."""
    return Map(width, height, [None] * (width * height))


_DEFAULT_LAYOUT = (
    "##########",
    "#.#......#",
    "#.#......#",
    "#.#...#.##",
    "#.....#..#",
    "#.....#..#",
    "#.....#..#",
    "#..#..#..#",
    "#.....#..#",
    "#########W",
)


def default_map() -> Map:
    """A small fixed 10x10 map."""
    legend: dict[str, Cell] = {
        ".": None,
        "#": TexturedWall(DEFAULT_TEXTURE),
        "W": SolidColor((1.0, 1.0, 1.0)),
    }
    data = [legend[ch] for row in _DEFAULT_LAYOUT for ch in row]
    return Map(len(_DEFAULT_LAYOUT[0]), len(_DEFAULT_LAYOUT), data)


def map_from_maze(maze: Maze) -> Map:
    """Turn a maze into a map: cells sit on odd coordinates, walls between them."""
    width, height = maze.width * 2 + 1, maze.height * 2 + 1
    game_map = Map(width, height, [TexturedWall(DEFAULT_TEXTURE)] * (width * height))

    offsets = {
        OpenWalls.UP: (0, -1),
        OpenWalls.DOWN: (0, 1),
        OpenWalls.LEFT: (-1, 0),
        OpenWalls.RIGHT: (1, 0),
    }
    for maze_y in range(maze.height):
        for maze_x in range(maze.width):
            map_x, map_y = maze_x * 2 + 1, maze_y * 2 + 1
            game_map.set_cell(map_x, map_y, None)
            walls = maze.cell(maze_x, maze_y)
            for direction, (dx, dy) in offsets.items():
                if walls & direction:
                    game_map.set_cell(map_x + dx, map_y + dy, None)
    return game_map


def random_texture(rng: random.Random | None = None) -> Textured:
    """A random wall texture; doors are never chosen."""
    rng = rng if rng is not None else random.Random()
    return rng.choice(_RANDOM_TEXTURES)


def generate_map(width: int, height: int, rng: random.Random | None = None) -> Map:
    """Generate a maze map, open it up a bit and retexture a few sectors."""
    if width < 3 or width % 2 == 0:
        raise ValueError(f"map width must be odd and at least 3, got {width}")
    if height < 3 or height % 2 == 0:
        raise ValueError(f"map height must be odd and at least 3, got {height}")
    rng = rng if rng is not None else random.Random()

    game_map = map_from_maze(Maze(width // 2, height // 2, MAP_BRANCHING, rng))

    inner_walls = [
        (x, y)
        for y in range(1, game_map.height - 1)
        for x in range(1 + y % 2, game_map.width - 1, 2)
        if game_map.cell(x, y) is not None
    ]
    for x, y in rng.sample(inner_walls, int(len(inner_walls) * MAP_OPENNESS)):
        game_map.set_cell(x, y, None)

    for _ in range(MAP_SECTOR_COUNT):
        texture = random_texture(rng)
        while texture == DEFAULT_TEXTURE:
            texture = random_texture(rng)

        sector_w = rng.randrange(MAP_SECTOR_MIN_SIZE, MAP_SECTOR_MAX_SIZE)
        sector_h = rng.randrange(MAP_SECTOR_MIN_SIZE, MAP_SECTOR_MAX_SIZE)
        x0 = rng.randint(0, max(0, game_map.width - sector_w))
        y0 = rng.randint(0, max(0, game_map.height - sector_h))

        for y in range(y0, min(y0 + sector_h, game_map.height)):
            for x in range(x0, min(x0 + sector_w, game_map.width)):
                if isinstance(game_map.cell(x, y), TexturedWall):
                    game_map.set_cell(x, y, TexturedWall(texture))

    return game_map