import random
from collections import deque

import pytest

from mazefps.defaults import MAP_HEIGHT, MAP_WIDTH
from mazefps.map import (
    Map,
    SolidColor,
    Textured,
    TexturedWall,
    blank_map,
    default_map,
    generate_map,
    map_from_maze,
    random_texture,
)
from mazefps.maze import Maze, OpenWalls


def _reachable_empty(game_map):
    empty = {
        (x, y)
        for y in range(game_map.height)
        for x in range(game_map.width)
        if game_map.cell(x, y) is None
    }
    start = next(iter(empty))
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for nxt in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if nxt in empty and nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen, empty


def test_default_map_layout():
    game_map = default_map()
    assert (game_map.width, game_map.height) == (10, 10)
    assert game_map.cell(0, 0) == TexturedWall(Textured.BRICK2)
    assert game_map.cell(9, 9) == SolidColor((1.0, 1.0, 1.0))
    assert game_map.cell(1, 1) is None
    assert game_map.cell(3, 7) == TexturedWall(Textured.BRICK2)


def test_cells_outside_are_empty():
    game_map = default_map()
    assert game_map.cell(-1, 0) is None
    assert game_map.cell(0, 10) is None
    assert game_map.cell(10, 3) is None


def test_set_cell_and_bounds():
    game_map = blank_map(3, 3)
    game_map.set_cell(2, 1, SolidColor())
    assert game_map.cell(2, 1) == SolidColor((0.0, 0.0, 0.0))
    with pytest.raises(IndexError):
        game_map.set_cell(3, 0, None)


def test_wrong_data_length_raises():
    with pytest.raises(ValueError):
        Map(2, 2, [None] * 3)


def test_random_empty_spot_is_cell_centre():
    game_map = default_map()
    rng = random.Random(3)
    for _ in range(50):
        spot = game_map.random_empty_spot(rng)
        x, y = spot.value.x, spot.value.y
        assert x % 1 == 0.5 and y % 1 == 0.5
        assert game_map.cell(int(x), int(y)) is None


def test_random_empty_spot_on_full_map_is_none():
    full = Map(2, 2, [TexturedWall(Textured.WOOD)] * 4)
    assert full.random_empty_spot(random.Random(0)) is None


def test_render():
    assert blank_map(3, 2).render() == "   \n   \n"
    lines = default_map().render().splitlines()
    assert lines[0] == "X" * 10
    assert len(lines) == 10


def test_map_from_maze_matches_openings():
    maze = Maze(3, 3, 0.5, random.Random(5))
    game_map = map_from_maze(maze)
    assert (game_map.width, game_map.height) == (7, 7)
    offsets = {
        OpenWalls.UP: (0, -1),
        OpenWalls.DOWN: (0, 1),
        OpenWalls.LEFT: (-1, 0),
        OpenWalls.RIGHT: (1, 0),
    }
    for my in range(3):
        for mx in range(3):
            x, y = mx * 2 + 1, my * 2 + 1
            assert game_map.cell(x, y) is None
            for direction, (dx, dy) in offsets.items():
                wall = game_map.cell(x + dx, y + dy)
                assert (wall is None) == bool(maze.cell(mx, my) & direction)
    for x, y in ((0, 0), (2, 2), (6, 6), (4, 0)):
        assert game_map.cell(x, y) == TexturedWall(Textured.BRICK2)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_generated_map_is_closed_and_connected(seed):
    game_map = generate_map(MAP_WIDTH, MAP_HEIGHT, random.Random(seed))
    assert (game_map.width, game_map.height) == (MAP_WIDTH, MAP_HEIGHT)
    for i in range(MAP_WIDTH):
        for x, y in ((i, 0), (i, MAP_HEIGHT - 1), (0, i), (MAP_WIDTH - 1, i)):
            assert isinstance(game_map.cell(x, y), TexturedWall)
    seen, empty = _reachable_empty(game_map)
    assert seen == empty
    assert all(
        game_map.cell(x, y) is None
        for y in range(1, MAP_HEIGHT, 2)
        for x in range(1, MAP_WIDTH, 2)
    )


@pytest.mark.parametrize("size", [(4, 7), (7, 4), (1, 7), (7, 1)])
def test_generate_map_rejects_bad_sizes(size):
    with pytest.raises(ValueError):
        generate_map(*size)


def test_random_texture_never_door():
    rng = random.Random(9)
    drawn = {random_texture(rng) for _ in range(300)}
    assert Textured.DOOR not in drawn
    assert drawn == set(Textured) - {Textured.DOOR}