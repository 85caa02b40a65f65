"""Game-wide default values shared by the server and its systems."""

GAME_NAME = "Multiplayer FPS"

IP = "127.0.0.1"
PORT = 1337

MAP_WIDTH = 13  # must be odd
MAP_HEIGHT = MAP_WIDTH  # must be odd
MAP_BRANCHING = 0.5  # 0.0..=1.0
MAP_OPENNESS = 0.3  # 0.0..=1.0

# Name of the Textured member used for ordinary walls.
MAP_DEFAULT_WALL = "BRICK2"
MAP_SECTOR_COUNT = 5
MAP_SECTOR_MIN_SIZE = 4
MAP_SECTOR_MAX_SIZE = 7

MINIMAP_SCALE = 2.0

PLAYER_MAX_HP = 100.0
DEFAULT_PLAYER_HP = PLAYER_MAX_HP
DEFAULT_PLAYER_NAME = "Player"
PLAYER_SPEED = 0.1
PLAYER_SIZE = 0.25
WEAPON_CRATES_AMOUNT = 5

TICKS_PER_SECOND = 144