"""UDP game server and simulation for a maze-based multiplayer shooter."""

__version__ = "0.1.0"