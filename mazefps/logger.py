"""Timestamped server log that can also feed a console through a queue."""

from __future__ import annotations

import queue
from datetime import datetime, timezone


class Logger:
    """Prints timestamped lines; with channels enabled also queues them."""

    def __init__(self, enable_channels: bool = False) -> None:
        self.enable_channels = enable_channels
        self.receiver: queue.SimpleQueue[str] = queue.SimpleQueue()

    def log(self, message: object) -> str:
        """Print ``message`` with a UTC timestamp and return the printed line."""
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{stamp}]: {message}"
        if self.enable_channels:
            self.receiver.put(line)
        print(line)
        return line