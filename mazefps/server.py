"""The UDP game server and its command line."""

from __future__ import annotations

import argparse
import ipaddress
import selectors
import socket
import threading
import time
from typing import Hashable, Sequence

from .defaults import IP, MAP_HEIGHT, MAP_WIDTH, PORT, TICKS_PER_SECOND
from .ecs import ServerEcs
from .events import (
    InputError,
    format_endpoint,
    handle_join,
    handle_leave,
    handle_ping,
    handle_update_inputs,
)
from .logger import Logger
from .map import generate_map
from .messages import (
    DecodeError,
    EcsChanges,
    Join,
    Leave,
    Ping,
    UpdateInputs,
    construct,
    decode_client_message,
)
from .spawn import spawn_weapon_crates_init

TICK_INTERVAL = (1000 // TICKS_PER_SECOND) / 1000.0
MAX_DATAGRAM = 65535


class Server:
    """Runs the game simulation and talks to clients over UDP."""

    def __init__(self, addr: tuple[str, int], enable_logging_channels: bool = False) -> None:
        host = addr[0]
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        self._socket = socket.socket(family, socket.SOCK_DGRAM)
        try:
            self._socket.bind(addr)
        except OSError:
            self._socket.close()
            raise
        self._stopped = threading.Event()
        self.last_tick = time.monotonic()

        self.ecs = ServerEcs()
        self.ecs.resources.insert(generate_map(MAP_WIDTH, MAP_HEIGHT))
        spawn_weapon_crates_init(self.ecs)
        self.logger = Logger(enable_logging_channels)
        self.ecs.resources.insert(self.logger)
        self.logger_receiver = self.logger.receiver

        self.registered_clients: dict[Hashable, int] = {}

    @property
    def address(self) -> tuple:
        """The address the server is bound to."""
        return self._socket.getsockname()

    @property
    def is_running(self) -> bool:
        return not self._stopped.is_set() and self._socket.fileno() != -1

    def send(self, endpoint: Hashable, payload: bytes) -> None:
        try:
            self._socket.sendto(payload, endpoint)
        except OSError as exc:
            self.logger.log(f"Warning: failed to send to {format_endpoint(endpoint)}: {exc}")

    def is_registered(self, endpoint: Hashable) -> bool:
        return endpoint in self.registered_clients

    def handle_ticks(self) -> None:
        """Advance the simulation and broadcast what changed."""
        now = time.monotonic()
        dt = now - self.last_tick
        self.last_tick = now
        self.ecs.tick(dt)

        protocols = self.ecs.observer.drain_reliable()
        if protocols:
            construct(EcsChanges(protocols)).send_all(self, self.registered_clients)

    def handle_datagram(self, endpoint: Hashable, data: bytes) -> None:
        """Decode one client datagram and act on it."""
        try:
            message = decode_client_message(data)
        except DecodeError:
            self.logger.log("Warning: Invalid message sent to server")
            return

        if isinstance(message, Ping):
            handle_ping(self.logger, self, endpoint)
        elif isinstance(message, Leave):
            handle_leave(self, endpoint)
        elif isinstance(message, Join):
            handle_join(self, endpoint, message.username)
        elif isinstance(message, UpdateInputs):
            try:
                handle_update_inputs(self, message.input_state, endpoint)
            except InputError as err:
                self.logger.log(f"Warning: {err}")

    def run(self) -> None:
        """Serve until :meth:`stop` is called."""
        self.handle_ticks()
        next_tick = time.monotonic() + TICK_INTERVAL
        with selectors.DefaultSelector() as selector:
            selector.register(self._socket, selectors.EVENT_READ)
            while not self._stopped.is_set():
                timeout = max(0.0, next_tick - time.monotonic())
                if selector.select(timeout):
                    try:
                        data, endpoint = self._socket.recvfrom(MAX_DATAGRAM)
                    except OSError:
                        continue
                    self.handle_datagram(endpoint, data)
                if time.monotonic() >= next_tick:
                    self.handle_ticks()
                    next_tick = time.monotonic() + TICK_INTERVAL

    def stop(self) -> None:
        """Ask a running server to stop; safe to call from another thread."""
        self._stopped.set()

    def close(self) -> None:
        self.stop()
        self._socket.close()

    def __enter__(self) -> "Server":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def run_server(ip: str, port: int) -> None:
    """Start a server on ``ip:port`` and serve until stopped."""
    print(f"Starting server on {format_endpoint((ip, port))}")
    with Server((ip, port)) as server:
        server.run()


def _ip(text: str) -> str:
    try:
        return str(ipaddress.ip_address(text))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid IP address: {text!r}") from None


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {text!r}") from None
    if not 0 <= value <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {value}")
    return value


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the game server.")
    parser.add_argument("-p", "--port", type=_port, default=PORT, help="Port to host server on")
    parser.add_argument("-i", "--ip", type=_ip, default=IP, help="IP to host server on")
    args = parser.parse_args(argv)
    try:
        run_server(args.ip, args.port)
    except KeyboardInterrupt:
        pass
    return 0