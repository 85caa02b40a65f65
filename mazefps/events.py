"""Handlers for the messages clients send to the server."""

from __future__ import annotations

from typing import Any, Hashable

from .components import InputState
from .defaults import DEFAULT_PLAYER_NAME
from .ecs import CantGetResource
from .logger import Logger
from .map import Map
from .messages import EcsChanges, OwnId, Pong, SendMap, Transport, construct
from .spawn import spawn_player
from .world import ComponentError, NoSuchEntity


class JoinError(Exception):
    """A client could not be registered."""


class LeaveError(Exception):
    """A client could not be unregistered."""


class InputError(Exception):
    """A client's input state could not be applied."""


def format_endpoint(endpoint: Hashable) -> str:
    """``host:port`` for an address tuple, bracketing IPv6 hosts."""
    if isinstance(endpoint, tuple) and len(endpoint) >= 2:
        host, port = endpoint[0], endpoint[1]
        if ":" in str(host):
            return f"[{host}]:{port}"
        return f"{host}:{port}"
    return str(endpoint)


def handle_join(server: Any, endpoint: Hashable, username: str) -> None:
    """Register a client, spawn its player and send it the game state."""
    try:
        logger = server.ecs.resources.get(Logger)
        address = format_endpoint(endpoint)

        if server.is_registered(endpoint):
            logger.log(f"Participant with IP {address} already exists")
            return

        _, entity = spawn_player(server.ecs, username or DEFAULT_PLAYER_NAME)
        construct(OwnId(entity)).send(server, endpoint)

        logger.log(f"Added participant with ip {address}")
        server.registered_clients[endpoint] = entity

        logger.log(f"Sending map to IP {address}")
        construct(SendMap(server.ecs.resources.get(Map))).send(server, endpoint)
        construct(EcsChanges(server.ecs.init_client())).send(server, endpoint)
    except (CantGetResource, TypeError) as exc:
        raise JoinError(f"JoinError: {exc}") from exc


def handle_leave(server: Any, endpoint: Hashable) -> None:
    """Unregister a client and despawn its player; unknown clients are ignored."""
    if not server.is_registered(endpoint):
        return
    entity = server.registered_clients.pop(endpoint, None)
    if entity is None:
        raise LeaveError("Can't unregister a non-existent participant")
    try:
        server.ecs.observed_world().despawn(entity)
    except NoSuchEntity as exc:
        raise LeaveError(str(exc)) from exc
    server.ecs.resources.get(Logger).log(
        f"Unregistered participant with ip {format_endpoint(endpoint)}"
    )


def handle_ping(logger: Logger, transport: Transport, endpoint: Hashable) -> None:
    """Answer a ping with a pong."""
    logger.log(f"Ping from {format_endpoint(endpoint)}")
    construct(Pong()).send(transport, endpoint)


def handle_update_inputs(server: Any, input_state: InputState, endpoint: Hashable) -> None:
    """Replace the input state of the client's player."""
    entity = server.registered_clients.get(endpoint)
    if entity is None:
        raise InputError("tried to update input for unregistered client")
    try:
        server.ecs.world.get(entity, InputState)
    except ComponentError as exc:
        raise InputError(f"client is registered but not found in ecs: {exc}") from exc
    server.ecs.world.insert_one(entity, input_state)