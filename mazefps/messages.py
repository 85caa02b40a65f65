"""Messages exchanged between clients and the server, and their wire format.

Every message is one UTF-8 JSON object tagged with a ``kind`` field.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from enum import Enum, auto
from typing import Any, Callable, Hashable, Iterable, Protocol, Union

from .components import (
    SHARED_COMPONENTS,
    Despawn,
    InputState,
    Insert,
    Remove,
    UserID,
    Vec2,
)
from .gun import Gun
from .map import Map, SolidColor, Textured, TexturedWall


class DecodeError(ValueError):
    """Bytes that do not form a valid message."""


class Signal(Enum):
    TICK = auto()


@dataclass(frozen=True)
class Ping:
    pass


@dataclass(frozen=True)
class Leave:
    pass


@dataclass(frozen=True)
class Join:
    username: str


@dataclass(frozen=True)
class UpdateInputs:
    input_state: InputState


@dataclass(frozen=True)
class OwnId:
    user_id: UserID


@dataclass(frozen=True)
class SendMap:
    map: Map


@dataclass(frozen=True)
class Pong:
    pass


@dataclass(frozen=True)
class EcsChanges:
    changes: list


ClientMessage = Union[Ping, Leave, Join, UpdateInputs]
ServerMessage = Union[OwnId, SendMap, Pong, EcsChanges]


class Transport(Protocol):
    def send(self, endpoint: Hashable, payload: bytes) -> None: ...


@dataclass(frozen=True)
class ConstructedMessage:
    """An encoded server message, ready to be sent any number of times."""

    payload: bytes

    def send(self, transport: Transport, endpoint: Hashable) -> None:
        transport.send(endpoint, self.payload)

    def send_all(self, transport: Transport, registered_clients: Iterable[Hashable]) -> None:
        """Send to every endpoint (the keys, when given a mapping)."""
        for endpoint in registered_clients:
            self.send(transport, endpoint)


def construct(message: ServerMessage) -> ConstructedMessage:
    return ConstructedMessage(encode_server_message(message))


_COMPONENTS = {cls.__name__: cls for cls in SHARED_COMPONENTS}


def _expect(value: Any, kind: type | tuple[type, ...]) -> Any:
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise TypeError(f"unexpected boolean {value!r}")
    if not isinstance(value, kind):
        raise TypeError(f"unexpected value {value!r}")
    return value


def _encode_value(value: Any) -> Any:
    if isinstance(value, Vec2):
        return {"vec2": [value.x, value.y]}
    if isinstance(value, Gun):
        return {"gun": value.name}
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    raise TypeError(f"cannot encode {value!r}")


def _decode_value(raw: Any) -> Any:
    if isinstance(raw, dict):
        if "vec2" in raw:
            x, y = raw["vec2"]
            return Vec2(float(_expect(x, (int, float))), float(_expect(y, (int, float))))
        if "gun" in raw:
            return Gun[raw["gun"]]
        raise TypeError(f"unknown value {raw!r}")
    return raw


def _encode_component(component: object) -> dict:
    cls = type(component)
    if cls not in SHARED_COMPONENTS:
        raise TypeError(f"{cls.__name__} is not a shared component")
    return {
        "type": cls.__name__,
        "fields": {f.name: _encode_value(getattr(component, f.name)) for f in fields(component)},
    }


def _decode_component(raw: dict) -> object:
    cls = _COMPONENTS[raw["type"]]
    return cls(**{name: _decode_value(value) for name, value in raw["fields"].items()})


def _encode_protocol(item: object) -> dict:
    if isinstance(item, Insert):
        return {"op": "insert", "entity": item.entity, "component": _encode_component(item.component)}
    if isinstance(item, Remove):
        if item.component_type not in SHARED_COMPONENTS:
            raise TypeError(f"{item.component_type.__name__} is not a shared component")
        return {"op": "remove", "entity": item.entity, "component": item.component_type.__name__}
    if isinstance(item, Despawn):
        return {"op": "despawn", "entity": item.entity}
    raise TypeError(f"not an ECS protocol item: {item!r}")


def _decode_protocol(raw: dict) -> object:
    op = raw["op"]
    entity = _expect(raw["entity"], int)
    if op == "insert":
        return Insert(entity, _decode_component(raw["component"]))
    if op == "remove":
        return Remove(entity, _COMPONENTS[raw["component"]])
    if op == "despawn":
        return Despawn(entity)
    raise ValueError(f"unknown protocol operation {op!r}")


def _encode_cell(cell: Any) -> Any:
    if cell is None:
        return None
    if isinstance(cell, SolidColor):
        return {"color": list(cell.color)}
    if isinstance(cell, TexturedWall):
        return {"texture": cell.texture.name}
    raise TypeError(f"not a map cell: {cell!r}")


def _decode_cell(raw: Any) -> Any:
    if raw is None:
        return None
    if "color" in raw:
        red, green, blue = (float(_expect(c, (int, float))) for c in raw["color"])
        return SolidColor((red, green, blue))
    return TexturedWall(Textured[raw["texture"]])


def _encode_map(game_map: Map) -> dict:
    return {
        "width": game_map.width,
        "height": game_map.height,
        "data": [_encode_cell(cell) for cell in game_map.data],
    }


def _decode_map(raw: dict) -> Map:
    return Map(
        _expect(raw["width"], int),
        _expect(raw["height"], int),
        [_decode_cell(cell) for cell in raw["data"]],
    )


def _encode_input(state: InputState) -> dict:
    return {f.name: getattr(state, f.name) for f in fields(state)}


def _decode_input(raw: dict) -> InputState:
    state = InputState(**raw)
    for name in ("forward", "backward", "left", "right", "shoot"):
        _expect(getattr(state, name), bool)
    state.look_angle = float(_expect(state.look_angle, (int, float)))
    return state


def _dump(obj: dict) -> bytes:
    return json.dumps(obj, separators=(",", ":")).encode("utf-8")


def _decode(data: bytes, decoders: dict[str, Callable[[dict], Any]], what: str) -> Any:
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"invalid {what} message: {exc}") from exc
    if not isinstance(raw, dict):
        raise DecodeError(f"invalid {what} message: not an object")
    decoder = decoders.get(raw.get("kind"))
    if decoder is None:
        raise DecodeError(f"unknown {what} message kind {raw.get('kind')!r}")
    try:
        return decoder(raw)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DecodeError(f"invalid {what} message: {exc}") from exc


def encode_client_message(message: ClientMessage) -> bytes:
    if isinstance(message, Ping):
        return _dump({"kind": "Ping"})
    if isinstance(message, Leave):
        return _dump({"kind": "Leave"})
    if isinstance(message, Join):
        return _dump({"kind": "Join", "username": message.username})
    if isinstance(message, UpdateInputs):
        return _dump({"kind": "UpdateInputs", "input": _encode_input(message.input_state)})
    raise TypeError(f"not a client message: {message!r}")


_CLIENT_DECODERS: dict[str, Callable[[dict], Any]] = {
    "Ping": lambda raw: Ping(),
    "Leave": lambda raw: Leave(),
    "Join": lambda raw: Join(_expect(raw["username"], str)),
    "UpdateInputs": lambda raw: UpdateInputs(_decode_input(raw["input"])),
}


def decode_client_message(data: bytes) -> ClientMessage:
    return _decode(data, _CLIENT_DECODERS, "client")


def encode_server_message(message: ServerMessage) -> bytes:
    if isinstance(message, OwnId):
        return _dump({"kind": "OwnId", "id": message.user_id})
    if isinstance(message, SendMap):
        return _dump({"kind": "SendMap", "map": _encode_map(message.map)})
    if isinstance(message, Pong):
        return _dump({"kind": "Pong"})
    if isinstance(message, EcsChanges):
        return _dump(
            {"kind": "EcsChanges", "changes": [_encode_protocol(p) for p in message.changes]}
        )
    raise TypeError(f"not a server message: {message!r}")


_SERVER_DECODERS: dict[str, Callable[[dict], Any]] = {
    "OwnId": lambda raw: OwnId(_expect(raw["id"], int)),
    "SendMap": lambda raw: SendMap(_decode_map(raw["map"])),
    "Pong": lambda raw: Pong(),
    "EcsChanges": lambda raw: EcsChanges([_decode_protocol(p) for p in raw["changes"]]),
}


def decode_server_message(data: bytes) -> ServerMessage:
    return _decode(data, _SERVER_DECODERS, "server")