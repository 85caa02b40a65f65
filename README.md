# mazefps

The server for a small multiplayer first person shooter played in a randomly
generated maze. Clients talk to it over UDP: they join with a username, send
their input state (movement keys, look angle, trigger), and the server runs the
game simulation at a fixed tick rate of 144 ticks per second. After each tick
it sends every registered client the changes to the shared entity state.

## Running a server

```
mazefps-server
```

The server listens on `127.0.0.1:1337` by default. Choose another address or
port with the options:

```
mazefps-server --ip 0.0.0.0 --port 4000
```

`-i`/`--ip` must be an IPv4 or IPv6 address and `-p`/`--port` a number from 0
to 65535. Press Ctrl+C to stop the server.

Each log line is printed with a UTC timestamp, for example
`[2024-01-01 12:00:00]: Added participant with ip 127.0.0.1:50123`.

## What the server simulates

- **Map**: a 13×13 grid made from a randomly grown maze
  (`mazefps.map.generate_map`). Some of its inner walls are knocked out to
  open it up, and a few rectangular sectors are retextured.
- **Players**: each starts with 100 HP and a pistol with unlimited ammo at a
  random empty cell. A client that joins with an empty username is called
  `Player`. Players are pushed back out of walls.
- **Weapons**: six weapon crates lie around the map at start. Walking over one
  gives the player that gun, and a new crate appears somewhere else. Guns
  (`mazefps.gun.Gun`) differ in damage, bullet speed, fire rate, spread, pellet
  count, magazine size and damage drop-off over the bullet's flight. When a
  magazine is empty the player falls back to the pistol.
- **Combat**: bullets travel in a straight line and disappear when they hit a
  wall, reach the end of their range, or touch a player other than the one who
  fired them, whom they damage. Players who reach zero health respawn at a
  random empty cell with full health and a pistol, and leave a dead-player
  marker behind for about two seconds. The server counts kills and deaths.

## Wire format

Every datagram is one UTF-8 JSON object tagged with a `kind` field.
`mazefps.messages` defines the messages and their encoding:

- from clients: `Ping`, `Leave`, `Join(username)`, `UpdateInputs(input_state)`,
  encoded with `encode_client_message` and read with `decode_client_message`;
- from the server: `OwnId(user_id)`, `SendMap(map)`, `Pong`,
  `EcsChanges(changes)`, encoded with `encode_server_message` and read with
  `decode_server_message`.

Malformed data raises `DecodeError`. The changes in `EcsChanges` are
`Insert`, `Remove` and `Despawn` items from `mazefps.components`. On joining,
a client receives its own id, the map, and the full current entity state.

## Using it from Python

```python
from mazefps.server import run_server

run_server("127.0.0.1", 1337)
```

For a server that can be stopped from your own code, construct
`Server((host, port))` directly, call `Server.run()` in a thread and
`Server.stop()` when you are done; `Server` is also a context manager that
closes its socket on exit. With `Server((host, port), enable_logging_channels=True)`
every log line is also put on the queue `server.logger_receiver`.

`mazefps.map`, `mazefps.maze` and `mazefps.gun` can be used on their own to
generate maps and look up weapon statistics; `mazefps.ecs.ServerEcs` runs the
simulation without any networking via `ServerEcs.tick(dt)`.

## What it does not do

This package is the server only. It has no game client, no rendering and no
graphical server console; something else has to speak the wire format above
to play.