# gharial

Building blocks for a master-stack layout manager for the river Wayland
compositor: the line-based control protocol, a Unix-socket server that
answers it, the layout algorithm, the action and key-chord grammar, a
lock-protected parameter store, a handful of window-management policies,
and the `gharialctl` control tool.

## Modules

- `gharial.protocol` – `Request`, `Response`, `ParseError`, `socket_path()`
  and `send_one(path, request)`.
- `gharial.server` – `Server`, plus `dispatch(request, shared)` and
  `handle_client(conn, shared, notifier)` for handling one request.
- `gharial.state` – `Shared`, `BorderConfig`, `Applied`, `CommandError`,
  `premultiply_straight`, `parse_color`, `format_color`.
- `gharial.layout` – `Params`, `Orientation`, `Rect`, `compute`.
- `gharial.action` – `Direction`, `BindingSpec`, `parse_action` and the
  action classes (`Spawn`, `Close`, `FocusDirection`, `SwapDirection`,
  `ToggleFloat`, `Layout`, `EnterMode`, `ExitMode`, `Bind`, `Unbind`,
  `FocusTag`, `ToggleTag`, `MoveToTag`, `ToggleWindowTag`).
- `gharial.keysyms` – `parse_keysym`, `parse_modifier`.
- `gharial.tags` – `tag_mask`, `Tags`, `Modes`.
- `gharial.focus` – `FocusMemory`, `pick_candidate`.
- `gharial.spatial` – `pick_neighbor`.
- `gharial.sequence` – `Sequence`, `Phase`, `PhaseKind`.
- `gharial.targets` – `TargetCache`, `inset`.
- `gharial.ctl` – the `gharialctl` command.

## gharialctl

`gharialctl` sends one request to a running server and prints the reply.
It is installed as a console script and can also be run with
`python -m gharial.ctl`.

```
gharialctl set main-ratio 0.55
gharialctl main-ratio +0.05
gharialctl gaps 12
gharialctl get gaps
gharialctl status
gharialctl orientation top
gharialctl smart-gaps toggle
gharialctl border-color-focused 0xC8324BFF
```

Window management, tags, bindings and modes:

```
gharialctl focus next
gharialctl swap left
gharialctl toggle-float
gharialctl close
gharialctl spawn foot
gharialctl tag focus 3
gharialctl tag move 2
gharialctl bind Super+Shift+Q close
gharialctl bind --mode resize h main-ratio -0.05
gharialctl unbind Super+Shift+Q
gharialctl mode resize
gharialctl mode exit
```

Diagnostics:

```
gharialctl ping
gharialctl version
gharialctl wait 2s
gharialctl --help
```

`wait` polls the socket with `ping` every 50 ms until the server answers;
its timeout defaults to 2 seconds, is in milliseconds when bare, and
accepts the `ms` and `s` suffixes. Exit status is 0 on success, 1 when the
server replies with an error or cannot be reached, and 2 for usage errors.

### Socket location

The socket path is, in order:

1. `$GHARIAL_SOCKET`,
2. `$XDG_RUNTIME_DIR/gharial-$WAYLAND_DISPLAY.sock`,
3. `$XDG_RUNTIME_DIR/gharial.sock`,
4. `/tmp/gharial-$USER.sock`.

`-s PATH` or `--socket PATH`, given as the first argument, overrides it.

## Values

Numeric parameters accept absolute (`0.55`, `8`), relative-add (`+0.05`,
`+1`) and relative-subtract (`-0.05`, `-1`) forms; integers saturate at 0.
Booleans accept `on|off|true|false|yes|no|1|0|toggle`. Colours are
`0xRRGGBBAA` or `#RRGGBBAA`. `main-ratio` is clamped to 0.05–0.95 and
`main-count` never drops below 1.

## Using the library

Protocol:

```python
from gharial.protocol import Request, Response

request = Request.parse('bind Super+Return "spawn foot"')
line = request.encode()

assert Response.parse("ok pong") == Response.success("pong")
```

Layout:

```python
from gharial.layout import Params, compute

rects = compute(3, (1920, 1080), Params())
```

Bindings and actions:

```python
from gharial.action import BindingSpec, parse_action

chord = BindingSpec.parse("Super+Shift+Q")
action = parse_action(["tag", "focus", "3"])
```

Serving requests:

```python
from gharial.layout import Params
from gharial.server import Server
from gharial.state import Shared

shared = Shared(Params())
shared.set_action_sender(print)  # receives Close(), FocusTag(3), ...
with Server("/tmp/gharial-demo.sock", shared, None):
    ...
```

`Server.with_default_path(shared, notifier)` binds at `socket_path()`.
Starting a server fails with `EADDRINUSE` if another server already answers
on the path; a stale socket file is removed. Requests that really change a
parameter mark the store dirty and call the notifier;
`Shared.take_dirty()` reports and clears that flag.

## What this package does not do

There is no compositor connection and no `gharial` daemon command. Nothing
here talks to river, lays out real windows, grabs key chords or launches
programs. The window-management verbs (`close`, `focus`, `swap`,
`toggle-float`, `spawn`, `bind`, `unbind`, `mode`, `tag`) are only validated
and handed to whatever callable was installed with
`Shared.set_action_sender`; without one, the server answers them with
`err wayland thread not ready (no action channel yet)`. Layout parameters,
`get`, `status`, `ping` and `version` work on their own.