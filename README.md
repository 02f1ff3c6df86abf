# trainboard

`trainboard` holds the control logic for a wall map that shows trains moving
on a railway network. The trains are drawn with addressable LED strips, and
the data comes from a server. The package contains a small event-driven state
machine and the wire-format decoder. It also has a frame store for live,
history and offline data, and an LED manager that cross-fades between frames.
It uses only the Python standard library.

Hardware access is injected. Strips, the brightness presenter, the light
sensor readings, Wi-Fi checks and server calls are all passed in as objects
or callables. `BufferLedStrip` and `BufferLedPresenter` keep everything in
memory, so the logic runs without any device attached.

## Installation

```
pip install .
```

To install it with the test dependencies and run the tests:

```
pip install .[test]
pytest
```

## Modules

- `trainboard.fsm`: a flat finite state machine.
  - `Fsm` takes an `FsmInitialState`. `init()` initialises that state and
    enters it. `dispatch(event)` passes the event to the current state and
    follows the `FsmTransition` the state returns.
  - A transition with a destination exits the current state, runs the
    transition's `action` callable (if one is set), then enters the
    destination. A transition without a destination only runs its action.
  - Dispatching before `init()` raises `FsmError`. Dispatching while an event
    is still being handled raises `FsmBusyError`.
- `trainboard.signals`: the `Signal` enum of board events, and `EventQueue`.
  `EventQueue` is a bounded FIFO. `push` raises `OverflowError` when the
  queue is full, and `pop` raises `IndexError` when it is empty.
- `trainboard.led`: the `Led` dataclass and the `LedColor` status colours.
  - A `Led` has a 16-bit `id` (the strip is in the high byte), a `color`
    and a `scale`.
  - `strip_id`, `position` and `html_color` are derived from those fields.
  - Two LEDs are equal when their id and colour are equal.
- `trainboard.dataconv`: validation and decoding of frames.
  - A frame is a 2-byte big-endian LED count, followed by 5 bytes per LED:
    strip, position, red, green, blue.
  - The module provides `led_count`, `is_data_valid`,
    `is_history_data_valid` and `data_to_leds`.
  - `data_to_leds` returns `None` when there is no input. It returns an
    empty list when the length does not match the header, or when the frame
    holds more than `max_leds` LEDs.
- `trainboard.datastore`: `DataManager`, which stores frames and hands out
  a reader and a writer for the current `reader_mode` and `writer_mode`.
  - `DataReaderMode` has three modes:
    - `LIVE` reads the newest frame.
    - `HISTORY` steps through the stored frames.
    - `OFFLINE` steps through the frames the manager was given at
      construction.
  - `DataWriterMode` has two modes:
    - `SINGLE` appends one frame.
    - `MULTIPLE` replaces the store with a full history. Its `save` returns
      `True` only when a complete history was stored.
- `trainboard.ledmanager`: LED strips, presenters and the cross-fade
  manager.
  - It defines the `LedStrip` and `LedPresenter` interfaces, with the
    in-memory `BufferLedStrip` and `BufferLedPresenter`, and the helper
    `scale_color`.
  - `TrainboardLedManager.set_leds` starts a transition. LEDs that are off
    every strip are ignored.
  - Each `refresh_transition()` call advances the transition by one tick.
    In the first half, LEDs that change colour fade out. In the second half,
    new LEDs fade in and removed LEDs fade out. The call returns `True` when
    the transition is finished.
  - `set_status_led` lights the first LED of every strip in a status colour.
    `set_test_leds` lights every LED in white. Both return `False` while a
    transition is running.
- `trainboard.server`: `ServerClient`, for the server over HTTP, using
  `urllib` by default.
  - `get_data` and `get_history_data` return the received bytes, truncated
    to `max_length`. They return empty bytes when the server cannot be
    reached.
  - `ping` returns `True` only when the answer is the two bytes
    `0xBE 0xEF`.
  - The opener can be replaced, for example in tests.
- `trainboard.connection`: `ConnectionListener`, which checks the network
  on every `TICK`.
  - It checks Wi-Fi on every tick, and pings the server at most every 30 s
    while disconnected and every 60 s while connected.
  - It pushes `NETWORK_UP`, `NETWORK_DOWN`, `CONNECTED` and `DISCONNECTED`
    onto the queue.
- `trainboard.board`: hardware revision detection from a voltage reading in
  millivolts. It provides `hardware_version_from_millivolts` and
  `BoardConfig`.
- `trainboard.lightsensor`: `LightSensor`. It reads the channels once per
  update period and low-pass filters the readings into a brightness. The
  brightness is never below the configured minimum.
- `trainboard.states_startup`: the startup states and their timer.
  - `OneShotTimer` counts down in ticks.
  - `StateStarting` shows a white status light and pushes `DELAY_DONE`
    after 2 s. It takes its reset transition on `SHORT_PUSH`.
  - `StateResetting` lights every LED, clears the credentials through the
    given callable, and takes its connect transition after 5 s.
- `trainboard.states_data`: the polling and animation states.
  - `StatePolling` fetches one frame or a history, depending on the writer
    mode, validates it and stores it, then pushes `DATA_OK`. After five
    failed polls it pushes `FAKE`.
  - `StateTransitioning` reads the next frame, cross-fades to it, and picks
    the "done" transition that matches the reader mode. On `SHORT_PUSH` it
    switches between live and history mode.

## Example

```python
from trainboard.dataconv import data_to_leds
from trainboard.ledmanager import BufferLedPresenter, BufferLedStrip, TrainboardLedManager

frame = bytes([0, 1, 2, 7, 0xFF, 0x80, 0x00])  # one LED: strip 2, position 7, orange
leds = data_to_leds(frame, max_leds=16)

strips = [BufferLedStrip(100) for _ in range(4)]
manager = TrainboardLedManager(strips, BufferLedPresenter(default_brightness=128), transition_duration=20)
manager.set_leds(leds)
while not manager.refresh_transition():
    pass
assert strips[2].pixels[7] == 0xFF8000
```

## What the package does not do

The package provides the parts of a board, not a complete board.

- There is no ready-made state machine that links every state and
  transition together.
- There is no state for connecting to Wi-Fi, pinging, updating, live
  display or offline display.
- There is no push-button handling.
- There is no application object or command that reads the hardware
  version, selects strips and runs the event loop.

To run a board, build the `Fsm` from the states above, attach your own
transitions, and dispatch `Signal.TICK` at a fixed period.