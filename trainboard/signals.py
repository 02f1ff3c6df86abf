"""Events exchanged between the board's components."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from enum import IntEnum


class Signal(IntEnum):
    """Events understood by the trainboard state machine."""

    TICK = 0
    DELAY_DONE = 1
    PING = 2
    FAKE = 3
    POLL_SERVER = 4
    LOAD_HISTORY = 5
    SHORT_PUSH = 6
    RECONNECT = 7
    DATA_OK = 8
    RETRY = 9
    LIVE_ANIMATION_DONE = 10
    HIST_ANIMATION_DONE = 11
    FAKE_ANIMATION_DONE = 12
    NETWORK_UP = 13
    NETWORK_DOWN = 14
    CONNECTED = 15
    DISCONNECTED = 16
    CHECK_UPDATE = 17
    NO_UPDATE = 18


class EventQueue:
    """A bounded first-in first-out queue of events."""

    def __init__(self, maxsize: int) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self.maxsize = maxsize
        self._events: deque[int] = deque()

    def push(self, event: int) -> None:
        """Append an event; raises OverflowError when the queue is full."""
        if len(self._events) >= self.maxsize:
            raise OverflowError("event queue is full")
        self._events.append(event)

    def pop(self) -> int:
        """Remove and return the oldest event; raises IndexError when empty."""
        if not self._events:
            raise IndexError("event queue is empty")
        return self._events.popleft()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[int]:
        """Iterate over pending events, oldest first, without removing them."""
        return iter(tuple(self._events))