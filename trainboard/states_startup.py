"""The states the board goes through when it starts: starting and resetting."""

from __future__ import annotations

import logging
from collections.abc import Callable

from trainboard.fsm import FsmInitialState, FsmState, FsmTransition
from trainboard.led import LedColor
from trainboard.ledmanager import TrainboardLedManager
from trainboard.signals import EventQueue, Signal

STARTUP_DURATION_MS = 2000
RESET_DURATION_MS = 5000

_log = logging.getLogger(__name__)


class OneShotTimer:
    """A timer counted down in ticks that expires once after a set duration.

    Durations are rounded up to whole ticks; the expired flag stays set until
    the timer is reset or started again.
    """

    def __init__(self, tick_period_ms: int) -> None:
        if tick_period_ms <= 0:
            raise ValueError("tick period must be positive")
        self._tick_period_ms = tick_period_ms
        self._remaining = 0
        self._running = False
        self._expired = False

    def start(self, duration_ms: int) -> bool:
        """Start (or restart) the timer; False when the duration is not positive."""
        if duration_ms <= 0:
            return False
        self._remaining = -(-duration_ms // self._tick_period_ms)
        self._running = True
        self._expired = False
        return True

    def stop(self) -> None:
        """Stop counting; the expired flag is kept."""
        self._running = False

    def reset(self) -> None:
        """Stop the timer and clear its expired flag."""
        self._running = False
        self._expired = False
        self._remaining = 0

    def tick(self) -> None:
        """Advance the timer by one tick period."""
        if not self._running:
            return
        self._remaining -= 1
        if self._remaining <= 0:
            self._running = False
            self._expired = True

    def expired(self) -> bool:
        """Whether the timer ran out since it was last started or reset."""
        return self._expired

    def running(self) -> bool:
        """Whether the timer is counting down."""
        return self._running


class StateStarting(FsmInitialState):
    """Shows a white status light for a moment, or resets on a push."""

    def __init__(
        self,
        led_manager: TrainboardLedManager,
        event_queue: EventQueue,
        delay_done: FsmTransition,
        reset: FsmTransition,
        tick_period_ms: int,
    ) -> None:
        self._led_manager = led_manager
        self._queue = event_queue
        self._delay_done = delay_done
        self._reset = reset
        self.timer = OneShotTimer(tick_period_ms)

    def init(self) -> None:
        _log.debug("TBSM - /i Starting")
        self.timer.reset()

    def enter(self) -> None:
        _log.debug("TBSM - /e Starting")
        if not self._led_manager.set_status_led(LedColor.WHITE):
            _log.debug("TBSM(Starting) - Could not set white LEDs!")
        if not self.timer.start(STARTUP_DURATION_MS):
            _log.info("TBSM(Starting) - Could not start timer.")

    def exit(self) -> None:
        _log.debug("TBSM - /x Starting")
        self.timer.stop()

    def process_event(self, event: int) -> FsmTransition | None:
        if event == Signal.TICK:
            self.timer.tick()
            if self.timer.expired():
                self._queue.push(Signal.DELAY_DONE)
        elif event == Signal.DELAY_DONE:
            return self._delay_done
        elif event == Signal.SHORT_PUSH:
            return self._reset
        return None


class StateResetting(FsmState):
    """Forgets the Wi-Fi credentials and lights every LED for a while."""

    def __init__(
        self,
        led_manager: TrainboardLedManager,
        event_queue: EventQueue,
        connect: FsmTransition,
        reset_credentials: Callable[[], None],
        tick_period_ms: int,
    ) -> None:
        self._led_manager = led_manager
        self._queue = event_queue
        self._connect = connect
        self._reset_credentials = reset_credentials
        self.timer = OneShotTimer(tick_period_ms)

    def enter(self) -> None:
        _log.debug("TBSM - /e Resetting")
        self._led_manager.set_test_leds()
        self._reset_credentials()
        self.timer.start(RESET_DURATION_MS)

    def exit(self) -> None:
        _log.debug("TBSM - /x Resetting")
        self.timer.stop()

    def process_event(self, event: int) -> FsmTransition | None:
        if event == Signal.TICK:
            self.timer.tick()
            if self.timer.expired():
                return self._connect
        return None