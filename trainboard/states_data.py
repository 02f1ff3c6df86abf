"""States that fetch frames from the server and animate them onto the LEDs."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from functools import partial

from trainboard.dataconv import data_to_leds, is_data_valid, is_history_data_valid
from trainboard.datastore import DataManager, DataReaderMode, DataWriterMode
from trainboard.fsm import FsmState, FsmTransition
from trainboard.led import Led
from trainboard.ledmanager import TrainboardLedManager
from trainboard.signals import EventQueue, Signal

MAX_POLL_FAILS = 5
MAX_CONVERSION_FAILS = 3

_log = logging.getLogger(__name__)


class StatePolling(FsmState):
    """Fetches one frame or a whole history from the server and stores it.

    get_data and get_history_data take the maximum number of bytes wanted and
    return the received bytes, or None when the server gave no response.
    After too many empty or invalid answers, FAKE is raised.
    """

    def __init__(
        self,
        event_queue: EventQueue,
        data_manager: DataManager,
        fake: FsmTransition,
        data_ok: FsmTransition,
        get_data: Callable[[int], bytes | None],
        get_history_data: Callable[[int], bytes | None],
        history_frames: int,
        frame_size: int,
    ) -> None:
        self._queue = event_queue
        self._data_manager = data_manager
        self._fake = fake
        self._data_ok = data_ok
        self._get_data = get_data
        self._get_history_data = get_history_data
        self._history_frames = history_frames
        self._frame_size = frame_size
        self._buffer_size = history_frames * frame_size
        self._fail_count = 0
        self._fetch: Callable[[int], bytes | None] = get_history_data
        self._validate: Callable[[bytes], bool] = self._history_validator()

    def enter(self) -> None:
        _log.debug("TBSM - /e Polling")
        self._fail_count = 0
        if self._data_manager.writer_mode is DataWriterMode.SINGLE:
            self._fetch = self._get_data
            self._validate = partial(is_data_valid, max_length=self._frame_size)
        else:
            self._fetch = self._get_history_data
            self._validate = self._history_validator()

    def exit(self) -> None:
        _log.debug("TBSM - /x Polling")

    def process_event(self, event: int) -> FsmTransition | None:
        if event == Signal.TICK:
            self._poll()
        elif event in (Signal.FAKE, Signal.DISCONNECTED, Signal.NETWORK_DOWN):
            return self._fake
        elif event == Signal.DATA_OK:
            return self._data_ok
        return None

    def _history_validator(self) -> Callable[[bytes], bool]:
        return partial(
            is_history_data_valid,
            history_frames=self._history_frames,
            frame_size=self._frame_size,
        )

    def _poll(self) -> None:
        _log.debug("TBSM(Polling) - Poll server...")
        data = self._fetch(self._buffer_size)
        if data is None:
            _log.debug("TBSM(Polling) - Could not get server response")
            return
        self._evaluate(bytes(data))

    def _evaluate(self, data: bytes) -> None:
        if not data:
            _log.debug("TBSM(Polling) - Zero length data")
            self._poll_failed()
        elif not self._validate(data):
            _log.debug("TBSM(Polling) - Invalid data")
            self._poll_failed()
        else:
            _log.debug("TBSM(Polling) - Saving data")
            self._data_manager.get_writer().save(data)
            self._queue.push(Signal.DATA_OK)

    def _poll_failed(self) -> None:
        self._fail_count += 1
        if self._fail_count >= MAX_POLL_FAILS:
            _log.debug("TBSM(Polling) - Too many fails, changing to fake mode")
            self._queue.push(Signal.FAKE)


class StateTransitioning(FsmState):
    """Reads the next frame to display and cross-fades the LEDs to it."""

    def __init__(
        self,
        led_manager: TrainboardLedManager,
        event_queue: EventQueue,
        data_manager: DataManager,
        fake: FsmTransition,
        load_history: FsmTransition,
        live_done: FsmTransition,
        hist_done: FsmTransition,
        fake_done: FsmTransition,
        frame_size: int,
        max_leds: int,
    ) -> None:
        self._led_manager = led_manager
        self._queue = event_queue
        self._data_manager = data_manager
        self._fake = fake
        self._load_history = load_history
        self._done = {
            DataReaderMode.LIVE: live_done,
            DataReaderMode.HISTORY: hist_done,
            DataReaderMode.OFFLINE: fake_done,
        }
        self._fake_done = fake_done
        self._frame_size = frame_size
        self._max_leds = max_leds
        self._fail_count = 0

    def enter(self) -> None:
        _log.debug("TBSM - /e Transitioning")
        data = self._data_manager.get_reader().read(self._frame_size)
        self._show(data_to_leds(data, self._max_leds))

    def exit(self) -> None:
        _log.debug("TBSM - /x Transitioning")

    def process_event(self, event: int) -> FsmTransition | None:
        if event == Signal.TICK:
            return self._tick()
        if event == Signal.SHORT_PUSH:
            return self._short_push()
        if event in (Signal.DISCONNECTED, Signal.NETWORK_DOWN):
            return self._fake_done
        if event == Signal.FAKE:
            return self._fake
        return None

    def _show(self, leds: Sequence[Led] | None) -> None:
        if leds is not None:
            self._fail_count = 0
            self._led_manager.set_leds(leds)
            return
        self._fail_count += 1
        if self._data_manager.reader_mode is DataReaderMode.OFFLINE:
            raise RuntimeError("built-in offline frames could not be decoded")
        if self._fail_count >= MAX_CONVERSION_FAILS:
            self._fail_count = 0
            self._queue.push(Signal.FAKE)

    def _short_push(self) -> FsmTransition | None:
        mode = self._data_manager.reader_mode
        if mode is DataReaderMode.OFFLINE:
            return None
        self._led_manager.clear_all_leds()
        if mode is DataReaderMode.LIVE:
            _log.info("TBSM - Setting history mode")
            self._data_manager.reader_mode = DataReaderMode.HISTORY
        else:
            _log.info("TBSM - Setting live mode")
            self._data_manager.reader_mode = DataReaderMode.LIVE
        return self._load_history

    def _tick(self) -> FsmTransition | None:
        if not self._led_manager.refresh_transition():
            return None
        _log.info("TBSM - Transition done")
        return self._done[self._data_manager.reader_mode]