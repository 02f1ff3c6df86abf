"""Watches Wi-Fi and server reachability and reports changes as events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from trainboard.signals import EventQueue, Signal

CONNECTION_CHECK_INTERVAL_S = 30
DISCONNECTION_CHECK_INTERVAL_S = 60

_log = logging.getLogger(__name__)


class ConnectionState(Enum):
    """What is known to work."""

    WIFI_NOK = "wifi_nok"
    SERVER_NOK = "server_nok"
    SERVER_OK = "server_ok"


class ConnectionListener:
    """On every tick, checks the network and pushes connection events.

    ping returns True, False, or None when no answer could be obtained.
    """

    def __init__(
        self,
        event_queue: EventQueue,
        is_connected: Callable[[], bool],
        ping: Callable[[], bool | None],
        disconnect: Callable[[], None],
        tick_period_ms: int,
    ) -> None:
        self._queue = event_queue
        self._is_connected = is_connected
        self._ping = ping
        self._disconnect = disconnect
        self._tick_period_ms = tick_period_ms
        self._count = 0
        self.state = ConnectionState.WIFI_NOK

    def dispatch(self, event: int) -> None:
        """Handle an event; only ticks are of interest."""
        if event != Signal.TICK:
            return
        if self.state is ConnectionState.WIFI_NOK:
            self._wifi_nok()
        elif self.state is ConnectionState.SERVER_NOK:
            self._server_nok()
        else:
            self._server_ok()

    def _wifi_nok(self) -> None:
        if self._is_connected():
            _log.info("Connection listener - Network up")
            self.state = ConnectionState.SERVER_NOK
            self._queue.push(Signal.NETWORK_UP)

    def _server_nok(self) -> None:
        if not self._is_connected():
            self._network_down()
        elif self._elapsed(CONNECTION_CHECK_INTERVAL_S) and self._reachable():
            _log.info("Connection listener - Connected")
            self.state = ConnectionState.SERVER_OK
            self._queue.push(Signal.CONNECTED)

    def _server_ok(self) -> None:
        if not self._is_connected():
            self._network_down()
        elif self._elapsed(DISCONNECTION_CHECK_INTERVAL_S) and not self._reachable():
            _log.info("Connection listener - Disconnected")
            self.state = ConnectionState.SERVER_NOK
            self._queue.push(Signal.DISCONNECTED)

    def _reachable(self) -> bool:
        return bool(self._ping())

    def _elapsed(self, seconds: int) -> bool:
        self._count += 1
        if self._count > seconds * 1000 // self._tick_period_ms:
            self._count = 0
            return True
        return False

    def _network_down(self) -> None:
        _log.info("Connection listener - Network down")
        self._disconnect()  # otherwise the link reconnects on its own
        self.state = ConnectionState.WIFI_NOK
        self._queue.push(Signal.NETWORK_DOWN)