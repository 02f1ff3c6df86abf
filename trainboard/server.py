"""HTTP access to the trainboard server: frame data and reachability checks."""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from collections.abc import Callable
from typing import Any

PING_PAYLOAD = b"\xbe\xef"
PING_TIMEOUT_S = 5.0

_log = logging.getLogger(__name__)


class ServerError(OSError):
    """The server could not be reached."""


def is_ping_payload(payload: bytes) -> bool:
    """Whether a ping answer is the expected two-byte payload."""
    return bytes(payload) == PING_PAYLOAD


class ServerClient:
    """Fetches LED frames from the server and checks that it answers."""

    def __init__(
        self,
        data_url: str,
        ping_url: str,
        fw_version: str,
        hw_version: str,
        mac: str,
        history_frames: int,
        opener: Callable[..., Any] = urllib.request.urlopen,
    ) -> None:
        self.data_url = data_url
        self.ping_url = ping_url
        self.fw_version = fw_version
        self.hw_version = hw_version
        self.mac = mac
        self.history_frames = history_frames
        self._opener = opener

    def get_data(self, max_length: int) -> bytes:
        """The current frame, truncated to max_length; empty when the request fails."""
        return self._get_data(max_length, history=False)

    def get_history_data(self, max_length: int) -> bytes:
        """The frame history, truncated to max_length; empty when the request fails."""
        return self._get_data(max_length, history=True)

    def ping(self) -> bool:
        """Whether the server answered the ping with the expected payload."""
        try:
            payload = self._fetch(urllib.request.Request(self.ping_url), timeout=PING_TIMEOUT_S)
        except ServerError:
            return False
        return is_ping_payload(payload)

    def _get_data(self, max_length: int, history: bool) -> bytes:
        request = urllib.request.Request(self.data_url)
        request.add_header("fwv", self.fw_version)
        request.add_header("hwv", self.hw_version)
        request.add_header("mac", self.mac)
        if history:
            request.add_header("com", f"history_{self.history_frames}")
        try:
            payload = self._fetch(request)
        except ServerError as error:
            _log.warning("Error getting data from server: %s", error)
            return b""
        _log.debug("Received data length: %d bytes", len(payload))
        data = payload[: max(max_length, 0)]
        _log.debug("Effective data length: %d bytes", len(data))
        return data

    def _fetch(self, request: urllib.request.Request, **kwargs: Any) -> bytes:
        request.add_header("Connection", "close")
        try:
            with self._opener(request, **kwargs) as response:
                return bytes(response.read())
        except urllib.error.HTTPError as error:
            # Any HTTP answer counts as a response; its body is used as is.
            try:
                return bytes(error.read())
            finally:
                error.close()
        except (urllib.error.URLError, OSError) as error:
            raise ServerError(str(error)) from error