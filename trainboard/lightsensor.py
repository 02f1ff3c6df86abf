"""Ambient light measurement driving the LEDs' brightness."""

from __future__ import annotations

from collections.abc import Callable

from trainboard.signals import Signal

_MAX_BRIGHTNESS = 255


class LightSensor:
    """Low-pass filters ambient light readings into a brightness level.

    read_channels returns the (visible and infrared, infrared) readings, or
    None when no new measurement is available. Passing None for read_channels
    means no sensor is fitted; the brightness then stays at its default.
    """

    def __init__(
        self,
        read_channels: Callable[[], tuple[int, int] | None] | None,
        default_brightness: int,
        minimum_brightness: int,
        update_rate_ms: int,
        tick_period_ms: int,
    ) -> None:
        self._read_channels = read_channels
        self._minimum = minimum_brightness
        self._max_count = update_rate_ms // tick_period_ms
        self._count = 0
        self._brightness = default_brightness
        # Fixed point with eight fractional bits.
        self._filtered = default_brightness << 8

    def dispatch(self, event: int) -> None:
        """Handle an event; a new reading is taken every update period."""
        if self._read_channels is None or event != Signal.TICK:
            return
        if self._count < self._max_count:
            self._count += 1
            return
        self._count = 0
        reading = self._read_channels()
        if reading is None:
            return
        visible_and_ir, _ir = reading
        self._filtered = (31 * self._filtered + (visible_and_ir & 0xFFFF)) // 32
        self._brightness = (self._filtered & 0xFFFF) >> 8

    def brightness(self) -> int:
        """The current brightness, never below the configured minimum."""
        return min(max(self._brightness, self._minimum), _MAX_BRIGHTNESS)