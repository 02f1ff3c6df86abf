"""LED strips, the presenter that pushes them out, and cross-fading between frames."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from trainboard.led import Led, LedColor

MAX_SCALE = 255
MAX_LEDS = 512


def scale_color(html_color: int, scaling: int) -> int:
    """Scale each channel of a 0xRRGGBB colour by scaling/256, as LED drivers do."""
    factor = 1 + (scaling & 0xFF)
    red = ((html_color >> 16) & 0xFF) * factor >> 8
    green = ((html_color >> 8) & 0xFF) * factor >> 8
    blue = (html_color & 0xFF) * factor >> 8
    return (red << 16) | (green << 8) | blue


class LedStrip(ABC):
    """A strip of addressable LEDs."""

    @abstractmethod
    def init(self) -> None:
        """Prepare the strip for use."""

    @abstractmethod
    def size(self) -> int:
        """Number of LEDs on the strip."""

    @abstractmethod
    def clear_all(self) -> None:
        """Switch every LED off."""

    @abstractmethod
    def set(self, position: int, html_color: int, scaling: int) -> None:
        """Set one LED to a colour dimmed by scaling (0-255)."""

    @abstractmethod
    def test(self) -> None:
        """Switch every LED on in white."""


class LedPresenter(ABC):
    """Pushes the strips' contents to the LEDs."""

    @abstractmethod
    def show(self) -> None:
        """Display the current contents of all strips."""

    @abstractmethod
    def set_brightness(self, brightness: int) -> None:
        """Set the global brightness (0-255)."""


class BufferLedStrip(LedStrip):
    """A strip that keeps its LED colours in memory."""

    def __init__(self, n_leds: int) -> None:
        if n_leds <= 0:
            raise ValueError("a strip needs at least one LED")
        self._pixels = [0] * n_leds
        self.initialised = False

    @property
    def pixels(self) -> tuple[int, ...]:
        """The 0xRRGGBB colour of every LED, in order."""
        return tuple(self._pixels)

    def init(self) -> None:
        self.initialised = True

    def size(self) -> int:
        return len(self._pixels)

    def clear_all(self) -> None:
        self._pixels = [int(LedColor.BLACK)] * len(self._pixels)

    def set(self, position: int, html_color: int, scaling: int) -> None:
        if not 0 <= position < len(self._pixels):
            raise IndexError(f"LED position {position} is off the strip")
        self._pixels[position] = scale_color(html_color, scaling)

    def test(self) -> None:
        self._pixels = [int(LedColor.WHITE)] * len(self._pixels)


class BufferLedPresenter(LedPresenter):
    """A presenter that records brightness and how often it was shown."""

    def __init__(self, default_brightness: int) -> None:
        self.brightness = default_brightness
        self.show_count = 0

    def show(self) -> None:
        self.show_count += 1

    def set_brightness(self, brightness: int) -> None:
        if brightness != self.brightness:
            self.brightness = brightness
            self.show()


class TrainboardLedManager:
    """Displays frames of LEDs on several strips, cross-fading between them.

    During the first half of a transition, LEDs changing colour fade out;
    during the second half, new LEDs fade in and vanished LEDs fade out.
    """

    def __init__(
        self, strips: Sequence[LedStrip], presenter: LedPresenter, transition_duration: int
    ) -> None:
        self._strips = list(strips)
        self._presenter = presenter
        self._duration = transition_duration
        self._half_duration = transition_duration // 2
        self._count = 0
        self._transitioning = False
        self._status_color = LedColor.BLACK
        self._active: list[Led] = []
        self._fade_in: list[Led] = []
        self._fade_out: list[Led] = []
        self._swap: list[Led] = []

    @property
    def is_transitioning(self) -> bool:
        """Whether a transition is in progress."""
        return self._transitioning

    @property
    def active_leds(self) -> tuple[Led, ...]:
        """The LEDs of the frame being shown or faded to."""
        return tuple(self._active)

    def init(self) -> None:
        """Initialise every strip."""
        for strip in self._strips:
            strip.init()

    def set_status_led(self, color: LedColor) -> bool:
        """Clear the strips and light the first LED of each in a status colour.

        Returns False, doing nothing, while a transition is running.
        """
        if self._transitioning:
            return False
        self.clear_all_leds()
        self._status_color = color
        for strip in self._strips:
            strip.set(0, int(color), MAX_SCALE)
        self._presenter.show()
        return True

    def set_test_leds(self) -> bool:
        """Light every LED in white; False while a transition is running."""
        if self._transitioning:
            return False
        for strip in self._strips:
            strip.test()
        return True

    def set_leds(self, leds: Iterable[Led]) -> None:
        """Start a transition to a new frame; LEDs off any strip are ignored."""
        self._clear_status_leds()
        self._reset_transition()
        self._transitioning = True
        new = self._valid_leds(leds)
        for led in new:
            changed = next(
                (
                    active
                    for active in self._active
                    if active.id == led.id and active.html_color != led.html_color
                ),
                None,
            )
            if changed is not None:
                self._swap.append(changed)
                self._fade_in.append(led)
            elif led not in self._active:
                self._fade_in.append(led)
        self._fade_out.extend(led for led in self._active if led not in new)
        self._active = new

    def clear_all_leds(self) -> None:
        """Switch every LED off and forget the displayed frame."""
        for strip in self._strips:
            strip.clear_all()
        self._presenter.show()
        self._reset_transition()
        self._active = []

    def refresh_transition(self) -> bool:
        """Advance the transition by one tick; True when it has finished."""
        finished = False
        self._count += 1
        if self._count >= self._duration:
            self._fade_in_out(MAX_SCALE)
            finished = True
            self._transitioning = False
        elif self._count < self._half_duration:
            self._fade_out_swapped()
        else:
            scaling = MAX_SCALE * (self._count - self._half_duration) // self._half_duration
            self._fade_in_out(min(max(scaling, 0), MAX_SCALE))
        self._presenter.show()
        return finished

    def set_brightness(self, brightness: int) -> None:
        """Set the global brightness."""
        self._presenter.set_brightness(brightness)

    def _valid_leds(self, leds: Iterable[Led]) -> list[Led]:
        valid = [
            led
            for led in leds
            if led.strip_id < len(self._strips)
            and led.position < self._strips[led.strip_id].size()
        ]
        if len(valid) > MAX_LEDS:
            raise OverflowError(f"at most {MAX_LEDS} LEDs can be shown")
        return valid

    def _clear_status_leds(self) -> None:
        # Only clear when a status LED is lit, otherwise a train LED would go out.
        if self._status_color is not LedColor.BLACK:
            for strip in self._strips:
                strip.set(0, 0, 0)
            self._status_color = LedColor.BLACK

    def _reset_transition(self) -> None:
        self._count = 0
        self._transitioning = False
        self._fade_out.clear()
        self._swap.clear()
        self._fade_in.clear()

    def _fade_out_swapped(self) -> None:
        scaling = min(max(2 * self._count * MAX_SCALE // self._duration, 0), MAX_SCALE)
        for led in self._swap:
            self._set(led, MAX_SCALE - scaling)

    def _fade_in_out(self, scaling_in: int) -> None:
        for led in self._fade_out:
            self._set(led, MAX_SCALE - scaling_in)
        for led in self._fade_in:
            self._set(led, scaling_in)

    def _set(self, led: Led, scaling: int) -> None:
        self._strips[led.strip_id].set(led.position, led.html_color, scaling)