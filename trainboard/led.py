"""LED identity and colour."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

_STRIP_SHIFT = 8
_STRIP_MASK = 0xFF00
_POSITION_MASK = 0x00FF
_COLOR_MASK = 0xFFFFFF


class LedColor(IntEnum):
    """Colours used for status LEDs, in HTML 0xRRGGBB form."""

    BLACK = 0x000000
    WHITE = 0xFFFFFF
    RED = 0xFF0000
    BLUE = 0x0000FF
    GREEN = 0x00FF00
    YELLOW = 0xF7DC6F
    PURPLE = 0x8E44AD


@dataclass(frozen=True)
class Led:
    """One lit LED: a 16-bit id (strip in the high byte) and a colour.

    Two LEDs are equal when their id and colour match; the scale is ignored.
    """

    id: int = 0
    color: int = 0
    scale: int = field(default=254, compare=False)

    @property
    def strip_id(self) -> int:
        """Index of the strip this LED belongs to."""
        return (self.id & _STRIP_MASK) >> _STRIP_SHIFT

    @property
    def position(self) -> int:
        """Position of the LED on its strip."""
        return self.id & _POSITION_MASK

    @property
    def html_color(self) -> int:
        """The colour as a 24-bit 0xRRGGBB value."""
        return self.color & _COLOR_MASK