"""Validation and decoding of LED frames received from the server.

A frame is a two-byte big-endian LED count followed by five bytes per LED:
strip id, position on the strip, red, green and blue.
"""

from __future__ import annotations

import logging

from trainboard.led import Led

BYTES_IN_HEADER = 2
BYTES_PER_LED = 5

_log = logging.getLogger(__name__)


def led_count(data: bytes) -> int:
    """The number of LEDs announced in a frame header."""
    if len(data) < BYTES_IN_HEADER:
        raise ValueError("frame is shorter than its header")
    return (data[0] << 8) | data[1]


def _frame_length(count: int) -> int:
    return BYTES_IN_HEADER + BYTES_PER_LED * count


def _is_empty_or_too_long(data: bytes, max_length: int) -> bool:
    if not data:
        _log.error("DataConverter - Data empty!")
        return True
    if len(data) > max_length:
        _log.error("DataConverter - Data too long: %d > %d", len(data), max_length)
        return True
    return False


def is_data_valid(data: bytes, max_length: int) -> bool:
    """Whether data is a single well-formed frame of at most max_length bytes."""
    if _is_empty_or_too_long(data, max_length):
        return False
    if len(data) < BYTES_IN_HEADER:
        _log.error("DataConverter - Data shorter than header")
        return False
    expected = _frame_length(led_count(data))
    if len(data) != expected:
        _log.error("DataConverter - Wrong data length: %d != %d", len(data), expected)
        return False
    return True


def is_history_data_valid(data: bytes, history_frames: int, frame_size: int) -> bool:
    """Whether data is exactly history_frames well-formed frames back to back."""
    if _is_empty_or_too_long(data, history_frames * frame_size):
        return False
    start = 0
    frame_count = 0
    valid = True
    while valid and frame_count < history_frames and start + BYTES_IN_HEADER < len(data):
        length = _frame_length(led_count(data[start:]))
        valid = is_data_valid(data[start : start + length], frame_size)
        frame_count += 1
        start += length
    return valid and frame_count == history_frames and start == len(data)


def data_to_leds(data: bytes, max_leds: int) -> list[Led] | None:
    """Decode a frame into LEDs.

    Returns None when there is no input to decode, and an empty list when the
    frame length does not match its header or it holds more than max_leds LEDs.
    """
    if not data or max_leds == 0 or len(data) < BYTES_IN_HEADER:
        _log.debug("DataConv - Data invalid")
        return None
    count = led_count(data)
    if len(data) != _frame_length(count) or count > max_leds:
        _log.debug("DataConv - Invalid data size or number of leds")
        return []
    leds = []
    for pos in range(BYTES_IN_HEADER, len(data), BYTES_PER_LED):
        strip, position, red, green, blue = data[pos : pos + BYTES_PER_LED]
        leds.append(Led((strip << 8) | position, (red << 16) | (green << 8) | blue))
    return leds