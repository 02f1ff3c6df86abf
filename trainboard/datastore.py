"""Storage of received frames and the readers and writers that use it."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from enum import Enum

from trainboard.dataconv import BYTES_IN_HEADER, BYTES_PER_LED


class DataReaderMode(Enum):
    """Where displayed frames come from."""

    LIVE = "live"
    HISTORY = "history"
    OFFLINE = "offline"


class DataWriterMode(Enum):
    """How data received from the server is stored."""

    SINGLE = "single"
    MULTIPLE = "multiple"


class LiveDataStoreReader:
    """Reads the newest stored frame."""

    def __init__(self, frames: Sequence[bytes]) -> None:
        self._frames = frames

    def read(self, max_length: int) -> bytes:
        """The newest frame, or empty bytes if none fits in max_length."""
        if max_length == 0 or not self._frames:
            return b""
        newest = self._frames[-1]
        if len(newest) > max_length:
            return b""
        return bytes(newest)


class LiveDataStoreWriter:
    """Adds single frames to the store."""

    def __init__(self, frames: deque[bytes], frame_size: int) -> None:
        self._frames = frames
        self._frame_size = frame_size

    def save(self, data: bytes) -> bool:
        """Store one frame; False when it is empty or larger than a frame."""
        if not data or len(data) > self._frame_size:
            return False
        self._frames.append(bytes(data))
        return True


class HistoryDataStoreReader:
    """Reads stored frames one after another, wrapping after the history length."""

    def __init__(self, frames: Sequence[bytes], history_frames: int) -> None:
        self._frames = frames
        self._history_frames = history_frames
        self._index = 0

    def read(self, max_length: int) -> bytes:
        """The next frame, or empty bytes (without advancing) if it does not fit."""
        frame = self._frames[self._index] if self._index < len(self._frames) else b""
        if max_length == 0 or len(frame) > max_length:
            return b""
        self._index = (self._index + 1) % self._history_frames
        return bytes(frame)

    def reset(self) -> None:
        """Start reading again from the oldest frame."""
        self._index = 0


class HistoryDataStoreWriter:
    """Replaces the store with a block of consecutive frames."""

    def __init__(self, frames: deque[bytes], history_frames: int, frame_size: int) -> None:
        self._frames = frames
        self._history_frames = history_frames
        self._frame_size = frame_size

    def save(self, data: bytes) -> bool:
        """Split data into frames and store them.

        Returns True only when a full history of frames was stored.
        """
        if not data or len(data) > self._frame_size * self._history_frames:
            return False
        self._frames.clear()
        start = 0
        while len(self._frames) < self._history_frames and start + BYTES_IN_HEADER < len(data):
            length = BYTES_IN_HEADER + data[start + 1] * BYTES_PER_LED
            if start + length > len(data):
                break
            self._frames.append(bytes(data[start : start + length]))
            start += length
        return len(self._frames) == self._history_frames


class DataManager:
    """Holds the frame store and hands out the reader and writer for the current modes."""

    def __init__(self, fake_frames: Sequence[bytes], history_frames: int, frame_size: int) -> None:
        self.reader_mode = DataReaderMode.LIVE
        self.writer_mode = DataWriterMode.MULTIPLE
        self._frames: deque[bytes] = deque(maxlen=history_frames)
        self._live_writer = LiveDataStoreWriter(self._frames, frame_size)
        self._live_reader = LiveDataStoreReader(self._frames)
        self._history_writer = HistoryDataStoreWriter(self._frames, history_frames, frame_size)
        self._history_reader = HistoryDataStoreReader(self._frames, history_frames)
        self._fake_reader = HistoryDataStoreReader(tuple(fake_frames), history_frames)

    @property
    def frames(self) -> tuple[bytes, ...]:
        """The frames currently stored, oldest first."""
        return tuple(self._frames)

    def reset(self) -> None:
        """Drop stored frames and return to the default modes."""
        self.reader_mode = DataReaderMode.LIVE
        self.writer_mode = DataWriterMode.MULTIPLE
        self._frames.clear()
        self._history_reader.reset()

    def get_writer(self) -> LiveDataStoreWriter | HistoryDataStoreWriter:
        """The writer for the current writer mode."""
        if self.writer_mode is DataWriterMode.SINGLE:
            return self._live_writer
        return self._history_writer

    def get_reader(self) -> LiveDataStoreReader | HistoryDataStoreReader:
        """The reader for the current reader mode."""
        if self.reader_mode is DataReaderMode.LIVE:
            return self._live_reader
        if self.reader_mode is DataReaderMode.HISTORY:
            return self._history_reader
        return self._fake_reader