from collections import deque

from trainboard.datastore import (
    DataManager,
    DataReaderMode,
    DataWriterMode,
    HistoryDataStoreReader,
    HistoryDataStoreWriter,
    LiveDataStoreReader,
    LiveDataStoreWriter,
)


def make_frame(n, fill):
    return bytes([0, n]) + bytes([fill]) * (5 * n)


FRAMES = [make_frame(1, 1), make_frame(2, 2), make_frame(3, 3)]


def test_live_round_trip():
    store = deque(maxlen=3)
    writer = LiveDataStoreWriter(store, 64)
    reader = LiveDataStoreReader(store)
    assert writer.save(FRAMES[0])
    assert writer.save(FRAMES[1])
    assert reader.read(64) == FRAMES[1]


def test_live_writer_rejects_empty_and_large():
    store = deque(maxlen=3)
    writer = LiveDataStoreWriter(store, 10)
    assert not writer.save(b"")
    assert not writer.save(FRAMES[2])
    assert len(store) == 0


def test_live_reader_limits():
    store = deque([FRAMES[2]], maxlen=3)
    reader = LiveDataStoreReader(store)
    assert reader.read(0) == b""
    assert reader.read(len(FRAMES[2]) - 1) == b""
    assert LiveDataStoreReader(deque()).read(64) == b""


def test_live_writer_overwrites_oldest_when_full():
    store = deque(maxlen=2)
    writer = LiveDataStoreWriter(store, 64)
    for frame in FRAMES:
        writer.save(frame)
    assert list(store) == FRAMES[1:]


def test_history_write_and_cycle():
    store = deque(maxlen=3)
    writer = HistoryDataStoreWriter(store, 3, 64)
    assert writer.save(b"".join(FRAMES))
    reader = HistoryDataStoreReader(store, 3)
    assert [reader.read(64) for _ in range(4)] == FRAMES + FRAMES[:1]
    reader.reset()
    assert reader.read(64) == FRAMES[0]


def test_history_write_incomplete():
    store = deque(maxlen=3)
    writer = HistoryDataStoreWriter(store, 3, 64)
    assert not writer.save(b"".join(FRAMES[:2]))
    assert list(store) == FRAMES[:2]


def test_history_write_truncated_frame_stops():
    store = deque(maxlen=3)
    writer = HistoryDataStoreWriter(store, 3, 64)
    assert not writer.save(b"".join(FRAMES)[:-1])
    assert list(store) == FRAMES[:2]


def test_history_write_rejects_too_long():
    store = deque([FRAMES[0]], maxlen=2)
    writer = HistoryDataStoreWriter(store, 2, 5)
    assert not writer.save(b"".join(FRAMES))
    assert list(store) == [FRAMES[0]]


def test_history_reader_does_not_advance_when_too_small():
    reader = HistoryDataStoreReader(FRAMES, 3)
    assert reader.read(len(FRAMES[0]) - 1) == b""
    assert reader.read(64) == FRAMES[0]


def test_manager_defaults_and_modes():
    manager = DataManager(FRAMES, 3, 64)
    assert manager.reader_mode is DataReaderMode.LIVE
    assert manager.writer_mode is DataWriterMode.MULTIPLE
    assert isinstance(manager.get_writer(), HistoryDataStoreWriter)
    manager.writer_mode = DataWriterMode.SINGLE
    assert isinstance(manager.get_writer(), LiveDataStoreWriter)


def test_manager_offline_reads_fake_frames():
    manager = DataManager(FRAMES, 3, 64)
    manager.reader_mode = DataReaderMode.OFFLINE
    reader = manager.get_reader()
    assert [reader.read(64) for _ in range(3)] == FRAMES


def test_manager_write_then_live_and_history_read():
    manager = DataManager([], 3, 64)
    assert manager.get_writer().save(b"".join(FRAMES))
    assert manager.get_reader().read(64) == FRAMES[-1]
    manager.reader_mode = DataReaderMode.HISTORY
    assert manager.get_reader().read(64) == FRAMES[0]


def test_manager_reset():
    manager = DataManager([], 3, 64)
    manager.get_writer().save(b"".join(FRAMES))
    manager.reader_mode = DataReaderMode.HISTORY
    manager.get_reader().read(64)
    manager.writer_mode = DataWriterMode.SINGLE
    manager.reset()
    assert manager.frames == ()
    assert manager.reader_mode is DataReaderMode.LIVE
    assert manager.writer_mode is DataWriterMode.MULTIPLE
    manager.get_writer().save(b"".join(FRAMES))
    manager.reader_mode = DataReaderMode.HISTORY
    assert manager.get_reader().read(64) == FRAMES[0]