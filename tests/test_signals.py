import pytest

from trainboard.signals import EventQueue, Signal


def test_signal_order_follows_declaration():
    assert Signal(0) is Signal.TICK
    assert Signal(len(Signal) - 1) is Signal.NO_UPDATE
    assert list(Signal) == sorted(Signal)


def test_queue_is_fifo():
    queue = EventQueue(4)
    queue.push(Signal.PING)
    queue.push(Signal.FAKE)
    assert queue.pop() == Signal.PING
    assert queue.pop() == Signal.FAKE
    assert len(queue) == 0


def test_queue_overflow():
    queue = EventQueue(2)
    queue.push(Signal.TICK)
    queue.push(Signal.TICK)
    with pytest.raises(OverflowError):
        queue.push(Signal.TICK)
    assert len(queue) == 2


def test_pop_empty_raises():
    with pytest.raises(IndexError):
        EventQueue(1).pop()


def test_iter_does_not_consume():
    queue = EventQueue(3)
    for event in (Signal.DATA_OK, Signal.RETRY):
        queue.push(event)
    assert list(queue) == [Signal.DATA_OK, Signal.RETRY]
    assert len(queue) == 2


def test_invalid_size():
    with pytest.raises(ValueError):
        EventQueue(0)