from trainboard.connection import ConnectionListener, ConnectionState
from trainboard.signals import EventQueue, Signal


class Network:
    def __init__(self, connected=False, reachable=True):
        self.connected = connected
        self.reachable = reachable
        self.pings = 0
        self.disconnects = 0

    def is_connected(self):
        return self.connected

    def ping(self):
        self.pings += 1
        return self.reachable

    def disconnect(self):
        self.disconnects += 1


def make_listener(network, tick_period_ms=1000):
    queue = EventQueue(64)
    listener = ConnectionListener(
        queue, network.is_connected, network.ping, network.disconnect, tick_period_ms
    )
    return listener, queue


def tick_until_change(listener):
    start = listener.state
    for ticks in range(1, 10000):
        listener.dispatch(Signal.TICK)
        if listener.state is not start:
            return ticks
    raise AssertionError("state never changed")


def test_starts_without_wifi_and_ignores_other_events():
    network = Network(connected=True)
    listener, queue = make_listener(network)
    listener.dispatch(Signal.SHORT_PUSH)
    assert listener.state is ConnectionState.WIFI_NOK
    assert len(queue) == 0


def test_network_up_on_first_tick():
    network = Network(connected=True)
    listener, queue = make_listener(network)
    listener.dispatch(Signal.TICK)
    assert listener.state is ConnectionState.SERVER_NOK
    assert list(queue) == [Signal.NETWORK_UP]


def test_connects_after_check_interval():
    network = Network(connected=True)
    listener, queue = make_listener(network)
    listener.dispatch(Signal.TICK)
    assert tick_until_change(listener) == 31
    assert listener.state is ConnectionState.SERVER_OK
    assert network.pings == 1
    assert list(queue) == [Signal.NETWORK_UP, Signal.CONNECTED]


def test_unreachable_server_stays_disconnected():
    network = Network(connected=True, reachable=None)
    listener, _ = make_listener(network)
    for _ in range(200):
        listener.dispatch(Signal.TICK)
    assert listener.state is ConnectionState.SERVER_NOK
    assert network.pings > 1


def test_disconnect_detected_with_longer_interval():
    network = Network(connected=True)
    listener, queue = make_listener(network)
    listener.dispatch(Signal.TICK)
    connect_ticks = tick_until_change(listener)
    network.reachable = False
    disconnect_ticks = tick_until_change(listener)
    assert disconnect_ticks > connect_ticks
    assert listener.state is ConnectionState.SERVER_NOK
    assert list(queue)[-1] == Signal.DISCONNECTED


def test_wifi_loss_reports_network_down():
    network = Network(connected=True)
    listener, queue = make_listener(network)
    listener.dispatch(Signal.TICK)
    network.connected = False
    listener.dispatch(Signal.TICK)
    assert listener.state is ConnectionState.WIFI_NOK
    assert network.disconnects == 1
    assert list(queue) == [Signal.NETWORK_UP, Signal.NETWORK_DOWN]


def test_wifi_loss_while_connected():
    network = Network(connected=True)
    listener, queue = make_listener(network)
    listener.dispatch(Signal.TICK)
    tick_until_change(listener)
    network.connected = False
    listener.dispatch(Signal.TICK)
    assert listener.state is ConnectionState.WIFI_NOK
    assert list(queue)[-1] == Signal.NETWORK_DOWN