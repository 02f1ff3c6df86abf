import io
import urllib.error
from email.message import Message

from trainboard.server import PING_PAYLOAD, ServerClient, is_ping_payload


class FakeResponse:
    def __init__(self, body):
        self._body = body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def read(self):
        return self._body


class FakeOpener:
    def __init__(self, body=b"", error=None):
        self.body = body
        self.error = error
        self.requests = []
        self.kwargs = []

    def __call__(self, request, **kwargs):
        self.requests.append(request)
        self.kwargs.append(kwargs)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.body)


def make_client(opener):
    return ServerClient(
        "https://example.com/data",
        "https://example.com/ping",
        "1.2.3",
        "v1.2",
        "00:00:5E:00:53:01",
        42,
        opener=opener,
    )


def test_is_ping_payload():
    assert is_ping_payload(b"\xbe\xef")
    assert not is_ping_payload(b"\xbe")
    assert not is_ping_payload(b"\xbe\xef\x00")
    assert not is_ping_payload(b"\xef\xbe")


def test_get_data_returns_body_and_sends_headers():
    opener = FakeOpener(body=b"\x00\x01\x00\x02\xff\x00\x00")
    client = make_client(opener)
    assert client.get_data(100) == b"\x00\x01\x00\x02\xff\x00\x00"
    request = opener.requests[0]
    assert request.full_url == "https://example.com/data"
    assert request.get_header("Fwv") == "1.2.3"
    assert request.get_header("Hwv") == "v1.2"
    assert request.get_header("Mac") == "00:00:5E:00:53:01"
    assert request.get_header("Com") is None


def test_get_history_data_sends_history_command():
    opener = FakeOpener(body=b"abc")
    client = make_client(opener)
    assert client.get_history_data(100) == b"abc"
    assert opener.requests[0].get_header("Com") == "history_42"


def test_get_data_truncates_to_max_length():
    client = make_client(FakeOpener(body=b"0123456789"))
    assert client.get_data(4) == b"0123"


def test_get_data_connection_failure_returns_empty():
    client = make_client(FakeOpener(error=urllib.error.URLError("down")))
    assert client.get_data(100) == b""


def test_get_data_http_error_body_is_used():
    error = urllib.error.HTTPError(
        "https://example.com/data", 404, "Not Found", Message(), io.BytesIO(b"missing")
    )
    client = make_client(FakeOpener(error=error))
    assert client.get_data(100) == b"missing"


def test_ping_success_with_timeout():
    opener = FakeOpener(body=PING_PAYLOAD)
    client = make_client(opener)
    assert client.ping() is True
    assert opener.requests[0].full_url == "https://example.com/ping"
    assert opener.kwargs[0]["timeout"] > 0


def test_ping_wrong_payload():
    assert make_client(FakeOpener(body=b"no")).ping() is False


def test_ping_connection_failure():
    assert make_client(FakeOpener(error=OSError("unreachable"))).ping() is False