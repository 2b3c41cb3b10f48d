"""Shared fixtures: an in-memory transport that answers configured hosts."""

import queue
import threading
import time
from collections.abc import Callable

import pytest
from scapy.all import ICMP

from massping.core.config import Config, set_config
from massping.core.exceptions import TimeoutError, TransportError
from massping.sweep.icmp import ICMP_ECHO_REPLY, EchoMessage, parse_message
from massping.sweep.probe_queue import PingQueue


def echo_reply(identifier: int, sequence: int) -> bytes:
    return bytes(ICMP(type=ICMP_ECHO_REPLY, code=0, id=identifier, seq=sequence))


Responder = Callable[[str, EchoMessage], list[tuple[bytes, str]]]


class FakeTransport:
    """Loops echo requests back as replies for hosts in ``responsive``."""

    def __init__(
        self,
        responsive: set[str] | None = None,
        fail_send: set[str] | None = None,
        fail_receive: bool = False,
        responder: Responder | None = None,
    ):
        self.responsive = responsive or set()
        self.fail_send = fail_send or set()
        self.fail_receive = fail_receive
        self.responder = responder
        self.sent: list[tuple[str, int, int]] = []
        self.close_calls = 0
        self._inbox: queue.Queue[tuple[bytes, str]] = queue.Queue()
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def send(self, payload: bytes, destination: str) -> None:
        if destination in self.fail_send:
            raise TransportError(f"Error whilst sending echo message to {destination}", "network is unreachable")

        message = parse_message(payload)
        with self._lock:
            self.sent.append((destination, message.identifier, message.sequence))

        if self.responder is not None:
            replies = self.responder(destination, message)
        elif destination in self.responsive:
            replies = [(echo_reply(message.identifier, message.sequence), destination)]
        else:
            replies = []

        for reply in replies:
            self._inbox.put(reply)

    def inject(self, data: bytes, source: str) -> None:
        self._inbox.put((data, source))

    def receive_before(self, deadline: float) -> tuple[bytes, str]:
        if self.closed:
            raise TransportError("Transport closed, cannot receive")
        if self.fail_receive:
            raise TransportError("Couldn't receive response", "socket error")
        try:
            return self._inbox.get(timeout=max(deadline - time.monotonic(), 0.0))
        except queue.Empty:
            raise TimeoutError("ICMP receive", 0.0) from None

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from built-in defaults, not a local config file."""
    config = Config()
    set_config(config)
    yield config
    set_config(Config())


@pytest.fixture
def transport():
    return FakeTransport(responsive={"10.0.0.1", "10.0.0.2"})


@pytest.fixture
def make_queue():
    """Build PingQueues on fake transports and make sure each one is joined."""
    queues: list[PingQueue] = []

    def factory(transport: FakeTransport, **kwargs) -> PingQueue:
        kwargs.setdefault("timeout", 0.2)
        kwargs.setdefault("poll_interval", 0.01)
        pq = PingQueue(transport, **kwargs)
        queues.append(pq)
        return pq

    yield factory

    for pq in queues:
        pq.wait()
