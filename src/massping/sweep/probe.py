"""Probe records, per-probe reply mailboxes and tagged outcomes."""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum

from .icmp import EchoMessage


class FailureKind(Enum):
    """Why a probe ended without a matching reply."""

    SEND_FAILED = "send_failed"
    TIMED_OUT = "timed_out"
    INVALID = "invalid"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class Success:
    """A target answered its echo request."""

    address: str


@dataclass(frozen=True)
class Failure:
    """A target produced no valid reply."""

    address: str
    kind: FailureKind
    detail: str | None = None


Outcome = Success | Failure


@dataclass(frozen=True)
class Delivery:
    """What the reader handed to a waiting probe."""

    message: EchoMessage | None = None
    source: str | None = None
    error: str | None = None


class Mailbox:
    """Single-slot wait point for one probe. The first delivery wins."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._delivery: Delivery | None = None

    def deliver(self, message: EchoMessage, source: str) -> bool:
        return self._put(Delivery(message=message, source=source))

    def fail(self, error: str) -> bool:
        return self._put(Delivery(error=error))

    def _put(self, delivery: Delivery) -> bool:
        with self._lock:
            if self._delivery is not None:
                return False
            self._delivery = delivery
        self._event.set()
        return True

    def wait_until(self, deadline: float) -> Delivery | None:
        """Wait until something is delivered or the monotonic deadline passes."""
        self._event.wait(max(deadline - time.monotonic(), 0.0))
        with self._lock:
            return self._delivery


@dataclass(frozen=True)
class Probe:
    """One outstanding echo request."""

    identifier: int
    sequence: int
    destination: str
    mailbox: Mailbox = field(default_factory=Mailbox, compare=False, repr=False)

    @property
    def token(self) -> tuple[int, int]:
        return (self.identifier, self.sequence)


def match_reply(probe: Probe, message: EchoMessage, source: str) -> Outcome:
    """Check a delivered message against the probe that was waiting for it."""
    if not message.is_echo_reply:
        return Failure(probe.destination, FailureKind.INVALID, f"unexpected ICMP type {message.type}")
    if message.token != probe.token:
        return Failure(
            probe.destination,
            FailureKind.INVALID,
            f"id/seq {message.token} does not match {probe.token}",
        )
    if source != probe.destination:
        return Failure(probe.destination, FailureKind.INVALID, f"reply came from {source}")
    return Success(source)
