"""Result aggregation and the join barrier behind PingQueue.wait()."""

import logging
import queue
import threading
from dataclasses import dataclass

from .probe import Failure, FailureKind, Outcome, Success

logger = logging.getLogger(__name__)

_CLOSED = object()


class PendingCounter:
    """Counts submitted probes that have not produced an outcome yet."""

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def add(self, n: int = 1) -> None:
        with self._cond:
            self._count += n

    def done(self) -> None:
        with self._cond:
            if self._count <= 0:
                raise ValueError("PendingCounter released more times than it was added")
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the count is zero. Returns False if timeout expired first."""
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout)


@dataclass
class SweepStats:
    """Per-kind outcome counts for one sweep."""

    responded: int = 0
    timed_out: int = 0
    invalid: int = 0
    send_failed: int = 0
    transport_errors: int = 0

    @property
    def total(self) -> int:
        return self.responded + self.timed_out + self.invalid + self.send_failed + self.transport_errors

    def record(self, outcome: Outcome) -> None:
        if isinstance(outcome, Success):
            self.responded += 1
        elif outcome.kind is FailureKind.TIMED_OUT:
            self.timed_out += 1
        elif outcome.kind is FailureKind.INVALID:
            self.invalid += 1
        elif outcome.kind is FailureKind.SEND_FAILED:
            self.send_failed += 1
        else:
            self.transport_errors += 1

    def to_dict(self) -> dict:
        return {
            "responded": self.responded,
            "timed_out": self.timed_out,
            "invalid": self.invalid,
            "send_failed": self.send_failed,
            "transport_errors": self.transport_errors,
            "total": self.total,
        }


class Aggregator:
    """Single thread that drains outcomes, keeps responding hosts and
    releases one unit of the pending counter per outcome."""

    def __init__(self, outcomes: "queue.Queue[object]", pending: PendingCounter):
        self._outcomes = outcomes
        self._pending = pending
        self._hosts: list[str] = []
        self._stats = SweepStats()
        self._thread = threading.Thread(target=self._run, name="massping-aggregator", daemon=True)

    @property
    def hosts(self) -> list[str]:
        return list(self._hosts)

    @property
    def stats(self) -> SweepStats:
        return self._stats

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        """Close the outcome stream and wait for the thread to drain it."""
        self._outcomes.put(_CLOSED)
        self._thread.join()

    def _run(self) -> None:
        while True:
            outcome = self._outcomes.get()
            if outcome is _CLOSED:
                break
            self._handle(outcome)
            self._pending.done()

    def _handle(self, outcome: Outcome) -> None:
        self._stats.record(outcome)
        if isinstance(outcome, Success):
            self._hosts.append(outcome.address)
            logger.debug("Host %s is up", outcome.address)
        elif isinstance(outcome, Failure):
            logger.debug("Probe to %s ended: %s (%s)", outcome.address, outcome.kind.value, outcome.detail)
