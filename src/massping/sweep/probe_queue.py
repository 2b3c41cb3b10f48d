"""Concurrent ICMP echo probe queue.

A ``PingQueue`` owns one raw socket for the lifetime of a sweep. Every
``ping()`` runs on a worker thread that sends the echo request and then
waits on the probe's own mailbox. A single reader thread owns all reads
from the socket and routes echo replies to mailboxes by their
(identifier, sequence) token, so concurrent probes never share a socket
deadline and two probes to the same address stay independent.
"""

import logging
import queue
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from ..core.config import get_config
from ..core.exceptions import (
    MassPingError,
    ScanError,
    TimeoutError,
    TransportError,
    ValidationError,
)
from ..core.utils import validate_ip, validate_timeout
from .aggregator import Aggregator, PendingCounter, SweepStats
from .icmp import MAX_FIELD, build_echo_request, parse_message
from .probe import Failure, FailureKind, Outcome, Probe, match_reply
from .registry import ProbeRegistry
from .transport import Transport

logger = logging.getLogger(__name__)


class PingQueue:
    """Submit targets with ``ping()``, collect responders with ``wait()``."""

    def __init__(
        self,
        transport: Transport,
        timeout: float | None = None,
        max_in_flight: int | None = None,
        sweep_deadline: float | None = None,
        poll_interval: float | None = None,
    ):
        config = get_config().sweep
        self._timeout = validate_timeout(timeout if timeout is not None else config.timeout)
        self._timeout_lock = threading.Lock()
        self._sweep_deadline = sweep_deadline if sweep_deadline is not None else config.sweep_deadline
        self._poll_interval = validate_timeout(
            poll_interval if poll_interval is not None else config.poll_interval
        )
        max_workers = max_in_flight if max_in_flight is not None else config.max_in_flight
        if max_workers < 1:
            raise ValidationError(f"max_in_flight must be at least 1: {max_workers}")

        self._transport = transport
        self._registry = ProbeRegistry()
        self._pending = PendingCounter()
        self._outcomes: queue.Queue[object] = queue.Queue()
        self._aggregator = Aggregator(self._outcomes, self._pending)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="massping-probe")

        self._state_lock = threading.Lock()
        self._finished = False
        self._wait_lock = threading.Lock()
        self._hosts: list[str] | None = None

        self._stop = threading.Event()
        self._reader_error: str | None = None
        self._reader = threading.Thread(target=self._read_replies, name="massping-reader", daemon=True)

        self._aggregator.start()
        self._reader.start()

    @classmethod
    def new(cls, timeout: float | None = None, **kwargs) -> "PingQueue":
        """Open the raw socket and start a sweep.

        Raises:
            PermissionError: raw sockets are not permitted for this process
            TransportError: the OS refused the socket for another reason
        """
        transport = Transport.open(receive_buffer=get_config().sweep.receive_buffer)
        try:
            return cls(transport, timeout=timeout, **kwargs)
        except Exception:
            transport.close()
            raise

    @property
    def timeout(self) -> float:
        with self._timeout_lock:
            return self._timeout

    def set_timeout(self, seconds: float) -> None:
        """Change the reply wait for probes that start waiting from now on."""
        value = validate_timeout(seconds)
        with self._timeout_lock:
            self._timeout = value

    @property
    def pending(self) -> int:
        return self._pending.count

    @property
    def stats(self) -> SweepStats:
        return self._aggregator.stats

    def ping(self, target: str) -> None:
        """Submit one IPv4 address. Returns immediately.

        An address that does not parse is recorded as a send failure.
        """
        try:
            address = str(validate_ip(target))
        except ValidationError as e:
            address = str(target)
            invalid = e
        else:
            invalid = None

        with self._state_lock:
            if self._finished:
                raise ScanError(f"Cannot ping {address}", "queue already joined with wait()")
            self._pending.add()
            if invalid is not None:
                self._outcomes.put(Failure(address, FailureKind.SEND_FAILED, str(invalid)))
                return
            try:
                self._executor.submit(self._run_probe, address)
            except RuntimeError as e:
                self._pending.done()
                raise ScanError(f"Cannot ping {address}", str(e)) from e

    def wait(self, deadline: float | None = None) -> list[str]:
        """
        Block until every submitted probe has an outcome.

        Args:
            deadline: Upper bound in seconds on the whole join. Defaults to
                the configured sweep deadline; None waits indefinitely.

        Returns:
            Responding addresses in completion order
        """
        with self._wait_lock:
            if self._hosts is not None:
                return list(self._hosts)

            with self._state_lock:
                self._finished = True

            if deadline is None:
                deadline = self._sweep_deadline
            completed = self._pending.wait(deadline)
            if not completed:
                logger.warning(
                    "Sweep deadline of %ss reached with %d probes outstanding",
                    deadline,
                    self._pending.count,
                )
                for probe in self._registry.values():
                    probe.mailbox.fail("sweep deadline reached")

            self._stop.set()
            self._reader.join()
            self._transport.close()
            self._executor.shutdown(wait=completed, cancel_futures=not completed)
            self._aggregator.stop()

            self._hosts = self._aggregator.hosts
            return list(self._hosts)

    def __enter__(self) -> "PingQueue":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wait()

    def _run_probe(self, address: str) -> None:
        try:
            outcome = self._probe(address)
        except Exception as e:
            logger.exception("Probe to %s failed unexpectedly", address)
            outcome = Failure(address, FailureKind.TRANSPORT_ERROR, str(e))
        self._outcomes.put(outcome)

    def _probe(self, address: str) -> Outcome:
        probe = self._allocate(address)

        try:
            self._transport.send(build_echo_request(probe.identifier, probe.sequence), address)
        except MassPingError as e:
            self._registry.pop(probe.token)
            return Failure(address, FailureKind.SEND_FAILED, str(e))
        except Exception:
            self._registry.pop(probe.token)
            raise

        logger.debug("Sent echo request to %s (id=%d seq=%d)", address, probe.identifier, probe.sequence)
        return self._receive(probe)

    def _allocate(self, address: str) -> Probe:
        while True:
            probe = Probe(
                identifier=random.randint(0, MAX_FIELD),
                sequence=random.randint(0, MAX_FIELD),
                destination=address,
            )
            if self._registry.put_if_absent(probe.token, probe):
                return probe

    def _receive(self, probe: Probe) -> Outcome:
        timeout = self.timeout
        deadline = time.monotonic() + timeout
        try:
            if self._reader_error is not None:
                return Failure(probe.destination, FailureKind.TRANSPORT_ERROR, self._reader_error)
            delivery = probe.mailbox.wait_until(deadline)
        finally:
            self._registry.pop(probe.token)

        if delivery is None:
            return Failure(probe.destination, FailureKind.TIMED_OUT, f"no reply within {timeout}s")
        if delivery.error is not None:
            return Failure(probe.destination, FailureKind.TRANSPORT_ERROR, delivery.error)
        return match_reply(probe, delivery.message, delivery.source)

    def _read_replies(self) -> None:
        while not self._stop.is_set():
            try:
                data, source = self._transport.receive_before(time.monotonic() + self._poll_interval)
            except TimeoutError:
                continue
            except TransportError as e:
                if self._stop.is_set():
                    break
                logger.warning("ICMP reader stopped: %s", e)
                self._reader_error = str(e)
                for probe in self._registry.values():
                    probe.mailbox.fail(str(e))
                break

            self._dispatch(data, source)

    def _dispatch(self, data: bytes, source: str) -> None:
        try:
            message = parse_message(data)
        except ValidationError as e:
            logger.debug("Discarding datagram from %s: %s", source, e)
            return

        if not message.is_echo_reply:
            logger.debug("Ignoring ICMP type %d from %s", message.type, source)
            return

        probe = self._registry.get(message.token)
        if probe is None:
            logger.debug("Stray echo reply from %s with id/seq %s", source, message.token)
            return

        probe.mailbox.deliver(message, source)


def new(timeout: float | None = None, **kwargs) -> PingQueue:
    """Open a raw socket and return a ready PingQueue."""
    return PingQueue.new(timeout=timeout, **kwargs)
