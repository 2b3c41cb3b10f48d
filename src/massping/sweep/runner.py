"""One-call sweeps for front-ends that do not manage a PingQueue themselves."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from .aggregator import SweepStats
from .probe_queue import PingQueue


@dataclass
class SweepResult:
    """Result of a complete sweep."""

    targets: list[str]
    hosts: list[str]
    timeout: float
    start_time: datetime
    end_time: datetime
    stats: SweepStats = field(default_factory=SweepStats)

    @property
    def duration(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration_seconds": self.duration,
            "timeout_ms": round(self.timeout * 1000, 2),
            "summary": self.stats.to_dict(),
            "targets": len(self.targets),
            "hosts": list(self.hosts),
        }

    def host_rows(self) -> list[dict]:
        """One row per responding host, in completion order."""
        return [{"position": i, "ip": host} for i, host in enumerate(self.hosts, start=1)]


def run_sweep(
    targets: Iterable[str],
    timeout: float | None = None,
    **kwargs,
) -> SweepResult:
    """
    Ping every target concurrently and wait for the outcome.

    Args:
        targets: Pre-resolved IPv4 address strings
        timeout: Per-probe reply wait in seconds (config default if None)
        **kwargs: Passed to PingQueue (max_in_flight, sweep_deadline, ...)

    Returns:
        SweepResult with responding hosts in completion order
    """
    targets = list(targets)
    start_time = datetime.now()

    with PingQueue.new(timeout=timeout, **kwargs) as pq:
        for target in targets:
            pq.ping(target)
        hosts = pq.wait()
        effective_timeout = pq.timeout

    return SweepResult(
        targets=targets,
        hosts=hosts,
        timeout=effective_timeout,
        start_time=start_time,
        end_time=datetime.now(),
        stats=pq.stats,
    )


def sweep_hosts(targets: Iterable[str], timeout: float | None = None, **kwargs) -> list[str]:
    """Ping every target and return the ones that answered."""
    return run_sweep(targets, timeout=timeout, **kwargs).hosts
