"""Probe queue - raw socket transport, probe registry, dispatcher and aggregator."""

from .aggregator import PendingCounter, SweepStats
from .probe import Failure, FailureKind, Outcome, Probe, Success
from .probe_queue import PingQueue, new
from .registry import ProbeRegistry
from .runner import SweepResult, run_sweep, sweep_hosts
from .transport import Transport

__all__ = [
    "PingQueue",
    "new",
    "Transport",
    "ProbeRegistry",
    "Probe",
    "Outcome",
    "Success",
    "Failure",
    "FailureKind",
    "PendingCounter",
    "SweepStats",
    "SweepResult",
    "run_sweep",
    "sweep_hosts",
]
