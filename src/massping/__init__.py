"""massping - concurrent ICMP echo sweeps over a single raw socket."""

__version__ = "0.1.0"
__author__ = "massping contributors"

from .sweep import PingQueue, new, sweep_hosts

__all__ = [
    "__version__",
    "__author__",
    "PingQueue",
    "new",
    "sweep_hosts",
]
