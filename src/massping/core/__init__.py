"""Core module - configuration, exceptions, and utilities."""

from .config import Config, SweepConfig, get_config, set_config
from .exceptions import (
    MassPingError,
    PermissionError,
    ScanError,
    TimeoutError,
    TransportError,
    ValidationError,
)
from .utils import (
    ensure_results_dir,
    get_interfaces,
    is_root,
    validate_ip,
    validate_network,
    validate_timeout,
)

__all__ = [
    "Config",
    "SweepConfig",
    "get_config",
    "set_config",
    "MassPingError",
    "ScanError",
    "TransportError",
    "PermissionError",
    "TimeoutError",
    "ValidationError",
    "is_root",
    "validate_ip",
    "validate_network",
    "validate_timeout",
    "get_interfaces",
    "ensure_results_dir",
]
