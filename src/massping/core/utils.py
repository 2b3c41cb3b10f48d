"""Utility functions for massping."""

import os
from ipaddress import IPv4Address, IPv4Network, ip_address, ip_network
from pathlib import Path

import psutil

from .config import get_config
from .exceptions import ValidationError


def is_root() -> bool:
    """Check if running with root/admin privileges."""
    return os.geteuid() == 0


def validate_ip(ip_str: str) -> IPv4Address:
    """Validate and parse an IPv4 address string."""
    try:
        ip = ip_address(ip_str)
    except ValueError as e:
        raise ValidationError(f"Invalid IP address: {ip_str}", str(e)) from e
    if ip.version == 6:
        raise ValidationError(f"IPv6 address not supported: {ip_str}")
    return ip


def validate_network(network_str: str) -> IPv4Network:
    """Validate and parse a network CIDR string."""
    try:
        net = ip_network(network_str, strict=False)
    except ValueError as e:
        raise ValidationError(f"Invalid network: {network_str}", str(e)) from e
    if net.version == 6:
        raise ValidationError(f"IPv6 networks are not supported: {network_str}")
    return net


def validate_timeout(seconds: float) -> float:
    """Check that a timeout is a positive number of seconds."""
    try:
        value = float(seconds)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid timeout: {seconds!r}", str(e)) from e
    if value <= 0:
        raise ValidationError(f"Timeout must be positive: {seconds!r}")
    return value


def get_interfaces() -> dict[str, dict[str, str | int | bool | None]]:
    """Get available network interfaces with their IPv4 addresses."""
    interfaces: dict[str, dict[str, str | int | bool | None]] = {}
    stats_by_name = psutil.net_if_stats()

    for name, addrs in psutil.net_if_addrs().items():
        interface_info: dict[str, str | int | bool | None] = {
            "ipv4": None,
            "netmask": None,
        }

        for addr in addrs:
            if addr.family.name == "AF_INET":
                interface_info["ipv4"] = addr.address
                interface_info["netmask"] = addr.netmask

        stats = stats_by_name.get(name)
        if stats:
            interface_info["is_up"] = stats.isup
            interface_info["mtu"] = stats.mtu

        interfaces[name] = interface_info

    return interfaces


def ensure_results_dir() -> Path:
    """Ensure results directory exists and return its path."""
    config = get_config()
    config.results_dir.mkdir(parents=True, exist_ok=True)
    return config.results_dir
