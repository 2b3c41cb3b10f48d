"""Target enumeration for front-ends: addresses, CIDR blocks, octet ranges."""

import re
from collections.abc import Iterable
from ipaddress import IPv4Interface

from .core.exceptions import ValidationError
from .core.utils import get_interfaces, validate_ip, validate_network

_PREFIX_RE = re.compile(r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})$")
_RANGE_RE = re.compile(r"^(\d{1,3}\.\d{1,3}\.\d{1,3})\.(\d{1,3})-(\d{1,3})$")


def expand_target(spec: str) -> list[str]:
    """
    Expand one target specification into IPv4 address strings.

    Accepted forms:
        192.168.0.7       single address
        192.168.0.0/24    usable hosts of a network
        192.168.0.1-20    last-octet range, inclusive
        192.168.0         .1 to .254 of a /24 prefix
    """
    spec = spec.strip()
    if not spec:
        raise ValidationError("Empty target")

    if "/" in spec:
        net = validate_network(spec)
        if net.num_addresses == 1:
            return [str(net.network_address)]
        return [str(ip) for ip in net.hosts()]

    match = _RANGE_RE.match(spec)
    if match:
        prefix = match.group(1)
        start, end = int(match.group(2)), int(match.group(3))
        if start > end:
            raise ValidationError(f"Invalid range (start > end): {spec}")
        if end > 255:
            raise ValidationError(f"Octet out of range: {spec}")
        return [str(validate_ip(f"{prefix}.{i}")) for i in range(start, end + 1)]

    if _PREFIX_RE.match(spec):
        validate_ip(f"{spec}.0")
        return [f"{spec}.{i}" for i in range(1, 255)]

    return [str(validate_ip(spec))]


def expand_targets(specs: Iterable[str]) -> list[str]:
    """Expand several specifications, keeping first-seen order without duplicates."""
    seen: set[str] = set()
    targets: list[str] = []
    for spec in specs:
        for ip in expand_target(spec):
            if ip not in seen:
                seen.add(ip)
                targets.append(ip)
    return targets


def local_networks() -> list[str]:
    """IPv4 networks attached to interfaces that are up, loopback excluded."""
    networks: list[str] = []
    for name, info in get_interfaces().items():
        if not info.get("is_up") or not info.get("ipv4") or not info.get("netmask"):
            continue
        iface = IPv4Interface(f"{info['ipv4']}/{info['netmask']}")
        if iface.ip.is_loopback:
            continue
        network = str(iface.network)
        if network not in networks:
            networks.append(network)
    return networks
