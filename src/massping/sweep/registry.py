"""Lock-protected table of in-flight probes."""

import threading

from .probe import Probe

ProbeKey = tuple[int, int]


class ProbeRegistry:
    """Maps a probe's (identifier, sequence) token to the probe.

    Every operation touches a single key under one lock.
    """

    def __init__(self) -> None:
        self._probes: dict[ProbeKey, Probe] = {}
        self._lock = threading.Lock()

    def put(self, key: ProbeKey, probe: Probe) -> None:
        """Insert or overwrite."""
        with self._lock:
            self._probes[key] = probe

    def put_if_absent(self, key: ProbeKey, probe: Probe) -> bool:
        """Insert only when the key is free. Returns True on insert."""
        with self._lock:
            if key in self._probes:
                return False
            self._probes[key] = probe
            return True

    def get(self, key: ProbeKey) -> Probe | None:
        """Return the probe, or None for an unknown key."""
        with self._lock:
            return self._probes.get(key)

    def pop(self, key: ProbeKey) -> Probe | None:
        with self._lock:
            return self._probes.pop(key, None)

    def values(self) -> list[Probe]:
        with self._lock:
            return list(self._probes.values())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._probes

    def __len__(self) -> int:
        with self._lock:
            return len(self._probes)
