#!/usr/bin/env python3
"""Benchmark sweep wall-clock time against the per-probe timeout."""

from __future__ import annotations

import argparse
import time

from massping.sweep import run_sweep
from massping.targets import expand_target


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark concurrent ICMP sweeps.")
    parser.add_argument("--target", default="192.168.0.0/24")
    parser.add_argument("--timeout", type=float, default=50.0, help="Per-probe timeout in ms")
    parser.add_argument("--max-in-flight", type=int, default=256)
    args = parser.parse_args()

    targets = expand_target(args.target)

    start = time.perf_counter()
    result = run_sweep(targets, timeout=args.timeout / 1000, max_in_flight=args.max_in_flight)
    duration = time.perf_counter() - start

    rate = len(targets) / duration if duration > 0 else 0
    serial = len(targets) * args.timeout / 1000

    print(f"Target: {args.target} ({len(targets)} addresses)")
    print(f"Timeout: {args.timeout:.0f}ms, max in flight: {args.max_in_flight}")
    print(f"Duration: {duration:.3f}s (serial worst case {serial:.2f}s)")
    print(f"Throughput: {rate:.2f} probes/sec")
    print(f"Up: {result.stats.responded}, Timed out: {result.stats.timed_out}, "
          f"Invalid: {result.stats.invalid}, Send failed: {result.stats.send_failed}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
