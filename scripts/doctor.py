#!/usr/bin/env python3
"""Environment checks for massping."""

from __future__ import annotations

import argparse
import platform
import socket
import sys
from dataclasses import dataclass


@dataclass
class CheckResult:
    name: str
    ok: bool
    detail: str


def _check_python_version() -> CheckResult:
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    detail = f"{platform.python_version()} (requires >= 3.10)"
    return CheckResult("python_version", ok, detail)


def _check_imports() -> list[CheckResult]:
    results = []
    for module in ["scapy", "psutil", "click", "rich"]:
        try:
            __import__(module)
            results.append(CheckResult(f"import:{module}", True, "ok"))
        except Exception as exc:  # pragma: no cover - diagnostic
            results.append(CheckResult(f"import:{module}", False, str(exc)))
    return results


def _check_raw_socket() -> CheckResult:
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
    except OSError as exc:
        return CheckResult("raw_socket", False, f"{exc} (run as root or grant CAP_NET_RAW)")
    sock.close()
    return CheckResult("raw_socket", True, "ok")


def _print_results(results: list[CheckResult]) -> int:
    failures = [r for r in results if not r.ok]
    for r in results:
        status = "OK" if r.ok else "FAIL"
        print(f"{status:4} {r.name:20} {r.detail}")
    return 1 if failures else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Environment checks for massping.")
    parser.add_argument("--no-root", action="store_true", help="Skip raw socket check")
    args = parser.parse_args()

    results = [_check_python_version()]
    results.extend(_check_imports())
    if not args.no_root:
        results.append(_check_raw_socket())

    return _print_results(results)


if __name__ == "__main__":
    raise SystemExit(main())
