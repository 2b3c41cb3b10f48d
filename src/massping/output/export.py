"""Sweep result export."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any

from ..sweep.runner import SweepResult


def export_json(
    result: SweepResult,
    output_file: str,
    pretty: bool = True,
) -> str:
    """
    Export a sweep result to a JSON file.

    Args:
        result: Completed sweep
        output_file: Output file path
        pretty: Pretty print JSON

    Returns:
        Path to output file
    """
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        if pretty:
            json.dump(result, f, indent=2, default=_json_serializer)
        else:
            json.dump(result, f, default=_json_serializer)

    return str(output_path)


def export_csv(result: SweepResult, output_file: str) -> str:
    """Export responding hosts to a CSV file, one row per host."""
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=["position", "ip"])
        writer.writeheader()
        writer.writerows(result.host_rows())

    return str(output_path)


def _json_serializer(obj: Any) -> Any:
    """Custom JSON serializer for special types."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
