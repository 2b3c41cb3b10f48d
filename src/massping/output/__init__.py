"""Output module - JSON and CSV export of sweep results."""

from .export import export_csv, export_json

__all__ = [
    "export_json",
    "export_csv",
]
