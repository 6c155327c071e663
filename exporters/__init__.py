"""Exporters for converting module graphs and pack results to output formats."""

from .ascii_exporter import to_ascii
from .json_exporter import to_json, to_manifest

__all__ = ["to_ascii", "to_json", "to_manifest"]
