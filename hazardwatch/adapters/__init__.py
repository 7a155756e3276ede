"""
Adapters for HazardWatch hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .source import GeoJsonHazardSource
from .storage import SQLiteReportStore

__all__ = ["GeoJsonHazardSource", "SQLiteReportStore"]
