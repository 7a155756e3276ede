"""
Storage adapters for HazardWatch hexagonal architecture.

This module contains storage adapters for persistence,
including the SQLite-based user report store.
"""

from .sqlite_reports import SQLiteReportStore

__all__ = ["SQLiteReportStore"]
