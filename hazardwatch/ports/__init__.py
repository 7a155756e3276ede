"""
Port interfaces for HazardWatch hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the hazard detector and external adapters.
"""

from .source import HazardSourcePort
from .report_store import ReportStorePort

__all__ = ["HazardSourcePort", "ReportStorePort"]
