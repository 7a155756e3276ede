"""
Core domain models and pure functions for HazardWatch.

This module contains the domain models and pure business logic
that are independent of external I/O and infrastructure concerns.
"""

from .errors import (
    HazardError, DataIntegrityError, InvalidArgumentError,
    HazardLoadError, HazardLoadTimeout,
)
from .models import (
    Position, HazardRecord, HazardAlert, DisplayInfo, HazardStatistics,
    Severity, AlertLevel, to_position,
)
from .normalize import to_hazard, to_hazards
from .display import get_hazard_display_info
from .cooldown import AlertCooldown

__all__ = [
    "HazardError", "DataIntegrityError", "InvalidArgumentError",
    "HazardLoadError", "HazardLoadTimeout",
    "Position", "HazardRecord", "HazardAlert", "DisplayInfo", "HazardStatistics",
    "Severity", "AlertLevel", "to_position",
    "to_hazard", "to_hazards", "get_hazard_display_info", "AlertCooldown",
]
