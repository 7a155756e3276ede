"""Hazard data sources for HazardWatch."""

from .geojson import GeoJsonHazardSource

__all__ = ["GeoJsonHazardSource"]
