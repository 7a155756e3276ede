"""
HazardWatch: proximity hazard alerts for navigation.

Loads geolocated driving hazards (cameras, roadworks, zones) and answers
live proximity, route corridor and categorical queries.
"""

__version__ = "0.1.0"
