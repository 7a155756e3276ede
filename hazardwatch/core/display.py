"""
Display lookup tables for HazardWatch.

Maps hazard type and severity to the name, icon and color used by map
markers and notifications.
"""

from types import MappingProxyType
from .models import DisplayInfo, HazardRecord

HAZARD_DISPLAY_NAMES = MappingProxyType({
    "speed_camera": "Speed Camera",
    "red_light_camera": "Red Light Camera",
    "roadwork": "Road Work",
    "average_speed_camera": "Average Speed Camera",
    "traffic_light": "Traffic Light",
    "school_zone": "School Zone",
    "hospital_zone": "Hospital Zone",
})

HAZARD_ICONS = MappingProxyType({
    "speed_camera": "📷",
    "red_light_camera": "🚦",
    "roadwork": "🚧",
    "average_speed_camera": "📹",
    "traffic_light": "🚥",
    "school_zone": "🏫",
    "hospital_zone": "🏥",
})

HAZARD_BASE_COLORS = MappingProxyType({
    "speed_camera": "#FFA500",
    "red_light_camera": "#FF6B6B",
    "roadwork": "#FFD700",
    "average_speed_camera": "#87CEEB",
    "traffic_light": "#32CD32",
    "school_zone": "#FF69B4",
    "hospital_zone": "#FF0000",
})

# 심각도별 불투명도 접미사 (high 100%, medium 80%, low 60%)
SEVERITY_OPACITY_SUFFIX = MappingProxyType({
    "high": "",
    "medium": "CC",
    "low": "99",
})

UNKNOWN_HAZARD_NAME = "Unknown Hazard"
UNKNOWN_HAZARD_ICON = "⚠️"
UNKNOWN_HAZARD_COLOR = "#666"
NO_DESCRIPTION = "No description available"

def get_hazard_display_name(hazard_type: str) -> str:
    return HAZARD_DISPLAY_NAMES.get(hazard_type, UNKNOWN_HAZARD_NAME)

def get_hazard_icon(hazard_type: str) -> str:
    return HAZARD_ICONS.get(hazard_type, UNKNOWN_HAZARD_ICON)

def get_hazard_color(hazard_type: str, severity: str) -> str:
    """유형별 기본 색상에 심각도 불투명도 접미사를 붙입니다."""
    base = HAZARD_BASE_COLORS.get(hazard_type, UNKNOWN_HAZARD_COLOR)
    return base + SEVERITY_OPACITY_SUFFIX.get(severity, SEVERITY_OPACITY_SUFFIX["low"])

def get_hazard_display_info(hazard: HazardRecord) -> DisplayInfo:
    """
    위험 요소의 표시 정보를 반환합니다.

    Args:
        hazard: 위험 요소 레코드

    Returns:
        이름, 아이콘, 색상, 설명
    """
    return DisplayInfo(
        name=get_hazard_display_name(hazard.type),
        icon=get_hazard_icon(hazard.type),
        color=get_hazard_color(hazard.type, hazard.severity),
        description=hazard.description or NO_DESCRIPTION,
    )
