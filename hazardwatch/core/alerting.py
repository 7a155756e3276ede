"""
Alert grading and message formatting for HazardWatch.
"""

from typing import Optional
from .display import get_hazard_display_name
from .models import AlertLevel, HazardRecord

# 거리 기반 알림 레벨 경계 (미터)
CRITICAL_DISTANCE_M = 100.0
WARNING_DISTANCE_M = 300.0

_TYPE_MESSAGES = {
    "speed_camera": "Speed camera ahead in {distance}",
    "red_light_camera": "Traffic light camera ahead in {distance}",
    "roadwork": "Road works ahead in {distance}",
    "average_speed_camera": "Average speed check zone ahead in {distance}",
}

def alert_level(distance: float, severity: str) -> AlertLevel:
    """
    거리와 심각도로 알림 레벨을 결정합니다.

    - 100m 미만: critical
    - 300m 미만: high 심각도면 critical, 아니면 warning
    - 그 외: info
    """
    if distance < CRITICAL_DISTANCE_M:
        return "critical"
    if distance < WARNING_DISTANCE_M:
        return "critical" if severity == "high" else "warning"
    return "info"

def format_distance(distance: float) -> str:
    # 1km 미만은 미터 정수, 이상은 소수 첫째 자리 킬로미터
    if distance < 1000:
        return f"{round(distance)}m"
    return f"{distance / 1000:.1f}km"

def alert_message(hazard: HazardRecord, distance: float) -> str:
    text = format_distance(distance)
    template = _TYPE_MESSAGES.get(hazard.type)
    if template:
        return template.format(distance=text)
    label = hazard.name or get_hazard_display_name(hazard.type)
    return f"{label} ahead in {text}"

def time_to_reach(distance: float, speed_kmh: Optional[float]) -> Optional[float]:
    """현재 속도로 도달까지 걸리는 시간 (초), 속도가 없거나 0이면 None"""
    if not speed_kmh or speed_kmh <= 0:
        return None
    return distance / (speed_kmh * 1000 / 3600)
