"""
Core domain models for HazardWatch.

This module defines the core domain models using Pydantic v2
for type safety and validation.
"""

from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Union
from pydantic import BaseModel, ConfigDict, Field
from hazardwatch.common.geo import validate_coordinates
from .errors import InvalidArgumentError

# 심각도 타입 정의
Severity = Literal["low", "medium", "high"]
SEVERITIES = ("low", "medium", "high")
DEFAULT_SEVERITY: Severity = "medium"

# 알림 레벨 타입 정의
AlertLevel = Literal["info", "warning", "critical"]

# 알려진 위험 요소 유형
KNOWN_HAZARD_TYPES = (
    "speed_camera",
    "red_light_camera",
    "roadwork",
    "average_speed_camera",
    "traffic_light",
    "school_zone",
    "hospital_zone",
)

STATIC_SOURCE = "static"
USER_REPORT_SOURCE = "user_voice_report"

class Position(BaseModel):
    """위도/경도 좌표 (WGS84)"""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

class HazardRecord(BaseModel):
    """지오코딩된 위험 요소 레코드 (로드 후 불변)"""
    model_config = ConfigDict(frozen=True)

    id: str
    position: Position
    type: str
    severity: Severity = DEFAULT_SEVERITY
    description: Optional[str] = None
    name: Optional[str] = None
    source: str = STATIC_SOURCE
    reported_at: Optional[float] = None   # Unix 초 (피처의 timestamp 는 밀리초)
    properties: Dict[str, Any] = Field(default_factory=dict)

    def to_feature(self) -> Dict[str, Any]:
        """GeoJSON Point 피처로 변환합니다 (좌표는 경도, 위도 순서)."""
        properties = dict(self.properties)
        properties.update({
            "id": self.id,
            "type": self.type,
            "severity": self.severity,
            "source": self.source,
        })
        if self.description is not None:
            properties["description"] = self.description
        if self.name is not None:
            properties["name"] = self.name
        if self.reported_at is not None:
            properties["timestamp"] = self.reported_at * 1000
        return {
            "type": "Feature",
            "geometry": {
                "type": "Point",
                "coordinates": [self.position.lng, self.position.lat],
            },
            "properties": properties,
        }

class HazardAlert(BaseModel):
    """근접 알림 결과 모델"""
    hazard: HazardRecord
    distance: float
    type: str
    severity: Severity
    bearing: float = 0.0
    alert_level: AlertLevel = "info"
    message: str = ""
    time_to_reach: Optional[float] = None

class DisplayInfo(BaseModel):
    """지도/알림 표시 정보"""
    name: str
    icon: str
    color: str
    description: str

class HazardStatistics(BaseModel):
    """로드된 위험 요소 집계"""
    total: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_severity: Dict[str, int] = Field(default_factory=dict)
    by_source: Dict[str, int] = Field(default_factory=dict)

PositionLike = Union[Position, Mapping[str, Any], Sequence[float]]

def to_position(value: PositionLike) -> Position:
    """
    호출자가 넘긴 좌표를 Position으로 변환합니다.

    Position, {"lat", "lng"} (또는 "lon") 매핑, (위도, 경도) 쌍을 허용합니다.

    Raises:
        InvalidArgumentError: 필드 누락, 숫자가 아님, 범위 초과
    """
    if isinstance(value, Position):
        return value

    if isinstance(value, Mapping):
        lat = value.get("lat")
        lng = value.get("lng", value.get("lon"))
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        lat, lng = value
    else:
        raise InvalidArgumentError(f"좌표 형식이 올바르지 않습니다: {value!r}")

    if lat is None or lng is None:
        raise InvalidArgumentError(f"위도/경도 값이 누락되었습니다: {value!r}")

    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"위도/경도가 숫자가 아닙니다: {value!r}") from e

    if not validate_coordinates(lat_f, lng_f):
        raise InvalidArgumentError(f"좌표가 유한하지 않거나 범위를 벗어났습니다: lat={lat_f}, lng={lng_f}")
    return Position(lat=lat_f, lng=lng_f)

def to_positions(values: Sequence[PositionLike]) -> List[Position]:
    """좌표 목록을 변환합니다."""
    return [to_position(v) for v in values]
