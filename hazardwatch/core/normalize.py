"""
Normalization functions for HazardWatch.

This module contains pure functions for converting GeoJSON point
features into internal hazard records.
"""

import math
from typing import Any, Dict, List, Optional
from hazardwatch.common.geo import validate_coordinates
from .errors import DataIntegrityError
from .models import HazardRecord, Position, SEVERITIES, DEFAULT_SEVERITY, STATIC_SOURCE
from hazardwatch.observability.logging_setup import get_logger
from hazardwatch.observability import metrics

log = get_logger("hazardwatch.normalize")

def _coerce_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise DataIntegrityError(f"{field} 값이 숫자가 아닙니다: {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise DataIntegrityError(f"{field} 값이 숫자가 아닙니다: {value!r}") from e
    if not math.isfinite(result):
        raise DataIntegrityError(f"{field} 값이 유한한 값이 아닙니다: {value!r}")
    return result

def _normalize_severity(raw: Any, hazard_id: str) -> str:
    if raw is None or raw == "":
        return DEFAULT_SEVERITY
    severity = str(raw).strip().lower()
    if severity not in SEVERITIES:
        log.warning(f"알 수 없는 심각도, medium으로 대체: id={hazard_id}, severity={raw!r}")
        return DEFAULT_SEVERITY
    return severity

def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)

def to_hazard(feature: Any) -> HazardRecord:
    """
    GeoJSON Point 피처를 HazardRecord로 변환합니다.

    Args:
        feature: {"geometry": {"coordinates": [lng, lat]}, "properties": {...}}

    Returns:
        변환된 위험 요소 레코드

    Raises:
        DataIntegrityError: 좌표/유형 누락 또는 범위 초과
    """
    if not isinstance(feature, dict):
        raise DataIntegrityError(f"피처가 객체가 아닙니다: {type(feature).__name__}")

    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        raise DataIntegrityError("geometry 필드가 없습니다")

    geom_type = geometry.get("type", "Point")
    if geom_type != "Point":
        raise DataIntegrityError(f"지원하지 않는 geometry 유형: {geom_type}")

    coords = geometry.get("coordinates")
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        raise DataIntegrityError(f"coordinates 형식이 올바르지 않습니다: {coords!r}")

    # GeoJSON은 (경도, 위도) 순서
    lng = _coerce_float(coords[0], "longitude")
    lat = _coerce_float(coords[1], "latitude")

    if not validate_coordinates(lat, lng):
        raise DataIntegrityError(f"좌표 범위를 벗어났습니다: lat={lat}, lng={lng}")
    position = Position(lat=lat, lng=lng)

    properties = feature.get("properties") or {}
    if not isinstance(properties, dict):
        raise DataIntegrityError("properties 필드가 객체가 아닙니다")

    hazard_type = properties.get("type")
    if not hazard_type or not isinstance(hazard_type, str):
        raise DataIntegrityError(f"type 필드가 없습니다: {properties!r}")

    # ID가 없으면 원본 좌표로 생성
    raw_id = properties.get("id")
    hazard_id = str(raw_id) if raw_id not in (None, "") else f"{coords[0]}_{coords[1]}"

    # timestamp 는 Unix 밀리초, reported_at 은 초
    reported_at = properties.get("timestamp")
    if reported_at is not None:
        reported_at = _coerce_float(reported_at, "timestamp") / 1000.0

    return HazardRecord(
        id=hazard_id,
        position=position,
        type=hazard_type,
        severity=_normalize_severity(properties.get("severity"), hazard_id),  # type: ignore[arg-type]
        description=_optional_str(properties.get("description")),
        name=_optional_str(properties.get("name")),
        source=str(properties.get("source") or STATIC_SOURCE),
        reported_at=reported_at,
        properties=dict(properties),
    )

def to_hazards(collection: Any) -> List[HazardRecord]:
    """
    피처 컬렉션을 HazardRecord 목록으로 변환합니다.

    잘못된 피처는 로그를 남기고 건너뜁니다.

    Raises:
        DataIntegrityError: 컬렉션 자체가 잘못된 경우 (features 배열 없음)
    """
    if not isinstance(collection, dict):
        raise DataIntegrityError(f"피처 컬렉션이 객체가 아닙니다: {type(collection).__name__}")

    features = collection.get("features")
    if features is None:
        features = []
    if not isinstance(features, list):
        raise DataIntegrityError("features 필드가 배열이 아닙니다")

    hazards: List[HazardRecord] = []
    seen: Dict[str, int] = {}

    for index, feature in enumerate(features):
        try:
            hazard = to_hazard(feature)
        except DataIntegrityError as e:
            metrics.malformed_hazards.inc()
            log.warning(f"잘못된 위험 요소 피처 건너뜀 index={index}: {e}")
            continue

        if hazard.id in seen:
            log.warning(f"중복된 위험 요소 ID: id={hazard.id}, index={index} (첫 등장 index={seen[hazard.id]})")
        else:
            seen[hazard.id] = index

        hazards.append(hazard)

    return hazards
