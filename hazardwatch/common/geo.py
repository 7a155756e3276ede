"""
Geographic utilities for HazardWatch.

This module provides great-circle distance and bearing calculations,
coordinate validation and point-to-segment distance for route corridors.
All distances are in meters.
"""

import math
from typing import Tuple

# 지구 평균 반지름 (미터)
EARTH_RADIUS_M = 6_371_000.0

LatLng = Tuple[float, float]

def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다 (미터).

    Args:
        lat1: 첫 번째 지점의 위도
        lon1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lon2: 두 번째 지점의 경도

    Returns:
        두 지점 간의 거리 (미터)
    """
    # 도를 라디안으로 변환
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)

    # 위도와 경도의 차이
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    # Haversine 공식
    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    c = 2 * math.asin(min(1.0, math.sqrt(a)))

    return c * EARTH_RADIUS_M

def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    첫 번째 지점에서 두 번째 지점으로의 초기 방위각을 계산합니다.

    Returns:
        진북 기준 방위각 (0 이상 360 미만, 도)
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    y = math.sin(dlon) * math.cos(lat2_rad)
    x = (math.cos(lat1_rad) * math.sin(lat2_rad) -
         math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(dlon))

    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0

def point_to_segment_distance(point: LatLng, start: LatLng, end: LatLng) -> float:
    """
    점에서 선분까지의 최단 거리를 계산합니다 (미터).

    선분 주변을 등장방형 투영으로 평면화하여 근사합니다.
    수 킬로미터 이하의 경로 구간에서는 오차가 무시할 수준입니다.

    Args:
        point: 확인할 점 (위도, 경도)
        start: 선분 시작점 (위도, 경도)
        end: 선분 끝점 (위도, 경도)

    Returns:
        점과 선분 사이의 거리 (미터)
    """
    ref_lat = math.radians((start[0] + end[0]) / 2)

    def project(p: LatLng) -> Tuple[float, float]:
        x = math.radians(p[1]) * math.cos(ref_lat) * EARTH_RADIUS_M
        y = math.radians(p[0]) * EARTH_RADIUS_M
        return x, y

    px, py = project(point)
    ax, ay = project(start)
    bx, by = project(end)

    dx, dy = bx - ax, by - ay
    seg_len_sq = dx * dx + dy * dy
    if seg_len_sq == 0:
        return haversine_distance(point[0], point[1], start[0], start[1])

    # 선분 위 최근접점의 매개변수 (0..1로 제한)
    t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / seg_len_sq))
    nearest_lat = start[0] + t * (end[0] - start[0])
    nearest_lon = start[1] + t * (end[1] - start[1])

    return haversine_distance(point[0], point[1], nearest_lat, nearest_lon)

def validate_coordinates(lat: float, lon: float) -> bool:
    """
    좌표가 유효한지 확인합니다.

    Args:
        lat: 위도
        lon: 경도

    Returns:
        좌표가 유효하면 True
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
