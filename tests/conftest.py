"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import json
import math
import os
import tempfile
import pytest
from hazardwatch.common.geo import EARTH_RADIUS_M
from hazardwatch.core.models import HazardRecord, Position
from hazardwatch.settings import Settings

# 적도에서 경도 1도당 미터 (haversine, R=6,371,000m)
METERS_PER_DEGREE = math.pi * EARTH_RADIUS_M / 180


def meters_to_degrees(meters: float) -> float:
    """적도 위 거리(미터)를 경도 차이(도)로 변환"""
    return meters / METERS_PER_DEGREE


class FakeClock:
    """테스트용 수동 시계 (초 단위)"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StaticSource:
    """고정 목록을 반환하는 위험 요소 소스"""

    def __init__(self, hazards):
        self.hazards = list(hazards)
        self.calls = 0

    async def load(self):
        self.calls += 1
        return list(self.hazards)


def make_hazard(hazard_id: str, lat: float, lng: float, hazard_type: str = "speed_camera",
                severity: str = "medium", **kwargs) -> HazardRecord:
    """테스트용 위험 요소 생성"""
    return HazardRecord(
        id=hazard_id,
        position=Position(lat=lat, lng=lng),
        type=hazard_type,
        severity=severity,
        **kwargs
    )


def make_feature(lng: float, lat: float, **properties) -> dict:
    """테스트용 GeoJSON Point 피처 생성 (경도, 위도 순서)"""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
        "properties": properties,
    }


@pytest.fixture
def clock():
    """테스트용 시계"""
    return FakeClock()


@pytest.fixture
def temp_db_path():
    """임시 데이터베이스 파일 경로"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        temp_path = f.name
    yield temp_path
    # 테스트 후 파일 정리
    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.observability.log_level = "INFO"
    settings.observability.http_port = 8080
    return settings


@pytest.fixture
def sample_hazards():
    """테스트용 위험 요소 (적도 부근, 서로 다른 거리)"""
    return [
        make_hazard("far", 0.0, meters_to_degrees(450), "roadwork", "low"),
        make_hazard("near", 0.0, meters_to_degrees(50), "speed_camera", "high"),
        make_hazard("mid", 0.0, meters_to_degrees(200), "red_light_camera", "medium"),
        make_hazard("outside", 0.0, meters_to_degrees(900), "school_zone", "medium"),
    ]


@pytest.fixture
def sample_collection():
    """테스트용 GeoJSON 피처 컬렉션"""
    return {
        "type": "FeatureCollection",
        "features": [
            make_feature(-1.3762, 53.5444, id="cam-1", type="speed_camera", severity="high",
                         description="A61 northbound"),
            make_feature(-1.3800, 53.5400, id="rw-1", type="roadwork"),
            make_feature(-1.3700, 53.5500, type="school_zone", severity="low"),
        ],
    }


@pytest.fixture
def geojson_file(sample_collection):
    """테스트용 GeoJSON 파일"""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.geojson', delete=False, encoding='utf-8') as f:
        json.dump(sample_collection, f)
        temp_path = f.name
    yield temp_path
    if os.path.exists(temp_path):
        os.unlink(temp_path)
