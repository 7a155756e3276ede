"""
Core 모델 단위 테스트

이 모듈은 도메인 모델과 좌표 변환 함수를 테스트합니다.
"""

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError
from hazardwatch.core.errors import InvalidArgumentError
from hazardwatch.core.models import (
    HazardAlert, HazardRecord, HazardStatistics, Position, to_position, to_positions
)
from hazardwatch.core.normalize import to_hazard
from tests.conftest import make_hazard


class TestPosition:
    """Position 모델 테스트"""

    def test_valid_position(self):
        p = Position(lat=37.5, lng=127.0)
        assert p.lat == 37.5
        assert p.lng == 127.0

    def test_out_of_range(self):
        with pytest.raises(ValidationError):
            Position(lat=91, lng=0)
        with pytest.raises(ValidationError):
            Position(lat=0, lng=181)

    def test_frozen(self):
        p = Position(lat=1, lng=2)
        with pytest.raises(ValidationError):
            p.lat = 3


class TestToPosition:
    """to_position 변환 테스트"""

    def test_position_passthrough(self):
        p = Position(lat=1, lng=2)
        assert to_position(p) is p

    def test_mapping_lat_lng(self):
        assert to_position({"lat": 53.5, "lng": -1.37}) == Position(lat=53.5, lng=-1.37)

    def test_mapping_lat_lon(self):
        assert to_position({"lat": 53.5, "lon": -1.37}) == Position(lat=53.5, lng=-1.37)

    def test_tuple_is_lat_lng(self):
        assert to_position((53.5, -1.37)) == Position(lat=53.5, lng=-1.37)

    def test_range_bounds_are_inclusive(self):
        assert to_position((90, -180)) == Position(lat=90, lng=-180)
        assert to_position((-90, 180)) == Position(lat=-90, lng=180)

    def test_numeric_strings(self):
        assert to_position({"lat": "10.5", "lng": "20"}) == Position(lat=10.5, lng=20)

    @pytest.mark.parametrize("value", [
        {"lat": 10},
        {"lng": 10},
        {"lat": None, "lng": 1},
        {"lat": "north", "lng": 1},
        {"lat": float("nan"), "lng": 1},
        {"lat": 0, "lng": float("inf")},
        {"lat": 95, "lng": 0},
        {"lat": 0, "lng": -200},
        (1, 2, 3),
        "53.5,-1.3",
        42,
    ])
    def test_invalid_raises(self, value):
        with pytest.raises(InvalidArgumentError):
            to_position(value)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            to_position({"lat": 100, "lng": 0})

    def test_to_positions(self):
        points = to_positions([(0, 0), {"lat": 1, "lng": 1}])
        assert points == [Position(lat=0, lng=0), Position(lat=1, lng=1)]

    @given(lat=st.floats(min_value=-90, max_value=90), lng=st.floats(min_value=-180, max_value=180))
    def test_any_valid_coordinate_accepted(self, lat, lng):
        p = to_position({"lat": lat, "lng": lng})
        assert p.lat == lat
        assert p.lng == lng


class TestHazardRecord:
    """HazardRecord 모델 테스트"""

    def test_defaults(self):
        h = HazardRecord(id="x", position=Position(lat=0, lng=0), type="roadwork")
        assert h.severity == "medium"
        assert h.source == "static"
        assert h.description is None
        assert h.properties == {}

    def test_invalid_severity_rejected(self):
        with pytest.raises(ValidationError):
            HazardRecord(id="x", position=Position(lat=0, lng=0), type="roadwork", severity="extreme")

    def test_immutable(self):
        h = make_hazard("x", 0, 0)
        with pytest.raises(ValidationError):
            h.type = "roadwork"

    def test_to_feature_uses_lng_lat_order(self):
        h = make_hazard("cam", 53.5444, -1.3762, description="A61")
        feature = h.to_feature()

        assert feature["geometry"] == {"type": "Point", "coordinates": [-1.3762, 53.5444]}
        assert feature["properties"]["id"] == "cam"
        assert feature["properties"]["description"] == "A61"

    def test_to_feature_parses_back(self):
        h = make_hazard("rep", 10.0, 20.0, "roadwork", "high",
                        source="user_voice_report", reported_at=1_700_000_000.0)
        assert to_hazard(h.to_feature()).model_dump(exclude={"properties"}) == h.model_dump(exclude={"properties"})

    def test_to_feature_timestamp_in_milliseconds(self):
        h = make_hazard("rep", 10.0, 20.0, "roadwork", reported_at=1_700_000_000.0)
        assert h.to_feature()["properties"]["timestamp"] == 1_700_000_000_000


class TestResultModels:
    """결과 모델 테스트"""

    def test_alert_defaults(self):
        h = make_hazard("x", 0, 0)
        alert = HazardAlert(hazard=h, distance=12.5, type=h.type, severity=h.severity)
        assert alert.alert_level == "info"
        assert alert.time_to_reach is None

    def test_statistics_defaults(self):
        stats = HazardStatistics()
        assert stats.total == 0
        assert stats.by_type == {}
        assert stats.by_source == {}
