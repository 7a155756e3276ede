"""
Common 모듈 단위 테스트

이 모듈은 지리 유틸리티와 재시도 로직의 기능을 테스트합니다.
"""

import asyncio
import math
import pytest
from unittest.mock import AsyncMock, patch
from hypothesis import given, strategies as st
from hazardwatch.common.geo import (
    haversine_distance, initial_bearing, point_to_segment_distance,
    validate_coordinates, EARTH_RADIUS_M
)
from hazardwatch.common.retry import backoff_delay, retry_with_backoff
from tests.conftest import meters_to_degrees


latitudes = st.floats(min_value=-90, max_value=90)
longitudes = st.floats(min_value=-180, max_value=180)


class TestHaversineDistance:
    """Haversine 거리 계산 테스트"""

    def test_same_point(self):
        """같은 지점 간 거리 테스트"""
        assert haversine_distance(37.5665, 126.9780, 37.5665, 126.9780) == 0.0

    def test_one_degree_longitude_at_equator(self):
        """적도상 경도 1도 거리 (약 111,195m)"""
        distance = haversine_distance(0, 0, 0, 1)
        assert distance == pytest.approx(math.pi * EARTH_RADIUS_M / 180, rel=1e-9)
        assert distance == pytest.approx(111_195, abs=1)

    def test_one_degree_latitude(self):
        """자오선상 위도 1도 거리"""
        assert haversine_distance(0, 0, 1, 0) == pytest.approx(111_195, abs=1)

    def test_seoul_to_busan(self):
        """서울에서 부산까지 약 325km"""
        distance = haversine_distance(37.5665, 126.9780, 35.1796, 129.0756)
        assert 320_000 <= distance <= 330_000

    def test_antipodal(self):
        """지구 반대편 거리는 반 둘레"""
        assert haversine_distance(0, 0, 0, 180) == pytest.approx(math.pi * EARTH_RADIUS_M)

    @given(lat1=latitudes, lon1=longitudes, lat2=latitudes, lon2=longitudes)
    def test_symmetry(self, lat1, lon1, lat2, lon2):
        """거리는 대칭이며 0 이상, 반 둘레 이하"""
        d1 = haversine_distance(lat1, lon1, lat2, lon2)
        d2 = haversine_distance(lat2, lon2, lat1, lon1)
        assert d1 == pytest.approx(d2, abs=1e-6)
        assert 0 <= d1 <= math.pi * EARTH_RADIUS_M + 1e-6


class TestInitialBearing:
    """방위각 계산 테스트"""

    def test_cardinal_directions(self):
        assert initial_bearing(0, 0, 1, 0) == pytest.approx(0.0)
        assert initial_bearing(0, 0, 0, 1) == pytest.approx(90.0)
        assert initial_bearing(0, 0, -1, 0) == pytest.approx(180.0)
        assert initial_bearing(0, 0, 0, -1) == pytest.approx(270.0)

    @given(lat1=latitudes, lon1=longitudes, lat2=latitudes, lon2=longitudes)
    def test_range(self, lat1, lon1, lat2, lon2):
        bearing = initial_bearing(lat1, lon1, lat2, lon2)
        assert 0 <= bearing <= 360


class TestPointToSegmentDistance:
    """점-선분 거리 테스트"""

    def test_point_beside_segment_middle(self):
        """선분 중간 옆의 점은 꼭짓점보다 선분에 가깝다"""
        start = (0.0, 0.0)
        end = (0.0, meters_to_degrees(2000))
        point = (meters_to_degrees(100), meters_to_degrees(1000))

        distance = point_to_segment_distance(point, start, end)

        assert distance == pytest.approx(100, rel=1e-3)
        assert haversine_distance(*point, *start) > 1000

    def test_point_beyond_end_uses_endpoint(self):
        start = (0.0, 0.0)
        end = (0.0, meters_to_degrees(1000))
        point = (0.0, meters_to_degrees(1400))

        assert point_to_segment_distance(point, start, end) == pytest.approx(400, rel=1e-6)

    def test_degenerate_segment(self):
        point = (0.0, meters_to_degrees(300))
        assert point_to_segment_distance(point, (0.0, 0.0), (0.0, 0.0)) == pytest.approx(300, rel=1e-6)


class TestValidateCoordinates:
    """좌표 유효성 검사 테스트"""

    def test_valid(self):
        assert validate_coordinates(37.5665, 126.9780) is True
        assert validate_coordinates(-90, -180) is True
        assert validate_coordinates(90, 180) is True

    def test_out_of_range(self):
        assert validate_coordinates(90.1, 0) is False
        assert validate_coordinates(0, -180.5) is False

    def test_non_finite(self):
        assert validate_coordinates(float("nan"), 0) is False
        assert validate_coordinates(0, float("inf")) is False


class TestRetry:
    """재시도 로직 테스트"""

    def test_backoff_delay(self):
        assert backoff_delay(1, 0.5, 10) == 0.5
        assert backoff_delay(2, 0.5, 10) == 1.0
        assert backoff_delay(3, 0.5, 10) == 2.0
        assert backoff_delay(10, 0.5, 10) == 10

    @pytest.mark.asyncio
    async def test_success_first_try(self):
        func = AsyncMock(return_value="ok")
        result = await retry_with_backoff(func, max_retries=3, base_delay=0.001)
        assert result == "ok"
        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_success_after_failures(self):
        func = AsyncMock(side_effect=[OSError("1"), OSError("2"), "ok"])
        with patch("hazardwatch.common.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            result = await retry_with_backoff(func, max_retries=3, base_delay=0.1, jitter=False)
        assert result == "ok"
        assert func.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [0.1, 0.2]

    @pytest.mark.asyncio
    async def test_exhausted_raises_last_exception(self):
        func = AsyncMock(side_effect=OSError("down"))
        with patch("hazardwatch.common.retry.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(OSError, match="down"):
                await retry_with_backoff(func, max_retries=2, base_delay=0.1)
        assert func.await_count == 3

    @pytest.mark.asyncio
    async def test_non_retryable_propagates_immediately(self):
        func = AsyncMock(side_effect=ValueError("bad json"))
        with pytest.raises(ValueError):
            await retry_with_backoff(func, max_retries=5, base_delay=0.1, retry_on=(OSError,))
        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_jitter_bounds(self):
        func = AsyncMock(side_effect=[OSError(), "ok"])
        with patch("hazardwatch.common.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            await retry_with_backoff(func, max_retries=1, base_delay=1.0, jitter=True)
        delay = sleep.await_args.args[0]
        assert 0.5 <= delay <= 1.0
