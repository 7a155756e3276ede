"""
Proximity hazard detector for HazardWatch.

This module owns the loaded hazard set and answers live proximity
queries (with a per-hazard re-alert cooldown), route corridor queries
and categorical queries. Loading degrades to an empty set on failure so
navigation keeps working without hazard data.
"""

import math
import time
from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union
from hazardwatch.common.geo import haversine_distance, initial_bearing, point_to_segment_distance
from hazardwatch.core.alerting import alert_level, alert_message, time_to_reach
from hazardwatch.core.cooldown import AlertCooldown
from hazardwatch.core.display import get_hazard_display_info
from hazardwatch.core.errors import DataIntegrityError, HazardLoadError, HazardLoadTimeout, InvalidArgumentError
from hazardwatch.core.models import (
    DisplayInfo, HazardAlert, HazardRecord, HazardStatistics, Position, PositionLike,
    USER_REPORT_SOURCE, to_position, to_positions,
)
from hazardwatch.core.normalize import to_hazard
from hazardwatch.observability import metrics
from hazardwatch.observability.logging_setup import get_logger
from hazardwatch.ports.report_store import ReportStorePort
from hazardwatch.ports.source import HazardSourcePort

log = get_logger("hazardwatch.detector")

AlertListener = Callable[[List[HazardAlert]], Any]

def _check_distance(value: float, name: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} 값이 숫자가 아닙니다: {value!r}") from e
    if not math.isfinite(result) or result < 0:
        raise InvalidArgumentError(f"{name} 값은 0 이상의 유한한 값이어야 합니다: {value!r}")
    return result

class ProximityHazardDetector:
    """위험 요소 근접 감지기"""

    def __init__(self,
                 source: Optional[HazardSourcePort] = None,
                 report_store: Optional[ReportStorePort] = None,
                 *,
                 alert_distance: float = 500.0,
                 min_alert_distance: float = 100.0,
                 max_alert_distance: float = 2000.0,
                 cooldown_sec: float = 5.0,
                 cooldown_retention_factor: float = 12.0,
                 route_buffer: float = 500.0,
                 monitored_types: Optional[Iterable[str]] = None,
                 clock: Callable[[], float] = time.time):
        """
        초기화합니다. 위험 요소는 load() 호출 전까지 비어 있습니다.

        Args:
            source: 정적 위험 요소 소스
            report_store: 사용자 신고 저장소 (없으면 메모리에만 보관)
            alert_distance: 기본 알림 거리 (미터)
            min_alert_distance: set_alert_distance 하한 (미터)
            max_alert_distance: set_alert_distance 상한 (미터)
            cooldown_sec: 같은 위험 요소 재알림 최소 간격 (초)
            cooldown_retention_factor: 쿨다운 항목 보존 배수
            route_buffer: 경로 주변 조회 기본 버퍼 (미터)
            monitored_types: 근접 알림 대상 유형 (None 이면 전체)
            clock: 현재 시각 함수 (초)
        """
        self.source = source
        self.report_store = report_store
        self.min_alert_distance = min_alert_distance
        self.max_alert_distance = max_alert_distance
        self.route_buffer = route_buffer
        self.monitored_types = frozenset(monitored_types) if monitored_types is not None else None
        self._clock = clock
        self._cooldown = AlertCooldown(cooldown_sec, cooldown_retention_factor)
        self._hazards: List[HazardRecord] = []
        self._listeners: List[AlertListener] = []
        self._loaded = False
        self._load_error: Optional[HazardLoadError] = None
        self._alert_distance = _check_distance(alert_distance, "alert_distance")

    @classmethod
    async def create(cls, source: Optional[HazardSourcePort] = None,
                     report_store: Optional[ReportStorePort] = None,
                     **kwargs) -> "ProximityHazardDetector":
        """감지기를 생성하고 위험 요소 로드를 기다립니다."""
        detector = cls(source, report_store, **kwargs)
        await detector.load()
        return detector

    @classmethod
    def from_settings(cls, settings, source: Optional[HazardSourcePort] = None,
                      report_store: Optional[ReportStorePort] = None,
                      clock: Callable[[], float] = time.time) -> "ProximityHazardDetector":
        d = settings.detection
        return cls(
            source,
            report_store,
            alert_distance=d.alert_distance_m,
            min_alert_distance=d.min_alert_distance_m,
            max_alert_distance=d.max_alert_distance_m,
            cooldown_sec=d.cooldown_sec,
            cooldown_retention_factor=d.cooldown_retention_factor,
            route_buffer=d.route_buffer_m,
            monitored_types=d.monitored_types,
            clock=clock,
        )

    # ---- 상태 ----

    @property
    def hazards(self) -> tuple:
        return tuple(self._hazards)

    @property
    def hazard_count(self) -> int:
        return len(self._hazards)

    @property
    def is_ready(self) -> bool:
        return self._loaded

    @property
    def load_error(self) -> Optional[HazardLoadError]:
        """마지막 로드에서 정적 소스가 실패한 경우 그 예외"""
        return self._load_error

    @property
    def alert_distance(self) -> float:
        return self._alert_distance

    @property
    def cooldown(self) -> AlertCooldown:
        return self._cooldown

    # ---- 로드 ----

    async def load(self) -> None:
        """
        정적 위험 요소와 만료되지 않은 사용자 신고를 로드합니다.

        실패해도 예외를 던지지 않고 빈 목록으로 동작합니다.
        """
        started = time.perf_counter()
        hazards: List[HazardRecord] = []
        self._load_error = None

        if self.source is not None:
            try:
                hazards.extend(await self.source.load())
            except HazardLoadTimeout as e:
                self._load_error = e
                metrics.hazard_load_failures.labels(kind="timeout").inc()
                log.error(f"위험 요소 로드 타임아웃, 빈 목록으로 동작: {e}")
            except HazardLoadError as e:
                self._load_error = e
                metrics.hazard_load_failures.labels(kind="error").inc()
                log.error(f"위험 요소 로드 실패, 빈 목록으로 동작: {e}")
            except Exception as e:
                # 포트 구현이 HazardLoadError 로 감싸지 않은 경우
                self._load_error = HazardLoadError(f"예상하지 못한 로드 오류: {e!r}")
                metrics.hazard_load_failures.labels(kind="unexpected").inc()
                log.exception(f"위험 요소 로드 중 예상하지 못한 오류, 빈 목록으로 동작: {e!r}")

        if self.report_store is not None:
            reports = await self.report_store.load_valid(self._clock())
            hazards.extend(reports)
            log.info(f"사용자 신고 위험 요소 {len(reports)}개 로드됨")

        self._hazards = hazards
        self._loaded = True
        metrics.hazards_loaded.set(len(hazards))
        metrics.load_seconds.observe(time.perf_counter() - started)
        log.info(f"전체 위험 요소 {len(hazards)}개 로드 완료")

    async def refresh_hazards(self) -> None:
        """위험 요소를 비우고 소스에서 다시 로드합니다."""
        self._hazards = []
        self._loaded = False
        await self.load()

    # ---- 근접 알림 ----

    def _distance_to(self, position: Position, hazard: HazardRecord) -> float:
        return haversine_distance(position.lat, position.lng,
                                  hazard.position.lat, hazard.position.lng)

    def _is_monitored(self, hazard: HazardRecord) -> bool:
        return self.monitored_types is None or hazard.type in self.monitored_types

    def check_proximity(self,
                        position: Optional[PositionLike],
                        alert_distance: Optional[float] = None,
                        *,
                        speed_kmh: Optional[float] = None) -> List[HazardAlert]:
        """
        현재 위치에서 알림 거리 이내의 위험 요소를 가까운 순으로 반환합니다.

        같은 위험 요소는 쿨다운(기본 5초) 동안 다시 알리지 않으며,
        반환된 위험 요소마다 쿨다운 시각을 갱신합니다.

        Args:
            position: 현재 위치, None 이면 빈 목록
            alert_distance: 알림 거리 (미터), None 이면 설정값
            speed_kmh: 현재 속도 (km/h), 도달 시간 계산용

        Raises:
            InvalidArgumentError: 위치 또는 거리 값이 잘못된 경우
        """
        if position is None or not self._hazards:
            return []
        current = to_position(position)
        limit = self._alert_distance if alert_distance is None else _check_distance(alert_distance, "alert_distance")

        started = time.perf_counter()
        now = self._clock()
        self._cooldown.maybe_evict(now)

        alerts: List[HazardAlert] = []
        suppressed = 0

        for hazard in self._hazards:
            if not self._is_monitored(hazard):
                continue

            distance = self._distance_to(current, hazard)
            if distance > limit:
                continue

            if not self._cooldown.try_acquire(hazard.id, now):
                suppressed += 1
                continue

            alerts.append(HazardAlert(
                hazard=hazard,
                distance=distance,
                type=hazard.type,
                severity=hazard.severity,
                bearing=initial_bearing(current.lat, current.lng, hazard.position.lat, hazard.position.lng),
                alert_level=alert_level(distance, hazard.severity),
                message=alert_message(hazard, distance),
                time_to_reach=time_to_reach(distance, speed_kmh),
            ))
            metrics.alerts_emitted.labels(type=hazard.type, severity=hazard.severity).inc()

        alerts.sort(key=lambda a: a.distance)

        if suppressed:
            metrics.alerts_suppressed.inc(suppressed)
        metrics.cooldown_entries.set(len(self._cooldown))
        metrics.proximity_check_seconds.observe(time.perf_counter() - started)

        if alerts:
            log.debug(f"근접 위험 요소 {len(alerts)}개 (쿨다운 억제 {suppressed}개)")

        self._notify(alerts)
        return alerts

    def on_hazard_alert(self, callback: AlertListener) -> None:
        """check_proximity 결과를 받을 리스너를 등록합니다."""
        self._listeners.append(callback)

    def _notify(self, alerts: List[HazardAlert]) -> None:
        for callback in self._listeners:
            try:
                # 리스너마다 복사본 전달 (반환값과 분리)
                callback(list(alerts))
            except Exception as e:
                log.error(f"위험 알림 리스너 오류: {e!r}")

    def clear_alert_history(self) -> None:
        self._cooldown.clear()
        metrics.cooldown_entries.set(0)

    # ---- 경로/영역 조회 ----

    def get_hazards_near_route(self,
                               route: Optional[Sequence[PositionLike]],
                               buffer_distance: Optional[float] = None,
                               *,
                               use_segments: bool = False) -> List[HazardRecord]:
        """
        경로 주변 버퍼 거리 이내의 위험 요소를 로드 순서대로 반환합니다.

        기본은 경로 꼭짓점까지의 거리만 확인합니다. use_segments=True 이면
        꼭짓점 사이 선분까지의 거리도 사용합니다.

        Args:
            route: 경로 좌표 목록
            buffer_distance: 버퍼 거리 (미터), None 이면 설정값
            use_segments: 선분 거리 사용 여부
        """
        if not route or not self._hazards:
            return []
        points = to_positions(route)
        buffer = self.route_buffer if buffer_distance is None else _check_distance(buffer_distance, "buffer_distance")

        result: List[HazardRecord] = []
        for hazard in self._hazards:
            if use_segments and len(points) > 1:
                near = self._near_polyline(hazard, points, buffer)
            else:
                near = any(self._distance_to(p, hazard) <= buffer for p in points)
            if near:
                result.append(hazard)
        return result

    def _near_polyline(self, hazard: HazardRecord, points: List[Position], buffer: float) -> bool:
        target = (hazard.position.lat, hazard.position.lng)
        for start, end in zip(points, points[1:]):
            d = point_to_segment_distance(target, (start.lat, start.lng), (end.lat, end.lng))
            if d <= buffer:
                return True
        return False

    def get_hazards_in_area(self, center: Optional[PositionLike], radius: float) -> List[HazardRecord]:
        """중심점에서 반경 이내의 위험 요소를 로드 순서대로 반환합니다."""
        if center is None or not self._hazards:
            return []
        point = to_position(center)
        limit = _check_distance(radius, "radius")
        return [h for h in self._hazards if self._distance_to(point, h) <= limit]

    # ---- 분류 조회 ----

    def get_hazards_by_type(self, hazard_type: str) -> List[HazardRecord]:
        return [h for h in self._hazards if h.type == hazard_type]

    def get_hazards_by_severity(self, severity: str) -> List[HazardRecord]:
        return [h for h in self._hazards if h.severity == severity]

    def get_hazard_display_info(self, hazard: HazardRecord) -> DisplayInfo:
        return get_hazard_display_info(hazard)

    def set_alert_distance(self, distance: float) -> float:
        """
        기본 알림 거리를 [min_alert_distance, max_alert_distance] 범위로 제한하여 설정합니다.

        Returns:
            실제로 적용된 거리
        """
        try:
            value = float(distance)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"알림 거리가 숫자가 아닙니다: {distance!r}") from e
        if math.isnan(value):
            raise InvalidArgumentError("알림 거리가 NaN 입니다")
        self._alert_distance = max(self.min_alert_distance, min(self.max_alert_distance, value))
        log.info(f"알림 거리 설정: {self._alert_distance:.0f}m (요청 {value})")
        return self._alert_distance

    def get_statistics(self) -> HazardStatistics:
        return HazardStatistics(
            total=len(self._hazards),
            by_type=dict(Counter(h.type for h in self._hazards)),
            by_severity=dict(Counter(h.severity for h in self._hazards)),
            by_source=dict(Counter(h.source for h in self._hazards)),
        )

    # ---- 사용자 신고 ----

    def get_user_reported_hazards(self) -> List[HazardRecord]:
        return [h for h in self._hazards if h.source == USER_REPORT_SOURCE]

    async def add_user_reported_hazard(self, report: Union[HazardRecord, Dict[str, Any]]) -> bool:
        """
        사용자 신고 위험 요소를 추가하고 저장소에 보관합니다.

        Args:
            report: GeoJSON 피처 또는 HazardRecord

        Returns:
            추가 성공 여부
        """
        try:
            hazard = report if isinstance(report, HazardRecord) else to_hazard(report)
        except DataIntegrityError as e:
            log.warning(f"잘못된 사용자 신고 거부: {e}")
            metrics.user_reports.labels(action="rejected").inc()
            return False

        updates: Dict[str, Any] = {}
        if hazard.source != USER_REPORT_SOURCE:
            updates["source"] = USER_REPORT_SOURCE
        if hazard.reported_at is None:
            updates["reported_at"] = self._clock()
        if updates:
            hazard = hazard.model_copy(update=updates)

        if any(h.id == hazard.id for h in self._hazards):
            log.warning(f"이미 존재하는 위험 요소 ID, 신고 거부: {hazard.id}")
            metrics.user_reports.labels(action="rejected").inc()
            return False

        if self.report_store is not None and not await self.report_store.add(hazard):
            log.error(f"사용자 신고 저장 실패: {hazard.id}")
            return False

        self._hazards.append(hazard)
        metrics.hazards_loaded.set(len(self._hazards))
        metrics.user_reports.labels(action="added").inc()
        log.info(f"사용자 신고 위험 요소 추가됨: {hazard.id} ({hazard.type})")
        return True

    async def remove_user_reported_hazard(self, hazard_id: str) -> bool:
        """사용자 신고 위험 요소를 삭제합니다. 정적 위험 요소는 삭제하지 않습니다."""
        before = len(self._hazards)
        self._hazards = [
            h for h in self._hazards
            if not (h.id == hazard_id and h.source == USER_REPORT_SOURCE)
        ]
        removed = len(self._hazards) < before

        if self.report_store is not None:
            removed = await self.report_store.remove(hazard_id) or removed

        if removed:
            metrics.hazards_loaded.set(len(self._hazards))
            metrics.user_reports.labels(action="removed").inc()
            log.info(f"사용자 신고 위험 요소 삭제됨: {hazard_id}")
        return removed
