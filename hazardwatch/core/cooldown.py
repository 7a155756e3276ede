"""
Per-hazard alert cooldown for HazardWatch.

Tracks when each hazard was last alerted so repeated position updates
do not re-announce the same hazard, and evicts stale entries so the
state stays bounded over long sessions.
"""

from typing import Dict, Optional


class AlertCooldown:
    """위험 요소별 재알림 쿨다운 상태"""

    def __init__(self, window_sec: float = 5.0, retention_factor: float = 12.0):
        """
        초기화합니다.

        Args:
            window_sec: 같은 위험 요소에 대한 최소 재알림 간격 (초)
            retention_factor: window_sec의 몇 배가 지난 항목을 제거할지
        """
        if window_sec < 0:
            raise ValueError("window_sec must be >= 0")
        if retention_factor < 1:
            raise ValueError("retention_factor must be >= 1")
        self.window_sec = window_sec
        self.retention_sec = window_sec * retention_factor
        self._last_alert: Dict[str, float] = {}
        self._last_sweep: Optional[float] = None

    def __len__(self) -> int:
        return len(self._last_alert)

    def __contains__(self, hazard_id: str) -> bool:
        return hazard_id in self._last_alert

    def last_alert(self, hazard_id: str) -> Optional[float]:
        return self._last_alert.get(hazard_id)

    def is_cooling_down(self, hazard_id: str, now: float) -> bool:
        """마지막 알림 후 window_sec 이내(경계 포함)이면 True"""
        last = self._last_alert.get(hazard_id)
        return last is not None and (now - last) <= self.window_sec

    def try_acquire(self, hazard_id: str, now: float) -> bool:
        """
        쿨다운 중이 아니면 현재 시각을 기록하고 True를 반환합니다.
        """
        if self.is_cooling_down(hazard_id, now):
            return False
        self._last_alert[hazard_id] = now
        return True

    def evict(self, now: float) -> int:
        """
        보존 기간이 지난 항목들을 제거합니다.

        Returns:
            제거된 항목 수
        """
        self._last_sweep = now
        expired = [k for k, t in self._last_alert.items() if now - t > self.retention_sec]
        for k in expired:
            del self._last_alert[k]
        return len(expired)

    def maybe_evict(self, now: float) -> int:
        """마지막 정리 후 window_sec 이상 지났을 때만 정리합니다."""
        if self._last_sweep is not None and now - self._last_sweep < self.window_sec:
            return 0
        return self.evict(now)

    def clear(self) -> None:
        self._last_alert.clear()
        self._last_sweep = None
