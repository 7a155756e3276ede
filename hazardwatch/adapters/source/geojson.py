"""
GeoJSON hazard source for HazardWatch.

This module loads the static hazard set from a GeoJSON feature
collection, trying a primary location then a fallback. Locations may
be local file paths or http(s) URLs.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional, Sequence
import aiohttp
from hazardwatch.common.retry import retry_with_backoff
from hazardwatch.core.errors import DataIntegrityError, HazardLoadError, HazardLoadTimeout
from hazardwatch.core.models import HazardRecord
from hazardwatch.core.normalize import to_hazards
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.source")

# 재시도 대상 예외 (잘못된 JSON은 재시도해도 같으므로 제외)
RETRYABLE_ERRORS = (aiohttp.ClientError, OSError, asyncio.TimeoutError)

def is_url(path: str) -> bool:
    return path.startswith(("http://", "https://"))

class GeoJsonHazardSource:
    """GeoJSON 피처 컬렉션 기반 위험 요소 소스"""

    def __init__(self,
                 paths: Sequence[str],
                 timeout_sec: float = 10.0,
                 max_retries: int = 2,
                 backoff_initial_sec: float = 0.5,
                 backoff_max_sec: float = 5.0):
        """
        초기화합니다.

        Args:
            paths: 시도할 경로 목록 (기본 경로, 대체 경로 순)
            timeout_sec: 경로별 1회 시도 타임아웃 (초)
            max_retries: 경로별 최대 재시도 횟수
            backoff_initial_sec: 백오프 초기 지연 (초)
            backoff_max_sec: 백오프 최대 지연 (초)
        """
        self.paths = [p for p in paths if p]
        self.timeout_sec = timeout_sec
        self.max_retries = max_retries
        self.backoff_initial_sec = backoff_initial_sec
        self.backoff_max_sec = backoff_max_sec

        log.info(f"GeoJsonHazardSource 초기화됨 paths:{self.paths} timeout:{timeout_sec}s")

    @classmethod
    def from_settings(cls, source) -> "GeoJsonHazardSource":
        """설정 섹션(settings.source)으로부터 생성합니다."""
        return cls(
            [source.primary_path, source.fallback_path],
            timeout_sec=source.timeout_sec,
            max_retries=source.max_retries,
            backoff_initial_sec=source.backoff_initial_sec,
            backoff_max_sec=source.backoff_max_sec,
        )

    async def _fetch_url(self, url: str) -> Any:
        timeout = aiohttp.ClientTimeout(total=self.timeout_sec)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                # geojson은 application/geo+json 등으로 내려오는 경우가 많음
                return await response.json(content_type=None)

    async def _read_file(self, path: str) -> Any:
        text = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
        return json.loads(text)

    async def fetch_document(self, path: str) -> Any:
        """경로 하나에서 JSON 문서를 가져옵니다 (타임아웃 적용)."""
        fetch = self._fetch_url(path) if is_url(path) else self._read_file(path)
        return await asyncio.wait_for(fetch, timeout=self.timeout_sec)

    async def load(self) -> List[HazardRecord]:
        """
        경로를 순서대로 시도하여 위험 요소를 로드합니다.

        Returns:
            첫 번째로 성공한 경로의 위험 요소 목록

        Raises:
            HazardLoadTimeout: 마지막 실패가 타임아웃인 경우
            HazardLoadError: 모든 경로에서 로드 실패
        """
        if not self.paths:
            raise HazardLoadError("위험 요소 경로가 설정되지 않았습니다")

        last_error: Optional[BaseException] = None

        for path in self.paths:
            log.info(f"위험 요소 로드 시도: {path}")
            try:
                document = await retry_with_backoff(
                    lambda: self.fetch_document(path),
                    max_retries=self.max_retries,
                    base_delay=self.backoff_initial_sec,
                    max_delay=self.backoff_max_sec,
                    retry_on=RETRYABLE_ERRORS,
                    operation_name=f"hazard fetch {path}",
                )
                hazards = to_hazards(document)
            except asyncio.TimeoutError as e:
                log.warning(f"위험 요소 로드 타임아웃: {path} ({self.timeout_sec}s)")
                last_error = e
                continue
            except (aiohttp.ClientError, OSError, ValueError, DataIntegrityError) as e:
                # json.JSONDecodeError 는 ValueError 하위 클래스
                log.warning(f"위험 요소 로드 실패: {path}: {e!r}")
                last_error = e
                continue

            log.info(f"위험 요소 {len(hazards)}개 로드됨: {path}")
            return hazards

        attempts = len(self.paths)
        if isinstance(last_error, asyncio.TimeoutError):
            raise HazardLoadTimeout(
                f"위험 요소 로드 타임아웃 (경로 {attempts}개 모두 실패)", attempts=attempts
            ) from last_error
        raise HazardLoadError(
            f"위험 요소 로드 실패 (경로 {attempts}개 모두 실패): {last_error!r}", attempts=attempts
        ) from last_error
