"""
Retry utilities for HazardWatch.

This module provides retry and backoff utilities
for fetching hazard data from unreliable locations.
"""

import asyncio
import random
from typing import Callable, Awaitable, Optional, Tuple, Type, TypeVar
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.retry")

T = TypeVar('T')

def backoff_delay(attempt: int, base: float, max_delay: float) -> float:
    """
    지수 백오프 지연 시간을 계산합니다.

    Args:
        attempt: 현재 시도 횟수 (1부터 시작)
        base: 기본 지연 시간 (초)
        max_delay: 최대 지연 시간 (초)
    """
    return min(max_delay, base * (2 ** max(0, attempt - 1)))

async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    jitter: bool = True,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    operation_name: Optional[str] = None,
) -> T:
    """
    지수 백오프와 함께 함수를 재시도합니다.

    Args:
        func: 재시도할 비동기 함수
        max_retries: 최대 재시도 횟수
        base_delay: 기본 지연 시간 (초)
        max_delay: 최대 지연 시간 (초)
        jitter: 지터 적용 여부
        retry_on: 재시도 대상 예외 타입들 (그 외 예외는 즉시 전파)
        operation_name: 로그에 표시할 작업 이름

    Returns:
        함수 실행 결과

    Raises:
        마지막 시도에서 발생한 예외
    """
    name = operation_name or getattr(func, "__name__", "operation")

    for attempt in range(1, max_retries + 2):  # 최초 1회 + max_retries
        try:
            return await func()
        except retry_on as e:
            if attempt > max_retries:
                log.error(f"{name} 최종 실패 (시도 {attempt}/{max_retries + 1}): {e!r}")
                raise

            # 지연 계산
            delay = backoff_delay(attempt, base_delay, max_delay)

            # 지터 적용
            if jitter:
                delay = delay * (0.5 + random.random() * 0.5)

            log.warning(f"{name} 실패 (시도 {attempt}/{max_retries + 1}): {e!r}. {delay:.2f}초 후 재시도")
            await asyncio.sleep(delay)

    # range가 비어 있을 수 없으므로 도달하지 않음
    raise RuntimeError("retry_with_backoff: unreachable")
