"""
Error taxonomy for HazardWatch.

Hazard alerting is best effort: load failures are caught by the detector
and degrade to an empty hazard set, while invalid query input is raised
to the caller.
"""


class HazardError(Exception):
    """HazardWatch 공통 예외"""


class DataIntegrityError(HazardError, ValueError):
    """잘못된 형식의 위험 요소 레코드 또는 피처 컬렉션"""


class InvalidArgumentError(HazardError, ValueError):
    """잘못된 조회 입력 (좌표 누락, 범위 초과 등)"""


class HazardLoadError(HazardError):
    """모든 데이터 경로에서 위험 요소 로드 실패"""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class HazardLoadTimeout(HazardLoadError):
    """마지막 로드 실패가 타임아웃인 경우"""
