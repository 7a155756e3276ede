"""
Hazard source port interface.

This module defines the protocol for loading the static hazard set.
"""

from typing import List, Protocol
from hazardwatch.core.models import HazardRecord

class HazardSourcePort(Protocol):
    """위험 요소 데이터 소스 포트 인터페이스"""
    
    async def load(self) -> List[HazardRecord]:
        """
        위험 요소 레코드를 로드합니다.
        
        Returns:
            로드 순서대로 정렬된 위험 요소 목록
            
        Raises:
            HazardLoadError: 모든 경로에서 로드 실패
        """
        ...
