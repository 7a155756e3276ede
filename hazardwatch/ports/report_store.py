"""
User report store port interface.

This module defines the protocol for persisting user-reported hazards.
"""

from typing import List, Optional, Protocol
from hazardwatch.core.models import HazardRecord

class ReportStorePort(Protocol):
    """사용자 신고 위험 요소 저장소 포트 인터페이스"""
    
    async def init(self) -> None:
        """저장소를 초기화합니다."""
        ...
    
    async def add(self, hazard: HazardRecord) -> bool:
        """
        신고를 저장합니다.
        
        Args:
            hazard: 저장할 위험 요소
            
        Returns:
            새로 저장되었으면 True, 같은 ID가 이미 있으면 False
        """
        ...
    
    async def remove(self, hazard_id: str) -> bool:
        """
        신고를 삭제합니다.
        
        Returns:
            삭제된 항목이 있으면 True
        """
        ...
    
    async def load_valid(self, now: Optional[float] = None) -> List[HazardRecord]:
        """
        만료되지 않은 신고를 반환하고 만료된 신고는 정리합니다.
        
        Args:
            now: 현재 시간 (Unix timestamp), None이면 현재 시간 사용
        """
        ...
