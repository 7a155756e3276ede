"""
SQLite-based user report store for HazardWatch.

This module persists user-reported hazards as GeoJSON features with
a time-to-live, so reports survive restarts but expire after a day.
"""

import json
import time
from typing import List, Optional
import aiosqlite
from hazardwatch.core.errors import DataIntegrityError
from hazardwatch.core.models import HazardRecord
from hazardwatch.core.normalize import to_hazard
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.reports")

# SQLite 스키마
SCHEMA = """
CREATE TABLE IF NOT EXISTS reports (
    id TEXT PRIMARY KEY,
    feature TEXT NOT NULL,
    reported_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_reports_reported_at ON reports(reported_at);
"""

class SQLiteReportStore:
    """SQLite 기반 사용자 신고 저장소"""

    def __init__(self, path: str, ttl_sec: int = 86400):
        """
        초기화합니다.

        Args:
            path: SQLite 데이터베이스 파일 경로
            ttl_sec: 신고 만료 시간 (초)
        """
        self.path = path
        self.ttl = ttl_sec
        log.info(f"SQLiteReportStore 초기화: {path}, TTL: {ttl_sec}초")

    async def init(self) -> None:
        """데이터베이스를 초기화합니다."""
        async with aiosqlite.connect(self.path) as db:
            await db.executescript(SCHEMA)
            await db.commit()
        log.info("SQLiteReportStore 스키마 초기화 완료")

    async def add(self, hazard: HazardRecord) -> bool:
        """
        신고를 저장합니다. 같은 ID가 이미 있으면 False를 반환합니다.

        Args:
            hazard: 저장할 위험 요소 (reported_at 이 없으면 현재 시간 사용)
        """
        reported_at = hazard.reported_at if hazard.reported_at is not None else time.time()
        feature = json.dumps(hazard.to_feature(), ensure_ascii=False)

        try:
            async with aiosqlite.connect(self.path) as db:
                await db.execute(
                    "INSERT INTO reports (id, feature, reported_at) VALUES (?, ?, ?)",
                    (hazard.id, feature, reported_at)
                )
                await db.commit()
                return True
        except aiosqlite.IntegrityError:
            # ID가 이미 존재함
            return False
        except aiosqlite.Error as e:
            log.error(f"SQLiteReportStore add 오류: {e}")
            return False

    async def remove(self, hazard_id: str) -> bool:
        """신고를 삭제합니다."""
        try:
            async with aiosqlite.connect(self.path) as db:
                cursor = await db.execute("DELETE FROM reports WHERE id = ?", (hazard_id,))
                await db.commit()
                return cursor.rowcount > 0
        except aiosqlite.Error as e:
            log.error(f"SQLiteReportStore remove 오류: {e}")
            return False

    async def gc(self, now: Optional[float] = None) -> int:
        """
        만료된 신고들을 정리합니다.

        Args:
            now: 현재 시간 (Unix timestamp), None이면 현재 시간 사용

        Returns:
            삭제된 항목 수
        """
        if now is None:
            now = time.time()

        try:
            async with aiosqlite.connect(self.path) as db:
                cursor = await db.execute(
                    "DELETE FROM reports WHERE reported_at <= ?",
                    (now - self.ttl,)
                )
                await db.commit()
                deleted = cursor.rowcount
                if deleted > 0:
                    log.info(f"만료된 신고 {deleted}개 정리됨")
                return deleted
        except aiosqlite.Error as e:
            log.error(f"SQLiteReportStore gc 오류: {e}")
            return 0

    async def load_valid(self, now: Optional[float] = None) -> List[HazardRecord]:
        """만료되지 않은 신고를 신고 시각 순으로 반환합니다."""
        if now is None:
            now = time.time()

        await self.gc(now)

        try:
            async with aiosqlite.connect(self.path) as db:
                cursor = await db.execute(
                    "SELECT id, feature FROM reports WHERE reported_at > ? ORDER BY reported_at, id",
                    (now - self.ttl,)
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            log.error(f"SQLiteReportStore load_valid 오류: {e}")
            return []

        hazards: List[HazardRecord] = []
        for report_id, feature in rows:
            try:
                hazards.append(to_hazard(json.loads(feature)))
            except (ValueError, DataIntegrityError) as e:
                log.warning(f"손상된 신고 건너뜀 id={report_id}: {e}")
        return hazards

    async def get_count(self) -> int:
        """현재 저장된 신고 수를 반환합니다."""
        try:
            async with aiosqlite.connect(self.path) as db:
                cursor = await db.execute("SELECT COUNT(*) FROM reports")
                result = await cursor.fetchone()
                return result[0] if result else 0
        except aiosqlite.Error as e:
            log.error(f"SQLiteReportStore get_count 오류: {e}")
            return 0
