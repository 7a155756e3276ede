# hazardwatch/main.py
import os, asyncio, signal
from typing import Optional
import aiosqlite
import uvicorn
from hazardwatch.settings import Settings
from hazardwatch.observability.health import create_app
from hazardwatch.observability.logging_setup import setup_logging, get_logger
from hazardwatch.adapters.source.geojson import GeoJsonHazardSource
from hazardwatch.adapters.storage.sqlite_reports import SQLiteReportStore
from hazardwatch.features.hazard_detector import ProximityHazardDetector

log = get_logger("hazardwatch.main")

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()

    # 데이터 소스
    s.source.primary_path = os.getenv("HAZARD_PRIMARY_PATH", s.source.primary_path)
    s.source.fallback_path = os.getenv("HAZARD_FALLBACK_PATH", s.source.fallback_path)
    s.source.timeout_sec = float(os.getenv("HAZARD_LOAD_TIMEOUT_SEC", s.source.timeout_sec))
    s.source.max_retries = int(os.getenv("HAZARD_LOAD_MAX_RETRIES", s.source.max_retries))

    # 감지
    s.detection.alert_distance_m = float(os.getenv("ALERT_DISTANCE_M", s.detection.alert_distance_m))
    s.detection.cooldown_sec = float(os.getenv("ALERT_COOLDOWN_SEC", s.detection.cooldown_sec))
    s.detection.route_buffer_m = float(os.getenv("ROUTE_BUFFER_M", s.detection.route_buffer_m))
    monitored = os.getenv("MONITORED_TYPES")
    if monitored:
        s.detection.monitored_types = [t.strip() for t in monitored.split(",") if t.strip()]

    # 사용자 신고
    s.user_reports.enabled = _b("USER_REPORTS_ENABLED", s.user_reports.enabled)
    s.user_reports.db_path = os.getenv("USER_REPORTS_DB", s.user_reports.db_path)
    s.user_reports.ttl_sec = int(os.getenv("USER_REPORTS_TTL_SEC", s.user_reports.ttl_sec))

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("METRICS_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)
    s.observability.log_json = os.getenv("LOG_FORMAT", "json" if s.observability.log_json else "console").lower() == "json"

    return s

async def build_detector(s: Settings) -> ProximityHazardDetector:
    source = GeoJsonHazardSource.from_settings(s.source)

    store: Optional[SQLiteReportStore] = None
    if s.user_reports.enabled:
        store = SQLiteReportStore(s.user_reports.db_path, s.user_reports.ttl_sec)
        try:
            await store.init()
        except (aiosqlite.Error, OSError) as e:
            # 신고 저장 없이 정적 위험 요소만으로 동작
            log.error(f"사용자 신고 저장소 초기화 실패, 신고 저장 비활성화: {s.user_reports.db_path}: {e!r}")
            store = None

    detector = ProximityHazardDetector.from_settings(s, source=source, report_store=store)
    await detector.load()
    return detector

async def start_http(settings: Settings, detector: ProximityHazardDetector) -> asyncio.Task:
    app = create_app(settings, detector)
    return asyncio.create_task(uvicorn.Server(
        uvicorn.Config(app, host="0.0.0.0", port=settings.observability.http_port, log_level="info")
    ).serve())

async def main():
    s = build_settings()
    setup_logging(s.observability.log_level, json_logs=s.observability.log_json)
    log.info("설정 로드 완료")

    detector = await build_detector(s)
    log.info(f"위험 요소 감지기 준비 완료 hazards:{detector.hazard_count}")

    http_task = await start_http(s, detector)
    log.info(f"HTTP 서버 시작됨 port:{s.observability.http_port}")

    stop = asyncio.Future()
    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try: loop.add_signal_handler(sig, lambda: (not stop.done()) and stop.set_result(True))
            except NotImplementedError: pass
    except RuntimeError: pass

    await stop
    log.info("종료 중")
    http_task.cancel()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
