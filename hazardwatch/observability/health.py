"""
HTTP endpoints for HazardWatch observability.

This module implements health, readiness, metrics, info and statistics
endpoints for monitoring and operational visibility.
"""

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
import time
from hazardwatch.settings import Settings
from hazardwatch.features.hazard_detector import ProximityHazardDetector
from hazardwatch.observability import metrics
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.http")

def create_app(settings: Settings, detector: ProximityHazardDetector) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="HazardWatch proximity hazard detector"
    )

    start_time = time.time()

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트 (위험 요소 로드 완료 여부)"""
        load_error = detector.load_error
        body = {
            "status": "ready" if detector.is_ready else "loading",
            "service": settings.observability.service_name,
            "hazards": detector.hazard_count,
            "load_error": str(load_error) if load_error else None,
            "timestamp": time.time()
        }
        return JSONResponse(body, status_code=200 if detector.is_ready else 503)

    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")

        metrics.uptime_seconds.set(time.time() - start_time)
        return Response(
            generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        uptime = time.time() - start_time
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(uptime),
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level,
            "alert_distance_m": detector.alert_distance
        })

    @app.get("/statistics")
    async def statistics():
        """로드된 위험 요소 집계"""
        return JSONResponse(detector.get_statistics().model_dump())

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info",
                "statistics": "/statistics"
            }
        })

    return app
