# hazardwatch/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

class HazardSource(BaseModel):
    primary_path: str = "./public/hazards.geojson"
    fallback_path: str = "./hazards.geojson"
    timeout_sec: float = 10.0
    max_retries: int = 2
    backoff_initial_sec: float = 0.5
    backoff_max_sec: float = 5.0

class Detection(BaseModel):
    alert_distance_m: float = 500.0
    min_alert_distance_m: float = 100.0
    max_alert_distance_m: float = 2000.0
    cooldown_sec: float = 5.0
    cooldown_retention_factor: float = 12.0   # cooldown_sec 의 배수만큼 지난 항목 제거
    route_buffer_m: float = 500.0
    monitored_types: list[str] | None = None  # None 이면 전체 유형 감시

class UserReports(BaseModel):
    enabled: bool = True
    db_path: str = "/data/user_reports.db"
    ttl_sec: int = 86400

class Observability(BaseModel):
    http_port: int = 8099
    metrics_enabled: bool = True
    service_name: str = "HazardWatch"
    build_version: str = "0.1.0"
    build_date: str = "2025-01-01"
    log_level: str = "INFO"
    log_json: bool = False   # True 이면 한 줄 JSON 로그

class Settings(BaseModel):
    # 하위 섹션 (기본값/팩토리로 누락 방지)
    source: HazardSource = Field(default_factory=HazardSource)
    detection: Detection = Field(default_factory=Detection)
    user_reports: UserReports = Field(default_factory=UserReports)
    observability: Observability = Field(default_factory=Observability)
