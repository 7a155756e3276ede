"""
Metrics definitions for HazardWatch.

This module defines Prometheus metrics for monitoring
hazard loading and proximity alerting.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
hazard_load_failures = Counter(
    "hazard_load_failures_total",
    "Hazard source load failures",
    ["kind"]
)

malformed_hazards = Counter(
    "hazard_malformed_records_total",
    "Hazard features skipped because they were malformed"
)

alerts_emitted = Counter(
    "hazard_alerts_total",
    "Proximity alerts issued",
    ["type", "severity"]
)

alerts_suppressed = Counter(
    "hazard_alerts_suppressed_total",
    "Proximity alerts suppressed by the per-hazard cooldown"
)

user_reports = Counter(
    "hazard_user_reports_total",
    "User-reported hazard operations",
    ["action"]
)

# 히스토그램 메트릭
proximity_check_seconds = Histogram(
    "hazard_proximity_check_duration_seconds",
    "Time spent evaluating a proximity check",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1]
)

load_seconds = Histogram(
    "hazard_load_duration_seconds",
    "Time spent loading hazard data",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0]
)

# 게이지 메트릭
hazards_loaded = Gauge(
    "hazards_loaded",
    "Number of hazards currently loaded"
)

cooldown_entries = Gauge(
    "hazard_cooldown_entries",
    "Current number of entries in the alert cooldown map"
)

uptime_seconds = Gauge(
    "uptime_seconds",
    "Service uptime in seconds"
)
