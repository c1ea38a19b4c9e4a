from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from app.sitescope.core.config import settings


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


class Metrics:
    def __init__(self) -> None:
        self.enabled = bool(settings.METRICS_ENABLED)
        self._registry = None
        self._http_requests_total = None
        self._http_request_duration_ms = None
        self._scope_resolved_total = None
        self._scope_denied_total = None
        self._legacy_fallback_total = None
        if self.enabled:
            self._initialize_registry()

    def _initialize_registry(self) -> None:
        self._registry = CollectorRegistry()
        self._http_requests_total = Counter(
            "http_requests_total",
            "HTTP requests by route/method/status.",
            ["route", "method", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            ["route", "method", "status"],
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
            registry=self._registry,
        )
        self._scope_resolved_total = Counter(
            "scope_resolved_total",
            "Authorized scopes resolved, by mode.",
            ["mode"],
            registry=self._registry,
        )
        self._scope_denied_total = Counter(
            "scope_denied_total",
            "Requests denied by the access guard, by error kind.",
            ["kind"],
            registry=self._registry,
        )
        self._legacy_fallback_total = Counter(
            "legacy_mapping_fallback_total",
            "Partner scopes resolved through the legacy site_partners table.",
            registry=self._registry,
        )

    def reset(self) -> None:
        if not self.enabled:
            return
        self._initialize_registry()

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        labels = {"route": route, "method": method, "status": str(status_code)}
        self._http_requests_total.labels(**labels).inc()
        self._http_request_duration_ms.labels(**labels).observe(latency_ms)

    def increment_scope_resolved(self, mode: str) -> None:
        if not self.enabled:
            return
        self._scope_resolved_total.labels(mode=mode).inc()

    def increment_scope_denied(self, kind: str) -> None:
        if not self.enabled:
            return
        self._scope_denied_total.labels(kind=kind).inc()

    def increment_legacy_fallback(self) -> None:
        if not self.enabled:
            return
        self._legacy_fallback_total.inc()

    def render(self) -> MetricsSnapshot:
        if not self.enabled:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._registry), content_type=CONTENT_TYPE_LATEST)


metrics = Metrics()
