"""
Shared metrics configuration for the Galaxy gateway.
"""

from typing import Dict, Any, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, Info, generate_latest


class MetricsCollector:
    """Centralized metrics collector for services."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        # One registry per collector so several apps can live in one process
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )

        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )

        self._metrics["health_check_total"] = Counter(
            "health_check_total",
            "Total health check requests",
            ["status"],
            registry=self.registry
        )

        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        # Backend RPC metrics
        self._metrics["backend_rpc_total"] = Counter(
            "backend_rpc_total",
            "Total backend RPC calls",
            ["method", "code"],
            registry=self.registry
        )

        self._metrics["backend_rpc_duration_seconds"] = Histogram(
            "backend_rpc_duration_seconds",
            "Backend RPC duration in seconds",
            ["method"],
            registry=self.registry
        )

        self._metrics["auth_failures_total"] = Counter(
            "auth_failures_total",
            "Total authentication failures",
            ["kind"],
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def render(self) -> bytes:
        """Render the registry in Prometheus exposition format."""
        return generate_latest(self.registry)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_health_check(self, status: str):
        """Record health check metrics."""
        self._metrics["health_check_total"].labels(status=status).inc()

    def record_error(self, error_type: str):
        """Record error metrics."""
        self._metrics["errors_total"].labels(error_type=error_type, service=self.service_name).inc()

    def record_backend_call(self, method: str, code: str, duration: float):
        """Record the outcome of one backend RPC."""
        self._metrics["backend_rpc_total"].labels(method=method, code=code).inc()
        self._metrics["backend_rpc_duration_seconds"].labels(method=method).observe(duration)

    def record_auth_failure(self, kind: str):
        """Record an authentication failure by kind."""
        self._metrics["auth_failures_total"].labels(kind=kind).inc()


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
