"""
Prometheus metrics for the activity log service.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry
from .event_models import LoggedEvent


class Metrics:
    """
    Centralized metrics for the activity log service.
    """

    def __init__(self, service_name: str = "activitylog", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Business Metrics
        self.events_logged_total = Counter(
            "activitylog_events_logged_total",
            "Total submissions captured, by payload shape",
            ["shape"],
            registry=self.registry,
        )

        self.events_stored = Gauge(
            "activitylog_events_stored",
            "Number of events currently held in the store",
            registry=self.registry,
        )

        self.events_cleared_total = Counter(
            "activitylog_events_cleared_total",
            "Total events removed by explicit clears",
            registry=self.registry,
        )

        self.body_size_bytes = Histogram(
            "activitylog_body_size_bytes",
            "Raw submission body size in bytes",
            ["shape"],
            registry=self.registry,
        )

    @staticmethod
    def shape_of(event: LoggedEvent) -> str:
        if event.is_email and event.is_scraper:
            return "scraped_email"
        if event.is_email:
            return "email"
        if event.is_scraper:
            return "scraper"
        return "plain"

    def record_event_logged(self, event: LoggedEvent, size_bytes: int, stored: int):
        """Record a captured submission and the resulting store size."""
        shape = self.shape_of(event)
        self.events_logged_total.labels(shape=shape).inc()
        self.body_size_bytes.labels(shape=shape).observe(size_bytes)
        self.events_stored.set(stored)

    def record_cleared(self, count: int):
        """Record an explicit clear-all."""
        self.events_cleared_total.inc(count)
        self.events_stored.set(0)
