"""
Activity Log - HTTP request/activity capture service.

Features:
- Capacity-bounded in-memory log with email/scraper classification
- Filtered retrieval, full-record search and activity statistics
- Structured logging with correlation IDs
- Prometheus metrics
- Health checks (liveness and readiness)
"""
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from .config import Settings, get_settings
from .logging import setup_logging, get_logger
from .api.router import router
from .middleware import CorrelationMiddleware, ErrorHandlerMiddleware, MetricsMiddleware
from .metrics import Metrics
from .health import HealthChecker
from .store import ActivityLogStore

VERSION = "0.1.0"

logger = get_logger()


def create_app(store: ActivityLogStore | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the service around an explicitly constructed store.

    Args:
        store: Activity log to serve (a fresh one is created if omitted)
        settings: Configuration (defaults to the cached environment settings)
    """
    settings = settings or get_settings()
    store = store if store is not None else ActivityLogStore()

    setup_logging(
        json_output=settings.LOG_JSON,
        service_name=settings.SERVICE_NAME,
        level=settings.LOG_LEVEL,
    )

    metrics = Metrics(service_name=settings.SERVICE_NAME, version=VERSION)
    health_checker = HealthChecker(store, service_name=settings.SERVICE_NAME, version=VERSION)

    app = FastAPI(
        title="Activity Log",
        version=VERSION,
        description="In-process HTTP request logger with filtered retrieval",
    )
    app.state.store = store
    app.state.metrics = metrics
    app.state.health = health_checker

    # Last added runs first: correlation id is bound before metrics and error handling
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(CorrelationMiddleware)

    app.include_router(router)

    app.mount("/metrics", make_asgi_app(registry=metrics.registry))

    @app.get("/health")
    async def health():
        """
        Liveness check: the process is up and serving.

        Returns 200 if service is running.
        """
        logger.debug("health_check_liveness")
        return health_checker.liveness()

    @app.get("/health/ready")
    async def health_ready():
        """
        Readiness check.

        Returns:
            200: Service is ready to handle traffic
            503: Service is not ready
        """
        logger.debug("health_check_readiness")
        result = health_checker.readiness()
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(result, status_code=status_code)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "service_starting",
            version=VERSION,
            env=settings.ENV,
            capacity=store.capacity,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("service_stopping", events_held=len(store))
        metrics.app_up.labels(service=settings.SERVICE_NAME, version=VERSION).set(0)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "activitylog.main:app",
        host="0.0.0.0",
        port=get_settings().SERVICE_PORT,
        reload=True,
    )
