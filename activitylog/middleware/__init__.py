from .correlation import CorrelationMiddleware, get_correlation_id
from .error_handler import ErrorHandlerMiddleware
from .metrics import MetricsMiddleware

__all__ = [
    "CorrelationMiddleware",
    "ErrorHandlerMiddleware",
    "MetricsMiddleware",
    "get_correlation_id",
]
