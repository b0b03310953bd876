from redline.gateway.middleware.correlation import CorrelationIdMiddleware
from redline.gateway.middleware.error_handler import setup_exception_handlers

__all__ = [
    "CorrelationIdMiddleware",
    "setup_exception_handlers",
]
