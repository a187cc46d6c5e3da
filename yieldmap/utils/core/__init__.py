# Core utilities package
# Contains foundational infrastructure utilities for the application

__all__ = [
    "get_logger",
    "shutdown_logging",
    "RetryConfig",
    "calculate_delay",
    "execute_with_retry",
]

from .logger import get_logger, shutdown_logging
from .retry import RetryConfig, calculate_delay, execute_with_retry
