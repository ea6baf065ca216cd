"""
Logging Package
Structured logging for the framework

Provides a drop-in replacement for logging.getLogger that keeps
framework loggers under the ``mvcsanic`` namespace.
"""
from mvcsanic.logging.logger_config import (
    LoggerConfig,
    JSONFormatter,
)
import logging
from typing import Optional

__all__ = [
    'LoggerConfig',
    'JSONFormatter',
    'getLogger',
    'INFO',
    'DEBUG',
    'WARNING',
    'ERROR',
    'CRITICAL',
]

# Export logging levels for convenience
INFO = logging.INFO
DEBUG = logging.DEBUG
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL


def getLogger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance (drop-in replacement for logging.getLogger)

    Short names without a dot ('routing', 'application') are placed
    under the ``mvcsanic`` namespace, so LoggingServiceProvider can
    configure all framework loggers through one parent. Sanic's own
    loggers and module-based names pass through unchanged.

    Example:
        from mvcsanic.logging import getLogger
        logger = getLogger(__name__)
        logger.debug("Route matched", extra={'route': 'Products:Detail'})
    """
    if name is None or name.startswith('sanic.') or '.' in name:
        return logging.getLogger(name)

    return logging.getLogger(f'mvcsanic.{name}')
