"""
Park Sync - Structured Logging
Provides JSON-formatted logging for log aggregation queries.
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL, config


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Crowd import completed", extra={
        ...     "parks_processed": 4,
        ...     "records_imported": 1460
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('parksync')


def log_sync_start(job: str, entity_count: int):
    """Log the start of a sync run."""
    logger.info("Sync started", extra={
        "event_type": "sync_start",
        "job": job,
        "entity_count": entity_count,
        "environment": config.environment
    })


def log_sync_complete(job: str, duration_ms: int, entities_processed: int,
                      records_written: int, error_count: int):
    """Log sync run completion (including partial success)."""
    logger.info("Sync completed", extra={
        "event_type": "sync_complete",
        "job": job,
        "duration_ms": duration_ms,
        "entities_processed": entities_processed,
        "records_written": records_written,
        "error_count": error_count
    })


def log_entity_error(job: str, entity: str, error: Exception):
    """Log a per-entity failure with context."""
    logger.error("Entity sync failed", extra={
        "event_type": "entity_error",
        "job": job,
        "entity": entity,
        "error_type": type(error).__name__,
        "error_message": str(error)
    })


def log_api_request(method: str, path: str, status_code: int, duration_ms: float):
    """Log API request metrics."""
    logger.info("API request", extra={
        "event_type": "api_request",
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": duration_ms
    })


def log_database_error(error: Exception, query_context: Optional[str] = None):
    """Log database error with context."""
    logger.error("Database error", extra={
        "event_type": "database_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "query_context": query_context
    }, exc_info=True)
