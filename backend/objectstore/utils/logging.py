"""
Structured JSON logging for object storage events.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- bucket
- key
- duration_ms

Usage:
    from objectstore.utils.logging import configure_logging, log_storage_request

    configure_logging('objectstore', 'INFO')
    log_storage_request(logger, operation='put_object', bucket='b', key='k', duration_ms=12.5)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO", stream=None):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier included in every record
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            stream: Output stream (default: stdout)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True

    @classmethod
    def reset(cls):
        """Forget previous configuration so configure() applies again."""
        cls._service_name = None
        cls._configured = False


def _build_log_extra(
    event: str,
    bucket: Optional[str] = None,
    key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    extra = {
        "event": event,
        **kwargs
    }

    if bucket:
        extra["bucket"] = bucket
    if key:
        extra["key"] = key
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


def log_storage_request(
    logger: logging.Logger,
    operation: str,
    bucket: Optional[str] = None,
    key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a completed storage request.

    Args:
        logger: Logger instance
        operation: Operation name (put_object, get_object, ...) (required)
        bucket: Optional bucket name
        key: Optional object key or prefix
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_request",
        bucket=bucket,
        key=key,
        duration_ms=duration_ms,
        operation=operation,
        **kwargs
    )

    logger.debug(f"Storage request: {operation} {key or ''}".rstrip(), extra=extra)


def log_storage_failure(
    logger: logging.Logger,
    operation: str,
    error: str,
    bucket: Optional[str] = None,
    key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    include_traceback: bool = False,
    **kwargs
):
    """
    Log a failed storage request.

    Args:
        logger: Logger instance
        operation: Operation name (required)
        error: Error message (required)
        bucket: Optional bucket name
        key: Optional object key or prefix
        duration_ms: Optional duration in milliseconds
        include_traceback: Whether to include stack trace (default: False)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_failure",
        bucket=bucket,
        key=key,
        duration_ms=duration_ms,
        operation=operation,
        error=str(error),
        **kwargs
    )

    message = f"Storage failure: {operation} {key or ''} - {error}"

    if include_traceback and sys.exc_info()[0] is not None:
        logger.error(message, extra=extra, exc_info=True)
    else:
        logger.error(message, extra=extra)


# Convenience alias
def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
