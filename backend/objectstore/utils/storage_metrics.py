"""
Decorator for tracking object storage metrics.
"""
import time
import functools
from objectstore.utils.metrics import (
    storage_requests_total,
    storage_failures_total,
    storage_latency_seconds,
)


def track_storage_metrics(operation: str):
    """
    Decorator to track request count, failures and latency of a storage call.

    Args:
        operation: Operation name (put_object, get_object, head_object, ...)
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()

            storage_requests_total.labels(operation=operation).inc()

            try:
                return func(*args, **kwargs)
            except Exception:
                storage_failures_total.labels(operation=operation).inc()
                raise
            finally:
                storage_latency_seconds.labels(operation=operation).observe(
                    time.time() - start_time
                )

        return wrapper
    return decorator
