"""
Timing decorators for performance monitoring
"""

import time
from typing import Callable, Any, Optional
from functools import wraps

from shopify_gateway.core.logging import get_logger

logger = get_logger(__name__)


def async_timing(threshold_ms: Optional[float] = None):
    """
    Timing decorator for asynchronous functions

    Args:
        threshold_ms: Log warning if execution time exceeds this threshold (in milliseconds)
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            start_time = time.perf_counter()

            try:
                result = await func(*args, **kwargs)
                execution_time = (time.perf_counter() - start_time) * 1000

                if threshold_ms and execution_time > threshold_ms:
                    logger.warning(
                        "Async function execution time exceeded threshold",
                        function=func.__name__,
                        execution_time_ms=round(execution_time, 2),
                        threshold_ms=threshold_ms,
                    )
                else:
                    logger.debug(
                        "Async function execution completed",
                        function=func.__name__,
                        execution_time_ms=round(execution_time, 2),
                    )

                return result

            except Exception as e:
                execution_time = (time.perf_counter() - start_time) * 1000
                logger.error(
                    "Async function execution failed",
                    function=func.__name__,
                    execution_time_ms=round(execution_time, 2),
                    error=str(e),
                )
                raise

        return wrapper

    return decorator
