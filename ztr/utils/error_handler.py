"""Shared helpers for recovering from a failed operation in a consistent,
logged way.
"""

from typing import Any, NoReturn, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ErrorHandler:
    """Common error handling patterns"""

    @staticmethod
    def log_and_return_default(
        operation_name: str, exception: Exception, default_value: T, **kwargs: Any
    ) -> T:
        """Log the failure and hand back ``default_value`` instead"""
        logger.warning(
            f"Failed to {operation_name}",
            error=str(exception),
            error_type=type(exception).__name__,
            **kwargs,
        )
        return default_value

    @staticmethod
    def log_and_reraise(
        operation_name: str, exception: Exception, **kwargs: Any
    ) -> NoReturn:
        """Log the failure, then raise the exception again"""
        logger.error(
            f"Failed to {operation_name}",
            error=str(exception),
            error_type=type(exception).__name__,
            **kwargs,
        )
        raise exception
