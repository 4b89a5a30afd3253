"""
Async error handling utilities for database operations.

Classifies SQLAlchemy errors into HTTP responses and provides the single
retry used by the reaction engines when a unique constraint turns a race
into a rejected insert.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from fastapi import status
from sqlalchemy.exc import (
    DataError,
    DatabaseError,
    DisconnectionError,
    IntegrityError,
    OperationalError,
    StatementError,
    TimeoutError as SQLTimeoutError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.exceptions import BoardError

logger = logging.getLogger(__name__)


class AsyncErrorHandler:
    """Maps database errors that escape a board operation to HTTP responses."""

    # Ordered most specific first; IntegrityError and DataError subclass DatabaseError
    ERROR_MAPPINGS = (
        (IntegrityError, {
            'status_code': status.HTTP_409_CONFLICT,
            'detail': 'Data integrity constraint violation',
        }),
        (DataError, {
            'status_code': status.HTTP_400_BAD_REQUEST,
            'detail': 'Invalid data format',
        }),
        (OperationalError, {
            'status_code': status.HTTP_503_SERVICE_UNAVAILABLE,
            'detail': 'Database operation failed',
        }),
        (DisconnectionError, {
            'status_code': status.HTTP_503_SERVICE_UNAVAILABLE,
            'detail': 'Database connection lost',
        }),
        (SQLTimeoutError, {
            'status_code': status.HTTP_504_GATEWAY_TIMEOUT,
            'detail': 'Database operation timed out',
        }),
        (StatementError, {
            'status_code': status.HTTP_500_INTERNAL_SERVER_ERROR,
            'detail': 'Invalid database query',
        }),
        (DatabaseError, {
            'status_code': status.HTTP_500_INTERNAL_SERVER_ERROR,
            'detail': 'Database error occurred',
        }),
    )

    @classmethod
    def classify_error(cls, error: Exception) -> Dict[str, Any]:
        """
        Classify a database error.

        Returns:
            Dictionary with status_code and detail
        """
        for exc_type, mapping in cls.ERROR_MAPPINGS:
            if isinstance(error, exc_type):
                return dict(mapping)

        return {
            'status_code': status.HTTP_500_INTERNAL_SERVER_ERROR,
            'detail': 'An unexpected database error occurred',
        }


async def retry_once_on_integrity_error(
    db: AsyncSession,
    operation: Callable[[], Awaitable[Any]],
    *,
    race_error: Type[BoardError],
    operation_name: str,
    retry: Optional[Callable[[], Awaitable[Any]]] = None,
) -> Any:
    """
    Run ``operation``; if it hits a unique constraint, roll back and run once more.

    The second attempt re-reads the row the competing request inserted and
    therefore proceeds as an update. ``retry`` replaces the operation for the
    second attempt when plain re-execution would be wrong. If the second
    attempt also collides, ``race_error`` is raised.
    """
    try:
        return await operation()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Unique constraint race in {operation_name}, retrying once as update: {e.orig}")

    try:
        return await (retry or operation)()
    except IntegrityError as e:
        await db.rollback()
        logger.error(f"Retry of {operation_name} collided again: {e.orig}")
        raise race_error(f"Concurrent duplicate in {operation_name}", original_error=e)
