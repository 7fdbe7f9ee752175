"""
Router helpers for turning service failures into HTTP responses.
"""

import logging
from typing import NoReturn

from fastapi import HTTPException, status

from smartlearn.core.exceptions import ServiceError

logger = logging.getLogger(__name__)


def raise_service_error(e: ServiceError) -> NoReturn:
    """Convert a service error to an HTTPException."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


def raise_internal_error(e: Exception, action: str) -> NoReturn:
    """Log an unexpected failure and raise a generic 500."""
    logger.exception(f"Error {action}: {e}")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    ) from e
