import logging
from typing import Optional
from fastapi import HTTPException
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)


def storage_error(exc: Exception, message: Optional[str] = None) -> HTTPException:
    """Translate a database failure into an HTTP error.

    Pool exhaustion is retryable (503); anything else is a 500 carrying
    ``message`` or, when none is given, the database's own error text.
    """
    if isinstance(exc, PoolTimeoutError):
        logger.warning("Connection pool timeout: %s", exc)
        return HTTPException(
            status_code=503,
            detail="Database is busy, please try again",
            headers={"Retry-After": "1"},
        )

    logger.error("Database error: %s", exc)
    return HTTPException(status_code=500, detail=message or str(exc))
