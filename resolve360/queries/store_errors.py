# resolve360/queries/store_errors.py
import asyncio
import functools
import logging

import asyncpg

from ..utils.errors import StoreError, StoreErrorKind

logger = logging.getLogger(__name__)

# Errors worth retrying: missing privileges while grants propagate, objects
# not ready yet, and connection-level trouble.
TRANSIENT_ERRORS = (
    asyncpg.exceptions.InsufficientPrivilegeError,
    asyncpg.exceptions.ObjectNotInPrerequisiteStateError,
    asyncpg.exceptions.TooManyConnectionsError,
    asyncpg.exceptions.CannotConnectNowError,
    asyncpg.exceptions.DeadlockDetectedError,
    asyncpg.exceptions.SerializationError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.ConnectionDoesNotExistError,
    ConnectionError,
    asyncio.TimeoutError,
)

VALIDATION_ERRORS = (
    asyncpg.exceptions.IntegrityConstraintViolationError,
    asyncpg.exceptions.DataError,
)


def classify_store_error(exc: BaseException) -> StoreErrorKind:
    if isinstance(exc, StoreError):
        return exc.kind
    if isinstance(exc, TRANSIENT_ERRORS):
        return StoreErrorKind.TRANSIENT
    if isinstance(exc, VALIDATION_ERRORS):
        return StoreErrorKind.VALIDATION
    return StoreErrorKind.FATAL


def translate_store_errors(operation: str):
    """Re-raise database exceptions from a query function as StoreError."""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except StoreError:
                raise
            except (asyncpg.PostgresError, asyncpg.InterfaceError, ConnectionError, asyncio.TimeoutError) as e:
                kind = classify_store_error(e)
                logger.error(f"{operation} failed ({kind.value}): {e}")
                raise StoreError(kind, str(e), operation=operation) from e
        return wrapper
    return decorator
