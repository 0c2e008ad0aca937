"""
Store error hierarchy and the decorator that maps driver errors onto it.

The PostgreSQL adapter raises SQLAlchemy errors; ``store_operation`` turns
them into the same exceptions the in-memory adapter raises directly, so
application services only ever handle one set of store errors.
"""

import asyncio
import re
from functools import wraps
from typing import Any, Dict, Optional, Type

import structlog
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError as SQLAlchemyIntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as SQLAlchemyTimeoutError,
)

logger = structlog.get_logger(__name__)

# Partial unique index names carry the collection and field they guard
_UNIQUE_INDEX = re.compile(r"uq_documents_(?P<collection>[a-z_]+?)_(?P<field>[A-Za-z0-9]+)")


class DatabaseError(Exception):
    """Base exception for all store-related errors."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error
        self.context = context or {}


class StoreUnavailableError(DatabaseError):
    """The store could not be reached or timed out."""
    pass


class QueryError(DatabaseError):
    """The store rejected a statement."""
    pass


class IntegrityViolationError(DatabaseError):
    """Raised when a store-level uniqueness constraint is violated."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message, original_error, context)
        self.field = field


def classify(error: SQLAlchemyError) -> Type[DatabaseError]:
    if isinstance(error, SQLAlchemyIntegrityError):
        return IntegrityViolationError
    if isinstance(error, (OperationalError, DisconnectionError, SQLAlchemyTimeoutError)):
        return StoreUnavailableError
    if isinstance(error, DBAPIError):
        return QueryError
    return DatabaseError


def integrity_violation(error: SQLAlchemyIntegrityError, collection: Optional[str]) -> IntegrityViolationError:
    """Name the offending field from the violated unique index."""
    match = _UNIQUE_INDEX.search(str(error.orig))
    field_name = match.group("field") if match else None
    return IntegrityViolationError(
        f"Duplicate value for {collection}.{field_name}",
        original_error=error,
        context={"collection": collection, "field": field_name},
        field=field_name,
    )


def _collection_of(args: tuple, kwargs: Dict[str, Any]) -> Optional[str]:
    # Store methods take (self, collection, ...)
    if "collection" in kwargs:
        return kwargs["collection"]
    return args[1] if len(args) > 1 and isinstance(args[1], str) else None


def store_operation(operation: str):
    """
    Time a store coroutine and translate SQLAlchemy errors.

    Unique index violations become IntegrityViolationError naming the field;
    other driver errors become StoreUnavailableError or QueryError.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            collection = _collection_of(args, kwargs)
            loop = asyncio.get_running_loop()
            started = loop.time()
            try:
                result = await func(*args, **kwargs)
            except SQLAlchemyIntegrityError as e:
                logger.info("Store uniqueness violation", operation=operation, collection=collection)
                raise integrity_violation(e, collection)
            except SQLAlchemyError as e:
                error_class = classify(e)
                logger.error(
                    "Store operation failed",
                    operation=operation,
                    collection=collection,
                    error_type=error_class.__name__,
                    error=str(e),
                    duration=loop.time() - started,
                )
                raise error_class(
                    f"{operation} on {collection} failed: {e}",
                    original_error=e,
                    context={"operation": operation, "collection": collection},
                )

            logger.debug(
                "Store operation completed",
                operation=operation,
                collection=collection,
                duration=loop.time() - started,
            )
            return result

        return wrapper
    return decorator


__all__ = [
    "DatabaseError",
    "StoreUnavailableError",
    "QueryError",
    "IntegrityViolationError",
    "classify",
    "integrity_violation",
    "store_operation",
]
