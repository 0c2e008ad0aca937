"""
Database module for the job portal.

This module provides engine management and error handling for the
PostgreSQL-backed document store.
"""

from .error_handling import (
    DatabaseError,
    IntegrityViolationError,
    QueryError,
    StoreUnavailableError,
)
from .sqlmodel_engine import SQLModelDatabaseManager, get_sqlmodel_db_manager, shutdown_sqlmodel_database

__all__ = [
    "SQLModelDatabaseManager",
    "get_sqlmodel_db_manager",
    "shutdown_sqlmodel_database",
    "DatabaseError",
    "IntegrityViolationError",
    "QueryError",
    "StoreUnavailableError",
]
