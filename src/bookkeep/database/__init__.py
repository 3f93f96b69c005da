"""Database layer for bookkeep application."""

from bookkeep.database.base import Database
from bookkeep.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
