"""Database factory functions.

``BOOKKEEP_DB_URL`` selects any SQLAlchemy backend; otherwise a SQLite file
is used, taken from ``BOOKKEEP_DB_PATH`` or ``~/.bookkeep/bookkeep.db``.
Row locks taken for payments and obligation edits only block on backends
that implement ``SELECT ... FOR UPDATE`` (e.g. PostgreSQL).
"""

import os
from pathlib import Path
from typing import Optional

from bookkeep.database.sqlalchemy_db import SQLAlchemyDatabase

DB_URL_ENV = "BOOKKEEP_DB_URL"
DB_PATH_ENV = "BOOKKEEP_DB_PATH"


def default_database_path() -> str:
    """Return the per-user SQLite path, creating its directory if needed."""
    data_dir = Path.home() / ".bookkeep"
    data_dir.mkdir(exist_ok=True)
    return str(data_dir / "bookkeep.db")


def create_database(database_url: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database for a SQLAlchemy URL, falling back to SQLite."""
    database_url = database_url or os.environ.get(DB_URL_ENV)
    if not database_url:
        return create_sqlite_database()
    return SQLAlchemyDatabase(database_url)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed database.

    Args:
        database_path: SQLite file; defaults to ``BOOKKEEP_DB_PATH`` and then
            to the per-user path

    Returns:
        SQLAlchemyDatabase instance
    """
    path = database_path or os.environ.get(DB_PATH_ENV) or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}")
