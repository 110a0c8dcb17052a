"""Database layer for taxledger."""

from taxledger.database.base import Database
from taxledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
