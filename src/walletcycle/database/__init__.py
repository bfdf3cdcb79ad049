"""Record store layer for walletcycle."""

from walletcycle.database.base import Database
from walletcycle.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
