"""Database factory functions for creating record store instances."""

import os
from pathlib import Path
from typing import Optional

from walletcycle.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite record store instance.

    Args:
        database_path: Path to SQLite database file. If None, checks WALLETCYCLE_DB_PATH
            environment variable, then defaults to ~/.walletcycle/walletcycle.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("WALLETCYCLE_DB_PATH")

    if database_path is None:
        # Default to ~/.walletcycle/walletcycle.db
        home = Path.home()
        db_dir = home / ".walletcycle"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "walletcycle.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
