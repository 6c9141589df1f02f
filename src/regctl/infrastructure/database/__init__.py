"""SQLite persistence via SQLAlchemy Core."""

from regctl.infrastructure.database.engine import create_db_engine, init_database
from regctl.infrastructure.database.schema import letters, metadata, register_counters
from regctl.infrastructure.database.store import SqliteStore

__all__ = [
    "SqliteStore",
    "create_db_engine",
    "init_database",
    "letters",
    "metadata",
    "register_counters",
]
