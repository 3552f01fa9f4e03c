"""Data storage layer."""

from orderline.storage.file_storage import LocalBlobStore
from orderline.storage.sqlite_repo import (
    SqliteInventoryStore,
    SqliteOrderStore,
    get_connection,
    init_database,
)

__all__ = [
    "get_connection",
    "init_database",
    "SqliteInventoryStore",
    "SqliteOrderStore",
    "LocalBlobStore",
]
