"""Services package."""

from src.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsRowStore,
    InMemoryRowStore,
    LedgerRepository,
    NotFoundError,
    RowStoreInterface,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsRowStore",
    "InMemoryRowStore",
    "LedgerRepository",
    "NotFoundError",
    "RowStoreInterface",
    "StorageError",
]
