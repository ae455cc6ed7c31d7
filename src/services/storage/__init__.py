"""
Storage Services Package

Provides the abstract row store interface, its implementations, and the
ledger repository that maps ledger models onto rows.
Currently implements Google Sheets as the backend, but designed to be swappable.
"""

from src.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    RowStoreInterface,
    StorageError,
)
from src.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRowStore,
)
from src.services.storage.ledger import (
    DEBT_COLUMNS,
    SALES_COLUMNS,
    SUMMARY_COLUMNS,
    LedgerRepository,
)
from src.services.storage.memory import InMemoryRowStore

__all__ = [
    # Interfaces
    "RowStoreInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRowStore",
    "InMemoryRowStore",
    # Ledger mapping
    "DEBT_COLUMNS",
    "SALES_COLUMNS",
    "SUMMARY_COLUMNS",
    "LedgerRepository",
]
