"""
Abstract Storage Interface

DESIGN DECISION: The ledger talks to a plain row store, not to Google
Sheets directly. This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep the accounting engine decoupled from storage

The interface is deliberately tiny: tables are ordered lists of rows with
a header row first. Each call is one atomic write or one full read. There
are no transactions and no locking; callers must not run two writers
against the same ledger at once.
"""

from abc import ABC, abstractmethod
from typing import Any


class RowStoreInterface(ABC):
    """
    Abstract interface for tabular row storage.

    Row and column numbers are 1-based, and row 1 is the header.
    """

    @abstractmethod
    async def ensure_table(self, table: str, header: list[str]) -> None:
        """
        Create `table` with `header` as its first row if it doesn't exist.

        Existing tables are left untouched.
        """
        pass

    @abstractmethod
    async def append_row(self, table: str, row: list[Any]) -> None:
        """
        Append one row after the last non-empty row.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def read_all_rows(self, table: str) -> list[list[str]]:
        """
        Read every row, header first, in stored order.

        Values come back as strings, as a spreadsheet would show them.
        """
        pass

    @abstractmethod
    async def update_cell(
        self,
        table: str,
        row: int,
        column: int,
        value: Any,
    ) -> None:
        """
        Overwrite a single cell.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def update_range(
        self,
        table: str,
        start_cell: str,
        rows: list[list[Any]],
    ) -> None:
        """
        Write a block of rows in one call, top-left at `start_cell` ("A1").

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def clear_range(self, table: str, cell_range: str) -> None:
        """
        Blank every cell in an A1-notation range such as "A2:Z10000".
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Table not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
