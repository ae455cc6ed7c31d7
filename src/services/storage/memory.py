"""
In-Memory Row Store

Behaves like a spreadsheet for the operations the ledger uses: values
read back as strings, appends land after the last non-empty row, and
cleared trailing rows disappear from reads. Used in tests and for running
the app without Google credentials.
"""

import re
from typing import Any

from src.services.storage.interface import NotFoundError, RowStoreInterface, StorageError


_A1_RANGE = re.compile(r"^([A-Z]+)(\d+):([A-Z]+)(\d+)$")
_A1_CELL = re.compile(r"^([A-Z]+)(\d+)$")


def _column_number(letters: str) -> int:
    number = 0
    for char in letters:
        number = number * 26 + (ord(char) - ord("A") + 1)
    return number


def _as_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class InMemoryRowStore(RowStoreInterface):
    """Tables held as lists of string rows."""

    def __init__(self):
        self._tables: dict[str, list[list[str]]] = {}

    def _rows(self, table: str) -> list[list[str]]:
        if table not in self._tables:
            raise NotFoundError(f"Sheet not found: {table}")
        return self._tables[table]

    def _trim(self, table: str) -> None:
        rows = self._tables[table]
        while rows and not any(rows[-1]):
            rows.pop()

    async def ensure_table(self, table: str, header: list[str]) -> None:
        if table not in self._tables:
            self._tables[table] = [[_as_cell(v) for v in header]]

    async def append_row(self, table: str, row: list[Any]) -> None:
        rows = self._rows(table)
        self._trim(table)
        rows.append([_as_cell(v) for v in row])

    async def read_all_rows(self, table: str) -> list[list[str]]:
        rows = self._rows(table)
        self._trim(table)
        return [list(row) for row in rows]

    async def update_cell(
        self,
        table: str,
        row: int,
        column: int,
        value: Any,
    ) -> None:
        rows = self._rows(table)
        if row < 1 or column < 1:
            raise StorageError(f"Invalid cell R{row}C{column}")
        while len(rows) < row:
            rows.append([])
        target = rows[row - 1]
        while len(target) < column:
            target.append("")
        target[column - 1] = _as_cell(value)

    async def update_range(
        self,
        table: str,
        start_cell: str,
        rows: list[list[Any]],
    ) -> None:
        self._rows(table)
        match = _A1_CELL.match(start_cell.upper())
        if not match:
            raise StorageError(f"Unsupported cell: {start_cell}")
        first_col = _column_number(match.group(1))
        first_row = int(match.group(2))

        for offset, values in enumerate(rows):
            for index, value in enumerate(values):
                await self.update_cell(table, first_row + offset, first_col + index, value)

    async def clear_range(self, table: str, cell_range: str) -> None:
        rows = self._rows(table)
        match = _A1_RANGE.match(cell_range.upper())
        if not match:
            raise StorageError(f"Unsupported range: {cell_range}")
        first_col = _column_number(match.group(1))
        first_row = int(match.group(2))
        last_col = _column_number(match.group(3))
        last_row = int(match.group(4))

        for row_number in range(first_row, min(last_row, len(rows)) + 1):
            row = rows[row_number - 1]
            for col_number in range(first_col, min(last_col, len(row)) + 1):
                row[col_number - 1] = ""
        self._trim(table)
