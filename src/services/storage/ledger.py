"""
Ledger Repository

Maps ledger models to and from rows of the row store.

CRITICAL: The column order below is a wire contract with the spreadsheet.
The owner reads these sheets directly and existing rows are never
migrated, so the order must not change.
"""

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from src.config.logging import get_logger
from src.models.ledger import (
    DebtRow,
    DebtStatus,
    SaleRow,
    StoredDebt,
    SummarySnapshot,
)
from src.services.storage.interface import RowStoreInterface


logger = get_logger(__name__)


SALES_COLUMNS = [
    "Date",
    "Time",
    "Item",
    "Category",
    "Price (AED)",
    "Paid (AED)",
    "Owed (AED)",
    "Customer/Note",
]

DEBT_COLUMNS = [
    "Date",
    "Customer",
    "Item",
    "Item Price",
    "Paid",
    "Still Owes",
    "Status",
    "Settled On",
]

SUMMARY_COLUMNS = ["Metric", "Value"]

# 1-based positions in DEBT_COLUMNS
DEBT_STATUS_COLUMN = 7
DEBT_SETTLED_ON_COLUMN = 8

LEDGER_CLEAR_RANGE = "A2:Z10000"
SUMMARY_CLEAR_RANGE = "A1:Z100"


def _to_cell(amount: Decimal) -> Any:
    """Decimal as a spreadsheet number: 20 stays 20, 7.5 stays 7.5."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def _to_decimal(value: str) -> Decimal:
    try:
        number = Decimal((value or "").replace(",", "").strip())
    except InvalidOperation:
        return Decimal("0")
    return number if number.is_finite() else Decimal("0")


def _to_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat((value or "").strip())
    except ValueError:
        return None


def _to_time(value: str) -> Optional[time]:
    try:
        return time.fromisoformat((value or "").strip())
    except ValueError:
        return None


def _format_amount(amount: Decimal, currency: str) -> str:
    return f"{_to_cell(amount)} {currency}"


class LedgerRepository:
    """
    Reads and writes Sales, Debts and Summary tables.

    Tables are created lazily, once per repository, before first use.
    """

    def __init__(
        self,
        store: RowStoreInterface,
        sales_table: str = "Sales",
        debts_table: str = "Debts",
        summary_table: str = "Summary",
    ):
        self._store = store
        self.sales_table = sales_table
        self.debts_table = debts_table
        self.summary_table = summary_table
        self._headers = {
            sales_table: SALES_COLUMNS,
            debts_table: DEBT_COLUMNS,
            summary_table: SUMMARY_COLUMNS,
        }
        self._ensured: set[str] = set()

    async def _ensure(self, table: str) -> None:
        if table not in self._ensured:
            await self._store.ensure_table(table, self._headers[table])
            self._ensured.add(table)

    # -------------------------------------------------------------------------
    # Row mapping
    # -------------------------------------------------------------------------

    def _sale_to_row(self, sale: SaleRow) -> list:
        return [
            sale.sale_date.isoformat(),
            sale.sale_time.isoformat(timespec="seconds"),
            sale.item_name,
            sale.category,
            _to_cell(sale.unit_price),
            _to_cell(sale.amount_paid),
            _to_cell(sale.amount_owed),
            sale.note,
        ]

    def _row_to_sale(self, row: list[str]) -> SaleRow:
        """
        Rebuild a sale from a sheet row.

        Rows may have been edited by hand, so nothing is validated here:
        unreadable numbers count as zero and unreadable dates as no date.
        """
        def safe_get(index: int) -> str:
            try:
                return row[index]
            except IndexError:
                return ""

        return SaleRow.model_construct(
            sale_date=_to_date(safe_get(0)),
            sale_time=_to_time(safe_get(1)),
            item_name=safe_get(2),
            category=safe_get(3),
            unit_price=_to_decimal(safe_get(4)),
            amount_paid=_to_decimal(safe_get(5)),
            amount_owed=_to_decimal(safe_get(6)),
            note=safe_get(7),
        )

    def _debt_to_row(self, debt: DebtRow) -> list:
        return [
            debt.debt_date.isoformat() if debt.debt_date else "",
            debt.customer,
            debt.item_name,
            _to_cell(debt.unit_price),
            _to_cell(debt.amount_paid),
            _to_cell(debt.amount_owed),
            debt.status.value,
            debt.settled_on.isoformat() if debt.settled_on else "",
        ]

    def _row_to_debt(self, row: list[str]) -> Optional[DebtRow]:
        """Rebuild a debt; rows with an unknown status are ignored."""
        def safe_get(index: int) -> str:
            try:
                return row[index]
            except IndexError:
                return ""

        try:
            status = DebtStatus(safe_get(6).strip())
        except ValueError:
            return None

        return DebtRow(
            debt_date=_to_date(safe_get(0)),
            customer=safe_get(1),
            item_name=safe_get(2),
            unit_price=_to_decimal(safe_get(3)),
            amount_paid=_to_decimal(safe_get(4)),
            amount_owed=_to_decimal(safe_get(5)),
            status=status,
            settled_on=_to_date(safe_get(7)),
        )

    # -------------------------------------------------------------------------
    # Sales and debts
    # -------------------------------------------------------------------------

    async def append_sale(self, sale: SaleRow) -> None:
        await self._ensure(self.sales_table)
        await self._store.append_row(self.sales_table, self._sale_to_row(sale))

    async def append_debt(self, debt: DebtRow) -> None:
        await self._ensure(self.debts_table)
        await self._store.append_row(self.debts_table, self._debt_to_row(debt))

    async def list_sales(self) -> list[SaleRow]:
        await self._ensure(self.sales_table)
        rows = await self._store.read_all_rows(self.sales_table)
        return [self._row_to_sale(row) for row in rows[1:] if any(row)]

    async def list_debts(self) -> list[StoredDebt]:
        """All readable debt rows with their sheet row numbers, in order."""
        await self._ensure(self.debts_table)
        rows = await self._store.read_all_rows(self.debts_table)

        debts = []
        for row_number, row in enumerate(rows[1:], start=2):
            if not any(row):
                continue
            debt = self._row_to_debt(row)
            if debt is None:
                logger.warning("debt_row_skipped", row=row_number)
                continue
            debts.append(StoredDebt(row_number=row_number, debt=debt))
        return debts

    async def mark_settled(self, row_number: int, settled_on: date) -> None:
        """Flip one debt row to Settled and stamp the date."""
        await self._ensure(self.debts_table)
        await self._store.update_cell(
            self.debts_table, row_number, DEBT_STATUS_COLUMN, DebtStatus.SETTLED.value
        )
        await self._store.update_cell(
            self.debts_table, row_number, DEBT_SETTLED_ON_COLUMN, settled_on.isoformat()
        )

    async def clear_ledger(self) -> None:
        """Remove every sale and debt row, keeping the headers."""
        for table in (self.sales_table, self.debts_table):
            await self._ensure(table)
            await self._store.clear_range(table, LEDGER_CLEAR_RANGE)

    # -------------------------------------------------------------------------
    # Summary sheet
    # -------------------------------------------------------------------------

    def summary_rows(
        self,
        snapshot: SummarySnapshot,
        updated_at: datetime,
        currency: str = "AED",
    ) -> list[list]:
        """The Summary sheet contents for a snapshot."""
        return [
            SUMMARY_COLUMNS,
            ["Last Updated", updated_at.strftime("%Y-%m-%d %H:%M:%S")],
            ["─── TODAY ───", ""],
            ["Today's Revenue", _format_amount(snapshot.today_revenue, currency)],
            ["Today's Collected", _format_amount(snapshot.today_collected, currency)],
            ["─── ALL TIME ───", ""],
            ["Total Revenue", _format_amount(snapshot.total_revenue, currency)],
            ["Total Collected", _format_amount(snapshot.total_collected, currency)],
            ["Total Transactions", snapshot.transaction_count],
            ["─── DEBTS ───", ""],
            ["Unsettled Debts", _format_amount(snapshot.total_owed, currency)],
            ["Settled Debts", _format_amount(snapshot.total_settled, currency)],
        ]

    async def write_summary(
        self,
        snapshot: SummarySnapshot,
        updated_at: datetime,
        currency: str = "AED",
    ) -> None:
        """Replace the Summary sheet with the given snapshot."""
        await self._ensure(self.summary_table)
        await self._store.clear_range(self.summary_table, SUMMARY_CLEAR_RANGE)
        await self._store.update_range(
            self.summary_table,
            "A1",
            self.summary_rows(snapshot, updated_at, currency),
        )
