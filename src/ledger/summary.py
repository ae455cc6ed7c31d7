"""
Summary Aggregator

Recomputes every total from the full ledger on each call. There is no
cached aggregate to drift out of sync; calling twice with the same rows
gives the same snapshot.

"Today" means the row's stored calendar date equals the given date.
"""

from datetime import date

from src.models.ledger import (
    CustomerDebts,
    DebtRow,
    DebtStatus,
    SaleRow,
    SummarySnapshot,
    round2,
)


class SummaryAggregator:
    """Stateless totals over sale and debt rows."""

    def compute(
        self,
        sales: list[SaleRow],
        debts: list[DebtRow],
        today: date,
    ) -> SummarySnapshot:
        snapshot = SummarySnapshot(as_of=today)

        for row in sales:
            snapshot.total_revenue += row.unit_price
            snapshot.total_collected += row.amount_paid
            snapshot.transaction_count += 1
            if row.sale_date == today:
                snapshot.today_revenue += row.unit_price
                snapshot.today_collected += row.amount_paid
                snapshot.today_unpaid += row.amount_owed

        for debt in debts:
            if debt.status == DebtStatus.PENDING:
                snapshot.total_owed += debt.amount_owed
            elif debt.status == DebtStatus.SETTLED:
                snapshot.total_settled += debt.amount_owed

        return snapshot

    def pending_by_customer(
        self,
        debts: list[DebtRow],
        default_customer: str = "Unknown",
    ) -> list[CustomerDebts]:
        """Pending debts grouped per customer, in first-seen order."""
        grouped: dict[str, CustomerDebts] = {}
        for debt in debts:
            if not debt.is_pending:
                continue
            name = debt.customer or default_customer
            entry = grouped.setdefault(name, CustomerDebts(customer=name))
            entry.items.append((debt.item_name, debt.amount_owed))
            entry.total += debt.amount_owed

        for entry in grouped.values():
            entry.total = round2(entry.total)
        return list(grouped.values())

