"""
Settlement Engine

Decides which of a customer's pending debts a settlement clears.

POLICY: first fit, in stored order. Rows are visited exactly as they sit
in the Debts sheet. With a cap, a row settles only if it still fits in
what is left; a later, smaller row can settle after an earlier, larger
one was skipped. Rows are never re-ordered to get a better fit.
"""

from decimal import Decimal
from typing import Optional

from src.config.logging import get_logger
from src.models.ledger import TOLERANCE, SettlementResult, StoredDebt


logger = get_logger(__name__)


class SettlementEngine:
    """Selects debt rows to mark settled. Pure; writes nothing."""

    def plan(
        self,
        debts: list[StoredDebt],
        customer: str,
        cap: Optional[Decimal] = None,
    ) -> SettlementResult:
        """
        Pick rows for `customer` (case-insensitive) up to `cap`.

        Args:
            debts: All stored debt rows, in sheet order
            customer: Customer name as typed by the user
            cap: Maximum amount to settle, None for everything

        Returns:
            SettlementResult with the chosen row numbers and their total.
            A zero total means nothing was pending for this customer.
        """
        name = customer.strip().lower()
        result = SettlementResult(customer=customer.strip(), cap=cap)

        for stored in debts:
            debt = stored.debt
            if debt.customer.strip().lower() != name or not debt.is_pending:
                continue

            running = result.settled_total + debt.amount_owed
            if cap is None or running <= cap + TOLERANCE:
                result.settled_rows.append(stored.row_number)
                result.settled_total = running

        logger.info(
            "settlement_planned",
            customer=result.customer,
            cap=str(cap) if cap is not None else None,
            rows=len(result.settled_rows),
            total=str(result.settled_total),
        )
        return result
