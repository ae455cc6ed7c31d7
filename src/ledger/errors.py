"""Ledger engine exceptions."""

from decimal import Decimal


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class OverpaymentError(LedgerError):
    """
    Stated payment exceeds the price of everything in the debt.

    The whole operation is rejected; no rows are written.
    """

    def __init__(self, paid: Decimal, total: Decimal, currency: str = "AED"):
        self.paid = paid
        self.total = total
        super().__init__(f"Paid ({paid}) exceeds total ({total} {currency}).")
