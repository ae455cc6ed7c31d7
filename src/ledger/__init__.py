"""Ledger accounting engine: recording, settlement and totals."""

from src.ledger.errors import LedgerError, OverpaymentError
from src.ledger.recorder import PAID_IN_FULL_NOTE, TransactionRecorder, display_name
from src.ledger.settlement import SettlementEngine
from src.ledger.summary import SummaryAggregator

__all__ = [
    "LedgerError",
    "OverpaymentError",
    "PAID_IN_FULL_NOTE",
    "SettlementEngine",
    "SummaryAggregator",
    "TransactionRecorder",
    "display_name",
]
