"""
Data Models Package

This package contains all Pydantic models used by the bookkeeper.
All data flowing through the engine must conform to these schemas.
"""

from src.models.ledger import (
    TOLERANCE,
    BookkeepingResponse,
    CatalogItem,
    CustomerDebts,
    DebtRow,
    DebtStatus,
    IntentKind,
    ItemCategory,
    LineItem,
    ParsedIntent,
    ParsedItem,
    RecordedLine,
    RecordedUnit,
    RecordResult,
    ResolvedIntent,
    SaleRow,
    SettlementResult,
    StoredDebt,
    SummarySnapshot,
    round2,
)

__all__ = [
    "TOLERANCE",
    "BookkeepingResponse",
    "CatalogItem",
    "CustomerDebts",
    "DebtRow",
    "DebtStatus",
    "IntentKind",
    "ItemCategory",
    "LineItem",
    "ParsedIntent",
    "ParsedItem",
    "RecordedLine",
    "RecordedUnit",
    "RecordResult",
    "ResolvedIntent",
    "SaleRow",
    "SettlementResult",
    "StoredDebt",
    "SummarySnapshot",
    "round2",
]
