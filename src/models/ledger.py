"""
Core Data Models for Coffee Bar Bookkeeper

These models define the schemas for everything flowing through the engine:
1. What the language model guessed (ParsedIntent)
2. What we decided the message means (ResolvedIntent)
3. What gets written to the ledger (SaleRow, DebtRow)
4. What we report back (RecordResult, SettlementResult, SummarySnapshot)

DESIGN DECISION: Money is Decimal everywhere. Rounding happens only at
the points the allocation rules say it does, never implicitly.
"""

from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


CENT = Decimal("0.01")
TOLERANCE = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    """Round to currency minor units, halves away from zero."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


# =============================================================================
# ENUMS
# =============================================================================

class ItemCategory(str, Enum):
    """Menu sections."""
    MATCHA = "Matcha"
    COFFEE = "Coffee"


class IntentKind(str, Enum):
    """
    What a message asks us to do.

    Values match the labels the intent parser is asked to return.
    """
    SALE = "sale"
    DEBT = "debt"
    SETTLE = "settle"
    SUMMARY = "summary"
    LIST_DEBTS = "debts"
    SHOW_MENU = "menu"
    HELP = "help"
    CLEAR_ALL = "clearall"
    UNKNOWN = "unknown"


class DebtStatus(str, Enum):
    """
    Debt lifecycle.

    CRITICAL: PENDING -> SETTLED is one-way and only the settlement
    engine performs it.
    """
    PENDING = "Pending"
    SETTLED = "Settled"


# =============================================================================
# CATALOG
# =============================================================================

class CatalogItem(BaseModel):
    """A single menu entry. Loaded once, never modified."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Canonical lowercase key"
    )
    unit_price: Decimal = Field(
        ...,
        gt=0,
        description="Price of one unit"
    )
    category: ItemCategory

    @field_validator('name')
    @classmethod
    def lowercase_name(cls, v: str) -> str:
        return v.lower()


# =============================================================================
# INTENTS
# =============================================================================

class ParsedItem(BaseModel):
    """One item as the parser reported it. Nothing here is trusted."""

    name: str = ""
    qty: Any = 1

    @field_validator('name', mode='before')
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)


class ParsedIntent(BaseModel):
    """
    The language model's best-effort reading of a message.

    CRITICAL: This is a GUESS. Fields are kept loose on purpose and
    the resolver decides what they mean.
    """

    intent: IntentKind = IntentKind.UNKNOWN
    items: list[ParsedItem] = Field(default_factory=list)
    customer: Optional[str] = None
    paid: Any = None

    @field_validator('intent', mode='before')
    @classmethod
    def unknown_intent(cls, v: Any) -> IntentKind:
        try:
            return IntentKind(str(v).lower().strip())
        except ValueError:
            return IntentKind.UNKNOWN

    @field_validator('items', mode='before')
    @classmethod
    def items_list(cls, v: Any) -> list:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, (dict, ParsedItem))]

    @field_validator('customer', mode='before')
    @classmethod
    def blank_customer(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        if not v or v.lower() in ("null", "none"):
            return None
        return v


class LineItem(BaseModel):
    """A requested item after normalization."""

    item_key: str
    quantity: int = Field(default=1, ge=1)


class ResolvedIntent(BaseModel):
    """
    The canonical meaning of one message.

    Produced fresh per message and never persisted.
    """

    kind: IntentKind
    line_items: list[LineItem] = Field(default_factory=list)
    customer: Optional[str] = None
    stated_paid: Optional[Decimal] = Field(default=None, ge=0)


# =============================================================================
# LEDGER ROWS
# =============================================================================

class SaleRow(BaseModel):
    """
    One physical unit sold.

    Wire order: [date, time, item, category, price, paid, owed, note]
    """

    sale_date: date
    sale_time: time
    item_name: str
    category: str
    unit_price: Decimal
    amount_paid: Decimal
    amount_owed: Decimal
    note: str = ""

    @model_validator(mode='after')
    def validate_split(self) -> 'SaleRow':
        """Paid and owed must add back up to the unit price."""
        if abs(self.amount_paid + self.amount_owed - self.unit_price) > TOLERANCE:
            raise ValueError(
                f"Paid ({self.amount_paid}) + owed ({self.amount_owed}) "
                f"does not match price ({self.unit_price})"
            )
        return self


class DebtRow(BaseModel):
    """
    The unpaid remainder of one unit.

    Wire order: [date, customer, item, price, paid, owed, status, settledOn]
    """

    debt_date: Optional[date] = None
    customer: str = ""
    item_name: str = ""
    unit_price: Decimal = Decimal("0")
    amount_paid: Decimal = Decimal("0")
    amount_owed: Decimal = Decimal("0")
    status: DebtStatus = DebtStatus.PENDING
    settled_on: Optional[date] = None

    @property
    def is_pending(self) -> bool:
        return self.status == DebtStatus.PENDING


class StoredDebt(BaseModel):
    """A debt row together with where it lives in the sheet (1-based)."""

    row_number: int = Field(ge=2)
    debt: DebtRow


# =============================================================================
# RESULTS
# =============================================================================

class RecordedLine(BaseModel):
    """One resolved line item as reported back to the user."""

    item_name: str
    quantity: int
    line_total: Decimal


class RecordedUnit(BaseModel):
    """
    One physical unit: its sale row and, if anything is still owed on
    it, the matching debt row.

    CRITICAL: The two rows are written back to back. A failed write can
    leave at most one unit with an owed amount and no Pending debt.
    """

    sale: SaleRow
    debt: Optional[DebtRow] = None


class RecordResult(BaseModel):
    """
    Outcome of recording a sale or a debt.

    Units are what the recorder wants persisted, in write order. An
    empty result (no lines) is a no-op, not an error.
    """

    kind: IntentKind
    customer: Optional[str] = None
    lines: list[RecordedLine] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_owed: Decimal = Decimal("0")
    units: list[RecordedUnit] = Field(default_factory=list)

    @property
    def sale_rows(self) -> list[SaleRow]:
        return [unit.sale for unit in self.units]

    @property
    def debt_rows(self) -> list[DebtRow]:
        return [unit.debt for unit in self.units if unit.debt is not None]

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def fully_paid(self) -> bool:
        return self.total_owed == 0


class SettlementResult(BaseModel):
    """Outcome of settling a customer's debts."""

    customer: str
    cap: Optional[Decimal] = None
    settled_total: Decimal = Decimal("0")
    settled_rows: list[int] = Field(
        default_factory=list,
        description="Sheet row numbers that were marked settled"
    )

    @property
    def found_any(self) -> bool:
        return self.settled_total != 0


class SummarySnapshot(BaseModel):
    """Totals recomputed from the full ledger. Never stored as-is."""

    as_of: date
    today_revenue: Decimal = Decimal("0")
    today_collected: Decimal = Decimal("0")
    today_unpaid: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")
    total_collected: Decimal = Decimal("0")
    transaction_count: int = 0
    total_owed: Decimal = Decimal("0")
    total_settled: Decimal = Decimal("0")


class CustomerDebts(BaseModel):
    """Outstanding debts for one customer."""

    customer: str
    items: list[tuple[str, Decimal]] = Field(default_factory=list)
    total: Decimal = Decimal("0")


class BookkeepingResponse(BaseModel):
    """
    What the orchestrator hands to the presentation layer.

    Exactly one of the payload fields is normally set; `message` carries
    guidance, rejections and informational outcomes.
    """

    kind: IntentKind
    ok: bool = True
    message: Optional[str] = None
    record: Optional[RecordResult] = None
    settlement: Optional[SettlementResult] = None
    summary: Optional[SummarySnapshot] = None
    debts: Optional[list[CustomerDebts]] = None
    menu: Optional[dict[str, list[CatalogItem]]] = None
    error: Optional[str] = None
    responded_at: datetime = Field(default_factory=datetime.now)
