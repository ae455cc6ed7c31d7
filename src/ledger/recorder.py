"""
Transaction Recorder

Turns a resolved sale or debt into the ledger rows that should be written.

DESIGN DECISION: The recorder only PLANS. It returns a RecordResult
holding the rows; persisting them is the orchestrator's job. That keeps
every allocation rule testable without a store.

ALLOCATION (debt path):
- A single payment is split across items in proportion to each item's
  share of the total, rounded to cents.
- Each item's share is split evenly across its units, rounded to cents.
- The owed total reported back is the sum of per-item owed amounts, not
  a re-sum of the per-unit rows, so a cent of drift between the two is
  possible and accepted.
"""

import re
from datetime import datetime
from decimal import Decimal

from src.catalog import Catalog
from src.config.logging import get_logger
from src.ledger.errors import OverpaymentError
from src.models.ledger import (
    CatalogItem,
    DebtRow,
    DebtStatus,
    IntentKind,
    RecordedLine,
    RecordedUnit,
    RecordResult,
    ResolvedIntent,
    SaleRow,
    round2,
)


logger = get_logger(__name__)

PAID_IN_FULL_NOTE = "Paid in full"

_WORD_START = re.compile(r"\b\w")


def display_name(item_key: str) -> str:
    """Capitalize each word: espresso/americano -> Espresso/Americano."""
    return _WORD_START.sub(lambda m: m.group(0).upper(), item_key)


class TransactionRecorder:
    """Plans the rows for sales and debts against a catalog."""

    def __init__(
        self,
        catalog: Catalog,
        default_customer: str = "Unknown",
        currency: str = "AED",
    ):
        self._catalog = catalog
        self._default_customer = default_customer
        self._currency = currency

    def _resolve_items(
        self,
        intent: ResolvedIntent,
    ) -> tuple[list[tuple[CatalogItem, int]], list[str]]:
        """Look every line item up; unknown ones become warnings."""
        resolved = []
        warnings = []
        for line in intent.line_items:
            item = self._catalog.lookup(line.item_key)
            if item is None:
                warnings.append(f'Item not found: "{line.item_key}". Skipping.')
                logger.warning("item_not_found", item=line.item_key)
                continue
            resolved.append((item, line.quantity))
        return resolved, warnings

    def record(self, intent: ResolvedIntent, now: datetime) -> RecordResult:
        """Dispatch on intent kind (sale or debt only)."""
        if intent.kind == IntentKind.SALE:
            return self.record_sale(intent, now)
        if intent.kind == IntentKind.DEBT:
            return self.record_debt(intent, now)
        raise ValueError(f"Cannot record intent of kind {intent.kind.value}")

    def record_sale(self, intent: ResolvedIntent, now: datetime) -> RecordResult:
        """
        Every unit paid in full.

        One SaleRow per unit. Zero resolved items gives an empty result.
        """
        resolved, warnings = self._resolve_items(intent)
        result = RecordResult(kind=IntentKind.SALE, warnings=warnings)

        for item, quantity in resolved:
            name = display_name(item.name)
            for _ in range(quantity):
                result.units.append(RecordedUnit(sale=SaleRow(
                    sale_date=now.date(),
                    sale_time=now.time().replace(microsecond=0),
                    item_name=name,
                    category=item.category.value,
                    unit_price=item.unit_price,
                    amount_paid=item.unit_price,
                    amount_owed=Decimal("0"),
                    note=PAID_IN_FULL_NOTE,
                )))
            line_total = item.unit_price * quantity
            result.total += line_total
            result.lines.append(RecordedLine(
                item_name=name,
                quantity=quantity,
                line_total=line_total,
            ))

        result.total_paid = result.total
        return result

    def record_debt(self, intent: ResolvedIntent, now: datetime) -> RecordResult:
        """
        Partial (or zero) payment, remainder owed per unit.

        Raises:
            OverpaymentError: stated payment exceeds the total price
        """
        resolved, warnings = self._resolve_items(intent)
        customer = (intent.customer or self._default_customer).strip() or self._default_customer
        result = RecordResult(
            kind=IntentKind.DEBT,
            customer=customer,
            warnings=warnings,
        )
        if not resolved:
            return result

        total_item_price = sum(
            (item.unit_price * quantity for item, quantity in resolved),
            Decimal("0"),
        )
        total_paid = intent.stated_paid or Decimal("0")

        if total_paid > total_item_price:
            logger.warning(
                "debt_rejected_overpayment",
                customer=customer,
                paid=str(total_paid),
                total=str(total_item_price),
            )
            raise OverpaymentError(total_paid, total_item_price, self._currency)

        total_owed = Decimal("0")
        for item, quantity in resolved:
            name = display_name(item.name)
            item_total = item.unit_price * quantity
            if total_item_price > 0:
                item_paid = round2(item_total / total_item_price * total_paid)
            else:
                item_paid = Decimal("0")
            item_owed = round2(item_total - item_paid)

            unit_paid = round2(item_paid / quantity)
            unit_owed = round2(item.unit_price - unit_paid)
            for _ in range(quantity):
                sale = SaleRow(
                    sale_date=now.date(),
                    sale_time=now.time().replace(microsecond=0),
                    item_name=name,
                    category=item.category.value,
                    unit_price=item.unit_price,
                    amount_paid=unit_paid,
                    amount_owed=unit_owed,
                    note=customer,
                )
                debt = None
                if unit_owed > 0:
                    debt = DebtRow(
                        debt_date=now.date(),
                        customer=customer,
                        item_name=name,
                        unit_price=item.unit_price,
                        amount_paid=unit_paid,
                        amount_owed=unit_owed,
                        status=DebtStatus.PENDING,
                    )
                result.units.append(RecordedUnit(sale=sale, debt=debt))

            total_owed += item_owed
            result.lines.append(RecordedLine(
                item_name=name,
                quantity=quantity,
                line_total=item_total,
            ))

        result.total = total_item_price
        result.total_paid = total_paid
        result.total_owed = total_owed
        return result
