"""
Intent Resolver

Merges the language model's guess with the deterministic heuristics into
one canonical ResolvedIntent.

ORDER MATTERS:
1. Fix ambiguous item names using the raw text
2. Decide the paid amount (zero-payment phrasing > model > text)
3. Fill a missing customer from the text
4. Price what was mentioned
5. A "sale" whose stated payment doesn't cover the price is a debt

The computed total is authoritative over the model's label. No other
kind changes happen automatically.
"""

from decimal import Decimal
from typing import Optional

from src.catalog import Catalog, normalize_key
from src.config.logging import get_logger
from src.models.ledger import (
    TOLERANCE,
    IntentKind,
    LineItem,
    ParsedIntent,
    ResolvedIntent,
)
from src.parsing.heuristics import (
    coerce_quantity,
    extract_paid_amount,
    has_zero_payment_phrase,
    infer_customer_from_text,
    infer_total_from_items,
    normalize_ambiguous_items,
    parse_number_or_none,
)


logger = get_logger(__name__)


class IntentResolver:
    """Turns (raw text, parsed guess) into a ResolvedIntent."""

    def __init__(self, catalog: Catalog):
        self._catalog = catalog

    def explicit_paid(self, parsed: ParsedIntent, text: str) -> Optional[Decimal]:
        """
        The paid amount we trust, or None if nobody mentioned one.

        An explicit "paid nothing" in the text beats any number the model
        came up with.
        """
        if has_zero_payment_phrase(text):
            return Decimal("0")

        from_model = parse_number_or_none(parsed.paid)
        if from_model is not None and from_model >= 0:
            return from_model

        return extract_paid_amount(text)

    def resolve(self, text: str, parsed: ParsedIntent) -> ResolvedIntent:
        items = normalize_ambiguous_items(parsed.items, text)

        paid = self.explicit_paid(parsed, text)

        customer = parsed.customer or infer_customer_from_text(text)

        inferred_total = infer_total_from_items(items, self._catalog)

        kind = parsed.intent
        if (
            kind == IntentKind.SALE
            and paid is not None
            and inferred_total > 0
            and paid < inferred_total - TOLERANCE
        ):
            logger.info(
                "sale_reclassified_as_debt",
                paid=str(paid),
                inferred_total=str(inferred_total),
            )
            kind = IntentKind.DEBT

        return ResolvedIntent(
            kind=kind,
            line_items=[
                LineItem(
                    item_key=normalize_key(item.name),
                    quantity=coerce_quantity(item.qty),
                )
                for item in items
            ],
            customer=customer,
            stated_paid=paid,
        )
