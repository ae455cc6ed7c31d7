"""
Deterministic Text Heuristics

The language model is good at guessing the shape of a message and bad at
the details that matter for money. These extractors read the raw text
directly and are used to backfill or override what the model returned.

All functions are pure. "No match" is the only failure mode and is
always reported as None (or the input unchanged), never as an exception.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from src.catalog import Catalog, normalize_key
from src.models.ledger import ParsedItem


CURRENCY = r"(?:aed|dhs?|dirhams?)"

ZERO_PAYMENT_PATTERNS = [
    re.compile(r"\b(?:paid?|pay|pays|payment)\s+(?:nothing|none|zero)\b", re.IGNORECASE),
    re.compile(r"\bno payment\b", re.IGNORECASE),
]

PAID_AMOUNT_PATTERNS = [
    # "paid 15", "gave aed 10", "handed 12.5"
    re.compile(
        r"\b(?:paid?|pay|pays|payment|gave|give|handed)\s*"
        + CURRENCY + r"?\s*(\d+(?:\.\d+)?)\b",
        re.IGNORECASE,
    ),
    # "15 paid", "10 aed pay"
    re.compile(
        r"\b(\d+(?:\.\d+)?)\s*" + CURRENCY + r"?\s*(?:paid?|pay|pays)\b",
        re.IGNORECASE,
    ),
]

CUSTOMER_HINT_PATTERN = re.compile(r"\b(?:to|for)\s+([a-z][a-z0-9'_-]*)\b", re.IGNORECASE)

# compound item -> (base item, word that must appear, word that must not)
AMBIGUOUS_ITEMS: dict[str, tuple[str, str, str]] = {
    "matcha latte": ("latte", "latte", "matcha"),
}

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_number_or_none(value: Any) -> Optional[Decimal]:
    """
    Read a number off the front of a value.

    "15" -> 15, "15 AED" -> 15, 12.5 -> 12.5, "abc" / None / True -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return None
    return Decimal(match.group(1))


def coerce_quantity(value: Any) -> int:
    """Integer part of a quantity, never below one."""
    quantity = 0
    if isinstance(value, bool):
        quantity = 0
    elif isinstance(value, int):
        quantity = value
    elif isinstance(value, (float, Decimal)):
        try:
            quantity = int(value)
        except (ValueError, OverflowError):
            quantity = 0
    elif value is not None:
        match = _LEADING_INT.match(str(value))
        if match:
            quantity = int(match.group(1))
    return max(1, quantity or 1)


def has_zero_payment_phrase(text: str) -> bool:
    """True for "paid nothing", "pay zero", "no payment" and friends."""
    return any(pattern.search(text or "") for pattern in ZERO_PAYMENT_PATTERNS)


def extract_paid_amount(text: str) -> Optional[Decimal]:
    """
    Amount the customer handed over, as stated in the text.

    Returns 0 for explicit zero-payment phrasing, the first amount next to
    a payment verb otherwise, and None when the text says nothing about it.
    """
    if has_zero_payment_phrase(text):
        return Decimal("0")

    for pattern in PAID_AMOUNT_PATTERNS:
        match = pattern.search(text or "")
        if not match:
            continue
        amount = parse_number_or_none(match.group(1))
        if amount is not None:
            return amount

    return None


def infer_customer_from_text(text: str) -> Optional[str]:
    """Name following "to" or "for", e.g. "sold a latte to Ahmed"."""
    match = CUSTOMER_HINT_PATTERN.search(text or "")
    return match.group(1) if match else None


def _has_word(text: str, word: str) -> bool:
    return re.search(r"\b" + re.escape(word) + r"\b", text or "", re.IGNORECASE) is not None


def normalize_ambiguous_items(
    items: list[ParsedItem],
    text: str,
) -> list[ParsedItem]:
    """
    Undo the parser's bias towards compound item names.

    "sold a latte" parsed as "matcha latte" becomes "latte" because the
    text never says "matcha".
    """
    normalized = []
    for item in items or []:
        rule = AMBIGUOUS_ITEMS.get(normalize_key(item.name))
        if rule:
            base, required_word, forbidden_word = rule
            if _has_word(text, required_word) and not _has_word(text, forbidden_word):
                item = item.model_copy(update={"name": base})
        normalized.append(item)
    return normalized


def infer_total_from_items(
    items: list[ParsedItem],
    catalog: Catalog,
) -> Decimal:
    """Price of everything mentioned; unknown items count as zero."""
    total = Decimal("0")
    for item in items or []:
        entry = catalog.lookup(item.name)
        if entry is None:
            continue
        total += entry.unit_price * coerce_quantity(item.qty)
    return total


def parse_settle_args(text: str) -> tuple[str, Optional[Decimal]]:
    """
    Split "Ahmed 15" into ("Ahmed", 15).

    A trailing number is only a cap when a name comes before it, so
    "Sara Al Amin" and "15" are both treated as plain names.
    """
    parts = (text or "").split()
    if not parts:
        return "", None

    amount = parse_number_or_none(parts[-1])
    if amount is not None and len(parts) > 1:
        return " ".join(parts[:-1]), amount
    return " ".join(parts), None
