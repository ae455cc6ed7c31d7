"""Text heuristics and intent resolution."""

from src.parsing.heuristics import (
    coerce_quantity,
    extract_paid_amount,
    has_zero_payment_phrase,
    infer_customer_from_text,
    infer_total_from_items,
    normalize_ambiguous_items,
    parse_number_or_none,
    parse_settle_args,
)
from src.parsing.resolver import IntentResolver

__all__ = [
    "IntentResolver",
    "coerce_quantity",
    "extract_paid_amount",
    "has_zero_payment_phrase",
    "infer_customer_from_text",
    "infer_total_from_items",
    "normalize_ambiguous_items",
    "parse_number_or_none",
    "parse_settle_args",
]
