"""Tests for merging the parser's guess with the heuristics."""

from decimal import Decimal

import pytest

from src.models.ledger import IntentKind, ParsedIntent
from src.parsing import IntentResolver


@pytest.fixture
def resolver(catalog):
    return IntentResolver(catalog)


class TestPaidResolution:
    """Which paid amount wins."""

    def test_model_value_used(self, resolver):
        parsed = ParsedIntent(intent="debt", items=[{"name": "latte"}], paid=15)
        assert resolver.explicit_paid(parsed, "latte for ahmed") == Decimal("15")

    def test_text_fills_missing_value(self, resolver):
        parsed = ParsedIntent(intent="debt", items=[{"name": "latte"}])
        assert resolver.explicit_paid(parsed, "Ahmed got a latte, paid 15") == Decimal("15")

    def test_negative_model_value_ignored(self, resolver):
        parsed = ParsedIntent(intent="debt", paid=-5)
        assert resolver.explicit_paid(parsed, "latte, gave 5") == Decimal("5")

    def test_zero_phrase_beats_model(self, resolver):
        """"paid nothing" overrides whatever number the model returned."""
        parsed = ParsedIntent(intent="debt", items=[{"name": "coco matcha"}], paid=5)
        text = "Sara took a coco matcha, paid nothing"
        assert resolver.explicit_paid(parsed, text) == Decimal("0")

    def test_nobody_mentioned_payment(self, resolver):
        parsed = ParsedIntent(intent="sale", items=[{"name": "latte"}])
        assert resolver.explicit_paid(parsed, "sold a latte") is None


class TestResolve:

    def test_plain_sale(self, resolver):
        parsed = ParsedIntent(intent="sale", items=[{"name": "Latte", "qty": "2"}])
        intent = resolver.resolve("sold 2 lattes", parsed)

        assert intent.kind == IntentKind.SALE
        assert len(intent.line_items) == 1
        assert intent.line_items[0].item_key == "latte"
        assert intent.line_items[0].quantity == 2
        assert intent.stated_paid is None

    def test_underpaid_sale_becomes_debt(self, resolver):
        parsed = ParsedIntent(
            intent="sale",
            items=[{"name": "matcha latte", "qty": 1}],
            customer="Ahmed",
        )
        intent = resolver.resolve("Ahmed got a matcha latte, paid 15", parsed)

        assert intent.kind == IntentKind.DEBT
        assert intent.stated_paid == Decimal("15")
        assert intent.customer == "Ahmed"

    def test_full_payment_stays_sale(self, resolver):
        parsed = ParsedIntent(intent="sale", items=[{"name": "latte"}], paid=25)
        intent = resolver.resolve("latte, paid 25", parsed)
        assert intent.kind == IntentKind.SALE

    def test_sale_with_unknown_items_not_reclassified(self, resolver):
        """Nothing priced means nothing to compare the payment against."""
        parsed = ParsedIntent(intent="sale", items=[{"name": "unicorn frappe"}], paid=5)
        intent = resolver.resolve("unicorn frappe, paid 5", parsed)
        assert intent.kind == IntentKind.SALE

    def test_debt_never_becomes_sale(self, resolver):
        parsed = ParsedIntent(intent="debt", items=[{"name": "latte"}], paid=25)
        intent = resolver.resolve("latte paid 25", parsed)
        assert intent.kind == IntentKind.DEBT

    def test_latte_not_matcha_latte(self, resolver):
        parsed = ParsedIntent(intent="sale", items=[{"name": "matcha latte"}])
        intent = resolver.resolve("sold a latte", parsed)
        assert intent.line_items[0].item_key == "latte"

    def test_customer_from_text(self, resolver):
        parsed = ParsedIntent(intent="debt", items=[{"name": "espresso"}], customer=None)
        intent = resolver.resolve("espresso for Omar, paid 5", parsed)
        assert intent.customer == "Omar"
        assert intent.stated_paid == Decimal("5")

    def test_other_kinds_pass_through(self, resolver):
        parsed = ParsedIntent(intent="settle", customer="Ahmed", paid="15")
        intent = resolver.resolve("Ahmed paid 15 of what he owes", parsed)
        assert intent.kind == IntentKind.SETTLE
        assert intent.customer == "Ahmed"
        assert intent.stated_paid == Decimal("15")
