"""Tests for settling pending debts."""

from decimal import Decimal

import pytest

from src.ledger import SettlementEngine
from src.models.ledger import DebtRow, DebtStatus, StoredDebt


def stored(row_number, customer, owed, status=DebtStatus.PENDING):
    return StoredDebt(
        row_number=row_number,
        debt=DebtRow(
            customer=customer,
            item_name="Latte",
            unit_price=Decimal("25"),
            amount_owed=Decimal(owed),
            status=status,
        ),
    )


@pytest.fixture
def engine():
    return SettlementEngine()


class TestSettlementPlan:
    """First fit, in stored order."""

    def test_uncapped_settles_everything_pending(self, engine):
        debts = [
            stored(2, "Ahmed", "10"),
            stored(3, "Sara", "25"),
            stored(4, "Ahmed", "8"),
            stored(5, "Ahmed", "6", status=DebtStatus.SETTLED),
        ]
        result = engine.plan(debts, "Ahmed")

        assert result.settled_rows == [2, 4]
        assert result.settled_total == Decimal("18")
        assert result.found_any

    def test_case_insensitive_customer(self, engine):
        debts = [stored(2, "Ahmed", "10")]
        result = engine.plan(debts, "  AHMED ")
        assert result.settled_rows == [2]
        assert result.customer == "AHMED"

    def test_cap_stops_at_first_overflow(self, engine):
        """10 then 8 would exceed 14, and so would 10 + 6."""
        debts = [
            stored(2, "Ahmed", "10"),
            stored(3, "Ahmed", "8"),
            stored(4, "Ahmed", "6"),
        ]
        result = engine.plan(debts, "Ahmed", cap=Decimal("14"))

        assert result.settled_rows == [2]
        assert result.settled_total == Decimal("10")

    def test_later_smaller_row_still_fits(self, engine):
        debts = [
            stored(2, "Ahmed", "10"),
            stored(3, "Ahmed", "8"),
            stored(4, "Ahmed", "3"),
        ]
        result = engine.plan(debts, "Ahmed", cap=Decimal("14"))

        assert result.settled_rows == [2, 4]
        assert result.settled_total == Decimal("13")

    def test_cap_tolerates_a_cent(self, engine):
        debts = [stored(2, "Ahmed", "10.01")]
        result = engine.plan(debts, "Ahmed", cap=Decimal("10"))
        assert result.settled_rows == [2]

    def test_cap_below_first_row(self, engine):
        debts = [stored(2, "Ahmed", "10")]
        result = engine.plan(debts, "Ahmed", cap=Decimal("5"))
        assert result.settled_rows == []
        assert not result.found_any

    def test_no_pending_debts(self, engine):
        debts = [stored(2, "Ahmed", "10", status=DebtStatus.SETTLED)]
        result = engine.plan(debts, "Ahmed")
        assert result.settled_rows == []
        assert result.settled_total == Decimal("0")

    def test_unknown_customer(self, engine):
        result = engine.plan([stored(2, "Ahmed", "10")], "Omar")
        assert not result.found_any
