"""Tests for the summary aggregator."""

from datetime import date, time
from decimal import Decimal

import pytest

from src.ledger import SummaryAggregator
from src.models.ledger import DebtRow, DebtStatus, SaleRow


TODAY = date(2026, 10, 18)
YESTERDAY = date(2026, 10, 17)


def sale(day, price, paid):
    price, paid = Decimal(price), Decimal(paid)
    return SaleRow(
        sale_date=day,
        sale_time=time(10, 0),
        item_name="Latte",
        category="Coffee",
        unit_price=price,
        amount_paid=paid,
        amount_owed=price - paid,
    )


def debt(customer, item, owed, status=DebtStatus.PENDING):
    return DebtRow(
        debt_date=TODAY,
        customer=customer,
        item_name=item,
        amount_owed=Decimal(owed),
        status=status,
    )


@pytest.fixture
def aggregator():
    return SummaryAggregator()


class TestCompute:
    """Tests for today and all-time totals."""

    def test_totals(self, aggregator):
        sales = [
            sale(YESTERDAY, "20", "20"),
            sale(TODAY, "25", "15"),
            sale(TODAY, "25", "25"),
        ]
        debts = [
            debt("Ahmed", "Latte", "10"),
            debt("Sara", "Espresso", "20", status=DebtStatus.SETTLED),
        ]

        snapshot = aggregator.compute(sales, debts, TODAY)

        assert snapshot.as_of == TODAY
        assert snapshot.today_revenue == Decimal("50")
        assert snapshot.today_collected == Decimal("40")
        assert snapshot.today_unpaid == Decimal("10")
        assert snapshot.total_revenue == Decimal("70")
        assert snapshot.total_collected == Decimal("60")
        assert snapshot.transaction_count == 3
        assert snapshot.total_owed == Decimal("10")
        assert snapshot.total_settled == Decimal("20")

    def test_empty_ledger(self, aggregator):
        snapshot = aggregator.compute([], [], TODAY)
        assert snapshot.total_revenue == Decimal("0")
        assert snapshot.transaction_count == 0

    def test_idempotent(self, aggregator):
        sales = [sale(TODAY, "25", "15")]
        debts = [debt("Ahmed", "Latte", "10")]
        assert aggregator.compute(sales, debts, TODAY) == aggregator.compute(sales, debts, TODAY)


class TestPendingByCustomer:

    def test_grouped_in_first_seen_order(self, aggregator):
        debts = [
            debt("Sara", "Coco Matcha", "25"),
            debt("Ahmed", "Latte", "10.5"),
            debt("Sara", "Espresso", "4.25"),
            debt("Ahmed", "Latte", "9", status=DebtStatus.SETTLED),
        ]

        grouped = aggregator.pending_by_customer(debts)

        assert [entry.customer for entry in grouped] == ["Sara", "Ahmed"]
        assert grouped[0].items == [("Coco Matcha", Decimal("25")), ("Espresso", Decimal("4.25"))]
        assert grouped[0].total == Decimal("29.25")
        assert grouped[1].total == Decimal("10.50")

    def test_blank_customer_uses_default(self, aggregator):
        grouped = aggregator.pending_by_customer([debt("", "Latte", "5")], default_customer="Walk-in")
        assert grouped[0].customer == "Walk-in"

    def test_nothing_pending(self, aggregator):
        debts = [debt("Ahmed", "Latte", "9", status=DebtStatus.SETTLED)]
        assert aggregator.pending_by_customer(debts) == []
