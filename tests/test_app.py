"""Tests for chat reply formatting."""

from decimal import Decimal

from app.main import render_response
from src.models.ledger import (
    BookkeepingResponse,
    IntentKind,
    RecordedLine,
    RecordResult,
    SettlementResult,
)


def latte_sale() -> RecordResult:
    return RecordResult(
        kind=IntentKind.SALE,
        lines=[RecordedLine(item_name="Latte", quantity=2, line_total=Decimal("50"))],
        total=Decimal("50"),
        total_paid=Decimal("50"),
    )


class TestRenderResponse:

    def test_recorded_sale(self):
        reply = render_response(
            BookkeepingResponse(kind=IntentKind.SALE, record=latte_sale()),
            "AED",
        )
        assert "Sale recorded!" in reply
        assert "2x Latte = 50 AED" in reply

    def test_failed_write_is_not_reported_as_recorded(self):
        response = BookkeepingResponse(
            kind=IntentKind.SALE,
            ok=False,
            message="Sheets error: quota exceeded",
            record=latte_sale(),
            error="quota exceeded",
        )

        reply = render_response(response, "AED")

        assert "recorded" not in reply
        assert "❌ Sheets error: quota exceeded" in reply

    def test_debt_owed(self):
        record = RecordResult(
            kind=IntentKind.DEBT,
            customer="Ahmed",
            lines=[RecordedLine(item_name="Latte", quantity=1, line_total=Decimal("25"))],
            total=Decimal("25"),
            total_paid=Decimal("15"),
            total_owed=Decimal("10.00"),
        )

        reply = render_response(BookkeepingResponse(kind=IntentKind.DEBT, record=record), "AED")

        assert "Ahmed owes: 10 AED" in reply
        assert "/settle Ahmed" in reply

    def test_settlement(self):
        settlement = SettlementResult(customer="Ahmed", settled_total=Decimal("10"), settled_rows=[2])
        reply = render_response(
            BookkeepingResponse(kind=IntentKind.SETTLE, settlement=settlement),
            "AED",
        )
        assert "Settled **10 AED** for Ahmed" in reply
