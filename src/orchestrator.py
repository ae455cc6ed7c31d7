"""
Main Orchestrator for Coffee Bar Bookkeeper

This module ties together all the components and defines the
end-to-end flow for one inbound message:

    text -> parser guess -> heuristics + resolver -> canonical intent
         -> recorder (sale/debt) or settlement (settle)
         -> ledger rows -> summary refresh -> structured response

plus the explicit commands (/summary, /debts, /settle, /menu, /help,
/clearall).

DESIGN DECISION: Everything runs sequentially, one message at a time.
There is no locking and no rollback: if the store fails halfway through
a multi-row write, the rows already written stay and the error is
reported back.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from src.agents import IntentParserAgent
from src.catalog import Catalog, load_catalog
from src.config import AppSettings, get_settings
from src.config.logging import get_logger
from src.ledger import (
    OverpaymentError,
    SettlementEngine,
    SummaryAggregator,
    TransactionRecorder,
)
from src.models.ledger import (
    BookkeepingResponse,
    IntentKind,
    ResolvedIntent,
    SummarySnapshot,
)
from src.parsing import IntentResolver, parse_settle_args
from src.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsRowStore,
    InMemoryRowStore,
    LedgerRepository,
    RowStoreInterface,
    StorageError,
)


logger = get_logger(__name__)


HELP_TEXT = """Just type naturally!

Sales:
   "sold a latte"
   "2 matcha lattes and an espresso"

Debts:
   "Ahmed got a latte, paid 15"
   "Sara took a coco matcha, paid nothing"

Settle:
   "settle Ahmed"

Commands:
   /summary  - daily & all-time totals
   /debts    - outstanding debts
   /menu     - full menu & prices
   /settle   - /settle Ahmed  or  /settle Ahmed 15
   /clearall - wipe all records"""

PARSER_UNAVAILABLE = "Could not reach AI. Try: /help /summary /debts /menu"
NOT_UNDERSTOOD = "I didn't understand that. Type /help to see what I can do."
SETTLE_USAGE = "Usage: /settle Ahmed  or  /settle Ahmed 15"
CLEAR_ALL_WARNING = (
    "This will delete ALL sales and debt records. "
    "Type /clearall confirm to proceed."
)


class BookkeepingFlow:
    """
    Orchestrates message handling for the bookkeeper.

    Stateless between calls: every operation re-reads whatever ledger
    state it needs from the repository.
    """

    def __init__(
        self,
        catalog: Catalog,
        repository: LedgerRepository,
        parser: Optional[IntentParserAgent] = None,
        app_settings: Optional[AppSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._app_settings = app_settings or AppSettings()
        self._catalog = catalog
        self._repository = repository
        self._parser = parser
        self._resolver = IntentResolver(catalog)
        self._recorder = TransactionRecorder(
            catalog,
            default_customer=self._app_settings.default_customer,
            currency=self._app_settings.currency,
        )
        self._settlement = SettlementEngine()
        self._aggregator = SummaryAggregator()
        self._clock = clock

    @property
    def currency(self) -> str:
        return self._app_settings.currency

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    async def handle_message(self, text: str) -> BookkeepingResponse:
        """Handle one inbound message (free text or /command)."""
        text = (text or "").strip()
        if text.startswith("/"):
            return await self.handle_command(text)

        parsed = await self._parser.parse(text) if self._parser else None
        if parsed is None:
            return BookkeepingResponse(
                kind=IntentKind.UNKNOWN,
                ok=False,
                message=PARSER_UNAVAILABLE,
            )

        intent = self._resolver.resolve(text, parsed)
        logger.info(
            "intent_resolved",
            kind=intent.kind.value,
            items=len(intent.line_items),
            customer=intent.customer,
            paid=str(intent.stated_paid) if intent.stated_paid is not None else None,
        )
        return await self.dispatch(intent)

    async def handle_command(self, text: str) -> BookkeepingResponse:
        """Handle "/command args"."""
        command, _, args = text.lstrip("/").partition(" ")
        command = command.split("@")[0].lower()
        args = args.strip()

        if command in ("start", "help"):
            return self.help()
        if command == "menu":
            return self.show_menu()
        if command == "summary":
            return await self.summary()
        if command == "debts":
            return await self.list_debts()
        if command == "settle":
            name, cap = parse_settle_args(args)
            return await self.settle(name, cap)
        if command == "clearall":
            return await self.clear_all(confirm=args == "confirm")

        return BookkeepingResponse(
            kind=IntentKind.UNKNOWN,
            ok=False,
            message=NOT_UNDERSTOOD,
        )

    async def dispatch(self, intent: ResolvedIntent) -> BookkeepingResponse:
        """Route a resolved intent to the operation it asks for."""
        if intent.kind == IntentKind.SALE:
            if not intent.line_items:
                return BookkeepingResponse(
                    kind=intent.kind,
                    ok=False,
                    message='No items found. Try: "sold 2 lattes"',
                )
            return await self.record(intent)

        if intent.kind == IntentKind.DEBT:
            if not intent.line_items:
                return BookkeepingResponse(
                    kind=intent.kind,
                    ok=False,
                    message='No items found. Try: "Ahmed got a latte, paid 15"',
                )
            return await self.record(intent)

        if intent.kind == IntentKind.SETTLE:
            if not intent.customer:
                return BookkeepingResponse(
                    kind=intent.kind,
                    ok=False,
                    message='Who to settle for? Try: "settle Ahmed"',
                )
            # A stated amount of zero means no cap, as in "settle Ahmed"
            cap = intent.stated_paid if intent.stated_paid else None
            return await self.settle(intent.customer, cap)

        if intent.kind == IntentKind.SUMMARY:
            return await self.summary()
        if intent.kind == IntentKind.LIST_DEBTS:
            return await self.list_debts()
        if intent.kind == IntentKind.SHOW_MENU:
            return self.show_menu()
        if intent.kind == IntentKind.HELP:
            return self.help()
        if intent.kind == IntentKind.CLEAR_ALL:
            return BookkeepingResponse(kind=intent.kind, message=CLEAR_ALL_WARNING)

        return BookkeepingResponse(
            kind=IntentKind.UNKNOWN,
            ok=False,
            message=NOT_UNDERSTOOD,
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def record(self, intent: ResolvedIntent) -> BookkeepingResponse:
        """Record a sale or debt and persist its rows."""
        now = self._clock()
        try:
            result = self._recorder.record(intent, now)
        except OverpaymentError as e:
            return BookkeepingResponse(kind=intent.kind, ok=False, message=str(e))

        if result.is_empty:
            return BookkeepingResponse(
                kind=intent.kind,
                ok=False,
                message="Nothing recorded.",
                record=result,
            )

        try:
            for unit in result.units:
                await self._repository.append_sale(unit.sale)
                if unit.debt is not None:
                    await self._repository.append_debt(unit.debt)
            await self.refresh_summary()
        except StorageError as e:
            logger.error(
                "ledger_write_failed",
                kind=intent.kind.value,
                error=str(e),
            )
            return BookkeepingResponse(
                kind=intent.kind,
                ok=False,
                message=f"Sheets error: {e}",
                record=result,
                error=str(e),
            )

        logger.info(
            "transaction_recorded",
            kind=result.kind.value,
            customer=result.customer,
            units=len(result.sale_rows),
            debts=len(result.debt_rows),
            total=str(result.total),
            owed=str(result.total_owed),
        )
        return BookkeepingResponse(kind=result.kind, record=result)

    async def settle(
        self,
        customer: str,
        cap: Optional[Decimal] = None,
    ) -> BookkeepingResponse:
        """Settle a customer's pending debts, optionally up to `cap`."""
        customer = (customer or "").strip()
        if not customer:
            return BookkeepingResponse(
                kind=IntentKind.SETTLE,
                ok=False,
                message=SETTLE_USAGE,
            )

        try:
            debts = await self._repository.list_debts()
            result = self._settlement.plan(debts, customer, cap)
            settled_on = self._clock().date()
            for row_number in result.settled_rows:
                await self._repository.mark_settled(row_number, settled_on)
            await self.refresh_summary()
        except StorageError as e:
            logger.error("settlement_failed", customer=customer, error=str(e))
            return BookkeepingResponse(
                kind=IntentKind.SETTLE,
                ok=False,
                message=f"Sheets error: {e}",
                error=str(e),
            )

        if not result.found_any:
            return BookkeepingResponse(
                kind=IntentKind.SETTLE,
                message=f'No pending debts found for "{customer}".',
                settlement=result,
            )
        return BookkeepingResponse(kind=IntentKind.SETTLE, settlement=result)

    async def clear_all(self, confirm: bool = False) -> BookkeepingResponse:
        """Wipe all sale and debt rows (headers stay)."""
        if not confirm:
            return BookkeepingResponse(
                kind=IntentKind.CLEAR_ALL,
                message=CLEAR_ALL_WARNING,
            )

        try:
            await self._repository.clear_ledger()
            await self.refresh_summary()
        except StorageError as e:
            logger.error("clear_all_failed", error=str(e))
            return BookkeepingResponse(
                kind=IntentKind.CLEAR_ALL,
                ok=False,
                message=f"Sheets error: {e}",
                error=str(e),
            )

        logger.warning("ledger_cleared")
        return BookkeepingResponse(
            kind=IntentKind.CLEAR_ALL,
            message="All sales and debt records cleared.",
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def compute_summary(self) -> SummarySnapshot:
        sales = await self._repository.list_sales()
        debts = await self._repository.list_debts()
        return self._aggregator.compute(
            sales,
            [stored.debt for stored in debts],
            self._clock().date(),
        )

    async def refresh_summary(self) -> SummarySnapshot:
        """Recompute totals and rewrite the Summary sheet."""
        snapshot = await self.compute_summary()
        await self._repository.write_summary(snapshot, self._clock(), self.currency)
        return snapshot

    async def summary(self) -> BookkeepingResponse:
        try:
            snapshot = await self.compute_summary()
        except StorageError as e:
            logger.error("summary_failed", error=str(e))
            return BookkeepingResponse(
                kind=IntentKind.SUMMARY,
                ok=False,
                message=f"Sheets error: {e}",
                error=str(e),
            )
        return BookkeepingResponse(kind=IntentKind.SUMMARY, summary=snapshot)

    async def list_debts(self) -> BookkeepingResponse:
        try:
            stored = await self._repository.list_debts()
        except StorageError as e:
            logger.error("list_debts_failed", error=str(e))
            return BookkeepingResponse(
                kind=IntentKind.LIST_DEBTS,
                ok=False,
                message=f"Sheets error: {e}",
                error=str(e),
            )

        grouped = self._aggregator.pending_by_customer(
            [s.debt for s in stored],
            default_customer=self._app_settings.default_customer,
        )
        if not grouped:
            return BookkeepingResponse(
                kind=IntentKind.LIST_DEBTS,
                message="No outstanding debts! All clear.",
                debts=[],
            )
        return BookkeepingResponse(kind=IntentKind.LIST_DEBTS, debts=grouped)

    def show_menu(self) -> BookkeepingResponse:
        return BookkeepingResponse(
            kind=IntentKind.SHOW_MENU,
            menu=self._catalog.by_category(),
        )

    def help(self) -> BookkeepingResponse:
        return BookkeepingResponse(kind=IntentKind.HELP, message=HELP_TEXT)


def create_app_components(
    use_storage: bool = True,
    use_parser: bool = True,
) -> BookkeepingFlow:
    """
    Factory function to create the bookkeeping flow.

    Args:
        use_storage: Whether to use Google Sheets. Falls back to an
                    in-memory ledger when False or when Sheets isn't
                    configured.
        use_parser: Whether to set up the Gemini intent parser. Without
                   it, free text gets the "could not interpret" reply and
                   only /commands work.

    Returns:
        The configured BookkeepingFlow
    """
    settings = get_settings()
    app_settings = settings.app
    catalog = load_catalog(app_settings.menu_file)

    store: RowStoreInterface = InMemoryRowStore()
    sales_table, debts_table, summary_table = "Sales", "Debts", "Summary"
    if use_storage:
        try:
            sheets_settings = settings.google_sheets
            store = GoogleSheetsRowStore(GoogleSheetsClient(sheets_settings))
            sales_table = sheets_settings.sales_sheet_name
            debts_table = sheets_settings.debts_sheet_name
            summary_table = sheets_settings.summary_sheet_name
        except Exception as e:
            # Storage not configured - continue with an in-memory ledger
            logger.warning("storage_not_configured", error=str(e))

    parser = None
    if use_parser:
        try:
            parser = IntentParserAgent(catalog)
        except Exception as e:
            logger.warning("parser_not_configured", error=str(e))

    repository = LedgerRepository(
        store,
        sales_table=sales_table,
        debts_table=debts_table,
        summary_table=summary_table,
    )
    return BookkeepingFlow(
        catalog=catalog,
        repository=repository,
        parser=parser,
        app_settings=app_settings,
    )
