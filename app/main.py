"""
Streamlit Frontend for Coffee Bar Bookkeeper

A chat window for the person behind the counter: type what happened
("Ahmed got a latte, paid 15") or a /command, and read back what was
recorded.

All formatting lives here. The orchestrator only returns structured
BookkeepingResponse objects.
"""

import asyncio
from decimal import Decimal

import streamlit as st

from src.config import configure_logging, validate_all_settings
from src.models.ledger import BookkeepingResponse, IntentKind
from src.orchestrator import BookkeepingFlow, create_app_components


st.set_page_config(
    page_title="Coffee Bar Bookkeeper",
    page_icon="☕",
    layout="centered",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_flow() -> BookkeepingFlow:
    """Get or create the bookkeeping flow (cached)."""
    configure_logging()
    return create_app_components(use_storage=True)


def fmt(amount: Decimal, currency: str) -> str:
    return f"{amount.normalize():f} {currency}"


def render_response(response: BookkeepingResponse, currency: str) -> str:
    """Turn a structured response into chat markdown."""
    parts = []

    if response.ok and response.record and not response.record.is_empty:
        record = response.record
        for warning in record.warnings:
            parts.append(f"⚠️ {warning}")
        title = "✅ **Sale recorded!**" if record.kind == IntentKind.SALE else "💸 **Debt recorded!**"
        parts.append(title)
        for line in record.lines:
            parts.append(f"- {line.quantity}x {line.item_name} = {fmt(line.line_total, currency)}")
        if record.kind == IntentKind.SALE:
            parts.append(f"**Total: {fmt(record.total, currency)}**")
        else:
            parts.append(f"Total: {fmt(record.total, currency)}")
            parts.append(f"Paid: {fmt(record.total_paid, currency)}")
            if record.fully_paid:
                parts.append("✅ Fully paid")
            else:
                parts.append(f"⚠️ **{record.customer} owes: {fmt(record.total_owed, currency)}**")
                parts.append(f"To settle: `/settle {record.customer}`")
    elif response.record:
        for warning in response.record.warnings:
            parts.append(f"⚠️ {warning}")

    if response.settlement and response.settlement.found_any:
        settled = response.settlement
        parts.append(f"✅ Settled **{fmt(settled.settled_total, currency)}** for {settled.customer}!")

    if response.summary:
        s = response.summary
        parts.extend([
            "📊 **Sales Summary**",
            f"📅 **Today ({s.as_of.isoformat()})**",
            f"- Sales: {fmt(s.today_revenue, currency)}",
            f"- Collected: {fmt(s.today_collected, currency)}",
            f"- Unpaid: {fmt(s.today_unpaid, currency)}",
            "📈 **All Time**",
            f"- Sales: {fmt(s.total_revenue, currency)}",
            f"- Collected: {fmt(s.total_collected, currency)}",
            f"- Transactions: {s.transaction_count}",
            f"⚠️ **Unsettled Debts: {fmt(s.total_owed, currency)}**",
        ])

    if response.debts:
        parts.append("📋 **Outstanding Debts**")
        for entry in response.debts:
            parts.append(f"👤 **{entry.customer}** owes **{fmt(entry.total, currency)}**")
            for item_name, owed in entry.items:
                parts.append(f"- {item_name} (owes {fmt(owed, currency)})")
            parts.append(f"→ `/settle {entry.customer}`")

    if response.menu:
        parts.append("☕ **Menu & Prices**")
        for category, items in response.menu.items():
            parts.append(f"**{category.upper()}**")
            for item in items:
                parts.append(f"- {item.name.title()}: {fmt(item.unit_price, currency)}")

    if response.message:
        prefix = "❌ " if not response.ok else ""
        parts.append(prefix + response.message)

    return "\n\n".join(parts) or "Done."


def render_sidebar():
    """Connection status for the external services."""
    st.sidebar.title("☕ Bookkeeper")
    st.sidebar.markdown("### Connection Status")

    status = validate_all_settings()
    services = [
        ("Google Sheets (Storage)", "google_sheets"),
        ("Gemini (AI)", "gemini"),
    ]
    for name, key in services:
        if status.get(key, False):
            st.sidebar.success(f"✅ {name}")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.sidebar.error(f"❌ {name} - {error}")

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        "Without Google Sheets the ledger is kept in memory and is lost on restart. "
        "Without Gemini only /commands work."
    )


def main():
    """Main application entry point."""
    flow = get_flow()
    render_sidebar()

    st.title("☕ Coffee Bar Bookkeeper")
    st.caption("Type what happened, or /help for examples.")

    if "messages" not in st.session_state:
        st.session_state.messages = []

    for message in st.session_state.messages:
        with st.chat_message(message["role"]):
            st.markdown(message["content"])

    prompt = st.chat_input('e.g. "Ahmed got a latte, paid 15"')
    if not prompt:
        return

    st.session_state.messages.append({"role": "user", "content": prompt})
    with st.chat_message("user"):
        st.markdown(prompt)

    with st.spinner("Working..."):
        try:
            response = run_async(flow.handle_message(prompt))
            reply = render_response(response, flow.currency)
        except Exception as e:
            reply = f"⚠️ Error: {e}"

    st.session_state.messages.append({"role": "assistant", "content": reply})
    with st.chat_message("assistant"):
        st.markdown(reply)


if __name__ == "__main__":
    main()
