"""
Streamlit Frontend for Budget Ledger

This is the screen users interact with daily: two forms (income and
expense), two lists with delete buttons, and the running totals.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Clear error messages; rejected input stays in the form for correction
3. Explicit confirmation before deleting
4. No hidden actions

The UI holds no ledger rules. It hands raw form text to the
BudgetSession and renders whatever the session returns.
"""

from decimal import Decimal

import streamlit as st

from budget_ledger.config import get_settings
from budget_ledger.models.entry import LedgerEntry
from budget_ledger.orchestrator import BudgetSession, create_app_components
from budget_ledger.validation import LedgerValidationError


# Page configuration
st.set_page_config(
    page_title="Budget Ledger",
    page_icon="💰",
    layout="wide",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .entry-date {
        color: #6c757d;
        font-size: 0.85em;
    }
    .negative-budget {
        color: #d62828;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


FORMS = {
    "income": ("Income", "e.g. Paycheck"),
    "expense": ("Expense", "e.g. Rent"),
}


def format_currency(amount: Decimal) -> str:
    """Render an amount the way the totals and lists show it."""
    symbol = get_settings().app.currency_symbol
    if not amount.is_finite():
        return f"{symbol}–"
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize storage: {e}")
        return create_app_components(use_storage=False)


def submit_entry(session: BudgetSession, kind: str) -> None:
    """Form callback: add the entry, clear the form only on success."""
    description = st.session_state.get(f"{kind}_desc", "")
    raw_amount = st.session_state.get(f"{kind}_amount", "")

    try:
        if kind == "income":
            session.add_income(description, raw_amount)
        else:
            session.add_expense(description, raw_amount)
    except LedgerValidationError as e:
        st.session_state[f"{kind}_error"] = e.message
        return

    st.session_state[f"{kind}_error"] = None
    clear_form(kind)


def clear_form(kind: str) -> None:
    st.session_state[f"{kind}_desc"] = ""
    st.session_state[f"{kind}_amount"] = ""


def main():
    """Main application entry point."""
    session, _, _ = get_components()

    st.title("💰 Budget Ledger")

    render_summary(session)
    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        render_entry_form(session, "income")
        render_entry_list(session, session.ledger.incomes, "income")
    with col2:
        render_entry_form(session, "expense")
        render_entry_list(session, session.ledger.expenses, "expense")

    if get_settings().app.debug_mode:
        render_activity(session)


def render_activity(session: BudgetSession):
    """Sidebar list of recent audit events, shown in debug mode."""
    st.sidebar.subheader("Recent activity")
    events = session.audit_logger.recent_events(limit=20)
    if not events:
        st.sidebar.caption("Nothing yet.")
        return
    for event in events:
        st.sidebar.text(f"{event.timestamp:%H:%M:%S} {event.description}")


def render_summary(session: BudgetSession):
    """Render the three running totals."""
    summary = session.summary()

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_currency(summary.income))
    col2.metric("Expenses", format_currency(summary.expenses))

    with col3:
        if summary.is_overspent:
            st.markdown("Budget")
            st.markdown(
                f'<div class="negative-budget">{format_currency(summary.budget)}</div>',
                unsafe_allow_html=True,
            )
        else:
            st.metric("Budget", format_currency(summary.budget))


def render_entry_form(session: BudgetSession, kind: str):
    """Render the add form for one kind of entry."""
    label, placeholder = FORMS[kind]
    st.subheader(f"Add {label}")

    with st.form(f"{kind}-form"):
        st.text_input("Description", key=f"{kind}_desc", placeholder=placeholder)
        st.text_input("Amount", key=f"{kind}_amount", placeholder="0.00")

        col1, col2 = st.columns(2)
        with col1:
            st.form_submit_button(
                f"Add {label}",
                type="primary",
                on_click=submit_entry,
                args=(session, kind),
            )
        with col2:
            st.form_submit_button("Clear", on_click=clear_form, args=(kind,))

    error = st.session_state.get(f"{kind}_error")
    if error:
        st.error(error)


def render_entry_list(session: BudgetSession, entries: tuple[LedgerEntry, ...], kind: str):
    """Render the entries of one kind with delete buttons."""
    if not entries:
        st.info("No income added yet." if kind == "income" else "No expenses added yet.")
        return

    sign = "-" if kind == "expense" else ""
    for entry in entries:
        col1, col2, col3 = st.columns([4, 2, 1])
        with col1:
            st.text(entry.description)
            st.markdown(
                f'<span class="entry-date" title="{entry.created_at.isoformat()}">'
                f'{entry.created_at.astimezone():%Y-%m-%d %H:%M}</span>',
                unsafe_allow_html=True,
            )
        col2.markdown(f"**{sign}{format_currency(entry.amount)}**")
        with col3:
            render_delete(session, entry, kind)


def render_delete(session: BudgetSession, entry: LedgerEntry, kind: str):
    """Two-step delete: ✕ asks, Confirm removes."""
    pending_key = f"confirm_delete_{entry.id}"

    if st.session_state.get(pending_key):
        if st.button("Confirm", key=f"yes_{entry.id}", type="primary"):
            session.remove(entry.id)
            st.session_state.pop(pending_key, None)
            st.rerun()
        if st.button("Cancel", key=f"no_{entry.id}"):
            st.session_state.pop(pending_key, None)
            st.rerun()
    elif st.button("✕", key=f"del_{entry.id}", help=f"Delete {kind}"):
        st.session_state[pending_key] = True
        st.rerun()


if __name__ == "__main__":
    main()
