"""
Streamlit Frontend for Friends Ledger

The user keeps a list of friends with a running balance each, splits
bills with one friend at a time, and can ask the assistant to do the
same from a chat box.

DESIGN PRINCIPLES:
1. One session, one ledger (kept in st.session_state)
2. Only one form open at a time: add-friend or split-bill
3. Invalid input is simply ignored, no error popups
4. Every change shows up in the recent-activity panel

All state changes go through FriendsLedger; this module only renders.
"""

import asyncio
import html

import streamlit as st

from src.audit import create_correlation_id
from src.config import get_settings, validate_all_settings
from src.forms import AddFriendForm, SplitBillForm
from src.models.friend import (
    NAME_MAX_LENGTH,
    BalanceStatus,
    Friend,
    PayingParty,
    format_amount,
)
from src.orchestrator import FriendsLedger, create_app_components


# Page configuration
st.set_page_config(
    page_title="Friends Ledger",
    page_icon="👯",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .red { color: #e03131; }
    .green { color: #66a80f; }
    .selected-row {
        padding: 6px 10px;
        background-color: #fff4e6;
        border-radius: 7px;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_components():
    """Get or create this session's ledger, bridge and assistant."""
    if "components" not in st.session_state:
        st.session_state.components = create_app_components(use_assistant=True)
        st.session_state.add_friend_form = AddFriendForm(
            default_image=get_settings().app.avatar_base_url
        )
        st.session_state.split_bill_form = SplitBillForm()
        st.session_state.chat_history = []
    return st.session_state.components


def main():
    """Main application entry point."""
    ledger, _, assistant = get_components()

    st.sidebar.title("👯 Friends Ledger")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["👯 Friends", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Select a friend
        2. Enter the bill and your share
        3. Split the bill

        **Or ask the assistant:**
        - "Add a friend called Dana"
        - "I owe Sarah 15 for lunch"
        """
    )

    if page == "👯 Friends":
        render_friends_page(ledger, assistant)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_friends_page(ledger: FriendsLedger, assistant):
    """Friend list, forms, assistant chat and activity."""
    st.title("👯 Friends")

    col_list, col_form = st.columns([1, 1])

    with col_list:
        render_friends_list(ledger)

        if ledger.show_add_friend:
            render_add_friend_form(ledger)

        st.button(
            "Close" if ledger.show_add_friend else "Add Friend",
            on_click=ledger.toggle_add_friend_form,
            key="toggle_add_friend",
        )

    with col_form:
        selected = ledger.selected_friend
        if selected is not None:
            render_split_bill_form(ledger, selected)

    st.markdown("---")
    render_assistant_chat(ledger, assistant)

    with st.expander("🕑 Recent Activity"):
        events = ledger.audit_logger.recent(10)
        if not events:
            st.caption("Nothing yet.")
        for event in events:
            st.markdown(
                f"`{event.timestamp.strftime('%H:%M:%S')}` "
                f"**{event.source.value}**: {event.description}"
            )


def render_friends_list(ledger: FriendsLedger):
    currency = get_settings().app.currency_symbol

    for friend in ledger.friends:
        is_selected = ledger.selection.is_selected(friend.id)
        col_img, col_text, col_button = st.columns([1, 4, 2])

        with col_img:
            st.image(friend.image, width=48)

        with col_text:
            st.markdown(
                friend_row_html(friend, currency, is_selected),
                unsafe_allow_html=True,
            )

        with col_button:
            st.button(
                "Close" if is_selected else "Select",
                key=f"select_{friend.id}",
                on_click=_on_select, args=(ledger, friend.id),
            )


def friend_row_html(friend: Friend, currency: str, is_selected: bool = False) -> str:
    """Name and balance line of one friend row. User text is escaped."""
    row_class = "selected-row" if is_selected else ""
    return (
        f'<div class="{row_class}">'
        f"<strong>{html.escape(friend.name)}</strong>"
        f'<p class="{_balance_class(friend)}">{html.escape(friend.balance_message(currency))}</p>'
        "</div>"
    )


def _balance_class(friend: Friend) -> str:
    if friend.status == BalanceStatus.OWE:
        return "red"
    if friend.status == BalanceStatus.OWED:
        return "green"
    return ""


def _on_select(ledger: FriendsLedger, friend_id):
    ledger.select_friend(friend_id)
    st.session_state.split_bill_form.reset()
    _clear_split_widgets()


def render_add_friend_form(ledger: FriendsLedger):
    form: AddFriendForm = st.session_state.add_friend_form

    with st.form("form_add_friend", clear_on_submit=False):
        name = st.text_input("👯 Friend Name", value=form.name, max_chars=NAME_MAX_LENGTH)
        image = st.text_input("🌄 Image URL", value=form.image)
        submitted = st.form_submit_button("Add")

    if submitted:
        form.name = name
        form.image = image
        if ledger.submit_add_friend(form) is not None:
            st.rerun()


SPLIT_WIDGET_KEYS = ("split_bill_value", "split_your_expense", "split_who_is_paying")


def _clear_split_widgets():
    for key in SPLIT_WIDGET_KEYS:
        st.session_state.pop(key, None)


def _on_bill_change():
    st.session_state.split_bill_form.set_bill(st.session_state.split_bill_value)


def _on_expense_change():
    form: SplitBillForm = st.session_state.split_bill_form
    if not form.set_your_expense(st.session_state.split_your_expense):
        # Over the bill: keep the previous value
        st.session_state.split_your_expense = form.your_expense


def _on_payer_change():
    st.session_state.split_bill_form.set_who_is_paying(
        st.session_state.split_who_is_paying
    )


def render_split_bill_form(ledger: FriendsLedger, friend: Friend):
    form: SplitBillForm = st.session_state.split_bill_form

    st.subheader(f"Split a bill with {friend.name}")

    st.number_input(
        "💰 Bill Value",
        min_value=0,
        step=1,
        value=None,
        key="split_bill_value",
        on_change=_on_bill_change,
    )
    st.number_input(
        "🧍 Your Expense",
        min_value=0,
        step=1,
        value=None,
        key="split_your_expense",
        on_change=_on_expense_change,
    )
    friend_expense = form.friend_expense
    st.text_input(
        f"👯 {friend.name}'s Expense",
        value="" if friend_expense is None else format_amount(friend_expense),
        disabled=True,
    )
    st.selectbox(
        "🤑 Who is Paying the Bill",
        options=[PayingParty.USER.value, PayingParty.FRIEND.value],
        format_func=lambda v: "You" if v == PayingParty.USER.value else friend.name,
        key="split_who_is_paying",
        on_change=_on_payer_change,
    )

    if st.button("Split Bill", type="primary"):
        if ledger.submit_split_bill(form) is not None:
            _clear_split_widgets()
            st.rerun()


def render_assistant_chat(ledger: FriendsLedger, assistant):
    st.subheader("💬 Assistant")

    if assistant is None:
        st.info(
            "The assistant isn't configured. Set GEMINI_API_KEY in your `.env` "
            "file to chat with it. Everything else works without it."
        )
        return

    history: list[dict] = st.session_state.chat_history
    for turn in history:
        with st.chat_message(turn["role"]):
            st.markdown(turn["content"])

    message = st.chat_input("Ask about balances, add a friend, split a bill...")
    if not message:
        return

    with st.spinner("Thinking..."):
        reply = run_async(
            assistant.respond(
                message=message,
                history=history,
                correlation_id=create_correlation_id(),
            )
        )

    history.append({"role": "user", "content": message})
    history.append({"role": "assistant", "content": reply.reply})

    if reply.action_succeeded and ledger.selected_friend is None:
        # The action cleared the selection
        st.session_state.split_bill_form.reset()
        _clear_split_widgets()
    st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Gemini (Assistant)", "gemini"),
        ("App Settings", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
