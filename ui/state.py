"""
Streamlit session state helpers for ShopBot.

Streamlit reruns the script on every interaction, so the conversation
context and cart live in st.session_state. These helpers create them once
per browser session and convert turns into chat messages. They take the
session-state mapping as a parameter so they work without a running app.
"""

from datetime import datetime
from typing import Any, Dict, List, MutableMapping, Optional, Tuple

from config.settings import Settings
from core.cart import Cart, JSONFileStorage
from core.context import ConversationContext, Turn, TurnRole, UserProfile
from ui.responses import get_response_formatter

CONTEXT_KEY = "conversation"
CART_KEY = "cart"


def new_conversation(settings: Settings, with_welcome: bool = True) -> ConversationContext:
    """
    Create a fresh conversation sized from settings.

    Args:
        settings: Application settings (profile window sizes)
        with_welcome: Open with the assistant's welcome message
    """
    context = ConversationContext(
        session_id=f"session_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}",
        profile=UserProfile(
            search_window=settings.search_window,
            interest_window=settings.interest_window,
        ),
    )
    if with_welcome:
        context.add_assistant_turn(get_response_formatter().format_welcome())
    return context


def get_session_objects(
    st_session_state: MutableMapping,
    settings: Settings,
    storage: Optional[MutableMapping] = None,
) -> Tuple[ConversationContext, Cart]:
    """
    Get (or create) the conversation and cart for this browser session.

    Args:
        st_session_state: Streamlit's st.session_state (or any dict)
        settings: Application settings
        storage: Cart storage slot; defaults to a JSON file at cart_storage_path

    Returns:
        (ConversationContext, Cart)
    """
    if CONTEXT_KEY not in st_session_state:
        st_session_state[CONTEXT_KEY] = new_conversation(settings)

    if CART_KEY not in st_session_state:
        if storage is None:
            storage = JSONFileStorage(settings.cart_storage_path)
        st_session_state[CART_KEY] = Cart(storage=storage)

    return st_session_state[CONTEXT_KEY], st_session_state[CART_KEY]


def reset_conversation(st_session_state: MutableMapping, settings: Settings) -> ConversationContext:
    """Start a new conversation; the cart is kept."""
    context = new_conversation(settings)
    st_session_state[CONTEXT_KEY] = context
    return context


def chat_role(turn: Turn) -> str:
    """Streamlit chat role for a turn. Error turns render as the assistant."""
    return "user" if turn.role == TurnRole.USER else "assistant"


def session_summary(context: ConversationContext, cart: Cart) -> Dict[str, Any]:
    """Figures for the sidebar's session panel."""
    return {
        "session_id": context.session_id,
        "queries": context.query_count,
        "turns": len(context.turns),
        "suggested": [p.name for p in context.last_suggested_products],
        "interests": list(context.profile.interests),
        "price_range": (
            context.profile.price_range.describe()
            if context.profile.price_range.is_constrained else None
        ),
        "cart_items": cart.total_items,
        "cart_total": cart.total_price,
    }


def visible_turns(context: ConversationContext) -> List[Turn]:
    """Turns to render in the chat, oldest first."""
    return list(context.turns)
