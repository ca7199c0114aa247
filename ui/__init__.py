"""
UI layer for ShopBot.

Provides response formatting and Streamlit session helpers.
"""

from ui.responses import (
    ResponseFormatter,
    WELCOME_MESSAGE,
    QUICK_SUGGESTIONS,
    get_response_formatter,
)
from ui.state import (
    get_session_objects,
    new_conversation,
    reset_conversation,
    chat_role,
    session_summary,
    visible_turns,
)

__all__ = [
    'ResponseFormatter',
    'WELCOME_MESSAGE',
    'QUICK_SUGGESTIONS',
    'get_response_formatter',
    'get_session_objects',
    'new_conversation',
    'reset_conversation',
    'chat_role',
    'session_summary',
    'visible_turns',
]
