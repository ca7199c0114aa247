"""
Turn handlers for ShopBot.

Each handler processes one route of the dialogue: cart actions or
conversation.
"""

from handlers.base import BaseHandler, HandlerContext, HandlerResult
from handlers.cart import CartActionHandler
from handlers.conversation import ConversationHandler

__all__ = [
    # Base classes
    'BaseHandler',
    'HandlerContext',
    'HandlerResult',
    # Handlers
    'CartActionHandler',
    'ConversationHandler',
]
