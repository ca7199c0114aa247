"""
Base handler and context classes for ShopBot turn handlers.

Provides the common interface and shared context for all handlers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from core.context import (
    CartAction, ConversationContext, Intent, Product, TurnRole, TurnState
)


@dataclass
class HandlerContext:
    """
    Context passed to all turn handlers.

    Contains everything a handler needs to process a query:
    - The query and its classification
    - Conversation context (history, last suggestions, profile)
    - Catalog and cart
    - Component references

    This avoids passing dozens of parameters to each handler.
    """
    query: str
    action: CartAction
    intent: Intent
    context: ConversationContext
    catalog: Any            # Catalog
    cart: Any               # Cart

    # Component references (set by orchestrator)
    resolver: Any = None           # ReferentResolver
    scorer: Any = None             # RelevanceScorer
    inquiry_detector: Any = None   # ProductInquiryDetector
    context_builder: Any = None    # ContextBuilder
    composer: Any = None           # PromptComposer
    invoker: Any = None            # ProviderInvoker
    formatter: Any = None          # ResponseFormatter

    debug_mode: bool = False
    debug_lines: List[str] = field(default_factory=list)

    @property
    def session_id(self) -> str:
        return self.context.session_id

    def add_debug(self, message: str) -> None:
        """Add a debug message."""
        if self.debug_mode:
            self.debug_lines.append(message)


@dataclass
class HandlerResult:
    """
    Result returned by turn handlers.

    Contains the reply and the side effects the orchestrator applies:
    - suggestions: products to attach and remember as last suggested
    - affected: products the cart mutation was applied to
    """
    response: str
    role: TurnRole = TurnRole.ASSISTANT
    state: TurnState = TurnState.CONTEXT_BUILT
    suggestions: List[Product] = field(default_factory=list)
    affected: List[Product] = field(default_factory=list)
    skipped: List[Product] = field(default_factory=list)
    provider: Optional[str] = None


class BaseHandler(ABC):
    """
    Base class for all turn handlers.

    Handlers are stateless - all state is in HandlerContext.
    """

    @abstractmethod
    async def handle(self, ctx: HandlerContext) -> HandlerResult:
        """
        Process the turn and return a result.

        Args:
            ctx: Handler context with query, classification and components

        Returns:
            HandlerResult with reply and side effects
        """
