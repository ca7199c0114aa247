"""
Dialogue orchestrator for ShopBot.

Coordinates one turn: classification → handler routing → reply turn.

    received → classified → cart_mutated  → responded   (add / remove)
                          → context_built → responded   (everything else)

Every call appends exactly one user turn and exactly one assistant or
error turn to the ConversationContext it is given.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.patterns import extract_price_range
from core.context import (
    CartAction, ConversationContext, Intent, Product, Turn, TurnRole, TurnState
)
from core.context_builder import ContextBuilder
from core.intent import ActionClassifier, IntentClassifier, ProductInquiryDetector
from core.provider_invoker import ProviderInvoker
from core.referents import ReferentResolver
from core.scorer import RelevanceScorer, ScorerConfig
from core.structured_logging import (
    get_logger, log_classification, log_conversation_turn, log_error, log_query
)
from core.conversation_csv import log_conversation as log_conversation_csv
from core.gsheets_logger import log_error_to_gsheets, log_to_gsheets
from handlers.base import BaseHandler, HandlerContext, HandlerResult
from handlers.cart import CartActionHandler
from handlers.conversation import ConversationHandler
from llm.prompts import PromptComposer
from ui.responses import ResponseFormatter

_logger = get_logger("core.orchestrator")


@dataclass
class OrchestratorComponents:
    """
    All components needed by the orchestrator.

    These are typically created by the main app and passed in; tests swap
    the invoker for one with fake backends.
    """
    action_classifier: Any      # ActionClassifier
    intent_classifier: Any      # IntentClassifier
    inquiry_detector: Any       # ProductInquiryDetector
    resolver: Any               # ReferentResolver
    scorer: Any                 # RelevanceScorer
    context_builder: Any        # ContextBuilder
    composer: Any               # PromptComposer
    invoker: Any                # ProviderInvoker
    formatter: Any              # ResponseFormatter


def create_components(
    backends: List[Any],
    relevance_threshold: float = 25,
    max_suggestions: int = 3,
    context_turns: int = 6,
) -> OrchestratorComponents:
    """
    Build the default component set around a list of completion backends.

    Args:
        backends: Completion backends, primary first
        relevance_threshold: Minimum relevance score for suggestions
        max_suggestions: Top-N suggestions
        context_turns: Turns rendered into the context block
    """
    inquiry_detector = ProductInquiryDetector()
    return OrchestratorComponents(
        action_classifier=ActionClassifier(),
        intent_classifier=IntentClassifier(inquiry_detector),
        inquiry_detector=inquiry_detector,
        resolver=ReferentResolver(),
        scorer=RelevanceScorer(ScorerConfig(threshold=relevance_threshold, max_results=max_suggestions)),
        context_builder=ContextBuilder(max_turns=context_turns),
        composer=PromptComposer(),
        invoker=ProviderInvoker(backends),
        formatter=ResponseFormatter(),
    )


# Handler registry - maps cart actions to handlers
HANDLERS: Dict[CartAction, BaseHandler] = {
    CartAction.ADD: CartActionHandler(),
    CartAction.REMOVE: CartActionHandler(),
    CartAction.NONE: ConversationHandler(),
}


@dataclass
class TurnOutcome:
    """
    What one orchestrator call produced.

    Attributes:
        context: The (mutated) conversation context
        reply: The assistant or error turn appended
        action: Cart action detected
        intent: Shopping intent detected
        states: States the turn passed through, in order
        affected: Products added to or removed from the cart
        provider: Backend that answered, if the LLM path was taken
        response_time_ms: Wall time for the turn
        debug_lines: Debug notes, when debug mode is on
    """
    context: ConversationContext
    reply: Turn
    action: CartAction
    intent: Intent
    states: List[TurnState] = field(default_factory=list)
    affected: List[Product] = field(default_factory=list)
    provider: Optional[str] = None
    response_time_ms: float = 0.0
    debug_lines: List[str] = field(default_factory=list)

    @property
    def suggestions(self) -> tuple:
        return self.reply.suggestions


class DialogueOrchestrator:
    """
    Runs turns against a catalog and a cart.

    Example:
        orchestrator = DialogueOrchestrator(components, catalog, cart)
        outcome = await orchestrator.process_turn("Do you have any shoes?", context)
        outcome.reply.content
    """

    def __init__(
        self,
        components: OrchestratorComponents,
        catalog: Any,
        cart: Any,
        handlers: Optional[Dict[CartAction, BaseHandler]] = None,
        debug_mode: bool = False,
    ):
        self.components = components
        self.catalog = catalog
        self.cart = cart
        self.handlers = handlers or HANDLERS
        self.debug_mode = debug_mode

    async def process_turn(self, query: str, context: ConversationContext) -> TurnOutcome:
        """
        Process one user query.

        Args:
            query: User's message
            context: Session context; mutated and returned on the outcome

        Returns:
            TurnOutcome; never raises for handler failures
        """
        start_time = time.perf_counter()
        states = [TurnState.RECEIVED]
        components = self.components

        # Step 1: Record the query
        context.add_user_turn(query)
        context.profile.record_search(query)
        min_price, max_price = extract_price_range(query)
        if min_price is not None or max_price is not None:
            context.profile.update_price_range(min_price, max_price)
        log_query(session_id=context.session_id, query=query)

        # Step 2: Classify
        action = components.action_classifier.classify(query)
        intent = components.intent_classifier.classify(query)
        states.append(TurnState.CLASSIFIED)
        log_classification(
            session_id=context.session_id,
            query=query,
            action=action.value,
            intent=intent.type.value,
            confidence=intent.confidence,
            reasoning=intent.reasoning,
        )

        # Step 3: Route
        handler = self.handlers.get(action) or self.handlers[CartAction.NONE]
        handler_ctx = HandlerContext(
            query=query,
            action=action,
            intent=intent,
            context=context,
            catalog=self.catalog,
            cart=self.cart,
            resolver=components.resolver,
            scorer=components.scorer,
            inquiry_detector=components.inquiry_detector,
            context_builder=components.context_builder,
            composer=components.composer,
            invoker=components.invoker,
            formatter=components.formatter,
            debug_mode=self.debug_mode,
        )

        # Step 4: Execute handler
        try:
            result = await handler.handle(handler_ctx)
        except Exception as e:
            log_error(session_id=context.session_id, error=e, context=f"handler:{action.value}")
            log_error_to_gsheets(
                session_id=context.session_id,
                error_type=type(e).__name__,
                error_message=str(e),
                context=f"handler:{action.value}",
            )
            handler_ctx.add_debug(f"ERROR: {type(e).__name__}: {e}")
            result = HandlerResult(
                response=components.formatter.format_internal_error(),
                role=TurnRole.ERROR,
            )
        states.append(result.state)

        # Step 5: Apply side effects and append the reply
        if result.role == TurnRole.ERROR:
            reply = context.add_error_turn(result.response)
        else:
            reply = context.add_assistant_turn(result.response, suggestions=result.suggestions)
            if result.suggestions:
                context.set_last_suggested(result.suggestions)
                context.profile.add_interests(p.category for p in result.suggestions)
        states.append(TurnState.RESPONDED)

        response_time_ms = (time.perf_counter() - start_time) * 1000
        self._log_turn(context, query, reply, action, intent, result, response_time_ms)

        return TurnOutcome(
            context=context,
            reply=reply,
            action=action,
            intent=intent,
            states=states,
            affected=result.affected,
            provider=result.provider,
            response_time_ms=response_time_ms,
            debug_lines=handler_ctx.debug_lines,
        )

    def _log_turn(
        self,
        context: ConversationContext,
        query: str,
        reply: Turn,
        action: CartAction,
        intent: Intent,
        result: HandlerResult,
        response_time_ms: float,
    ) -> None:
        products = result.suggestions or result.affected
        product_ids = [p.id for p in products]

        log_conversation_turn(
            session_id=context.session_id,
            query=query,
            action=action.value,
            intent=intent.type.value,
            confidence=intent.confidence,
            products_shown=len(product_ids),
            product_ids=product_ids,
            provider=result.provider,
            response_time_ms=response_time_ms,
            state=reply.role.value,
        )

        row = dict(
            session_id=context.session_id,
            user_query=query,
            bot_response=reply.content,
            turn_role=reply.role.value,
            action=action.value,
            intent=intent.type.value,
            confidence=intent.confidence,
            product_ids=product_ids,
            provider=result.provider,
            cart_items=self.cart.total_items,
            response_time_ms=response_time_ms,
        )
        log_conversation_csv(**row)
        log_to_gsheets(**row)
