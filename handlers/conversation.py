"""
Conversational handler.

Everything that is not a cart action goes to the language model, with
the shopper's profile, cart, recent history and (for product-seeking
queries) the catalog in the prompt.
"""

from core.context import TurnRole, TurnState
from core.structured_logging import log_products_shown
from handlers.base import BaseHandler, HandlerContext, HandlerResult


class ConversationHandler(BaseHandler):
    """Answers free-form queries through the provider invoker."""

    async def handle(self, ctx: HandlerContext) -> HandlerResult:
        context = ctx.context

        product_seeking = ctx.inquiry_detector.is_product_seeking(ctx.query)
        relevant = []
        if product_seeking:
            scored = ctx.scorer.score(ctx.query, ctx.catalog, context.profile)
            relevant = [s.product for s in scored]
            ctx.add_debug(f"Relevant: {[(s.product.name, s.score) for s in scored]}")

        # The current query is already the last turn; it goes in separately
        context_block = ctx.context_builder.build(
            context.history_before_last(), context.last_suggested_products
        )

        prompt = ctx.composer.compose(
            query=ctx.query,
            profile=context.profile,
            cart=ctx.cart.snapshot(),
            context_block=context_block,
            include_catalog=product_seeking,
            catalog=ctx.catalog,
            intent=ctx.intent.type,
        )

        result = await ctx.invoker.invoke(prompt, session_id=ctx.session_id)
        ctx.add_debug(
            f"Provider: {result.provider or 'none'} after {result.attempts} attempt(s)"
        )

        if not result.success:
            return HandlerResult(
                response=result.text,
                role=TurnRole.ERROR,
                state=TurnState.CONTEXT_BUILT,
            )

        if relevant:
            log_products_shown(session_id=ctx.session_id, products=relevant, query=ctx.query)

        return HandlerResult(
            response=result.text,
            state=TurnState.CONTEXT_BUILT,
            suggestions=relevant,
            provider=result.provider,
        )
