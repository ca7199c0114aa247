"""
Cart action handler.

Applies "add it" / "remove the second one" style requests against the last
suggested products. Never calls a language model: the reply is a fixed
confirmation or clarification.
"""

from typing import List

from core.context import CartAction, Product, TurnState
from core.errors import CartError, CatalogLookupMiss, NoReferentResolved
from core.structured_logging import get_logger, log_cart_action
from handlers.base import BaseHandler, HandlerContext, HandlerResult

_logger = get_logger("handlers.cart")


class CartActionHandler(BaseHandler):
    """Handles ADD and REMOVE cart actions."""

    async def handle(self, ctx: HandlerContext) -> HandlerResult:
        window = ctx.context.last_suggested_products

        try:
            resolution = ctx.resolver.require(ctx.query, window)
        except NoReferentResolved:
            ctx.add_debug(f"No referent among {len(window)} suggested products")
            return HandlerResult(
                response=ctx.formatter.format_no_referent(ctx.action, bool(window)),
                state=TurnState.CART_MUTATED,
            )

        ctx.add_debug(
            f"Resolved by {resolution.rule.value}: {[p.name for p in resolution.products]}"
        )

        applied: List[Product] = []
        skipped: List[Product] = []
        for product in resolution.products:
            if self._apply(ctx, product):
                applied.append(product)
            else:
                skipped.append(product)

        log_cart_action(
            session_id=ctx.session_id,
            action=ctx.action.value,
            applied=[p.name for p in applied],
            skipped=[p.name for p in skipped],
            cart_items=ctx.cart.total_items,
            resolution_rule=resolution.rule.value,
        )

        return HandlerResult(
            response=self._reply(ctx, applied, skipped),
            state=TurnState.CART_MUTATED,
            affected=applied,
            skipped=skipped,
        )

    def _apply(self, ctx: HandlerContext, product: Product) -> bool:
        """Apply the action to one product. One failure never blocks the others."""
        try:
            # Re-read from the catalog so the cart holds the canonical record
            canonical = ctx.catalog.get(product.id)
            if ctx.action == CartAction.ADD:
                ctx.cart.add_item(canonical)
                return True
            return ctx.cart.remove_item(canonical.id)
        except (CatalogLookupMiss, CartError) as e:
            _logger.warning(
                f"Skipping {product.name}: {e}",
                extra={
                    "event": "cart_item_skipped",
                    "session_id": ctx.session_id,
                    "action": ctx.action.value,
                    "error_type": type(e).__name__,
                }
            )
            return False

    def _reply(self, ctx: HandlerContext, applied: List[Product], skipped: List[Product]) -> str:
        formatter = ctx.formatter
        skipped_names = [p.name for p in skipped]

        if not applied:
            return formatter.format_nothing_applied(ctx.action, skipped_names)

        names = [p.name for p in applied]
        if ctx.action == CartAction.ADD:
            reply = formatter.format_add_confirmation(names, ctx.cart.total_items)
        else:
            reply = formatter.format_remove_confirmation(names, ctx.cart.total_items)
        return reply + formatter.format_skipped_note(skipped_names)
