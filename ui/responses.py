"""
Response formatting for ShopBot.

Deterministic replies (cart confirmations, clarifications, errors) and
the markdown used to render products in the chat and storefront.
"""

from typing import Optional, Sequence

from core.context import CartAction, Product


WELCOME_MESSAGE = (
    "Hi! I'm your shopping assistant. I can help you find products, answer questions, "
    "and manage your cart. What can I help you with today?"
)

QUICK_SUGGESTIONS = [
    ("📚 Do you have books?", "Do you have any books?"),
    ("👟 Any shoes available?", "Do you have shoes?"),
    ("📱 What phones do you sell?", "What phones do you have?"),
    ("💻 Any laptops?", "Do you sell laptops?"),
    ("☕ Got coffee?", "Do you have coffee?"),
]


class ResponseFormatter:
    """
    Formats chatbot responses for display.

    Example:
        formatter = ResponseFormatter()
        formatter.format_add_confirmation(["Running Sneakers"], cart_items=1)
        # "Perfect! I've added Running Sneakers to your cart. You now have 1 item(s) in your cart."
    """

    def join_names(self, names: Sequence[str]) -> str:
        return " and ".join(names)

    def format_welcome(self) -> str:
        return WELCOME_MESSAGE

    def format_add_confirmation(self, names: Sequence[str], cart_items: int) -> str:
        return (
            f"Perfect! I've added {self.join_names(names)} to your cart. "
            f"You now have {cart_items} item(s) in your cart."
        )

    def format_remove_confirmation(self, names: Sequence[str], cart_items: int) -> str:
        return (
            f"I've removed {self.join_names(names)} from your cart. "
            f"You now have {cart_items} item(s) in your cart."
        )

    def format_skipped_note(self, skipped: Sequence[str]) -> str:
        """Appended to a confirmation when some products could not be applied."""
        if not skipped:
            return ""
        return f" I couldn't update {self.join_names(skipped)}."

    def format_no_referent(self, action: CartAction, has_suggestions: bool) -> str:
        """
        Clarifying reply when a cart action names no product.

        Args:
            action: ADD or REMOVE
            has_suggestions: Whether any products were suggested earlier
        """
        verb = "add" if action == CartAction.ADD else "remove"
        if not has_suggestions:
            return (
                f"I'm not sure which product you'd like to {verb}. "
                "Tell me what you're looking for and I'll suggest some options first."
            )
        return (
            f"I'm not sure which product you'd like to {verb}. "
            "Could you tell me its name, or say \"the first one\", \"the second one\" or \"both\"?"
        )

    def format_nothing_applied(self, action: CartAction, names: Sequence[str]) -> str:
        """Reply when every referenced product failed to apply."""
        if action == CartAction.REMOVE:
            return f"{self.join_names(names)} isn't in your cart, so there was nothing to remove."
        return f"Sorry, I couldn't add {self.join_names(names)} to your cart right now."

    def format_internal_error(self) -> str:
        return (
            "I encountered an issue processing your request. "
            "Could you try rephrasing your question?"
        )

    def format_price(self, product: Product) -> str:
        price = f"${product.price:,.2f}"
        if product.original_price and product.original_price > product.price:
            price += f" ~~${product.original_price:,.2f}~~"
        return price

    def format_product_card(self, product: Product, index: Optional[int] = None) -> str:
        """
        Markdown block for one product.

        Example:
            **1. Running Sneakers** · $129.00 🏷️ Popular
            Fashion · ⭐ 4.6 (312 reviews)
        """
        prefix = f"{index}. " if index is not None else ""
        lines = [f"**{prefix}{product.name}** · {self.format_price(product)}"]
        if product.badge:
            lines[0] += f" 🏷️ {product.badge}"

        meta = f"{product.category} · ⭐ {product.rating:.1f} ({product.reviews} reviews)"
        if not product.in_stock:
            meta += " · _Out of stock_"
        lines.append(meta)

        if product.description:
            lines.append(self.truncate_text(product.description, 140))
        return "  \n".join(lines)

    def truncate_text(self, text: str, max_length: int = 100) -> str:
        """
        Truncate text to maximum length on a word boundary.

        Example:
            >>> formatter.truncate_text("A very long description...", 10)
            'A very...'
        """
        if len(text) <= max_length:
            return text
        cut = text[:max_length].rsplit(" ", 1)[0]
        return cut.rstrip(",.;:") + "..."


_formatter = ResponseFormatter()


def get_response_formatter() -> ResponseFormatter:
    """Get the shared ResponseFormatter instance."""
    return _formatter
