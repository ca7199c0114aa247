"""
Tests for response formatting module.

Run with: pytest tests/test_responses.py -v
"""

import pytest

from core.context import CartAction, Product
from ui.responses import (
    QUICK_SUGGESTIONS,
    WELCOME_MESSAGE,
    ResponseFormatter,
    get_response_formatter,
)


@pytest.fixture
def formatter():
    """Create ResponseFormatter instance."""
    return ResponseFormatter()


class TestCartReplies:
    """Deterministic replies for cart actions."""

    def test_add_confirmation(self, formatter):
        assert formatter.format_add_confirmation(["Running Sneakers"], 1) == (
            "Perfect! I've added Running Sneakers to your cart. You now have 1 item(s) in your cart."
        )

    def test_add_confirmation_joins_names(self, formatter):
        reply = formatter.format_add_confirmation(["iPhone 15", "MacBook Pro 14"], 3)
        assert reply.startswith("Perfect! I've added iPhone 15 and MacBook Pro 14 to your cart.")
        assert reply.endswith("You now have 3 item(s) in your cart.")

    def test_remove_confirmation(self, formatter):
        assert formatter.format_remove_confirmation(["iPhone 15"], 0) == (
            "I've removed iPhone 15 from your cart. You now have 0 item(s) in your cart."
        )

    def test_skipped_note(self, formatter):
        assert formatter.format_skipped_note([]) == ""
        assert formatter.format_skipped_note(["Mouse"]) == " I couldn't update Mouse."

    def test_no_referent_without_suggestions(self, formatter):
        reply = formatter.format_no_referent(CartAction.ADD, has_suggestions=False)
        assert "which product you'd like to add" in reply
        assert "suggest some options first" in reply

    def test_no_referent_with_suggestions(self, formatter):
        reply = formatter.format_no_referent(CartAction.REMOVE, has_suggestions=True)
        assert "which product you'd like to remove" in reply
        assert '"the first one"' in reply

    def test_nothing_applied(self, formatter):
        assert formatter.format_nothing_applied(CartAction.REMOVE, ["iPhone 15"]) == (
            "iPhone 15 isn't in your cart, so there was nothing to remove."
        )
        assert formatter.format_nothing_applied(CartAction.ADD, ["Mouse"]) == (
            "Sorry, I couldn't add Mouse to your cart right now."
        )


class TestFixedMessages:

    def test_welcome(self, formatter):
        assert formatter.format_welcome() == WELCOME_MESSAGE

    def test_internal_error(self, formatter):
        assert "rephrasing" in formatter.format_internal_error()

    def test_quick_suggestions_are_product_queries(self):
        assert len(QUICK_SUGGESTIONS) == 5
        assert all(query.startswith(("Do you", "What")) for _, query in QUICK_SUGGESTIONS)


class TestProductFormatting:
    """Markdown for products."""

    def test_price(self, formatter, by_name):
        assert formatter.format_price(by_name["MacBook Pro 14"]) == "$1,999.00"

    def test_discounted_price(self, formatter):
        product = Product(id=1, name="A", price=45.0, category="Books", original_price=59.0)
        assert formatter.format_price(product) == "$45.00 ~~$59.00~~"

    def test_product_card(self, formatter, by_name):
        card = formatter.format_product_card(by_name["The Art of Programming"])
        assert card == (
            "**The Art of Programming** · $45.00 🏷️ Bestseller  \n"
            "Books · ⭐ 4.8 (1240 reviews)  \n"
            "A comprehensive guide to writing clean code with real-world examples."
        )

    def test_out_of_stock_card(self, formatter, by_name):
        card = formatter.format_product_card(by_name["Ergonomic Wireless Mouse"], index=2)
        assert card.startswith("**2. Ergonomic Wireless Mouse**")
        assert "_Out of stock_" in card


class TestTruncateText:

    def test_short_text_unchanged(self, formatter):
        assert formatter.truncate_text("short", 10) == "short"

    def test_cuts_on_word_boundary(self, formatter):
        assert formatter.truncate_text("A very long description here", 10) == "A very..."


def test_shared_instance():
    assert get_response_formatter() is get_response_formatter()
