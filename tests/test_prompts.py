"""
Tests for prompt composition.

Run with: pytest tests/test_prompts.py -v
"""

import json

import pytest

from core.cart import Cart
from core.context import CartSnapshot, IntentType, UserProfile
from llm.prompts import (
    BEHAVIOR_INSTRUCTIONS,
    INTENT_GUIDANCE,
    PERSONA,
    ComposedPrompt,
    PromptComposer,
    get_prompt_composer,
)


@pytest.fixture
def composer():
    return PromptComposer()


@pytest.fixture
def profile():
    return UserProfile()


class TestComposedPrompt:

    def test_full_text_appends_query(self):
        prompt = ComposedPrompt(instructions="Be nice.", query="hi")
        assert prompt.full_text == "Be nice.\n\nUser: hi"


class TestUserContext:
    """The USER CONTEXT section."""

    def test_empty_profile_and_cart(self, composer, profile):
        text = composer.format_user_context(profile, CartSnapshot())
        assert text == (
            "USER CONTEXT:\n"
            "- Items in cart: Empty cart\n"
            "- Previous interests: None yet\n"
            "- Recent searches: None"
        )

    def test_cart_lines_and_total(self, composer, profile, by_name):
        cart = Cart()
        cart.add_item(by_name["Running Sneakers"])
        cart.add_item(by_name["Running Sneakers"])
        cart.add_item(by_name["Organic Coffee Beans"])

        text = composer.format_user_context(profile, cart.snapshot())
        assert "- Items in cart: 2x Running Sneakers, 1x Organic Coffee Beans" in text
        assert "- Cart total: $282.00 (3 items)" in text

    def test_profile_details(self, composer, profile):
        profile.add_interests(["Fashion", "Books"])
        profile.record_search("shoes")
        profile.update_price_range(max_price=150)

        text = composer.format_user_context(profile, CartSnapshot())
        assert "- Previous interests: Fashion, Books" in text
        assert "- Recent searches: shoes" in text
        assert "- Preferred price range: $0 - $150" in text

    def test_only_five_recent_searches(self, composer, profile):
        for i in range(8):
            profile.record_search(f"q{i}")
        text = composer.format_user_context(profile, CartSnapshot())
        assert "- Recent searches: q3, q4, q5, q6, q7" in text


class TestCompose:
    """Section assembly."""

    def test_minimal_prompt(self, composer, profile):
        prompt = composer.compose("hello", profile, CartSnapshot())

        assert prompt.query == "hello"
        assert prompt.instructions.startswith(PERSONA)
        assert "CONVERSATION CONTEXT" not in prompt.instructions
        assert "OUR COMPLETE PRODUCT CATALOG" not in prompt.instructions
        assert "FOCUS:" not in prompt.instructions

    def test_instructions_are_numbered(self, composer, profile):
        prompt = composer.compose("hello", profile, CartSnapshot())
        assert f"1. {BEHAVIOR_INSTRUCTIONS[0]}" in prompt.instructions
        assert f"{len(BEHAVIOR_INSTRUCTIONS)}. {BEHAVIOR_INSTRUCTIONS[-1]}" in prompt.instructions

    def test_context_block_included(self, composer, profile):
        block = "RECENT CONVERSATION:\nUser: hi"
        prompt = composer.compose("and shoes?", profile, CartSnapshot(), context_block=block)
        assert f"CONVERSATION CONTEXT:\n{block}" in prompt.instructions

    def test_catalog_dump(self, composer, profile, products):
        prompt = composer.compose(
            "Do you have any shoes?",
            profile,
            CartSnapshot(),
            include_catalog=True,
            catalog=products,
        )
        text = prompt.instructions
        assert "OUR COMPLETE PRODUCT CATALOG:" in text
        assert "PRODUCT RECOMMENDATION INSTRUCTIONS:" in text
        assert "EXAMPLES:" in text

        dump = text.split("OUR COMPLETE PRODUCT CATALOG:\n", 1)[1].split("\n\nPRODUCT RECOMMENDATION", 1)[0]
        assert [entry["name"] for entry in json.loads(dump)] == [p.name for p in products]

    def test_intent_guidance(self, composer, profile):
        prompt = composer.compose("what's in my cart?", profile, CartSnapshot(), intent=IntentType.CART_QUERY)
        assert f"FOCUS:\n{INTENT_GUIDANCE[IntentType.CART_QUERY]}" in prompt.instructions

    def test_section_order(self, composer, profile, products):
        prompt = composer.compose(
            "shoes?",
            profile,
            CartSnapshot(),
            context_block="LAST SUGGESTED PRODUCTS: Running Sneakers",
            include_catalog=True,
            catalog=products,
            intent=IntentType.PRODUCT_SEARCH,
        )
        text = prompt.instructions
        positions = [
            text.index("USER CONTEXT:"),
            text.index("CONVERSATION CONTEXT:"),
            text.index("INSTRUCTIONS:\n1."),
            text.index("FOCUS:"),
            text.index("OUR COMPLETE PRODUCT CATALOG:"),
            text.index("EXAMPLES:"),
        ]
        assert positions == sorted(positions)

    def test_shared_instance(self):
        assert get_prompt_composer() is get_prompt_composer()
