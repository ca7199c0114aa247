"""
Prompt composition for ShopBot.

Builds the instruction block sent to the language model on the
conversational path. The same ComposedPrompt serves both providers: the
primary receives the flattened text, the fallback receives the
instructions as a system message and the query as the user message.
"""

import json
from dataclasses import dataclass
from typing import Iterable, Optional

from core.context import CartSnapshot, IntentType, Product, UserProfile


PERSONA = (
    "You are a helpful shopping assistant for an e-commerce store. You maintain "
    "conversation context and can understand references to previously mentioned products."
)

BEHAVIOR_INSTRUCTIONS = [
    "Maintain conversation context - remember what products were just suggested",
    'Understand references like "add it", "the first one", "both", etc.',
    'When user says "add it" or similar, refer to the most recently suggested products',
    "Answer questions naturally and conversationally",
    "Be helpful and informative, like a real store assistant",
    "Don't use excessive formatting - just natural conversation",
    "Only mention specific products when user is clearly asking for product recommendations",
    "For general questions, provide helpful answers without pushing products",
]

INTENT_GUIDANCE = {
    IntentType.RECOMMENDATION: (
        "The user wants recommendations. Consider their interests, complementary items, "
        "budget and value, and explain why each pick fits."
    ),
    IntentType.PRODUCT_SEARCH: (
        "The user is looking for specific products. Highlight features that match what "
        "they asked for; if nothing matches exactly, suggest the closest alternatives."
    ),
    IntentType.CART_QUERY: (
        "The user is asking about their cart. Answer from the cart contents above, "
        "like a personal shopping advisor."
    ),
    IntentType.PURCHASE_ADVICE: (
        "The user wants purchase advice. Weigh quality, value, ratings and alternatives. "
        "Be thorough but concise."
    ),
    IntentType.GENERAL: (
        "If appropriate, guide the conversation back to how you can help with their shopping."
    ),
}

RECOMMENDATION_INSTRUCTIONS = [
    "When user asks about products, check our catalog and respond with specific recommendations",
    "If we have the item, mention specific products with names and prices",
    "If we don't have exactly what they want, suggest the closest alternatives",
    "Focus only on the most relevant products - don't add random suggestions",
    "Remember these suggestions for follow-up questions",
]

FEW_SHOT_EXAMPLES = """EXAMPLES:
User: "Do you have any books?"
Assistant: "Yes! We have some great books. I can recommend 'The Art of Programming' for $45 - it's a comprehensive guide with real-world examples and has excellent reviews. We also have 'Modern Web Design' for $39, which covers the latest design trends and techniques."

User: "Any shoes available?"
Assistant: "We have Running Sneakers for $129. They feature advanced cushioning system and breathable mesh upper - perfect for both exercise and casual wear. They have great reviews too!\""""


@dataclass(frozen=True)
class ComposedPrompt:
    """
    Provider-neutral prompt.

    Attributes:
        instructions: System-style instruction block
        query: The user's message, verbatim
    """
    instructions: str
    query: str

    @property
    def full_text(self) -> str:
        """Single-string form for providers without a system role."""
        return f"{self.instructions}\n\nUser: {self.query}"


class PromptComposer:
    """
    Assembles instructions from profile, cart, context and catalog.

    Example:
        composer = PromptComposer()
        prompt = composer.compose(
            query="Do you have any shoes?",
            profile=context.profile,
            cart=cart.snapshot(),
            context_block=builder.build(history, context.last_suggested_products),
            include_catalog=True,
            catalog=catalog,
        )
        prompt.full_text  # sent to the primary provider
    """

    def __init__(self, recent_search_limit: int = 5):
        self.recent_search_limit = recent_search_limit

    def compose(
        self,
        query: str,
        profile: UserProfile,
        cart: CartSnapshot,
        context_block: str = "",
        include_catalog: bool = False,
        catalog: Iterable[Product] = (),
        intent: Optional[IntentType] = None,
    ) -> ComposedPrompt:
        """
        Build the prompt for one conversational turn.

        Args:
            query: User's message
            profile: Shopper profile (interests, searches, price range)
            cart: Current cart snapshot
            context_block: Output of ContextBuilder.build()
            include_catalog: Append the full catalog and recommendation guidance
            catalog: Products to dump when include_catalog is set
            intent: Shopping intent, for intent-specific guidance

        Returns:
            ComposedPrompt
        """
        sections = [
            PERSONA,
            self.format_user_context(profile, cart),
        ]

        if context_block:
            sections.append(f"CONVERSATION CONTEXT:\n{context_block}")

        sections.append(self.format_instructions())

        if intent is not None and intent in INTENT_GUIDANCE:
            sections.append(f"FOCUS:\n{INTENT_GUIDANCE[intent]}")

        if include_catalog:
            sections.append(self.format_catalog(catalog))
            sections.append(
                "PRODUCT RECOMMENDATION INSTRUCTIONS:\n"
                + "\n".join(f"- {line}" for line in RECOMMENDATION_INSTRUCTIONS)
            )
            sections.append(FEW_SHOT_EXAMPLES)

        return ComposedPrompt(instructions="\n\n".join(sections), query=query)

    def format_user_context(self, profile: UserProfile, cart: CartSnapshot) -> str:
        cart_text = ", ".join(f"{line.quantity}x {line.product.name}" for line in cart.lines)
        interests = ", ".join(profile.interests)
        searches = ", ".join(profile.recent_searches(self.recent_search_limit))

        lines = [
            "USER CONTEXT:",
            f"- Items in cart: {cart_text or 'Empty cart'}",
        ]
        if not cart.is_empty:
            lines.append(f"- Cart total: ${cart.total_price:.2f} ({cart.total_items} items)")
        lines.append(f"- Previous interests: {interests or 'None yet'}")
        lines.append(f"- Recent searches: {searches or 'None'}")
        if profile.price_range.is_constrained:
            lines.append(f"- Preferred price range: {profile.price_range.describe()}")
        return "\n".join(lines)

    def format_instructions(self) -> str:
        numbered = [f"{i}. {text}" for i, text in enumerate(BEHAVIOR_INSTRUCTIONS, start=1)]
        return "INSTRUCTIONS:\n" + "\n".join(numbered)

    def format_catalog(self, catalog: Iterable[Product]) -> str:
        dump = json.dumps([p.to_dict() for p in catalog], indent=2)
        return f"OUR COMPLETE PRODUCT CATALOG:\n{dump}"


# Singleton instance for easy access
_prompt_composer = PromptComposer()


def get_prompt_composer() -> PromptComposer:
    """Get the shared PromptComposer instance."""
    return _prompt_composer
