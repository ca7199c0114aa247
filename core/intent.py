"""
Query classification for ShopBot.

Three independent pattern-based classifiers:
- ActionClassifier: does the query ask to add or remove cart items?
- ProductInquiryDetector: is the query looking for products?
- IntentClassifier: what kind of shopping help is wanted?
"""

from config.patterns import (
    ADD_PHRASES,
    CART_QUERY_PATTERNS,
    PRODUCT_INQUIRY_PHRASES,
    PRODUCT_TYPE_NOUNS,
    PURCHASE_ADVICE_PATTERNS,
    QUESTION_PREFIXES,
    RECOMMENDATION_PATTERNS,
    REMOVE_PHRASES,
    has_pattern,
    has_phrase,
    normalize_text,
)
from core.context import CartAction, Intent, IntentType
from core.structured_logging import get_logger

# Module-level logger
_logger = get_logger("core.intent")


class ActionClassifier:
    """
    Detects cart mutations in a query.

    Add phrases are checked first, so "add it, then remove the other"
    is an ADD.

    Example:
        ActionClassifier().classify("I'll take it")
        # CartAction.ADD
    """

    def classify(self, query: str) -> CartAction:
        if has_phrase(query, ADD_PHRASES):
            action = CartAction.ADD
        elif has_phrase(query, REMOVE_PHRASES):
            action = CartAction.REMOVE
        else:
            action = CartAction.NONE

        _logger.debug(
            f"Cart action: {action.value}",
            extra={"event": "action_classified", "action": action.value}
        )
        return action


class ProductInquiryDetector:
    """
    Decides whether a query is looking for products.

    True when the query names a product type and either uses an inquiry
    phrase ("do you have", "looking for", ...) or is shaped like a question.
    """

    def is_product_seeking(self, query: str) -> bool:
        query_lower = normalize_text(query).strip()

        if not has_phrase(query_lower, PRODUCT_TYPE_NOUNS):
            return False

        has_inquiry = has_phrase(query_lower, PRODUCT_INQUIRY_PHRASES)
        is_question = '?' in query_lower or query_lower.startswith(QUESTION_PREFIXES)
        return has_inquiry or is_question


class IntentClassifier:
    """
    Classifies the shopping intent of a conversational query.

    Priority order:
    1. CART_QUERY - questions about the current cart
    2. PURCHASE_ADVICE - "is it worth it", comparisons
    3. RECOMMENDATION - "recommend", "gift ideas"
    4. PRODUCT_SEARCH - product-seeking queries
    5. GENERAL - everything else

    Example:
        classifier = IntentClassifier()
        intent = classifier.classify("Any gift ideas for a coffee lover?")
        # Intent(recommendation, confidence=0.85)
    """

    def __init__(self, inquiry_detector: ProductInquiryDetector = None):
        self.inquiry_detector = inquiry_detector or ProductInquiryDetector()

    def classify(self, query: str) -> Intent:
        """
        Classify user intent.

        Args:
            query: User's message

        Returns:
            Intent with type, confidence and reasoning
        """
        if has_pattern(query, CART_QUERY_PATTERNS):
            return Intent(
                type=IntentType.CART_QUERY,
                confidence=0.9,
                reasoning="User is asking about their cart"
            )

        if has_pattern(query, PURCHASE_ADVICE_PATTERNS):
            return Intent(
                type=IntentType.PURCHASE_ADVICE,
                confidence=0.8,
                reasoning="User wants advice on whether or what to buy"
            )

        if has_pattern(query, RECOMMENDATION_PATTERNS):
            return Intent(
                type=IntentType.RECOMMENDATION,
                confidence=0.85,
                reasoning="User asked for recommendations"
            )

        if self.inquiry_detector.is_product_seeking(query):
            return Intent(
                type=IntentType.PRODUCT_SEARCH,
                confidence=0.8,
                reasoning="User is looking for a product type"
            )

        return Intent(
            type=IntentType.GENERAL,
            confidence=0.5,
            reasoning="No shopping pattern matched"
        )
