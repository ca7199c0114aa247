"""
Tests for query classification.

Covers the three pattern-based classifiers:
- ActionClassifier (ADD / REMOVE / NONE)
- ProductInquiryDetector
- IntentClassifier (5 shopping intents)
"""

import pytest

from core.context import CartAction, IntentType
from core.intent import ActionClassifier, IntentClassifier, ProductInquiryDetector


@pytest.fixture
def actions():
    return ActionClassifier()


@pytest.fixture
def detector():
    return ProductInquiryDetector()


@pytest.fixture
def classifier():
    return IntentClassifier()


# === CART ACTION TESTS ===

class TestActionClassifier:
    """Add/remove detection."""

    @pytest.mark.parametrize("query", [
        "add it",
        "Add to cart",
        "I want this",
        "I'll take it",
        "I’ll take it",
        "buy this one",
        "add both",
        "add the second",
        "add the last one",
        "add the fourth",
        "add the 5th",
    ])
    def test_add(self, actions, query):
        assert actions.classify(query) == CartAction.ADD

    @pytest.mark.parametrize("query", [
        "remove it",
        "Remove from cart",
        "please take it out",
        "delete this",
        "I don't want it anymore",
        "remove the second one",
        "remove the last",
        "remove both",
        "remove all of them",
    ])
    def test_remove(self, actions, query):
        assert actions.classify(query) == CartAction.REMOVE

    def test_add_wins_when_both_present(self, actions):
        assert actions.classify("add it and remove this") == CartAction.ADD
        assert actions.classify("add it then remove the other") == CartAction.ADD

    @pytest.mark.parametrize("query", [
        "Do you have any shoes?",
        "hello",
        "what's in my cart?",
        "",
    ])
    def test_none(self, actions, query):
        assert actions.classify(query) == CartAction.NONE


# === PRODUCT-SEEKING TESTS ===

class TestProductInquiryDetector:
    """Product-type noun plus an inquiry phrase or question shape."""

    @pytest.mark.parametrize("query", [
        "Do you have any shoes?",
        "Show me laptops",
        "I'm looking for a new phone",
        "phones?",
        "Can you find coffee",
    ])
    def test_product_seeking(self, detector, query):
        assert detector.is_product_seeking(query)

    @pytest.mark.parametrize("query", [
        "shoes",
        "The book was great",
        "What time is it?",
        "hello",
    ])
    def test_not_product_seeking(self, detector, query):
        assert not detector.is_product_seeking(query)


# === INTENT TESTS ===

class TestIntentClassifier:
    """Shopping intent with priority ordering."""

    def test_cart_query(self, classifier):
        intent = classifier.classify("What's in my cart?")
        assert intent.type == IntentType.CART_QUERY
        assert intent.confidence == 0.9

    def test_purchase_advice(self, classifier):
        intent = classifier.classify("Is the MacBook worth it?")
        assert intent.type == IntentType.PURCHASE_ADVICE

    def test_comparison_is_purchase_advice(self, classifier):
        intent = classifier.classify("iPhone vs MacBook for travel")
        assert intent.type == IntentType.PURCHASE_ADVICE

    def test_recommendation(self, classifier):
        intent = classifier.classify("Any gift ideas for a coffee lover?")
        assert intent.type == IntentType.RECOMMENDATION
        assert intent.confidence == 0.85

    def test_product_search(self, classifier):
        intent = classifier.classify("Do you have any shoes?")
        assert intent.type == IntentType.PRODUCT_SEARCH

    def test_general(self, classifier):
        intent = classifier.classify("hello")
        assert intent.type == IntentType.GENERAL
        assert intent.confidence == 0.5

    def test_cart_query_beats_recommendation(self, classifier):
        intent = classifier.classify("Can you recommend something to go with my cart?")
        assert intent.type == IntentType.CART_QUERY

    def test_advice_beats_recommendation(self, classifier):
        intent = classifier.classify("Should I buy the iPhone you recommended?")
        assert intent.type == IntentType.PURCHASE_ADVICE

    def test_intent_str(self, classifier):
        assert str(classifier.classify("hello")) == "Intent(general, confidence=0.50)"
