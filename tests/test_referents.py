"""
Tests for referent resolution.

Resolution order: product name, ordinal, collective, pronoun.
"""

import pytest

from core.errors import NoReferentResolved
from core.referents import ReferentResolver, ResolutionRule


@pytest.fixture
def resolver():
    return ReferentResolver()


@pytest.fixture
def window(by_name):
    """Three products in the order they were suggested."""
    return [by_name["Running Sneakers"], by_name["The Art of Programming"], by_name["MacBook Pro 14"]]


def names(products):
    return [p.name for p in products]


# === PRONOUN TESTS ===

class TestPronouns:
    """it / this / that point at the first suggestion."""

    @pytest.mark.parametrize("query", ["add it", "I want this", "buy that please", "ADD IT"])
    def test_pronoun_picks_first(self, resolver, window, query):
        assert names(resolver.resolve(query, window)) == ["Running Sneakers"]

    def test_curly_apostrophe(self, resolver, window):
        assert names(resolver.resolve("I’ll take it", window)) == ["Running Sneakers"]

    def test_pronoun_needs_word_boundary(self, resolver, window):
        # "with" contains "it" but is not a pronoun
        assert resolver.resolve("add one with a strap", window) == []

    def test_rule_is_reported(self, resolver, window):
        assert resolver.resolve_detailed("add it", window).rule == ResolutionRule.PRONOUN


# === ORDINAL TESTS ===

class TestOrdinals:
    """Positional references into the suggestion window."""

    @pytest.mark.parametrize("query, expected", [
        ("add the first one", "Running Sneakers"),
        ("add the 1st", "Running Sneakers"),
        ("add the second one", "The Art of Programming"),
        ("add the 3rd", "MacBook Pro 14"),
        ("add the last one", "MacBook Pro 14"),
    ])
    def test_ordinal(self, resolver, window, query, expected):
        assert names(resolver.resolve(query, window)) == [expected]

    def test_missing_position_resolves_to_nothing(self, resolver, window):
        resolution = resolver.resolve_detailed("add the fifth one", window)
        assert resolution.products == []
        assert resolution.rule == ResolutionRule.ORDINAL

    def test_ordinal_beats_pronoun(self, resolver, window):
        assert names(resolver.resolve("add the second, I like it", window)) == ["The Art of Programming"]


# === COLLECTIVE TESTS ===

class TestCollectives:
    """both / all."""

    def test_both_takes_first_two(self, resolver, window):
        assert names(resolver.resolve("add both", window)) == [
            "Running Sneakers",
            "The Art of Programming",
        ]

    def test_both_with_one_suggestion_falls_through(self, resolver, window):
        assert resolver.resolve("add both", window[:1]) == []

    def test_both_with_one_suggestion_uses_pronoun(self, resolver, window):
        assert names(resolver.resolve("add both of it", window[:1])) == ["Running Sneakers"]

    def test_all_takes_everything(self, resolver, window):
        assert resolver.resolve("add all of them", window) == window

    def test_add_all(self, resolver, window):
        assert resolver.resolve("add all", window) == window


# === NAME TESTS ===

class TestNames:
    """Explicit product names win over every other rule."""

    def test_name_match(self, resolver, window):
        assert names(resolver.resolve("add the macbook pro 14", window)) == ["MacBook Pro 14"]

    def test_several_names_keep_window_order(self, resolver, window):
        query = "add the MacBook Pro 14 and the Running Sneakers"
        assert names(resolver.resolve(query, window)) == ["Running Sneakers", "MacBook Pro 14"]

    def test_name_beats_ordinal(self, resolver, window):
        resolution = resolver.resolve_detailed("add the first, the MacBook Pro 14", window)
        assert names(resolution.products) == ["MacBook Pro 14"]
        assert resolution.rule == ResolutionRule.NAME

    def test_name_outside_window_is_ignored(self, resolver, window):
        assert resolver.resolve("add the iPhone 15", window) == []


# === EMPTY CASES ===

class TestNothingResolved:

    def test_empty_window(self, resolver):
        assert resolver.resolve("add it", []) == []
        assert resolver.resolve("remove it", []) == []

    def test_no_referent_words(self, resolver, window):
        assert resolver.resolve("add to cart", window) == []

    def test_require_raises(self, resolver, window):
        with pytest.raises(NoReferentResolved):
            resolver.require("add to cart", window)

    def test_require_returns_resolution(self, resolver, window):
        resolution = resolver.require("add it", window)
        assert names(resolution.products) == ["Running Sneakers"]
