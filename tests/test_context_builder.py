"""
Tests for the conversation context block.
"""

from core.context import Turn, TurnRole
from core.context_builder import ContextBuilder


def user(text):
    return Turn(role=TurnRole.USER, content=text)


def assistant(text, suggestions=()):
    return Turn(role=TurnRole.ASSISTANT, content=text, suggestions=tuple(suggestions))


class TestContextBuilder:

    def test_empty_history_and_no_suggestions(self):
        assert ContextBuilder().build([], []) == ""

    def test_renders_turns_in_order(self):
        block = ContextBuilder().build([user("hi"), assistant("Hello! How can I help?")])
        assert block == "RECENT CONVERSATION:\nUser: hi\nAssistant: Hello! How can I help?"

    def test_suggestions_follow_assistant_line(self, by_name):
        sneakers = by_name["Running Sneakers"]
        turns = [user("Do you have any shoes?"), assistant("We have sneakers.", [sneakers])]
        block = ContextBuilder().build(turns, [sneakers])
        assert block == (
            "RECENT CONVERSATION:\n"
            "User: Do you have any shoes?\n"
            "Assistant: We have sneakers.\n"
            "[Suggested products: Running Sneakers]\n\n"
            "LAST SUGGESTED PRODUCTS: Running Sneakers"
        )

    def test_only_last_suggested(self, by_name):
        products = [by_name["iPhone 15"], by_name["MacBook Pro 14"]]
        block = ContextBuilder().build([], products)
        assert block == "LAST SUGGESTED PRODUCTS: iPhone 15, MacBook Pro 14"

    def test_keeps_only_recent_turns(self):
        turns = [user(f"question {i}") for i in range(10)]
        block = ContextBuilder(max_turns=3).build(turns)
        assert "question 6" not in block
        assert block.splitlines()[1:] == ["User: question 7", "User: question 8", "User: question 9"]

    def test_error_turns_are_skipped(self):
        turns = [user("hi"), Turn(role=TurnRole.ERROR, content="I'm having trouble")]
        block = ContextBuilder().build(turns)
        assert "trouble" not in block
        assert block == "RECENT CONVERSATION:\nUser: hi"

    def test_zero_turn_window(self):
        assert ContextBuilder(max_turns=0).build([user("hi")]) == ""
