"""
Renders recent conversation history into a prompt block.
"""

from typing import Sequence

from core.context import Product, Turn, TurnRole


class ContextBuilder:
    """
    Builds the "RECENT CONVERSATION" block given to the language model.

    Only user and assistant turns are rendered; failed replies (ERROR
    turns) carry no useful context.
    """

    def __init__(self, max_turns: int = 6):
        self.max_turns = max_turns

    def build(self, turns: Sequence[Turn], last_suggested: Sequence[Product] = ()) -> str:
        """
        Args:
            turns: History before the current query, oldest first
            last_suggested: Products most recently shown to the shopper

        Returns:
            The context block, or "" when there is neither history nor
            suggestions.
        """
        recent = list(turns)[-self.max_turns:] if self.max_turns > 0 else []
        lines = []

        for turn in recent:
            if turn.role == TurnRole.USER:
                lines.append(f"User: {turn.content}")
            elif turn.role == TurnRole.ASSISTANT:
                lines.append(f"Assistant: {turn.content}")
                if turn.suggestions:
                    names = ", ".join(p.name for p in turn.suggestions)
                    lines.append(f"[Suggested products: {names}]")

        block = ""
        if lines:
            block = "RECENT CONVERSATION:\n" + "\n".join(lines)

        if last_suggested:
            names = ", ".join(p.name for p in last_suggested)
            block += f"\n\nLAST SUGGESTED PRODUCTS: {names}"

        return block.strip()
