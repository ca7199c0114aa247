"""Language-model prompts and provider backends for ShopBot."""

from llm.prompts import ComposedPrompt, PromptComposer, get_prompt_composer

__all__ = [
    "ComposedPrompt",
    "PromptComposer",
    "get_prompt_composer",
]
