"""
Completion backends for ShopBot.

Two concrete backends behind one async interface:
- GeminiBackend: Google Gemini via google-generativeai (primary)
- AnthropicBackend: Claude via the anthropic SDK (fallback)

Every failure, including a missing API key or an empty completion,
surfaces as ProviderError so the invoker can classify and fall through.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

import anthropic
import google.generativeai as genai

from config.settings import Settings
from core.errors import ProviderError, ProviderErrorKind
from core.provider_invoker import classify_error
from llm.prompts import ComposedPrompt


class CompletionBackend(ABC):
    """Base class for language-model backends."""

    name: str = "backend"
    model_name: str = ""

    @abstractmethod
    async def complete(self, prompt: ComposedPrompt) -> str:
        """
        Produce a completion for the prompt.

        Raises:
            ProviderError: on any failure
        """

    def _wrap(self, error: Exception) -> ProviderError:
        if isinstance(error, ProviderError):
            return error
        return ProviderError(str(error) or type(error).__name__, classify_error(error), self.name)

    def _require_text(self, text: Optional[str]) -> str:
        if not text or not text.strip():
            raise ProviderError(
                "Empty completion", ProviderErrorKind.MALFORMED_RESPONSE, self.name
            )
        return text.strip()


class GeminiBackend(CompletionBackend):
    """
    Google Gemini backend. Sends the flattened prompt text.

    Example:
        backend = GeminiBackend(api_key="...", model_name="gemini-1.5-flash")
        text = await backend.complete(prompt)
    """

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "gemini-1.5-flash",
        temperature: float = 0.7,
        max_output_tokens: int = 500,
        model: Any = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._model = model

    def _get_model(self):
        if self._model is None:
            if not self.api_key:
                raise ProviderError(
                    "GEMINI_API_KEY is not configured", ProviderErrorKind.AUTH, self.name
                )
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    async def complete(self, prompt: ComposedPrompt) -> str:
        try:
            model = self._get_model()
            response = await model.generate_content_async(
                prompt.full_text,
                generation_config={
                    "temperature": self.temperature,
                    "max_output_tokens": self.max_output_tokens,
                },
            )
            # .text raises ValueError when the candidate was blocked
            text = response.text
        except Exception as e:
            raise self._wrap(e) from e
        return self._require_text(text)


class AnthropicBackend(CompletionBackend):
    """
    Anthropic Claude backend. Sends instructions as the system prompt and
    the query as the single user message.
    """

    name = "anthropic"

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "claude-3-haiku-20240307",
        temperature: float = 0.4,
        max_tokens: int = 1024,
        client: Any = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise ProviderError(
                    "ANTHROPIC_API_KEY is not configured", ProviderErrorKind.AUTH, self.name
                )
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def complete(self, prompt: ComposedPrompt) -> str:
        try:
            client = self._get_client()
            response = await client.messages.create(
                model=self.model_name,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=prompt.instructions,
                messages=[{"role": "user", "content": prompt.query}],
            )
            text = "".join(
                block.text for block in response.content if getattr(block, "type", None) == "text"
            )
        except Exception as e:
            raise self._wrap(e) from e
        return self._require_text(text)


def build_backends(settings: Settings) -> List[CompletionBackend]:
    """Primary first, then fallback."""
    return [
        GeminiBackend(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
            temperature=settings.gemini_temperature,
            max_output_tokens=settings.gemini_max_output_tokens,
        ),
        AnthropicBackend(
            api_key=settings.anthropic_api_key,
            model_name=settings.anthropic_model,
            temperature=settings.anthropic_temperature,
            max_tokens=settings.anthropic_max_tokens,
        ),
    ]
