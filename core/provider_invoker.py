"""
Provider invocation with ordered fallback.

Tries each completion backend once, in order, with the same prompt.
There is no retry and no backoff: a failed backend is logged and the next
one is tried. When every backend fails the caller gets a fixed apology
instead of an exception.

Usage:
    invoker = ProviderInvoker([GeminiBackend(...), AnthropicBackend(...)])
    result = await invoker.invoke(prompt, session_id="abc123")
    if result.success:
        reply = result.text
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from core.errors import ProviderError, ProviderErrorKind
from core.structured_logging import Timer, get_logger, log_provider_call

# Module logger
_logger = get_logger("core.provider_invoker")

APOLOGY = "I'm having trouble connecting right now. Please try again later."


# =============================================================================
# Error Classification
# =============================================================================

def classify_error(error: Exception) -> ProviderErrorKind:
    """
    Classify an SDK or transport error.

    Matches on the exception type name and message so the classifier works
    across SDKs without importing their exception hierarchies.

    Args:
        error: The exception to classify

    Returns:
        ProviderErrorKind for the error
    """
    if isinstance(error, ProviderError):
        return error.kind

    error_type = type(error).__name__.lower()
    error_msg = str(error).lower()

    if 'timeout' in error_type or 'timedout' in error_type or 'deadline' in error_type:
        return ProviderErrorKind.TIMEOUT

    if 'ratelimit' in error_type or '429' in error_msg or 'rate limit' in error_msg:
        return ProviderErrorKind.RATE_LIMIT

    if 'resourceexhausted' in error_type or 'quota' in error_msg or 'billing' in error_msg:
        return ProviderErrorKind.QUOTA_EXCEEDED

    if 'authentication' in error_type or 'permissiondenied' in error_type:
        return ProviderErrorKind.AUTH

    if any(x in error_type for x in ['connection', 'network', 'socket']):
        return ProviderErrorKind.NETWORK

    if 'timeout' in error_msg or 'timed out' in error_msg:
        return ProviderErrorKind.TIMEOUT

    if 'connection' in error_msg or 'network' in error_msg:
        return ProviderErrorKind.NETWORK

    if 'unauthorized' in error_msg or 'api key' in error_msg or '401' in error_msg:
        return ProviderErrorKind.AUTH

    if isinstance(error, (ValueError, KeyError, AttributeError)):
        return ProviderErrorKind.MALFORMED_RESPONSE

    return ProviderErrorKind.UNKNOWN


# =============================================================================
# Invocation Result
# =============================================================================

@dataclass
class InvocationResult:
    """
    Result of one invocation across the backend list.

    Attributes:
        success: Whether any backend produced text
        text: Completion, or the apology on total failure
        provider: Name of the backend that answered
        attempts: Number of backends tried
        errors: Failures encountered, in order
    """
    success: bool
    text: str
    provider: Optional[str] = None
    attempts: int = 0
    errors: List[ProviderError] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.success and self.attempts > 1


# =============================================================================
# Provider Invoker
# =============================================================================

class ProviderInvoker:
    """
    Calls completion backends in order until one succeeds.

    Backends need a `name`, a `model_name` and an async
    `complete(prompt) -> str`.
    """

    def __init__(self, backends: Sequence[Any], apology: str = APOLOGY):
        self.backends = list(backends)
        self.apology = apology

    async def invoke(self, prompt: Any, session_id: str = "unknown") -> InvocationResult:
        """
        Get a completion for the prompt, falling back on failure.

        Args:
            prompt: ComposedPrompt handed unchanged to each backend
            session_id: Session ID for logging

        Returns:
            InvocationResult; never raises
        """
        errors: List[ProviderError] = []

        for attempt, backend in enumerate(self.backends, start=1):
            name = getattr(backend, "name", type(backend).__name__)
            model = getattr(backend, "model_name", "")
            timer = Timer()

            try:
                with timer:
                    text = await backend.complete(prompt)
            except Exception as e:
                error = e if isinstance(e, ProviderError) else ProviderError(
                    str(e) or type(e).__name__, classify_error(e), name
                )
                if error.provider is None:
                    error.provider = name
                errors.append(error)
                log_provider_call(
                    session_id=session_id,
                    provider=name,
                    model=model,
                    latency_ms=timer.elapsed_ms,
                    success=False,
                    error_kind=error.kind.value,
                    error=str(error),
                    attempts=attempt,
                )
                continue

            log_provider_call(
                session_id=session_id,
                provider=name,
                model=model,
                latency_ms=timer.elapsed_ms,
                success=True,
                attempts=attempt,
            )
            if attempt > 1:
                _logger.info(
                    f"Answered by fallback provider {name}",
                    extra={
                        "event": "provider_fallback",
                        "session_id": session_id,
                        "provider": name,
                        "attempts": attempt,
                    }
                )
            return InvocationResult(
                success=True,
                text=text,
                provider=name,
                attempts=attempt,
                errors=errors,
            )

        _logger.error(
            f"All {len(self.backends)} providers failed",
            extra={
                "event": "provider_exhausted",
                "session_id": session_id,
                "attempts": len(errors),
                "error_kind": [e.kind.value for e in errors],
            }
        )
        return InvocationResult(
            success=False,
            text=self.apology,
            attempts=len(errors),
            errors=errors,
        )
