"""
Exception types for ShopBot.

Provider failures are classified so the invoker can log why a backend was
skipped; the other errors are recoverable conditions the orchestrator turns
into replies rather than crashes.
"""

from enum import Enum
from typing import Optional


class ProviderErrorKind(Enum):
    """Categories of provider failure."""
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    QUOTA_EXCEEDED = "quota_exceeded"
    NETWORK = "network"
    AUTH = "auth"
    MALFORMED_RESPONSE = "malformed_response"
    UNKNOWN = "unknown"


class ShopBotError(Exception):
    """Base class for ShopBot errors."""


class ProviderError(ShopBotError):
    """A completion backend failed to produce text."""

    def __init__(
        self,
        message: str,
        kind: ProviderErrorKind = ProviderErrorKind.UNKNOWN,
        provider: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.provider = provider

    def __str__(self) -> str:
        prefix = f"[{self.provider}] " if self.provider else ""
        return f"{prefix}{self.kind.value}: {self.args[0]}"


class NoReferentResolved(ShopBotError):
    """A cart action named no product among the last suggestions."""

    def __init__(self, query: str):
        super().__init__(f"No product referenced in: {query!r}")
        self.query = query


class CatalogLookupMiss(ShopBotError, KeyError):
    """A product id is not present in the catalog."""

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not in catalog")
        self.product_id = product_id

    def __str__(self) -> str:
        return self.args[0]


class CartError(ShopBotError):
    """A cart mutation could not be applied (e.g. out of stock)."""

    def __init__(self, message: str, product_id: Optional[int] = None):
        super().__init__(message)
        self.product_id = product_id
