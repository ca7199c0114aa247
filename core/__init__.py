"""Core business logic for ShopBot."""

from core.context import (
    CartAction,
    CartLine,
    CartSnapshot,
    ConversationContext,
    Intent,
    IntentType,
    PriceRange,
    Product,
    ScoredProduct,
    Turn,
    TurnRole,
    TurnState,
    UserProfile,
)
from core.errors import (
    CartError,
    CatalogLookupMiss,
    NoReferentResolved,
    ProviderError,
    ProviderErrorKind,
    ShopBotError,
)

__all__ = [
    "CartAction",
    "CartLine",
    "CartSnapshot",
    "ConversationContext",
    "Intent",
    "IntentType",
    "PriceRange",
    "Product",
    "ScoredProduct",
    "Turn",
    "TurnRole",
    "TurnState",
    "UserProfile",
    "CartError",
    "CatalogLookupMiss",
    "NoReferentResolved",
    "ProviderError",
    "ProviderErrorKind",
    "ShopBotError",
]
