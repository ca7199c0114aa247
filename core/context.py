"""
Core data models for ShopBot.

Defines the data structures shared by the dialogue engine.
These are pure Python dataclasses with no external dependencies.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional


class IntentType(Enum):
    """
    Shopping intent of a conversational query.

    Used to tailor the reply guidance given to the language model;
    cart mutations are decided separately by CartAction.
    """
    RECOMMENDATION = "recommendation"
    PRODUCT_SEARCH = "product_search"
    CART_QUERY = "cart_query"
    PURCHASE_ADVICE = "purchase_advice"
    GENERAL = "general"


@dataclass
class Intent:
    """
    User intent with metadata.

    Attributes:
        type: Intent classification
        confidence: Confidence score (0.0-1.0)
        reasoning: Why this intent was selected
    """
    type: IntentType
    confidence: float
    reasoning: str

    def __str__(self) -> str:
        return f"Intent({self.type.value}, confidence={self.confidence:.2f})"


class CartAction(Enum):
    """Cart mutation requested by a query."""
    ADD = "add"
    REMOVE = "remove"
    NONE = "none"


class TurnState(Enum):
    """Stages a turn passes through in the orchestrator."""
    RECEIVED = "received"
    CLASSIFIED = "classified"
    CART_MUTATED = "cart_mutated"
    CONTEXT_BUILT = "context_built"
    RESPONDED = "responded"


class TurnRole(Enum):
    """Who produced a turn. ERROR marks a failed assistant reply."""
    USER = "user"
    ASSISTANT = "assistant"
    ERROR = "error"


@dataclass(frozen=True)
class Product:
    """
    Catalog product. Immutable once loaded.

    Attributes:
        id: Unique product identifier
        name: Display name
        price: Current price
        category: Catalog category (e.g. "Electronics")
        description: Free-text description
        features: Ordered feature strings
        rating: Average rating, 0-5
        reviews: Number of reviews
        in_stock: Availability flag
        badge: Optional merchandising badge ("Popular", "Bestseller", ...)
        original_price: Price before discount, if discounted
        image: Image URL
    """
    id: int
    name: str
    price: float
    category: str
    description: str = ""
    features: tuple[str, ...] = ()
    rating: float = 0.0
    reviews: int = 0
    in_stock: bool = True
    badge: Optional[str] = None
    original_price: Optional[float] = None
    image: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "original_price": self.original_price,
            "category": self.category,
            "description": self.description,
            "features": list(self.features),
            "rating": self.rating,
            "reviews": self.reviews,
            "in_stock": self.in_stock,
            "badge": self.badge,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Build a Product from a dict produced by to_dict() or the catalog file."""
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            price=float(data["price"]),
            category=str(data.get("category") or ""),
            description=str(data.get("description") or ""),
            features=tuple(data.get("features") or ()),
            rating=float(data.get("rating") or 0.0),
            reviews=int(data.get("reviews") or 0),
            in_stock=bool(data.get("in_stock", True)),
            badge=data.get("badge") or None,
            original_price=(
                float(data["original_price"]) if data.get("original_price") is not None else None
            ),
            image=data.get("image") or None,
        )


@dataclass(frozen=True)
class ScoredProduct:
    """Product paired with its relevance score for one query."""
    product: Product
    score: float


@dataclass(frozen=True)
class Turn:
    """
    One entry of the conversation history.

    Attributes:
        role: USER, ASSISTANT or ERROR
        content: Message text
        timestamp: When the turn was recorded
        suggestions: Products attached to an assistant turn
        show_suggestions: Whether the UI should render the suggestions
    """
    role: TurnRole
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    suggestions: tuple[Product, ...] = ()
    show_suggestions: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "suggestions": [p.id for p in self.suggestions],
        }


@dataclass
class PriceRange:
    """Preferred price window. A max_price of None means unbounded."""
    min_price: float = 0.0
    max_price: Optional[float] = None

    @property
    def is_constrained(self) -> bool:
        return self.min_price > 0 or self.max_price is not None

    def contains(self, price: float) -> bool:
        if price < self.min_price:
            return False
        return self.max_price is None or price <= self.max_price

    def describe(self) -> str:
        if self.max_price is None:
            return f"${self.min_price:.0f}+"
        return f"${self.min_price:.0f} - ${self.max_price:.0f}"


@dataclass
class UserProfile:
    """
    What the assistant has learned about the shopper this session.

    Both windows evict the oldest entry first once full.
    """
    searches: list[str] = field(default_factory=list)
    interests: list[str] = field(default_factory=list)
    price_range: PriceRange = field(default_factory=PriceRange)
    search_window: int = 10
    interest_window: int = 5

    def record_search(self, query: str) -> None:
        """Append a query to the recent-search window."""
        self.searches.append(query)
        if len(self.searches) > self.search_window:
            del self.searches[:len(self.searches) - self.search_window]

    def add_interests(self, categories: Iterable[str]) -> None:
        """Fold categories into interests, keeping distinct values only."""
        for category in categories:
            if category and category not in self.interests:
                self.interests.append(category)
        if len(self.interests) > self.interest_window:
            del self.interests[:len(self.interests) - self.interest_window]

    def update_price_range(
        self,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> None:
        """
        Narrow the price window; sides that are None keep their value.

        A new bound that crosses the old opposite bound resets that side,
        so "under $50" then "over $100" leaves just the $100 minimum.
        """
        price_range = self.price_range
        if min_price is not None:
            price_range.min_price = min_price
            if max_price is None and price_range.max_price is not None and price_range.max_price < min_price:
                price_range.max_price = None
        if max_price is not None:
            price_range.max_price = max_price
            if min_price is None and price_range.min_price > max_price:
                price_range.min_price = 0.0

    def recent_searches(self, limit: int = 5) -> list[str]:
        return self.searches[-limit:] if limit > 0 else []


@dataclass(frozen=True)
class CartLine:
    """One cart line as seen by the dialogue engine."""
    product: Product
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity


@dataclass(frozen=True)
class CartSnapshot:
    """Read-only projection of the cart at one point in time."""
    lines: tuple[CartLine, ...] = ()

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_price(self) -> float:
        return sum(line.subtotal for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass
class ConversationContext:
    """
    Per-session dialogue state.

    Passed into and returned from every orchestrator call. Holds the turn
    history, the products most recently shown to the shopper (in the order
    they were shown), and the shopper's profile.
    """
    session_id: str = field(default_factory=lambda: f"session_{uuid.uuid4().hex[:12]}")
    turns: list[Turn] = field(default_factory=list)
    last_suggested_products: tuple[Product, ...] = ()
    profile: UserProfile = field(default_factory=UserProfile)
    query_count: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    def add_turn(self, turn: Turn) -> Turn:
        self.turns.append(turn)
        return turn

    def add_user_turn(self, content: str) -> Turn:
        self.query_count += 1
        return self.add_turn(Turn(role=TurnRole.USER, content=content))

    def add_assistant_turn(self, content: str, suggestions: Iterable[Product] = ()) -> Turn:
        suggestions = tuple(suggestions)
        return self.add_turn(Turn(
            role=TurnRole.ASSISTANT,
            content=content,
            suggestions=suggestions,
            show_suggestions=bool(suggestions),
        ))

    def add_error_turn(self, content: str) -> Turn:
        return self.add_turn(Turn(role=TurnRole.ERROR, content=content))

    def set_last_suggested(self, products: Iterable[Product]) -> None:
        """Replace the last suggested products. An empty set leaves them untouched."""
        products = tuple(products)
        if products:
            self.last_suggested_products = products

    def has_suggestions(self) -> bool:
        return bool(self.last_suggested_products)

    def get_last_turn(self, role: Optional[TurnRole] = None) -> Optional[Turn]:
        for turn in reversed(self.turns):
            if role is None or turn.role == role:
                return turn
        return None

    def history_before_last(self) -> list[Turn]:
        """All turns except the most recent one (the query being answered)."""
        return self.turns[:-1]

    def reset(self) -> None:
        """Clear history and suggestions, keeping profile windows' sizes."""
        self.turns.clear()
        self.last_suggested_products = ()
        self.profile = UserProfile(
            search_window=self.profile.search_window,
            interest_window=self.profile.interest_window,
        )
        self.query_count = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for debugging."""
        return {
            "session_id": self.session_id,
            "query_count": self.query_count,
            "turns": [t.to_dict() for t in self.turns],
            "last_suggested_products": [p.id for p in self.last_suggested_products],
            "interests": list(self.profile.interests),
            "searches": list(self.profile.searches),
            "price_range": self.profile.price_range.describe(),
        }
