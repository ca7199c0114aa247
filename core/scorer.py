"""
Relevance scoring for catalog products.

Scores every product against a free-text query with weighted keyword
matches and returns the top candidates above a threshold. Pure and
deterministic: the same query, catalog and profile always give the same
ranked list.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from config.patterns import (
    BOOSTED_BADGES,
    CATEGORY_PATTERNS,
    STOP_WORDS,
    TYPE_CUES,
    normalize_text,
)
from core.context import Product, ScoredProduct, UserProfile
from core.structured_logging import get_logger, timed

_logger = get_logger("core.scorer")

_TERM_STRIP = "?!.,;:\"'()[]"


@dataclass
class ScorerConfig:
    """
    Weights and cut-offs for relevance scoring.

    Attributes:
        name_weight: Term found in the product name
        category_weight: Term found in the category
        description_weight: Term found in the description
        feature_weight: Term found in a feature (per feature)
        category_pattern_bonus: Query keyword of a category group matching the product
        type_cue_bonus: Query asks for a product type named in the product
        badge_bonus: Product carries a boosted badge
        interest_bonus: Product category is one of the shopper's interests
        price_bonus: Product price falls inside a constrained price range
        threshold: Minimum score kept
        max_results: Top-N cut
    """
    name_weight: float = 30
    category_weight: float = 25
    description_weight: float = 15
    feature_weight: float = 10
    category_pattern_bonus: float = 35
    type_cue_bonus: float = 40
    badge_bonus: float = 5
    interest_bonus: float = 10
    price_bonus: float = 5
    threshold: float = 25
    max_results: int = 3


def tokenize(query: str) -> List[str]:
    """Split a query into lowercase search terms, dropping filler words."""
    terms = []
    for raw in normalize_text(query).split():
        term = raw.strip(_TERM_STRIP)
        if term and term not in STOP_WORDS:
            terms.append(term)
    return terms


class RelevanceScorer:
    """
    Ranks catalog products by keyword relevance to a query.

    Example:
        scorer = RelevanceScorer()
        ranked = scorer.score("Do you have any shoes?", catalog)
        # [ScoredProduct(product=<Running Sneakers>, score=130.0)]
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    @timed("relevance_scoring")
    def score(
        self,
        query: str,
        catalog: Iterable[Product],
        profile: Optional[UserProfile] = None,
    ) -> List[ScoredProduct]:
        """
        Score the catalog against a query.

        Args:
            query: Free-text user query
            catalog: Products to score
            profile: Shopper profile for interest and price bonuses

        Returns:
            At most max_results ScoredProducts with score >= threshold,
            highest first; ties keep catalog order.
        """
        terms = tokenize(query)
        query_lower = normalize_text(query)

        scored = []
        for product in catalog:
            total = self.score_product(product, terms, query_lower, profile)
            if total >= self.config.threshold:
                scored.append(ScoredProduct(product=product, score=total))

        # sorted() is stable, so equal scores keep catalog order
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)[:self.config.max_results]

        _logger.debug(
            f"Scored catalog: {len(scored)} above threshold",
            extra={
                "event": "relevance_scored",
                "query": query,
                "candidates": [(s.product.id, s.score) for s in ranked],
            }
        )
        return ranked

    def score_product(
        self,
        product: Product,
        terms: List[str],
        query_lower: str,
        profile: Optional[UserProfile] = None,
    ) -> float:
        """Score a single product. Exposed for debugging and tests."""
        name = product.name.lower()
        category = product.category.lower()
        description = product.description.lower()
        features = [f.lower() for f in product.features]

        total = self._term_score(terms, name, category, description, features)
        total += self._category_pattern_score(query_lower, name, category, description)
        total += self._type_cue_score(query_lower, name)

        # Profile bonuses only lift products the query already matched
        if profile is not None and total > 0:
            total += self._profile_score(product, profile)

        if product.badge and product.badge.lower() in BOOSTED_BADGES:
            total += self.config.badge_bonus

        return total

    def _term_score(
        self,
        terms: List[str],
        name: str,
        category: str,
        description: str,
        features: List[str],
    ) -> float:
        cfg = self.config
        total = 0.0
        for term in terms:
            if term in name:
                total += cfg.name_weight
            if term in category:
                total += cfg.category_weight
            if term in description:
                total += cfg.description_weight
            total += cfg.feature_weight * sum(1 for f in features if term in f)
        return total

    def _category_pattern_score(
        self,
        query_lower: str,
        name: str,
        category: str,
        description: str,
    ) -> float:
        total = 0.0
        for group, keywords in CATEGORY_PATTERNS.items():
            for keyword in keywords:
                if keyword not in query_lower:
                    continue
                if group in category or keyword in name or keyword in description:
                    total += self.config.category_pattern_bonus
        return total

    def _type_cue_score(self, query_lower: str, name: str) -> float:
        total = 0.0
        for query_cues, name_cues in TYPE_CUES:
            if any(cue in query_lower for cue in query_cues) and any(cue in name for cue in name_cues):
                total += self.config.type_cue_bonus
        return total

    def _profile_score(self, product: Product, profile: UserProfile) -> float:
        total = 0.0
        if product.category in profile.interests:
            total += self.config.interest_bonus
        if profile.price_range.is_constrained and profile.price_range.contains(product.price):
            total += self.config.price_bonus
        return total
