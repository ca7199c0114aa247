"""
Referent resolution for cart actions.

Maps phrases like "add it", "the second one" or "both" onto the products
the assistant suggested most recently.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence

from config.patterns import (
    ALL_PATTERN,
    BOTH_PATTERN,
    ORDINAL_PATTERNS,
    PRONOUN_PATTERN,
    normalize_text,
)
from core.context import Product
from core.errors import NoReferentResolved
from core.structured_logging import get_logger

_logger = get_logger("core.referents")


class ResolutionRule(Enum):
    """Which rule picked the products."""
    NAME = "name"
    ORDINAL = "ordinal"
    COLLECTIVE = "collective"
    PRONOUN = "pronoun"
    NONE = "none"


@dataclass
class Resolution:
    products: List[Product] = field(default_factory=list)
    rule: ResolutionRule = ResolutionRule.NONE

    def __bool__(self) -> bool:
        return bool(self.products)


class ReferentResolver:
    """
    Resolves which suggested products a query refers to.

    Rules are tried in order and the first that matches wins:
    1. Product name mentioned in the query
    2. Ordinal (first, 2nd, last, ...)
    3. Collective ("both" needs two suggestions, "all")
    4. Pronoun (it, this, that) -> first suggestion

    Example:
        resolver = ReferentResolver()
        resolver.resolve("add the second one", [a, b, c])
        # [b]
    """

    def resolve(self, query: str, window: Sequence[Product]) -> List[Product]:
        """Return the referenced products in window order; empty if none."""
        return self.resolve_detailed(query, window).products

    def resolve_detailed(self, query: str, window: Sequence[Product]) -> Resolution:
        """Like resolve(), but also report which rule fired."""
        query_lower = normalize_text(query)
        window = list(window)

        if not window:
            return Resolution()

        # Rule 1: explicit product names
        named = [p for p in window if p.name.lower() in query_lower]
        if named:
            return self._resolved(query, named, ResolutionRule.NAME)

        # Rule 2: ordinals. A missing position resolves to nothing.
        for pattern, index in ORDINAL_PATTERNS:
            if re.search(pattern, query_lower):
                if -len(window) <= index < len(window):
                    return self._resolved(query, [window[index]], ResolutionRule.ORDINAL)
                return self._resolved(query, [], ResolutionRule.ORDINAL)

        # Rule 3: collectives
        if re.search(BOTH_PATTERN, query_lower) and len(window) >= 2:
            return self._resolved(query, window[:2], ResolutionRule.COLLECTIVE)
        if re.search(ALL_PATTERN, query_lower):
            return self._resolved(query, window, ResolutionRule.COLLECTIVE)

        # Rule 4: pronouns
        if re.search(PRONOUN_PATTERN, query_lower):
            return self._resolved(query, [window[0]], ResolutionRule.PRONOUN)

        return Resolution()

    def require(self, query: str, window: Sequence[Product]) -> Resolution:
        """
        Resolve, raising when nothing is referenced.

        Raises:
            NoReferentResolved: query names no suggested product
        """
        resolution = self.resolve_detailed(query, window)
        if not resolution:
            raise NoReferentResolved(query)
        return resolution

    def _resolved(self, query: str, products: List[Product], rule: ResolutionRule) -> Resolution:
        _logger.debug(
            f"Resolved {len(products)} referent(s) by {rule.value}",
            extra={
                "event": "referent_resolved",
                "query": query,
                "resolution_rule": rule.value,
                "resolved_ids": [p.id for p in products],
            }
        )
        return Resolution(products=products, rule=rule)
