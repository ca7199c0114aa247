"""
Keyword and regex tables for the shopping assistant.

All classification in ShopBot is pattern based. The tables live here as
plain data so the classifiers, resolver and scorer stay free of literals.
"""

import re
from typing import Optional


# === Cart Action Phrases ===

# Checked before REMOVE_PHRASES, so a query containing both is an add.
ADD_PHRASES = [
    'add to cart',
    'add it',
    'add this',
    'add that',
    'buy it',
    'buy this',
    'purchase it',
    'purchase this',
    'get it',
    'get this',
    'i want it',
    'i want this',
    "i'll take it",
    "i'll take this",
    'add the first',
    'add the second',
    'add the third',
    'add the fourth',
    'add the fifth',
    'add the last',
    'add the 1st',
    'add the 2nd',
    'add the 3rd',
    'add the 4th',
    'add the 5th',
    'add both',
    'add all',
]

REMOVE_PHRASES = [
    'remove from cart',
    'remove it',
    'remove this',
    'delete it',
    'delete this',
    'take it out',
    "don't want it",
    'remove the first',
    'remove the second',
    'remove the third',
    'remove the fourth',
    'remove the fifth',
    'remove the last',
    'remove the 1st',
    'remove the 2nd',
    'remove the 3rd',
    'remove the 4th',
    'remove the 5th',
    'remove both',
    'remove all',
]


# === Referent Keywords ===

# Ordinal positions into the last suggested products; -1 is the last one.
ORDINAL_PATTERNS = [
    (r'\b(?:first|1st)\b', 0),
    (r'\b(?:second|2nd)\b', 1),
    (r'\b(?:third|3rd)\b', 2),
    (r'\b(?:fourth|4th)\b', 3),
    (r'\b(?:fifth|5th)\b', 4),
    (r'\blast\b', -1),
]

BOTH_PATTERN = r'\bboth\b'
ALL_PATTERN = r'\ball\b'
PRONOUN_PATTERN = r'\b(?:it|this|that)\b'


# === Product-Seeking Heuristic ===

PRODUCT_INQUIRY_PHRASES = [
    'do you have',
    'what',
    'any',
    'show me',
    'looking for',
    'need',
    'want',
    'sell',
    'available',
    'got',
    'find',
    'search',
    'recommend',
    'suggest',
]

PRODUCT_TYPE_NOUNS = [
    'book',
    'laptop',
    'phone',
    'shoe',
    'clothes',
    'electronics',
    'fashion',
    'home',
    'food',
    'coffee',
    'computer',
    'device',
    'sneaker',
    'bag',
]

QUESTION_PREFIXES = ('what', 'do you', 'can you')


# === Relevance Scoring ===

# Category group -> keywords that signal it in a query.
CATEGORY_PATTERNS = {
    'books': ['book', 'books', 'read', 'programming', 'design', 'learning'],
    'electronics': ['phone', 'laptop', 'computer', 'tech', 'electronic', 'device', 'mouse', 'headphone'],
    'fashion': ['clothes', 'clothing', 'wear', 'fashion', 'shoe', 'shoes', 'sneaker', 'coat', 'bag', 'handbag'],
    'home': ['home', 'garden', 'house', 'decor', 'lamp', 'plant', 'pot'],
    'food': ['coffee', 'food', 'drink', 'beverage', 'organic'],
}

# (query cues, product-name cues): any query cue plus any name cue earns the bonus.
TYPE_CUES = [
    (('shoe', 'sneaker'), ('sneaker', 'shoe')),
    (('laptop', 'computer'), ('macbook', 'laptop')),
    (('phone',), ('iphone', 'phone')),
]

BOOSTED_BADGES = {'popular', 'bestseller'}

# Filler words that never count as search terms.
STOP_WORDS = {
    'a', 'an', 'the', 'i', 'me', 'my', 'you', 'do', 'is', 'are', 'any',
    'some', 'for', 'of', 'to', 'and', 'or', 'in', 'on', 'it', 'have',
    'show', 'what', 'can', 'got', 'need', 'want', 'looking', 'with',
}


# === Shopping Intent Patterns ===

CART_QUERY_PATTERNS = [
    r"\bmy\s+cart\b",
    r"\bin\s+(?:the|my)\s+cart\b",
    r"\bcart\s+total\b",
    r"\bhow\s+much\s+(?:is|will)\s+(?:my|everything|it\s+all)\b",
    r"\bcheckout\b",
]

PURCHASE_ADVICE_PATTERNS = [
    r"\bworth\s+it\b",
    r"\bshould\s+i\s+(?:buy|get|purchase)\b",
    r"\bis\s+(?:it|this|that)\s+(?:good|any\s+good)\b",
    r"\bcompare\b",
    r"\bbetter\b",
    r"\bvs\.?\b",
    r"\bdifference\s+between\b",
]

RECOMMENDATION_PATTERNS = [
    r"\brecommend",
    r"\bsuggest",
    r"\bgift\b",
    r"\bideas?\b",
    r"\bwhat\s+should\s+i\s+(?:get|buy)\b",
    r"\bsomething\s+(?:for|nice)\b",
]


# === Price Range Patterns ===

_AMOUNT = r'\$?\s*(\d+(?:\.\d+)?)'

PRICE_BETWEEN_PATTERN = re.compile(
    rf'\bbetween\s+{_AMOUNT}\s*(?:and|-|to)\s*{_AMOUNT}', re.IGNORECASE
)
PRICE_MAX_PATTERN = re.compile(
    rf'\b(?:under|below|less\s+than|cheaper\s+than|up\s+to|no\s+more\s+than|max(?:imum)?)\s+{_AMOUNT}',
    re.IGNORECASE,
)
PRICE_MIN_PATTERN = re.compile(
    rf'\b(?:over|above|more\s+than|at\s+least|min(?:imum)?)\s+{_AMOUNT}', re.IGNORECASE
)


# === Helper Functions ===

def normalize_text(text: str) -> str:
    """Lowercase text and fold curly apostrophes to straight ones."""
    return text.lower().replace('’', "'").replace('‘', "'")


def has_phrase(text: str, phrases: list[str]) -> bool:
    """
    Check if any phrase is contained in text (case-insensitive substring).

    Args:
        text: Input text
        phrases: Literal phrases

    Returns:
        True if any phrase occurs in text
    """
    text_lower = normalize_text(text)
    return any(phrase in text_lower for phrase in phrases)


def has_pattern(text: str, patterns: list[str]) -> bool:
    """
    Check if any pattern matches text.

    Args:
        text: Input text
        patterns: List of regex patterns

    Returns:
        True if any pattern matches
    """
    text_lower = normalize_text(text)
    return any(re.search(pattern, text_lower) for pattern in patterns)


def extract_price_range(text: str) -> tuple[Optional[float], Optional[float]]:
    """
    Extract a price window from text.

    Returns:
        (min_price, max_price); either side is None when not mentioned

    Example:
        >>> extract_price_range("running shoes under $150")
        (None, 150.0)
        >>> extract_price_range("something between $20 and $80")
        (20.0, 80.0)
    """
    between = PRICE_BETWEEN_PATTERN.search(text)
    if between:
        low, high = float(between.group(1)), float(between.group(2))
        return min(low, high), max(low, high)

    min_price = None
    max_price = None

    max_match = PRICE_MAX_PATTERN.search(text)
    if max_match:
        max_price = float(max_match.group(1))

    min_match = PRICE_MIN_PATTERN.search(text)
    if min_match:
        min_price = float(min_match.group(1))

    return min_price, max_price
