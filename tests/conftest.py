"""
Shared fixtures: a small catalog and scripted completion backends.
"""

import pytest

from core.catalog import Catalog
from core.context import ConversationContext, Product
from core.errors import ProviderError, ProviderErrorKind


class FakeBackend:
    """Completion backend that returns a canned reply and records prompts."""

    def __init__(self, name="fake", reply="Here you go!", model_name="fake-model"):
        self.name = name
        self.reply = reply
        self.model_name = model_name
        self.prompts = []

    async def complete(self, prompt):
        self.prompts.append(prompt)
        return self.reply


class ReadOnlyStorage(dict):
    """Cart storage slot whose writes always fail."""

    def __setitem__(self, key, value):
        raise OSError("read-only file system")


class FailingBackend:
    """Completion backend that always raises."""

    def __init__(self, name="broken", error=None, model_name="broken-model"):
        self.name = name
        self.model_name = model_name
        self.error = error or ProviderError("request timed out", ProviderErrorKind.TIMEOUT, name)
        self.calls = 0

    async def complete(self, prompt):
        self.calls += 1
        raise self.error


@pytest.fixture
def products():
    return [
        Product(
            id=1,
            name="The Art of Programming",
            price=45.0,
            category="Books",
            description="A comprehensive guide to writing clean code with real-world examples.",
            features=("Hardcover", "Exercises with solutions"),
            rating=4.8,
            reviews=1240,
            badge="Bestseller",
        ),
        Product(
            id=2,
            name="Modern Web Design",
            price=39.0,
            category="Books",
            description="Covers the latest design trends and techniques.",
            features=("Full-color illustrations",),
            rating=4.5,
            reviews=612,
        ),
        Product(
            id=3,
            name="MacBook Pro 14",
            price=1999.0,
            category="Electronics",
            description="Professional laptop with all-day battery life.",
            features=("14-inch Retina display", "18-hour battery"),
            rating=4.9,
            reviews=2033,
            badge="Popular",
        ),
        Product(
            id=4,
            name="iPhone 15",
            price=899.0,
            category="Electronics",
            description="Smartphone with an advanced camera system.",
            features=("48MP main camera",),
            rating=4.7,
            reviews=1850,
        ),
        Product(
            id=5,
            name="Running Sneakers",
            price=129.0,
            category="Fashion",
            description="Lightweight running shoes for exercise.",
            features=("Advanced cushioning system", "Breathable mesh upper"),
            rating=4.7,
            reviews=812,
            badge="Popular",
        ),
        Product(
            id=6,
            name="Organic Coffee Beans",
            price=24.0,
            category="Food",
            description="Single-origin beans with notes of chocolate.",
            features=("1kg bag", "Medium roast"),
            rating=4.8,
            reviews=1532,
        ),
        Product(
            id=7,
            name="Ergonomic Wireless Mouse",
            price=59.0,
            category="Electronics",
            description="Comfortable mouse that reduces wrist strain.",
            features=("Rechargeable",),
            rating=4.4,
            reviews=455,
            in_stock=False,
        ),
    ]


@pytest.fixture
def catalog(products):
    return Catalog(products)


@pytest.fixture
def by_name(products):
    return {p.name: p for p in products}


@pytest.fixture
def context():
    return ConversationContext(session_id="test-session")
