"""Read-only product catalog."""

from typing import Dict, Iterable, Iterator, List, Optional

from core.context import Product
from core.errors import CatalogLookupMiss


class Catalog:
    """
    Ordered, read-only collection of products with lookup by id.

    Iteration order is load order, which the relevance scorer uses to
    break ties.
    """

    def __init__(self, products: Iterable[Product]):
        self._products: List[Product] = list(products)
        self._by_id: Dict[int, Product] = {p.id: p for p in self._products}

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: int) -> bool:
        return product_id in self._by_id

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    def get(self, product_id: int) -> Product:
        """
        Raises:
            CatalogLookupMiss: id not in catalog
        """
        try:
            return self._by_id[product_id]
        except KeyError:
            raise CatalogLookupMiss(product_id) from None

    def find_by_name(self, name: str) -> Optional[Product]:
        name_lower = name.lower()
        for product in self._products:
            if product.name.lower() == name_lower:
                return product
        return None

    def categories(self) -> List[str]:
        """Distinct categories in load order."""
        seen = []
        for product in self._products:
            if product.category not in seen:
                seen.append(product.category)
        return seen

    def by_category(self, category: Optional[str]) -> List[Product]:
        """Products in a category; None or "All" returns everything."""
        if not category or category == "All":
            return list(self._products)
        return [p for p in self._products if p.category == category]
