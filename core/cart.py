"""
Shopping cart with a persisted key-value mirror.

The cart keeps ordered lines of (product, quantity). After every change it
writes itself to a storage slot (any MutableMapping of str -> str), and it
reads that slot once when constructed.
"""

import json
from collections.abc import MutableMapping
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from core.context import CartLine, CartSnapshot, Product
from core.errors import CartError
from core.structured_logging import get_logger

_logger = get_logger("core.cart")

CART_STORAGE_KEY = "cart"


class JSONFileStorage(MutableMapping):
    """
    Tiny key-value store backed by one JSON file.

    Every write rewrites the file; fine for a single shopper's cart.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._data: Dict[str, str] = {}
        if self.path.exists():
            try:
                self._data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                _logger.warning(
                    f"Ignoring unreadable storage file {self.path}: {e}",
                    extra={"event": "storage_unreadable"}
                )
                self._data = {}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._flush()

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class Cart:
    """
    In-memory cart.

    Example:
        cart = Cart(storage=JSONFileStorage(".shopbot_cart.json"))
        cart.add_item(sneakers)
        cart.add_item(sneakers)
        cart.total_items  # 2
    """

    def __init__(
        self,
        storage: Optional[MutableMapping] = None,
        storage_key: str = CART_STORAGE_KEY,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self._lines: List[CartLine] = []
        self._load()

    # === Queries ===

    @property
    def items(self) -> List[CartLine]:
        return list(self._lines)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def total_price(self) -> float:
        return sum(line.subtotal for line in self._lines)

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(lines=tuple(self._lines))

    def quantity_of(self, product_id: int) -> int:
        index = self._index_of(product_id)
        return self._lines[index].quantity if index is not None else 0

    def __contains__(self, product_id: int) -> bool:
        return self._index_of(product_id) is not None

    def __len__(self) -> int:
        return len(self._lines)

    # === Mutations ===

    def add_item(self, product: Product) -> CartLine:
        """
        Add one unit of a product, merging with an existing line.

        Raises:
            CartError: product is out of stock
        """
        if not product.in_stock:
            raise CartError(f"{product.name} is out of stock", product_id=product.id)

        index = self._index_of(product.id)
        if index is None:
            line = CartLine(product=product, quantity=1)
            self._lines.append(line)
        else:
            line = CartLine(product=product, quantity=self._lines[index].quantity + 1)
            self._lines[index] = line

        self._persist()
        return line

    def remove_item(self, product_id: int) -> bool:
        """Remove a product's line entirely. Returns False if it was not in the cart."""
        index = self._index_of(product_id)
        if index is None:
            return False
        del self._lines[index]
        self._persist()
        return True

    def update_quantity(self, product_id: int, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove_item(product_id)
            return

        index = self._index_of(product_id)
        if index is None:
            return
        self._lines[index] = CartLine(product=self._lines[index].product, quantity=quantity)
        self._persist()

    def clear_cart(self) -> None:
        self._lines = []
        self._persist()

    # === Persistence ===

    def _index_of(self, product_id: int) -> Optional[int]:
        for i, line in enumerate(self._lines):
            if line.product.id == product_id:
                return i
        return None

    def _persist(self) -> None:
        if self.storage is None:
            return
        payload = [
            {"product": line.product.to_dict(), "quantity": line.quantity}
            for line in self._lines
        ]
        try:
            self.storage[self.storage_key] = json.dumps(payload)
        except OSError as e:
            # The in-memory cart stays authoritative; the mirror catches up on the next change
            _logger.warning(
                f"Could not save cart: {e}",
                extra={"event": "cart_save_failed", "error_type": type(e).__name__}
            )

    def _load(self) -> None:
        if self.storage is None or self.storage_key not in self.storage:
            return
        try:
            payload = json.loads(self.storage[self.storage_key])
            self._lines = [
                CartLine(product=Product.from_dict(entry["product"]), quantity=int(entry["quantity"]))
                for entry in payload
                if int(entry["quantity"]) > 0
            ]
        except (ValueError, KeyError, TypeError) as e:
            _logger.warning(
                f"Discarding unreadable saved cart: {e}",
                extra={"event": "cart_load_failed", "error_type": type(e).__name__}
            )
            self._lines = []
