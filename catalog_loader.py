"""
Catalog loader for ShopBot.

Loads the product catalog (JSON records or CSV) with pandas and maps each
row onto the Product model. Rows without an id, name or price are skipped
and reported.

Column names are normalized, so both the storefront's camelCase export
(originalPrice, inStock) and snake_case files load.
"""

import re
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from core.context import Product
from core.structured_logging import get_logger

_logger = get_logger("catalog_loader")


COLUMN_ALIASES = {
    'originalprice': 'original_price',
    'original_price': 'original_price',
    'instock': 'in_stock',
    'in_stock': 'in_stock',
    'reviewcount': 'reviews',
    'images': 'images',
}

REQUIRED_FIELDS = ('id', 'name', 'price')


def _normalize_column(name: str) -> str:
    key = re.sub(r'[\s\-]+', '_', str(name).strip()).lower()
    return COLUMN_ALIASES.get(key.replace('_', ''), COLUMN_ALIASES.get(key, key))


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if pd.api.types.is_scalar(value):
        return bool(pd.isna(value))
    return False


def _to_python(value: Any) -> Any:
    # numpy scalars -> Python scalars
    if hasattr(value, 'item') and pd.api.types.is_scalar(value):
        return value.item()
    return value


def parse_features(value: Any) -> tuple:
    """
    Features arrive as a JSON list or as a pipe/semicolon separated string.

    Examples:
    - ["Waterproof", "USB-C"] -> ("Waterproof", "USB-C")
    - "Waterproof|USB-C" -> ("Waterproof", "USB-C")
    """
    if _is_missing(value):
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())
    parts = re.split(r'[|;]', str(value))
    return tuple(p.strip() for p in parts if p.strip())


def parse_bool(value: Any, default: bool = True) -> bool:
    if _is_missing(value):
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('true', 'yes', '1', 'y')
    return bool(value)


def read_catalog_frame(path: str) -> pd.DataFrame:
    """Read the raw catalog table; format chosen by file suffix."""
    suffix = Path(path).suffix.lower()
    if suffix == '.csv':
        df = pd.read_csv(path)
    elif suffix in ('.json', ''):
        df = pd.read_json(path, orient='records', convert_dates=False)
    else:
        raise ValueError(f"Unsupported catalog format: {suffix}")

    df.columns = [_normalize_column(c) for c in df.columns]
    return df


def row_to_product(row: pd.Series) -> Product:
    """
    Map one catalog row onto a Product.

    Raises:
        ValueError: a required field is missing or malformed
    """
    record: Dict[str, Any] = {}
    for key, value in row.items():
        if not _is_missing(value):
            record[key] = _to_python(value)

    missing = [f for f in REQUIRED_FIELDS if f not in record]
    if missing:
        raise ValueError(f"missing {', '.join(missing)}")

    image = record.get('image')
    if image is None and isinstance(record.get('images'), (list, tuple)) and record['images']:
        image = record['images'][0]

    return Product(
        id=int(record['id']),
        name=str(record['name']).strip(),
        price=float(record['price']),
        category=str(record.get('category', '')).strip(),
        description=str(record.get('description', '')).strip(),
        features=parse_features(record.get('features')),
        rating=float(record.get('rating', 0.0)),
        reviews=int(record.get('reviews', 0)),
        in_stock=parse_bool(record.get('in_stock')),
        badge=str(record['badge']).strip() if record.get('badge') else None,
        original_price=float(record['original_price']) if 'original_price' in record else None,
        image=image,
    )


def load_catalog(path: str) -> List[Product]:
    """
    Load products from a catalog file.

    Args:
        path: JSON or CSV catalog file

    Returns:
        Products in file order; duplicate ids keep the first row
    """
    _logger.info(f"Loading catalog from: {path}", extra={"event": "catalog_load_start"})

    df = read_catalog_frame(path)

    products = []
    seen_ids = set()
    errors = []

    for idx, row in df.iterrows():
        try:
            product = row_to_product(row)
        except (ValueError, TypeError) as e:
            errors.append(f"Row {idx}: {e}")
            continue

        if product.id in seen_ids:
            errors.append(f"Row {idx}: duplicate id {product.id}")
            continue

        seen_ids.add(product.id)
        products.append(product)

    if errors:
        _logger.warning(
            f"Skipped {len(errors)} catalog rows",
            extra={"event": "catalog_rows_skipped", "context": errors[:10]}
        )

    _logger.info(
        f"Loaded {len(products)} products",
        extra={"event": "catalog_loaded", "products_shown": len(products)}
    )
    return products


def get_catalog_statistics(products: List[Product]) -> dict:
    """
    Summary figures for the sidebar.

    Returns:
        dict with total, in_stock, by_category, min_price, max_price
    """
    if not products:
        return {'total': 0, 'in_stock': 0, 'by_category': {}, 'min_price': 0.0, 'max_price': 0.0}

    df = pd.DataFrame([{'category': p.category, 'price': p.price, 'in_stock': p.in_stock} for p in products])

    return {
        'total': len(df),
        'in_stock': int(df['in_stock'].sum()),
        'by_category': {str(k): int(v) for k, v in df['category'].value_counts().items()},
        'min_price': float(df['price'].min()),
        'max_price': float(df['price'].max()),
    }
