"""Product catalog used by carts and discount rules."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from errors import InvalidArgument


def to_money(value) -> Decimal:
    """Coerce a price-like value into a Decimal."""
    if isinstance(value, bool):
        raise InvalidArgument(f"Price must be a number, got {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value))
        except InvalidOperation as exc:
            raise InvalidArgument(f"Price must be a number, got {value!r}") from exc
    else:
        raise InvalidArgument(f"Price must be a number, got {value!r}")
    if not amount.is_finite():
        raise InvalidArgument(f"Price must be finite, got {value!r}")
    return amount


@dataclass(frozen=True)
class Product:
    name: str
    unit_price: Decimal = field(compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidArgument("Product name must be a non-empty string")
        price = to_money(self.unit_price)
        if price < 0:
            raise InvalidArgument(f"Price cannot be negative: {price}")
        object.__setattr__(self, "unit_price", price)


class CatalogService:
    """Products keyed by name. The first product registered under a name is kept."""

    def __init__(self, products: Optional[Dict[str, Product]] = None) -> None:
        self._products: Dict[str, Product] = dict(products or {})

    def add(self, product: Product) -> Product:
        if not isinstance(product, Product):
            raise InvalidArgument(f"Expected a Product, got {product!r}")
        return self._products.setdefault(product.name, product)

    def get(self, name: str) -> Product:
        if name not in self._products:
            raise KeyError(f"Unknown product: {name}")
        return self._products[name]

    def names(self) -> List[str]:
        return list(self._products)

    def __contains__(self, name: object) -> bool:
        return name in self._products

    def __len__(self) -> int:
        return len(self._products)
