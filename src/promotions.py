"""Discount rules that can be registered on a cart."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, FrozenSet, Iterable, NamedTuple, Optional, Sequence, Tuple

from catalog import Product
from errors import InvalidArgument

if TYPE_CHECKING:
    from cart import CartItem

logger = logging.getLogger(__name__)


class DiscountKey(NamedTuple):
    """Identity of a rule inside a cart. Equal keys are registered once."""

    kind: str
    name: str
    params: Tuple


class DiscountRule(ABC):
    """A named pricing adjustment evaluated against one cart item at a time.

    ``apply`` receives the item being evaluated plus every item in the cart,
    so rules that depend on the rest of the cart can look at it. It returns
    whether the rule fired on ``item``. Rules must never deduct more than the
    item's ``unit_price * quantity``; the cart does not clamp payable prices.
    """

    kind: str = "rule"

    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument("Discount name must be a non-empty string")
        self._name = name
        self._key: Optional[DiscountKey] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def unique_key(self) -> DiscountKey:
        if self._key is None:
            self._key = DiscountKey(self.kind, self._name.casefold(), self._key_params())
        return self._key

    @abstractmethod
    def _key_params(self) -> Tuple:
        ...

    @abstractmethod
    def apply(self, item: CartItem, items: Sequence[CartItem]) -> bool:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


def _require_count(value: int, label: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidArgument(f"{label} must be an integer >= {minimum}, got {value!r}")
    return value


class TieredFreeUnits(DiscountRule):
    """Buy ``buy_count`` units of a product and get ``free_count`` more free.

    Fires once the quantity exceeds ``buy_count``. The discount is one unit
    price for every complete group of ``buy_count + free_count`` units, set
    from the current quantity rather than added to the previous amount.
    """

    kind = "tiered_free_units"

    def __init__(self, name: str, product: Product, buy_count: int, free_count: int) -> None:
        super().__init__(name)
        if not isinstance(product, Product):
            raise InvalidArgument(f"Expected a Product, got {product!r}")
        self._product = product
        self._buy_count = _require_count(buy_count, "buy_count", 0)
        self._free_count = _require_count(free_count, "free_count", 1)

    @property
    def product(self) -> Product:
        return self._product

    @property
    def buy_count(self) -> int:
        return self._buy_count

    @property
    def free_count(self) -> int:
        return self._free_count

    def _key_params(self) -> Tuple:
        return (self.product.name,)

    def free_units(self, quantity: int) -> int:
        return quantity // (self.buy_count + self.free_count)

    def apply(self, item: CartItem, items: Sequence[CartItem]) -> bool:
        if item.product != self.product or item.quantity <= self.buy_count:
            return False
        item.discount_amount = self.free_units(item.quantity) * item.product.unit_price
        logger.debug(
            "%s: %s x%d -> discount %s", self._name, item.product.name, item.quantity, item.discount_amount
        )
        return True


def _product_set(products: Iterable[Product], label: str) -> frozenset:
    collected = list(products)
    if not collected:
        raise InvalidArgument(f"{label} must name at least one product")
    for product in collected:
        if not isinstance(product, Product):
            raise InvalidArgument(f"Expected a Product in {label}, got {product!r}")
    return frozenset(collected)


class BundleFreeItem(DiscountRule):
    """Once every product in ``need_to_buy`` is in the cart, one unit of each
    product in ``free_items`` is free."""

    kind = "bundle_free_item"

    def __init__(self, name: str, need_to_buy: Iterable[Product], free_items: Iterable[Product]) -> None:
        super().__init__(name)
        self._need_to_buy = _product_set(need_to_buy, "need_to_buy")
        self._free_items = _product_set(free_items, "free_items")

    @property
    def need_to_buy(self) -> FrozenSet[Product]:
        return self._need_to_buy

    @property
    def free_items(self) -> FrozenSet[Product]:
        return self._free_items

    def _key_params(self) -> Tuple:
        return (
            tuple(sorted(p.name for p in self.need_to_buy)),
            tuple(sorted(p.name for p in self.free_items)),
        )

    def is_satisfied(self, items: Sequence[CartItem]) -> bool:
        present = {item.product for item in items}
        return self.need_to_buy <= present

    def apply(self, item: CartItem, items: Sequence[CartItem]) -> bool:
        if item.product not in self.free_items or not self.is_satisfied(items):
            return False
        item.discount_amount = item.product.unit_price
        logger.debug("%s: one free %s", self._name, item.product.name)
        return True
