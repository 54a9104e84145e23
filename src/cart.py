"""Cart and cart items: quantities, registered discounts, and totals."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from audit import AuditLogger
from catalog import Product
from errors import InvalidArgument
from promotions import DiscountKey, DiscountRule

logger = logging.getLogger(__name__)


class CartItem:
    """One product's aggregated quantity and discount state within a cart."""

    def __init__(self, product: Product, quantity: int) -> None:
        self.product = product
        self.quantity = quantity
        self.discount_amount = Decimal("0")
        self._applied: Dict[DiscountKey, DiscountRule] = {}

    @property
    def subtotal(self) -> Decimal:
        return self.product.unit_price * self.quantity

    @property
    def payable_price(self) -> Decimal:
        # Not clamped at zero: rules are responsible for staying within subtotal.
        return self.subtotal - self.discount_amount

    @property
    def applied_discounts(self) -> Tuple[DiscountRule, ...]:
        return tuple(self._applied.values())

    @property
    def applied_discount_names(self) -> List[str]:
        return [rule.name for rule in self._applied.values()]

    def record_discount(self, rule: DiscountRule) -> bool:
        """Remember that ``rule`` fired on this item. Returns False if it was already recorded."""
        if rule.unique_key in self._applied:
            return False
        self._applied[rule.unique_key] = rule
        return True

    def __repr__(self) -> str:
        return f"CartItem({self.product.name!r}, qty={self.quantity}, discount={self.discount_amount})"


def _require_quantity(quantity: int) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidArgument(f"Quantity must be an integer, got {quantity!r}")
    if quantity <= 0:
        raise InvalidArgument("Quantity must be positive")
    return quantity


class Cart:
    """Coordinates cart items and the discount rules registered against them.

    Items keep first-insertion order and there is at most one item per
    product. Rules are deduplicated by ``unique_key``; the first registration
    wins. Discounts are only evaluated when ``apply_discounts`` is called.
    """

    def __init__(self, audit: Optional[AuditLogger] = None) -> None:
        self._items: List[CartItem] = []
        self._rules: Dict[DiscountKey, DiscountRule] = {}
        self._audit = audit

    @property
    def items(self) -> Tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def discounts(self) -> Tuple[DiscountRule, ...]:
        return tuple(self._rules.values())

    def find_item(self, product: Product) -> Optional[CartItem]:
        for item in self._items:
            if item.product == product:
                return item
        return None

    def add_item(self, product: Product, quantity: int = 1) -> CartItem:
        if not isinstance(product, Product):
            raise InvalidArgument(f"Expected a Product, got {product!r}")
        quantity = _require_quantity(quantity)

        item = self.find_item(product)
        if item is None:
            item = CartItem(product, quantity)
            self._items.append(item)
            logger.debug("Added %s x%d", product.name, quantity)
            return item

        item.quantity += quantity
        logger.debug("Merged %s, quantity now %d", product.name, item.quantity)
        return item

    def add_discount(self, *rules: DiscountRule) -> None:
        for rule in rules:
            if not isinstance(rule, DiscountRule):
                raise InvalidArgument(f"Expected a DiscountRule, got {rule!r}")

        for rule in rules:
            key = rule.unique_key
            if key in self._rules:
                logger.debug("Discount %r already registered, ignoring duplicate", rule.name)
                if self._audit is not None:
                    self._audit.record_duplicate(rule)
                continue
            self._rules[key] = rule

    def apply_discounts(self) -> None:
        """Evaluate every registered rule against every item.

        Items are visited in insertion order and rules in registration order.
        Rules that set an amount overwrite it, so when two of them match the
        same item the later-registered rule decides the discount.
        """
        items = self.items
        rules = self.discounts
        for item in items:
            for rule in rules:
                if not rule.apply(item, items):
                    continue
                item.record_discount(rule)
                if self._audit is not None:
                    self._audit.record_applied(rule, item)

        logger.info("Applied %d discount(s) to %d item(s), total=%s", len(rules), len(items), self.total)

    @property
    def total(self) -> Decimal:
        return sum((item.payable_price for item in self._items), Decimal("0"))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self.items)

    def __repr__(self) -> str:
        return f"Cart(items={len(self._items)}, discounts={len(self._rules)})"
