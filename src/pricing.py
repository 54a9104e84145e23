"""Read-only price breakdowns of a cart for display and export."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Tuple

from cart import Cart, CartItem


@dataclass(frozen=True)
class ItemBreakdown:
    product_name: str
    unit_price: Decimal
    quantity: int
    discount_amount: Decimal
    payable_price: Decimal
    applied_discounts: Tuple[str, ...] = ()

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def as_dict(self) -> Dict[str, Any]:
        return {
            "product": self.product_name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "discount": str(self.discount_amount),
            "applied_discounts": list(self.applied_discounts),
            "payable_price": str(self.payable_price),
        }


@dataclass(frozen=True)
class CartBreakdown:
    items: Tuple[ItemBreakdown, ...]
    subtotal: Decimal
    discount: Decimal
    total: Decimal

    def as_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.as_dict() for item in self.items],
            "subtotal": str(self.subtotal),
            "discount": str(self.discount),
            "total": str(self.total),
        }


def _item_breakdown(item: CartItem) -> ItemBreakdown:
    return ItemBreakdown(
        product_name=item.product.name,
        unit_price=item.product.unit_price,
        quantity=item.quantity,
        discount_amount=item.discount_amount,
        payable_price=item.payable_price,
        applied_discounts=tuple(item.applied_discount_names),
    )


def summarize(cart: Cart) -> CartBreakdown:
    """Snapshot the cart's current state. Does not evaluate discounts."""
    items = tuple(_item_breakdown(item) for item in cart.items)
    return CartBreakdown(
        items=items,
        subtotal=sum((item.subtotal for item in items), Decimal("0")),
        discount=sum((item.discount_amount for item in items), Decimal("0")),
        total=cart.total,
    )
