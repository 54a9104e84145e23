from decimal import Decimal

import pytest

from cart import Cart
from pricing import CartBreakdown, summarize
from promotions import BundleFreeItem, TieredFreeUnits


@pytest.fixture
def evaluated_cart(apple, red_shirt, white_shirt, black_shirt) -> Cart:
    cart = Cart()
    cart.add_item(apple, 3)
    cart.add_item(red_shirt, 1)
    cart.add_item(white_shirt, 1)
    cart.add_item(black_shirt, 2)
    cart.add_discount(
        TieredFreeUnits("Buy two, get one free", apple, 2, 1),
        BundleFreeItem("Shirt bundle", [red_shirt, white_shirt], [black_shirt]),
    )
    cart.apply_discounts()
    return cart


def test_summary_totals_agree_with_cart(evaluated_cart):
    summary = summarize(evaluated_cart)
    assert isinstance(summary, CartBreakdown)
    assert summary.subtotal == Decimal("1700")
    assert summary.discount == Decimal("500")
    assert summary.total == evaluated_cart.total == Decimal("1200")


def test_item_rows_follow_cart_order(evaluated_cart):
    rows = summarize(evaluated_cart).items
    assert [row.product_name for row in rows] == ["Apple", "Red Shirt", "White Shirt", "Black Shirt"]
    apple_row, _, _, black_row = rows
    assert apple_row.applied_discounts == ("Buy two, get one free",)
    assert apple_row.payable_price == Decimal("400")
    assert black_row.applied_discounts == ("Shirt bundle",)
    assert black_row.discount_amount == Decimal("300")
    assert black_row.subtotal == Decimal("600")


def test_summary_is_a_snapshot(evaluated_cart, apple):
    summary = summarize(evaluated_cart)
    evaluated_cart.add_item(apple, 3)
    assert summary.items[0].quantity == 3
    with pytest.raises(AttributeError):
        summary.total = Decimal("0")


def test_summary_does_not_evaluate(apple):
    cart = Cart()
    cart.add_item(apple, 3)
    cart.add_discount(TieredFreeUnits("Buy two, get one free", apple, 2, 1))
    summary = summarize(cart)
    assert summary.discount == 0
    assert summary.items[0].applied_discounts == ()


def test_as_dict_renders_money_as_strings(evaluated_cart):
    data = summarize(evaluated_cart).as_dict()
    assert data["total"] == "1200"
    assert data["items"][0] == {
        "product": "Apple",
        "unit_price": "200",
        "quantity": 3,
        "discount": "200",
        "applied_discounts": ["Buy two, get one free"],
        "payable_price": "400",
    }


def test_empty_cart_summary():
    summary = summarize(Cart())
    assert summary.items == ()
    assert summary.total == summary.subtotal == summary.discount == 0
