"""Errors raised by the cart and discount modules."""
from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when a product, cart, or rule is given malformed input."""
