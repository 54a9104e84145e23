"""Build a catalog, cart, and discount rules from plain data or a JSON file."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from audit import AuditLogger
from cart import Cart
from catalog import CatalogService, Product
from errors import InvalidArgument
from promotions import BundleFreeItem, DiscountRule, TieredFreeUnits


@dataclass
class Scenario:
    catalog: CatalogService
    cart: Cart
    audit: AuditLogger


def _field(entry: Mapping[str, Any], key: str, context: str) -> Any:
    if not isinstance(entry, Mapping):
        raise InvalidArgument(f"{context} must be an object, got {entry!r}")
    if key not in entry:
        raise InvalidArgument(f"{context} is missing '{key}'")
    return entry[key]


def _section(data: Mapping[str, Any], key: str) -> List[Any]:
    entries = data.get(key, [])
    if not isinstance(entries, list):
        raise InvalidArgument(f"Scenario '{key}' must be a list, got {entries!r}")
    return entries


def _lookup(catalog: CatalogService, name: Any) -> Product:
    if not isinstance(name, str):
        raise InvalidArgument(f"Product reference must be a name, got {name!r}")
    try:
        return catalog.get(name)
    except KeyError as exc:
        raise InvalidArgument(f"Unknown product: {name}") from exc


def _lookup_all(catalog: CatalogService, names: Any, context: str) -> List[Product]:
    if isinstance(names, str) or not isinstance(names, list):
        raise InvalidArgument(f"{context} must be a list of product names")
    return [_lookup(catalog, name) for name in names]


def _tiered(entry: Mapping[str, Any], catalog: CatalogService) -> DiscountRule:
    context = "tiered_free_units discount"
    return TieredFreeUnits(
        _field(entry, "name", context),
        _lookup(catalog, _field(entry, "product", context)),
        _field(entry, "buy", context),
        _field(entry, "free", context),
    )


def _bundle(entry: Mapping[str, Any], catalog: CatalogService) -> DiscountRule:
    context = "bundle_free_item discount"
    return BundleFreeItem(
        _field(entry, "name", context),
        _lookup_all(catalog, _field(entry, "need", context), f"{context} 'need'"),
        _lookup_all(catalog, _field(entry, "free", context), f"{context} 'free'"),
    )


RULE_BUILDERS: Dict[str, Callable[[Mapping[str, Any], CatalogService], DiscountRule]] = {
    TieredFreeUnits.kind: _tiered,
    BundleFreeItem.kind: _bundle,
}


def build_scenario(data: Mapping[str, Any], audit: Optional[AuditLogger] = None) -> Scenario:
    if not isinstance(data, Mapping):
        raise InvalidArgument("Scenario must be an object")

    if audit is None:
        audit = AuditLogger()
    catalog = CatalogService()
    for entry in _section(data, "products"):
        catalog.add(Product(_field(entry, "name", "product"), _field(entry, "price", "product")))

    cart = Cart(audit=audit)
    for entry in _section(data, "items"):
        product = _lookup(catalog, _field(entry, "product", "item"))
        cart.add_item(product, entry.get("quantity", 1))

    rules = []
    for entry in _section(data, "discounts"):
        kind = _field(entry, "type", "discount")
        builder = RULE_BUILDERS.get(kind) if isinstance(kind, str) else None
        if builder is None:
            raise InvalidArgument(f"Unknown discount type: {kind}")
        rules.append(builder(entry, catalog))
    cart.add_discount(*rules)

    return Scenario(catalog=catalog, cart=cart, audit=audit)


def load_scenario(path: Union[str, Path], audit: Optional[AuditLogger] = None) -> Scenario:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise InvalidArgument(f"{path} is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidArgument(f"{path} is not valid JSON: {exc}") from exc
    return build_scenario(data, audit=audit)
