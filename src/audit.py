"""Record of what discount evaluation did to a cart."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from cart import CartItem
    from promotions import DiscountKey, DiscountRule

APPLIED = "discount_applied"
SKIPPED_DUPLICATE = "discount_skipped_duplicate"


@dataclass(frozen=True)
class AuditEntry:
    event: str
    key: DiscountKey
    rule_name: str
    at: datetime
    product_name: Optional[str] = None
    discount: Optional[Decimal] = None

    @property
    def details(self) -> str:
        if self.event == APPLIED:
            return f"{self.rule_name} on {self.product_name}: discount {self.discount}"
        return f"{self.rule_name} ignored, key {tuple(self.key)} already registered"


class AuditLogger:
    """Collects one entry per rule application and per dropped duplicate."""

    def __init__(self) -> None:
        self._entries: List[AuditEntry] = []

    def record_applied(self, rule: DiscountRule, item: CartItem) -> AuditEntry:
        return self._append(
            AuditEntry(
                event=APPLIED,
                key=rule.unique_key,
                rule_name=rule.name,
                at=datetime.now(timezone.utc),
                product_name=item.product.name,
                discount=item.discount_amount,
            )
        )

    def record_duplicate(self, rule: DiscountRule) -> AuditEntry:
        return self._append(
            AuditEntry(event=SKIPPED_DUPLICATE, key=rule.unique_key, rule_name=rule.name, at=datetime.now(timezone.utc))
        )

    def _append(self, entry: AuditEntry) -> AuditEntry:
        self._entries.append(entry)
        return entry

    def entries(self, event: Optional[str] = None) -> List[AuditEntry]:
        return [entry for entry in self._entries if event is None or entry.event == event]

    def latest_discounts(self) -> Dict[DiscountKey, Dict[str, Decimal]]:
        """Most recent amount each rule set, per product name."""
        latest: Dict[DiscountKey, Dict[str, Decimal]] = {}
        for entry in self.entries(APPLIED):
            latest.setdefault(entry.key, {})[entry.product_name] = entry.discount
        return latest
