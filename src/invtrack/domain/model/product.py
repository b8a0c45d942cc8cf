"""Product aggregate.

A product's identity is its opaque ``id``; its ``code`` is the
human-readable handle shown in listings. Both are assigned once and
never change. Price changes are legitimate mutations, but they must go
through the product repository so the price ledger stays in step.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.value_objects import Money, Quantity

DEFAULT_UNIT = "piece"
DEFAULT_CATEGORY = "Uncategorized"

# Fields an update may change. ``id``, ``code`` and ``created_at`` are fixed.
MUTABLE_FIELDS = ("name", "unit", "category", "quantity", "price")


@dataclass
class Product:
    """A product in the catalog."""

    id: str
    code: str
    name: str
    price: Money
    quantity: Quantity = field(default_factory=lambda: Quantity(0))
    unit: str = DEFAULT_UNIT
    category: str = DEFAULT_CATEGORY
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")

    def with_changes(self, **changes) -> Product:
        """Return a copy with the given mutable fields replaced."""
        unknown = set(changes) - set(MUTABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot change immutable product field(s): {', '.join(sorted(unknown))}"
            )
        return replace(self, **changes)

    def diff(self, other: Product) -> dict:
        """Mutable fields whose value in *other* differs from this product."""
        return {
            name: getattr(other, name)
            for name in MUTABLE_FIELDS
            if getattr(other, name) != getattr(self, name)
        }
