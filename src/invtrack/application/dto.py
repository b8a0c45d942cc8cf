"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from invtrack.domain.model.price_history import PriceHistoryEntry
from invtrack.domain.model.product import DEFAULT_CATEGORY, DEFAULT_UNIT, Product


@dataclass(frozen=True)
class ProductDraft:
    """Input: the user-supplied fields of a product that does not exist yet."""

    name: str
    price: str
    quantity: int = 0
    unit: str = DEFAULT_UNIT
    category: str = DEFAULT_CATEGORY


@dataclass(frozen=True)
class ProductDTO:
    """Output: a product as displayed to the user."""

    id: str
    code: str
    name: str
    category: str
    unit: str
    quantity: int
    price: str  # formatted, e.g. "$15.00"
    created_at: str

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            code=product.code,
            name=product.name,
            category=product.category,
            unit=product.unit,
            quantity=product.quantity.value,
            price=str(product.price),
            created_at=product.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class PriceHistoryLineDTO:
    """Output: one row of a product's price timeline."""

    date: str
    price: str

    @staticmethod
    def from_entry(entry: PriceHistoryEntry) -> PriceHistoryLineDTO:
        return PriceHistoryLineDTO(date=entry.date.isoformat(), price=str(entry.price))
