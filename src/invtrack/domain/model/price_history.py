"""PriceHistoryEntry — one dated price record in a product's ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from invtrack.domain.model.value_objects import Money


@dataclass(frozen=True)
class PriceHistoryEntry:
    """The price of a product effective from ``date`` (a calendar day).

    Entries are immutable; the ledger replaces an entry rather than
    editing it.
    """

    id: str
    product_id: str
    price: Money
    date: date
