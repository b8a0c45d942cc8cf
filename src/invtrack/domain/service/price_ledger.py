"""Domain service: the price ledger.

A product's ledger is the set of ``PriceHistoryEntry`` records carrying
its ``product_id``. Ordered by date, the entries form the product's
price timeline and the last one is the current price.

Everything here is a pure function of its inputs: entry sequences are
never mutated, so a caller can compute a new ledger, persist the one
entry that changed, and only then adopt the result.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import date

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.price_history import PriceHistoryEntry
from invtrack.domain.model.value_objects import Money


def _new_entry_id() -> str:
    return uuid.uuid4().hex


class PriceLedgerPolicy(ABC):

    name: str

    def __init__(self, id_factory: Callable[[], str] = _new_entry_id) -> None:
        self._id_factory = id_factory

    @abstractmethod
    def record_price(
        self,
        entries: Sequence[PriceHistoryEntry],
        product_id: str,
        new_price: Money,
        effective_date: date,
    ) -> tuple[list[PriceHistoryEntry], PriceHistoryEntry]:
        """Return ``(updated_entries, entry_used)``.

        ``entry_used`` is the single entry the caller has to persist.
        """

    def _append(
        self,
        entries: Sequence[PriceHistoryEntry],
        product_id: str,
        new_price: Money,
        effective_date: date,
    ) -> tuple[list[PriceHistoryEntry], PriceHistoryEntry]:
        entry = PriceHistoryEntry(
            id=self._id_factory(),
            product_id=product_id,
            price=new_price,
            date=effective_date,
        )
        return [*entries, entry], entry


class UpsertOnDatePolicy(PriceLedgerPolicy):
    """At most one entry per product and calendar day; the last write wins."""

    name = "upsert"

    def record_price(self, entries, product_id, new_price, effective_date):
        for index, entry in enumerate(entries):
            if entry.product_id == product_id and entry.date == effective_date:
                replaced = PriceHistoryEntry(
                    id=entry.id,
                    product_id=product_id,
                    price=new_price,
                    date=effective_date,
                )
                updated = list(entries)
                updated[index] = replaced
                return updated, replaced
        return self._append(entries, product_id, new_price, effective_date)


class AppendOnlyPolicy(PriceLedgerPolicy):
    """Every price change adds an entry, even several on the same day."""

    name = "append"

    def record_price(self, entries, product_id, new_price, effective_date):
        return self._append(entries, product_id, new_price, effective_date)


def ledger_policy(name: str) -> PriceLedgerPolicy:
    """Resolve a configured policy name to a policy instance."""
    policies = {
        UpsertOnDatePolicy.name: UpsertOnDatePolicy,
        AppendOnlyPolicy.name: AppendOnlyPolicy,
    }
    try:
        return policies[name.strip().lower()]()
    except KeyError:
        raise ValidationError(
            f"Unknown ledger policy '{name}' (expected one of: {', '.join(policies)})"
        ) from None


# --- Queries ------------------------------------------------------------------


def history(
    entries: Sequence[PriceHistoryEntry], product_id: str
) -> list[PriceHistoryEntry]:
    """Entries of one product, oldest first.

    The sort is stable, so same-day entries of an append-only ledger keep
    the order in which they were recorded.
    """
    return sorted(
        (e for e in entries if e.product_id == product_id),
        key=lambda e: e.date,
    )


def latest_price(
    entries: Sequence[PriceHistoryEntry], product_id: str
) -> Money | None:
    """The current price according to the ledger, or None if it is empty."""
    timeline = history(entries, product_id)
    if not timeline:
        return None
    return timeline[-1].price
