"""In-memory fake store for testing.

Implements the same abstract interface as the JSON and REST stores but
keeps everything in dicts. No file I/O, no network.
"""

from __future__ import annotations

from invtrack.domain.exceptions import PersistenceError
from invtrack.domain.model.price_history import PriceHistoryEntry
from invtrack.domain.model.product import Product
from invtrack.domain.repository.catalog_store import CatalogStore


class FakeCatalogStore(CatalogStore):

    def __init__(
        self,
        products: list[Product] | None = None,
        entries: list[PriceHistoryEntry] | None = None,
    ) -> None:
        self.products: dict[str, Product] = {p.id: p for p in products or []}
        self.entries: dict[str, PriceHistoryEntry] = {e.id: e for e in entries or []}
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self.closed = False

    def load_all(self) -> tuple[list[Product], list[PriceHistoryEntry]]:
        self._call("load_all")
        return list(self.products.values()), list(self.entries.values())

    def insert_product(self, product: Product) -> None:
        self._call("insert_product")
        self.products[product.id] = product

    def mutate_product(self, product_id: str, patch: dict) -> None:
        self._call("mutate_product")
        self.products[product_id] = self.products[product_id].with_changes(**patch)

    def remove_product(self, product_id: str) -> None:
        self._call("remove_product")
        self.products.pop(product_id, None)

    def insert_or_update_price_entry(self, entry: PriceHistoryEntry) -> None:
        self._call("insert_or_update_price_entry")
        self.entries[entry.id] = entry

    def remove_price_entries(self, product_id: str) -> None:
        self._call("remove_price_entries")
        self.entries = {
            k: e for k, e in self.entries.items() if e.product_id != product_id
        }

    def close(self) -> None:
        self.closed = True

    def _call(self, name: str) -> None:
        if name in self.fail_on:
            raise PersistenceError(f"{name} failed")
        self.calls.append(name)
