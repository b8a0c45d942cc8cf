"""Abstract store for products and their price ledgers.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON files, a remote table
service) live in the infrastructure layer.

Every method may fail; implementations raise ``PersistenceError`` and
leave it to the caller to decide what that means for in-memory state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from invtrack.domain.model.price_history import PriceHistoryEntry
from invtrack.domain.model.product import Product


class CatalogStore(ABC):

    @abstractmethod
    def load_all(self) -> tuple[list[Product], list[PriceHistoryEntry]]:
        """Return every stored product and every price history entry."""

    @abstractmethod
    def insert_product(self, product: Product) -> None:
        """Persist a new product."""

    @abstractmethod
    def mutate_product(self, product_id: str, patch: dict) -> None:
        """Apply a partial update (field name -> new value) to a product."""

    @abstractmethod
    def remove_product(self, product_id: str) -> None:
        """Delete a product. Its price entries are removed separately."""

    @abstractmethod
    def insert_or_update_price_entry(self, entry: PriceHistoryEntry) -> None:
        """Insert a price entry, or replace the stored entry with the same id."""

    @abstractmethod
    def remove_price_entries(self, product_id: str) -> None:
        """Delete every price entry of a product."""

    def close(self) -> None:
        """Release any connection the store holds. Nothing to do by default."""
