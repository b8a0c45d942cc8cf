"""Application service: the product repository.

Holds one session's view of the catalog (products plus every price
history entry) and owns the create/update/delete use cases. Each
mutating operation follows the same two-phase shape:

  Phase 1 — compute: build the new product and ledger state without
            touching the in-memory collections.
  Phase 2 — write, then commit: send the changes to the store and adopt
            the computed state only once every write has succeeded.

A store failure therefore propagates to the caller with the in-memory
state exactly as it was before the call.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import date, datetime, timezone

from invtrack.application.dto import ProductDraft
from invtrack.domain.exceptions import EntityNotFoundError, PersistenceError, ValidationError
from invtrack.domain.model.price_history import PriceHistoryEntry
from invtrack.domain.model.product import DEFAULT_CATEGORY, DEFAULT_UNIT, Product
from invtrack.domain.model.value_objects import Money, Quantity
from invtrack.domain.repository.catalog_store import CatalogStore
from invtrack.domain.service import price_ledger
from invtrack.domain.service.code_generator import CategoryCodePolicy, CodePolicy
from invtrack.domain.service.price_ledger import PriceLedgerPolicy, UpsertOnDatePolicy
from invtrack.domain.service.product_search import search as search_products

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_product_id() -> str:
    return uuid.uuid4().hex


class ProductRepository:

    def __init__(
        self,
        store: CatalogStore,
        code_policy: CodePolicy | None = None,
        ledger_policy: PriceLedgerPolicy | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_product_id,
    ) -> None:
        self._store = store
        self._code_policy = code_policy or CategoryCodePolicy()
        self._ledger_policy = ledger_policy or UpsertOnDatePolicy()
        self._clock = clock
        self._id_factory = id_factory
        self._products: list[Product] = []
        self._entries: list[PriceHistoryEntry] = []

    # --- Loading --------------------------------------------------------------

    def load(self) -> None:
        """Replace the in-memory state with the store's contents.

        A product whose stored price disagrees with its ledger takes the
        ledger's latest price. Products without any ledger entries keep
        their stored price.
        """
        products, entries = self._store.load_all()
        for index, product in enumerate(products):
            ledger_price = price_ledger.latest_price(entries, product.id)
            if ledger_price is not None and ledger_price != product.price:
                logger.warning(
                    "Product %s stored price %s differs from ledger price %s; using ledger",
                    product.code, product.price, ledger_price,
                )
                products[index] = product.with_changes(price=ledger_price)
        self._products = list(products)
        self._entries = list(entries)
        logger.debug(
            "Loaded %d products and %d price entries",
            len(self._products), len(self._entries),
        )

    def close(self) -> None:
        """Release the store's connection. The repository is unusable afterwards."""
        self._store.close()

    # --- Queries --------------------------------------------------------------

    def list_all(self) -> list[Product]:
        return list(self._products)

    def get(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def get_by_code(self, code: str) -> Product | None:
        for product in self._products:
            if product.code.lower() == code.lower():
                return product
        return None

    def search(self, query: str | None) -> list[Product]:
        return search_products(self._products, query)

    def price_history_of(self, product_id: str) -> list[PriceHistoryEntry]:
        return price_ledger.history(self._entries, product_id)

    def latest_price(self, product_id: str) -> Money:
        """Ledger price of a product, falling back to its stored price.

        Raises EntityNotFoundError for an unknown product.
        """
        product = self._require(product_id)
        ledger_price = price_ledger.latest_price(self._entries, product_id)
        return ledger_price if ledger_price is not None else product.price

    def next_code(self, category: str) -> str:
        """Preview the code the next product in *category* would get."""
        return self._code_policy.next_code(self._products, category)

    # --- Commands -------------------------------------------------------------

    def create(self, draft: ProductDraft) -> Product:
        """Add a new product with a one-entry price ledger dated today."""
        if not draft.name or not draft.name.strip():
            raise ValidationError("Product name is required")

        now = self._clock()
        product = Product(
            id=self._id_factory(),
            code=self._code_policy.next_code(self._products, draft.category),
            name=draft.name.strip(),
            price=Money.of(draft.price),
            quantity=Quantity(draft.quantity),
            unit=draft.unit.strip() or DEFAULT_UNIT,
            category=draft.category.strip() or DEFAULT_CATEGORY,
            created_at=now,
        )
        entries, seed = self._ledger_policy.record_price(
            self._entries, product.id, product.price, now.date()
        )

        self._store.insert_product(product)
        try:
            self._store.insert_or_update_price_entry(seed)
        except PersistenceError:
            # Undo the insert so the code is free again for a retry.
            try:
                self._store.remove_product(product.id)
            except PersistenceError:
                logger.warning(
                    "Could not remove product %s after its seed price write failed",
                    product.code, exc_info=True,
                )
            raise

        self._products.append(product)
        self._entries = entries
        logger.info("Created product %s '%s' at %s", product.code, product.name, product.price)
        return product

    def update(self, product: Product) -> Product:
        """Persist the mutable fields of *product*.

        A price change adds (or, on the same day, replaces) one ledger
        entry. ``code`` and ``created_at`` always keep their stored values.
        """
        current = self._require(product.id)
        updated = current.with_changes(
            name=product.name,
            unit=product.unit,
            category=product.category,
            quantity=product.quantity,
            price=product.price,
        )

        entries = self._entries
        entry = None
        if updated.price != current.price:
            entries, entry = self._ledger_policy.record_price(
                self._entries, updated.id, updated.price, self._today()
            )

        patch = {
            "name": updated.name,
            "unit": updated.unit,
            "category": updated.category,
            "quantity": updated.quantity,
            "price": updated.price,
        }
        self._store.mutate_product(updated.id, patch)
        if entry is not None:
            self._store.insert_or_update_price_entry(entry)

        self._products = [updated if p.id == updated.id else p for p in self._products]
        self._entries = entries
        if entry is not None:
            logger.info(
                "Updated product %s; price %s -> %s (effective %s)",
                updated.code, current.price, updated.price, entry.date.isoformat(),
            )
        else:
            changed = sorted(current.diff(updated))
            logger.info("Updated product %s (%s)", updated.code, ", ".join(changed) or "no changes")
        return updated

    def delete(self, product_id: str) -> None:
        """Remove a product and its whole price ledger.

        Deleting an unknown product does nothing.
        """
        product = self.get(product_id)
        if product is None:
            logger.warning("Delete ignored: product %s not found", product_id)
            return

        self._store.remove_price_entries(product_id)
        self._store.remove_product(product_id)

        self._products = [p for p in self._products if p.id != product_id]
        self._entries = [e for e in self._entries if e.product_id != product_id]
        logger.info("Deleted product %s '%s'", product.code, product.name)

    # --- Internal helpers -----------------------------------------------------

    def _require(self, product_id: str) -> Product:
        product = self.get(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product

    def _today(self) -> date:
        return self._clock().date()
