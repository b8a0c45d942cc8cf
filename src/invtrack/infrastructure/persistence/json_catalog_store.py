"""JSON-file-backed implementation of CatalogStore.

Products and price history entries live in two files inside one data
directory. This is the local "demo mode" backend: no server, state
survives between CLI invocations.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from invtrack.domain.exceptions import DuplicateCodeError, PersistenceError
from invtrack.domain.model.price_history import PriceHistoryEntry
from invtrack.domain.model.product import Product
from invtrack.domain.repository.catalog_store import CatalogStore
from invtrack.infrastructure.persistence.records import (
    entry_to_record,
    patch_to_record,
    product_to_record,
    record_to_entry,
    record_to_product,
)

logger = logging.getLogger(__name__)

PRODUCTS_FILE = "products.json"
PRICE_HISTORY_FILE = "price_history.json"


class JsonCatalogStore(CatalogStore):

    def __init__(self, directory: Path) -> None:
        self._products_path = directory / PRODUCTS_FILE
        self._history_path = directory / PRICE_HISTORY_FILE
        self._ensure_file(self._products_path)
        self._ensure_file(self._history_path)

    # --- CatalogStore interface -----------------------------------------------

    def load_all(self) -> tuple[list[Product], list[PriceHistoryEntry]]:
        products = [record_to_product(raw) for raw in self._load_raw(self._products_path)]
        entries = [record_to_entry(raw) for raw in self._load_raw(self._history_path)]
        return products, entries

    def insert_product(self, product: Product) -> None:
        records = self._load_raw(self._products_path)
        for raw in records:
            if raw["id"] == product.id:
                raise PersistenceError(f"Product with ID '{product.id}' already stored")
            if raw["code"] == product.code:
                raise DuplicateCodeError(f"Product code '{product.code}' is already in use")
        records.append(product_to_record(product))
        self._persist_raw(self._products_path, records)
        logger.debug("Inserted product %s into %s", product.code, self._products_path)

    def mutate_product(self, product_id: str, patch: dict) -> None:
        records = self._load_raw(self._products_path)
        for raw in records:
            if raw["id"] == product_id:
                raw.update(patch_to_record(patch))
                break
        else:
            raise PersistenceError(f"Product with ID '{product_id}' is not stored")
        self._persist_raw(self._products_path, records)
        logger.debug("Patched product %s: %s", product_id, sorted(patch))

    def remove_product(self, product_id: str) -> None:
        records = self._load_raw(self._products_path)
        kept = [raw for raw in records if raw["id"] != product_id]
        self._persist_raw(self._products_path, kept)
        logger.debug("Removed product %s", product_id)

    def insert_or_update_price_entry(self, entry: PriceHistoryEntry) -> None:
        records = self._load_raw(self._history_path)
        # Upsert: replace if exists, otherwise append
        replaced = False
        for i, raw in enumerate(records):
            if raw["id"] == entry.id:
                records[i] = entry_to_record(entry)
                replaced = True
                break
        if not replaced:
            records.append(entry_to_record(entry))
        self._persist_raw(self._history_path, records)
        logger.debug(
            "%s price entry %s for product %s",
            "Replaced" if replaced else "Inserted", entry.id, entry.product_id,
        )

    def remove_price_entries(self, product_id: str) -> None:
        records = self._load_raw(self._history_path)
        kept = [raw for raw in records if raw["product_id"] != product_id]
        self._persist_raw(self._history_path, kept)
        logger.debug(
            "Removed %d price entries of product %s", len(records) - len(kept), product_id
        )

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _load_raw(path: Path) -> list[dict]:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Cannot read {path}: {exc}") from exc

    @staticmethod
    def _persist_raw(path: Path, records: list[dict]) -> None:
        try:
            path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot write {path}: {exc}") from exc

    @staticmethod
    def _ensure_file(path: Path) -> None:
        if path.exists():
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot create {path}: {exc}") from exc
