"""Remote-table implementation of CatalogStore.

Talks to a PostgREST-style table API (as exposed by hosted
backend-as-a-service platforms) with two tables, ``product`` and
``price_history``, whose columns match the JSON records in
``records.py``.

There is no retry logic: a transport error or a non-2xx response is
raised as ``PersistenceError`` and the caller decides what to do.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from invtrack.domain.exceptions import PersistenceError
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

PRODUCT_TABLE = "product"
PRICE_HISTORY_TABLE = "price_history"


class RestCatalogStore(CatalogStore):

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        if client is None:
            client = httpx.Client(timeout=httpx.Timeout(timeout))
        client.base_url = base_url.rstrip("/") + "/"
        client.headers.update(headers)
        self._client = client

    def close(self) -> None:
        self._client.close()

    # --- CatalogStore interface -----------------------------------------------

    def load_all(self) -> tuple[list[Product], list[PriceHistoryEntry]]:
        products = self._request(
            "GET", PRODUCT_TABLE, params={"select": "*", "order": "code"}
        )
        entries = self._request(
            "GET", PRICE_HISTORY_TABLE, params={"select": "*", "order": "date"}
        )
        return (
            [record_to_product(raw) for raw in products or []],
            [record_to_entry(raw) for raw in entries or []],
        )

    def insert_product(self, product: Product) -> None:
        self._request("POST", PRODUCT_TABLE, json=[product_to_record(product)])

    def mutate_product(self, product_id: str, patch: dict) -> None:
        self._request(
            "PATCH",
            PRODUCT_TABLE,
            params={"id": f"eq.{product_id}"},
            json=patch_to_record(patch),
        )

    def remove_product(self, product_id: str) -> None:
        self._request("DELETE", PRODUCT_TABLE, params={"id": f"eq.{product_id}"})

    def insert_or_update_price_entry(self, entry: PriceHistoryEntry) -> None:
        self._request(
            "POST",
            PRICE_HISTORY_TABLE,
            json=[entry_to_record(entry)],
            headers={"Prefer": "resolution=merge-duplicates"},
        )

    def remove_price_entries(self, product_id: str) -> None:
        self._request(
            "DELETE", PRICE_HISTORY_TABLE, params={"product_id": f"eq.{product_id}"}
        )

    # --- HTTP helpers ---------------------------------------------------------

    def _request(self, method: str, table: str, **kwargs: Any) -> Any:
        logger.debug("%s %s %s", method, table, kwargs.get("params", ""))
        try:
            response = self._client.request(method, table, **kwargs)
        except httpx.HTTPError as exc:
            raise PersistenceError(
                f"{method} {table} failed: {type(exc).__name__}"
            ) from exc

        if response.status_code >= 400:
            raise PersistenceError(
                f"{method} {table} failed with HTTP {response.status_code}: "
                f"{self._error_message(response)}"
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise PersistenceError(f"{method} {table} returned invalid JSON") from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict):
            return str(body.get("message") or body)
        return str(body)
