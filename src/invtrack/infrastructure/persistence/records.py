"""Mapping between domain objects and flat JSON-compatible records.

Both stores use the same record shape: money as a decimal string plus a
currency, dates and timestamps as ISO-8601 strings.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from invtrack.domain.exceptions import PersistenceError, ValidationError
from invtrack.domain.model.price_history import PriceHistoryEntry
from invtrack.domain.model.product import DEFAULT_CATEGORY, DEFAULT_UNIT, Product
from invtrack.domain.model.value_objects import Money, Quantity


_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp as written by this package or by the table API.

    Fractional seconds of any length are cut or padded to microseconds and a
    trailing ``Z`` is read as UTC.
    """
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


def product_to_record(product: Product) -> dict:
    return {
        "id": product.id,
        "code": product.code,
        "name": product.name,
        "unit": product.unit,
        "category": product.category,
        "quantity": product.quantity.value,
        "price": str(product.price.amount),
        "currency": product.price.currency,
        "created_at": product.created_at.isoformat(),
    }


def record_to_product(raw: dict) -> Product:
    try:
        return Product(
            id=raw["id"],
            code=raw["code"],
            name=raw["name"],
            unit=raw.get("unit") or DEFAULT_UNIT,
            category=raw.get("category") or DEFAULT_CATEGORY,
            quantity=Quantity(int(raw.get("quantity") or 0)),
            price=Money(Decimal(str(raw.get("price") or "0")), raw.get("currency", "USD")),
            created_at=parse_timestamp(raw["created_at"]),
        )
    except (
        AttributeError, KeyError, TypeError, ValueError, InvalidOperation, ValidationError
    ) as exc:
        raise PersistenceError(f"Malformed product record: {raw!r}") from exc


def patch_to_record(patch: dict) -> dict:
    """Serialise a partial product update field by field."""
    record: dict = {}
    for name, value in patch.items():
        if isinstance(value, Money):
            record["price"] = str(value.amount)
            record["currency"] = value.currency
        elif isinstance(value, Quantity):
            record[name] = value.value
        else:
            record[name] = value
    return record


def entry_to_record(entry: PriceHistoryEntry) -> dict:
    return {
        "id": entry.id,
        "product_id": entry.product_id,
        "price": str(entry.price.amount),
        "currency": entry.price.currency,
        "date": entry.date.isoformat(),
    }


def record_to_entry(raw: dict) -> PriceHistoryEntry:
    try:
        return PriceHistoryEntry(
            id=raw["id"],
            product_id=raw["product_id"],
            price=Money(Decimal(str(raw["price"])), raw.get("currency", "USD")),
            date=date.fromisoformat(raw["date"][:10]),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation, ValidationError) as exc:
        raise PersistenceError(f"Malformed price history record: {raw!r}") from exc
