"""Domain service: catalog search."""

from __future__ import annotations

from collections.abc import Iterable

from invtrack.domain.model.product import Product


def search(products: Iterable[Product], query: str | None) -> list[Product]:
    """Case-insensitive substring match on name, code or category.

    A blank query matches everything. Results keep the input order.
    """
    products = list(products)
    if not query or not query.strip():
        return products

    needle = query.casefold()
    return [
        p
        for p in products
        if needle in p.name.casefold()
        or needle in p.code.casefold()
        or needle in p.category.casefold()
    ]
