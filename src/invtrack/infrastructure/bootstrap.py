"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from invtrack.application.product_repository import ProductRepository
from invtrack.domain.repository.catalog_store import CatalogStore
from invtrack.domain.service.code_generator import code_policy
from invtrack.domain.service.price_ledger import ledger_policy
from invtrack.infrastructure.config import Config
from invtrack.infrastructure.persistence.json_catalog_store import JsonCatalogStore
from invtrack.infrastructure.persistence.rest_catalog_store import RestCatalogStore


def catalog_store(config: Config) -> CatalogStore:
    if config.backend == "rest":
        return RestCatalogStore(
            config.rest_url,  # type: ignore[arg-type]
            config.rest_key,  # type: ignore[arg-type]
            timeout=config.rest_timeout,
        )
    return JsonCatalogStore(config.data_dir)


def product_repository(config: Config) -> ProductRepository:
    """Build a repository for one session and load the catalog into it."""
    repo = ProductRepository(
        store=catalog_store(config),
        code_policy=code_policy(config.code_policy),
        ledger_policy=ledger_policy(config.ledger_policy),
    )
    try:
        repo.load()
    except Exception:
        repo.close()
        raise
    return repo
