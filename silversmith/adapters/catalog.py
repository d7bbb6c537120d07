"""
Catalog adapters.

ModelCatalogBackend builds the snapshot from Product/ProductVariant.
StaticCatalogBackend serves a fixed list of entries (fixtures, imports,
or a catalog kept outside the database).

Configuration:
    SILVERSMITH = {
        "CATALOG_BACKEND": "silversmith.adapters.catalog.ModelCatalogBackend",
    }
"""

from __future__ import annotations

import logging
from typing import Iterable

from silversmith.catalog import Catalog, CatalogEntry

logger = logging.getLogger(__name__)


class ModelCatalogBackend:
    """Catalog snapshot of the active Product rows."""

    def get_catalog(self) -> Catalog:
        catalog = Catalog.from_queryset()
        logger.debug(f"Catalog snapshot built with {len(catalog)} masters")
        return catalog


class StaticCatalogBackend:
    """Catalog fixed at construction time."""

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._catalog = Catalog(entries)

    def get_catalog(self) -> Catalog:
        return self._catalog
