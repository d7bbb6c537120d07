"""
Catalog Protocol: interface for master SKU lookup.

Silversmith defines this protocol. The default adapter reads the
Product models; an external catalog can provide its own implementation
through SILVERSMITH["CATALOG_BACKEND"].
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from silversmith.catalog import Catalog


@runtime_checkable
class CatalogBackend(Protocol):
    """
    Protocol for catalog access.

    Implementations return an immutable Catalog snapshot; the codec only
    needs prefix matching and per-master gender, fulfillment also reads
    production type, stone flag and known variants.
    """

    def get_catalog(self) -> Catalog:
        """
        Return the current catalog snapshot.

        Returns:
            Catalog with every sellable master SKU
        """
        ...
