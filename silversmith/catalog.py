"""
Catalog snapshot used by the codec and by order fulfillment.

A Catalog is an immutable view of the known master SKUs, built either
from plain CatalogEntry values (tests, imports) or from the Product
models via ``Catalog.from_queryset()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable

from silversmith.codes import Gender
from silversmith.lifecycle import ProductionType


@dataclass(frozen=True)
class CatalogEntry:
    """One master SKU with what the codec and fulfillment need to know."""

    sku: str
    gender: str = Gender.UNISEX
    production_type: str = ProductionType.IN_HOUSE
    has_stones: bool = False
    variants: frozenset[str] = field(default_factory=frozenset)
    name: str = ""

    @property
    def is_imported(self) -> bool:
        return self.production_type == ProductionType.IMPORTED

    def has_variant(self, suffix: str) -> bool:
        """Empty suffix always resolves to the master itself."""
        return not suffix or suffix.upper() in self.variants


class Catalog:
    """
    Read-only lookup keyed by master SKU.

    Masters are indexed by their barcode key (transliterated, upper-case)
    so a Latin scan finds a Greek master. Matching is longest-prefix
    with ties broken by lexical order of the SKU.
    """

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        from silversmith.codec import barcode_key

        by_sku = {}
        by_key = {}
        for entry in entries:
            by_sku[entry.sku] = entry
            key = barcode_key(entry.sku)
            current = by_key.get(key)
            if current is None or entry.sku < current.sku:
                by_key[key] = entry
        self._by_sku = MappingProxyType(by_sku)
        self._by_key = MappingProxyType(by_key)
        # Longest first, then lexical, so the first hit is the winner
        self._ordered_keys = tuple(
            sorted(by_key, key=lambda k: (-len(k), by_key[k].sku))
        )

    @classmethod
    def from_queryset(cls, queryset=None) -> Catalog:
        """Build a snapshot from Product rows (active products by default)."""
        from silversmith.models import Product

        if queryset is None:
            queryset = Product.objects.filter(is_active=True)

        entries = []
        for product in queryset.prefetch_related("variants"):
            entries.append(
                CatalogEntry(
                    sku=product.sku,
                    gender=product.gender,
                    production_type=product.production_type,
                    has_stones=product.has_stones,
                    variants=frozenset(v.suffix.upper() for v in product.variants.all()),
                    name=product.name,
                )
            )
        return cls(entries)

    def __contains__(self, sku: str) -> bool:
        return sku in self._by_sku

    def __len__(self) -> int:
        return len(self._by_sku)

    def __iter__(self):
        return iter(self._by_sku.values())

    def get(self, sku: str) -> CatalogEntry | None:
        return self._by_sku.get(sku)

    def match_master(self, key: str) -> CatalogEntry | None:
        """Longest master whose barcode key is a prefix of ``key``."""
        for candidate in self._ordered_keys:
            if key.startswith(candidate):
                return self._by_key[candidate]
        return None
