"""
Silversmith Adapters.

Implementations of protocols for external systems.
"""

from silversmith.adapters.catalog import ModelCatalogBackend, StaticCatalogBackend

__all__ = [
    "ModelCatalogBackend",
    "StaticCatalogBackend",
]
