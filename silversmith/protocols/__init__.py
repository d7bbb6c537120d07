"""
Silversmith Protocols.

Defines interfaces for external integrations.
"""

from silversmith.protocols.catalog import CatalogBackend

__all__ = [
    "CatalogBackend",
]
