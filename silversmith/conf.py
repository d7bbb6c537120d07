"""
Silversmith Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    SILVERSMITH = {
        "RANGE_LIMIT": 500,
        "PRICE_CIPHER_KEYWORD": "BLACKHORSE",
    }

    # Option 2: Flat
    SILVERSMITH_RANGE_LIMIT = 500
    SILVERSMITH_PRICE_CIPHER_KEYWORD = "BLACKHORSE"

All settings have defaults; no configuration is required.
"""

import threading

from django.conf import settings


# ── Defaults ──

DEFAULTS = {
    "RANGE_LIMIT": 500,
    "PRICE_CIPHER_KEYWORD": "BLACKHORSE",
    "DELAY_HOURS": 72,
    "CATALOG_BACKEND": None,
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a silversmith setting.

    Looks up in order:
    1. SILVERSMITH dict (e.g. SILVERSMITH = {"RANGE_LIMIT": 200})
    2. Flat setting (e.g. SILVERSMITH_RANGE_LIMIT = 200)
    3. DEFAULTS
    """
    silversmith_dict = getattr(settings, "SILVERSMITH", {})
    if name in silversmith_dict:
        return silversmith_dict[name]

    flat_value = getattr(settings, f"SILVERSMITH_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


_catalog_backend_lock = threading.Lock()
_catalog_backend_instance = None


def get_catalog_backend():
    """
    Return the configured catalog backend instance.

    Falls back to the model-backed adapter when CATALOG_BACKEND is unset.
    """
    global _catalog_backend_instance

    if _catalog_backend_instance is None:
        with _catalog_backend_lock:
            if _catalog_backend_instance is None:  # double-checked
                path = get_setting("CATALOG_BACKEND")
                if path:
                    from django.utils.module_loading import import_string

                    _catalog_backend_instance = import_string(path)()
                else:
                    from silversmith.adapters.catalog import ModelCatalogBackend

                    _catalog_backend_instance = ModelCatalogBackend()

    return _catalog_backend_instance


def reset_catalog_backend() -> None:
    """Reset singleton (for tests)."""
    global _catalog_backend_instance
    _catalog_backend_instance = None


def get_catalog():
    """Current catalog snapshot from the configured backend."""
    return get_catalog_backend().get_catalog()
