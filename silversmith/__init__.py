"""
Django Silversmith - SKU variant codec and production batch lifecycle.

Usage:
    from silversmith import decode, encode, expand_range, SilversmithError

    # Codec
    ident = decode("DA050XCO", catalog)
    ident.master, ident.finish.code, ident.stone.code   # "DA050", "X", "CO"
    encode("DA050", "X", "CO")                          # "DA050XCO"
    expand_range("DA050-DA063")                         # 14 SKUs

    # Production
    result = send_to_production(order)
    batch = result.batches[0]
    batch.move_stage(ProductionStage.CASTING)           # whole batch
    batch.move_stage(ProductionStage.POLISHING, 4)      # split off 4
"""

from silversmith.exceptions import SilversmithError

_LAZY = {
    "decode": "silversmith.codec",
    "encode": "silversmith.codec",
    "decompose_suffix": "silversmith.codec",
    "transliterate_for_barcode": "silversmith.codec",
    "codify_price": "silversmith.codec",
    "decode_price": "silversmith.codec",
    "ProductIdentifier": "silversmith.codec",
    "expand_range": "silversmith.ranges",
    "Catalog": "silversmith.catalog",
    "CatalogEntry": "silversmith.catalog",
    "ProductionStage": "silversmith.lifecycle",
    "MoveOutcome": "silversmith.results",
    "MoveResult": "silversmith.results",
    "send_to_production": "silversmith.services.fulfillment",
}


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in _LAZY:
        import importlib

        return getattr(importlib.import_module(_LAZY[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["SilversmithError", *_LAZY]
__version__ = "0.1.0"
