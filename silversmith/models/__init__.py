"""
Silversmith Models.

Core models for jewelry production:
- Product: Master SKU of the catalog (design, gender, production type)
- ProductVariant: Finish/stone suffix sold under a master
- Order / OrderItem: Customer order and its lines
- ProductionBatch: Quantity of one SKU variant moving through stages
- CodeSequence: Atomic counter for batch and order codes
"""

from silversmith.lifecycle import ProductionStage, ProductionType
from silversmith.models.batch import BatchPriority, ProductionBatch
from silversmith.models.order import Order, OrderItem, OrderStatus
from silversmith.models.product import Product, ProductVariant
from silversmith.models.sequence import CodeSequence

__all__ = [
    "Product",
    "ProductVariant",
    "ProductionType",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ProductionBatch",
    "ProductionStage",
    "BatchPriority",
    "CodeSequence",
]
