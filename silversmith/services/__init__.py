"""
Silversmith Services.

Business logic that doesn't belong in models:
- production: Atomic batch stage update and split
- fulfillment: Send order lines to production
- labels: Print lists into label payloads
"""

from silversmith.services.fulfillment import send_to_production
from silversmith.services.labels import Label, PrintList, build_label, parse_print_list
from silversmith.services.production import split_batch, update_batch_stage

__all__ = [
    "send_to_production",
    "update_batch_stage",
    "split_batch",
    "Label",
    "PrintList",
    "build_label",
    "parse_print_list",
]
