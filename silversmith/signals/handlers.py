"""
Silversmith Signal Handlers.

Keeps order status in step with its batches.

This module is imported in apps.py to register handlers.
"""

import logging

from django.dispatch import receiver

from silversmith.signals import stage_changed

logger = logging.getLogger(__name__)


@receiver(stage_changed)
def sync_order_status(sender, batch, result, **kwargs):
    """
    When a batch reaches READY, check whether its order is complete.

    The order moves IN_PRODUCTION → READY once every line is fully sent
    and every batch of the order is at READY.
    """
    if not batch.is_terminal or not batch.order_id:
        return

    order = batch.order
    if order.sync_status():
        logger.info(
            f"Order {order.code} ready: all batches finished",
            extra={"order": order.pk, "code": order.code, "batch": batch.code},
        )
