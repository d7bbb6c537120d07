"""
Order fulfillment -- turn order lines into production batches.

Usage:
    from silversmith.services import send_to_production

    result = send_to_production(order)
    for batch in result.batches:
        print(batch.code, batch.full_sku, batch.current_stage)

    # Partial send: only 3 pieces of one line
    send_to_production(order, quantities={item.pk: 3})
"""

import logging

from django.db import transaction

from silversmith import lifecycle
from silversmith.exceptions import SilversmithError
from silversmith.models import Order, OrderItem, OrderStatus, ProductionBatch
from silversmith.results import FulfillmentResult

logger = logging.getLogger(__name__)


def resolve_item(item: OrderItem, catalog):
    """
    Find the catalog entry for an order line.

    Raises:
        SilversmithError: LINE_ITEM_UNRESOLVABLE
    """
    entry = catalog.get(item.sku)
    if entry is None or not entry.has_variant(item.variant_suffix):
        raise SilversmithError(
            "LINE_ITEM_UNRESOLVABLE",
            order=item.order.code,
            item=item.pk,
            sku=item.sku,
            variant=item.variant_suffix,
        )
    return entry


def _quantities_to_send(order: Order, quantities) -> list[tuple[OrderItem, int]]:
    items = list(order.items.all())

    if quantities is None:
        return [(item, item.remaining_quantity) for item in items]

    known = {item.pk: item for item in items}
    unknown = set(quantities) - set(known)
    if unknown:
        raise SilversmithError(
            "LINE_ITEM_UNRESOLVABLE", order=order.code, items=sorted(unknown)
        )

    plan = []
    for item_id, qty in quantities.items():
        item = known[item_id]
        remaining = item.remaining_quantity
        if qty < 0 or qty > remaining:
            raise SilversmithError(
                "INVALID_QUANTITY",
                item=item.pk,
                sku=item.full_sku,
                quantity=qty,
                remaining=remaining,
            )
        plan.append((item, qty))
    return plan


def send_to_production(
    order: Order, catalog=None, quantities: dict | None = None, user=None
) -> FulfillmentResult:
    """
    Create one batch per order line, all or nothing.

    Args:
        order: Pending or in-production order
        catalog: Catalog snapshot (default: configured backend)
        quantities: Optional {order_item_id: qty} for a partial send;
            by default each line sends what it has left
        user: Who sent it (optional)

    Returns:
        FulfillmentResult with the created batches

    Raises:
        SilversmithError: INVALID_STATUS, LINE_ITEM_UNRESOLVABLE,
            INVALID_QUANTITY, NOTHING_TO_SEND
    """
    if catalog is None:
        from silversmith.conf import get_catalog

        catalog = get_catalog()

    created_by = f"user:{user.username}" if user else "system:fulfillment"

    with transaction.atomic():
        order = Order.objects.select_for_update().get(pk=order.pk)

        if order.status not in (OrderStatus.PENDING, OrderStatus.IN_PRODUCTION):
            raise SilversmithError(
                "INVALID_STATUS",
                order=order.code,
                current=order.status,
                expected=[OrderStatus.PENDING, OrderStatus.IN_PRODUCTION],
            )

        plan = [(item, qty) for item, qty in _quantities_to_send(order, quantities) if qty > 0]
        if not plan:
            raise SilversmithError("NOTHING_TO_SEND", order=order.code)

        # Resolve everything before writing anything
        resolved = [(item, qty, resolve_item(item, catalog)) for item, qty in plan]

        batches = []
        for item, qty, entry in resolved:
            batches.append(
                ProductionBatch.objects.create(
                    sku=entry.sku,
                    variant_suffix=item.variant_suffix.upper(),
                    size_info=item.size_info,
                    quantity=qty,
                    current_stage=lifecycle.initial_stage(entry.production_type),
                    requires_setting=entry.has_stones,
                    order=order,
                    order_item=item,
                    notes=item.notes,
                    created_by=created_by,
                )
            )

        order.mark_in_production()

    logger.info(
        f"Order {order.code}: {len(batches)} batches sent to production",
        extra={
            "order": order.pk,
            "code": order.code,
            "batches": len(batches),
            "quantity": sum(b.quantity for b in batches),
            "user": user.username if user else None,
        },
    )

    from silversmith.signals import batches_created

    batches_created.send(sender=Order, order=order, batches=batches, user=user)

    return FulfillmentResult(order=order, batches=batches)
