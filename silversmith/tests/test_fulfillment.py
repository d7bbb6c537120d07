"""
Tests for send_to_production (silversmith.services.fulfillment).

Verifies:
- One batch per order line with the right initial stage
- All-or-nothing when a line cannot be resolved
- Partial sends and remaining quantities
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from silversmith.catalog import Catalog, CatalogEntry
from silversmith.codes import Gender
from silversmith.exceptions import SilversmithError
from silversmith.models import (
    Order,
    OrderItem,
    OrderStatus,
    Product,
    ProductionBatch,
    ProductionStage,
    ProductionType,
    ProductVariant,
)
from silversmith.services import send_to_production
from silversmith.services.fulfillment import resolve_item
from silversmith.signals import batches_created

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def ring(db):
    product = Product.objects.create(
        sku="DA050",
        name="Ring",
        gender=Gender.WOMEN,
        has_stones=True,
        selling_price=Decimal("36.90"),
    )
    ProductVariant.objects.create(product=product, suffix="X")
    ProductVariant.objects.create(product=product, suffix="XCO")
    return product


@pytest.fixture
def imported_bracelet(db):
    return Product.objects.create(
        sku="XR2020",
        name="Bracelet",
        gender=Gender.MEN,
        production_type=ProductionType.IMPORTED,
    )


@pytest.fixture
def order(db, ring, imported_bracelet):
    order = Order.objects.create(customer_name="Eleni")
    OrderItem.objects.create(order=order, sku="DA050", variant_suffix="X", quantity=5, size_info="54")
    OrderItem.objects.create(order=order, sku="XR2020", quantity=2)
    return order


# ═══════════════════════════════════════════════════════════════════
# Full send
# ═══════════════════════════════════════════════════════════════════


class TestSendToProduction:
    def test_creates_one_batch_per_line(self, order):
        result = send_to_production(order)

        assert len(result.batches) == 2
        assert result.total_quantity == 7
        assert ProductionBatch.objects.filter(order=order).count() == 2

    def test_in_house_line(self, order):
        send_to_production(order)

        batch = ProductionBatch.objects.get(order=order, sku="DA050")
        assert batch.variant_suffix == "X"
        assert batch.quantity == 5
        assert batch.size_info == "54"
        assert batch.current_stage == ProductionStage.WAXING
        assert batch.requires_setting is True
        assert batch.order_item.sku == "DA050"

    def test_imported_line_awaits_delivery(self, order):
        send_to_production(order)

        batch = ProductionBatch.objects.get(order=order, sku="XR2020")
        assert batch.current_stage == ProductionStage.AWAITING_DELIVERY
        assert batch.requires_setting is False

    def test_order_goes_to_production(self, order):
        result = send_to_production(order)

        assert result.order.status == OrderStatus.IN_PRODUCTION
        order.refresh_from_db()
        assert order.status == OrderStatus.IN_PRODUCTION
        assert order.is_fully_sent

    def test_created_by_user(self, order):
        user = User.objects.create_user(username="maria", password="x")

        result = send_to_production(order, user=user)

        assert all(b.created_by == "user:maria" for b in result.batches)

    def test_signal_sent(self, order):
        received = []

        def receiver(sender, order, batches, **kwargs):
            received.append(len(batches))

        batches_created.connect(receiver)
        try:
            send_to_production(order)
        finally:
            batches_created.disconnect(receiver)

        assert received == [2]

    def test_explicit_catalog(self, order):
        catalog = Catalog(
            [
                CatalogEntry("DA050", production_type=ProductionType.IMPORTED, variants=frozenset({"X"})),
                CatalogEntry("XR2020"),
            ]
        )

        send_to_production(order, catalog=catalog)

        batch = ProductionBatch.objects.get(order=order, sku="DA050")
        assert batch.current_stage == ProductionStage.AWAITING_DELIVERY


# ═══════════════════════════════════════════════════════════════════
# All or nothing
# ═══════════════════════════════════════════════════════════════════


class TestUnresolvableLines:
    def test_unknown_master_creates_nothing(self, order):
        OrderItem.objects.create(order=order, sku="ZZ999", quantity=1)

        with pytest.raises(SilversmithError) as exc:
            send_to_production(order)

        assert exc.value.code == "LINE_ITEM_UNRESOLVABLE"
        assert exc.value.details["sku"] == "ZZ999"
        assert ProductionBatch.objects.count() == 0
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_unknown_variant(self, order):
        OrderItem.objects.create(order=order, sku="DA050", variant_suffix="PKR", quantity=1)

        with pytest.raises(SilversmithError) as exc:
            send_to_production(order)

        assert exc.value.code == "LINE_ITEM_UNRESOLVABLE"
        assert ProductionBatch.objects.count() == 0

    def test_inactive_product(self, order, ring):
        ring.is_active = False
        ring.save()

        with pytest.raises(SilversmithError):
            send_to_production(order)

    def test_resolve_item(self, order, ring):
        item = order.items.get(sku="DA050")
        catalog = Catalog.from_queryset()

        entry = resolve_item(item, catalog)

        assert entry.sku == "DA050"
        assert entry.has_stones


# ═══════════════════════════════════════════════════════════════════
# Partial sends
# ═══════════════════════════════════════════════════════════════════


class TestPartialSend:
    def test_sends_requested_quantity(self, order):
        ring_line = order.items.get(sku="DA050")

        result = send_to_production(order, quantities={ring_line.pk: 3})

        assert len(result.batches) == 1
        assert result.batches[0].quantity == 3
        assert ring_line.sent_quantity == 3
        assert ring_line.remaining_quantity == 2
        order.refresh_from_db()
        assert order.status == OrderStatus.IN_PRODUCTION
        assert not order.is_fully_sent

    def test_second_send_takes_the_rest(self, order):
        ring_line = order.items.get(sku="DA050")
        send_to_production(order, quantities={ring_line.pk: 3})

        result = send_to_production(order)

        quantities = sorted((b.sku, b.quantity) for b in result.batches)
        assert quantities == [("DA050", 2), ("XR2020", 2)]
        assert order.is_fully_sent

    def test_zero_quantities_are_ignored(self, order):
        ring_line, bracelet_line = order.items.all()

        result = send_to_production(order, quantities={ring_line.pk: 0, bracelet_line.pk: 1})

        assert [b.sku for b in result.batches] == ["XR2020"]

    def test_more_than_remaining(self, order):
        ring_line = order.items.get(sku="DA050")

        with pytest.raises(SilversmithError) as exc:
            send_to_production(order, quantities={ring_line.pk: 6})

        assert exc.value.code == "INVALID_QUANTITY"
        assert exc.value.details["remaining"] == 5

    def test_unknown_item(self, order):
        with pytest.raises(SilversmithError) as exc:
            send_to_production(order, quantities={999999: 1})

        assert exc.value.code == "LINE_ITEM_UNRESOLVABLE"

    def test_nothing_left(self, order):
        send_to_production(order)

        with pytest.raises(SilversmithError) as exc:
            send_to_production(order)

        assert exc.value.code == "NOTHING_TO_SEND"

    def test_split_batches_count_as_sent(self, order):
        result = send_to_production(order)
        ring_batch = next(b for b in result.batches if b.sku == "DA050")
        ring_batch.move_stage(ProductionStage.CASTING, 2)

        assert order.items.get(sku="DA050").remaining_quantity == 0


# ═══════════════════════════════════════════════════════════════════
# Status checks
# ═══════════════════════════════════════════════════════════════════


class TestOrderStatus:
    def test_cancelled_order_cannot_be_sent(self, order):
        order.cancel("Customer changed mind")

        with pytest.raises(SilversmithError) as exc:
            send_to_production(order)

        assert exc.value.code == "INVALID_STATUS"
        order.refresh_from_db()
        assert "Customer changed mind" in order.notes

    def test_order_code_is_generated(self, order):
        assert order.code.startswith("ORD-")

    def test_total_quantity(self, order):
        assert order.total_quantity == 7

    def test_mark_delivered_requires_ready(self, order):
        with pytest.raises(SilversmithError) as exc:
            order.mark_delivered()

        assert exc.value.code == "INVALID_STATUS"

    def test_history(self, order):
        send_to_production(order)

        statuses = list(order.history.values_list("status", flat=True))
        assert statuses[0] == OrderStatus.IN_PRODUCTION
        assert OrderStatus.PENDING in statuses
