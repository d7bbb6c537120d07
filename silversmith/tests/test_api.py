"""
Tests for Silversmith API ViewSets (silversmith.api.views).

Verifies DRF endpoints for products, orders, batches and the codec.
"""

import pytest

pytestmark = pytest.mark.urls("silversmith.tests.test_api_urls")

from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from silversmith.codes import Gender
from silversmith.models import (
    Order,
    OrderItem,
    OrderStatus,
    Product,
    ProductionBatch,
    ProductionStage,
    ProductVariant,
)

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def api_client(db):
    user = User.objects.create_user(username="api_user", password="test123")
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def product(db):
    product = Product.objects.create(
        sku="DA050",
        name="Ring",
        gender=Gender.WOMEN,
        has_stones=True,
        selling_price=Decimal("36.90"),
    )
    ProductVariant.objects.create(product=product, suffix="XCO")
    return product


@pytest.fixture
def order(db, product):
    order = Order.objects.create(customer_name="Eleni")
    OrderItem.objects.create(order=order, sku="DA050", variant_suffix="XCO", quantity=5)
    return order


@pytest.fixture
def batch(db, order):
    return ProductionBatch.objects.create(
        sku="DA050",
        variant_suffix="XCO",
        quantity=10,
        current_stage=ProductionStage.CASTING,
        requires_setting=True,
        order=order,
    )


# ═══════════════════════════════════════════════════════════════════
# ProductViewSet
# ═══════════════════════════════════════════════════════════════════


class TestProductAPI:
    def test_list_products(self, api_client, product):
        response = api_client.get("/api/silversmith/products/")

        assert response.status_code == 200
        assert len(response.data) == 1

    def test_retrieve_by_sku(self, api_client, product):
        response = api_client.get("/api/silversmith/products/DA050/")

        assert response.status_code == 200
        assert response.data["gender"] == "women"
        assert response.data["variants"][0]["sku"] == "DA050XCO"
        assert response.data["variants"][0]["description"] == "Επίχρυσο - Κόπερ"

    def test_requires_authentication(self, db, product):
        response = APIClient().get("/api/silversmith/products/")

        assert response.status_code in (401, 403)


# ═══════════════════════════════════════════════════════════════════
# OrderViewSet
# ═══════════════════════════════════════════════════════════════════


class TestOrderAPI:
    def test_create_with_items(self, api_client, product):
        response = api_client.post(
            "/api/silversmith/orders/",
            {
                "customer_name": "Maria",
                "items": [
                    {"sku": "da050", "variant_suffix": "xco", "quantity": 2, "size_info": "54"},
                    {"sku": "DA050", "quantity": 1},
                ],
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["status"] == OrderStatus.PENDING
        assert response.data["code"].startswith("ORD-")
        order = Order.objects.get(pk=response.data["id"])
        assert order.items.count() == 2
        assert order.items.first().full_sku == "DA050XCO"

    def test_item_quantity_must_be_positive(self, api_client, product):
        response = api_client.post(
            "/api/silversmith/orders/",
            {"customer_name": "Maria", "items": [{"sku": "DA050", "quantity": 0}]},
            format="json",
        )

        assert response.status_code == 400

    def test_retrieve_shows_remaining(self, api_client, order):
        response = api_client.get(f"/api/silversmith/orders/{order.pk}/")

        assert response.status_code == 200
        item = response.data["items"][0]
        assert item["full_sku"] == "DA050XCO"
        assert item["remaining_quantity"] == 5

    def test_send_to_production(self, api_client, order):
        response = api_client.post(
            f"/api/silversmith/orders/{order.pk}/send_to_production/", {}, format="json"
        )

        assert response.status_code == 201
        assert response.data["status"] == OrderStatus.IN_PRODUCTION
        assert response.data["batches_created"] == 1
        batch = ProductionBatch.objects.get(order=order)
        assert batch.created_by == "user:api_user"

    def test_partial_send(self, api_client, order):
        item = order.items.get()

        response = api_client.post(
            f"/api/silversmith/orders/{order.pk}/send_to_production/",
            {"quantities": {str(item.pk): 2}},
            format="json",
        )

        assert response.status_code == 201
        assert ProductionBatch.objects.get(order=order).quantity == 2

    def test_send_twice_returns_error(self, api_client, order):
        url = f"/api/silversmith/orders/{order.pk}/send_to_production/"
        api_client.post(url, {}, format="json")

        response = api_client.post(url, {}, format="json")

        assert response.status_code == 400
        assert response.data["error"]["code"] == "NOTHING_TO_SEND"

    def test_bad_quantities_keys(self, api_client, order):
        response = api_client.post(
            f"/api/silversmith/orders/{order.pk}/send_to_production/",
            {"quantities": {"abc": 1}},
            format="json",
        )

        assert response.status_code == 400


# ═══════════════════════════════════════════════════════════════════
# ProductionBatchViewSet
# ═══════════════════════════════════════════════════════════════════


class TestBatchAPI:
    def test_list_filtered_by_stage(self, api_client, batch):
        ProductionBatch.objects.create(sku="DA050", quantity=1)

        response = api_client.get("/api/silversmith/batches/?stage=casting")

        assert response.status_code == 200
        assert [b["code"] for b in response.data] == [batch.code]

    def test_retrieve_by_uuid(self, api_client, batch):
        response = api_client.get(f"/api/silversmith/batches/{batch.uuid}/")

        assert response.status_code == 200
        assert response.data["full_sku"] == "DA050XCO"
        assert response.data["next_stage"] == ProductionStage.SETTING
        assert response.data["order_code"] == batch.order.code
        assert response.data["is_delayed"] is False

    def test_move_whole(self, api_client, batch):
        response = api_client.post(
            f"/api/silversmith/batches/{batch.uuid}/move/", {"stage": "setting"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["outcome"] == "moved"
        assert response.data["remainder"] is None
        batch.refresh_from_db()
        assert batch.current_stage == ProductionStage.SETTING

    def test_move_split(self, api_client, batch):
        response = api_client.post(
            f"/api/silversmith/batches/{batch.uuid}/move/",
            {"stage": "polishing", "quantity": 4},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["outcome"] == "split"
        assert response.data["batch"]["quantity"] == 4
        assert response.data["batch"]["origin"] == batch.pk
        assert response.data["remainder"]["quantity"] == 6

    def test_move_not_allowed(self, api_client, batch):
        response = api_client.post(
            f"/api/silversmith/batches/{batch.uuid}/move/", {"stage": "waxing"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "STAGE_TRANSITION_NOT_ALLOWED"

    def test_move_unknown_stage(self, api_client, batch):
        response = api_client.post(
            f"/api/silversmith/batches/{batch.uuid}/move/", {"stage": "melting"}, format="json"
        )

        assert response.status_code == 400
        assert "stage" in response.data

    def test_hold_and_release(self, api_client, batch):
        response = api_client.post(
            f"/api/silversmith/batches/{batch.uuid}/hold/",
            {"reason": "Missing stones"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data == {"on_hold": True, "reason": "Missing stones"}

        response = api_client.post(
            f"/api/silversmith/batches/{batch.uuid}/move/", {"stage": "setting"}, format="json"
        )
        assert response.data["error"]["code"] == "BATCH_ON_HOLD"

        response = api_client.post(f"/api/silversmith/batches/{batch.uuid}/release/")
        assert response.status_code == 200
        assert response.data == {"on_hold": False}

    def test_release_not_held(self, api_client, batch):
        response = api_client.post(f"/api/silversmith/batches/{batch.uuid}/release/")

        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_STATUS"


# ═══════════════════════════════════════════════════════════════════
# CodecViewSet
# ═══════════════════════════════════════════════════════════════════


class TestCodecAPI:
    def test_decode(self, api_client, product):
        response = api_client.post(
            "/api/silversmith/codec/decode/", {"code": "da050xco"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["master"] == "DA050"
        assert response.data["finish"] == {"code": "X", "name": "Επίχρυσο"}
        assert response.data["stone"]["code"] == "CO"

    def test_decode_unknown(self, api_client, product):
        response = api_client.post(
            "/api/silversmith/codec/decode/", {"code": "ZZ999"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "UNRECOGNIZED_CODE"
        assert response.data["error"]["raw"] == "ZZ999"

    def test_expand(self, api_client):
        response = api_client.post(
            "/api/silversmith/codec/expand/", {"token": "DA050-DA063"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["count"] == 14

    def test_expand_error(self, api_client):
        response = api_client.post(
            "/api/silversmith/codec/expand/", {"token": "DA050-XR063"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "MISMATCHED_RANGE_PREFIX"
