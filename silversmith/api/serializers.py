"""
Silversmith API Serializers.
"""

from django.db import transaction
from rest_framework import serializers

from silversmith.lifecycle import ProductionStage
from silversmith.models import Order, OrderItem, Product, ProductionBatch, ProductVariant


class ProductVariantSerializer(serializers.ModelSerializer):
    """Serializer for ProductVariant model."""

    sku = serializers.CharField(read_only=True)

    class Meta:
        model = ProductVariant
        fields = ["suffix", "sku", "description"]


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product model."""

    variants = ProductVariantSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            "sku",
            "prefix",
            "name",
            "category",
            "gender",
            "production_type",
            "has_stones",
            "selling_price",
            "is_active",
            "variants",
        ]


class OrderItemSerializer(serializers.ModelSerializer):
    """Serializer for OrderItem model."""

    full_sku = serializers.CharField(read_only=True)
    sent_quantity = serializers.IntegerField(read_only=True)
    remaining_quantity = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "sku",
            "variant_suffix",
            "full_sku",
            "quantity",
            "size_info",
            "notes",
            "sent_quantity",
            "remaining_quantity",
        ]
        read_only_fields = ["full_sku", "sent_quantity", "remaining_quantity"]


class OrderSerializer(serializers.ModelSerializer):
    """Serializer for Order model (items written together with the order)."""

    items = OrderItemSerializer(many=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "code",
            "customer_name",
            "status",
            "notes",
            "items",
            "created_at",
            "updated_at",
            "delivered_at",
        ]
        read_only_fields = ["code", "status", "created_at", "updated_at", "delivered_at"]

    def create(self, validated_data):
        items = validated_data.pop("items", [])
        with transaction.atomic():
            order = Order.objects.create(**validated_data)
            for item in items:
                OrderItem.objects.create(order=order, **item)
        return order

    def update(self, instance, validated_data):
        validated_data.pop("items", None)
        return super().update(instance, validated_data)


class ProductionBatchSerializer(serializers.ModelSerializer):
    """Serializer for ProductionBatch model."""

    order_code = serializers.CharField(source="order.code", read_only=True, default=None)
    full_sku = serializers.CharField(read_only=True)
    next_stage = serializers.CharField(read_only=True, allow_null=True)
    is_delayed = serializers.BooleanField(read_only=True)

    class Meta:
        model = ProductionBatch
        fields = [
            "uuid",
            "code",
            "sku",
            "variant_suffix",
            "full_sku",
            "size_info",
            "quantity",
            "current_stage",
            "next_stage",
            "requires_setting",
            "order",
            "order_code",
            "origin",
            "priority",
            "notes",
            "on_hold",
            "on_hold_reason",
            "is_delayed",
            "stage_entered_at",
            "created_at",
            "updated_at",
        ]


class BatchMoveSerializer(serializers.Serializer):
    """Serializer for batch move action."""

    stage = serializers.ChoiceField(choices=ProductionStage.choices, help_text="Target stage")
    quantity = serializers.IntegerField(
        required=False,
        min_value=1,
        help_text="Pieces to move (defaults to the whole batch)",
    )


class BatchHoldSerializer(serializers.Serializer):
    """Serializer for batch hold action."""

    reason = serializers.CharField(required=False, allow_blank=True, default="")


class SendToProductionSerializer(serializers.Serializer):
    """Serializer for order send_to_production action."""

    quantities = serializers.DictField(
        child=serializers.IntegerField(min_value=0),
        required=False,
        help_text="Optional {order_item_id: quantity} for a partial send",
    )

    def validate_quantities(self, value):
        try:
            return {int(key): qty for key, qty in value.items()}
        except (TypeError, ValueError):
            raise serializers.ValidationError("Keys must be order item ids.")


class DecodeSerializer(serializers.Serializer):
    code = serializers.CharField(help_text="Scanned or typed code, e.g. DA050XCO")


class ExpandSerializer(serializers.Serializer):
    token = serializers.CharField(help_text="SKU or range, e.g. DA050-DA063")
