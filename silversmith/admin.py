"""
Silversmith Admin - Django admin for Product, Order and ProductionBatch.

Orders and batches use SimpleHistoryAdmin so the history view shows every
status change and stage move.
"""

from django.contrib import admin, messages
from simple_history.admin import SimpleHistoryAdmin

from silversmith.exceptions import SilversmithError
from silversmith.models import Order, OrderItem, Product, ProductionBatch, ProductVariant
from silversmith.services import send_to_production


# ── Product ──


class ProductVariantInline(admin.TabularInline):
    """Inline for product variants."""

    model = ProductVariant
    extra = 1
    fields = ("suffix", "description")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin for catalog masters."""

    list_display = ("sku", "name", "gender", "production_type", "has_stones", "selling_price", "is_active")
    list_filter = ("gender", "production_type", "has_stones", "is_active")
    search_fields = ("sku", "name")
    inlines = [ProductVariantInline]
    readonly_fields = ("prefix", "created_at", "updated_at")


# ── Order ──


class OrderItemInline(admin.TabularInline):
    """Inline for order lines."""

    model = OrderItem
    extra = 1
    fields = ("sku", "variant_suffix", "quantity", "size_info", "notes")


@admin.register(Order)
class OrderAdmin(SimpleHistoryAdmin):
    """Admin for customer orders."""

    list_display = ("code", "customer_name", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("code", "customer_name")
    inlines = [OrderItemInline]
    readonly_fields = ("code", "status", "created_at", "updated_at", "delivered_at")
    actions = ["send_selected_to_production"]

    @admin.action(description="Send selected orders to production")
    def send_selected_to_production(self, request, queryset):
        for order in queryset:
            try:
                result = send_to_production(order, user=request.user)
            except SilversmithError as e:
                self.message_user(request, f"{order.code}: {e}", messages.ERROR)
                continue
            self.message_user(request, f"{order.code}: {len(result.batches)} batches created")


# ── ProductionBatch ──


@admin.register(ProductionBatch)
class ProductionBatchAdmin(SimpleHistoryAdmin):
    """Admin for production batches."""

    list_display = ("code", "sku", "variant_suffix", "quantity", "current_stage", "priority", "on_hold", "order")
    list_filter = ("current_stage", "on_hold", "priority", "requires_setting")
    search_fields = ("code", "sku")
    raw_id_fields = ("order", "order_item", "origin")
    readonly_fields = ("uuid", "code", "current_stage", "stage_entered_at", "created_at", "updated_at")
