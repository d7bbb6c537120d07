"""
Initial schema for Silversmith.

- CodeSequence
- Product / ProductVariant (catalog)
- Order / OrderItem (with history)
- ProductionBatch (with history)
"""

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from django.conf import settings
from django.db import migrations, models

STAGE_CHOICES = [
    ("awaiting_delivery", "Awaiting delivery"),
    ("waxing", "Waxing"),
    ("casting", "Casting"),
    ("setting", "Setting"),
    ("polishing", "Polishing"),
    ("labeling", "Labeling"),
    ("ready", "Ready"),
]

ORDER_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("in_production", "In production"),
    ("ready", "Ready"),
    ("delivered", "Delivered"),
    ("cancelled", "Cancelled"),
]

PRIORITY_CHOICES = [("low", "Low"), ("normal", "Normal"), ("high", "High")]

HISTORY_TYPE_CHOICES = [("+", "Created"), ("~", "Changed"), ("-", "Deleted")]


def history_fields():
    return [
        ("history_id", models.AutoField(primary_key=True, serialize=False)),
        ("history_date", models.DateTimeField(db_index=True)),
        ("history_change_reason", models.CharField(max_length=100, null=True)),
        ("history_type", models.CharField(choices=HISTORY_TYPE_CHOICES, max_length=1)),
        (
            "history_user",
            models.ForeignKey(
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


def history_options(name, name_plural):
    return {
        "verbose_name": f"historical {name}",
        "verbose_name_plural": f"historical {name_plural}",
        "ordering": ("-history_date", "-history_id"),
        "get_latest_by": ("history_date", "history_id"),
    }


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # ══════════════════════════════════════════════════════════════
        # CODE SEQUENCE
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("prefix", models.CharField(max_length=50, unique=True, verbose_name="Prefix")),
                ("last_value", models.PositiveIntegerField(default=0, verbose_name="Last value")),
            ],
            options={
                "verbose_name": "Code sequence",
                "verbose_name_plural": "Code sequences",
                "db_table": "silversmith_code_sequence",
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # CATALOG
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "sku",
                    models.CharField(
                        help_text="Master code, e.g. DA050", max_length=50, unique=True, verbose_name="SKU"
                    ),
                ),
                ("prefix", models.CharField(blank=True, max_length=10, verbose_name="Prefix")),
                ("name", models.CharField(blank=True, max_length=200, verbose_name="Name")),
                ("category", models.CharField(blank=True, max_length=100, verbose_name="Category")),
                (
                    "gender",
                    models.CharField(
                        blank=True,
                        choices=[("men", "Men"), ("women", "Women"), ("unisex", "Unisex")],
                        help_text="Selects the stone code table used to read suffixes (derived from the SKU if empty)",
                        max_length=10,
                        verbose_name="Gender",
                    ),
                ),
                (
                    "production_type",
                    models.CharField(
                        choices=[("in_house", "In-house"), ("imported", "Imported")],
                        default="in_house",
                        max_length=20,
                        verbose_name="Production type",
                    ),
                ),
                (
                    "has_stones",
                    models.BooleanField(
                        default=False,
                        help_text="Recipe uses a gem material; batches go through setting",
                        verbose_name="Has stones",
                    ),
                ),
                (
                    "selling_price",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0"), max_digits=10, verbose_name="Selling price"
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "silversmith_product",
                "ordering": ["sku"],
            },
        ),
        migrations.CreateModel(
            name="ProductVariant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "suffix",
                    models.CharField(
                        help_text="Finish and stone codes, e.g. XKR", max_length=20, verbose_name="Suffix"
                    ),
                ),
                ("description", models.CharField(blank=True, max_length=200, verbose_name="Description")),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="variants",
                        to="silversmith.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Variant",
                "verbose_name_plural": "Variants",
                "db_table": "silversmith_product_variant",
                "ordering": ["product", "suffix"],
                "unique_together": {("product", "suffix")},
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # ORDER
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=50,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                ("customer_name", models.CharField(blank=True, max_length=200, verbose_name="Customer")),
                (
                    "status",
                    models.CharField(
                        choices=ORDER_STATUS_CHOICES,
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("delivered_at", models.DateTimeField(blank=True, null=True, verbose_name="Delivered at")),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "db_table": "silversmith_order",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sku", models.CharField(max_length=50, verbose_name="SKU")),
                ("variant_suffix", models.CharField(blank=True, max_length=20, verbose_name="Variant suffix")),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)], verbose_name="Quantity"
                    ),
                ),
                (
                    "size_info",
                    models.CharField(
                        blank=True,
                        help_text="Ring size or bracelet length, e.g. 54 or 19cm",
                        max_length=50,
                        verbose_name="Size",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="silversmith.order",
                        verbose_name="Order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order item",
                "verbose_name_plural": "Order items",
                "db_table": "silversmith_order_item",
                "ordering": ["order", "pk"],
            },
        ),
        migrations.CreateModel(
            name="HistoricalOrder",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=50,
                        verbose_name="Code",
                    ),
                ),
                ("customer_name", models.CharField(blank=True, max_length=200, verbose_name="Customer")),
                (
                    "status",
                    models.CharField(
                        choices=ORDER_STATUS_CHOICES,
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="Updated at")),
                ("delivered_at", models.DateTimeField(blank=True, null=True, verbose_name="Delivered at")),
                *history_fields(),
            ],
            options=history_options("Order", "Orders"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        # ══════════════════════════════════════════════════════════════
        # PRODUCTION BATCH
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="ProductionBatch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID")),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=50,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                ("sku", models.CharField(db_index=True, max_length=50, verbose_name="SKU")),
                ("variant_suffix", models.CharField(blank=True, max_length=20, verbose_name="Variant suffix")),
                ("size_info", models.CharField(blank=True, max_length=50, verbose_name="Size")),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)], verbose_name="Quantity"
                    ),
                ),
                (
                    "current_stage",
                    models.CharField(
                        choices=STAGE_CHOICES, db_index=True, default="waxing", max_length=20, verbose_name="Stage"
                    ),
                ),
                ("requires_setting", models.BooleanField(default=False, verbose_name="Requires setting")),
                (
                    "stage_entered_at",
                    models.DateTimeField(default=django.utils.timezone.now, verbose_name="In stage since"),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=PRIORITY_CHOICES, default="normal", max_length=10, verbose_name="Priority"
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("on_hold", models.BooleanField(default=False, verbose_name="On hold")),
                ("on_hold_reason", models.CharField(blank=True, max_length=255, verbose_name="Hold reason")),
                (
                    "created_by",
                    models.CharField(
                        blank=True,
                        help_text="E.g. 'user:maria', 'system:fulfillment'",
                        max_length=255,
                        verbose_name="Created by",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="batches",
                        to="silversmith.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "order_item",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="batches",
                        to="silversmith.orderitem",
                        verbose_name="Order item",
                    ),
                ),
                (
                    "origin",
                    models.ForeignKey(
                        blank=True,
                        help_text="First batch of the family this row was split from",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="splits",
                        to="silversmith.productionbatch",
                        verbose_name="Split from",
                    ),
                ),
            ],
            options={
                "verbose_name": "Production batch",
                "verbose_name_plural": "Production batches",
                "db_table": "silversmith_production_batch",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["current_stage", "on_hold"], name="silversmith_stage_hold_idx"),
                    models.Index(fields=["sku", "variant_suffix"], name="silversmith_sku_variant_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoricalProductionBatch",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("uuid", models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name="UUID")),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=50,
                        verbose_name="Code",
                    ),
                ),
                ("sku", models.CharField(db_index=True, max_length=50, verbose_name="SKU")),
                ("variant_suffix", models.CharField(blank=True, max_length=20, verbose_name="Variant suffix")),
                ("size_info", models.CharField(blank=True, max_length=50, verbose_name="Size")),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)], verbose_name="Quantity"
                    ),
                ),
                (
                    "current_stage",
                    models.CharField(
                        choices=STAGE_CHOICES, db_index=True, default="waxing", max_length=20, verbose_name="Stage"
                    ),
                ),
                ("requires_setting", models.BooleanField(default=False, verbose_name="Requires setting")),
                (
                    "stage_entered_at",
                    models.DateTimeField(default=django.utils.timezone.now, verbose_name="In stage since"),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=PRIORITY_CHOICES, default="normal", max_length=10, verbose_name="Priority"
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("on_hold", models.BooleanField(default=False, verbose_name="On hold")),
                ("on_hold_reason", models.CharField(blank=True, max_length=255, verbose_name="Hold reason")),
                (
                    "created_by",
                    models.CharField(
                        blank=True,
                        help_text="E.g. 'user:maria', 'system:fulfillment'",
                        max_length=255,
                        verbose_name="Created by",
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="Updated at")),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="silversmith.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "order_item",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="silversmith.orderitem",
                        verbose_name="Order item",
                    ),
                ),
                (
                    "origin",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        help_text="First batch of the family this row was split from",
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="silversmith.productionbatch",
                        verbose_name="Split from",
                    ),
                ),
                *history_fields(),
            ],
            options=history_options("Production batch", "Production batches"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
