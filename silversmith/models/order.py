"""
Order and OrderItem models.

Order status: PENDING → IN_PRODUCTION → READY → DELIVERED (or CANCELLED).

PENDING → IN_PRODUCTION happens when the order is sent to production;
IN_PRODUCTION → READY is derived from the order's batches (see
``Order.sync_status``); the rest are manual.
"""

import logging

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from silversmith.exceptions import SilversmithError

logger = logging.getLogger(__name__)


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""

    PENDING = "pending", _("Pending")
    IN_PRODUCTION = "in_production", _("In production")
    READY = "ready", _("Ready")
    DELIVERED = "delivered", _("Delivered")
    CANCELLED = "cancelled", _("Cancelled")


class Order(models.Model):
    """Customer order whose lines become production batches."""

    code = models.CharField(
        unique=True,
        max_length=50,
        blank=True,
        verbose_name=_("Code"),
        help_text=_("Unique identifier (auto-generated if empty)"),
    )
    customer_name = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_("Customer"),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))
    delivered_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Delivered at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "silversmith_order"
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        if self.customer_name:
            return f"{self.code} - {self.customer_name}"
        return self.code or f"Order {self.pk}"

    def save(self, *args, **kwargs):
        if not self.code:
            from silversmith.models.sequence import CodeSequence

            self.code = CodeSequence.next_code("ORD")
        super().save(*args, **kwargs)

    # ══════════════════════════════════════════════════════════════
    # STATUS
    # ══════════════════════════════════════════════════════════════

    def _set_status(self, status, **extra_fields):
        previous = self.status
        self.status = status
        for name, value in extra_fields.items():
            setattr(self, name, value)
        self.save(update_fields=["status", "updated_at", *extra_fields])
        logger.info(
            f"Order {self.code}: {previous} → {status}",
            extra={"order": self.pk, "code": self.code, "status": str(status)},
        )

    def mark_in_production(self):
        if self.status == OrderStatus.IN_PRODUCTION:
            return
        if self.status != OrderStatus.PENDING:
            raise SilversmithError(
                "INVALID_STATUS", current=self.status, expected=OrderStatus.PENDING
            )
        self._set_status(OrderStatus.IN_PRODUCTION)

    @property
    def is_fully_sent(self) -> bool:
        """Every line has all of its quantity in batches."""
        return all(item.remaining_quantity == 0 for item in self.items.all())

    @property
    def is_production_complete(self) -> bool:
        """Every line sent and every batch of the order at READY."""
        from silversmith.lifecycle import TERMINAL_STAGE

        batches = self.batches.all()
        if not batches.exists() or not self.is_fully_sent:
            return False
        return not batches.exclude(current_stage=TERMINAL_STAGE).exists()

    def sync_status(self) -> bool:
        """
        Derive READY from batch state.

        Only an IN_PRODUCTION order moves; returns True when it did.
        """
        if self.status != OrderStatus.IN_PRODUCTION:
            return False
        if not self.is_production_complete:
            return False
        self._set_status(OrderStatus.READY)
        return True

    def mark_delivered(self):
        if self.status != OrderStatus.READY:
            raise SilversmithError(
                "INVALID_STATUS", current=self.status, expected=OrderStatus.READY
            )
        self._set_status(OrderStatus.DELIVERED, delivered_at=timezone.now())

    def cancel(self, reason: str = ""):
        if self.status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            raise SilversmithError("INVALID_STATUS", current=self.status)
        if reason:
            self.notes = f"{self.notes}\n[CANCELLED] {reason}".strip()
        self._set_status(OrderStatus.CANCELLED, notes=self.notes)

    @property
    def total_quantity(self) -> int:
        return self.items.aggregate(total=Sum("quantity"))["total"] or 0


class OrderItem(models.Model):
    """One order line: a SKU variant and its quantity."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Order"),
    )
    sku = models.CharField(max_length=50, verbose_name=_("SKU"))
    variant_suffix = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_("Variant suffix"),
    )
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_("Quantity"),
    )
    size_info = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_("Size"),
        help_text=_("Ring size or bracelet length, e.g. 54 or 19cm"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    class Meta:
        db_table = "silversmith_order_item"
        verbose_name = _("Order item")
        verbose_name_plural = _("Order items")
        ordering = ["order", "pk"]

    def __str__(self) -> str:
        return f"{self.full_sku} x{self.quantity}"

    def save(self, *args, **kwargs):
        self.sku = self.sku.strip().upper()
        self.variant_suffix = self.variant_suffix.strip().upper()
        super().save(*args, **kwargs)

    @property
    def full_sku(self) -> str:
        return f"{self.sku}{self.variant_suffix}"

    @property
    def sent_quantity(self) -> int:
        """Quantity already in batches for this line (splits included)."""
        return self.batches.aggregate(total=Sum("quantity"))["total"] or 0

    @property
    def remaining_quantity(self) -> int:
        return max(0, self.quantity - self.sent_quantity)
