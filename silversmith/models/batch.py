"""
ProductionBatch model.

ProductionBatch = a quantity of one SKU variant moving through the
manufacturing stages.

✅ BUSINESS LOGIC ENCAPSULATED IN MODEL

A move of the whole quantity updates the row in place. A move of part
of the quantity splits the batch: a new row carries the moved quantity
to the target stage and the original keeps the rest at its stage. Rows
produced by splits point at the first batch of their family through
``origin``; the family's total quantity never changes.
"""

import logging
import uuid
from datetime import timedelta

from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.db.models import Q, Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from silversmith import lifecycle
from silversmith.exceptions import SilversmithError
from silversmith.lifecycle import ProductionStage
from silversmith.results import MoveOutcome, MoveResult

logger = logging.getLogger(__name__)


def _whole_quantity(quantity) -> int:
    """Piece count as int; fractional or non-numeric values are rejected."""
    try:
        whole = int(quantity)
    except (TypeError, ValueError, OverflowError):
        raise SilversmithError("INVALID_SPLIT_QUANTITY", quantity=quantity)
    if whole != quantity and str(whole) != str(quantity).strip():
        raise SilversmithError("INVALID_SPLIT_QUANTITY", quantity=quantity)
    return whole


class BatchPriority(models.TextChoices):
    LOW = "low", _("Low")
    NORMAL = "normal", _("Normal")
    HIGH = "high", _("High")


class ProductionBatchQuerySet(models.QuerySet):
    def active(self):
        """Batches still on the floor (not ready, not on hold)."""
        return self.exclude(current_stage=lifecycle.TERMINAL_STAGE).filter(on_hold=False)

    def family(self, root):
        """The root batch and every row split from it."""
        root_id = getattr(root, "pk", root)
        return self.filter(Q(pk=root_id) | Q(origin_id=root_id))

    def total_quantity(self) -> int:
        return self.aggregate(total=Sum("quantity"))["total"] or 0


class ProductionBatch(models.Model):
    """
    One (sku, variant, stage) lot on the production floor.

    Stages: AWAITING_DELIVERY → WAXING → CASTING → SETTING → POLISHING → LABELING → READY
    """

    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )
    code = models.CharField(
        unique=True,
        max_length=50,
        blank=True,
        verbose_name=_("Code"),
        help_text=_("Unique identifier (auto-generated if empty)"),
    )

    # What
    sku = models.CharField(max_length=50, db_index=True, verbose_name=_("SKU"))
    variant_suffix = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_("Variant suffix"),
    )
    size_info = models.CharField(max_length=50, blank=True, verbose_name=_("Size"))
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_("Quantity"),
    )

    # Where
    current_stage = models.CharField(
        max_length=20,
        choices=ProductionStage.choices,
        default=ProductionStage.WAXING,
        db_index=True,
        verbose_name=_("Stage"),
    )
    requires_setting = models.BooleanField(
        default=False,
        verbose_name=_("Requires setting"),
    )
    stage_entered_at = models.DateTimeField(
        default=timezone.now,
        verbose_name=_("In stage since"),
    )

    # Origin
    order = models.ForeignKey(
        "silversmith.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="batches",
        verbose_name=_("Order"),
    )
    order_item = models.ForeignKey(
        "silversmith.OrderItem",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="batches",
        verbose_name=_("Order item"),
    )
    origin = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="splits",
        verbose_name=_("Split from"),
        help_text=_("First batch of the family this row was split from"),
    )

    # Floor
    priority = models.CharField(
        max_length=10,
        choices=BatchPriority.choices,
        default=BatchPriority.NORMAL,
        verbose_name=_("Priority"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))
    on_hold = models.BooleanField(default=False, verbose_name=_("On hold"))
    on_hold_reason = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Hold reason"),
    )

    created_by = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Created by"),
        help_text=_("E.g. 'user:maria', 'system:fulfillment'"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))

    history = HistoricalRecords()

    objects = ProductionBatchQuerySet.as_manager()

    class Meta:
        db_table = "silversmith_production_batch"
        verbose_name = _("Production batch")
        verbose_name_plural = _("Production batches")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["current_stage", "on_hold"], name="silversmith_stage_hold_idx"),
            models.Index(fields=["sku", "variant_suffix"], name="silversmith_sku_variant_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.full_sku} x{self.quantity} ({self.current_stage})"

    def save(self, *args, **kwargs):
        if not self.code:
            from silversmith.models.sequence import CodeSequence

            self.code = CodeSequence.next_code("BAT")
        super().save(*args, **kwargs)

    # ══════════════════════════════════════════════════════════════
    # BUSINESS LOGIC (encapsulated in model!)
    # ══════════════════════════════════════════════════════════════

    def move_stage(self, target_stage, quantity=None, user=None) -> MoveResult:
        """
        Move ``quantity`` pieces of this batch to ``target_stage``.

        Args:
            target_stage: A later stage on this batch's path
            quantity: Pieces to move (default: the whole batch)
            user: Who moved them (optional)

        Returns:
            MoveResult with outcome MOVED (in place) or SPLIT (new row)

        Raises:
            SilversmithError: INVALID_SPLIT_QUANTITY, STAGE_TRANSITION_NOT_ALLOWED,
                BATCH_ON_HOLD, BATCH_NOT_FOUND

        Example:
            batch.move_stage(ProductionStage.POLISHING, 4)  # 10 at casting → 6 + 4
        """
        from silversmith.services.production import lock_batch, split_batch, update_batch_stage

        with transaction.atomic():
            locked = lock_batch(self.pk)

            if quantity is None:
                quantity = locked.quantity
            quantity = _whole_quantity(quantity)

            if quantity <= 0 or quantity > locked.quantity:
                raise SilversmithError(
                    "INVALID_SPLIT_QUANTITY",
                    batch=locked.code,
                    quantity=quantity,
                    available=locked.quantity,
                )

            if locked.on_hold:
                raise SilversmithError(
                    "BATCH_ON_HOLD", batch=locked.code, reason=locked.on_hold_reason
                )

            from_stage = locked.current_stage
            target = lifecycle.check_transition(
                from_stage, target_stage, locked.requires_setting
            )

            if quantity == locked.quantity:
                moved = update_batch_stage(locked.pk, target)
                result = MoveResult(
                    outcome=MoveOutcome.MOVED,
                    batch=moved,
                    from_stage=from_stage,
                    to_stage=target.value,
                    quantity=quantity,
                )
            else:
                new_batch = locked.build_split(quantity, target, user=user)
                remainder, moved = split_batch(
                    locked.pk, locked.quantity - quantity, new_batch
                )
                result = MoveResult(
                    outcome=MoveOutcome.SPLIT,
                    batch=moved,
                    from_stage=from_stage,
                    to_stage=target.value,
                    quantity=quantity,
                    remainder=remainder,
                )

        self.refresh_from_db()

        logger.info(
            f"Batch {self.code}: {quantity} units {from_stage} → {target.value} ({result.outcome.value})",
            extra={
                "batch": self.pk,
                "code": self.code,
                "from_stage": from_stage,
                "to_stage": target.value,
                "quantity": quantity,
                "outcome": result.outcome.value,
                "user": user.username if user else None,
            },
        )

        self._emit_stage_changed(result, user)
        return result

    def build_split(self, quantity: int, target_stage, user=None) -> "ProductionBatch":
        """Unsaved sibling row carrying ``quantity`` pieces to ``target_stage``."""
        return ProductionBatch(
            sku=self.sku,
            variant_suffix=self.variant_suffix,
            size_info=self.size_info,
            quantity=quantity,
            current_stage=target_stage,
            requires_setting=self.requires_setting,
            order_id=self.order_id,
            order_item_id=self.order_item_id,
            origin_id=self.origin_id or self.pk,
            priority=self.priority,
            notes=self.notes,
            created_by=f"user:{user.username}" if user else "system:split",
        )

    def _emit_stage_changed(self, result: MoveResult, user=None):
        from silversmith.signals import stage_changed

        stage_changed.send(
            sender=self.__class__,
            batch=result.batch,
            result=result,
            user=user,
        )

    def hold(self, reason: str = "", user=None):
        """Take the batch off the floor; held batches cannot move."""
        from silversmith.services.production import lock_batch

        with transaction.atomic():
            locked = lock_batch(self.pk)
            if locked.is_terminal:
                raise SilversmithError(
                    "INVALID_STATUS", batch=locked.code, current=locked.current_stage
                )
            locked.on_hold = True
            locked.on_hold_reason = reason
            locked.save(update_fields=["on_hold", "on_hold_reason", "updated_at"])

        self.refresh_from_db()
        logger.info(
            f"Batch {self.code} on hold: {reason}",
            extra={"batch": self.pk, "user": user.username if user else None},
        )

    def release(self, user=None):
        """Put a held batch back on the floor."""
        from silversmith.services.production import lock_batch

        with transaction.atomic():
            locked = lock_batch(self.pk)
            if not locked.on_hold:
                raise SilversmithError("INVALID_STATUS", batch=locked.code, on_hold=False)
            locked.on_hold = False
            locked.on_hold_reason = ""
            locked.save(update_fields=["on_hold", "on_hold_reason", "updated_at"])

        self.refresh_from_db()
        logger.info(f"Batch {self.code} released")

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def full_sku(self) -> str:
        return f"{self.sku}{self.variant_suffix}"

    @property
    def is_terminal(self) -> bool:
        return self.current_stage == lifecycle.TERMINAL_STAGE

    @property
    def next_stage(self):
        return lifecycle.next_stage(self.current_stage, self.requires_setting)

    def allowed_targets(self) -> tuple:
        return lifecycle.allowed_targets(self.current_stage, self.requires_setting)

    @property
    def root_id(self) -> int:
        return self.origin_id or self.pk

    @property
    def family_quantity(self) -> int:
        """Total over this batch's split family."""
        return ProductionBatch.objects.family(self.root_id).total_quantity()

    @property
    def time_in_stage(self) -> timedelta:
        return timezone.now() - self.stage_entered_at

    @property
    def is_delayed(self) -> bool:
        """Sitting in a non-terminal stage longer than DELAY_HOURS."""
        from silversmith.conf import get_setting

        if self.is_terminal:
            return False
        return self.time_in_stage > timedelta(hours=get_setting("DELAY_HOURS"))
