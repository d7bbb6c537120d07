"""
Production persistence -- the two atomic batch mutations.

ProductionBatch.move_stage() validates the move and calls one of these:

- update_batch_stage: whole batch changes stage in place
- split_batch: part of the batch goes to a new row

Both lock the batch row with SELECT FOR UPDATE inside a transaction, so
concurrent moves of the same batch are serialized.
"""

import logging

from django.db import transaction
from django.utils import timezone

from silversmith.exceptions import SilversmithError, SplitInvariantViolation
from silversmith.models import ProductionBatch

logger = logging.getLogger(__name__)


def lock_batch(batch_id) -> ProductionBatch:
    """Row-locked batch; call inside a transaction."""
    try:
        return ProductionBatch.objects.select_for_update().get(pk=batch_id)
    except ProductionBatch.DoesNotExist:
        raise SilversmithError("BATCH_NOT_FOUND", batch_id=batch_id)


def update_batch_stage(batch_id, new_stage) -> ProductionBatch:
    """Set the stage of a whole batch. Returns the updated row."""
    with transaction.atomic():
        batch = lock_batch(batch_id)
        batch.current_stage = new_stage
        batch.stage_entered_at = timezone.now()
        batch.save(update_fields=["current_stage", "stage_entered_at", "updated_at"])
    return batch


def split_batch(
    batch_id, remainder_quantity: int, new_batch: ProductionBatch
) -> tuple[ProductionBatch, ProductionBatch]:
    """
    Leave ``remainder_quantity`` on the batch and insert ``new_batch``.

    ``new_batch`` must be unsaved and carry exactly the quantity taken
    off the original. The family total is checked before commit; any
    difference raises SplitInvariantViolation and rolls everything back.

    Returns:
        (original, new_batch) after saving
    """
    with transaction.atomic():
        batch = lock_batch(batch_id)
        root_id = batch.origin_id or batch.pk
        family_before = ProductionBatch.objects.family(root_id).total_quantity()

        moved = batch.quantity - remainder_quantity
        if remainder_quantity <= 0 or moved <= 0 or new_batch.quantity != moved:
            raise SilversmithError(
                "INVALID_SPLIT_QUANTITY",
                batch=batch.code,
                quantity=new_batch.quantity,
                remainder=remainder_quantity,
                available=batch.quantity,
            )

        batch.quantity = remainder_quantity
        batch.save(update_fields=["quantity", "updated_at"])

        new_batch.origin_id = root_id
        new_batch.stage_entered_at = timezone.now()
        new_batch.save()

        family_after = ProductionBatch.objects.family(root_id).total_quantity()
        if family_after != family_before:
            logger.critical(
                f"Split of batch {batch.code} changed family quantity "
                f"{family_before} → {family_after}",
                extra={
                    "batch": batch.pk,
                    "root": root_id,
                    "before": family_before,
                    "after": family_after,
                },
            )
            raise SplitInvariantViolation(
                f"batch {batch.code}: family quantity {family_before} became {family_after}"
            )

    logger.info(
        f"Batch {batch.code} split: {remainder_quantity} stay at {batch.current_stage}, "
        f"{new_batch.quantity} → {new_batch.code} at {new_batch.current_stage}",
        extra={
            "batch": batch.pk,
            "new_batch": new_batch.pk,
            "remainder": remainder_quantity,
            "moved": new_batch.quantity,
        },
    )
    return batch, new_batch
