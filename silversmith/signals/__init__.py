"""
Silversmith Signals.

All communication with external systems happens via signals.
This ensures decoupling and allows for easy testing.

Signals:
    stage_changed: Batch (or part of it) moved to another stage
    batches_created: Order lines were sent to production
"""

from django.dispatch import Signal

# Batch moved or split
# Sent by ProductionBatch.move_stage()
# Args: batch (the row now at the target stage), result (MoveResult), user
stage_changed = Signal()

# Order sent to production
# Sent by send_to_production()
# Args: order, batches (list of ProductionBatch), user
batches_created = Signal()

__all__ = ["stage_changed", "batches_created"]
