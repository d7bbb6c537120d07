"""
Silversmith Production Board.

Floor overview: how much sits in each stage and which batches are
stuck. Uses aggregate()/annotate() so the summary is one SQL query.
"""

from datetime import timedelta

from django.db.models import Count, Sum
from django.utils import timezone

from silversmith.conf import get_setting
from silversmith.lifecycle import STAGE_ORDER, ProductionStage
from silversmith.models import ProductionBatch


class ProductionBoard:
    """Aggregated views of the production floor."""

    @classmethod
    def stage_summary(cls, include_held: bool = False) -> dict[str, dict]:
        """
        Quantity and batch count per stage.

        Returns:
            {
                'waxing': {'label': 'Waxing', 'batches': 3, 'quantity': 42},
                ...
            }
        """
        qs = ProductionBatch.objects.all()
        if not include_held:
            qs = qs.filter(on_hold=False)

        rows = {
            row["current_stage"]: row
            for row in qs.values("current_stage").annotate(
                batches=Count("id"), quantity=Sum("quantity")
            )
        }

        summary = {}
        for stage in STAGE_ORDER:
            row = rows.get(stage.value, {})
            summary[stage.value] = {
                "label": str(stage.label),
                "batches": row.get("batches", 0),
                "quantity": row.get("quantity") or 0,
            }
        return summary

    @classmethod
    def delayed(cls, hours: int | None = None):
        """Batches sitting in one non-ready stage longer than ``hours``."""
        if hours is None:
            hours = get_setting("DELAY_HOURS")
        cutoff = timezone.now() - timedelta(hours=hours)
        return (
            ProductionBatch.objects.active()
            .filter(stage_entered_at__lt=cutoff)
            .order_by("stage_entered_at")
        )

    @classmethod
    def held(cls):
        return ProductionBatch.objects.filter(on_hold=True).exclude(
            current_stage=ProductionStage.READY
        )
