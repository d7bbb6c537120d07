"""
Tests for the production board (silversmith.board).
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from silversmith.board import ProductionBoard
from silversmith.models import ProductionBatch, ProductionStage


@pytest.fixture
def floor(db):
    batches = {
        "waxing": ProductionBatch.objects.create(sku="DA050", quantity=5),
        "waxing_2": ProductionBatch.objects.create(sku="DA051", quantity=3),
        "casting": ProductionBatch.objects.create(
            sku="DA052", quantity=7, current_stage=ProductionStage.CASTING
        ),
        "held": ProductionBatch.objects.create(
            sku="DA053",
            quantity=2,
            current_stage=ProductionStage.CASTING,
            on_hold=True,
            on_hold_reason="Missing stones",
        ),
        "ready": ProductionBatch.objects.create(
            sku="DA054", quantity=4, current_stage=ProductionStage.READY
        ),
    }
    return batches


def _age(batch, hours):
    ProductionBatch.objects.filter(pk=batch.pk).update(
        stage_entered_at=timezone.now() - timedelta(hours=hours)
    )


class TestStageSummary:
    def test_every_stage_is_listed_in_order(self, floor):
        summary = ProductionBoard.stage_summary()

        assert list(summary) == [stage.value for stage in ProductionStage]

    def test_counts_and_quantities(self, floor):
        summary = ProductionBoard.stage_summary()

        assert summary["waxing"] == {"label": "Waxing", "batches": 2, "quantity": 8}
        assert summary["casting"]["batches"] == 1
        assert summary["casting"]["quantity"] == 7
        assert summary["ready"]["quantity"] == 4
        assert summary["setting"] == {"label": "Setting", "batches": 0, "quantity": 0}

    def test_include_held(self, floor):
        summary = ProductionBoard.stage_summary(include_held=True)

        assert summary["casting"]["batches"] == 2
        assert summary["casting"]["quantity"] == 9


class TestDelayed:
    def test_old_batches(self, floor):
        _age(floor["waxing"], 80)
        _age(floor["casting"], 100)

        delayed = list(ProductionBoard.delayed())

        assert delayed == [floor["casting"], floor["waxing"]]

    def test_ready_and_held_are_not_delayed(self, floor):
        _age(floor["ready"], 500)
        _age(floor["held"], 500)

        assert not ProductionBoard.delayed().exists()

    def test_custom_threshold(self, floor):
        _age(floor["waxing"], 10)

        assert list(ProductionBoard.delayed(hours=5)) == [floor["waxing"]]


class TestHeld:
    def test_held(self, floor):
        assert list(ProductionBoard.held()) == [floor["held"]]
