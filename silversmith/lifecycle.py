"""
Production stage rules.

Stages form one forward-only line:

    AWAITING_DELIVERY → WAXING → CASTING → SETTING → POLISHING → LABELING → READY

In-house batches start at WAXING and walk the manufacturing stages,
visiting SETTING only when the piece carries stones. Imported batches
start at AWAITING_DELIVERY and only pass through LABELING to READY.

A batch may jump forward to any later stage of its own path; it can
never go back. READY is terminal.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from silversmith.exceptions import SilversmithError


class ProductionStage(models.TextChoices):
    """Manufacturing stage of a batch."""

    AWAITING_DELIVERY = "awaiting_delivery", _("Awaiting delivery")
    WAXING = "waxing", _("Waxing")
    CASTING = "casting", _("Casting")
    SETTING = "setting", _("Setting")
    POLISHING = "polishing", _("Polishing")
    LABELING = "labeling", _("Labeling")
    READY = "ready", _("Ready")


class ProductionType(models.TextChoices):
    """Where a product comes from."""

    IN_HOUSE = "in_house", _("In-house")
    IMPORTED = "imported", _("Imported")


STAGE_ORDER = tuple(ProductionStage)

IMPORTED_PATH = (
    ProductionStage.AWAITING_DELIVERY,
    ProductionStage.LABELING,
    ProductionStage.READY,
)

IN_HOUSE_PATH = (
    ProductionStage.WAXING,
    ProductionStage.CASTING,
    ProductionStage.SETTING,
    ProductionStage.POLISHING,
    ProductionStage.LABELING,
    ProductionStage.READY,
)

TERMINAL_STAGE = ProductionStage.READY


def initial_stage(production_type) -> ProductionStage:
    """First stage of a freshly created batch."""
    if production_type == ProductionType.IMPORTED:
        return ProductionStage.AWAITING_DELIVERY
    return ProductionStage.WAXING


def path_for(current_stage, requires_setting: bool) -> tuple:
    """
    Stages a batch at ``current_stage`` can ever visit, in order.

    A batch still awaiting delivery is on the imported path; everything
    else follows the in-house path.
    """
    if ProductionStage(current_stage) == ProductionStage.AWAITING_DELIVERY:
        return IMPORTED_PATH
    if requires_setting:
        return IN_HOUSE_PATH
    return tuple(s for s in IN_HOUSE_PATH if s != ProductionStage.SETTING)


def allowed_targets(current_stage, requires_setting: bool) -> tuple:
    """Stages reachable in one move from ``current_stage``."""
    current_stage = ProductionStage(current_stage)
    path = path_for(current_stage, requires_setting)
    if current_stage not in path:
        return ()
    return path[path.index(current_stage) + 1:]


def next_stage(current_stage, requires_setting: bool):
    """Immediate next stage, or None at READY."""
    targets = allowed_targets(current_stage, requires_setting)
    return targets[0] if targets else None


def check_transition(current_stage, target_stage, requires_setting: bool) -> ProductionStage:
    """
    Validate a move and return the target as a ProductionStage.

    Raises:
        SilversmithError: STAGE_TRANSITION_NOT_ALLOWED
    """
    try:
        target = ProductionStage(target_stage)
    except ValueError:
        raise SilversmithError(
            "STAGE_TRANSITION_NOT_ALLOWED",
            current=str(current_stage),
            target=str(target_stage),
        )

    if target not in allowed_targets(current_stage, requires_setting):
        raise SilversmithError(
            "STAGE_TRANSITION_NOT_ALLOWED",
            current=str(current_stage),
            target=target.value,
            requires_setting=requires_setting,
        )
    return target
