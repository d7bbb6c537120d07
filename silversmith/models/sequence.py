"""
Yearly counters behind batch and order codes (BAT-2026-00042, ORD-2026-00007).
"""

from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class CodeSequence(models.Model):
    """
    Last number handed out for one code prefix.

    The prefix already carries the year ("BAT-2026"), so numbering
    restarts every January without any cleanup job.

    Usage:
        CodeSequence.next_code("BAT")   # "BAT-2026-00001"
    """

    prefix = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_("Prefix"),
    )
    last_value = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Last value"),
    )

    class Meta:
        db_table = "silversmith_code_sequence"
        verbose_name = _("Code sequence")
        verbose_name_plural = _("Code sequences")

    def __str__(self) -> str:
        return f"{self.prefix} → {self.last_value}"

    @classmethod
    def next_value(cls, prefix: str) -> int:
        """Reserve the next number for ``prefix`` (row locked until commit)."""
        with transaction.atomic():
            counter, _created = cls.objects.select_for_update().get_or_create(prefix=prefix)
            counter.last_value = models.F("last_value") + 1
            counter.save(update_fields=["last_value"])
            counter.refresh_from_db(fields=["last_value"])
        return counter.last_value

    @classmethod
    def next_code(cls, kind: str, width: int = 5) -> str:
        """Next code for ``kind`` in the current year, e.g. KIND-YYYY-NNNNN."""
        prefix = f"{kind}-{timezone.now().year}"
        return f"{prefix}-{cls.next_value(prefix):0{width}d}"
