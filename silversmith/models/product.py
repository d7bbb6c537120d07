"""
Product and ProductVariant models.

Product = a master SKU (one design, independent of finish and stone).
ProductVariant = a sellable suffix of that master (e.g. "X", "PKR").
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from silversmith.codes import Gender, parse_sku
from silversmith.lifecycle import ProductionType


class Product(models.Model):
    """Master SKU of the catalog."""

    sku = models.CharField(
        unique=True,
        max_length=50,
        verbose_name=_("SKU"),
        help_text=_("Master code, e.g. DA050"),
    )
    prefix = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_("Prefix"),
    )
    name = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_("Name"),
    )
    category = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_("Category"),
    )
    gender = models.CharField(
        max_length=10,
        choices=Gender.choices,
        blank=True,
        verbose_name=_("Gender"),
        help_text=_("Selects the stone code table used to read suffixes (derived from the SKU if empty)"),
    )
    production_type = models.CharField(
        max_length=20,
        choices=ProductionType.choices,
        default=ProductionType.IN_HOUSE,
        verbose_name=_("Production type"),
    )
    has_stones = models.BooleanField(
        default=False,
        verbose_name=_("Has stones"),
        help_text=_("Recipe uses a gem material; batches go through setting"),
    )
    selling_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0"),
        verbose_name=_("Selling price"),
    )
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))

    class Meta:
        db_table = "silversmith_product"
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["sku"]

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}" if self.name else self.sku

    def save(self, *args, **kwargs):
        self.sku = self.sku.strip().upper()
        if not self.prefix:
            self.prefix = "".join(c for c in self.sku if c.isalpha())[:10]
        if not self.gender or not self.category:
            gender, category = parse_sku(self.sku)
            self.gender = self.gender or gender
            self.category = self.category or category
        super().save(*args, **kwargs)

    @property
    def is_imported(self) -> bool:
        return self.production_type == ProductionType.IMPORTED


class ProductVariant(models.Model):
    """A finish/stone combination sold under a master."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="variants",
        verbose_name=_("Product"),
    )
    suffix = models.CharField(
        max_length=20,
        verbose_name=_("Suffix"),
        help_text=_("Finish and stone codes, e.g. XKR"),
    )
    description = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_("Description"),
    )

    class Meta:
        db_table = "silversmith_product_variant"
        verbose_name = _("Variant")
        verbose_name_plural = _("Variants")
        ordering = ["product", "suffix"]
        unique_together = [("product", "suffix")]

    def __str__(self) -> str:
        return f"{self.product.sku}{self.suffix}"

    def save(self, *args, **kwargs):
        self.suffix = self.suffix.strip().upper()
        if not self.description:
            from silversmith.codec import decompose_suffix

            self.description = decompose_suffix(self.suffix, self.product.gender).description
        super().save(*args, **kwargs)

    @property
    def sku(self) -> str:
        return f"{self.product.sku}{self.suffix}"
