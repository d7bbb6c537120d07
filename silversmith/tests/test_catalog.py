"""
Tests for the catalog snapshot, backends and settings
(silversmith.catalog, silversmith.adapters, silversmith.conf).
"""

from decimal import Decimal

import pytest

from silversmith.adapters import ModelCatalogBackend, StaticCatalogBackend
from silversmith.catalog import Catalog, CatalogEntry
from silversmith.codec import decode
from silversmith.codes import Gender
from silversmith.conf import (
    get_catalog,
    get_catalog_backend,
    get_setting,
    reset_catalog_backend,
)
from silversmith.models import Product, ProductionType, ProductVariant
from silversmith.protocols import CatalogBackend


@pytest.fixture(autouse=True)
def fresh_backend():
    reset_catalog_backend()
    yield
    reset_catalog_backend()


@pytest.fixture
def products(db):
    ring = Product.objects.create(sku="da050", gender=Gender.WOMEN, has_stones=True)
    ProductVariant.objects.create(product=ring, suffix="xco")
    Product.objects.create(sku="XR2020", production_type=ProductionType.IMPORTED)
    Product.objects.create(sku="OLD001", is_active=False)
    return ring


# ═══════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════


class TestCatalog:
    def test_lookup(self):
        catalog = Catalog([CatalogEntry("DA050"), CatalogEntry("XR2020")])

        assert "DA050" in catalog
        assert len(catalog) == 2
        assert catalog.get("XR2020").sku == "XR2020"
        assert catalog.get("ZZ999") is None

    def test_match_master(self):
        catalog = Catalog([CatalogEntry("DA10"), CatalogEntry("DA100")])

        assert catalog.match_master("DA100X").sku == "DA100"
        assert catalog.match_master("DA10X").sku == "DA10"
        assert catalog.match_master("DA1") is None

    def test_entry_variants(self):
        entry = CatalogEntry("DA050", variants=frozenset({"XCO"}))

        assert entry.has_variant("")
        assert entry.has_variant("xco")
        assert not entry.has_variant("X")

    def test_from_queryset(self, products):
        catalog = Catalog.from_queryset()

        assert len(catalog) == 2
        assert "OLD001" not in catalog
        ring = catalog.get("DA050")
        assert ring.gender == Gender.WOMEN
        assert ring.has_stones
        assert ring.variants == frozenset({"XCO"})
        assert catalog.get("XR2020").is_imported


# ═══════════════════════════════════════════════════════════════════
# Models feeding the catalog
# ═══════════════════════════════════════════════════════════════════


class TestProductModels:
    def test_sku_normalized_and_prefix_derived(self, products):
        assert products.sku == "DA050"
        assert products.prefix == "DA"

    def test_variant_description_from_codes(self, products):
        variant = products.variants.get()

        assert variant.suffix == "XCO"
        assert variant.sku == "DA050XCO"
        assert variant.description == "Επίχρυσο - Κόπερ"

    def test_default_price(self, products):
        assert products.selling_price == Decimal("0")

    def test_gender_and_category_from_sku(self, db):
        product = Product.objects.create(sku="DA051")

        assert product.gender == Gender.WOMEN
        assert product.category == "Δαχτυλίδι"

    def test_explicit_gender_is_kept(self, db):
        product = Product.objects.create(sku="DA052", gender=Gender.UNISEX, category="Custom")

        assert product.gender == Gender.UNISEX
        assert product.category == "Custom"

    def test_derived_gender_selects_women_stones(self, db):
        Product.objects.create(sku="DA053")

        ident = decode("DA053PAX", Catalog.from_queryset())

        assert ident.finish.code == ""
        assert ident.stone.code == "PAX"
        assert ident.stone.name == "Πράσινος Αχάτης"


# ═══════════════════════════════════════════════════════════════════
# Backends and settings
# ═══════════════════════════════════════════════════════════════════


class TestBackends:
    def test_default_backend_reads_models(self, products):
        backend = get_catalog_backend()

        assert isinstance(backend, ModelCatalogBackend)
        assert isinstance(backend, CatalogBackend)
        assert "DA050" in get_catalog()

    def test_backend_is_a_singleton(self):
        assert get_catalog_backend() is get_catalog_backend()

    def test_configured_backend(self, settings):
        settings.SILVERSMITH = {"CATALOG_BACKEND": "silversmith.adapters.catalog.StaticCatalogBackend"}

        backend = get_catalog_backend()

        assert isinstance(backend, StaticCatalogBackend)
        assert len(get_catalog()) == 0

    def test_static_backend(self):
        backend = StaticCatalogBackend([CatalogEntry("DA050")])

        assert isinstance(backend, CatalogBackend)
        assert "DA050" in backend.get_catalog()


class TestSettings:
    def test_defaults(self, settings):
        settings.SILVERSMITH = {}

        assert get_setting("RANGE_LIMIT") == 500
        assert get_setting("PRICE_CIPHER_KEYWORD") == "BLACKHORSE"
        assert get_setting("DELAY_HOURS") == 72
        assert get_setting("CATALOG_BACKEND") is None

    def test_flat_setting(self, settings):
        settings.SILVERSMITH = {}
        settings.SILVERSMITH_DELAY_HOURS = 24

        assert get_setting("DELAY_HOURS") == 24

    def test_dict_wins_over_flat(self, settings):
        settings.SILVERSMITH = {"DELAY_HOURS": 12}
        settings.SILVERSMITH_DELAY_HOURS = 24

        assert get_setting("DELAY_HOURS") == 12

    def test_explicit_default(self, settings):
        settings.SILVERSMITH = {}

        assert get_setting("UNKNOWN", default="x") == "x"
