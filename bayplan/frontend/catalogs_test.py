"""Tests for front-end catalog loading and option lists."""

from ..engine.catalog_io import Catalog
from ..engine.types import CatalogEntry
from .catalogs import (
    DEFAULT_REPLICATION_COUNT,
    DEFAULT_REPLICATION_SPACING_MM,
    REPLICATION_COUNTS,
    REPLICATION_SPACINGS_MM,
    STANDARD_DIAMETERS_MM,
    diameter_choices,
    load_app_catalog,
)


def test_builtin_catalog_by_default():
    catalog = load_app_catalog()
    assert catalog.lookup("0001") is not None


def test_user_catalog(tmp_path):
    path = tmp_path / "mine.csv"
    path.write_text("code,diameter,width\n7,640,200\n")
    catalog = load_app_catalog(str(path))
    assert len(catalog) == 1
    assert catalog.lookup("0007").diameter_mm == 640


def test_diameter_choices_merge():
    catalog = Catalog([CatalogEntry("0001", "", 842, 245), CatalogEntry("0002", "", 600, 200)])
    choices = diameter_choices(catalog)
    assert choices == sorted(choices)
    assert 842 in choices
    assert choices.count(600) == 1
    assert set(STANDARD_DIAMETERS_MM) <= set(choices)


def test_replication_defaults_offered():
    assert DEFAULT_REPLICATION_COUNT in REPLICATION_COUNTS
    assert DEFAULT_REPLICATION_SPACING_MM in REPLICATION_SPACINGS_MM
    assert REPLICATION_COUNTS[-1] == 10
