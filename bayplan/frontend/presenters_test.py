"""Tests for the headless UI helpers."""

from ..engine.types import CatalogEntry, Tire
from .presenters import (
    PRODUCT_FIELDS,
    hit_test,
    loaded_length_text,
    product_fields,
    tire_tooltip,
)


def _tire(tire_id, x, y, diameter=60.0, code=""):
    return Tire(
        id=tire_id,
        diameter_mm=diameter * 10,
        diameter=diameter,
        x=x,
        y=y,
        catalog_code=code,
    )


class TestHitTest:
    def test_inside_circle(self):
        assert hit_test([_tire(1, 0, 0)], 30, 30) == 1

    def test_bounding_box_corner_misses(self):
        assert hit_test([_tire(1, 0, 0)], 2, 2) is None

    def test_topmost_wins(self):
        tires = [_tire(1, 0, 0), _tire(2, 20, 0)]
        assert hit_test(tires, 40, 30) == 2

    def test_empty(self):
        assert hit_test([], 0, 0) is None


class TestProductFields:
    def test_blank_without_product(self):
        fields = product_fields(None)
        assert set(fields) == set(PRODUCT_FIELDS)
        assert all(v == "" for v in fields.values())

    def test_entry(self):
        fields = product_fields(CatalogEntry("0013", "11R22.5", 1054, 279, 6, "truck"))
        assert fields == {
            "size": "11R22.5",
            "diameter": "1054",
            "width": "279",
            "pallet": "6",
            "note": "truck",
        }

    def test_missing_pallet(self):
        assert product_fields(CatalogEntry("0001", "x", 600, 200))["pallet"] == ""


def test_loaded_length_text():
    assert loaded_length_text(None) == ""
    assert loaded_length_text(3700) == "3700"


def test_tire_tooltip():
    assert tire_tooltip(_tire(3, 0, 0)) == "tire-3: 600mm"
    assert tire_tooltip(_tire(4, 0, 0, code="0012")) == "tire-4: 600mm [0012]"
