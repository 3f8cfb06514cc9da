"""Tests for mm/display conversion, scale presets and bay validation."""

import pytest

from bayplan.engine.bay import BayModel, parse_bay_length
from bayplan.engine.coords import (
    NARROW_SCALE_FACTOR,
    CoordinateSystem,
    ScalePreset,
    preset_for_display_width,
)
from bayplan.engine.errors import BayConfigError


class TestPresets:
    def test_wide_factor(self):
        assert ScalePreset.WIDE.factor == 10.0

    def test_narrow_maps_bay_width_to_190(self):
        coords = CoordinateSystem(ScalePreset.NARROW)
        assert coords.scale_factor == pytest.approx(NARROW_SCALE_FACTOR)
        assert coords.bay_width == pytest.approx(190.0)

    def test_breakpoint(self):
        assert preset_for_display_width(600) is ScalePreset.NARROW
        assert preset_for_display_width(601) is ScalePreset.WIDE
        assert preset_for_display_width(320) is ScalePreset.NARROW


class TestConversion:
    @pytest.mark.parametrize("preset", list(ScalePreset))
    def test_round_trip_within_one_unit(self, preset):
        coords = CoordinateSystem(preset)
        for mm in range(0, 15001, 137):
            back = coords.display_to_mm(coords.mm_to_display(mm))
            assert abs(back - mm) <= coords.scale_factor

    def test_wide_values(self):
        coords = CoordinateSystem()
        assert coords.mm_to_display(700) == pytest.approx(70.0)
        assert coords.display_to_mm(24.0) == pytest.approx(240.0)
        assert coords.bay_width == pytest.approx(240.0)
        assert coords.bay_length(8000) == pytest.approx(800.0)


class TestParseBayLength:
    @pytest.mark.parametrize(
        "raw, expected",
        [(5000, 5000), (15000, 15000), ("8000", 8000), (" 8000mm", 8000)],
    )
    def test_valid(self, raw, expected):
        assert parse_bay_length(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", 4999, 15001, "-8000"])
    def test_invalid(self, raw):
        with pytest.raises(BayConfigError):
            parse_bay_length(raw)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_bay_length("long")


class TestBayModel:
    def test_unconfigured_by_default(self):
        bay = BayModel()
        assert not bay.is_configured
        assert bay.width_mm == 2400

    def test_configure_and_clear(self):
        bay = BayModel()
        assert bay.configure("12000") == 12000
        assert bay.is_configured
        bay.clear()
        assert not bay.is_configured

    def test_guides_every_metre(self):
        bay = BayModel(length_mm=5000)
        assert bay.guide_positions_mm() == [1000, 2000, 3000, 4000]

    def test_guides_for_partial_metre(self):
        bay = BayModel(length_mm=5500)
        assert bay.guide_positions_mm() == [1000, 2000, 3000, 4000, 5000]
