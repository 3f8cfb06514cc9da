"""Conversion between physical millimeters and display units.

Millimeters are the source of truth for physical size. Display units are
whatever the front end draws in (pixels for the Tk canvas). Exactly two
scale presets exist:

  * ``WIDE``: 10 mm per display unit, used when there is room.
  * ``NARROW``: chosen so the fixed 2400 mm bay width maps to 190 display
    units, used on narrow windows.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .bay import BAY_WIDTH_MM
from .types import DEFAULT_SCALE_FACTOR

WIDE_SCALE_FACTOR = DEFAULT_SCALE_FACTOR
NARROW_BAY_WIDTH_UNITS = 190.0
NARROW_SCALE_FACTOR = BAY_WIDTH_MM / NARROW_BAY_WIDTH_UNITS

# Display widths at or below this use the narrow preset.
NARROW_BREAKPOINT = 600


class ScalePreset(enum.Enum):
    WIDE = "wide"
    NARROW = "narrow"

    @property
    def factor(self) -> float:
        if self is ScalePreset.NARROW:
            return NARROW_SCALE_FACTOR
        return WIDE_SCALE_FACTOR


def preset_for_display_width(width: float) -> ScalePreset:
    if width <= NARROW_BREAKPOINT:
        return ScalePreset.NARROW
    return ScalePreset.WIDE


@dataclass
class CoordinateSystem:
    preset: ScalePreset = ScalePreset.WIDE

    @property
    def scale_factor(self) -> float:
        """Millimeters per display unit."""
        return self.preset.factor

    def mm_to_display(self, mm: float) -> float:
        return mm / self.scale_factor

    def display_to_mm(self, units: float) -> float:
        return units * self.scale_factor

    @property
    def bay_width(self) -> float:
        return self.mm_to_display(BAY_WIDTH_MM)

    def bay_length(self, length_mm: float) -> float:
        return self.mm_to_display(length_mm)
