"""Loading bay dimensions and bay-length validation."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import BayConfigError
from .types import parse_leading_int

BAY_WIDTH_MM = 2400
MIN_BAY_LENGTH_MM = 5000
MAX_BAY_LENGTH_MM = 15000
GUIDE_SPACING_MM = 1000


def parse_bay_length(raw: int | str | None) -> int:
    """Parse and range-check a bay length in millimeters.

    Strings use leading-integer semantics (``"8000mm"`` -> 8000). Raises
    ``BayConfigError`` for missing, non-numeric or out-of-range input.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise BayConfigError("Bay length is required")
    value = parse_leading_int(raw)
    if value is None:
        raise BayConfigError(f"Bay length must be a number, got {raw!r}")
    if not MIN_BAY_LENGTH_MM <= value <= MAX_BAY_LENGTH_MM:
        raise BayConfigError(
            f"Bay length must be between {MIN_BAY_LENGTH_MM} and "
            f"{MAX_BAY_LENGTH_MM}mm, got {value}"
        )
    return value


@dataclass
class BayModel:
    """The placement rectangle. ``length_mm == 0`` means not configured."""

    length_mm: int = 0
    width_mm: int = BAY_WIDTH_MM

    @property
    def is_configured(self) -> bool:
        return self.length_mm > 0

    def configure(self, raw_length: int | str | None) -> int:
        self.length_mm = parse_bay_length(raw_length)
        return self.length_mm

    def clear(self) -> None:
        self.length_mm = 0

    def guide_positions_mm(self, spacing_mm: int = GUIDE_SPACING_MM) -> list[int]:
        """Interior guide-line offsets along the bay length."""
        return list(range(spacing_mm, self.length_mm, spacing_mm))
