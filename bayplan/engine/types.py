"""Data types for tires, layout snapshots and catalog entries.

``Tire`` is the live, mutable record the session edits. ``TireRecord`` and
``Snapshot`` are the frozen values kept by the history store; they compare
structurally, so two captures of the same layout are equal. The ``to_dict``
/ ``from_dict`` pairs match the persisted snapshot shape::

    {"tires": [{"id": "tire-1", "x": .., "y": .., "diameterMM": ..,
                "catalogCode": "0012", "inBay": true}],
     "bayLengthMM": 8000, "idCounter": 1}
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

TIRE_ID_PREFIX = "tire-"

# Millimeters per display unit assumed for snapshots that don't say.
DEFAULT_SCALE_FACTOR = 10.0

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value: str | int | None) -> int | None:
    """Integer prefix of a string (``"650mm"`` -> 650), or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def format_tire_id(tire_id: int) -> str:
    return f"{TIRE_ID_PREFIX}{tire_id}"


def parse_tire_id(value: int | str) -> int:
    """Accept ``3``, ``"3"`` or ``"tire-3"`` and return ``3``."""
    if isinstance(value, int):
        return value
    text = str(value)
    if text.startswith(TIRE_ID_PREFIX):
        text = text[len(TIRE_ID_PREFIX) :]
    return int(text)


def pad_code(code: str | int | None) -> str:
    """Normalize a product code to the 4-character zero-padded form."""
    if code is None:
        return ""
    text = str(code).strip()
    if not text:
        return ""
    return text.zfill(4)


@dataclass
class CatalogEntry:
    code: str
    size: str
    diameter_mm: int
    width_mm: int
    pallet_count: int | None = None
    note: str = ""

    @staticmethod
    def from_dict(d: dict) -> CatalogEntry:
        return CatalogEntry(
            code=pad_code(d["code"]),
            size=d.get("size", ""),
            diameter_mm=int(d["diameter"]),
            width_mm=int(d["width"]),
            pallet_count=d.get("pallet"),
            note=d.get("note", ""),
        )


@dataclass
class Tire:
    """A live tire. Position and ``diameter`` are in display units."""

    id: int
    diameter_mm: float
    diameter: float
    x: float = 0.0
    y: float = 0.0
    in_bay: bool = True
    catalog_code: str = ""

    @property
    def radius(self) -> float:
        return self.diameter / 2

    @property
    def center(self) -> tuple[float, float]:
        r = self.radius
        return self.x + r, self.y + r

    @property
    def wire_id(self) -> str:
        return format_tire_id(self.id)

    def to_record(self) -> TireRecord:
        return TireRecord(
            id=self.id,
            x=self.x,
            y=self.y,
            diameter_mm=self.diameter_mm,
            catalog_code=self.catalog_code,
            in_bay=self.in_bay,
        )


@dataclass(frozen=True)
class TireRecord:
    id: int
    x: float
    y: float
    diameter_mm: float
    catalog_code: str = ""
    in_bay: bool = True

    @staticmethod
    def from_dict(d: dict) -> TireRecord:
        return TireRecord(
            id=parse_tire_id(d["id"]),
            x=float(d["x"]),
            y=float(d["y"]),
            diameter_mm=d["diameterMM"],
            catalog_code=d.get("catalogCode", d.get("productCode", "")) or "",
            in_bay=bool(d.get("inBay", True)),
        )

    def to_dict(self) -> dict:
        return {
            "id": format_tire_id(self.id),
            "x": self.x,
            "y": self.y,
            "diameterMM": self.diameter_mm,
            "catalogCode": self.catalog_code,
            "inBay": self.in_bay,
        }


@dataclass(frozen=True)
class Snapshot:
    """Immutable capture of the full layout, in insertion order.

    Tire positions are display units at ``scale_factor`` mm per unit, so a
    snapshot taken before a rescale can still be restored afterwards.
    """

    tires: tuple[TireRecord, ...] = ()
    bay_length_mm: int = 0
    id_counter: int = 0
    scale_factor: float = DEFAULT_SCALE_FACTOR

    @staticmethod
    def from_dict(d: dict) -> Snapshot:
        return Snapshot(
            tires=tuple(TireRecord.from_dict(t) for t in d.get("tires", [])),
            bay_length_mm=int(d.get("bayLengthMM", d.get("bayLength", 0))),
            id_counter=int(d.get("idCounter", d.get("tireCounter", 0))),
            scale_factor=float(d.get("scaleFactor", DEFAULT_SCALE_FACTOR)),
        )

    def to_dict(self) -> dict:
        return {
            "tires": [t.to_dict() for t in self.tires],
            "bayLengthMM": self.bay_length_mm,
            "idCounter": self.id_counter,
            "scaleFactor": self.scale_factor,
        }

    def max_tire_id(self) -> int:
        """Highest tire id present, or 0 for an empty layout."""
        return max((t.id for t in self.tires), default=0)


class ReplicationOutcome(enum.Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    NONE = "none"


@dataclass
class ReplicationResult:
    requested: int
    placed_ids: list[int] = field(default_factory=list)

    @property
    def placed(self) -> int:
        return len(self.placed_ids)

    @property
    def outcome(self) -> ReplicationOutcome:
        if self.placed >= self.requested:
            return ReplicationOutcome.COMPLETE
        if self.placed == 0:
            return ReplicationOutcome.NONE
        return ReplicationOutcome.PARTIAL

    @property
    def message(self) -> str:
        outcome = self.outcome
        if outcome is ReplicationOutcome.COMPLETE:
            return f"Placed {self.placed} copies."
        if outcome is ReplicationOutcome.NONE:
            return "Too many copies: the first copy would not fit in the bay."
        return (
            f"Placed {self.placed} of {self.requested} copies; copy "
            f"{self.placed + 1} onward would not fit in the bay and was "
            "skipped."
        )
