"""The load-planning session: one explicit owner for all mutable state.

A ``Session`` holds the bay, the coordinate system, the live tires (in
insertion order), the history store, the id counter, the catalog and the
currently looked-up product. Every engine operation reads or writes state
through it; nothing lives at module level.

History is committed only by the operations that complete a user action:
``init_bay``, ``create_tire``, ``delete_tire``, ``end_drag`` (when the
tire actually moved or changed containment) and ``replicate`` (see
``replication.py``). Intermediate drag steps and rescaling never commit.

Pointer coordinates passed to the drag methods are display units relative
to the bay's top-left corner; converting from window coordinates is the
front end's job.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass

from .bay import BayModel
from .catalog_io import Catalog
from .coords import CoordinateSystem, ScalePreset, preset_for_display_width
from .errors import (
    BayNotConfiguredError,
    CatalogLookupError,
    PlacementInfeasibleError,
)
from .history import HistoryStore
from .placement import (
    center_in_bay,
    clamp_to_bay,
    find_overlaps,
    resolve_collisions,
)
from .prng import PCG32
from .types import CatalogEntry, Snapshot, Tire, pad_code

logger = logging.getLogger(__name__)

# Gap kept from the far corner when a tire is created without a position.
CREATE_PADDING = 10.0
# Pointer travel (display units) below which a press/release is a tap.
TAP_THRESHOLD = 5.0


class DragOutcome(enum.Enum):
    TAP = "tap"
    MOVED = "moved"
    UNCHANGED = "unchanged"


@dataclass
class DragGesture:
    tire_id: int
    start_pointer: tuple[float, float]
    offset: tuple[float, float]
    start_position: tuple[float, float]
    start_in_bay: bool
    started: bool = False


class Session:
    def __init__(
        self,
        catalog: Catalog | None = None,
        coords: CoordinateSystem | None = None,
        seed: int | None = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else Catalog()
        self.coords = coords if coords is not None else CoordinateSystem()
        self.bay = BayModel()
        self.tires: dict[int, Tire] = {}
        self.history = HistoryStore()
        self.id_counter = 0
        self.current_product: CatalogEntry | None = None
        self._seed = seed
        self.rng = self._new_rng()
        self._drag: DragGesture | None = None

    def _new_rng(self) -> PCG32:
        return PCG32() if self._seed is None else PCG32(self._seed)

    # -- dimensions -----------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.bay.is_configured

    @property
    def bay_width(self) -> float:
        return self.coords.bay_width

    @property
    def bay_length(self) -> float:
        return self.coords.bay_length(self.bay.length_mm)

    def require_bay(self) -> None:
        if not self.bay.is_configured:
            raise BayNotConfiguredError("Set the bay length first")

    # -- lifecycle ------------------------------------------------------

    def init_bay(self, raw_length: int | str | None) -> int:
        """Start a fresh layout on a bay of the given length.

        Invalid input raises ``BayConfigError`` before anything changes.
        """
        length_mm = self.bay.configure(raw_length)
        self.tires.clear()
        self.id_counter = 0
        self.history.clear()
        self.rng = self._new_rng()
        self._drag = None
        self.commit()
        logger.info("Bay initialized: %dmm x %dmm", self.bay.width_mm, length_mm)
        return length_mm

    def reset(self) -> None:
        """Drop the bay, the layout, the history and the product lookup."""
        self.bay.clear()
        self.tires.clear()
        self.id_counter = 0
        self.history.clear()
        self.current_product = None
        self._drag = None
        logger.info("Session reset")

    # -- catalog --------------------------------------------------------

    def lookup_product(self, raw_code: str | int | None) -> CatalogEntry:
        """Make the catalog entry for ``raw_code`` the current product.

        On a miss the current product is cleared and ``CatalogLookupError``
        raised; the layout is never touched.
        """
        code = pad_code(raw_code)
        entry = self.catalog.lookup(code) if code else None
        if entry is None:
            self.current_product = None
            raise CatalogLookupError(code or str(raw_code or ""))
        self.current_product = entry
        return entry

    def clear_product(self) -> None:
        self.current_product = None

    def product_for_tire(self, tire_id: int) -> CatalogEntry | None:
        """Set the current product from a tire's catalog code.

        Used when a tire is tapped. Tires with no code, or a code the
        catalog doesn't know, clear the current product.
        """
        tire = self.tires.get(tire_id)
        entry = None
        if tire is not None and tire.catalog_code:
            entry = self.catalog.lookup(tire.catalog_code)
            if entry is None:
                logger.info(
                    "Tire %s has unknown product code %s",
                    tire.wire_id,
                    tire.catalog_code,
                )
        self.current_product = entry
        return entry

    # -- placement ------------------------------------------------------

    def _resolve(
        self, x: float, y: float, diameter: float, exclude_id: int | None
    ) -> tuple[float, float]:
        return resolve_collisions(
            x,
            y,
            diameter,
            self.tires.values(),
            self.bay_width,
            self.bay_length,
            exclude_id=exclude_id,
            rng=self.rng,
        )

    def _add_tire(
        self, diameter_mm: float, x: float, y: float, catalog_code: str
    ) -> Tire:
        diameter = self.coords.mm_to_display(diameter_mm)
        x, y = self._resolve(x, y, diameter, exclude_id=None)
        self.id_counter += 1
        tire = Tire(
            id=self.id_counter,
            diameter_mm=diameter_mm,
            diameter=diameter,
            x=x,
            y=y,
            in_bay=True,
            catalog_code=catalog_code,
        )
        self.tires[tire.id] = tire
        return tire

    def create_tire(
        self,
        diameter_mm: float | None = None,
        catalog_code: str | None = None,
        x: float | None = None,
        y: float | None = None,
    ) -> Tire:
        """Explicitly create a tire and commit it to history.

        The diameter comes from ``diameter_mm``, or else from the product
        (``catalog_code`` if given, otherwise the current product). The
        current product only tags the tire when its diameter matches.
        Without a position the tire goes to the far corner of the bay.
        """
        self.require_bay()
        if catalog_code:
            entry = self.catalog.lookup(catalog_code)
        elif self.current_product is not None and (
            diameter_mm is None
            or self.current_product.diameter_mm == diameter_mm
        ):
            entry = self.current_product
        else:
            entry = None

        if diameter_mm is None:
            if entry is None:
                raise ValueError("A diameter or a known product is required")
            diameter_mm = entry.diameter_mm
        if diameter_mm <= 0:
            raise ValueError(f"Diameter must be positive, got {diameter_mm}")

        diameter = self.coords.mm_to_display(diameter_mm)
        if diameter > self.bay_width:
            raise PlacementInfeasibleError(diameter_mm, self.bay.width_mm)

        if x is None or y is None:
            x = self.bay_width - diameter - CREATE_PADDING
            y = self.bay_length - diameter - CREATE_PADDING

        tire = self._add_tire(diameter_mm, x, y, entry.code if entry else "")
        self.commit()
        logger.info(
            "Created %s (%gmm) at (%.1f, %.1f)",
            tire.wire_id,
            diameter_mm,
            tire.x,
            tire.y,
        )
        return tire

    def place_tire(
        self, diameter_mm: float, x: float, y: float, catalog_code: str = ""
    ) -> Tire:
        """Programmatic placement, without a history commit.

        Unlike ``create_tire`` an oversize tire is placed anyway (it has to
        end up somewhere) and only logged.
        """
        self.require_bay()
        if self.coords.mm_to_display(diameter_mm) > self.bay_width:
            logger.warning(
                "Tire diameter %gmm exceeds bay width %dmm",
                diameter_mm,
                self.bay.width_mm,
            )
        return self._add_tire(diameter_mm, x, y, catalog_code)

    def delete_tire(self, tire_id: int) -> bool:
        """Remove a tire. Returns False if there is no such tire."""
        if self.tires.pop(tire_id, None) is None:
            return False
        if self._drag is not None and self._drag.tire_id == tire_id:
            self._drag = None
        self.commit()
        logger.info("Deleted tire-%d", tire_id)
        return True

    def move_tire(self, tire_id: int, x: float, y: float) -> tuple[float, float]:
        """Resolve and apply one move step for an in-bay tire."""
        self.require_bay()
        tire = self.tires[tire_id]
        if tire.diameter > self.bay_width:
            logger.warning(
                "Moving %s wider than the bay (%gmm)",
                tire.wire_id,
                tire.diameter_mm,
            )
        x, y = self._resolve(x, y, tire.diameter, exclude_id=tire_id)
        tire.x, tire.y = clamp_to_bay(
            x, y, tire.diameter, self.bay_width, self.bay_length
        )
        tire.in_bay = True
        return tire.x, tire.y

    # -- drag gestures --------------------------------------------------

    @property
    def dragging(self) -> int | None:
        return self._drag.tire_id if self._drag is not None else None

    def begin_drag(self, tire_id: int, px: float, py: float) -> None:
        tire = self.tires[tire_id]
        self._drag = DragGesture(
            tire_id=tire_id,
            start_pointer=(px, py),
            offset=(px - tire.x, py - tire.y),
            start_position=(tire.x, tire.y),
            start_in_bay=tire.in_bay,
        )

    def drag_to(self, px: float, py: float) -> Tire | None:
        """Follow the pointer. Returns the dragged tire, if any.

        Pointer positions outside the bay are ignored. The tire counts as
        in the bay while its center is strictly inside; otherwise it floats
        unconstrained.
        """
        gesture = self._drag
        if gesture is None:
            return None
        gesture.started = True
        tire = self.tires[gesture.tire_id]
        if not (0 <= px <= self.bay_width and 0 <= py <= self.bay_length):
            return tire

        x = px - gesture.offset[0]
        y = py - gesture.offset[1]
        cx, cy = x + tire.radius, y + tire.radius
        if center_in_bay(cx, cy, self.bay_width, self.bay_length):
            self.move_tire(tire.id, x, y)
        else:
            tire.x, tire.y = x, y
            tire.in_bay = False
        return tire

    def end_drag(self, px: float, py: float) -> DragOutcome:
        gesture = self._drag
        if gesture is None:
            return DragOutcome.UNCHANGED
        self._drag = None
        tire = self.tires.get(gesture.tire_id)
        if tire is None:
            return DragOutcome.UNCHANGED

        moved = math.hypot(
            px - gesture.start_pointer[0], py - gesture.start_pointer[1]
        )
        if moved < TAP_THRESHOLD and not gesture.started:
            if tire.in_bay:
                self.product_for_tire(tire.id)
            return DragOutcome.TAP

        if (tire.x, tire.y) != gesture.start_position or (
            tire.in_bay != gesture.start_in_bay
        ):
            self.commit()
            return DragOutcome.MOVED
        return DragOutcome.UNCHANGED

    # -- scale ----------------------------------------------------------

    def set_display_width(self, width: float) -> bool:
        return self.set_preset(preset_for_display_width(width))

    def set_preset(self, preset: ScalePreset) -> bool:
        """Switch scale preset, rescaling every live tire.

        Physical attributes never change: display diameter is recomputed
        from ``diameter_mm`` and positions keep their physical location,
        then in-bay tires are re-clamped. Returns True if the scale changed.
        """
        if preset is self.coords.preset:
            return False
        ratio = self.coords.scale_factor / preset.factor
        self.coords.preset = preset
        for tire in self.tires.values():
            tire.diameter = self.coords.mm_to_display(tire.diameter_mm)
            tire.x *= ratio
            tire.y *= ratio
            if tire.in_bay and self.bay.is_configured:
                tire.x, tire.y = clamp_to_bay(
                    tire.x,
                    tire.y,
                    tire.diameter,
                    self.bay_width,
                    self.bay_length,
                )
        logger.info(
            "Scale preset %s (%.3f mm/unit)",
            preset.value,
            self.coords.scale_factor,
        )
        return True

    # -- history --------------------------------------------------------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            tires=tuple(t.to_record() for t in self.tires.values()),
            bay_length_mm=self.bay.length_mm,
            id_counter=self.id_counter,
            scale_factor=self.coords.scale_factor,
        )

    def commit(self) -> None:
        self.history.push(self.snapshot())

    def restore(self, snapshot: Snapshot) -> None:
        """Rebuild the live tires from a snapshot (no history change)."""
        ratio = snapshot.scale_factor / self.coords.scale_factor
        self.tires.clear()
        for record in snapshot.tires:
            self.tires[record.id] = Tire(
                id=record.id,
                diameter_mm=record.diameter_mm,
                diameter=self.coords.mm_to_display(record.diameter_mm),
                x=record.x * ratio,
                y=record.y * ratio,
                in_bay=record.in_bay,
                catalog_code=record.catalog_code,
            )
        if snapshot.bay_length_mm > 0:
            self.bay.length_mm = snapshot.bay_length_mm
        self.id_counter = snapshot.max_tire_id()
        self._drag = None

    def go_to(self, index: int) -> bool:
        snapshot = self.history.go_to(index)
        if snapshot is None:
            return False
        self.restore(snapshot)
        logger.debug("History at %d/%d", index, len(self.history) - 1)
        return True

    def undo(self) -> bool:
        return self.go_to(self.history.index - 1)

    def redo(self) -> bool:
        return self.go_to(self.history.index + 1)

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def load_layout(self, snapshot: Snapshot) -> None:
        """Start a new history from a saved layout."""
        self.init_bay(snapshot.bay_length_mm)
        self.history.clear()
        self.restore(snapshot)
        self.commit()

    # -- readouts -------------------------------------------------------

    def tire_count(self) -> int:
        return len(self.tires)

    def in_bay_tires(self) -> list[Tire]:
        return [t for t in self.tires.values() if t.in_bay]

    def loaded_length_mm(self) -> int | None:
        """Far edge of the deepest in-bay tire, in mm; None if empty."""
        placed = self.in_bay_tires()
        if not placed:
            return None
        far_edge = max(t.y + t.diameter for t in placed)
        return round(self.coords.display_to_mm(far_edge))

    def overlaps(self) -> list[tuple[int, int, float]]:
        return find_overlaps(self.tires.values())
