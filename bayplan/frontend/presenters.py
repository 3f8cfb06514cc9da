"""UI-independent helpers for ``app.py``: hit testing and readout text.

Kept free of tkinter so they can be unit tested headless.
"""

from ..engine.types import CatalogEntry, Tire

PRODUCT_FIELDS = ("size", "diameter", "width", "pallet", "note")


def hit_test(tires, x, y):
    """Id of the topmost tire whose circle contains (x, y), or None.

    ``tires`` is in insertion order; later tires are drawn on top.
    """
    for tire in reversed(list(tires)):
        cx, cy = tire.center
        if (x - cx) ** 2 + (y - cy) ** 2 <= tire.radius**2:
            return tire.id
    return None


def product_fields(entry: CatalogEntry | None) -> dict[str, str]:
    """Display strings for the product panel; all blank when no product."""
    if entry is None:
        return {name: "" for name in PRODUCT_FIELDS}
    return {
        "size": entry.size,
        "diameter": f"{entry.diameter_mm}",
        "width": f"{entry.width_mm}",
        "pallet": "" if entry.pallet_count is None else f"{entry.pallet_count}",
        "note": entry.note,
    }


def loaded_length_text(loaded_mm):
    return "" if loaded_mm is None else f"{loaded_mm}"


def tire_tooltip(tire: Tire) -> str:
    text = f"{tire.wire_id}: {tire.diameter_mm:g}mm"
    if tire.catalog_code:
        text += f" [{tire.catalog_code}]"
    return text
