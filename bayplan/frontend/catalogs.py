"""Catalog and option lists for the front end.

Pure data module with no UI dependencies (no tkinter), so it can be
imported by headless code and tests as well as the GUI.

Provides:
  - ``load_app_catalog``: the catalog to use, from a user-supplied CSV or
    the built-in ``bayplan/catalogs/tire-data.csv``.
  - ``diameter_choices``: the diameter drop-down contents.
  - Replication count and spacing choices for the context menu.
"""

from pathlib import Path

from ..engine.catalog_io import Catalog, builtin_catalog_path, load_catalog

# Offered even when the catalog has nothing of that size.
STANDARD_DIAMETERS_MM = (600, 650, 700, 750, 800, 900, 1000, 1100)

REPLICATION_COUNTS = tuple(range(1, 11))
REPLICATION_SPACINGS_MM = (0, 10, 20, 30, 50, 100)
DEFAULT_REPLICATION_COUNT = 1
DEFAULT_REPLICATION_SPACING_MM = 20


def load_app_catalog(path: str | Path | None = None) -> Catalog:
    return load_catalog(path if path else builtin_catalog_path())


def diameter_choices(catalog: Catalog) -> list[int]:
    """Standard diameters merged with every diameter in the catalog."""
    return sorted(set(STANDARD_DIAMETERS_MM) | set(catalog.diameters_mm()))
