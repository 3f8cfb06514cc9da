"""Load the tire catalog from CSV.

The catalog is a read-only lookup keyed by 4-character zero-padded product
code. The CSV has a header row naming some or all of the columns
``code, size, diameter, width, pallet, note`` (case-insensitive, any
order, extra columns ignored). Rows whose diameter or width is not numeric
are skipped with a warning, as are rows with no code.

Also provides the path to the built-in catalog under
``bayplan/catalogs/``.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from .types import CatalogEntry, pad_code, parse_leading_int

logger = logging.getLogger(__name__)

_CATALOGS_DIR = Path(__file__).parent.parent / "catalogs"

_COLUMNS = ("code", "size", "diameter", "width", "pallet", "note")
_REQUIRED_NUMERIC = ("diameter", "width")


def builtin_catalog_path(name: str = "tire-data") -> Path:
    """Return the path to ``bayplan/catalogs/{name}.csv``."""
    return _CATALOGS_DIR / f"{name}.csv"


class Catalog:
    def __init__(self, entries: list[CatalogEntry] | None = None) -> None:
        self.entries: list[CatalogEntry] = []
        self._by_code: dict[str, CatalogEntry] = {}
        for entry in entries or []:
            self.add(entry)

    def add(self, entry: CatalogEntry) -> None:
        self.entries.append(entry)
        # First row wins for duplicate codes, matching a linear search.
        self._by_code.setdefault(entry.code, entry)

    def lookup(self, code: str | int | None) -> CatalogEntry | None:
        padded = pad_code(code)
        if not padded:
            return None
        return self._by_code.get(padded)

    def __len__(self) -> int:
        return len(self.entries)

    def diameters_mm(self) -> list[int]:
        """Distinct diameters in ascending order."""
        return sorted({e.diameter_mm for e in self.entries})


def parse_catalog_csv(text: str) -> Catalog:
    """Parse catalog CSV text into a ``Catalog``."""
    reader = csv.reader(io.StringIO(text.strip()))
    rows = list(reader)
    if len(rows) <= 1:
        logger.warning("Catalog CSV is empty or has only a header")
        return Catalog()

    headers = [h.strip().lower() for h in rows[0]]
    columns = {name: headers.index(name) for name in _COLUMNS if name in headers}

    catalog = Catalog()
    for line_no, row in enumerate(rows[1:], start=2):
        values = [v.strip() for v in row]
        item: dict = {}
        valid = True
        for name, idx in columns.items():
            value = values[idx] if idx < len(values) else ""
            if name in ("diameter", "width", "pallet"):
                number = parse_leading_int(value)
                if number is None and name in _REQUIRED_NUMERIC:
                    logger.warning(
                        "Catalog line %d: non-numeric %s %r, skipping",
                        line_no,
                        name,
                        value,
                    )
                    valid = False
                    break
                item[name] = number
            else:
                item[name] = value
        if not valid or not item.get("code"):
            continue
        if "diameter" not in item or "width" not in item:
            logger.warning(
                "Catalog line %d: missing diameter/width column, skipping",
                line_no,
            )
            continue
        catalog.add(CatalogEntry.from_dict(item))

    logger.info("Loaded %d catalog entries", len(catalog))
    return catalog


def load_catalog(path: Path | str) -> Catalog:
    """Load a catalog CSV file."""
    with open(path, encoding="utf-8-sig") as f:
        return parse_catalog_csv(f.read())
