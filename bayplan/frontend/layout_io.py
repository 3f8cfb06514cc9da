"""Save and load bay layouts as PNG (with embedded metadata) or JSON.

The primary format is PNG: the rendered bay is saved with the snapshot
JSON embedded in a PNG tEXt chunk (key: ``bayplan_snapshot``), so a saved
file is both a shareable picture of the load plan and a complete layout
that can be loaded back. JSON files are supported as a plain-text
alternative.

Used by ``app.py`` for its Save/Load buttons.
"""

import json

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from ..engine.types import Snapshot

METADATA_KEY = "bayplan_snapshot"


def save_layout_png(img: Image.Image, snapshot: Snapshot, path: str) -> None:
    """Save a rendered bay image with the snapshot embedded as a tEXt chunk."""
    info = PngInfo()
    info.add_text(METADATA_KEY, json.dumps(snapshot.to_dict()))
    img.save(path, pnginfo=info)


def save_layout_json(snapshot: Snapshot, path: str) -> None:
    with open(path, "w") as f:
        json.dump(snapshot.to_dict(), f, indent=2)
        f.write("\n")


def load_layout_png(path: str) -> Snapshot:
    """Load a snapshot from a PNG file's tEXt metadata.

    Raises ValueError if the PNG does not contain layout metadata.
    """
    with Image.open(path) as img:
        text_data = getattr(img, "text", None)
        if not text_data or METADATA_KEY not in text_data:
            raise ValueError(
                f"PNG file does not contain layout metadata (missing '{METADATA_KEY}' chunk)"
            )
        return Snapshot.from_dict(json.loads(text_data[METADATA_KEY]))


def load_layout_json(path: str) -> Snapshot:
    with open(path) as f:
        return Snapshot.from_dict(json.load(f))


def load_layout(path: str) -> Snapshot:
    """Load a layout from a file, dispatching by extension.

    Supports .png (reads embedded metadata) and .json (reads raw JSON).
    Raises ValueError for unsupported extensions.
    """
    lower = path.lower()
    if lower.endswith(".png"):
        return load_layout_png(path)
    elif lower.endswith(".json"):
        return load_layout_json(path)
    else:
        raise ValueError(f"Unsupported file extension: {path}")
