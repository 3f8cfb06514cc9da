"""Draw a bay layout to a Pillow image.

The renderer works from a ``Snapshot`` so it can draw the live session,
a history entry or a layout loaded from disk alike. Positions in the
snapshot are converted to millimeters with the snapshot's own scale factor
and then to pixels with the renderer's ``ppm`` (pixels per millimeter), so
the output size is independent of the scale preset that was active when
the snapshot was taken. Tires outside the bay are not drawn.
"""

from PIL import Image, ImageDraw, ImageFont

from ..engine.bay import BAY_WIDTH_MM, BayModel
from ..engine.types import Snapshot, TireRecord

BAY_BG = "#d9d4c7"  # plywood floor
BAY_BORDER = "#333333"
GUIDE_COLOR = "#9e9787"
TIRE_FILL = "#2b2b2b"
TIRE_OUTLINE = "#000000"
TIRE_HUB = "#6d6d6d"
LABEL_COLOR = "#ffffff"
CODE_COLOR = "#ffd24d"
HIGHLIGHT_COLOR = "#FFD700"


def label_font_sizes(diameter_px):
    """(diameter label size, product code size) for a tire this wide."""
    return max(12, diameter_px * 0.15), max(10, diameter_px * 0.12)


def _font(size):
    return ImageFont.load_default(size=max(1, int(round(size))))


class BayRenderer:
    """Renders a snapshot to a Pillow image."""

    def __init__(self, bay_length_mm, ppm, line_scale=1):
        self.bay_length_mm = bay_length_mm
        self.ppm = ppm
        self.line_scale = line_scale

    def _lw(self, base_width):
        """Scale a pixel width by the supersample factor."""
        return max(1, round(base_width * self.line_scale))

    def image_size(self):
        return (
            max(1, int(round(BAY_WIDTH_MM * self.ppm))),
            max(1, int(round(self.bay_length_mm * self.ppm))),
        )

    def _tire_box(self, tire: TireRecord, scale_factor):
        """Pixel bounding box of a tire recorded at ``scale_factor``."""
        x0 = tire.x * scale_factor * self.ppm
        y0 = tire.y * scale_factor * self.ppm
        d = tire.diameter_mm * self.ppm
        return x0, y0, x0 + d, y0 + d

    def render(self, snapshot: Snapshot, highlight_id=None):
        w, h = self.image_size()
        img = Image.new("RGB", (w, h), BAY_BG)
        draw = ImageDraw.Draw(img)

        # 1. Guide lines every metre along the bay
        for mm in BayModel(length_mm=self.bay_length_mm).guide_positions_mm():
            py = int(mm * self.ppm)
            draw.line([(0, py), (w - 1, py)], fill=GUIDE_COLOR, width=self._lw(1))

        # 2. Tires, in insertion order so later ones draw on top
        for tire in snapshot.tires:
            if not tire.in_bay:
                continue
            self._draw_tire(draw, tire, snapshot.scale_factor)
            if tire.id == highlight_id:
                draw.ellipse(
                    self._tire_box(tire, snapshot.scale_factor),
                    outline=HIGHLIGHT_COLOR,
                    width=self._lw(3),
                )

        # 3. Bay border
        draw.rectangle([0, 0, w - 1, h - 1], outline=BAY_BORDER, width=self._lw(3))
        return img

    def _draw_tire(self, draw, tire, scale_factor):
        x0, y0, x1, y1 = self._tire_box(tire, scale_factor)
        d = x1 - x0
        draw.ellipse(
            (x0, y0, x1, y1), fill=TIRE_FILL, outline=TIRE_OUTLINE, width=self._lw(1)
        )
        hub = d * 0.3
        cx, cy = x0 + d / 2, y0 + d / 2
        draw.ellipse((cx - hub, cy - hub, cx + hub, cy + hub), fill=TIRE_HUB)

        label_size, code_size = label_font_sizes(d / self.line_scale)
        draw.text(
            (cx, cy),
            f"{tire.diameter_mm:g}",
            fill=LABEL_COLOR,
            anchor="mm",
            font=_font(label_size * self.line_scale),
        )
        if tire.catalog_code:
            draw.text(
                (cx, cy + label_size * self.line_scale),
                tire.catalog_code,
                fill=CODE_COLOR,
                anchor="mm",
                font=_font(code_size * self.line_scale),
            )


def render_snapshot(snapshot: Snapshot, ppm, highlight_id=None, supersample=4):
    """Render with supersampling, then downsample with LANCZOS."""
    renderer = BayRenderer(snapshot.bay_length_mm, ppm * supersample, line_scale=supersample)
    img = renderer.render(snapshot, highlight_id=highlight_id)
    target = BayRenderer(snapshot.bay_length_mm, ppm).image_size()
    return img.resize(target, Image.Resampling.LANCZOS)
