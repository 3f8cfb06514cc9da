"""Tkinter GUI for bayplan.

This is the main application file. It wires a ``Session`` (the engine's
single owner of layout state) to an interactive desktop view. The major
pieces are:

  * ``ControlPanel``: the left sidebar: bay length, tire diameter,
    product-code lookup with the product details, create / undo / redo /
    reset / save / load buttons, and the replication count and spacing.
  * ``App``: the top-level window. Draws the bay (rendered to a Pillow
    image by ``render.py``) plus any tires dragged out of the bay, routes
    pointer events into the session's drag gesture methods, and shows a
    right-click menu with Delete and Replicate.

The canvas is a pure projection of the session: every change re-renders
from ``Session.snapshot()`` and nothing is ever read back from the canvas.
Window width picks the scale preset (see ``engine/coords.py``).

Layout persistence (save as PNG with embedded JSON, or load from PNG/JSON)
is handled by ``layout_io.py``.
"""

import argparse
import logging
import os
import sys
import time
import tkinter as tk
from tkinter import filedialog, messagebox, ttk

from PIL import ImageTk

from ..engine.errors import BayPlanError, CatalogLookupError
from ..engine.replication import replicate
from ..engine.session import DragOutcome, Session
from .catalogs import (
    DEFAULT_REPLICATION_COUNT,
    DEFAULT_REPLICATION_SPACING_MM,
    REPLICATION_COUNTS,
    REPLICATION_SPACINGS_MM,
    diameter_choices,
    load_app_catalog,
)
from .layout_io import load_layout, save_layout_json, save_layout_png
from .presenters import (
    PRODUCT_FIELDS,
    hit_test,
    loaded_length_text,
    product_fields,
    tire_tooltip,
)
from .render import TIRE_FILL, TIRE_OUTLINE, render_snapshot

logger = logging.getLogger(__name__)

CANVAS_BG = "#1e1e1e"
FLOATING_FILL = "#555555"
# Gap around the bay image where dragged-out tires can sit.
BAY_MARGIN = 40
SAVE_PPM = 0.1  # 10 mm per pixel in saved PNGs

# ---------------------------------------------------------------------------
# Tooltip helper
# ---------------------------------------------------------------------------


class Tooltip:
    """Hover text shown next to the pointer.

    ``text`` is either a fixed string or a callable taking the pointer
    event and returning the text to show, or None for nothing. The tip
    follows the pointer and disappears on any button press.
    """

    _DELAY_MS = 400
    _OFFSET = 12

    def __init__(self, widget, text):
        self.widget = widget
        self._text = text
        self._tip = None
        self._shown_text = None
        self._pending = None
        widget.bind("<Enter>", self._on_motion, add="+")
        widget.bind("<Motion>", self._on_motion, add="+")
        widget.bind("<Leave>", self.hide, add="+")
        widget.bind("<ButtonPress>", self.hide, add="+")

    def _text_for(self, event):
        return self._text(event) if callable(self._text) else self._text

    def _on_motion(self, event):
        text = self._text_for(event)
        x, y = event.x_root + self._OFFSET, event.y_root + self._OFFSET
        if self._tip is not None and text == self._shown_text:
            self._tip.wm_geometry(f"+{x}+{y}")
            return
        self.hide()
        if text:
            self._pending = self.widget.after(
                self._DELAY_MS, lambda: self._show(text, x, y)
            )

    def hide(self, _event=None):
        if self._pending is not None:
            self.widget.after_cancel(self._pending)
            self._pending = None
        if self._tip is not None:
            self._tip.destroy()
            self._tip = None
            self._shown_text = None

    def _show(self, text, x, y):
        self._pending = None
        tip = tk.Toplevel(self.widget)
        tip.wm_overrideredirect(True)
        tip.wm_geometry(f"+{x}+{y}")
        ttk.Label(
            tip, text=text, background="#ffffe0", relief="solid", padding=(4, 2)
        ).pack()
        self._tip = tip
        self._shown_text = text


# ---------------------------------------------------------------------------
# Control panel
# ---------------------------------------------------------------------------


class ControlPanel(ttk.Frame):
    """Sidebar with bay, product and action controls."""

    def __init__(self, parent, app):
        super().__init__(parent, padding=10)
        self.app = app
        self.bay_length_var = tk.StringVar()
        self.diameter_var = tk.StringVar()
        self.code_var = tk.StringVar()
        self.count_var = tk.StringVar(value=str(DEFAULT_REPLICATION_COUNT))
        self.spacing_var = tk.StringVar(value=str(DEFAULT_REPLICATION_SPACING_MM))
        self.product_vars = {name: tk.StringVar() for name in PRODUCT_FIELDS}
        self.tire_count_var = tk.StringVar(value="0")
        self.loaded_var = tk.StringVar()
        self.bay_info_var = tk.StringVar()
        self._build()

    def _build(self):
        row = 0
        row = self._section(row, "Bay")
        row = self._field(
            row,
            "Length (mm):",
            self.bay_length_var,
            tooltip="Bay length, 5000-15000mm. Width is fixed at 2400mm.",
            attr_name="bay_length_entry",
        )
        self.bay_length_entry.bind("<Return>", lambda _e: self.app.on_set_bay())
        ttk.Button(self, text="Set bay", command=self.app.on_set_bay).grid(
            row=row, column=0, columnspan=2, sticky="ew", pady=2
        )
        row += 1

        row = self._sep(row)
        row = self._section(row, "Tire")
        lbl = ttk.Label(self, text="Diameter (mm):")
        lbl.grid(row=row, column=0, sticky="w", pady=2)
        self.diameter_combo = ttk.Combobox(
            self, textvariable=self.diameter_var, width=10, state="readonly"
        )
        self.diameter_combo.grid(row=row, column=1, sticky="w", pady=2, padx=(5, 0))
        self.diameter_combo.bind(
            "<<ComboboxSelected>>", lambda _e: self.app.on_diameter_changed()
        )
        row += 1

        row = self._field(
            row,
            "Product code:",
            self.code_var,
            tooltip="Catalog code; short codes are zero-padded to 4 digits",
            attr_name="code_entry",
        )
        self.code_entry.bind("<Return>", lambda _e: self.app.on_search())
        self.code_entry.bind("<FocusIn>", lambda _e: self.app.on_clear_product())
        buttons = ttk.Frame(self)
        buttons.grid(row=row, column=0, columnspan=2, sticky="ew")
        ttk.Button(buttons, text="Search", command=self.app.on_search).pack(
            side=tk.LEFT, expand=True, fill=tk.X
        )
        ttk.Button(buttons, text="Clear", command=self.app.on_clear_product).pack(
            side=tk.LEFT, expand=True, fill=tk.X
        )
        row += 1

        for name in PRODUCT_FIELDS:
            ttk.Label(self, text=f"{name.capitalize()}:").grid(
                row=row, column=0, sticky="w"
            )
            ttk.Label(self, textvariable=self.product_vars[name]).grid(
                row=row, column=1, sticky="w", padx=(5, 0)
            )
            row += 1

        ttk.Button(self, text="Create tire", command=self.app.on_create).grid(
            row=row, column=0, columnspan=2, sticky="ew", pady=(6, 2)
        )
        row += 1

        row = self._sep(row)
        row = self._section(row, "Replicate")
        row = self._combo(row, "Count:", self.count_var, REPLICATION_COUNTS)
        row = self._combo(row, "Spacing (mm):", self.spacing_var, REPLICATION_SPACINGS_MM)

        row = self._sep(row)
        history = ttk.Frame(self)
        history.grid(row=row, column=0, columnspan=2, sticky="ew")
        self.undo_btn = ttk.Button(history, text="Undo", command=self.app.on_undo)
        self.undo_btn.pack(side=tk.LEFT, expand=True, fill=tk.X)
        self.redo_btn = ttk.Button(history, text="Redo", command=self.app.on_redo)
        self.redo_btn.pack(side=tk.LEFT, expand=True, fill=tk.X)
        row += 1

        files = ttk.Frame(self)
        files.grid(row=row, column=0, columnspan=2, sticky="ew", pady=(4, 0))
        ttk.Button(files, text="Save", command=self.app.on_save).pack(
            side=tk.LEFT, expand=True, fill=tk.X
        )
        ttk.Button(files, text="Load", command=self.app.on_load).pack(
            side=tk.LEFT, expand=True, fill=tk.X
        )
        ttk.Button(files, text="Reset", command=self.app.on_reset).pack(
            side=tk.LEFT, expand=True, fill=tk.X
        )
        row += 1

        row = self._sep(row)
        for label, var in (
            ("Bay:", self.bay_info_var),
            ("Tires:", self.tire_count_var),
            ("Loaded (mm):", self.loaded_var),
        ):
            ttk.Label(self, text=label).grid(row=row, column=0, sticky="w")
            ttk.Label(self, textvariable=var).grid(
                row=row, column=1, sticky="w", padx=(5, 0)
            )
            row += 1

    def _section(self, row, title):
        ttk.Label(self, text=title, font=("", 11, "bold")).grid(
            row=row, column=0, columnspan=2, pady=(8, 4), sticky="w"
        )
        return row + 1

    def _field(self, row, label, var, tooltip=None, attr_name=None):
        lbl = ttk.Label(self, text=label)
        lbl.grid(row=row, column=0, sticky="w", pady=2)
        entry = ttk.Entry(self, textvariable=var, width=12)
        entry.grid(row=row, column=1, sticky="w", pady=2, padx=(5, 0))
        if attr_name:
            setattr(self, attr_name, entry)
        if tooltip:
            Tooltip(lbl, tooltip)
            Tooltip(entry, tooltip)
        return row + 1

    def _combo(self, row, label, var, values):
        ttk.Label(self, text=label).grid(row=row, column=0, sticky="w", pady=2)
        combo = ttk.Combobox(self, textvariable=var, width=10, state="readonly")
        combo["values"] = [str(v) for v in values]
        combo.grid(row=row, column=1, sticky="w", pady=2, padx=(5, 0))
        return row + 1

    def _sep(self, row):
        ttk.Separator(self, orient="horizontal").grid(
            row=row, column=0, columnspan=2, sticky="ew", pady=8
        )
        return row + 1

    def show_product(self, entry):
        for name, value in product_fields(entry).items():
            self.product_vars[name].set(value)
        if entry is not None:
            self.code_var.set(entry.code)
            self.diameter_var.set(str(entry.diameter_mm))


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------


class App:
    def __init__(self, session: Session):
        self.session = session
        self.root = tk.Tk()
        self.root.title("bayplan")
        self.root.geometry("1000x900")
        self.root.configure(bg=CANVAS_BG)

        style = ttk.Style()
        style.theme_use("clam")

        self.controls = ControlPanel(self.root, self)
        self.controls.pack(side=tk.LEFT, fill=tk.Y)
        choices = diameter_choices(session.catalog)
        self.controls.diameter_combo["values"] = [str(d) for d in choices]
        if choices:
            self.controls.diameter_var.set(str(choices[0]))

        frame = ttk.Frame(self.root)
        frame.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.canvas = tk.Canvas(frame, bg=CANVAS_BG, highlightthickness=0)
        vbar = ttk.Scrollbar(frame, orient=tk.VERTICAL, command=self.canvas.yview)
        self.canvas.configure(yscrollcommand=vbar.set)
        vbar.pack(side=tk.RIGHT, fill=tk.Y)
        self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        self.menu = tk.Menu(self.root, tearoff=0)
        self.menu.add_command(label="Delete", command=self.on_delete)
        self.menu.add_command(label="Replicate", command=self.on_replicate)
        self._menu_tire_id = None
        self._selected_id = None
        self._photo = None

        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_motion)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<Button-3>", self._on_context)
        self.root.bind("<Configure>", self._on_root_configure)
        self.root.bind("<Control-z>", lambda _e: self.on_undo())
        self.root.bind("<Control-y>", lambda _e: self.on_redo())
        # Canvas press handlers are more specific than the tip's
        # <ButtonPress>, so they hide it themselves.
        self.canvas_tip = Tooltip(self.canvas, self._tooltip_at)

        self.refresh()

    # -- coordinate conversion --

    def _to_bay(self, event):
        """Canvas event position -> bay-relative display units."""
        return (
            self.canvas.canvasx(event.x) - BAY_MARGIN,
            self.canvas.canvasy(event.y) - BAY_MARGIN,
        )

    # -- rendering --

    def refresh(self, supersample=4):
        """Re-render the canvas and side panel from the session.

        Drag steps pass ``supersample=1``; the release redraws at full
        quality.
        """
        session = self.session
        self.canvas.delete("all")
        self._photo = None
        if session.is_active:
            snapshot = session.snapshot()
            img = render_snapshot(
                snapshot,
                1.0 / session.coords.scale_factor,
                highlight_id=self._selected_id,
                supersample=supersample,
            )
            self._photo = ImageTk.PhotoImage(img)
            self.canvas.create_image(
                BAY_MARGIN, BAY_MARGIN, image=self._photo, anchor="nw"
            )
            for tire in session.tires.values():
                if tire.in_bay:
                    continue
                x0 = BAY_MARGIN + tire.x
                y0 = BAY_MARGIN + tire.y
                self.canvas.create_oval(
                    x0,
                    y0,
                    x0 + tire.diameter,
                    y0 + tire.diameter,
                    fill=FLOATING_FILL if tire.id != self._selected_id else TIRE_FILL,
                    outline=TIRE_OUTLINE,
                )
            self.canvas.configure(
                scrollregion=(
                    0,
                    0,
                    img.width + 2 * BAY_MARGIN,
                    img.height + 2 * BAY_MARGIN,
                )
            )
            self.controls.bay_info_var.set(
                f"{session.bay.width_mm} x {session.bay.length_mm} mm"
            )
        else:
            self.canvas.create_text(
                BAY_MARGIN,
                BAY_MARGIN,
                text="Enter a bay length (5000-15000mm) and press Set bay.",
                fill="#dddddd",
                anchor="nw",
            )
            self.controls.bay_info_var.set("")

        self.controls.tire_count_var.set(str(session.tire_count()))
        self.controls.loaded_var.set(loaded_length_text(session.loaded_length_mm()))
        self.controls.undo_btn.state(
            ["!disabled"] if session.can_undo() else ["disabled"]
        )
        self.controls.redo_btn.state(
            ["!disabled"] if session.can_redo() else ["disabled"]
        )

    def _error(self, title, exc):
        logger.info("%s: %s", title, exc)
        messagebox.showerror(title, str(exc))

    # -- pointer handling --

    def _tooltip_at(self, event):
        if self.session.dragging is not None:
            return None
        x, y = self._to_bay(event)
        tire_id = hit_test(self.session.tires.values(), x, y)
        if tire_id is None:
            return None
        return tire_tooltip(self.session.tires[tire_id])

    def _on_press(self, event):
        self.menu.unpost()
        self.canvas_tip.hide()
        x, y = self._to_bay(event)
        tire_id = hit_test(self.session.tires.values(), x, y)
        self._selected_id = tire_id
        if tire_id is not None:
            self.session.begin_drag(tire_id, x, y)
        self.refresh()

    def _on_motion(self, event):
        if self.session.dragging is None:
            return
        self.session.drag_to(*self._to_bay(event))
        self.refresh(supersample=1)

    def _on_release(self, event):
        if self.session.dragging is None:
            return
        outcome = self.session.end_drag(*self._to_bay(event))
        if outcome is DragOutcome.TAP:
            self.controls.show_product(self.session.current_product)
        self.refresh()

    def _on_context(self, event):
        self.canvas_tip.hide()
        x, y = self._to_bay(event)
        tire_id = hit_test(self.session.tires.values(), x, y)
        if tire_id is None:
            return
        self._menu_tire_id = tire_id
        self._selected_id = tire_id
        self.refresh()
        self.menu.tk_popup(event.x_root + 5, event.y_root + 5)

    def _on_root_configure(self, event):
        if event.widget is not self.root:
            return
        if self.session.set_display_width(event.width):
            self.refresh()

    # -- actions --

    def on_set_bay(self):
        try:
            self.session.init_bay(self.controls.bay_length_var.get())
        except BayPlanError as e:
            self._error("Invalid bay length", e)
            return
        self._selected_id = None
        self.refresh()

    def on_diameter_changed(self):
        if self.session.current_product is not None:
            self.on_clear_product()

    def on_search(self):
        raw = self.controls.code_var.get().strip()
        try:
            entry = self.session.lookup_product(raw)
        except CatalogLookupError as e:
            self.controls.show_product(None)
            self._error("Product not found", e)
            return
        self.controls.show_product(entry)

    def on_clear_product(self):
        self.session.clear_product()
        self.controls.code_var.set("")
        self.controls.show_product(None)

    def on_create(self):
        session = self.session
        try:
            if session.current_product is not None:
                tire = session.create_tire()
            else:
                tire = session.create_tire(
                    diameter_mm=int(self.controls.diameter_var.get())
                )
        except (BayPlanError, ValueError) as e:
            self._error("Cannot create tire", e)
            return
        self._selected_id = tire.id
        self.refresh()

    def on_delete(self):
        if self._menu_tire_id is not None:
            self.session.delete_tire(self._menu_tire_id)
        self._menu_tire_id = None
        self._selected_id = None
        self.refresh()

    def on_replicate(self):
        tire_id = self._menu_tire_id
        self._menu_tire_id = None
        if tire_id is None:
            return
        try:
            result = replicate(
                self.session,
                tire_id,
                int(self.controls.count_var.get()),
                int(self.controls.spacing_var.get()),
            )
        except BayPlanError as e:
            self._error("Cannot replicate", e)
            return
        self.refresh()
        if result.placed < result.requested:
            messagebox.showwarning("Replicate", result.message)

    def on_undo(self):
        if self.session.undo():
            self._selected_id = None
            self.refresh()

    def on_redo(self):
        if self.session.redo():
            self._selected_id = None
            self.refresh()

    def on_reset(self):
        if not messagebox.askyesno("Reset", "Reset the bay and all tires?"):
            return
        self.session.reset()
        self._selected_id = None
        self.controls.bay_length_var.set("")
        self.on_clear_product()
        self.refresh()

    def on_save(self):
        if not self.session.is_active:
            return
        path = filedialog.asksaveasfilename(
            defaultextension=".png",
            filetypes=[("PNG files", "*.png"), ("JSON files", "*.json")],
            initialfile=f"bay_{time.strftime('%Y-%m-%d_%H-%M-%S')}.png",
        )
        if not path:
            return
        snapshot = self.session.snapshot()
        if path.lower().endswith(".json"):
            save_layout_json(snapshot, path)
        else:
            save_layout_png(render_snapshot(snapshot, SAVE_PPM), snapshot, path)
        logger.info("Saved layout to %s", path)

    def on_load(self):
        path = filedialog.askopenfilename(
            filetypes=[
                ("Layout files", "*.png *.json"),
                ("PNG files", "*.png"),
                ("JSON files", "*.json"),
            ],
        )
        if not path:
            return
        try:
            snapshot = load_layout(path)
            self.session.load_layout(snapshot)
        except (OSError, ValueError, KeyError, BayPlanError) as e:
            self._error("Load Error", e)
            return
        self.controls.bay_length_var.set(str(self.session.bay.length_mm))
        self._selected_id = None
        self.refresh()

    def run(self):
        self.root.mainloop()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Tire loading bay planner")
    parser.add_argument(
        "--catalog",
        default=os.getenv("BAYPLAN_CATALOG"),
        help="Tire catalog CSV. Defaults to the built-in catalog.",
    )
    parser.add_argument(
        "--bay-length",
        help="Start with a bay of this length in mm (5000-15000).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for collision tie-breaks.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("BAYPLAN_LOG_LEVEL", "INFO"),
        help="Logging level (e.g. DEBUG, INFO).",
    )
    parser.add_argument(
        "--log-file",
        default=os.getenv("BAYPLAN_LOG_PATH"),
        help="Optional log file path.",
    )
    return parser.parse_args(argv)


def configure_logging(log_level_name, log_path=None):
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_path:
        handlers.append(logging.FileHandler(log_path, mode="a", encoding="utf-8"))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)
    catalog = load_app_catalog(args.catalog)
    session = Session(catalog=catalog, seed=args.seed)
    app = App(session)
    if args.bay_length:
        app.controls.bay_length_var.set(args.bay_length)
        app.on_set_bay()
    app.run()


if __name__ == "__main__":
    main()
