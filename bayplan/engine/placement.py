"""Boundary clamping and collision resolution for circular tires.

All coordinates here are display units with the origin at the bay's
top-left corner: x runs across the bay width, y down the bay length. A
tire's position is the top-left corner of its bounding box.

The two operations callers use are:

  * ``clamp_to_bay``: keep a circle (not its bounding box) inside the bay
    by clamping the center on each axis to ``[r, dim - r]``.
  * ``resolve_collisions``: a bounded relaxation: a fixed number of passes
    in which the candidate is pushed straight out of every in-bay tire it
    overlaps, re-clamped after each pass. It stops early once a pass after
    the first finds nothing to push against. Under high density three
    passes may not be enough to separate everything; that is accepted, the
    result is still inside the bay.

Both are pure: they read the other tires and return a position, and the
caller commits it.

``find_overlaps`` is the diagnostic counterpart, a vectorised all-pairs
check over a finished layout.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

import numpy as np

from .prng import PCG32
from .types import Tire

logger = logging.getLogger(__name__)

COLLISION_PASSES = 3
# Center distance below which two circles count as co-located.
COLOCATED_EPSILON = 1e-3


def clamp_to_bay(
    x: float,
    y: float,
    diameter: float,
    bay_width: float,
    bay_length: float,
) -> tuple[float, float]:
    """Constrain a circle to the bay, returning the new top-left corner.

    A circle wider than the bay still gets a position (center at
    ``bay_width - r``); it simply protrudes.
    """
    radius = diameter / 2
    cx = x + radius
    cy = y + radius

    if cx < radius:
        cx = radius
    if cx > bay_width - radius:
        cx = bay_width - radius
    if cy < radius:
        cy = radius
    if cy > bay_length - radius:
        cy = bay_length - radius

    return cx - radius, cy - radius


def center_in_bay(
    cx: float, cy: float, bay_width: float, bay_length: float
) -> bool:
    """True if a point lies strictly inside the bay rectangle."""
    return 0 < cx < bay_width and 0 < cy < bay_length


def circle_in_bounds(
    x: float,
    y: float,
    diameter: float,
    bay_width: float,
    bay_length: float,
    tolerance: float = 1e-9,
) -> bool:
    """True if the circle's bounding box lies within the bay."""
    return (
        x >= -tolerance
        and y >= -tolerance
        and x + diameter <= bay_width + tolerance
        and y + diameter <= bay_length + tolerance
    )


def _toward_bay_center(
    cx: float, cy: float, bay_width: float, bay_length: float, rng: PCG32
) -> tuple[float, float]:
    """Push direction for co-located centers.

    Pointing at the bay center keeps the push clear of the walls, so a tire
    dropped on another in a corner is not clamped straight back onto it.
    """
    dx = bay_width / 2 - cx
    dy = bay_length / 2 - cy
    dist = math.hypot(dx, dy)
    if dist < COLOCATED_EPSILON:
        return rng.next_unit_vector()
    return dx / dist, dy / dist


def resolve_collisions(
    x: float,
    y: float,
    diameter: float,
    others: Iterable[Tire],
    bay_width: float,
    bay_length: float,
    exclude_id: int | None = None,
    rng: PCG32 | None = None,
    passes: int = COLLISION_PASSES,
) -> tuple[float, float]:
    """Push a candidate circle out of the in-bay tires it overlaps.

    Args:
        x, y: Candidate top-left corner.
        diameter: Candidate diameter.
        others: Live tires to test against. Tires not in the bay, and the
            one with ``exclude_id``, are skipped.
        rng: Source of the push direction for a candidate co-located with
            a peer at the exact bay center. Defaults to a freshly seeded
            generator so results are reproducible.

    Returns:
        The resolved, bay-clamped top-left corner.
    """
    if rng is None:
        rng = PCG32()
    peers = [
        t for t in others if t.in_bay and (exclude_id is None or t.id != exclude_id)
    ]
    radius = diameter / 2

    pos_x, pos_y = clamp_to_bay(x, y, diameter, bay_width, bay_length)
    cx, cy = pos_x + radius, pos_y + radius

    collided = False
    for i in range(passes):
        collided = False
        for other in peers:
            ox, oy = other.center
            required = radius + other.radius
            dx = cx - ox
            dy = cy - oy
            actual = math.hypot(dx, dy)
            if actual >= required:
                continue
            collided = True
            overlap = required - actual
            if actual < COLOCATED_EPSILON:
                ux, uy = _toward_bay_center(cx, cy, bay_width, bay_length, rng)
            else:
                ux, uy = dx / actual, dy / actual
            cx += ux * overlap
            cy += uy * overlap

        pos_x, pos_y = clamp_to_bay(
            cx - radius, cy - radius, diameter, bay_width, bay_length
        )
        cx, cy = pos_x + radius, pos_y + radius
        if not collided and i > 0:
            break

    if collided:
        logger.debug(
            "Collision resolution did not converge in %d passes at (%.1f, %.1f)",
            passes,
            pos_x,
            pos_y,
        )
    return pos_x, pos_y


def find_overlaps(
    tires: Iterable[Tire], tolerance: float = 1e-6
) -> list[tuple[int, int, float]]:
    """List every overlapping pair of in-bay tires.

    Returns ``(id_a, id_b, overlap)`` tuples with ``id_a`` listed before
    ``id_b`` in input order, where ``overlap`` is how far the centers are
    inside the sum of radii. Touching circles are not overlaps.
    """
    placed = [t for t in tires if t.in_bay]
    if len(placed) < 2:
        return []

    centers = np.array([t.center for t in placed], dtype=np.float64)
    radii = np.array([t.radius for t in placed], dtype=np.float64)

    # (N, 1, 2) - (1, N, 2) -> pairwise center deltas
    deltas = centers[:, None, :] - centers[None, :, :]
    dist = np.sqrt(np.sum(deltas * deltas, axis=-1))
    required = radii[:, None] + radii[None, :]
    overlap = required - dist

    hits = np.triu(overlap > tolerance, k=1)
    result: list[tuple[int, int, float]] = []
    for i, j in zip(*np.nonzero(hits)):
        result.append((placed[i].id, placed[j].id, float(overlap[i, j])))
    return result
