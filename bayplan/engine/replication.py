"""Replicate a tire as a spaced chain along the bay's long axis.

Starting one diameter plus ``spacing_mm`` beyond the base tire, each copy
is placed through the session's collision resolver (so it may shift
sideways around tires already in that row) and the next copy is measured
from where the previous one actually landed. The walk stops at the first
copy whose far edge would pass the end of the bay; copies already placed
are kept. The whole run is a single history entry.
"""

from __future__ import annotations

import logging

from .errors import ReplicationRejectedError
from .session import Session
from .types import ReplicationResult

logger = logging.getLogger(__name__)


def replicate(
    session: Session, base_id: int, count: int, spacing_mm: float
) -> ReplicationResult:
    """Place up to ``count`` copies of tire ``base_id``.

    Raises ``ReplicationRejectedError`` without placing anything if
    ``count`` is below 1 or the base tire is missing or not in the bay.
    """
    session.require_bay()
    if count < 1:
        raise ReplicationRejectedError(f"Copy count must be at least 1, got {count}")
    base = session.tires.get(base_id)
    if base is None or not base.in_bay:
        raise ReplicationRejectedError("Only tires inside the bay can be replicated")

    spacing = session.coords.mm_to_display(spacing_mm)
    diameter = base.diameter
    start_x = base.x
    current_y = base.y

    # Looked up fresh: the base's code may no longer be in the catalog.
    entry = session.catalog.lookup(base.catalog_code) if base.catalog_code else None
    code = entry.code if entry is not None else ""

    result = ReplicationResult(requested=count)
    for i in range(count):
        new_y = current_y + diameter + spacing
        if new_y + diameter > session.bay_length:
            logger.info(
                "Replication of %s stopped at copy %d of %d: bay overflow",
                base.wire_id,
                i + 1,
                count,
            )
            break
        tire = session.place_tire(base.diameter_mm, start_x, new_y, code)
        result.placed_ids.append(tire.id)
        current_y = tire.y

    if result.placed:
        session.commit()
    return result
