"""Undo/redo store of full-layout snapshots."""

from __future__ import annotations

import logging

from .types import Snapshot

logger = logging.getLogger(__name__)


class HistoryStore:
    """Linear snapshot history with a movable cursor.

    ``index`` points at the snapshot that matches the live layout. Pushing
    while the cursor is behind the end discards the redo branch first.
    ``index`` is -1 only while the store is empty.
    """

    def __init__(self) -> None:
        self._snapshots: list[Snapshot] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Snapshot | None:
        if self._index < 0:
            return None
        return self._snapshots[self._index]

    def push(self, snapshot: Snapshot) -> None:
        """Append a snapshot, truncating anything after the cursor."""
        if self._index < len(self._snapshots) - 1:
            dropped = len(self._snapshots) - 1 - self._index
            del self._snapshots[self._index + 1 :]
            logger.debug("Discarded %d redo snapshot(s)", dropped)
        self._snapshots.append(snapshot)
        self._index += 1

    def go_to(self, index: int) -> Snapshot | None:
        """Move the cursor and return the snapshot there.

        Out-of-range indices are ignored and return ``None``.
        """
        if index < 0 or index >= len(self._snapshots):
            return None
        self._index = index
        return self._snapshots[index]

    def undo(self) -> Snapshot | None:
        return self.go_to(self._index - 1)

    def redo(self) -> Snapshot | None:
        return self.go_to(self._index + 1)

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def clear(self) -> None:
        self._snapshots.clear()
        self._index = -1
