"""Tests for the undo/redo snapshot store."""

from bayplan.engine.history import HistoryStore
from bayplan.engine.types import Snapshot, TireRecord


def _snap(n):
    """Snapshot with ``n`` tires, so snapshots are distinguishable."""
    return Snapshot(
        tires=tuple(TireRecord(id=i, x=0.0, y=i * 70.0, diameter_mm=600) for i in range(1, n + 1)),
        bay_length_mm=8000,
        id_counter=n,
    )


def _filled(count):
    store = HistoryStore()
    for n in range(count):
        store.push(_snap(n))
    return store


class TestEmpty:
    def test_initial_state(self):
        store = HistoryStore()
        assert len(store) == 0
        assert store.index == -1
        assert store.current is None
        assert not store.can_undo()
        assert not store.can_redo()

    def test_undo_redo_are_noops(self):
        store = HistoryStore()
        assert store.undo() is None
        assert store.redo() is None
        assert store.index == -1


class TestPush:
    def test_push_advances_cursor(self):
        store = _filled(3)
        assert len(store) == 3
        assert store.index == 2
        assert store.current == _snap(2)

    def test_single_entry_cannot_undo(self):
        store = _filled(1)
        assert not store.can_undo()
        assert not store.can_redo()

    def test_push_after_undo_truncates_redo_branch(self):
        store = _filled(4)
        store.undo()
        store.undo()
        store.push(_snap(9))
        assert len(store) == 3
        assert store.index == 2
        assert store.current == _snap(9)
        assert not store.can_redo()


class TestNavigation:
    def test_undo_then_redo(self):
        store = _filled(3)
        assert store.undo() == _snap(1)
        assert store.can_redo()
        assert store.redo() == _snap(2)
        assert not store.can_redo()

    def test_undo_all_the_way(self):
        store = _filled(5)
        for _ in range(4):
            assert store.undo() is not None
        assert store.index == 0
        assert store.current == _snap(0)
        assert store.undo() is None
        assert store.index == 0

    def test_go_to_out_of_range(self):
        store = _filled(3)
        assert store.go_to(-1) is None
        assert store.go_to(3) is None
        assert store.index == 2

    def test_go_to_jumps(self):
        store = _filled(5)
        assert store.go_to(1) == _snap(1)
        assert store.index == 1
        assert len(store) == 5

    def test_clear(self):
        store = _filled(3)
        store.clear()
        assert len(store) == 0
        assert store.current is None
