"""Tests for chained tire replication along the bay."""

import pytest

from bayplan.engine.catalog_io import Catalog
from bayplan.engine.errors import BayNotConfiguredError, ReplicationRejectedError
from bayplan.engine.replication import replicate
from bayplan.engine.session import Session
from bayplan.engine.types import CatalogEntry, ReplicationOutcome


def _session(length_mm):
    s = Session(catalog=Catalog([CatalogEntry("0020", "205/85R16", 600, 205)]), seed=1)
    s.init_bay(length_mm)
    return s


class TestReplicate:
    def test_all_copies_fit(self):
        s = _session(15000)
        base = s.create_tire(600, x=0, y=0)
        result = replicate(s, base.id, 5, 50)
        assert result.outcome is ReplicationOutcome.COMPLETE
        assert result.placed_ids == [2, 3, 4, 5, 6]
        ys = [s.tires[i].y for i in result.placed_ids]
        assert ys == pytest.approx([65.0, 130.0, 195.0, 260.0, 325.0])
        assert all(s.tires[i].x == 0.0 for i in result.placed_ids)

    def test_partial_stops_at_bay_end(self):
        """A 5000mm bay with the base at 2300mm has room for three copies."""
        s = _session(5000)
        base = s.create_tire(600, x=0, y=230)
        result = replicate(s, base.id, 5, 50)
        assert result.outcome is ReplicationOutcome.PARTIAL
        assert result.placed == 3
        assert [s.tires[i].y for i in result.placed_ids] == pytest.approx(
            [295.0, 360.0, 425.0]
        )
        assert "3 of 5" in result.message
        assert s.overlaps() == []

    def test_first_copy_overflows(self):
        s = _session(5000)
        base = s.create_tire(600, x=0, y=440)
        history_len = len(s.history)
        result = replicate(s, base.id, 2, 50)
        assert result.outcome is ReplicationOutcome.NONE
        assert s.tire_count() == 1
        assert len(s.history) == history_len

    def test_zero_spacing_touching(self):
        s = _session(5000)
        base = s.create_tire(600, x=0, y=0)
        result = replicate(s, base.id, 3, 0)
        assert [s.tires[i].y for i in result.placed_ids] == pytest.approx(
            [60.0, 120.0, 180.0]
        )

    def test_single_history_entry(self):
        s = _session(15000)
        base = s.create_tire(600, x=0, y=0)
        history_len = len(s.history)
        replicate(s, base.id, 4, 20)
        assert len(s.history) == history_len + 1
        s.undo()
        assert s.tire_count() == 1

    def test_copies_carry_catalog_code(self):
        s = _session(15000)
        base = s.create_tire(catalog_code="20", x=0, y=0)
        result = replicate(s, base.id, 2, 20)
        assert all(s.tires[i].catalog_code == "0020" for i in result.placed_ids)

    def test_code_looked_up_fresh(self):
        s = _session(15000)
        base = s.create_tire(catalog_code="20", x=0, y=0)
        s.catalog = Catalog()
        result = replicate(s, base.id, 2, 20)
        assert result.placed == 2
        assert all(s.tires[i].catalog_code == "" for i in result.placed_ids)


class TestRejected:
    def test_out_of_bay_base(self):
        s = _session(8000)
        base = s.create_tire(600, x=0, y=0)
        base.in_bay = False
        with pytest.raises(ReplicationRejectedError):
            replicate(s, base.id, 3, 20)
        assert s.tire_count() == 1

    @pytest.mark.parametrize("count", [0, -2])
    def test_no_copies_requested(self, count):
        s = _session(8000)
        base = s.create_tire(600, x=0, y=0)
        history_len = len(s.history)
        with pytest.raises(ReplicationRejectedError):
            replicate(s, base.id, count, 20)
        assert s.tire_count() == 1
        assert len(s.history) == history_len

    def test_missing_base(self):
        s = _session(8000)
        with pytest.raises(ReplicationRejectedError):
            replicate(s, 42, 3, 20)

    def test_requires_bay(self):
        with pytest.raises(BayNotConfiguredError):
            replicate(Session(), 1, 3, 20)
