"""Tests for snapshot serialization and id/code helpers."""

import pytest

from bayplan.engine.types import (
    ReplicationOutcome,
    ReplicationResult,
    Snapshot,
    Tire,
    TireRecord,
    pad_code,
    parse_leading_int,
    parse_tire_id,
)


class TestHelpers:
    @pytest.mark.parametrize(
        "value, expected",
        [("650mm", 650), (" 12 ", 12), ("abc", None), (None, None), (True, None), (7, 7)],
    )
    def test_parse_leading_int(self, value, expected):
        assert parse_leading_int(value) == expected

    def test_pad_code(self):
        assert pad_code("12") == "0012"
        assert pad_code(7) == "0007"
        assert pad_code("12345") == "12345"
        assert pad_code("  ") == ""
        assert pad_code(None) == ""

    @pytest.mark.parametrize("value", [3, "3", "tire-3"])
    def test_parse_tire_id(self, value):
        assert parse_tire_id(value) == 3


class TestSnapshot:
    def test_dict_shape(self):
        snap = Snapshot(
            tires=(TireRecord(id=2, x=1.5, y=3.0, diameter_mm=650, catalog_code="0012"),),
            bay_length_mm=8000,
            id_counter=2,
        )
        d = snap.to_dict()
        assert d["bayLengthMM"] == 8000
        assert d["idCounter"] == 2
        assert d["tires"][0] == {
            "id": "tire-2",
            "x": 1.5,
            "y": 3.0,
            "diameterMM": 650,
            "catalogCode": "0012",
            "inBay": True,
        }
        assert Snapshot.from_dict(d) == snap

    def test_legacy_keys(self):
        snap = Snapshot.from_dict(
            {
                "tires": [{"id": "tire-4", "x": 0, "y": 0, "diameterMM": 700, "productCode": "0003"}],
                "bayLength": 9000,
                "tireCounter": 4,
            }
        )
        assert snap.bay_length_mm == 9000
        assert snap.id_counter == 4
        assert snap.scale_factor == 10.0
        assert snap.tires[0].catalog_code == "0003"
        assert snap.tires[0].in_bay

    def test_structural_equality(self):
        a = Snapshot(tires=(TireRecord(1, 0.0, 0.0, 600),), bay_length_mm=5000)
        b = Snapshot(tires=(TireRecord(1, 0.0, 0.0, 600),), bay_length_mm=5000)
        assert a == b
        assert a is not b

    def test_max_tire_id(self):
        assert Snapshot().max_tire_id() == 0
        snap = Snapshot(tires=(TireRecord(5, 0, 0, 600), TireRecord(2, 0, 0, 600)))
        assert snap.max_tire_id() == 5


class TestTire:
    def test_geometry(self):
        tire = Tire(id=1, diameter_mm=600, diameter=60.0, x=10.0, y=20.0)
        assert tire.radius == 30.0
        assert tire.center == (40.0, 50.0)
        assert tire.wire_id == "tire-1"

    def test_record_keeps_millimeters(self):
        tire = Tire(id=1, diameter_mm=600, diameter=60.0, catalog_code="0001")
        record = tire.to_record()
        assert record.diameter_mm == 600
        assert record.catalog_code == "0001"


class TestReplicationResult:
    def test_outcomes(self):
        assert ReplicationResult(3, [1, 2, 3]).outcome is ReplicationOutcome.COMPLETE
        assert ReplicationResult(3, [1]).outcome is ReplicationOutcome.PARTIAL
        assert ReplicationResult(3).outcome is ReplicationOutcome.NONE

    def test_messages_distinguish_partial_and_none(self):
        partial = ReplicationResult(5, [7, 8, 9]).message
        none = ReplicationResult(5).message
        assert "3 of 5" in partial
        assert "copy 4" in partial
        assert none != partial
        assert "first copy" in none
