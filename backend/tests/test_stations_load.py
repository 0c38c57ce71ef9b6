from __future__ import annotations

import json

import pytest

from stations.load_scenario import load_scenario_stations
from stations.loaders import load_stations, parse_stations
from stations.types import StationStatus


def test_parse_accepts_lng_and_lon():
    rows = [
        {"id": "a", "lat": 37.5, "lng": 127.0, "status": "available", "availableSlots": 2},
        {"id": "b", "lat": 37.6, "lon": 127.1, "status": "occupied"},
    ]
    a, b = parse_stations(rows)
    assert a.lon == 127.0
    assert a.available_slots == 2
    assert b.lon == 127.1
    assert b.status == StationStatus.occupied
    assert b.available_slots == 0


def test_load_accepts_bare_list(tmp_path):
    path = tmp_path / "stations.json"
    path.write_text(
        json.dumps([{"id": "x", "lat": 1.0, "lon": 2.0, "status": "partial"}]), encoding="utf-8"
    )
    assert [s.id for s in load_stations(path)] == ["x"]


def test_invalid_records_raise_value_error(tmp_path):
    path = tmp_path / "stations.json"
    path.write_text(
        json.dumps({"stations": [{"id": "x", "lat": 1.0, "lon": 2.0, "status": "broken"}]}),
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="Invalid station record"):
        load_stations(path)

    path.write_text(json.dumps({"stations": {"id": "x"}}), encoding="utf-8")
    with pytest.raises(ValueError, match="expected a list"):
        load_stations(path)


def test_scenario_stations_keep_file_order():
    stations = load_scenario_stations("seoul_ev")
    assert len(stations) == 30
    assert stations[0].id == "st-001"
    assert stations[-1].id == "st-030"
    # Fresh list per call so hosts see a new reference.
    assert load_scenario_stations("seoul_ev") is not stations
