from __future__ import annotations

import pytest

from stations.status import STATUS_COLORS, classify, classify_cluster, colors_for
from stations.types import Station, StationStatus


@pytest.mark.parametrize(
    ("available", "total", "expected"),
    [
        (0, 5, StationStatus.occupied),
        (1, 10, StationStatus.partial),
        # 2 <= 2 wins even though 2/3 is above the 30% ratio.
        (2, 3, StationStatus.partial),
        (8, 10, StationStatus.available),
        (3, 11, StationStatus.partial),
        (3, 10, StationStatus.available),
    ],
)
def test_classify_cluster_decision_order(available, total, expected):
    assert classify_cluster(available, total) == expected


def test_classify_is_passthrough_of_station_status():
    s = Station(id="a", lat=0.0, lon=0.0, status=StationStatus.partial, available_slots=1)
    assert classify(s) == StationStatus.partial


def test_palette_covers_every_status():
    assert set(STATUS_COLORS) == set(StationStatus)
    assert colors_for("available").fill == "#10b981"
    assert colors_for(StationStatus.occupied).border == "#dc2626"
    assert colors_for(StationStatus.partial).glow == "rgba(245,158,11,0.3)"
