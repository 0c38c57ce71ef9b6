from __future__ import annotations

from dataclasses import dataclass

from stations.types import Station, StationStatus

# Clusters with at most this many available stations are flagged as partial.
PARTIAL_MAX_AVAILABLE = 2
PARTIAL_MAX_RATIO = 0.3


@dataclass(frozen=True)
class StatusColors:
    fill: str
    border: str
    label: str
    glow: str


STATUS_COLORS: dict[StationStatus, StatusColors] = {
    StationStatus.available: StatusColors(
        fill="#10b981", border="#059669", label="#fff", glow="rgba(16,185,129,0.3)"
    ),
    StationStatus.partial: StatusColors(
        fill="#f59e0b", border="#d97706", label="#fff", glow="rgba(245,158,11,0.3)"
    ),
    StationStatus.occupied: StatusColors(
        fill="#ef4444", border="#dc2626", label="#fff", glow="rgba(239,68,68,0.3)"
    ),
}


def classify(station: Station) -> StationStatus:
    return StationStatus(station.status)


def classify_cluster(available_count: int, total_count: int) -> StationStatus:
    """
    Status of a group of stations, evaluated top to bottom:

    - nothing available -> occupied
    - few available (<= 2) or under 30% of the group -> partial
    - otherwise -> available
    """
    if available_count == 0:
        return StationStatus.occupied
    if available_count <= PARTIAL_MAX_AVAILABLE or (
        available_count / total_count
    ) < PARTIAL_MAX_RATIO:
        return StationStatus.partial
    return StationStatus.available


def colors_for(status: StationStatus | str) -> StatusColors:
    return STATUS_COLORS[StationStatus(status)]
