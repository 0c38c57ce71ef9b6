from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StationStatus(str, Enum):
    available = "available"
    partial = "partial"
    occupied = "occupied"


@dataclass(frozen=True)
class Station:
    """
    A geolocated charging station as supplied by the entity feed.

    `id` must be unique within a single render pass; the clustering path does not
    validate this.
    """

    id: str
    lat: float
    lon: float
    status: StationStatus
    available_slots: int
    name: str = ""


@dataclass
class Cluster:
    """
    A zoom-dependent group of stations. Recomputed on every clustering pass.

    `lat`/`lon` hold the running-mean centroid of `members`.
    """

    lat: float
    lon: float
    members: list[Station] = field(default_factory=list)
    available_count: int = 0

    @property
    def total_count(self) -> int:
        return len(self.members)

    @property
    def is_singleton(self) -> bool:
        return len(self.members) == 1

    @property
    def centroid(self) -> tuple[float, float]:
        return self.lat, self.lon
