from __future__ import annotations

import math

from stations.types import Cluster, Station, StationStatus

# Degrees of separation allowed per zoom level below 15, plus a constant floor.
_THRESHOLD_STEP_DEG = 0.006
_THRESHOLD_BASE_ZOOM = 15


def distance_threshold(zoom: float) -> float:
    # Looser grouping at low zoom. Goes negative above zoom 16 (nothing merges).
    return (_THRESHOLD_BASE_ZOOM - zoom) * _THRESHOLD_STEP_DEG + _THRESHOLD_STEP_DEG


def _planar_distance_deg(a: Station, b: Station) -> float:
    return math.sqrt((a.lat - b.lat) ** 2 + (a.lon - b.lon) ** 2)


def cluster_stations(stations: list[Station], *, zoom: float) -> list[Cluster]:
    """
    Greedy single-linkage clustering in degree space.

    Stations are visited in input order. Each unprocessed station seeds a cluster and
    claims every later unprocessed station closer to the *seed* than the zoom
    threshold. The centroid is a running mean of the claimed members, but it is never
    used for distance checks.

    Order-dependent: a station may join an earlier, farther seed rather than a nearer
    later one. O(n^2); meant for tens to low hundreds of stations.
    """
    threshold = distance_threshold(zoom)
    processed: set[str] = set()
    out: list[Cluster] = []

    for seed in stations:
        if seed.id in processed:
            continue
        cluster = Cluster(
            lat=seed.lat,
            lon=seed.lon,
            members=[seed],
            available_count=_available(seed),
        )
        processed.add(seed.id)

        for other in stations:
            if other.id in processed:
                continue
            if _planar_distance_deg(seed, other) >= threshold:
                continue
            cluster.members.append(other)
            cluster.available_count += _available(other)
            processed.add(other.id)

            n = len(cluster.members)
            cluster.lat = (cluster.lat * (n - 1) + other.lat) / n
            cluster.lon = (cluster.lon * (n - 1) + other.lon) / n

        out.append(cluster)

    return out


def _available(station: Station) -> int:
    return 0 if StationStatus(station.status) == StationStatus.occupied else 1
