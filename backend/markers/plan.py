from __future__ import annotations

from dataclasses import dataclass, field

from lod.clustering import cluster_stations
from lod.policy import RenderMode, render_mode
from markers.content import VisualDescriptor, build_cluster_content, build_individual_content
from stations.types import Station


@dataclass(frozen=True)
class PlannedMarker:
    """
    One marker the map should show after a render pass.

    `key` is the station id in individual mode and None for cluster markers, which
    have no identity across passes.
    """

    key: str | None
    lat: float
    lon: float
    descriptor: VisualDescriptor
    title: str
    stations: tuple[Station, ...]
    hoverable: bool = False

    @property
    def is_cluster(self) -> bool:
        return len(self.stations) > 1


@dataclass(frozen=True)
class RenderPlan:
    mode: RenderMode
    zoom: float
    markers: list[PlannedMarker] = field(default_factory=list)
    # Clusters computed for this pass, including suppressed fully-occupied ones.
    cluster_count: int = 0
    suppressed_clusters: int = 0


def build_render_plan(
    stations: list[Station],
    *,
    zoom: float,
    hovered_station_id: str | None = None,
) -> RenderPlan:
    mode = render_mode(zoom)

    if mode == RenderMode.individual:
        return RenderPlan(
            mode=mode,
            zoom=float(zoom),
            markers=[
                PlannedMarker(
                    key=s.id,
                    lat=s.lat,
                    lon=s.lon,
                    descriptor=build_individual_content(s, s.id == hovered_station_id),
                    title=s.name,
                    stations=(s,),
                    hoverable=True,
                )
                for s in stations
            ],
        )

    clusters = cluster_stations(stations, zoom=zoom)
    out: list[PlannedMarker] = []
    suppressed = 0
    for c in clusters:
        # A fully occupied group produces no marker at all.
        if c.available_count == 0:
            suppressed += 1
            continue
        out.append(
            PlannedMarker(
                key=None,
                lat=c.lat,
                lon=c.lon,
                descriptor=build_cluster_content(c.available_count, c.total_count, zoom),
                title=f"{c.total_count} stations - {c.available_count} available",
                stations=tuple(c.members),
            )
        )
    return RenderPlan(
        mode=mode,
        zoom=float(zoom),
        markers=out,
        cluster_count=len(clusters),
        suppressed_clusters=suppressed,
    )
