from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from lod.policy import STATION_MARKER_SIZE_PX, cluster_size_tier, size_px
from stations.status import StatusColors, classify, classify_cluster, colors_for
from stations.types import Station

DescriptorKind = Literal["station", "cluster", "current_location"]
AnchorMode = Literal["pin", "center"]

HOVER_SCALE = 1.2
CLUSTER_GLYPH = "lightning"
CURRENT_LOCATION_SIZE_PX = 18

CURRENT_LOCATION_COLORS = StatusColors(
    fill="#3b82f6", border="#ffffff", label="#ffffff", glow="rgba(59,130,246,0.25)"
)


@dataclass(frozen=True)
class VisualDescriptor:
    """
    Rendering-technology-agnostic description of one marker icon.

    The rendering adapter decides how to draw it; the core only decides these values.
    """

    kind: DescriptorKind
    size: int
    colors: StatusColors
    anchor: tuple[float, float]
    scale: float = 1.0
    label: str | None = None
    badge: str | None = None
    glyph: str | None = None


def anchor_for_size(size: int, *, mode: AnchorMode = "pin") -> tuple[float, float]:
    # Pins point at the coordinate with their bottom tip; rings are centered on it.
    if mode == "center":
        return size / 2.0, size / 2.0
    return size / 2.0, float(size)


def build_individual_content(station: Station, is_hovered: bool = False) -> VisualDescriptor:
    size = STATION_MARKER_SIZE_PX
    return VisualDescriptor(
        kind="station",
        size=size,
        colors=colors_for(classify(station)),
        anchor=anchor_for_size(size),
        scale=HOVER_SCALE if is_hovered else 1.0,
        label=str(station.available_slots),
    )


def build_cluster_content(available_count: int, total_count: int, zoom: float) -> VisualDescriptor:
    size = size_px(cluster_size_tier(zoom))
    return VisualDescriptor(
        kind="cluster",
        size=size,
        colors=colors_for(classify_cluster(available_count, total_count)),
        anchor=anchor_for_size(size),
        badge=str(available_count),
        glyph=CLUSTER_GLYPH,
    )


def build_current_location_content(size: int = CURRENT_LOCATION_SIZE_PX) -> VisualDescriptor:
    # Inner dot plus outer halo ring; independent of zoom and station status.
    return VisualDescriptor(
        kind="current_location",
        size=size,
        colors=CURRENT_LOCATION_COLORS,
        anchor=anchor_for_size(size, mode="center"),
    )
