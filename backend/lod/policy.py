from __future__ import annotations

from enum import Enum

# At or above this zoom every station gets its own marker.
INDIVIDUAL_MODE_MIN_ZOOM = 14.0


class RenderMode(str, Enum):
    individual = "individual"
    cluster = "cluster"


class SizeTier(str, Enum):
    small = "small"
    medium = "medium"
    large = "large"


_SIZE_PX: dict[SizeTier, int] = {
    SizeTier.small: 28,
    SizeTier.medium: 32,
    SizeTier.large: 36,
}

STATION_MARKER_SIZE_PX = _SIZE_PX[SizeTier.large]


def render_mode(zoom: float) -> RenderMode:
    if float(zoom) >= INDIVIDUAL_MODE_MIN_ZOOM:
        return RenderMode.individual
    return RenderMode.cluster


def cluster_size_tier(zoom: float) -> SizeTier:
    z = float(zoom)
    if z >= 12:
        return SizeTier.large
    if z >= 11:
        return SizeTier.medium
    return SizeTier.small


def size_px(tier: SizeTier) -> int:
    return _SIZE_PX[tier]
