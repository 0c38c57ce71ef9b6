from __future__ import annotations

from functools import lru_cache

from pyproj import Transformer
from shapely.geometry import Point


@lru_cache(maxsize=64)
def _local_to_4326(lat: float, lon: float) -> Transformer:
    # Azimuthal equidistant projection centered on the fix: true meters around it.
    local = f"+proj=aeqd +lat_0={lat} +lon_0={lon} +datum=WGS84 +units=m +no_defs"
    return Transformer.from_crs(local, "EPSG:4326", always_xy=True)


def accuracy_ring(
    lat: float, lon: float, radius_m: float, *, quad_segs: int = 16
) -> list[tuple[float, float]]:
    """
    Closed ring [(lon, lat), ...] approximating a circle of `radius_m` meters.
    """
    if radius_m <= 0:
        return []
    # Round the key so small GPS jitter keeps hitting the transformer cache.
    inv = _local_to_4326(round(float(lat), 6), round(float(lon), 6))
    circle = Point(0.0, 0.0).buffer(float(radius_m), quad_segs=quad_segs)
    ring_ll = [inv.transform(x, y) for x, y in circle.exterior.coords]
    return [(float(lon_), float(lat_)) for lon_, lat_ in ring_ll]
