from .status import STATUS_COLORS, StatusColors, classify, classify_cluster, colors_for
from .types import Cluster, Station, StationStatus

__all__ = [
    "STATUS_COLORS",
    "Cluster",
    "Station",
    "StationStatus",
    "StatusColors",
    "classify",
    "classify_cluster",
    "colors_for",
]
