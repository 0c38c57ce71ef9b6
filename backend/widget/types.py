from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, Protocol

from markers.content import VisualDescriptor

MarkerEvent = Literal["click", "pointer-enter", "pointer-leave"]


@dataclass(frozen=True)
class LatLng:
    lat: float
    lon: float


@dataclass(frozen=True)
class WidgetOptions:
    """
    Construction options for a map widget.
    """

    center: LatLng = LatLng(lat=37.5665, lon=126.9780)
    zoom: float = 12.0
    min_zoom: float = 10.0
    max_zoom: float = 18.0


@dataclass(frozen=True)
class CircleStyle:
    fill: str = "rgba(59,130,246,0.12)"
    stroke: str = "rgba(59,130,246,0.45)"
    stroke_width: int = 1


class MapWidget(Protocol):
    """
    Map rendering surface: pan/zoom, projection and drawing live behind this.

    Marker and circle handles are opaque to callers.
    """

    def get_zoom(self) -> float: ...

    def set_zoom(self, zoom: float) -> None: ...

    def on_zoom_changed(self, callback: Callable[[], None]) -> None: ...

    def lat_lng(self, lat: float, lon: float) -> LatLng: ...

    def create_marker(
        self, position: LatLng, descriptor: VisualDescriptor, *, title: str = ""
    ) -> Any: ...

    def set_icon(self, handle: Any, descriptor: VisualDescriptor) -> None: ...

    def set_position(self, handle: Any, position: LatLng) -> None: ...

    def add_listener(
        self, handle: Any, event: MarkerEvent, callback: Callable[[], None]
    ) -> None: ...

    def detach(self, handle: Any) -> None:
        """Remove the marker from the map and drop its listeners."""
        ...

    def create_circle(
        self, center: LatLng, radius_m: float, style: CircleStyle | None = None
    ) -> Any: ...

    def update_circle(self, handle: Any, center: LatLng, radius_m: float) -> None: ...

    def remove_circle(self, handle: Any) -> None: ...


class WidgetLibrary(Protocol):
    """
    The external map library. It may not be loaded yet when the host starts.
    """

    def is_available(self) -> bool: ...

    def create_map(self, container: Any, options: WidgetOptions) -> MapWidget: ...
