from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Callable

from markers.content import VisualDescriptor
from render.traces import (
    trace_accuracy_circle,
    trace_cluster_markers,
    trace_current_location,
    trace_station_markers,
)
from widget.types import CircleStyle, LatLng, MarkerEvent, WidgetOptions

_ids = itertools.count(1)


@dataclass(eq=False)
class PlotlyMarker:
    """
    Native marker handle of the Plotly widget. Compared by identity.
    """

    marker_id: int
    position: LatLng
    descriptor: VisualDescriptor
    title: str
    attached: bool = True
    listeners: dict[str, list[Callable[[], None]]] = field(default_factory=dict, repr=False)


@dataclass(eq=False)
class PlotlyCircle:
    circle_id: int
    center: LatLng
    radius_m: float
    style: CircleStyle
    attached: bool = True


class PlotlyMapWidget:
    """
    In-process map widget that keeps markers in memory and serializes them as a
    Plotly `scattermapbox` payload. Pointer interaction is simulated with `trigger`.
    """

    def __init__(self, container: Any = None, options: WidgetOptions | None = None) -> None:
        self.container = container
        self.options = options or WidgetOptions()
        self._center = self.options.center
        self._zoom = self._clamp_zoom(self.options.zoom)
        self._zoom_listeners: list[Callable[[], None]] = []
        self._markers: dict[int, PlotlyMarker] = {}
        self._circles: dict[int, PlotlyCircle] = {}

    # --- viewport ---------------------------------------------------------------

    def get_zoom(self) -> float:
        return self._zoom

    def set_zoom(self, zoom: float) -> None:
        z = self._clamp_zoom(zoom)
        if z == self._zoom:
            return
        self._zoom = z
        for cb in list(self._zoom_listeners):
            cb()

    def on_zoom_changed(self, callback: Callable[[], None]) -> None:
        self._zoom_listeners.append(callback)

    def lat_lng(self, lat: float, lon: float) -> LatLng:
        return LatLng(lat=float(lat), lon=float(lon))

    def _clamp_zoom(self, zoom: float) -> float:
        return max(self.options.min_zoom, min(self.options.max_zoom, float(zoom)))

    # --- markers ----------------------------------------------------------------

    @property
    def markers(self) -> list[PlotlyMarker]:
        return list(self._markers.values())

    def create_marker(
        self, position: LatLng, descriptor: VisualDescriptor, *, title: str = ""
    ) -> PlotlyMarker:
        marker = PlotlyMarker(
            marker_id=next(_ids), position=position, descriptor=descriptor, title=title
        )
        self._markers[marker.marker_id] = marker
        return marker

    def set_icon(self, handle: PlotlyMarker, descriptor: VisualDescriptor) -> None:
        self._require_attached(handle).descriptor = descriptor

    def set_position(self, handle: PlotlyMarker, position: LatLng) -> None:
        self._require_attached(handle).position = position

    def add_listener(
        self, handle: PlotlyMarker, event: MarkerEvent, callback: Callable[[], None]
    ) -> None:
        self._require_attached(handle).listeners.setdefault(event, []).append(callback)

    def detach(self, handle: PlotlyMarker) -> None:
        handle.attached = False
        handle.listeners.clear()
        self._markers.pop(handle.marker_id, None)

    def trigger(self, handle: PlotlyMarker, event: MarkerEvent) -> None:
        if not handle.attached:
            return
        for cb in list(handle.listeners.get(event, ())):
            cb()

    def _require_attached(self, handle: PlotlyMarker) -> PlotlyMarker:
        if not handle.attached or self._markers.get(handle.marker_id) is not handle:
            raise ValueError(f"Marker {handle.marker_id} is not attached to this map")
        return handle

    # --- circles ----------------------------------------------------------------

    @property
    def circles(self) -> list[PlotlyCircle]:
        return list(self._circles.values())

    def create_circle(
        self, center: LatLng, radius_m: float, style: CircleStyle | None = None
    ) -> PlotlyCircle:
        circle = PlotlyCircle(
            circle_id=next(_ids),
            center=center,
            radius_m=float(radius_m),
            style=style or CircleStyle(),
        )
        self._circles[circle.circle_id] = circle
        return circle

    def update_circle(self, handle: PlotlyCircle, center: LatLng, radius_m: float) -> None:
        if not handle.attached:
            raise ValueError(f"Circle {handle.circle_id} is not attached to this map")
        handle.center = center
        handle.radius_m = float(radius_m)

    def remove_circle(self, handle: PlotlyCircle) -> None:
        handle.attached = False
        self._circles.pop(handle.circle_id, None)

    # --- serialization ----------------------------------------------------------

    def to_plot(self, *, meta: dict[str, Any] | None = None) -> dict[str, Any]:
        markers = self.markers
        traces: list[dict[str, Any]] = []
        # Render in a stable order: accuracy -> clusters -> stations -> current location.
        for circle in self.circles:
            traces.append(trace_accuracy_circle(circle))
        if any(m.descriptor.kind == "cluster" for m in markers):
            traces.append(trace_cluster_markers(markers))
        if any(m.descriptor.kind == "station" for m in markers):
            traces.append(trace_station_markers(markers))
        traces.extend(trace_current_location(markers))

        return {
            "data": traces,
            "layout": {
                "mapbox": {
                    "center": {"lat": self._center.lat, "lon": self._center.lon},
                    "zoom": self._zoom,
                    "style": "carto-positron",
                },
                "showlegend": True,
                "legend": {
                    "x": 0.99,
                    "y": 0.99,
                    "xanchor": "right",
                    "yanchor": "top",
                    "bgcolor": "rgba(255, 255, 255, 0.75)",
                    "bordercolor": "rgba(120, 120, 120, 0.35)",
                    "borderwidth": 1,
                    "font": {"size": 11},
                },
                "meta": dict(meta or {}),
            },
        }


class PlotlyWidgetLibrary:
    """
    `WidgetLibrary` for the Plotly widget. Always available unless told otherwise.
    """

    def __init__(self, *, available: bool = True) -> None:
        self.available = available
        self.created: list[PlotlyMapWidget] = []

    def is_available(self) -> bool:
        return self.available

    def create_map(self, container: Any, options: WidgetOptions) -> PlotlyMapWidget:
        widget = PlotlyMapWidget(container, options)
        self.created.append(widget)
        return widget
