from __future__ import annotations

import logging
import time
from typing import Any

from mapview.station_map import StationMapView
from markers.events import EventBus
from markers.lifecycle import ReconcileStrategy
from render.widget import PlotlyMapWidget, PlotlyWidgetLibrary
from scenarios.registry import get_scenario
from stations.load_scenario import load_scenario_stations
from telemetry.singleton import get_store
from tracking.static import FixedLocation
from tracking.types import PositionFix
from widget.types import LatLng, WidgetOptions

logger = logging.getLogger(__name__)


def build_station_plot(
    *,
    scenario_id: str | None,
    zoom: float | None,
    hovered_station_id: str | None = None,
    location: PositionFix | None = None,
    strategy: ReconcileStrategy | None = None,
) -> dict[str, Any]:
    """
    Run one full render pass for a scenario and return a Plotly mapbox payload.
    """
    t0 = time.perf_counter()
    cfg = get_scenario(scenario_id)
    stations = load_scenario_stations(cfg.id)
    t_load = time.perf_counter()

    options = WidgetOptions(
        center=LatLng(lat=cfg.defaultView.center.lat, lon=cfg.defaultView.center.lon),
        zoom=float(zoom) if zoom is not None else cfg.defaultView.zoom,
        min_zoom=cfg.zoomBounds.min,
        max_zoom=cfg.zoomBounds.max,
    )
    view = StationMapView(
        PlotlyWidgetLibrary(),
        options=options,
        stations=stations,
        events=EventBus(),
        location=FixedLocation(location) if location is not None else None,
        strategy=strategy,
        max_retries=None,
    )
    view.poll()
    widget = view.widget
    manager = view.markers
    if not isinstance(widget, PlotlyMapWidget) or manager is None:
        raise RuntimeError("Plotly map widget failed to initialize")

    if hovered_station_id:
        for marker in manager.markers:
            if marker.key == hovered_station_id:
                widget.trigger(marker.handle, "pointer-enter")
                break
    if location is not None:
        view.start_tracking()
    t_render = time.perf_counter()

    pass_stats = manager.last_stats.as_dict() if manager.last_stats is not None else {}
    stats: dict[str, Any] = {
        "scenarioId": cfg.id,
        "mode": pass_stats.get("mode"),
        "zoom": widget.get_zoom(),
        "stationCount": len(stations),
        "renderedMarkers": len(manager.markers),
        "hoveredStationId": manager.hovered_station_id,
        "currentLocation": view.tracker is not None and view.tracker.marker is not None,
        "markers": pass_stats,
        "timingsMs": {
            "load": (t_load - t0) * 1000.0,
            "render": (t_render - t_load) * 1000.0,
            "total": (t_render - t0) * 1000.0,
        },
    }
    plot = widget.to_plot(meta={"stats": stats})

    store = get_store()
    if store is not None:
        store.record(
            endpoint="/plot",
            trigger="request",
            scenario=cfg.id,
            view_zoom=widget.get_zoom(),
            mode=str(pass_stats.get("mode") or ""),
            stats=stats,
        )
    logger.debug(
        "plot scenario=%s zoom=%.2f markers=%d", cfg.id, widget.get_zoom(), len(manager.markers)
    )
    return plot
