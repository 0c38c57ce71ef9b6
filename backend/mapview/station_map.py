from __future__ import annotations

import logging
from typing import Any, Callable

from mapview.config import bootstrap_interval_s, bootstrap_max_retries, reconcile_strategy
from markers.events import EventBus, MapEvent, get_event_bus
from markers.lifecycle import MarkerLifecycleManager, ReconcileStats, ReconcileStrategy
from stations.types import Station
from tracking.position import LivePositionTracker
from tracking.types import LocationCapability, PositionOptions
from widget.bootstrap import BootstrapState, MapBootstrap
from widget.types import MapWidget, WidgetLibrary, WidgetOptions

logger = logging.getLogger(__name__)


class StationMapView:
    """
    Host component: owns the map widget once the library is loaded and re-renders the
    station markers whenever the zoom or the station list changes.

    The station list is treated as immutable per render; only a new list object
    triggers a re-render.
    """

    def __init__(
        self,
        library: WidgetLibrary,
        container: Any = None,
        *,
        options: WidgetOptions | None = None,
        stations: list[Station] | None = None,
        events: EventBus | None = None,
        on_map_ready: Callable[[MapWidget], None] | None = None,
        on_station_click: Callable[[Station], None] | None = None,
        on_cluster_click: Callable[[list[Station]], None] | None = None,
        on_render: Callable[[ReconcileStats], None] | None = None,
        location: LocationCapability | None = None,
        position_options: PositionOptions | None = None,
        strategy: ReconcileStrategy | None = None,
        max_retries: int | None = -1,
        interval_s: float | None = None,
    ) -> None:
        self._library = library
        self._container = container
        self._options = options or WidgetOptions()
        self._stations: list[Station] = stations if stations is not None else []
        self._events = events or get_event_bus()
        self._on_map_ready = on_map_ready
        self._on_station_click = on_station_click
        self._on_cluster_click = on_cluster_click
        self._on_render = on_render
        self._location = location
        self._position_options = position_options
        self._strategy: ReconcileStrategy = strategy or reconcile_strategy()

        self._widget: MapWidget | None = None
        self._manager: MarkerLifecycleManager | None = None
        self._tracker: LivePositionTracker | None = None
        self._zoom = float(self._options.zoom)

        # -1 means "use the configured default"; None means poll forever.
        retries = bootstrap_max_retries() if max_retries == -1 else max_retries
        self._bootstrap = MapBootstrap(
            library.is_available,
            on_ready=self._handle_library_ready,
            interval_s=interval_s if interval_s is not None else bootstrap_interval_s(),
            max_retries=retries,
        )

    @property
    def state(self) -> BootstrapState:
        return self._bootstrap.state

    @property
    def widget(self) -> MapWidget | None:
        return self._widget

    @property
    def markers(self) -> MarkerLifecycleManager | None:
        return self._manager

    @property
    def tracker(self) -> LivePositionTracker | None:
        return self._tracker

    @property
    def stations(self) -> list[Station]:
        return self._stations

    @property
    def zoom(self) -> float:
        return self._zoom

    def poll(self) -> BootstrapState:
        return self._bootstrap.tick()

    async def initialize(self) -> BootstrapState:
        return await self._bootstrap.run()

    def set_stations(self, stations: list[Station]) -> None:
        if stations is self._stations:
            return
        self._stations = stations
        self._render("stations")

    def start_tracking(self) -> bool:
        """
        Start the live position marker. Returns False when there's no map or no
        location capability yet.
        """
        if self._widget is None or self._location is None:
            return False
        if self._tracker is None:
            self._tracker = LivePositionTracker(
                self._widget, self._location, options=self._position_options
            )
        self._tracker.start()
        return True

    def stop_tracking(self) -> None:
        if self._tracker is not None:
            self._tracker.stop()

    def destroy(self) -> None:
        self.stop_tracking()
        if self._manager is not None:
            self._manager.clear()

    def _handle_library_ready(self) -> None:
        if self._widget is not None:
            return
        widget = self._library.create_map(self._container, self._options)
        self._widget = widget
        self._manager = MarkerLifecycleManager(
            widget,
            events=self._events,
            on_station_click=self._on_station_click,
            on_cluster_click=self._on_cluster_click,
            strategy=self._strategy,
        )
        widget.on_zoom_changed(self._handle_zoom_changed)
        self._zoom = float(widget.get_zoom())

        if self._on_map_ready is not None:
            self._on_map_ready(widget)
        self._events.emit(MapEvent.marker_ready, widget)
        self._render("ready")

    def _handle_zoom_changed(self) -> None:
        if self._widget is None:
            return
        self._zoom = float(self._widget.get_zoom())
        self._render("zoom")

    def _render(self, trigger: str) -> None:
        if self._manager is None:
            return
        self._manager.reconcile(self._stations, self._zoom)
        stats = self._manager.last_stats
        logger.debug("render trigger=%s zoom=%.2f stations=%d", trigger, self._zoom, len(self._stations))
        if stats is not None and self._on_render is not None:
            self._on_render(stats)
