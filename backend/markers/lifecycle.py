from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from lod.policy import RenderMode
from markers.content import VisualDescriptor, build_individual_content
from markers.events import EventBus, MapEvent, get_event_bus
from markers.plan import PlannedMarker, RenderPlan, build_render_plan
from stations.types import Station
from widget.types import MapWidget

logger = logging.getLogger(__name__)

ReconcileStrategy = Literal["rebuild", "incremental"]
RECONCILE_STRATEGIES: tuple[str, ...] = ("rebuild", "incremental")


@dataclass
class RenderedMarker:
    """
    A marker currently (or formerly) on the map.

    `handle` is the widget's native marker; only the lifecycle manager touches it.
    `visual_state` is the last descriptor applied to the handle.
    """

    key: str | None
    handle: Any
    visual_state: VisualDescriptor
    lat: float
    lon: float
    title: str
    stations: tuple[Station, ...]
    hoverable: bool = False
    attached: bool = True


@dataclass(frozen=True)
class ReconcileStats:
    mode: RenderMode
    zoom: float
    strategy: str
    planned: int
    created: int = 0
    updated: int = 0
    kept: int = 0
    removed: int = 0
    clusters: int = 0
    suppressed_clusters: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "zoom": self.zoom,
            "strategy": self.strategy,
            "planned": self.planned,
            "created": self.created,
            "updated": self.updated,
            "kept": self.kept,
            "removed": self.removed,
            "clusters": self.clusters,
            "suppressedClusters": self.suppressed_clusters,
        }


@dataclass
class _Counts:
    created: int = 0
    updated: int = 0
    kept: int = 0
    removed: int = 0


class MarkerLifecycleManager:
    """
    Owns every station/cluster marker on a map widget and keeps it in line with the
    latest render plan.

    Default strategy `rebuild`: each pass detaches all previous markers and creates the
    full new set, since clusters have no identity across passes. Strategy `incremental`
    keeps individual-mode markers keyed by station id and updates them in place; the
    resulting marker set is the same.

    Passes never overlap: a reconcile requested while one is running is deferred and the
    latest request runs once the current pass finishes.
    """

    def __init__(
        self,
        widget: MapWidget,
        *,
        events: EventBus | None = None,
        on_station_click: Callable[[Station], None] | None = None,
        on_cluster_click: Callable[[list[Station]], None] | None = None,
        strategy: ReconcileStrategy = "rebuild",
    ) -> None:
        if strategy not in RECONCILE_STRATEGIES:
            raise ValueError(f"Unknown reconcile strategy: {strategy}")
        self._widget = widget
        self._events = events or get_event_bus()
        self._on_station_click = on_station_click
        self._on_cluster_click = on_cluster_click
        self._strategy: ReconcileStrategy = strategy

        self._markers: list[RenderedMarker] = []
        self._mode: RenderMode | None = None
        self._hovered_station_id: str | None = None
        self._busy = False
        self._pending: Callable[[], RenderPlan] | None = None
        self.last_stats: ReconcileStats | None = None

    @property
    def markers(self) -> list[RenderedMarker]:
        return list(self._markers)

    @property
    def mode(self) -> RenderMode | None:
        return self._mode

    @property
    def strategy(self) -> str:
        return self._strategy

    @property
    def hovered_station_id(self) -> str | None:
        return self._hovered_station_id

    def reconcile(self, stations: list[Station], zoom: float) -> list[RenderedMarker]:
        """
        Re-plan from stations + zoom (using the current hover state) and apply it.
        """
        z = float(zoom)
        return self._run(
            lambda: build_render_plan(
                stations, zoom=z, hovered_station_id=self._hovered_station_id
            )
        )

    def apply(self, plan: RenderPlan) -> list[RenderedMarker]:
        """
        Apply a plan built elsewhere. Unlike `reconcile`, the plan is used as is,
        including whatever hover emphasis it was built with.
        """
        return self._run(lambda: plan)

    def clear(self) -> None:
        removed = self._detach_all()
        self._mode = None
        self._hovered_station_id = None
        logger.debug("markers cleared removed=%d", removed)

    # --- passes -----------------------------------------------------------------

    def _run(self, make_plan: Callable[[], RenderPlan]) -> list[RenderedMarker]:
        self._pending = make_plan
        if self._busy:
            logger.debug("reconcile requested during a pass; deferred")
            return self.markers

        self._busy = True
        try:
            while self._pending is not None:
                plan = self._pending()
                self._pending = None
                self._apply(plan)
        finally:
            self._busy = False
        return self.markers

    def _apply(self, plan: RenderPlan) -> None:
        if self._can_apply_incrementally(plan):
            counts = self._apply_incremental(plan)
            strategy = "incremental"
        else:
            counts = self._apply_rebuild(plan)
            strategy = "rebuild"
        self._mode = plan.mode

        stats = ReconcileStats(
            mode=plan.mode,
            zoom=plan.zoom,
            strategy=strategy,
            planned=len(plan.markers),
            created=counts.created,
            updated=counts.updated,
            kept=counts.kept,
            removed=counts.removed,
            clusters=plan.cluster_count,
            suppressed_clusters=plan.suppressed_clusters,
        )
        self.last_stats = stats
        logger.debug(
            "reconcile mode=%s zoom=%.2f strategy=%s created=%d updated=%d kept=%d removed=%d",
            stats.mode.value,
            stats.zoom,
            strategy,
            stats.created,
            stats.updated,
            stats.kept,
            stats.removed,
        )

    def _can_apply_incrementally(self, plan: RenderPlan) -> bool:
        if self._strategy != "incremental":
            return False
        if plan.mode != RenderMode.individual or self._mode != RenderMode.individual:
            return False
        # Duplicate station ids would make keyed matching leak markers.
        plan_keys = [m.key for m in plan.markers]
        prev_keys = [m.key for m in self._markers]
        return len(set(plan_keys)) == len(plan_keys) and len(set(prev_keys)) == len(
            prev_keys
        )

    def _apply_rebuild(self, plan: RenderPlan) -> _Counts:
        counts = _Counts(removed=self._detach_all())
        for entry in plan.markers:
            self._markers.append(self._create(entry))
            counts.created += 1
        return counts

    def _apply_incremental(self, plan: RenderPlan) -> _Counts:
        counts = _Counts()
        previous = {m.key: m for m in self._markers}
        current: list[RenderedMarker] = []

        for entry in plan.markers:
            marker = previous.pop(entry.key, None)
            if marker is None or marker.title != entry.title:
                if marker is not None:
                    self._detach(marker)
                    counts.removed += 1
                current.append(self._create(entry))
                counts.created += 1
                continue

            changed = False
            if (marker.lat, marker.lon) != (entry.lat, entry.lon):
                self._widget.set_position(
                    marker.handle, self._widget.lat_lng(entry.lat, entry.lon)
                )
                marker.lat, marker.lon = entry.lat, entry.lon
                changed = True
            if marker.visual_state != entry.descriptor:
                self._widget.set_icon(marker.handle, entry.descriptor)
                marker.visual_state = entry.descriptor
                changed = True
            marker.stations = entry.stations
            if changed:
                counts.updated += 1
            else:
                counts.kept += 1
            current.append(marker)

        for stale in previous.values():
            self._detach(stale)
            counts.removed += 1

        self._markers = current
        return counts

    # --- marker handles ---------------------------------------------------------

    def _create(self, entry: PlannedMarker) -> RenderedMarker:
        handle = self._widget.create_marker(
            self._widget.lat_lng(entry.lat, entry.lon),
            entry.descriptor,
            title=entry.title,
        )
        marker = RenderedMarker(
            key=entry.key,
            handle=handle,
            visual_state=entry.descriptor,
            lat=entry.lat,
            lon=entry.lon,
            title=entry.title,
            stations=entry.stations,
            hoverable=entry.hoverable,
        )
        self._widget.add_listener(handle, "click", lambda: self._handle_click(marker))
        if entry.hoverable:
            self._widget.add_listener(
                handle, "pointer-enter", lambda: self._handle_pointer_enter(marker)
            )
            self._widget.add_listener(
                handle, "pointer-leave", lambda: self._handle_pointer_leave(marker)
            )
        return marker

    def _detach(self, marker: RenderedMarker) -> None:
        if not marker.attached:
            return
        self._widget.detach(marker.handle)
        marker.attached = False

    def _detach_all(self) -> int:
        n = 0
        for marker in self._markers:
            if marker.attached:
                self._detach(marker)
                n += 1
        self._markers = []
        return n

    # --- interaction ------------------------------------------------------------

    def _handle_click(self, marker: RenderedMarker) -> None:
        if not marker.attached:
            return
        if len(marker.stations) == 1:
            station = marker.stations[0]
            if self._on_station_click is not None:
                self._on_station_click(station)
            self._events.emit(MapEvent.station_clicked, station)
            return

        members = list(marker.stations)
        if self._on_cluster_click is not None:
            self._on_cluster_click(members)
        self._events.emit(MapEvent.cluster_clicked, members)

    def _handle_pointer_enter(self, marker: RenderedMarker) -> None:
        if not marker.attached or not marker.hoverable:
            return
        previous = self._hovered_station_id
        self._hovered_station_id = marker.key
        if previous is not None and previous != marker.key:
            # Only one station is emphasized at a time.
            for other in self._markers:
                if other.key == previous and other.attached and other.hoverable:
                    self._refresh_icon(other, hovered=False)
        self._refresh_icon(marker, hovered=True)

    def _handle_pointer_leave(self, marker: RenderedMarker) -> None:
        if not marker.attached or not marker.hoverable:
            return
        if self._hovered_station_id != marker.key:
            # A late leave from a marker that is no longer the hovered one.
            return
        self._hovered_station_id = None
        self._refresh_icon(marker, hovered=False)

    def _refresh_icon(self, marker: RenderedMarker, *, hovered: bool) -> None:
        descriptor = build_individual_content(marker.stations[0], hovered)
        if descriptor == marker.visual_state:
            return
        self._widget.set_icon(marker.handle, descriptor)
        marker.visual_state = descriptor
