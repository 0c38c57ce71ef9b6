from __future__ import annotations

import pytest

from lod.policy import RenderMode
from markers.events import EventBus, MapEvent
from markers.lifecycle import MarkerLifecycleManager
from markers.plan import RenderPlan, build_render_plan
from render.widget import PlotlyMapWidget
from stations.types import Station, StationStatus
from widget.types import WidgetOptions


def _station(sid: str, lat: float, lon: float, status: str = "available", slots: int = 2) -> Station:
    return Station(
        id=sid, lat=lat, lon=lon, status=StationStatus(status), available_slots=slots, name=sid.upper()
    )


def _stations() -> list[Station]:
    return [
        _station("a1", 37.500, 127.000),
        _station("a2", 37.501, 127.001, "occupied"),
        _station("b1", 37.600, 127.100, "partial", 1),
        _station("c1", 37.700, 127.200, "occupied", 0),
    ]


def _setup(strategy: str = "rebuild"):
    widget = PlotlyMapWidget(options=WidgetOptions(zoom=12))
    bus = EventBus()
    clicks: list = []
    manager = MarkerLifecycleManager(
        widget,
        events=bus,
        on_station_click=lambda s: clicks.append(("station", s)),
        on_cluster_click=lambda members: clicks.append(("cluster", members)),
        strategy=strategy,  # type: ignore[arg-type]
    )
    return widget, bus, clicks, manager


def test_individual_mode_renders_every_station():
    widget, _bus, _clicks, manager = _setup()
    markers = manager.reconcile(_stations(), 15)
    assert len(markers) == 4
    assert len(widget.markers) == 4
    assert manager.mode == RenderMode.individual


def test_cluster_mode_renders_clusters_and_skips_occupied_groups():
    widget, _bus, _clicks, manager = _setup()
    markers = manager.reconcile(_stations(), 12)
    assert [[s.id for s in m.stations] for m in markers] == [["a1", "a2"], ["b1"]]
    assert len(widget.markers) == 2
    assert manager.last_stats.suppressed_clusters == 1


def test_zoom_change_tears_down_every_marker_handle():
    widget, _bus, _clicks, manager = _setup()
    stations = _stations()
    before = [m.handle for m in manager.reconcile(stations, 15)]
    after = [m.handle for m in manager.reconcile(stations, 16)]

    assert len(after) == len(before) == 4
    assert not any(b is a for b in before for a in after)
    assert all(not h.attached for h in before)
    assert manager.last_stats.removed == 4
    assert manager.last_stats.created == 4
    assert len(widget.markers) == 4


def test_crossing_cluster_threshold_replaces_individual_markers():
    widget, _bus, _clicks, manager = _setup()
    stations = _stations()
    manager.reconcile(stations, 14)
    manager.reconcile(stations, 13)
    assert manager.mode == RenderMode.cluster
    assert len(widget.markers) == len(manager.markers) == 2


def test_removed_station_loses_its_marker():
    widget, _bus, _clicks, manager = _setup()
    stations = _stations()
    manager.reconcile(stations, 15)
    manager.reconcile(stations[:2], 15)
    assert sorted(m.key for m in manager.markers) == ["a1", "a2"]
    assert len(widget.markers) == 2


def test_click_on_station_marker_notifies_callback_and_bus():
    widget, bus, clicks, manager = _setup()
    seen: list = []
    bus.subscribe(MapEvent.station_clicked, seen.append)
    markers = manager.reconcile(_stations(), 15)

    widget.trigger(markers[2].handle, "click")
    assert clicks == [("station", markers[2].stations[0])]
    assert seen == [markers[2].stations[0]]


def test_click_on_multi_member_cluster_sends_member_list():
    widget, bus, clicks, manager = _setup()
    seen: list = []
    bus.subscribe(MapEvent.cluster_clicked, seen.append)
    markers = manager.reconcile(_stations(), 12)

    widget.trigger(markers[0].handle, "click")
    assert clicks == [("cluster", list(markers[0].stations))]
    assert [s.id for s in seen[0]] == ["a1", "a2"]


def test_click_on_singleton_cluster_sends_the_station():
    widget, bus, clicks, manager = _setup()
    seen: list = []
    bus.subscribe(MapEvent.station_clicked, seen.append)
    markers = manager.reconcile(_stations(), 12)

    widget.trigger(markers[1].handle, "click")
    assert clicks[0][0] == "station"
    assert clicks[0][1].id == "b1"
    assert [s.id for s in seen] == ["b1"]


def test_hover_updates_icon_in_place():
    widget, _bus, _clicks, manager = _setup()
    markers = manager.reconcile(_stations(), 15)
    target = markers[0]
    handle = target.handle

    widget.trigger(handle, "pointer-enter")
    assert manager.hovered_station_id == "a1"
    assert handle.attached
    assert handle.descriptor.scale == 1.2
    assert manager.markers[0].handle is handle

    widget.trigger(handle, "pointer-leave")
    assert manager.hovered_station_id is None
    assert handle.descriptor.scale == 1.0
    assert len(widget.markers) == 4


def test_only_one_station_is_emphasized():
    widget, _bus, _clicks, manager = _setup()
    markers = manager.reconcile(_stations(), 15)
    widget.trigger(markers[0].handle, "pointer-enter")
    widget.trigger(markers[1].handle, "pointer-enter")

    assert manager.hovered_station_id == "a2"
    assert markers[0].handle.descriptor.scale == 1.0
    assert markers[1].handle.descriptor.scale == 1.2


def test_late_leave_from_previous_marker_keeps_current_hover():
    widget, _bus, _clicks, manager = _setup()
    markers = manager.reconcile(_stations(), 15)
    widget.trigger(markers[0].handle, "pointer-enter")
    widget.trigger(markers[1].handle, "pointer-enter")
    widget.trigger(markers[0].handle, "pointer-leave")

    assert manager.hovered_station_id == "a2"
    assert markers[1].handle.descriptor.scale == 1.2

    after = manager.reconcile(_stations(), 16)
    assert {m.key: m.visual_state.scale for m in after}["a2"] == 1.2


def test_hover_state_carries_into_next_pass():
    widget, _bus, _clicks, manager = _setup()
    markers = manager.reconcile(_stations(), 15)
    widget.trigger(markers[2].handle, "pointer-enter")

    after = manager.reconcile(_stations(), 16)
    scales = {m.key: m.visual_state.scale for m in after}
    assert scales["b1"] == 1.2


def test_cluster_markers_have_no_hover_wiring():
    widget, _bus, _clicks, manager = _setup()
    markers = manager.reconcile(_stations(), 12)
    widget.trigger(markers[0].handle, "pointer-enter")
    assert manager.hovered_station_id is None


def test_clear_detaches_everything():
    widget, _bus, _clicks, manager = _setup()
    manager.reconcile(_stations(), 15)
    manager.clear()
    assert widget.markers == []
    assert manager.markers == []
    assert manager.mode is None


def test_incremental_strategy_keeps_unchanged_handles():
    widget, _bus, _clicks, manager = _setup("incremental")
    stations = _stations()
    before = {m.key: m.handle for m in manager.reconcile(stations, 15)}

    changed = [
        stations[0],
        _station("a2", 37.501, 127.001, "available", 3),
        stations[2],
        _station("d1", 37.8, 127.3),
    ]
    after = {m.key: m.handle for m in manager.reconcile(changed, 16)}

    assert after["a1"] is before["a1"]
    assert after["a2"] is before["a2"]
    assert after["a2"].descriptor.label == "3"
    assert after["d1"] is not None
    assert not before["c1"].attached
    stats = manager.last_stats
    assert (stats.kept, stats.updated, stats.created, stats.removed) == (2, 1, 1, 1)
    assert stats.strategy == "incremental"
    assert sorted(m.marker_id for m in widget.markers) == sorted(h.marker_id for h in after.values())


def test_incremental_strategy_moves_kept_handles():
    widget, _bus, _clicks, manager = _setup("incremental")
    stations = _stations()
    before = {m.key: m.handle for m in manager.reconcile(stations, 15)}

    moved = [_station("a1", 37.505, 127.004), *stations[1:]]
    after = {m.key: m.handle for m in manager.reconcile(moved, 15)}

    assert after["a1"] is before["a1"]
    assert after["a1"].position == widget.lat_lng(37.505, 127.004)
    stats = manager.last_stats
    assert (stats.kept, stats.updated, stats.created, stats.removed) == (3, 1, 0, 0)
    assert len(widget.markers) == 4


def test_incremental_strategy_rebuilds_across_modes():
    widget, _bus, _clicks, manager = _setup("incremental")
    manager.reconcile(_stations(), 15)
    manager.reconcile(_stations(), 12)
    assert manager.last_stats.strategy == "rebuild"
    assert len(widget.markers) == 2


def test_incremental_strategy_falls_back_on_duplicate_ids():
    widget, _bus, _clicks, manager = _setup("incremental")
    dupes = [_station("x", 37.5, 127.0), _station("x", 37.6, 127.1)]
    manager.reconcile(dupes, 15)
    manager.reconcile(dupes, 16)
    assert manager.last_stats.strategy == "rebuild"
    assert len(widget.markers) == 2


def test_reconcile_requested_mid_pass_runs_after_current_pass():
    class ReentrantWidget(PlotlyMapWidget):
        manager: MarkerLifecycleManager | None = None
        fired = False

        def create_marker(self, position, descriptor, *, title=""):
            handle = super().create_marker(position, descriptor, title=title)
            if self.manager is not None and not self.fired:
                self.fired = True
                self.manager.reconcile(_stations(), 12)
            return handle

    widget = ReentrantWidget(options=WidgetOptions(zoom=15))
    manager = MarkerLifecycleManager(widget, events=EventBus())
    widget.manager = manager

    manager.reconcile(_stations(), 15)
    assert manager.mode == RenderMode.cluster
    assert len(manager.markers) == 2
    assert len(widget.markers) == 2


def test_apply_renders_a_prebuilt_plan():
    widget, _bus, _clicks, manager = _setup()
    manager.reconcile(_stations(), 15)
    plan = build_render_plan(_stations(), zoom=12, hovered_station_id=None)

    markers = manager.apply(plan)
    assert [m.title for m in markers] == [p.title for p in plan.markers]
    assert len(widget.markers) == len(plan.markers) == 2
    assert manager.mode == RenderMode.cluster
    assert manager.last_stats.removed == 4

    manager.apply(RenderPlan(mode=RenderMode.cluster, zoom=12))
    assert widget.markers == []


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        MarkerLifecycleManager(PlotlyMapWidget(), strategy="diff")  # type: ignore[arg-type]
