from __future__ import annotations

from lod.policy import RenderMode
from mapview.station_map import StationMapView
from markers.events import EventBus, MapEvent
from render.widget import PlotlyWidgetLibrary
from stations.types import Station, StationStatus
from tracking.static import FixedLocation
from tracking.types import PositionFix
from widget.bootstrap import BootstrapState
from widget.types import WidgetOptions


def _station(sid: str, lat: float, lon: float, status: str = "available") -> Station:
    return Station(id=sid, lat=lat, lon=lon, status=StationStatus(status), available_slots=1, name=sid)


def _stations() -> list[Station]:
    return [
        _station("a", 37.5000, 127.0000),
        _station("b", 37.5005, 127.0005),
        _station("c", 37.7000, 127.2000),
    ]


def test_waits_for_library_then_renders():
    library = PlotlyWidgetLibrary(available=False)
    bus = EventBus()
    ready: list = []
    bus.subscribe(MapEvent.marker_ready, ready.append)
    view = StationMapView(library, options=WidgetOptions(zoom=12), stations=_stations(), events=bus)

    assert view.poll() == BootstrapState.waiting
    assert view.widget is None

    library.available = True
    assert view.poll() == BootstrapState.ready
    assert ready == [view.widget]
    assert view.markers is not None
    assert len(view.markers.markers) == 2


def test_on_map_ready_callback_receives_widget():
    seen: list = []
    view = StationMapView(PlotlyWidgetLibrary(), on_map_ready=seen.append, events=EventBus())
    view.poll()
    assert seen == [view.widget]


def test_zoom_changes_rerender():
    renders: list = []
    view = StationMapView(
        PlotlyWidgetLibrary(),
        options=WidgetOptions(zoom=12),
        stations=_stations(),
        events=EventBus(),
        on_render=renders.append,
    )
    view.poll()
    first = [m.handle for m in view.markers.markers]

    view.widget.set_zoom(15)
    assert view.zoom == 15
    assert view.markers.mode == RenderMode.individual
    assert len(view.widget.markers) == 3
    assert not any(h.attached for h in first)
    assert [r.mode for r in renders] == [RenderMode.cluster, RenderMode.individual]


def test_zoom_is_clamped_to_widget_bounds():
    view = StationMapView(PlotlyWidgetLibrary(), options=WidgetOptions(zoom=12), events=EventBus())
    view.poll()
    view.widget.set_zoom(3)
    assert view.zoom == 10


def test_only_a_new_station_list_triggers_a_render():
    renders: list = []
    stations = _stations()
    view = StationMapView(
        PlotlyWidgetLibrary(), stations=stations, events=EventBus(), on_render=renders.append
    )
    view.poll()
    view.set_stations(stations)
    assert len(renders) == 1

    view.set_stations(stations[:1])
    assert len(renders) == 2
    assert len(view.widget.markers) == 1


def test_stations_set_before_ready_are_used_on_ready():
    library = PlotlyWidgetLibrary(available=False)
    view = StationMapView(library, options=WidgetOptions(zoom=16), events=EventBus())
    view.poll()
    view.set_stations(_stations())
    library.available = True
    view.poll()
    assert len(view.widget.markers) == 3


def test_failed_bootstrap_leaves_map_absent():
    view = StationMapView(PlotlyWidgetLibrary(available=False), events=EventBus(), max_retries=1)
    view.poll()
    assert view.poll() == BootstrapState.failed
    assert view.widget is None
    assert view.start_tracking() is False


def test_tracking_is_independent_of_station_markers():
    view = StationMapView(
        PlotlyWidgetLibrary(),
        options=WidgetOptions(zoom=16),
        stations=_stations(),
        events=EventBus(),
        location=FixedLocation(PositionFix(lat=37.55, lon=127.05, accuracy_m=25.0)),
    )
    view.poll()
    assert view.start_tracking() is True
    assert len(view.widget.markers) == 4

    view.widget.set_zoom(17)
    assert view.tracker.marker.attached
    assert len(view.widget.markers) == 4

    view.destroy()
    assert view.widget.markers == []
    assert view.widget.circles == []
