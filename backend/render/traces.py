from __future__ import annotations

from typing import TYPE_CHECKING, Any

from geo.accuracy import accuracy_ring

if TYPE_CHECKING:
    from render.widget import PlotlyCircle, PlotlyMarker


def trace_station_markers(markers: list[PlotlyMarker]) -> dict[str, Any]:
    feats = [m for m in markers if m.descriptor.kind == "station"]
    return {
        "type": "scattermapbox",
        "name": "Stations",
        "lon": [m.position.lon for m in feats],
        "lat": [m.position.lat for m in feats],
        "mode": "markers+text",
        "text": [m.descriptor.label or "" for m in feats],
        "textposition": "middle center",
        "textfont": {"color": [m.descriptor.colors.label for m in feats], "size": 12},
        "hovertext": [m.title for m in feats],
        "customdata": [m.marker_id for m in feats],
        "marker": {
            "size": [round(m.descriptor.size * m.descriptor.scale, 2) for m in feats],
            "color": [m.descriptor.colors.fill for m in feats],
        },
        "hovertemplate": "%{hovertext}<extra></extra>",
    }


def trace_cluster_markers(markers: list[PlotlyMarker]) -> dict[str, Any]:
    feats = [m for m in markers if m.descriptor.kind == "cluster"]
    return {
        "type": "scattermapbox",
        "name": "Stations (clusters)",
        "lon": [m.position.lon for m in feats],
        "lat": [m.position.lat for m in feats],
        "mode": "markers+text",
        "text": [m.descriptor.badge or "" for m in feats],
        "textposition": "middle center",
        "textfont": {"color": [m.descriptor.colors.label for m in feats], "size": 11},
        "hovertext": [m.title for m in feats],
        "customdata": [m.marker_id for m in feats],
        "marker": {
            "size": [m.descriptor.size for m in feats],
            "color": [m.descriptor.colors.fill for m in feats],
        },
        "hovertemplate": "%{hovertext}<extra></extra>",
    }


def trace_current_location(markers: list[PlotlyMarker]) -> list[dict[str, Any]]:
    feats = [m for m in markers if m.descriptor.kind == "current_location"]
    if not feats:
        return []
    lons = [m.position.lon for m in feats]
    lats = [m.position.lat for m in feats]
    # Outer halo first so the dot is drawn on top.
    halo = {
        "type": "scattermapbox",
        "name": "Current location (halo)",
        "lon": lons,
        "lat": lats,
        "mode": "markers",
        "marker": {
            "size": [m.descriptor.size * 2 for m in feats],
            "color": [m.descriptor.colors.glow for m in feats],
        },
        "hoverinfo": "skip",
        "showlegend": False,
    }
    dot = {
        "type": "scattermapbox",
        "name": "Current location",
        "lon": lons,
        "lat": lats,
        "mode": "markers",
        "marker": {
            "size": [m.descriptor.size for m in feats],
            "color": [m.descriptor.colors.fill for m in feats],
        },
        "hovertemplate": "Current location<extra></extra>",
    }
    return [halo, dot]


def trace_accuracy_circle(circle: PlotlyCircle) -> dict[str, Any]:
    ring = accuracy_ring(circle.center.lat, circle.center.lon, circle.radius_m)
    return {
        "type": "scattermapbox",
        "name": "Location accuracy",
        "lon": [lon for lon, _lat in ring],
        "lat": [lat for _lon, lat in ring],
        "mode": "lines",
        "fill": "toself",
        "fillcolor": circle.style.fill,
        "line": {"color": circle.style.stroke, "width": int(circle.style.stroke_width)},
        "hoverinfo": "skip",
        "showlegend": False,
    }
