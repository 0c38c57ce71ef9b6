from __future__ import annotations

from typing import Literal

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from api.plot import build_station_plot
from scenarios.registry import list_scenarios
from telemetry.singleton import get_store, reset_store
from tracking.types import PositionFix

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApiLocation(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    accuracy: float | None = Field(default=None, ge=0.0)


class ApiPlotRequest(BaseModel):
    scenarioId: str | None = None
    zoom: float | None = Field(default=None, ge=0.0, le=24.0)
    hoveredStationId: str | None = None
    location: ApiLocation | None = None
    strategy: Literal["rebuild", "incremental"] | None = None


class ApiScenario(BaseModel):
    id: str
    title: str
    center: dict[str, float]
    zoom: float
    minZoom: float
    maxZoom: float


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/scenarios")
def scenarios() -> list[ApiScenario]:
    return [
        ApiScenario(
            id=cfg.id,
            title=cfg.title,
            center={"lat": cfg.defaultView.center.lat, "lon": cfg.defaultView.center.lon},
            zoom=cfg.defaultView.zoom,
            minZoom=cfg.zoomBounds.min,
            maxZoom=cfg.zoomBounds.max,
        )
        for cfg in list_scenarios()
    ]


@app.post("/plot")
def plot(body: ApiPlotRequest):
    location = None
    if body.location is not None:
        location = PositionFix(
            lat=body.location.lat, lon=body.location.lon, accuracy_m=body.location.accuracy
        )
    return build_station_plot(
        scenario_id=body.scenarioId,
        zoom=body.zoom,
        hovered_station_id=body.hoveredStationId,
        location=location,
        strategy=body.strategy,
    )


@app.get("/telemetry/summary")
def telemetry_summary(mode: str | None = None, endpoint: str | None = None):
    store = get_store()
    if store is None:
        return {"enabled": False, "summary": [], "slowest": []}
    return {
        "enabled": True,
        "summary": store.summary(mode=mode, endpoint=endpoint),
        "slowest": store.slowest(mode=mode, endpoint=endpoint, limit=10),
    }


@app.post("/telemetry/reset")
def telemetry_reset():
    reset_store()
    return {"ok": True}
