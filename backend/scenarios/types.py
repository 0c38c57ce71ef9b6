from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ScenarioCenter(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class ScenarioDefaultView(BaseModel):
    center: ScenarioCenter
    zoom: float = Field(ge=0.0, le=24.0)


class ScenarioZoomBounds(BaseModel):
    min: float = Field(default=10.0, ge=0.0, le=24.0)
    max: float = Field(default=18.0, ge=0.0, le=24.0)

    @model_validator(mode="after")
    def _ordered(self) -> "ScenarioZoomBounds":
        if self.min > self.max:
            raise ValueError(f"zoomBounds.min ({self.min}) > zoomBounds.max ({self.max})")
        return self


class ScenarioStationSource(BaseModel):
    # Repo-relative JSON file with the station list.
    path: str


class ScenarioConfig(BaseModel):
    """
    A station dataset plus the map defaults it should open with.
    """

    id: str
    title: str
    defaultView: ScenarioDefaultView
    zoomBounds: ScenarioZoomBounds = Field(default_factory=ScenarioZoomBounds)
    enabled: bool = True
    stations: ScenarioStationSource
