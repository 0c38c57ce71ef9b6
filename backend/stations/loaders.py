from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from stations.types import Station, StationStatus


class StationRecord(BaseModel):
    """
    One station as stored in a dataset file.

    Accepts both `lon` and `lng` for longitude since feeds disagree on the key.
    """

    id: str
    name: str = ""
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0, validation_alias=AliasChoices("lon", "lng"))
    status: StationStatus
    availableSlots: int = Field(default=0, ge=0)

    def to_station(self) -> Station:
        return Station(
            id=self.id,
            lat=self.lat,
            lon=self.lon,
            status=self.status,
            available_slots=self.availableSlots,
            name=self.name,
        )


def parse_stations(rows: list[dict[str, Any]]) -> list[Station]:
    # Input order is preserved; clustering is order-dependent.
    return [StationRecord.model_validate(r).to_station() for r in rows]


def load_stations(path: Path) -> list[Station]:
    """
    Input: JSON file holding either a list of station objects or `{"stations": [...]}`.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    rows = data.get("stations") if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise ValueError(f"Invalid stations file (expected a list): {path}")
    try:
        return parse_stations(rows)
    except ValidationError as e:
        raise ValueError(f"Invalid station record in {path}: {e}") from e
