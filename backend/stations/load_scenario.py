from __future__ import annotations

from functools import lru_cache

from scenarios.registry import get_scenario, resolve_repo_path
from stations.loaders import load_stations
from stations.types import Station


@lru_cache(maxsize=8)
def _cached(scenario_id: str) -> tuple[Station, ...]:
    cfg = get_scenario(scenario_id)
    path = resolve_repo_path(cfg.stations.path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario '{cfg.id}' missing file: {cfg.stations.path}")
    return tuple(load_stations(path))


def load_scenario_stations(scenario_id: str | None) -> list[Station]:
    """
    Stations of a scenario, in file order.

    Each call returns a new list so hosts see a fresh reference.
    """
    sid = get_scenario(scenario_id).id
    return list(_cached(sid))
