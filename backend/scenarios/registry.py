from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml

from scenarios.types import ScenarioConfig

DEFAULT_SCENARIO_ID = "seoul_ev"

# backend/scenarios/registry.py -> repo root
_REPO_ROOT = Path(__file__).resolve().parents[2]


def _read_scenario(path: Path) -> ScenarioConfig:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid scenario yaml root: {path}")
    return ScenarioConfig.model_validate(data)


@lru_cache(maxsize=1)
def get_registry() -> dict[str, ScenarioConfig]:
    """
    Enabled datasets keyed by id, discovered from `scenarios/*/scenario.yaml`.

    Read once per process.
    """
    root = _REPO_ROOT / "scenarios"
    if not root.exists():
        return {}
    configs = (_read_scenario(p) for p in sorted(root.glob("*/scenario.yaml")))
    return {cfg.id: cfg for cfg in configs if cfg.enabled}


def default_scenario_id() -> str:
    reg = get_registry()
    if DEFAULT_SCENARIO_ID in reg or not reg:
        return DEFAULT_SCENARIO_ID
    return next(iter(reg))


def list_scenarios() -> list[ScenarioConfig]:
    return list(get_registry().values())


def get_scenario(scenario_id: str | None) -> ScenarioConfig:
    reg = get_registry()
    if not reg:
        raise RuntimeError("No scenarios discovered under `scenarios/*/scenario.yaml`")
    # Unknown or empty ids fall back to the default dataset.
    return reg.get((scenario_id or "").strip()) or reg[default_scenario_id()]


def resolve_repo_path(repo_relative: str) -> Path:
    return _REPO_ROOT / (repo_relative or "").lstrip("/")
