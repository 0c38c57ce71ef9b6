from __future__ import annotations

import os
from pathlib import Path

from scenarios.registry import resolve_repo_path

DEFAULT_TELEMETRY_PATH = "data/telemetry/render_passes.duckdb"


def telemetry_path() -> Path:
    raw = (os.getenv("EVMAP_TELEMETRY_PATH") or "").strip()
    return Path(raw) if raw else resolve_repo_path(DEFAULT_TELEMETRY_PATH)


def telemetry_enabled() -> bool:
    # On unless explicitly switched off.
    v = (os.getenv("EVMAP_TELEMETRY") or "on").strip().lower()
    return v not in {"0", "false", "no", "off"}
