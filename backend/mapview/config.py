from __future__ import annotations

import os

from markers.lifecycle import RECONCILE_STRATEGIES, ReconcileStrategy
from widget.bootstrap import DEFAULT_MAX_RETRIES, DEFAULT_POLL_INTERVAL_S


def reconcile_strategy() -> ReconcileStrategy:
    v = (os.getenv("EVMAP_RECONCILE_STRATEGY") or "rebuild").strip().lower()
    if v in RECONCILE_STRATEGIES:
        return v  # type: ignore[return-value]
    return "rebuild"


def bootstrap_max_retries() -> int | None:
    raw = (os.getenv("EVMAP_BOOTSTRAP_MAX_RETRIES") or "").strip().lower()
    if not raw:
        return DEFAULT_MAX_RETRIES
    if raw in {"0", "none", "unbounded", "inf"}:
        return None
    try:
        return max(1, int(raw))
    except ValueError:
        return DEFAULT_MAX_RETRIES


def bootstrap_interval_s() -> float:
    raw = (os.getenv("EVMAP_BOOTSTRAP_INTERVAL_MS") or "").strip()
    try:
        ms = float(raw) if raw else DEFAULT_POLL_INTERVAL_S * 1000.0
    except ValueError:
        ms = DEFAULT_POLL_INTERVAL_S * 1000.0
    return max(1.0, ms) / 1000.0
