import sys
from pathlib import Path

import pytest


# Ensure `backend/` is on sys.path so tests can import local modules
# like `stations.*`, `markers.*`, and `main`.
BACKEND_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def _isolated_telemetry(tmp_path, monkeypatch):
    # Keep render-pass telemetry out of the repo's data/ directory during tests.
    monkeypatch.setenv("EVMAP_TELEMETRY_PATH", str(tmp_path / "telemetry.duckdb"))
