from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol


@dataclass(frozen=True)
class PositionFix:
    lat: float
    lon: float
    # Radius in meters; None when the device doesn't report it.
    accuracy_m: float | None = None


@dataclass(frozen=True)
class PositionError:
    code: str
    message: str = ""


@dataclass(frozen=True)
class PositionOptions:
    high_accuracy: bool = True
    # A cached fix younger than this may be delivered.
    maximum_age_ms: int = 5_000
    # No fix within this window -> the subscription reports a timeout error.
    timeout_ms: int = 10_000


class LocationCapability(Protocol):
    """
    Continuous device-position source (e.g. a browser/OS geolocation watch).
    """

    def subscribe(
        self,
        on_fix: Callable[[PositionFix], None],
        on_error: Callable[[PositionError], None],
        options: PositionOptions,
    ) -> Any: ...

    def unsubscribe(self, handle: Any) -> None: ...
