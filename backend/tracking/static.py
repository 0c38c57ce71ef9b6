from __future__ import annotations

from typing import Callable

from tracking.types import PositionError, PositionFix, PositionOptions


class FixedLocation:
    """
    `LocationCapability` that reports one known fix (or an error) on subscribe.

    Used when the position comes from a request rather than a live device.
    """

    def __init__(self, fix: PositionFix | None = None, *, error: PositionError | None = None) -> None:
        self._fix = fix
        self._error = error or PositionError(code="POSITION_UNAVAILABLE")
        self._next_handle = 0
        self.active: set[int] = set()

    def subscribe(
        self,
        on_fix: Callable[[PositionFix], None],
        on_error: Callable[[PositionError], None],
        options: PositionOptions,
    ) -> int:
        self._next_handle += 1
        handle = self._next_handle
        self.active.add(handle)
        if self._fix is not None:
            on_fix(self._fix)
        else:
            on_error(self._error)
        return handle

    def unsubscribe(self, handle: int) -> None:
        self.active.discard(handle)
