from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_S = 0.1
# One minute at the default interval.
DEFAULT_MAX_RETRIES = 600


class BootstrapState(str, Enum):
    waiting = "waiting"
    ready = "ready"
    failed = "failed"


class MapBootstrap:
    """
    Waits for the external map library to become available.

    `tick()` does one availability check, so tests can drive it deterministically;
    `run()` ticks on a fixed interval until the state leaves `waiting`.
    `max_retries=None` polls forever. Giving up is not an error: the map is just
    never created.
    """

    def __init__(
        self,
        is_available: Callable[[], bool],
        *,
        on_ready: Callable[[], None] | None = None,
        interval_s: float = DEFAULT_POLL_INTERVAL_S,
        max_retries: int | None = DEFAULT_MAX_RETRIES,
    ) -> None:
        self._is_available = is_available
        self._on_ready = on_ready
        self.interval_s = float(interval_s)
        self.max_retries = max_retries
        self.state = BootstrapState.waiting
        self.attempts = 0

    def tick(self) -> BootstrapState:
        if self.state != BootstrapState.waiting:
            return self.state

        self.attempts += 1
        if self._is_available():
            self.state = BootstrapState.ready
            logger.debug("map library available after %d attempt(s)", self.attempts)
            if self._on_ready is not None:
                self._on_ready()
            return self.state

        # The first attempt is not a retry.
        if self.max_retries is not None and self.attempts > self.max_retries:
            self.state = BootstrapState.failed
            logger.warning(
                "map library still unavailable after %d retries; giving up",
                self.max_retries,
            )
        return self.state

    async def run(
        self, *, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ) -> BootstrapState:
        while self.tick() == BootstrapState.waiting:
            await sleep(self.interval_s)
        return self.state
