from __future__ import annotations

import logging
from typing import Any

from markers.content import CURRENT_LOCATION_SIZE_PX, build_current_location_content
from tracking.types import LocationCapability, PositionError, PositionFix, PositionOptions
from widget.types import MapWidget

logger = logging.getLogger(__name__)


class LivePositionTracker:
    """
    Keeps one "you are here" marker (and an accuracy circle, when reported) in sync
    with a device-location subscription.

    Both artifacts are created on the first fix and moved in place afterwards.
    Location failures are swallowed: the marker simply stays absent.
    """

    def __init__(
        self,
        widget: MapWidget,
        location: LocationCapability,
        *,
        options: PositionOptions | None = None,
        marker_size: int = CURRENT_LOCATION_SIZE_PX,
    ) -> None:
        self._widget = widget
        self._location = location
        self._options = options or PositionOptions()
        self._marker_size = marker_size

        self._subscription: Any = None
        # Bumped on every start/stop; callbacks carry the generation they belong to.
        self._generation = 0
        self._active = False
        self._marker: Any = None
        self._circle: Any = None
        self.last_fix: PositionFix | None = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def marker(self) -> Any:
        return self._marker

    @property
    def accuracy_circle(self) -> Any:
        return self._circle

    def start(self) -> None:
        if self._active:
            return
        self._generation += 1
        gen = self._generation
        self._active = True
        self._subscription = self._location.subscribe(
            lambda fix: self._on_fix(gen, fix),
            lambda err: self._on_error(gen, err),
            self._options,
        )
        logger.debug("position tracking started gen=%d", gen)

    def stop(self) -> None:
        """
        Cancel the subscription and remove the marker and accuracy circle.

        Fixes delivered after this call are ignored.
        """
        if not self._active:
            return
        self._active = False
        self._generation += 1
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            self._location.unsubscribe(subscription)
        if self._marker is not None:
            self._widget.detach(self._marker)
            self._marker = None
        if self._circle is not None:
            self._widget.remove_circle(self._circle)
            self._circle = None
        self.last_fix = None
        logger.debug("position tracking stopped")

    def _on_fix(self, gen: int, fix: PositionFix) -> None:
        if not self._active or gen != self._generation:
            logger.debug("discarding position fix from inactive subscription")
            return

        position = self._widget.lat_lng(fix.lat, fix.lon)
        if self._marker is None:
            self._marker = self._widget.create_marker(
                position,
                build_current_location_content(self._marker_size),
                title="Current location",
            )
        else:
            self._widget.set_position(self._marker, position)

        if fix.accuracy_m is not None and fix.accuracy_m > 0:
            if self._circle is None:
                self._circle = self._widget.create_circle(position, float(fix.accuracy_m))
            else:
                self._widget.update_circle(self._circle, position, float(fix.accuracy_m))
        elif self._circle is not None:
            # No accuracy: drop the ring left from the previous fix.
            self._widget.remove_circle(self._circle)
            self._circle = None
        self.last_fix = fix

    def _on_error(self, gen: int, err: PositionError) -> None:
        if gen != self._generation:
            return
        # Denied / unavailable / timeout: no marker, no retry, nothing propagated.
        logger.debug("position unavailable code=%s message=%s", err.code, err.message)
