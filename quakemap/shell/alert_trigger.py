"""Visual Alert Trigger - Imperative Shell.

Applies a CSS class to the map container and schedules its removal. The
outstanding-alert bookkeeping is the pure AlertCounter from the core.
"""

import asyncio
import logging
from typing import Any, Callable, Protocol

from quakemap.core.alert import AlertCounter
from quakemap.core.config import AlertConfig


logger = logging.getLogger(__name__)


# (delay_seconds, callback) -> handle
Scheduler = Callable[[float, Callable[[], None]], Any]


class AlertSurface(Protocol):
    """Anything that can carry the alert CSS class."""

    def add_class(self, css_class: str) -> None: ...

    def remove_class(self, css_class: str) -> None: ...


def loop_scheduler(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    """Schedule a callback on the running event loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


class AlertTrigger:
    """Transient visual alert for high-magnitude events.

    Each fire() schedules its own revert. The class stays applied while
    any fired alert has not reverted yet.
    """

    def __init__(
        self,
        surface: AlertSurface,
        config: AlertConfig | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        """Initialize alert trigger.

        Args:
            surface: Surface receiving the CSS class
            config: Duration and class name (defaults used if not provided)
            scheduler: Timer function (running asyncio loop if not provided)
        """
        self.surface = surface
        self.config = config or AlertConfig()
        self.scheduler = scheduler or loop_scheduler
        self.counter = AlertCounter()

    @property
    def active(self) -> bool:
        return self.counter.active

    def fire(self) -> None:
        """Activate the alert and schedule its revert."""
        if self.counter.acquire():
            logger.info("High-magnitude alert activated")
            self.surface.add_class(self.config.css_class)

        self.scheduler(self.config.duration_seconds, self._revert)

    def _revert(self) -> None:
        if self.counter.release():
            self.surface.remove_class(self.config.css_class)
            logger.debug(
                "Alert cleared after %d alerts in total",
                self.counter.total_fired,
            )
