"""Alert activation bookkeeping - Pure state machine.

Overlapping alerts share a single visual state. The state is active while
at least one alert has not yet reverted.
"""

from dataclasses import dataclass


@dataclass
class AlertCounter:
    """Count of outstanding alerts.

    Attributes:
        outstanding: Alerts fired and not yet reverted
        total_fired: Alerts fired since creation
    """
    outstanding: int = 0
    total_fired: int = 0

    @property
    def active(self) -> bool:
        return self.outstanding > 0

    def acquire(self) -> bool:
        """Register a fired alert.

        Returns:
            True if the state just became active (0 -> 1)
        """
        self.outstanding += 1
        self.total_fired += 1
        return self.outstanding == 1

    def release(self) -> bool:
        """Register an alert revert. Never goes below zero.

        Returns:
            True if the state just became inactive (1 -> 0)
        """
        if self.outstanding == 0:
            return False
        self.outstanding -= 1
        return self.outstanding == 0
