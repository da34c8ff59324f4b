"""Data source selection and request sequencing.

The Session bundles the only mutable pipeline state: which source is
active, which render request is the latest one, and whether the filter
panel is open. It is created once per user session and handed to the
controller instead of living in module globals.
"""

from dataclasses import dataclass, field
from enum import Enum


class DataSourceMode(str, Enum):
    """The two event sources the map can show."""
    LIVE = "live"
    STORED = "stored"


# Caption of the toggle control, naming the source it switches to
SOURCE_LABELS = {
    DataSourceMode.LIVE: "Stored data",
    DataSourceMode.STORED: "Live data",
}


def source_label(mode: DataSourceMode) -> str:
    """Return the toggle caption shown while the given mode is active."""
    return SOURCE_LABELS[mode]


class DataSourceSelector:
    """Tracks the active data source. Toggling is the only mutation."""

    def __init__(self, initial: DataSourceMode = DataSourceMode.LIVE) -> None:
        self._mode = DataSourceMode(initial)

    def current(self) -> DataSourceMode:
        """Return the active mode."""
        return self._mode

    def toggle(self) -> DataSourceMode:
        """Flip between LIVE and STORED and return the new mode."""
        if self._mode is DataSourceMode.LIVE:
            self._mode = DataSourceMode.STORED
        else:
            self._mode = DataSourceMode.LIVE
        return self._mode


class RequestSequencer:
    """Generation counter for render requests.

    Every request takes a token before it suspends; when it resumes, only
    the holder of the latest token may touch the display.
    """

    def __init__(self) -> None:
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        """Start a new request, superseding all earlier ones."""
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        """True if no newer request has started since token was issued."""
        return token == self._generation


@dataclass
class Session:
    """Per-user pipeline state.

    Attributes:
        selector: Active data source
        sequencer: Render request sequencing
        filter_panel_open: Whether the filter form is shown
    """
    selector: DataSourceSelector = field(default_factory=DataSourceSelector)
    sequencer: RequestSequencer = field(default_factory=RequestSequencer)
    filter_panel_open: bool = False

    @property
    def mode(self) -> DataSourceMode:
        return self.selector.current()

    def toggle_filter_panel(self) -> bool:
        """Open or close the filter panel and return the new state."""
        self.filter_panel_open = not self.filter_panel_open
        return self.filter_panel_open
