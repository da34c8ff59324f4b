"""Map Controller - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. Each public coroutine is
one user-facing control: toggle source, open filter, apply filter, reset.
"""

import asyncio
import logging
from dataclasses import dataclass

from quakemap.core.config import Config
from quakemap.core.event import count_events
from quakemap.core.filters import NO_FILTER, FilterCriteria, apply_filter, make_criteria
from quakemap.core.location import Coordinate, LocationFailure
from quakemap.core.render_plan import build_render_plan
from quakemap.core.source import DataSourceMode, DataSourceSelector, Session
from quakemap.shell.alert_trigger import AlertTrigger
from quakemap.shell.data_provider import DataProviderClient
from quakemap.shell.location_service import IPGeolocationSensor, LocationService
from quakemap.shell.map_surface import MapSurface
from quakemap.shell.renderer import MapRenderer


logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Result of one render request.

    Attributes:
        mode: Data source the events came from
        criteria: Filter applied
        events_fetched: Events returned by the provider
        events_matched: Events left after filtering
        markers_drawn: Markers placed on the map
        skipped: Events without usable coordinates
        alerts_fired: Alerts triggered by this render
        stale: True if a newer request superseded this one (nothing drawn)
    """
    mode: DataSourceMode
    criteria: FilterCriteria
    events_fetched: int = 0
    events_matched: int = 0
    markers_drawn: int = 0
    skipped: int = 0
    alerts_fired: int = 0
    stale: bool = False

    @property
    def summary(self) -> str:
        """Human-readable summary of the render."""
        if self.stale:
            return f"Discarded superseded {self.mode.value} fetch"
        return (
            f"Fetched {self.events_fetched} {self.mode.value} events, "
            f"{self.events_matched} matched, "
            f"{self.markers_drawn} drawn, "
            f"{self.skipped} skipped, "
            f"{self.alerts_fired} alerts"
        )


class MapController:
    """Coordinates the earthquake visualization pipeline.

    This class wires together:
    - Session (active source, request sequencing, panel state)
    - Data provider client (fetches events)
    - Core functions (filtering, render plan)
    - Map renderer and alert trigger (draw markers, shake the map)
    - Location service (centers the map on the user)
    """

    def __init__(
        self,
        config: Config,
        session: Session | None = None,
        provider: DataProviderClient | None = None,
        surface: MapSurface | None = None,
        alert_trigger: AlertTrigger | None = None,
        location_service: LocationService | None = None,
    ) -> None:
        """Initialize controller with configuration.

        Args:
            config: Application configuration
            session: Session state (created if not provided)
            provider: Data provider client (created if not provided)
            surface: Map surface (created if not provided)
            alert_trigger: Alert trigger (created if not provided)
            location_service: Location service (created if not provided)
        """
        self.config = config
        self.session = session or Session(
            selector=DataSourceSelector(config.initial_source),
        )
        self.provider = provider or DataProviderClient(config.data_sources)
        self.surface = surface or MapSurface(
            view=config.initial_view,
            tile_url=config.tile_url,
            tile_attribution=config.tile_attribution,
        )
        self.alert_trigger = alert_trigger or AlertTrigger(self.surface, config.alert)
        self.renderer = MapRenderer(self.surface, self.alert_trigger)

        if location_service is None:
            sensor = None
            if config.geolocation_url:
                sensor = IPGeolocationSensor(
                    config.geolocation_url,
                    timeout=config.geolocation_timeout_seconds,
                )
            location_service = LocationService(
                self.surface,
                sensor,
                zoom=config.user_location_zoom,
            )
        self.location_service = location_service

    @property
    def mode(self) -> DataSourceMode:
        return self.session.mode

    async def _refresh(self, criteria: FilterCriteria) -> RenderResult:
        """Fetch the active source, filter it and redraw the map.

        Only the latest request may draw; earlier ones resolving later are
        discarded.
        """
        token = self.session.sequencer.begin()
        mode = self.session.mode

        collection = await self.provider.fetch(mode)

        if not self.session.sequencer.is_current(token):
            logger.info(
                "Discarding %s fetch #%d superseded by #%d",
                mode.value,
                token,
                self.session.sequencer.generation,
            )
            return RenderResult(mode=mode, criteria=criteria, stale=True)

        # Pure core functions
        filtered = apply_filter(collection, criteria)
        plan = build_render_plan(filtered)

        alerts = self.renderer.render(plan)

        result = RenderResult(
            mode=mode,
            criteria=criteria,
            events_fetched=count_events(collection),
            events_matched=count_events(filtered),
            markers_drawn=len(plan),
            skipped=plan.skipped,
            alerts_fired=alerts,
        )

        logger.info("Completed: %s", result.summary)
        return result

    async def show_events(self) -> RenderResult:
        """Render the active source without filtering."""
        return await self._refresh(NO_FILTER)

    async def toggle_source(self) -> RenderResult:
        """Switch between live and stored data and redraw."""
        mode = self.session.selector.toggle()
        logger.info("Switched data source to %s", mode.value)
        return await self.show_events()

    def open_filter(self) -> bool:
        """Open or close the filter panel. Returns True if now open."""
        is_open = self.session.toggle_filter_panel()
        if is_open:
            self.surface.add_class("panel-open")
        else:
            self.surface.remove_class("panel-open")
        return is_open

    def _close_filter(self) -> None:
        if self.session.filter_panel_open:
            self.open_filter()

    async def apply_filter(
        self,
        location_text: str | None,
        magnitude_band: str | None,
    ) -> RenderResult:
        """Redraw with only the events matching the filter form.

        Raises:
            ValueError: If the magnitude band is unknown
        """
        criteria = make_criteria(location_text, magnitude_band)
        logger.info(
            "Applying filter: location=%r band=%s",
            criteria.location_substring,
            criteria.magnitude_band.value,
        )

        result = await self._refresh(criteria)
        self._close_filter()
        return result

    async def reset_filter(self) -> RenderResult:
        """Clear the filter and redraw everything."""
        result = await self.show_events()
        self._close_filter()
        return result

    async def show_user_location(self) -> Coordinate | LocationFailure:
        """Center the map on the user, if their position is available."""
        return await self.location_service.locate()

    async def start(self) -> RenderResult:
        """Initial page load: draw events and locate the user.

        The two run concurrently; a location failure never affects the
        event render.
        """
        logger.info("Starting map, loading %s events", self.mode.value)

        result, _ = await asyncio.gather(
            self.show_events(),
            self.show_user_location(),
        )
        return result
