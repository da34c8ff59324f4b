"""User Location Service - Imperative Shell.

Asks a geolocation sensor for the user's position and, on success, centers
the map on it with a "self" marker. Failures are logged and leave the map
unchanged.
"""

import asyncio
import logging
from typing import Protocol

import requests

from quakemap.core.location import (
    POSITION_UNAVAILABLE,
    SELF_MARKER_LABEL,
    TIMEOUT,
    UNSUPPORTED,
    USER_LOCATION_ZOOM,
    Coordinate,
    LocationFailure,
    view_for_location,
)
from quakemap.shell.map_surface import SELF_LAYER, MapSurface


logger = logging.getLogger(__name__)


class GeolocationError(Exception):
    """Raised by sensors that cannot provide a position."""

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(message or code)
        self.code = code
        self.message = message


class GeolocationSensor(Protocol):
    """Source of the user's current position."""

    def get_current_position(self) -> Coordinate: ...


class IPGeolocationSensor:
    """Approximate position from an IP geolocation HTTP service.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(self, url: str, timeout: float = 5.0) -> None:
        """Initialize sensor.

        Args:
            url: Service endpoint returning {"status", "lat", "lon"}
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout

    def get_current_position(self) -> Coordinate:
        """Query the service.

        Raises:
            GeolocationError: If no position could be obtained
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.Timeout:
            raise GeolocationError(TIMEOUT, "Geolocation request timed out") from None
        except requests.RequestException as e:
            raise GeolocationError(POSITION_UNAVAILABLE, str(e)) from e
        except ValueError as e:
            raise GeolocationError(POSITION_UNAVAILABLE, f"Invalid response: {e}") from e

        if not isinstance(data, dict) or data.get("status", "success") != "success":
            message = data.get("message", "lookup failed") if isinstance(data, dict) else ""
            raise GeolocationError(POSITION_UNAVAILABLE, message)

        try:
            return Coordinate(latitude=float(data["lat"]), longitude=float(data["lon"]))
        except (KeyError, TypeError, ValueError):
            raise GeolocationError(
                POSITION_UNAVAILABLE, "Response has no coordinates"
            ) from None


class LocationService:
    """Centers the map on the user's position."""

    def __init__(
        self,
        surface: MapSurface,
        sensor: GeolocationSensor | None = None,
        zoom: int = USER_LOCATION_ZOOM,
    ) -> None:
        """Initialize location service.

        Args:
            surface: Map surface to update
            sensor: Position source; None means geolocation is unsupported
            zoom: Zoom level used when centering on the user
        """
        self.surface = surface
        self.sensor = sensor
        self.zoom = zoom

    async def locate(self) -> Coordinate | LocationFailure:
        """Locate the user and update the map.

        Never raises; failures are returned and logged.

        Returns:
            The user's Coordinate, or a LocationFailure
        """
        if self.sensor is None:
            logger.error("Geolocation is not supported: no sensor configured")
            return LocationFailure(UNSUPPORTED, "No geolocation sensor configured")

        try:
            coordinate = await asyncio.to_thread(self.sensor.get_current_position)
        except GeolocationError as e:
            logger.error("Could not get location: %s (%s)", e.code, e.message)
            return LocationFailure(e.code, e.message)
        except Exception as e:
            logger.error("Geolocation sensor failed: %s", e)
            return LocationFailure(POSITION_UNAVAILABLE, str(e))

        self._show(coordinate)
        return coordinate

    def _show(self, coordinate: Coordinate) -> None:
        view = view_for_location(coordinate, self.zoom)

        self.surface.remove_layers(SELF_LAYER)
        self.surface.add_point_marker(
            coordinate.latitude,
            coordinate.longitude,
            SELF_MARKER_LABEL,
            kind=SELF_LAYER,
        )
        self.surface.set_view(view.latitude, view.longitude, view.zoom)

        logger.info(
            "Centered map on user location (%.4f, %.4f)",
            coordinate.latitude,
            coordinate.longitude,
        )
