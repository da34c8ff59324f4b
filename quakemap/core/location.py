"""User location models - Pure data structures.

The shell's LocationService produces these; the controller uses them to
position the viewport and the self marker.
"""

from dataclasses import dataclass


# Failure codes, mirroring the browser Geolocation API plus UNSUPPORTED
PERMISSION_DENIED = "PERMISSION_DENIED"
POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
TIMEOUT = "TIMEOUT"
UNSUPPORTED = "UNSUPPORTED"

SELF_MARKER_LABEL = "Your location"


@dataclass(frozen=True)
class Coordinate:
    """A geographic point.

    Attributes:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
    """
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocationFailure:
    """Why the user's position could not be determined.

    Attributes:
        code: One of the failure code constants
        message: Human-readable detail
    """
    code: str
    message: str = ""


@dataclass(frozen=True)
class ViewState:
    """Map viewport.

    Attributes:
        latitude: Center latitude
        longitude: Center longitude
        zoom: Zoom level
    """
    latitude: float
    longitude: float
    zoom: int

    @property
    def center(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


# Initial viewport: Turkey
DEFAULT_VIEW = ViewState(latitude=39.9334, longitude=32.8597, zoom=6)

USER_LOCATION_ZOOM = 10


def view_for_location(coordinate: Coordinate, zoom: int = USER_LOCATION_ZOOM) -> ViewState:
    """Viewport centered on the user's position.

    Pure function.
    """
    return ViewState(
        latitude=coordinate.latitude,
        longitude=coordinate.longitude,
        zoom=zoom,
    )
