"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from quakemap.core.location import DEFAULT_VIEW, USER_LOCATION_ZOOM, ViewState
from quakemap.core.source import DataSourceMode


DEFAULT_LIVE_URL = "http://localhost:5000/api/Earthquake/get-earthquake-data"
DEFAULT_STORED_URL = "http://localhost:5000/api/Earthquake/get-stored-data"
DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)
DEFAULT_GEOLOCATION_URL = "http://ip-api.com/json"

MAX_ZOOM = 18


@dataclass
class DataSourceConfig:
    """Endpoints of the event provider.

    Attributes:
        live_url: Endpoint returning the live feed
        stored_url: Endpoint returning the stored snapshot
        timeout_seconds: Request timeout
    """
    live_url: str = DEFAULT_LIVE_URL
    stored_url: str = DEFAULT_STORED_URL
    timeout_seconds: float = 10.0

    def url_for(self, mode: DataSourceMode) -> str:
        """Endpoint for a data source mode."""
        if mode is DataSourceMode.STORED:
            return self.stored_url
        return self.live_url


@dataclass
class AlertConfig:
    """Visual alert settings.

    Attributes:
        duration_ms: How long each alert keeps the surface active
        css_class: Class applied to the map while an alert is active
    """
    duration_ms: int = 500
    css_class: str = "shake"

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000.0


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        data_sources: Event provider endpoints
        initial_source: Source shown at startup
        initial_view: Viewport shown at startup
        user_location_zoom: Zoom used when centering on the user
        alert: Visual alert settings
        tile_url: Map tile URL template
        tile_attribution: Attribution shown for the tiles
        geolocation_url: IP geolocation endpoint, empty to disable
        geolocation_timeout_seconds: Geolocation request timeout
        snapshot_width: Static snapshot width in pixels
        snapshot_height: Static snapshot height in pixels
    """
    data_sources: DataSourceConfig = field(default_factory=DataSourceConfig)
    initial_source: DataSourceMode = DataSourceMode.LIVE
    initial_view: ViewState = DEFAULT_VIEW
    user_location_zoom: int = USER_LOCATION_ZOOM
    alert: AlertConfig = field(default_factory=AlertConfig)
    tile_url: str = DEFAULT_TILE_URL
    tile_attribution: str = DEFAULT_TILE_ATTRIBUTION
    geolocation_url: str = DEFAULT_GEOLOCATION_URL
    geolocation_timeout_seconds: float = 5.0
    snapshot_width: int = 800
    snapshot_height: int = 600


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_zoom(zoom: int, field_name: str) -> list[ValidationError]:
    """Validate a zoom level. Pure function."""
    if not 0 <= zoom <= MAX_ZOOM:
        return [ValidationError(
            field=field_name,
            message=f"Zoom {zoom} out of range [0, {MAX_ZOOM}]",
        )]
    return []


def validate_url(url: str, field_name: str) -> list[ValidationError]:
    """Validate an endpoint URL. Pure function."""
    if not url:
        return [ValidationError(field=field_name, message="URL is empty")]

    if url.startswith("${"):
        return [ValidationError(
            field=field_name,
            message="URL not resolved (still contains placeholder)",
            severity="warning",
        )]

    if not url.startswith(("http://", "https://")):
        return [ValidationError(
            field=field_name,
            message=f"URL {url!r} is not an http(s) URL",
        )]

    return []


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    sources = config.data_sources
    errors.extend(validate_url(sources.live_url, "data_sources.live_url"))
    errors.extend(validate_url(sources.stored_url, "data_sources.stored_url"))

    if sources.timeout_seconds <= 0:
        errors.append(ValidationError(
            field="data_sources.timeout_seconds",
            message=f"Timeout must be positive, got {sources.timeout_seconds}",
        ))

    view = config.initial_view
    errors.extend(validate_coordinates(view.latitude, view.longitude, "initial_view"))
    errors.extend(validate_zoom(view.zoom, "initial_view.zoom"))
    errors.extend(validate_zoom(config.user_location_zoom, "user_location_zoom"))

    if config.alert.duration_ms <= 0:
        errors.append(ValidationError(
            field="alert.duration_ms",
            message=f"Alert duration must be positive, got {config.alert.duration_ms}",
        ))

    if not config.alert.css_class:
        errors.append(ValidationError(
            field="alert.css_class",
            message="Alert CSS class is empty",
        ))

    if config.geolocation_url:
        errors.extend(validate_url(config.geolocation_url, "geolocation_url"))
    else:
        errors.append(ValidationError(
            field="geolocation_url",
            message="Geolocation disabled; the map will not center on the user",
            severity="warning",
        ))

    if config.snapshot_width <= 0 or config.snapshot_height <= 0:
        errors.append(ValidationError(
            field="snapshot",
            message=(
                f"Snapshot size must be positive, got "
                f"{config.snapshot_width}x{config.snapshot_height}"
            ),
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
