"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Event provider client (HTTP)
- Map drawing surface (folium)
- Alert timers (asyncio)
- Geolocation (HTTP)
- Static snapshots (staticmap)
- Configuration loading (environment/files)

Keep this layer thin and simple. All pipeline logic should be in core.
"""

from quakemap.shell.data_provider import DataProviderClient
from quakemap.shell.map_surface import MapSurface
from quakemap.shell.alert_trigger import AlertTrigger
from quakemap.shell.renderer import MapRenderer
from quakemap.shell.location_service import LocationService, IPGeolocationSensor
from quakemap.shell.static_map_client import StaticMapClient
from quakemap.shell.config_loader import load_config, Config

__all__ = [
    "DataProviderClient",
    "MapSurface",
    "AlertTrigger",
    "MapRenderer",
    "LocationService",
    "IPGeolocationSensor",
    "StaticMapClient",
    "load_config",
    "Config",
]
