"""Seismic event data models and parsing - Pure functions.

This module turns the data provider's JSON payload into typed EventRecord
objects grouped by city. All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EventRecord:
    """Immutable seismic event.

    Attributes:
        date: Calendar date string, shown as-is
        time: Time-of-day string, shown as-is
        depth_km: Depth in kilometers
        magnitude: Event magnitude
        coordinates: (longitude, latitude) in storage order, empty if unknown
        city_name: Optional label; the owning group key is used when absent
    """
    date: str
    time: str
    depth_km: float
    magnitude: float
    coordinates: tuple[float, ...] = ()
    city_name: str | None = None

    @property
    def is_renderable(self) -> bool:
        """True if the record carries at least a longitude and a latitude."""
        return len(self.coordinates) >= 2

    @property
    def latitude(self) -> float | None:
        """Latitude (second storage coordinate), None if unrenderable."""
        return self.coordinates[1] if self.is_renderable else None

    @property
    def longitude(self) -> float | None:
        """Longitude (first storage coordinate), None if unrenderable."""
        return self.coordinates[0] if self.is_renderable else None

    def label(self, group_key: str) -> str:
        """Return the display label, falling back to the group key."""
        return self.city_name or group_key


# City name -> ordered events. Keys are unique by construction of the source.
EventCollection = dict[str, list[EventRecord]]


def _optional_text(raw: Any) -> str | None:
    """Return a display string, or None for a missing or empty value."""
    if raw is None or raw == "":
        return None
    return str(raw)


def _parse_coordinates(raw: Any) -> tuple[float, ...]:
    """Normalize a raw coordinate array, returning () when unusable."""
    if not isinstance(raw, (list, tuple)):
        return ()
    try:
        return tuple(float(value) for value in raw)
    except (TypeError, ValueError):
        return ()


def parse_event_record(raw: dict[str, Any]) -> EventRecord | None:
    """Parse a single provider event object into an EventRecord.

    Pure function. Records without a usable magnitude cannot be classified
    and yield None. Records with missing coordinates are kept; the renderer
    skips them.

    Args:
        raw: Event dict with Date, Time, Depth, Magnitude, Coordinates, CityName

    Returns:
        EventRecord or None if the record is invalid
    """
    if not isinstance(raw, dict):
        return None

    try:
        magnitude = raw.get("Magnitude")
        if magnitude is None or isinstance(magnitude, bool):
            return None

        magnitude = float(magnitude)
        if not math.isfinite(magnitude):
            return None

        depth = raw.get("Depth")

        return EventRecord(
            date=str(raw.get("Date") or ""),
            time=str(raw.get("Time") or ""),
            depth_km=float(depth) if depth is not None else 0.0,
            magnitude=magnitude,
            coordinates=_parse_coordinates(raw.get("Coordinates")),
            city_name=_optional_text(raw.get("CityName")),
        )
    except (TypeError, ValueError):
        return None


def parse_event_collection(payload: Any) -> EventCollection:
    """Parse a provider response body into an EventCollection.

    Pure function. A body without a ``data`` mapping is treated as empty.

    Args:
        payload: Decoded JSON response ({"data": {city: [event, ...]}})

    Returns:
        EventCollection preserving the provider's city and event order
    """
    if not isinstance(payload, dict):
        return {}

    data = payload.get("data")
    if not isinstance(data, dict):
        return {}

    collection: EventCollection = {}

    for city, raw_events in data.items():
        if not isinstance(raw_events, list):
            continue

        events = []
        for raw in raw_events:
            record = parse_event_record(raw)
            if record is not None:
                events.append(record)

        collection[str(city)] = events

    return collection


def count_events(collection: EventCollection) -> int:
    """Total number of events across all cities.

    Pure function.
    """
    return sum(len(events) for events in collection.values())
