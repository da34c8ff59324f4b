"""Render plan construction - Pure functions.

Converts an EventCollection into the list of circle markers to draw. The
shell executes the plan against a real map surface; nothing here touches
the map.
"""

import html
import math
from dataclasses import dataclass

from quakemap.core.event import EventCollection, EventRecord
from quakemap.core.severity import SeverityTier, classify_magnitude


# Circle colors per tier (stroke and fill)
TIER_COLORS = {
    SeverityTier.HIGH: "red",
    SeverityTier.MEDIUM: "orange",
    SeverityTier.LOW: "yellow",
}

FILL_OPACITY = 0.5

# Circle radius in metres per unit of magnitude
RADIUS_PER_MAGNITUDE_M = 10_000


@dataclass(frozen=True)
class MarkerDescriptor:
    """One circle marker to draw.

    Attributes:
        city: Display label of the event
        latitude: Marker latitude
        longitude: Marker longitude
        magnitude: Event magnitude
        tier: Severity tier
        color: Stroke and fill color
        radius_m: Circle radius in metres
        popup_html: Popup content
        date: Event date string
        time: Event time string
        depth_km: Event depth
    """
    city: str
    latitude: float
    longitude: float
    magnitude: float
    tier: SeverityTier
    color: str
    radius_m: float
    popup_html: str
    date: str = ""
    time: str = ""
    depth_km: float = 0.0

    @property
    def triggers_alert(self) -> bool:
        return self.tier is SeverityTier.HIGH


@dataclass(frozen=True)
class RenderPlan:
    """Everything one render pass draws.

    Attributes:
        markers: Circle markers in collection order
        skipped: Records dropped for lacking coordinates
    """
    markers: tuple[MarkerDescriptor, ...] = ()
    skipped: int = 0

    @property
    def alert_count(self) -> int:
        """Number of markers that fire the alert."""
        return sum(1 for m in self.markers if m.triggers_alert)

    def __len__(self) -> int:
        return len(self.markers)


def get_magnitude_color(magnitude: float) -> str:
    """Get the circle color for a magnitude.

    Pure function.
    """
    return TIER_COLORS[classify_magnitude(magnitude)]


def get_marker_radius(magnitude: float) -> float:
    """Circle radius in metres for a magnitude.

    Pure function. Linear above magnitude 1; below that the radius decays
    exponentially so it stays positive and strictly increasing.

    Args:
        magnitude: Event magnitude

    Returns:
        Radius in metres
    """
    if magnitude >= 1.0:
        return magnitude * RADIUS_PER_MAGNITUDE_M
    return RADIUS_PER_MAGNITUDE_M * math.exp(magnitude - 1.0)


def get_marker_radius_px(magnitude: float) -> int:
    """Circle radius in pixels for static snapshots.

    Pure function. Roughly 4-24 pixels.
    """
    base_radius = 4
    scale_factor = 2
    return max(base_radius, min(int(base_radius + magnitude * scale_factor), 24))


def _format_number(value: float) -> str:
    return f"{value:g}"


def format_popup(city: str, event: EventRecord) -> str:
    """Build the popup HTML for an event.

    Pure function. Field values are only string formatted and escaped.

    Args:
        city: Display label
        event: The event

    Returns:
        HTML snippet
    """
    return (
        f"<strong>{html.escape(city)}</strong><br>"
        f"Magnitude: {_format_number(event.magnitude)}<br>"
        f"Date: {html.escape(event.date)}<br>"
        f"Time: {html.escape(event.time)}<br>"
        f"Depth: {_format_number(event.depth_km)} km"
    )


def build_marker(city: str, event: EventRecord) -> MarkerDescriptor | None:
    """Build the marker for a single event.

    Pure function. Storage order is (longitude, latitude); markers are
    placed at (latitude, longitude).

    Returns:
        MarkerDescriptor, or None if the event has fewer than 2 coordinates
    """
    if not event.is_renderable:
        return None

    label = event.label(city)
    tier = classify_magnitude(event.magnitude)

    return MarkerDescriptor(
        city=label,
        latitude=event.coordinates[1],
        longitude=event.coordinates[0],
        magnitude=event.magnitude,
        tier=tier,
        color=TIER_COLORS[tier],
        radius_m=get_marker_radius(event.magnitude),
        popup_html=format_popup(label, event),
        date=event.date,
        time=event.time,
        depth_km=event.depth_km,
    )


def build_render_plan(collection: EventCollection) -> RenderPlan:
    """Convert an EventCollection into a RenderPlan.

    Pure function.

    Args:
        collection: Events to draw, already filtered

    Returns:
        RenderPlan with one marker per renderable event
    """
    markers = []
    skipped = 0

    for city, events in collection.items():
        for event in events:
            marker = build_marker(city, event)
            if marker is None:
                skipped += 1
            else:
                markers.append(marker)

    return RenderPlan(markers=tuple(markers), skipped=skipped)
