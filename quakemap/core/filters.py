"""Event filtering - Pure functions.

Applies the location and magnitude-band predicates chosen in the filter
form to an EventCollection. All functions are pure with no side effects.
"""

from dataclasses import dataclass

from quakemap.core.event import EventCollection, EventRecord
from quakemap.core.severity import MagnitudeBand, matches_band, parse_band


@dataclass(frozen=True)
class FilterCriteria:
    """Filter form submission.

    Attributes:
        location_substring: Case-insensitive city substring, empty for any city
        magnitude_band: Magnitude band to keep
    """
    location_substring: str = ""
    magnitude_band: MagnitudeBand = MagnitudeBand.ALL

    @property
    def is_unconstrained(self) -> bool:
        """True if the criteria accept every event."""
        return (
            not self.location_substring
            and self.magnitude_band is MagnitudeBand.ALL
        )


# Criteria used for unfiltered renders
NO_FILTER = FilterCriteria()


def make_criteria(
    location_text: str | None = None,
    magnitude_band: str | MagnitudeBand | None = None,
) -> FilterCriteria:
    """Build FilterCriteria from raw form values.

    Pure function.

    Args:
        location_text: Text typed in the location field
        magnitude_band: Selected band value

    Returns:
        FilterCriteria

    Raises:
        ValueError: If a value is not text or the band is unknown
    """
    if location_text is not None and not isinstance(location_text, str):
        raise ValueError(f"Location must be text, got {location_text!r}")

    return FilterCriteria(
        location_substring=(location_text or "").strip(),
        magnitude_band=parse_band(magnitude_band),
    )


def matches_location(city: str, criteria: FilterCriteria) -> bool:
    """Check if a city name passes the location predicate.

    Pure function.
    """
    if not criteria.location_substring:
        return True
    return criteria.location_substring.casefold() in city.casefold()


def matches_criteria(city: str, event: EventRecord, criteria: FilterCriteria) -> bool:
    """Check if an event (owned by city) passes both predicates.

    Pure function.
    """
    return (
        matches_location(city, criteria)
        and matches_band(event.magnitude, criteria.magnitude_band)
    )


def apply_filter(
    collection: EventCollection,
    criteria: FilterCriteria,
) -> EventCollection:
    """Filter an EventCollection.

    Pure function. Cities failing the location predicate are dropped, events
    outside the magnitude band are dropped, and cities left without events
    are dropped. Surviving cities and events keep their input order.

    Args:
        collection: Collection to filter (not modified)
        criteria: Filter criteria

    Returns:
        New filtered EventCollection
    """
    result: EventCollection = {}

    for city, events in collection.items():
        if not matches_location(city, criteria):
            continue

        kept = [
            e for e in events
            if matches_band(e.magnitude, criteria.magnitude_band)
        ]

        if kept:
            result[city] = kept

    return result
