"""Unit tests for event filtering.

Pure function tests - fast, no mocks needed.
"""

import pytest

from quakemap.core.event import EventRecord
from quakemap.core.filters import (
    NO_FILTER,
    FilterCriteria,
    apply_filter,
    make_criteria,
    matches_criteria,
    matches_location,
)
from quakemap.core.severity import MagnitudeBand


def make_event(magnitude: float, coordinates=(27.1, 38.4)) -> EventRecord:
    return EventRecord(
        date="2023-02-06",
        time="04:17",
        depth_km=10.0,
        magnitude=magnitude,
        coordinates=coordinates,
    )


@pytest.fixture
def collection():
    """Events in three cities."""
    return {
        "Izmir": [make_event(6.5), make_event(3.1)],
        "Ankara": [make_event(4.2)],
        "Kahramanmaras": [make_event(7.8), make_event(5.0), make_event(2.0)],
    }


class TestMakeCriteria:
    """Tests for make_criteria()."""

    def test_strips_location(self):
        criteria = make_criteria("  izmir ", "high")
        assert criteria.location_substring == "izmir"
        assert criteria.magnitude_band is MagnitudeBand.HIGH

    def test_defaults_to_no_constraint(self):
        criteria = make_criteria(None, None)
        assert criteria == NO_FILTER
        assert criteria.is_unconstrained

    def test_unknown_band_raises(self):
        with pytest.raises(ValueError):
            make_criteria("izmir", "huge")

    def test_non_text_location_raises(self):
        with pytest.raises(ValueError, match="Location must be text"):
            make_criteria(7, "all")


class TestMatchesLocation:
    """Tests for matches_location()."""

    def test_empty_substring_matches_all(self):
        assert matches_location("Izmir", FilterCriteria())

    def test_case_insensitive_substring(self):
        criteria = FilterCriteria(location_substring="ZMI")
        assert matches_location("Izmir", criteria)
        assert not matches_location("Ankara", criteria)


class TestApplyFilter:
    """Tests for apply_filter()."""

    def test_no_filter_keeps_everything(self, collection):
        assert apply_filter(collection, NO_FILTER) == collection

    def test_location_filter(self, collection):
        result = apply_filter(collection, FilterCriteria(location_substring="ank"))
        assert list(result.keys()) == ["Ankara"]

    def test_band_filter_drops_events(self, collection):
        result = apply_filter(collection, FilterCriteria(magnitude_band=MagnitudeBand.HIGH))

        assert list(result.keys()) == ["Izmir", "Kahramanmaras"]
        assert [e.magnitude for e in result["Izmir"]] == [6.5]
        assert [e.magnitude for e in result["Kahramanmaras"]] == [7.8]

    def test_drops_cities_left_empty(self, collection):
        result = apply_filter(collection, FilterCriteria(magnitude_band=MagnitudeBand.MEDIUM))

        assert "Izmir" not in result
        assert list(result.keys()) == ["Ankara", "Kahramanmaras"]

    def test_drops_cities_that_were_empty(self):
        result = apply_filter({"Izmir": [], "Ankara": [make_event(2.0)]}, NO_FILTER)
        assert list(result.keys()) == ["Ankara"]

    def test_combines_location_and_band(self, collection):
        criteria = FilterCriteria(location_substring="izmir", magnitude_band=MagnitudeBand.LOW)
        result = apply_filter(collection, criteria)

        assert list(result.keys()) == ["Izmir"]
        assert [e.magnitude for e in result["Izmir"]] == [3.1]

    def test_low_band_boundaries(self):
        """Only the 3.9 event survives a low-band filter."""
        data = {"Izmir": [make_event(3.9), make_event(4.0), make_event(6.1)]}
        result = apply_filter(data, FilterCriteria(magnitude_band=MagnitudeBand.LOW))

        assert [e.magnitude for e in result["Izmir"]] == [3.9]

    def test_keeps_unrenderable_events(self):
        """Filtering is about magnitude and city, not coordinates."""
        data = {"Izmir": [make_event(6.5, coordinates=())]}
        assert apply_filter(data, NO_FILTER) == data

    def test_does_not_mutate_input(self, collection):
        before = {city: list(events) for city, events in collection.items()}
        apply_filter(collection, FilterCriteria(magnitude_band=MagnitudeBand.LOW))
        assert collection == before

    @pytest.mark.parametrize("band", list(MagnitudeBand))
    @pytest.mark.parametrize("location", ["", "a", "IZ", "maras", "nowhere"])
    def test_filter_is_exact(self, collection, band, location):
        """Output holds exactly the events satisfying the criteria."""
        criteria = FilterCriteria(location_substring=location, magnitude_band=band)
        result = apply_filter(collection, criteria)

        expected = [
            (city, event)
            for city, events in collection.items()
            for event in events
            if matches_criteria(city, event, criteria)
        ]
        actual = [(city, event) for city, events in result.items() for event in events]

        assert actual == expected

    def test_is_deterministic(self, collection):
        criteria = FilterCriteria(magnitude_band=MagnitudeBand.HIGH)
        assert list(apply_filter(collection, criteria)) == list(apply_filter(collection, criteria))
