"""Unit tests for magnitude classification.

Pure function tests - fast, no mocks needed.
"""

import pytest

from quakemap.core.severity import (
    MagnitudeBand,
    SeverityTier,
    band_for_tier,
    classify_magnitude,
    matches_band,
    parse_band,
)


class TestClassifyMagnitude:
    """Tests for classify_magnitude()."""

    def test_high_at_and_above_six(self):
        assert classify_magnitude(6.0) is SeverityTier.HIGH
        assert classify_magnitude(7.8) is SeverityTier.HIGH

    def test_medium_from_four_to_below_six(self):
        assert classify_magnitude(4.0) is SeverityTier.MEDIUM
        assert classify_magnitude(5.99) is SeverityTier.MEDIUM

    def test_low_below_four(self):
        assert classify_magnitude(3.99) is SeverityTier.LOW
        assert classify_magnitude(0.0) is SeverityTier.LOW
        assert classify_magnitude(-1.2) is SeverityTier.LOW


class TestMatchesBand:
    """Tests for matches_band()."""

    @pytest.mark.parametrize("magnitude", [-1.0, 0.0, 3.9, 4.0, 5.5, 6.0, 9.5])
    def test_all_accepts_everything(self, magnitude):
        assert matches_band(magnitude, MagnitudeBand.ALL)

    def test_boundaries(self):
        """Bands are half-open: [4, 6) is medium."""
        assert matches_band(3.9, MagnitudeBand.LOW)
        assert not matches_band(4.0, MagnitudeBand.LOW)
        assert matches_band(4.0, MagnitudeBand.MEDIUM)
        assert not matches_band(6.0, MagnitudeBand.MEDIUM)
        assert matches_band(6.0, MagnitudeBand.HIGH)

    @pytest.mark.parametrize("magnitude", [-2.0, 0.5, 3.999, 4.0, 4.5, 5.999, 6.0, 6.1, 10.0])
    def test_exactly_one_specific_band_matches(self, magnitude):
        """Low, medium and high partition the real line."""
        specific = [MagnitudeBand.LOW, MagnitudeBand.MEDIUM, MagnitudeBand.HIGH]
        assert sum(matches_band(magnitude, b) for b in specific) == 1

    @pytest.mark.parametrize("magnitude", [-2.0, 0.5, 3.999, 4.0, 4.5, 5.999, 6.0, 6.1, 10.0])
    def test_band_agrees_with_tier(self, magnitude):
        """Filter band and render tier use the same boundaries."""
        tier = classify_magnitude(magnitude)
        assert matches_band(magnitude, band_for_tier(tier))


class TestParseBand:
    """Tests for parse_band()."""

    def test_parses_form_values(self):
        assert parse_band("all") is MagnitudeBand.ALL
        assert parse_band("low") is MagnitudeBand.LOW
        assert parse_band("medium") is MagnitudeBand.MEDIUM
        assert parse_band("high") is MagnitudeBand.HIGH

    def test_is_case_insensitive(self):
        assert parse_band(" High ") is MagnitudeBand.HIGH

    def test_empty_means_all(self):
        assert parse_band("") is MagnitudeBand.ALL
        assert parse_band(None) is MagnitudeBand.ALL

    def test_passes_through_band(self):
        assert parse_band(MagnitudeBand.LOW) is MagnitudeBand.LOW

    def test_unknown_value_raises(self):
        with pytest.raises(ValueError, match="Unknown magnitude band"):
            parse_band("extreme")

    def test_non_text_value_raises(self):
        with pytest.raises(ValueError, match="must be text"):
            parse_band(5)
