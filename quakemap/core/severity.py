"""Magnitude classification - Pure functions.

The three severity tiers drive both the filter bands and the marker colors,
so both classifications go through classify_magnitude().
"""

from enum import Enum


# Tier boundaries (lower bound inclusive)
MEDIUM_THRESHOLD = 4.0
HIGH_THRESHOLD = 6.0


class SeverityTier(str, Enum):
    """Visual severity of an event."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MagnitudeBand(str, Enum):
    """Magnitude band selectable in the filter form."""
    ALL = "all"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def classify_magnitude(magnitude: float) -> SeverityTier:
    """Classify a magnitude into a severity tier.

    Pure function.

    Args:
        magnitude: Event magnitude

    Returns:
        HIGH for >= 6, MEDIUM for [4, 6), LOW otherwise
    """
    if magnitude >= HIGH_THRESHOLD:
        return SeverityTier.HIGH
    elif magnitude >= MEDIUM_THRESHOLD:
        return SeverityTier.MEDIUM
    return SeverityTier.LOW


def band_for_tier(tier: SeverityTier) -> MagnitudeBand:
    """Return the filter band that selects exactly the given tier."""
    return MagnitudeBand(tier.value)


def matches_band(magnitude: float, band: MagnitudeBand) -> bool:
    """Check if a magnitude falls inside a filter band.

    Pure function. ALL accepts every magnitude.
    """
    if band is MagnitudeBand.ALL:
        return True
    return band_for_tier(classify_magnitude(magnitude)) is band


def parse_band(value: str | MagnitudeBand | None) -> MagnitudeBand:
    """Parse a form value ('all', 'low', 'medium', 'high') into a band.

    Pure function. Empty or missing values mean ALL.

    Raises:
        ValueError: If the value is not text or names no known band
    """
    if isinstance(value, MagnitudeBand):
        return value

    if value is not None and not isinstance(value, str):
        raise ValueError(f"Magnitude band must be text, got {value!r}")

    if value is None or not value.strip():
        return MagnitudeBand.ALL

    try:
        return MagnitudeBand(value.strip().lower())
    except ValueError:
        allowed = ", ".join(b.value for b in MagnitudeBand)
        raise ValueError(
            f"Unknown magnitude band {value!r} (expected one of: {allowed})"
        ) from None
