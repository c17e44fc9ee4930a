"""
Immutable value objects shared by the solar calculator, the event search,
the day profile aggregator and the timezone resolver.

Every object is created fresh per call and never mutated, so callers may
cache or discard results freely.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Literal, Optional

from suntrack.errors import CoordinateError


def validate_coordinates(latitude, longitude) -> bool:
    """
    Check that latitude/longitude are finite numbers within range.

    Args:
        latitude: Latitude in decimal degrees (-90 to 90)
        longitude: Longitude in decimal degrees (-180 to 180)

    Returns:
        True if both values are usable coordinates
    """
    for value in (latitude, longitude):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if math.isnan(value):
            return False

    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


# ============================================================================
# Input
# ============================================================================

@dataclass(frozen=True)
class GeoCoordinate:
    """A validated point on the globe. Raises CoordinateError on construction."""

    latitude: float  # Decimal degrees, -90 (S) to 90 (N)
    longitude: float  # Decimal degrees, -180 (W) to 180 (E)

    def __post_init__(self):
        if not validate_coordinates(self.latitude, self.longitude):
            raise CoordinateError(
                f"Invalid coordinates provided: latitude={self.latitude!r}, longitude={self.longitude!r}"
            )

    @classmethod
    def create(cls, latitude, longitude) -> "GeoCoordinate":
        """Build a coordinate, coercing ints to float."""
        if not validate_coordinates(latitude, longitude):
            raise CoordinateError(
                f"Invalid coordinates provided: latitude={latitude!r}, longitude={longitude!r}"
            )
        return cls(float(latitude), float(longitude))

    @classmethod
    def coerce(cls, value) -> "GeoCoordinate":
        """Accept a GeoCoordinate or a (latitude, longitude) pair."""
        if isinstance(value, cls):
            return value
        try:
            latitude, longitude = value
        except (TypeError, ValueError):
            raise CoordinateError(f"Invalid coordinates provided: {value!r}")
        return cls.create(latitude, longitude)

    def rounded(self, digits: int = 2) -> tuple[float, float]:
        """Coordinate rounded for use as a cache key (2 digits is ~1.1 km)."""
        return round(self.latitude, digits), round(self.longitude, digits)


@dataclass(frozen=True)
class ElevationThreshold:
    """A named sun elevation used as an event boundary."""

    name: str
    degrees: float
    description: str


SUNRISE_SUNSET = ElevationThreshold(
    "sunrise_sunset", -0.833, "Upper limb on the horizon, standard refraction"
)
GOLDEN_HOUR_UPPER = ElevationThreshold("golden_hour_upper", 6.0, "Golden hour, high boundary")
GOLDEN_HOUR_LOWER = ElevationThreshold("golden_hour_lower", -6.0, "Golden hour, low boundary")
CIVIL_TWILIGHT = ElevationThreshold("civil_twilight", -6.0, "Civil twilight / blue hour upper boundary")
NAUTICAL_TWILIGHT = ElevationThreshold("nautical_twilight", -12.0, "Nautical twilight / blue hour lower boundary")
ASTRONOMICAL_TWILIGHT = ElevationThreshold("astronomical_twilight", -18.0, "Astronomical twilight")


# ============================================================================
# Results
# ============================================================================

@dataclass(frozen=True)
class SolarPosition:
    """Sun direction and distance as seen from one place at one instant."""

    azimuth: float  # Degrees clockwise from north, [0, 360)
    elevation: float  # Degrees above the horizon, (-90, 90)
    distance: float  # Earth-Sun distance in AU

    def to_dict(self) -> dict[str, Any]:
        return {
            "azimuth": self.azimuth,
            "elevation": self.elevation,
            "distance": self.distance,
        }


@dataclass(frozen=True)
class EventWindow:
    """
    A lighting period bounded by two threshold crossings.

    Either end is None when the threshold is not crossed that day
    (polar day or polar night).
    """

    start: Optional[datetime]
    end: Optional[datetime]

    @property
    def duration_minutes(self) -> Optional[float]:
        if self.start is None or self.end is None:
            return None
        return (self.end - self.start).total_seconds() / 60.0

    def map(self, fn) -> "EventWindow":
        """Apply fn to each defined end, keeping None as None."""
        return EventWindow(
            start=fn(self.start) if self.start is not None else None,
            end=fn(self.end) if self.end is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"start": _iso(self.start), "end": _iso(self.end)}


@dataclass(frozen=True)
class LightingPeriod:
    """Morning and evening windows of one lighting band."""

    morning: EventWindow
    evening: EventWindow

    def map(self, fn) -> "LightingPeriod":
        return LightingPeriod(morning=self.morning.map(fn), evening=self.evening.map(fn))

    def to_dict(self) -> dict[str, Any]:
        return {"morning": self.morning.to_dict(), "evening": self.evening.to_dict()}


@dataclass(frozen=True)
class TwilightPeriods:
    """
    The three twilight tiers.

    Morning order: astronomical <= nautical <= civil <= sunrise.
    Evening order: sunset <= civil <= nautical <= astronomical.
    """

    civil: LightingPeriod
    nautical: LightingPeriod
    astronomical: LightingPeriod

    def map(self, fn) -> "TwilightPeriods":
        return TwilightPeriods(
            civil=self.civil.map(fn),
            nautical=self.nautical.map(fn),
            astronomical=self.astronomical.map(fn),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "civil": self.civil.to_dict(),
            "nautical": self.nautical.to_dict(),
            "astronomical": self.astronomical.to_dict(),
        }


@dataclass(frozen=True)
class DayLightProfile:
    """All lighting events of one day at one place."""

    date: date
    sunrise: Optional[datetime]
    sunset: Optional[datetime]
    solar_noon: datetime
    day_length: Optional[float]  # Hours; None if sunrise or sunset is undefined
    golden_hour: LightingPeriod
    blue_hour: LightingPeriod
    twilight: TwilightPeriods

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "sunrise": _iso(self.sunrise),
            "sunset": _iso(self.sunset),
            "solar_noon": _iso(self.solar_noon),
            "day_length": self.day_length,
            "golden_hour": self.golden_hour.to_dict(),
            "blue_hour": self.blue_hour.to_dict(),
            "twilight": self.twilight.to_dict(),
        }


@dataclass(frozen=True)
class SunPathPoint:
    """One sample of the sun path."""

    time: datetime
    position: SolarPosition

    @property
    def azimuth(self) -> float:
        return self.position.azimuth

    @property
    def elevation(self) -> float:
        return self.position.elevation

    def to_dict(self) -> dict[str, Any]:
        return {"time": self.time.isoformat(), **self.position.to_dict()}


DayNightLabel = Literal[
    "day",
    "civil_twilight",
    "nautical_twilight",
    "astronomical_twilight",
    "night",
]


@dataclass(frozen=True)
class DayNightStatus:
    """Point-in-time classification of the sky."""

    status: DayNightLabel
    position: SolarPosition
    is_visible: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "position": self.position.to_dict(),
            "is_visible": self.is_visible,
        }


@dataclass(frozen=True)
class TimezoneInfo:
    """
    Timezone of a coordinate at a given instant. is_dst is best-effort.

    display_name is the abbreviation in effect from the tz database
    ("EDT", "IST", or a numeric form such as "-03" where the zone has no
    letters), not a long name like "Eastern Daylight Time".
    """

    zone_id: str  # IANA identifier ("America/New_York")
    is_dst: bool
    offset_minutes: int  # East of UTC is positive
    display_name: str

    @property
    def offset_hours(self) -> float:
        return self.offset_minutes / 60

    def to_dict(self) -> dict[str, Any]:
        return {
            "zone_id": self.zone_id,
            "is_dst": self.is_dst,
            "offset_minutes": self.offset_minutes,
            "offset_hours": self.offset_hours,
            "display_name": self.display_name,
        }
