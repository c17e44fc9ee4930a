"""
Timezone and DST handling for presenting sun times in local time.

Coordinates are mapped to IANA zones through a TimezoneProvider. The default
RegionTableProvider is a coarse bounding-box table covering major regions;
it is not authoritative. TimezoneFinderProvider gives real zone boundaries
and can be swapped in without touching the calculators.

DST detection is a heuristic: the UTC offset at the instant is compared with
the offsets on 1 January and 1 July of the same year. It does not consult
the zone's own DST flag, so is_dst is best-effort.
"""

import os
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

import pytz
from timezonefinder import TimezoneFinder

from suntrack.errors import InvalidInstantError, TimezoneError
from suntrack.logger import logger
from suntrack.models import DayLightProfile, GeoCoordinate, TimezoneInfo
from suntrack.solar_position import normalize_instant


# ============================================================================
# Providers
# ============================================================================

class TimezoneProvider(ABC):
    """Maps a coordinate to an IANA zone identifier."""

    @abstractmethod
    def zone_for(self, latitude: float, longitude: float) -> Optional[str]:
        """Return a zone id, or None if the provider has no answer."""


# (latitude range, longitude range, [(lon_min, lon_max, zone), ...])
# Regions and bands are checked in order; bounds are inclusive.
REGIONS: list[tuple[tuple[float, float], tuple[float, float], list[tuple[float, float, str]]]] = [
    # North America
    ((25, 70), (-170, -50), [
        (-130, -110, "America/Los_Angeles"),
        (-110, -100, "America/Denver"),
        (-100, -80, "America/Chicago"),
        (-80, -65, "America/New_York"),
        (-170, -130, "Pacific/Honolulu"),
    ]),
    # Europe
    ((35, 70), (-10, 40), [
        (-10, 5, "Europe/London"),
        (5, 15, "Europe/Paris"),
        (15, 25, "Europe/Berlin"),
        (25, 40, "Europe/Moscow"),
    ]),
    # Asia
    ((10, 70), (60, 180), [
        (60, 90, "Asia/Kolkata"),
        (90, 120, "Asia/Shanghai"),
        (120, 150, "Asia/Tokyo"),
    ]),
    # Australia
    ((-45, -10), (110, 180), [
        (110, 130, "Australia/Perth"),
        (130, 145, "Australia/Adelaide"),
        (145, 155, "Australia/Sydney"),
    ]),
    # South America
    ((-60, 15), (-85, -30), [
        (-85, -65, "America/Lima"),
        (-65, -45, "America/Sao_Paulo"),
        (-45, -30, "America/Argentina/Buenos_Aires"),
    ]),
    # Africa
    ((-35, 35), (-20, 50), [
        (-20, 10, "Africa/Lagos"),
        (10, 30, "Africa/Cairo"),
        (30, 50, "Africa/Nairobi"),
    ]),
]


class RegionTableProvider(TimezoneProvider):
    """Static bounding-box lookup over REGIONS."""

    def __init__(self, regions=None):
        self.regions = regions if regions is not None else REGIONS

    def zone_for(self, latitude: float, longitude: float) -> Optional[str]:
        for (lat_min, lat_max), (lon_min, lon_max), bands in self.regions:
            if not (lat_min <= latitude <= lat_max and lon_min <= longitude <= lon_max):
                continue
            for band_min, band_max, zone in bands:
                if band_min <= longitude <= band_max:
                    return zone
        return None


class TimezoneFinderProvider(TimezoneProvider):
    """Zone boundaries from the timezonefinder polygon database."""

    def __init__(self, finder: Optional[TimezoneFinder] = None):
        self.finder = finder or TimezoneFinder()

    def zone_for(self, latitude: float, longitude: float) -> Optional[str]:
        return self.finder.timezone_at(lat=latitude, lng=longitude)


# ============================================================================
# Cache
# ============================================================================

class TimezoneCache:
    """
    Coordinate-bucket -> zone id cache, safe for concurrent use.

    Keys are coordinates rounded to 2 decimals (~1.1 km). Entries never
    expire: the mapping depends on the coordinate only. Two threads missing
    the same key may both compute it; the first stored value wins.
    """

    def __init__(self):
        self._entries: dict[tuple[float, float], str] = {}
        self._lock = threading.Lock()

    def get(self, key: tuple[float, float]) -> Optional[str]:
        with self._lock:
            return self._entries.get(key)

    def get_or_compute(self, key: tuple[float, float], compute: Callable[[], str]) -> str:
        with self._lock:
            if key in self._entries:
                return self._entries[key]

        # Computed outside the lock
        value = compute()

        with self._lock:
            return self._entries.setdefault(key, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ============================================================================
# Zone helpers
# ============================================================================

def system_zone_name() -> str:
    """IANA name of the host's local zone, or "UTC" if it cannot be determined."""
    tz_env = os.environ.get("TZ", "").lstrip(":")
    if tz_env in pytz.all_timezones_set:
        return tz_env

    target = os.path.realpath("/etc/localtime")
    marker = "zoneinfo/"
    if marker in target:
        name = target.split(marker, 1)[1]
        if name in pytz.all_timezones_set:
            return name

    return "UTC"


def get_zone(zone_id: str):
    """
    Look up a pytz zone.

    Raises:
        TimezoneError: Empty or unknown identifier
    """
    if not zone_id or not isinstance(zone_id, str):
        raise TimezoneError(f"Invalid timezone provided: {zone_id!r}")
    try:
        return pytz.timezone(zone_id)
    except pytz.UnknownTimeZoneError:
        raise TimezoneError(f"Invalid timezone provided: {zone_id!r}")


def utc_offset_minutes(instant, zone_id: str) -> int:
    """UTC offset of the zone at an instant, in minutes east of UTC."""
    tz = get_zone(zone_id)
    local = normalize_instant(instant).astimezone(tz)
    return int(local.utcoffset().total_seconds() // 60)


def is_dst_active(instant, zone_id: str) -> bool:
    """
    Heuristic DST test.

    Offsets are compared as minutes west of UTC (the clock-offset
    convention). The larger of the 1 January and 1 July values is taken as
    standard time; DST is active when the instant's value is smaller.
    Zones whose standard offset changes during the year are misjudged.
    """
    instant = normalize_instant(instant)
    tz = get_zone(zone_id)

    january = datetime(instant.year, 1, 1, tzinfo=timezone.utc)
    july = datetime(instant.year, 7, 1, tzinfo=timezone.utc)

    def minutes_west(moment: datetime) -> int:
        return -int(moment.astimezone(tz).utcoffset().total_seconds() // 60)

    standard = max(minutes_west(january), minutes_west(july))
    return minutes_west(instant) < standard


def zone_display_name(instant, zone_id: str) -> str:
    """
    Abbreviated display name of the zone at an instant ("EDT", "CET").

    The tz database carries no long names, so this is never the spelled-out
    form. Zones without a lettered abbreviation report a numeric one ("-03").
    """
    tz = get_zone(zone_id)
    return normalize_instant(instant).astimezone(tz).tzname() or zone_id


def to_local(instant, zone_id: str) -> datetime:
    """Render a UTC instant as an aware datetime in zone_id."""
    tz = get_zone(zone_id)
    return normalize_instant(instant).astimezone(tz)


def to_utc(local: datetime, zone_id: str) -> datetime:
    """
    Interpret a wall-clock time in zone_id and return the UTC instant.

    Aware datetimes are simply converted. Naive ones are localized; during
    a DST fold or gap the standard-time reading is used.
    """
    if not isinstance(local, datetime):
        raise InvalidInstantError(f"Invalid date provided: {local!r}")

    tz = get_zone(zone_id)
    if local.tzinfo is None:
        local = tz.localize(local)

    return normalize_instant(local)


# ============================================================================
# Resolver
# ============================================================================

class TimezoneResolver:
    """
    Resolve coordinates to zones and convert sun times to local time.

    The provider and the cache are injected; the resolver itself holds no
    other state, so one instance can be shared between threads.
    """

    def __init__(
        self,
        provider: Optional[TimezoneProvider] = None,
        cache: Optional[TimezoneCache] = None,
        fallback_zone: Optional[str] = None,
    ):
        self.provider = provider or RegionTableProvider()
        self.cache = cache if cache is not None else TimezoneCache()
        self.fallback_zone = fallback_zone or system_zone_name()
        get_zone(self.fallback_zone)

    def resolve(self, coord) -> str:
        """
        Zone id for a coordinate.

        Falls back to the fallback zone (the system zone by default) when the
        provider has no answer or fails.

        Raises:
            CoordinateError: Invalid coordinates
        """
        coord = GeoCoordinate.coerce(coord)
        return self.cache.get_or_compute(coord.rounded(), lambda: self._lookup(coord))

    def _lookup(self, coord: GeoCoordinate) -> str:
        try:
            zone = self.provider.zone_for(coord.latitude, coord.longitude)
        except Exception as e:
            logger.warning(
                f"Timezone lookup failed for lat={coord.latitude}, lon={coord.longitude}, "
                f"using {self.fallback_zone}: {e}"
            )
            return self.fallback_zone

        if zone is None:
            logger.debug(
                f"No timezone region for lat={coord.latitude}, lon={coord.longitude}, "
                f"using {self.fallback_zone}"
            )
            return self.fallback_zone

        return zone

    def get_info(self, coord, instant=None) -> TimezoneInfo:
        """
        Timezone, DST flag, offset and display name for a coordinate.

        Args:
            coord: GeoCoordinate or (latitude, longitude)
            instant: Moment to evaluate DST/offset at (default: now)
        """
        coord = GeoCoordinate.coerce(coord)
        instant = normalize_instant(instant if instant is not None else datetime.now(timezone.utc))

        zone_id = self.resolve(coord)
        return TimezoneInfo(
            zone_id=zone_id,
            is_dst=is_dst_active(instant, zone_id),
            offset_minutes=utc_offset_minutes(instant, zone_id),
            display_name=zone_display_name(instant, zone_id),
        )

    def to_local(self, instant, zone_id: str) -> datetime:
        return to_local(instant, zone_id)

    def to_utc(self, local: datetime, zone_id: str) -> datetime:
        return to_utc(local, zone_id)

    def convert_profile(self, profile: DayLightProfile, zone_id: str) -> DayLightProfile:
        """Copy of a day profile with every defined instant in local time."""
        if not isinstance(profile, DayLightProfile):
            raise TypeError(f"Expected DayLightProfile, got {type(profile).__name__}")
        tz = get_zone(zone_id)

        def local(value: datetime) -> datetime:
            return value.astimezone(tz)

        return replace(
            profile,
            sunrise=local(profile.sunrise) if profile.sunrise is not None else None,
            sunset=local(profile.sunset) if profile.sunset is not None else None,
            solar_noon=local(profile.solar_noon),
            golden_hour=profile.golden_hour.map(local),
            blue_hour=profile.blue_hour.map(local),
            twilight=profile.twilight.map(local),
        )
