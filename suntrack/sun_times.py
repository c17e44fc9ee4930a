"""
Sun times calculator: golden hour, blue hour, twilight periods and sun path.

Composes the position model and the event search into a full day profile.
All functions are pure; the same arguments always give the same result.
"""

import math
from datetime import datetime, time, timedelta, timezone

from suntrack.errors import IntervalRangeError, InvalidInstantError
from suntrack.models import (
    ASTRONOMICAL_TWILIGHT,
    CIVIL_TWILIGHT,
    GOLDEN_HOUR_LOWER,
    GOLDEN_HOUR_UPPER,
    NAUTICAL_TWILIGHT,
    DayLightProfile,
    DayNightStatus,
    EventWindow,
    GeoCoordinate,
    LightingPeriod,
    SunPathPoint,
    TwilightPeriods,
)
from suntrack.solar_position import normalize_date, normalize_instant, position_at
from suntrack.sun_events import (
    calculate_solar_noon,
    calculate_sunrise,
    calculate_sunset,
    find_elevation_crossing,
)

MINUTES_PER_DAY = 1440


class _Crossings:
    """
    Memo of threshold crossings for one coordinate and day.

    Blue hour, golden hour and the twilight tiers share boundaries; each
    (elevation, direction) pair is searched once.
    """

    def __init__(self, coord: GeoCoordinate, day):
        self.coord = coord
        self.day = day
        self._found = {}

    def rising(self, threshold):
        return self._get(threshold.degrees, True)

    def falling(self, threshold):
        return self._get(threshold.degrees, False)

    def _get(self, elevation: float, rising: bool):
        key = (elevation, rising)
        if key not in self._found:
            self._found[key] = find_elevation_crossing(self.coord, self.day, elevation, rising)
        return self._found[key]


def _prepare(coord, day):
    return GeoCoordinate.coerce(coord), normalize_date(day)


def _golden_hour(c: _Crossings) -> LightingPeriod:
    return LightingPeriod(
        morning=EventWindow(start=c.rising(GOLDEN_HOUR_LOWER), end=c.rising(GOLDEN_HOUR_UPPER)),
        evening=EventWindow(start=c.falling(GOLDEN_HOUR_UPPER), end=c.falling(GOLDEN_HOUR_LOWER)),
    )


def _blue_hour(c: _Crossings) -> LightingPeriod:
    return LightingPeriod(
        morning=EventWindow(start=c.rising(NAUTICAL_TWILIGHT), end=c.rising(CIVIL_TWILIGHT)),
        evening=EventWindow(start=c.falling(CIVIL_TWILIGHT), end=c.falling(NAUTICAL_TWILIGHT)),
    )


def _twilight(c: _Crossings, sunrise, sunset) -> TwilightPeriods:
    return TwilightPeriods(
        civil=LightingPeriod(
            morning=EventWindow(start=c.rising(CIVIL_TWILIGHT), end=sunrise),
            evening=EventWindow(start=sunset, end=c.falling(CIVIL_TWILIGHT)),
        ),
        nautical=LightingPeriod(
            morning=EventWindow(start=c.rising(NAUTICAL_TWILIGHT), end=c.rising(CIVIL_TWILIGHT)),
            evening=EventWindow(start=c.falling(CIVIL_TWILIGHT), end=c.falling(NAUTICAL_TWILIGHT)),
        ),
        astronomical=LightingPeriod(
            morning=EventWindow(start=c.rising(ASTRONOMICAL_TWILIGHT), end=c.rising(NAUTICAL_TWILIGHT)),
            evening=EventWindow(start=c.falling(NAUTICAL_TWILIGHT), end=c.falling(ASTRONOMICAL_TWILIGHT)),
        ),
    )


def calculate_golden_hour(coord, day) -> LightingPeriod:
    """
    Golden hour windows (sun between -6 and +6 degrees).

    Morning runs from the -6 deg to the +6 deg rising crossing, evening from
    the +6 deg to the -6 deg falling crossing.
    """
    coord, day = _prepare(coord, day)
    return _golden_hour(_Crossings(coord, day))


def calculate_blue_hour(coord, day) -> LightingPeriod:
    """Blue hour windows (sun between -12 and -6 degrees)."""
    coord, day = _prepare(coord, day)
    return _blue_hour(_Crossings(coord, day))


def calculate_twilight_periods(coord, day) -> TwilightPeriods:
    """
    Civil, nautical and astronomical twilight windows.

    Civil twilight is bounded by sunrise/sunset on the day side, each deeper
    tier by the boundary of the tier above it.
    """
    coord, day = _prepare(coord, day)
    return _twilight(
        _Crossings(coord, day),
        calculate_sunrise(coord, day),
        calculate_sunset(coord, day),
    )


def calculate_sun_times(coord, day) -> DayLightProfile:
    """
    Complete lighting profile for one location and date.

    Args:
        coord: GeoCoordinate or (latitude, longitude)
        day: date or datetime (its UTC calendar date is used)

    Returns:
        DayLightProfile with sunrise, sunset, solar noon, day length in hours
        and the golden hour, blue hour and twilight windows

    Raises:
        CoordinateError: Invalid coordinates
        InvalidInstantError: Invalid date
    """
    coord, day = _prepare(coord, day)

    sunrise = calculate_sunrise(coord, day)
    sunset = calculate_sunset(coord, day)
    solar_noon = calculate_solar_noon(coord, day)

    day_length = None
    if sunrise is not None and sunset is not None:
        day_length = (sunset - sunrise).total_seconds() / 3600

    crossings = _Crossings(coord, day)

    return DayLightProfile(
        date=day,
        sunrise=sunrise,
        sunset=sunset,
        solar_noon=solar_noon,
        day_length=day_length,
        golden_hour=_golden_hour(crossings),
        blue_hour=_blue_hour(crossings),
        twilight=_twilight(crossings, sunrise, sunset),
    )


def _check_interval(interval_minutes) -> None:
    if isinstance(interval_minutes, bool) or not isinstance(interval_minutes, (int, float)):
        raise IntervalRangeError(f"Interval must be a number of minutes, got {interval_minutes!r}")
    if not 1 <= interval_minutes <= MINUTES_PER_DAY:
        raise IntervalRangeError(
            f"Interval must be between 1 and {MINUTES_PER_DAY} minutes, got {interval_minutes}"
        )


def generate_sun_path(coord, day, interval_minutes=15) -> list[SunPathPoint]:
    """
    Sample the sun position across one UTC calendar day.

    The first point is at 00:00 UTC; points are interval_minutes apart and
    the last one is before the next midnight, so a divisor of 1440 yields
    exactly 1440 / interval_minutes points.

    Raises:
        IntervalRangeError: interval_minutes outside [1, 1440]
    """
    coord, day = _prepare(coord, day)
    _check_interval(interval_minutes)

    midnight = datetime.combine(day, time(0, 0), tzinfo=timezone.utc)
    count = math.ceil(MINUTES_PER_DAY / interval_minutes)

    path = []
    for i in range(count):
        current = midnight + timedelta(minutes=i * interval_minutes)
        path.append(SunPathPoint(time=current, position=position_at(coord, current)))

    return path


def generate_visible_sun_path(coord, day, interval_minutes=15) -> list[SunPathPoint]:
    """Sun path restricted to points above the horizon."""
    return [
        point
        for point in generate_sun_path(coord, day, interval_minutes)
        if point.elevation > 0
    ]


def get_sun_position_at_time(coord, day, hour: int, minute: int = 0) -> SunPathPoint:
    """
    Sun position at a clock time (UTC) on the given date.

    Raises:
        InvalidInstantError: hour or minute not an integer, hour outside 0-23
            or minute outside 0-59
    """
    coord, day = _prepare(coord, day)

    for value in (hour, minute):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInstantError(f"Invalid time provided: {hour!r}:{minute!r}")

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise InvalidInstantError(f"Invalid time provided: {hour}:{minute}")

    target = datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)
    return SunPathPoint(time=target, position=position_at(coord, target))


def classify_elevation(elevation: float) -> str:
    """Map a sun elevation to day / twilight tier / night."""
    if elevation > 0:
        return "day"
    if elevation > CIVIL_TWILIGHT.degrees:
        return "civil_twilight"
    if elevation > NAUTICAL_TWILIGHT.degrees:
        return "nautical_twilight"
    if elevation > ASTRONOMICAL_TWILIGHT.degrees:
        return "astronomical_twilight"
    return "night"


def get_day_night_status(coord, instant) -> DayNightStatus:
    """
    Classify the sky at an instant.

    Returns:
        DayNightStatus with status, the sun position and whether the sun is
        above the horizon
    """
    coord = GeoCoordinate.coerce(coord)
    instant = normalize_instant(instant)

    position = position_at(coord, instant)
    return DayNightStatus(
        status=classify_elevation(position.elevation),
        position=position,
        is_visible=position.elevation > 0,
    )
