"""
Times at which the sun crosses a given elevation.

Sunrise, sunset and solar noon have an exact hour-angle solution and are
computed in closed form. Every other threshold (golden hour, blue hour,
twilight tiers) is found by bisection over half a solar day.

Bisection precondition: elevation must be monotonic within each half-day
window. This holds away from the poles; near the poles a result may be
missed (None) or land on a secondary crossing. Treat bisection results as
best-effort.
"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from suntrack.logger import logger
from suntrack.models import SUNRISE_SUNSET, ElevationThreshold, GeoCoordinate
from suntrack.solar_position import (
    equation_of_time,
    julian_day,
    normalize_date,
    position_at,
    solar_declination,
    to_degrees,
    to_radians,
)

# Bisection limits
MAX_ITERATIONS = 50
TIME_PRECISION = timedelta(seconds=60)
ELEVATION_TOLERANCE = 0.01  # degrees, early exit
ACCEPT_TOLERANCE = 1.0  # degrees, final midpoint must be this close

HALF_DAY = timedelta(hours=12)


def _utc_midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def _day_terms(coord: GeoCoordinate, day: date) -> tuple[datetime, float, float]:
    """UTC midnight, declination (deg) and longitude time offset (minutes) for a day."""
    midnight = _utc_midnight(day)
    jd = julian_day(midnight)
    time_offset = equation_of_time(jd) + 4 * coord.longitude
    return midnight, solar_declination(jd), time_offset


def _hour_angle(latitude: float, declination: float, elevation: float) -> Optional[float]:
    """
    Hour angle (deg) at which the sun sits at the given elevation.

    Returns None when cos(H) falls outside [-1, 1]: above 1 the sun never
    gets that high (polar night), below -1 it never gets that low (polar day).
    """
    lat = to_radians(latitude)
    decl = to_radians(declination)

    cos_hour_angle = (math.sin(to_radians(elevation)) - math.sin(lat) * math.sin(decl)) / (
        math.cos(lat) * math.cos(decl)
    )

    if cos_hour_angle > 1 or cos_hour_angle < -1:
        return None

    return to_degrees(math.acos(cos_hour_angle))


def _closed_form_event(coord, day, rising: bool) -> Optional[datetime]:
    coord = GeoCoordinate.coerce(coord)
    day = normalize_date(day)

    midnight, declination, time_offset = _day_terms(coord, day)
    hour_angle = _hour_angle(coord.latitude, declination, SUNRISE_SUNSET.degrees)

    if hour_angle is None:
        logger.debug(
            f"No {'sunrise' if rising else 'sunset'} on {day} at "
            f"lat={coord.latitude}, lon={coord.longitude} (polar day/night)"
        )
        return None

    if rising:
        minutes = 720 - 4 * hour_angle - time_offset
    else:
        minutes = 720 + 4 * hour_angle - time_offset

    return midnight + timedelta(minutes=minutes)


def calculate_sunrise(coord, day) -> Optional[datetime]:
    """
    Sunrise (UTC) for a coordinate and date, or None during polar day/night.

    Args:
        coord: GeoCoordinate or (latitude, longitude)
        day: date or datetime (its UTC calendar date is used)

    Returns:
        Aware UTC datetime. For far-west longitudes this may fall on the
        following UTC date, for far-east ones on the previous.
    """
    return _closed_form_event(coord, day, rising=True)


def calculate_sunset(coord, day) -> Optional[datetime]:
    """Sunset (UTC) for a coordinate and date, or None during polar day/night."""
    return _closed_form_event(coord, day, rising=False)


def calculate_solar_noon(coord, day) -> datetime:
    """Solar noon (UTC): the instant the hour angle is zero."""
    coord = GeoCoordinate.coerce(coord)
    day = normalize_date(day)

    midnight, _, time_offset = _day_terms(coord, day)
    return midnight + timedelta(minutes=720 - time_offset)


def find_elevation_crossing(
    coord,
    day,
    target_elevation,
    rising: bool = True,
) -> Optional[datetime]:
    """
    Find when the sun passes target_elevation on the given day.

    The sunrise/sunset threshold (-0.833 deg) uses the closed form. Any
    other target is bisected over the morning half of the solar day
    [noon - 12h, noon) when rising, or the afternoon half [noon, noon + 12h)
    when falling.

    Args:
        coord: GeoCoordinate or (latitude, longitude)
        day: date or datetime
        target_elevation: Degrees, or an ElevationThreshold
        rising: True for the morning (ascending) crossing

    Returns:
        Aware UTC datetime, or None if the threshold is not crossed

    Raises:
        CoordinateError: Invalid coordinates
        InvalidInstantError: Invalid date
    """
    if isinstance(target_elevation, ElevationThreshold):
        target_elevation = target_elevation.degrees
    target_elevation = float(target_elevation)

    if target_elevation == SUNRISE_SUNSET.degrees:
        return _closed_form_event(coord, day, rising)

    coord = GeoCoordinate.coerce(coord)
    day = normalize_date(day)

    noon = calculate_solar_noon(coord, day)
    if rising:
        start, end = noon - HALF_DAY, noon
    else:
        start, end = noon, noon + HALF_DAY

    iterations = 0
    while iterations < MAX_ITERATIONS and (end - start) > TIME_PRECISION:
        mid = start + (end - start) / 2
        elevation = position_at(coord, mid).elevation

        if abs(elevation - target_elevation) < ELEVATION_TOLERANCE:
            return mid

        if rising:
            if elevation < target_elevation:
                start = mid
            else:
                end = mid
        else:
            if elevation > target_elevation:
                start = mid
            else:
                end = mid

        iterations += 1

    final = start + (end - start) / 2
    final_elevation = position_at(coord, final).elevation

    if abs(final_elevation - target_elevation) < ACCEPT_TOLERANCE:
        return final

    logger.debug(
        f"Elevation {target_elevation} not reached ({'rising' if rising else 'falling'}) on {day} "
        f"at lat={coord.latitude}, lon={coord.longitude}; closest {final_elevation:.2f}"
    )
    return None
