"""
Low-precision solar position model.

Converts a coordinate and a UTC instant into the sun's azimuth, elevation
and distance using the mean-element formulas of the Astronomical Almanac:

    n = JD - 2451545.0                      days since J2000.0
    L = 280.460 + 0.9856474 n               mean longitude
    g = 357.528 + 0.9856003 n               mean anomaly
    lambda = L + 1.915 sin g + 0.020 sin 2g ecliptic longitude
    epsilon = 23.439                        fixed mean obliquity

Accuracy is about 0.01 degrees between 1950 and 2050, which is plenty for
lighting periods. No nutation, precession or refraction is applied.
"""

import math
from datetime import date, datetime, timezone

from suntrack.errors import InvalidInstantError
from suntrack.models import GeoCoordinate, SolarPosition, validate_coordinates

J2000 = 2451545.0
OBLIQUITY_DEG = 23.439

MIN_YEAR = 1000
MAX_YEAR = 3000

__all__ = [
    "to_radians",
    "to_degrees",
    "validate_coordinates",
    "normalize_instant",
    "normalize_date",
    "julian_day",
    "solar_declination",
    "equation_of_time",
    "earth_sun_distance",
    "compute_sun_position",
    "position_at",
]


def to_radians(degrees: float) -> float:
    return degrees * math.pi / 180


def to_degrees(radians: float) -> float:
    return radians * 180 / math.pi


def _wrap_180(degrees: float) -> float:
    """Wrap an angle into [-180, 180)."""
    return (degrees + 180.0) % 360.0 - 180.0


def _check_year(year: int) -> None:
    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidInstantError(f"Date must be between years {MIN_YEAR} and {MAX_YEAR}, got {year}")


def normalize_instant(value) -> datetime:
    """
    Normalize a date or datetime to an aware UTC datetime.

    Naive datetimes are taken to be UTC; a bare date means UTC midnight.

    Raises:
        InvalidInstantError: Wrong type, or year outside [1000, 3000]
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            instant = value.replace(tzinfo=timezone.utc)
        else:
            # Offsets near datetime.min/max overflow during conversion
            _check_year(value.year)
            try:
                instant = value.astimezone(timezone.utc)
            except OverflowError as e:
                raise InvalidInstantError(f"Invalid date provided: {value!r}") from e
    elif isinstance(value, date):
        instant = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    else:
        raise InvalidInstantError(f"Invalid date provided: {value!r}")

    _check_year(instant.year)
    return instant


def normalize_date(value) -> date:
    """Calendar date (UTC) of a date or datetime, validated like normalize_instant."""
    return normalize_instant(value).date()


def julian_day(instant: datetime) -> float:
    """
    Julian Day of a UTC instant (Gregorian calendar, noon epoch).

    Args:
        instant: Aware UTC datetime (see normalize_instant)

    Returns:
        Julian Day, e.g. 2451545.0 for 2000-01-01 12:00 UTC
    """
    a = (14 - instant.month) // 12
    y = instant.year + 4800 - a
    m = instant.month + 12 * a - 3

    jdn = (
        instant.day
        + (153 * m + 2) // 5
        + 365 * y
        + y // 4
        - y // 100
        + y // 400
        - 32045
    )
    seconds = instant.second + instant.microsecond / 1_000_000
    return jdn + (instant.hour - 12) / 24 + instant.minute / 1440 + seconds / 86400


def _mean_elements(jd: float) -> tuple[float, float, float]:
    """Mean longitude L, mean anomaly g and ecliptic longitude lambda, in degrees."""
    n = jd - J2000
    mean_longitude = (280.460 + 0.9856474 * n) % 360
    mean_anomaly = (357.528 + 0.9856003 * n) % 360
    g = to_radians(mean_anomaly)
    ecliptic_longitude = mean_longitude + 1.915 * math.sin(g) + 0.020 * math.sin(2 * g)
    return mean_longitude, mean_anomaly, ecliptic_longitude


def solar_declination(jd: float) -> float:
    """Solar declination in degrees."""
    _, _, ecliptic_longitude = _mean_elements(jd)
    return to_degrees(
        math.asin(math.sin(to_radians(OBLIQUITY_DEG)) * math.sin(to_radians(ecliptic_longitude)))
    )


def _right_ascension(ecliptic_longitude: float) -> float:
    lam = to_radians(ecliptic_longitude)
    return to_degrees(math.atan2(math.cos(to_radians(OBLIQUITY_DEG)) * math.sin(lam), math.cos(lam)))


def equation_of_time(jd: float) -> float:
    """
    Equation of time in minutes (apparent minus mean solar time).

    L - alpha is wrapped to [-180, 180) first, so the result stays within
    its natural range of roughly -14 to +17 minutes.
    """
    mean_longitude, _, ecliptic_longitude = _mean_elements(jd)
    alpha = _right_ascension(ecliptic_longitude)
    return 4 * _wrap_180(mean_longitude - alpha)


def earth_sun_distance(jd: float) -> float:
    """Earth-Sun distance in astronomical units."""
    _, mean_anomaly, _ = _mean_elements(jd)
    g = to_radians(mean_anomaly)
    return 1.00014 - 0.01671 * math.cos(g) - 0.00014 * math.cos(2 * g)


def compute_sun_position(coord, instant) -> SolarPosition:
    """
    Sun position for a place and time.

    Args:
        coord: GeoCoordinate or (latitude, longitude) pair
        instant: datetime (naive = UTC) or date (UTC midnight)

    Returns:
        SolarPosition with azimuth in [0, 360), elevation in degrees and
        distance in AU

    Raises:
        CoordinateError: Invalid latitude/longitude
        InvalidInstantError: Invalid date or year outside [1000, 3000]

    Example:
        >>> pos = compute_sun_position((40.7128, -74.0060), datetime(2024, 3, 21, 17, 0))
        >>> round(pos.elevation)
        50
    """
    return position_at(GeoCoordinate.coerce(coord), normalize_instant(instant))


def position_at(coord: GeoCoordinate, instant: datetime) -> SolarPosition:
    """
    Unchecked core of compute_sun_position.

    Callers must pass a GeoCoordinate and an aware UTC datetime; the year
    range is not re-checked, so event searches may step a few hours past
    the validated date.
    """
    jd = julian_day(instant)
    mean_longitude, mean_anomaly, ecliptic_longitude = _mean_elements(jd)

    declination = math.asin(math.sin(to_radians(OBLIQUITY_DEG)) * math.sin(to_radians(ecliptic_longitude)))
    eq_time = 4 * _wrap_180(mean_longitude - _right_ascension(ecliptic_longitude))

    # True solar time and hour angle (0 at local solar noon)
    utc_minutes = (
        instant.hour * 60
        + instant.minute
        + (instant.second + instant.microsecond / 1_000_000) / 60
    )
    true_solar_time = utc_minutes + eq_time + 4 * coord.longitude
    hour_angle = to_radians(_wrap_180(true_solar_time / 4 - 180))

    lat = to_radians(coord.latitude)

    sin_elevation = (
        math.sin(declination) * math.sin(lat)
        + math.cos(declination) * math.cos(lat) * math.cos(hour_angle)
    )
    # Rounding can push the product a hair past +/-1 at the subsolar point
    elevation = math.asin(max(-1.0, min(1.0, sin_elevation)))

    azimuth_rad = math.atan2(
        math.sin(hour_angle),
        math.cos(hour_angle) * math.sin(lat) - math.tan(declination) * math.cos(lat),
    )

    # atan2 + 180 lies in [0, 360]; one period at most out of range
    azimuth = to_degrees(azimuth_rad) + 180
    if azimuth >= 360:
        azimuth -= 360
    elif azimuth < 0:
        azimuth += 360

    g = to_radians(mean_anomaly)
    distance = 1.00014 - 0.01671 * math.cos(g) - 0.00014 * math.cos(2 * g)

    return SolarPosition(
        azimuth=azimuth,
        elevation=to_degrees(elevation),
        distance=distance,
    )
