"""
Exception types raised by the solar calculator and timezone resolver.

An elevation threshold that is never crossed (polar day or night) is not an
error: event functions return None for it.
"""


class SunTrackError(ValueError):
    """Base class for invalid input to any SunTrack computation."""


class CoordinateError(SunTrackError):
    """Latitude/longitude out of range, non-numeric, or NaN."""


class InvalidInstantError(SunTrackError):
    """Not a date/datetime, or calendar year outside [1000, 3000]."""


class IntervalRangeError(SunTrackError):
    """Sun path sampling interval outside [1, 1440] minutes."""


class TimezoneError(SunTrackError):
    """Empty or unknown IANA timezone identifier."""
