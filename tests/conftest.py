"""Shared pytest fixtures for all tests."""

import pytest
from datetime import date

from suntrack.models import GeoCoordinate
from suntrack.timezones import RegionTableProvider, TimezoneCache, TimezoneResolver


@pytest.fixture
def new_york():
    """New York City."""
    return GeoCoordinate(40.7128, -74.0060)


@pytest.fixture
def london():
    """London."""
    return GeoCoordinate(51.5074, -0.1278)


@pytest.fixture
def sydney():
    """Sydney (southern hemisphere, far east longitude)."""
    return GeoCoordinate(-33.8688, 151.2093)


@pytest.fixture
def arctic():
    """85 deg N on the prime meridian: polar night in December, polar day in June."""
    return GeoCoordinate(85.0, 0.0)


@pytest.fixture
def summer_solstice():
    return date(2024, 6, 21)


@pytest.fixture
def winter_solstice():
    return date(2024, 12, 21)


@pytest.fixture
def resolver():
    """Region-table resolver with its own empty cache and a UTC fallback."""
    return TimezoneResolver(
        provider=RegionTableProvider(),
        cache=TimezoneCache(),
        fallback_zone="UTC",
    )
