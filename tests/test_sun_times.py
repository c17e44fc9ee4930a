"""Tests for the day profile, lighting periods and sun path."""

import pytest
from datetime import date, datetime, timedelta, timezone

from suntrack.errors import CoordinateError, IntervalRangeError, InvalidInstantError
from suntrack.models import DayLightProfile, EventWindow, SunPathPoint
from suntrack.solar_position import compute_sun_position
from suntrack.sun_events import calculate_sunrise, calculate_sunset, find_elevation_crossing
from suntrack.sun_times import (
    calculate_blue_hour,
    calculate_golden_hour,
    calculate_sun_times,
    calculate_twilight_periods,
    classify_elevation,
    generate_sun_path,
    generate_visible_sun_path,
    get_day_night_status,
    get_sun_position_at_time,
)


def _ordered(*values):
    return all(a <= b for a, b in zip(values, values[1:]))


class TestCalculateSunTimes:
    """Tests for the complete day profile."""

    def test_new_york_summer(self, new_york, summer_solstice):
        """Should report about 15 hours of daylight at the June solstice."""
        profile = calculate_sun_times(new_york, summer_solstice)

        assert isinstance(profile, DayLightProfile)
        assert profile.date == summer_solstice
        assert 14.9 < profile.day_length < 15.3

    def test_day_length_matches_events(self, london, summer_solstice):
        """Should compute day_length from sunset minus sunrise, in hours."""
        profile = calculate_sun_times(london, summer_solstice)
        expected = (profile.sunset - profile.sunrise).total_seconds() / 3600
        assert profile.day_length == expected

    def test_equator_equinox(self):
        """Should give close to 12 hours at the equator on the equinox."""
        profile = calculate_sun_times((0.0, 0.0), date(2024, 3, 20))
        assert 11.9 < profile.day_length < 12.3

    def test_southern_hemisphere_seasons(self, sydney, summer_solstice, winter_solstice):
        """Should give short days in June and long days in December in Sydney."""
        june = calculate_sun_times(sydney, summer_solstice)
        december = calculate_sun_times(sydney, winter_solstice)

        assert 9.5 < june.day_length < 10.3
        assert 14.0 < december.day_length < 14.8

    def test_morning_order(self, new_york, summer_solstice):
        """Should order the morning events from astronomical dawn to sunrise."""
        p = calculate_sun_times(new_york, summer_solstice)
        tw = p.twilight

        assert _ordered(
            tw.astronomical.morning.start,
            tw.astronomical.morning.end,
            tw.nautical.morning.start,
            tw.nautical.morning.end,
            tw.civil.morning.start,
            tw.civil.morning.end,
        )
        assert tw.astronomical.morning.end == tw.nautical.morning.start
        assert tw.nautical.morning.end == tw.civil.morning.start
        assert tw.civil.morning.end == p.sunrise
        assert p.sunrise < p.solar_noon

    def test_evening_order(self, new_york, summer_solstice):
        """Should order the evening events from sunset to astronomical dusk."""
        p = calculate_sun_times(new_york, summer_solstice)
        tw = p.twilight

        assert tw.civil.evening.start == p.sunset
        assert _ordered(
            p.solar_noon,
            tw.civil.evening.start,
            tw.civil.evening.end,
            tw.nautical.evening.end,
            tw.astronomical.evening.end,
        )
        assert tw.civil.evening.end == tw.nautical.evening.start
        assert tw.nautical.evening.end == tw.astronomical.evening.start

    def test_golden_hour_windows(self, london, summer_solstice):
        """Should wrap sunrise and sunset inside the golden hour windows."""
        p = calculate_sun_times(london, summer_solstice)

        assert p.golden_hour.morning.start < p.sunrise < p.golden_hour.morning.end
        assert p.golden_hour.evening.start < p.sunset < p.golden_hour.evening.end
        assert p.golden_hour.morning.end <= p.golden_hour.evening.start

    def test_blue_hour_matches_nautical(self, london, summer_solstice):
        """Should share its bounds with nautical twilight."""
        p = calculate_sun_times(london, summer_solstice)
        assert p.blue_hour == p.twilight.nautical

    def test_blue_hour_before_golden_hour(self, new_york, summer_solstice):
        """Should end blue hour where golden hour begins in the morning."""
        p = calculate_sun_times(new_york, summer_solstice)
        assert p.blue_hour.morning.end == p.golden_hour.morning.start
        assert p.golden_hour.evening.end == p.blue_hour.evening.start

    def test_standalone_calculators_agree(self, sydney, winter_solstice):
        """Should return the same windows as the full profile."""
        p = calculate_sun_times(sydney, winter_solstice)

        assert calculate_golden_hour(sydney, winter_solstice) == p.golden_hour
        assert calculate_blue_hour(sydney, winter_solstice) == p.blue_hour
        assert calculate_twilight_periods(sydney, winter_solstice) == p.twilight

    def test_polar_night(self, arctic, winter_solstice):
        """Should leave sunrise, golden hour and blue hour undefined but keep solar noon."""
        p = calculate_sun_times(arctic, winter_solstice)

        assert p.sunrise is None
        assert p.sunset is None
        assert p.day_length is None
        assert p.solar_noon is not None
        assert p.golden_hour.morning == EventWindow(None, None)
        assert p.twilight.nautical.evening == EventWindow(None, None)

    def test_polar_day(self, arctic, summer_solstice):
        """Should leave sunrise, sunset and day_length undefined."""
        p = calculate_sun_times(arctic, summer_solstice)

        assert p.sunrise is None
        assert p.sunset is None
        assert p.day_length is None
        assert p.golden_hour.evening.start is None

    def test_deterministic(self, london, winter_solstice):
        """Should return equal profiles for equal inputs."""
        assert calculate_sun_times(london, winter_solstice) == calculate_sun_times(london, winter_solstice)

    def test_to_dict(self, new_york, summer_solstice):
        """Should serialize every instant as ISO 8601."""
        data = calculate_sun_times(new_york, summer_solstice).to_dict()

        assert data["date"] == "2024-06-21"
        assert data["sunrise"].startswith("2024-06-21T09:")
        assert data["sunrise"].endswith("+00:00")
        assert set(data["twilight"]) == {"civil", "nautical", "astronomical"}
        assert set(data["golden_hour"]) == {"morning", "evening"}

    def test_polar_to_dict_has_nulls(self, arctic, winter_solstice):
        """Should serialize missing events as None."""
        data = calculate_sun_times(arctic, winter_solstice).to_dict()
        assert data["sunrise"] is None
        assert data["blue_hour"]["morning"] == {"start": None, "end": None}

    def test_invalid_inputs(self):
        """Should raise on invalid coordinates or dates."""
        with pytest.raises(CoordinateError):
            calculate_sun_times((-95, 0), date(2024, 1, 1))
        with pytest.raises(InvalidInstantError):
            calculate_sun_times((0, 0), date(900, 1, 1))


class TestSunPath:
    """Tests for sun path sampling."""

    def test_hourly(self, new_york, summer_solstice):
        """Should return 24 points exactly one hour apart from midnight UTC."""
        path = generate_sun_path(new_york, summer_solstice, 60)

        assert len(path) == 24
        assert path[0].time == datetime(2024, 6, 21, 0, 0, tzinfo=timezone.utc)
        assert path[-1].time == datetime(2024, 6, 21, 23, 0, tzinfo=timezone.utc)
        for a, b in zip(path, path[1:]):
            assert b.time - a.time == timedelta(hours=1)

    def test_default_interval(self, london, summer_solstice):
        """Should sample every 15 minutes by default."""
        assert len(generate_sun_path(london, summer_solstice)) == 96

    @pytest.mark.parametrize(
        "interval,expected",
        [(1, 1440), (7, 206), (90, 16), (1440, 1)],
    )
    def test_point_count(self, london, summer_solstice, interval, expected):
        """Should cover the whole day without passing the next midnight."""
        path = generate_sun_path(london, summer_solstice, interval)

        assert len(path) == expected
        assert path[-1].time < datetime(2024, 6, 22, tzinfo=timezone.utc)

    def test_points_match_position(self, sydney, winter_solstice):
        """Should store the same position compute_sun_position gives."""
        for point in generate_sun_path(sydney, winter_solstice, 180):
            assert isinstance(point, SunPathPoint)
            assert point.position == compute_sun_position(sydney, point.time)

    @pytest.mark.parametrize("interval", [0, -5, 1441, 10_000])
    def test_interval_out_of_range(self, london, summer_solstice, interval):
        """Should reject intervals outside 1-1440 minutes."""
        with pytest.raises(IntervalRangeError):
            generate_sun_path(london, summer_solstice, interval)

    @pytest.mark.parametrize("interval", [True, "15", None])
    def test_interval_wrong_type(self, london, summer_solstice, interval):
        """Should reject non-numeric intervals."""
        with pytest.raises(IntervalRangeError):
            generate_sun_path(london, summer_solstice, interval)

    def test_restartable(self, new_york, summer_solstice):
        """Should return independent, equal lists on repeated calls."""
        first = generate_sun_path(new_york, summer_solstice, 30)
        second = generate_sun_path(new_york, summer_solstice, 30)

        assert first == second
        assert first is not second

    def test_visible_only(self, new_york, summer_solstice):
        """Should keep only points above the horizon."""
        full = generate_sun_path(new_york, summer_solstice, 10)
        visible = generate_visible_sun_path(new_york, summer_solstice, 10)

        assert 0 < len(visible) < len(full)
        assert all(p.elevation > 0 for p in visible)
        assert len(visible) == sum(1 for p in full if p.elevation > 0)

    def test_visible_empty_in_polar_night(self, arctic, winter_solstice):
        """Should be empty when the sun never rises."""
        assert generate_visible_sun_path(arctic, winter_solstice, 30) == []

    def test_visible_all_in_polar_day(self, arctic, summer_solstice):
        """Should keep every point when the sun never sets."""
        assert len(generate_visible_sun_path(arctic, summer_solstice, 30)) == 48


class TestSunPositionAtTime:
    """Tests for get_sun_position_at_time."""

    def test_clock_time(self, new_york):
        """Should sample at the given UTC clock time."""
        point = get_sun_position_at_time(new_york, date(2024, 3, 21), 17, 0)

        assert point.time == datetime(2024, 3, 21, 17, 0, tzinfo=timezone.utc)
        assert 45 < point.elevation < 55

    def test_minute_defaults_to_zero(self, london, summer_solstice):
        """Should default minute to 0."""
        assert get_sun_position_at_time(london, summer_solstice, 12).time.minute == 0

    @pytest.mark.parametrize("hour,minute", [(24, 0), (-1, 0), (12, 60), (12, -1)])
    def test_invalid_time(self, london, summer_solstice, hour, minute):
        """Should reject out-of-range clock times."""
        with pytest.raises(InvalidInstantError):
            get_sun_position_at_time(london, summer_solstice, hour, minute)

    @pytest.mark.parametrize("hour,minute", [(5.5, 0), (12, 30.0), (True, 0), (12, False), ("12", 0)])
    def test_non_integer_time(self, london, summer_solstice, hour, minute):
        """Should reject floats, booleans and strings for hour and minute."""
        with pytest.raises(InvalidInstantError):
            get_sun_position_at_time(london, summer_solstice, hour, minute)


class TestClassifyElevation:
    """Tests for the day/night classification boundaries."""

    @pytest.mark.parametrize(
        "elevation,expected",
        [
            (45.0, "day"),
            (0.01, "day"),
            (0.0, "civil_twilight"),
            (-5.99, "civil_twilight"),
            (-6.0, "nautical_twilight"),
            (-11.5, "nautical_twilight"),
            (-12.0, "astronomical_twilight"),
            (-17.9, "astronomical_twilight"),
            (-18.0, "night"),
            (-60.0, "night"),
        ],
    )
    def test_boundaries(self, elevation, expected):
        """Should use strict lower bounds for each tier."""
        assert classify_elevation(elevation) == expected


class TestDayNightStatus:
    """Tests for get_day_night_status."""

    def test_daytime(self, new_york):
        """Should report day with the sun visible."""
        status = get_day_night_status(new_york, datetime(2024, 3, 21, 17, 0))

        assert status.status == "day"
        assert status.is_visible is True
        assert status.position.elevation > 0

    def test_nautical_twilight_after_sunset(self, new_york, summer_solstice):
        """Should report nautical twilight at the -10 degree evening crossing."""
        crossing = find_elevation_crossing(new_york, summer_solstice, -10, rising=False)
        status = get_day_night_status(new_york, crossing)

        assert status.status == "nautical_twilight"
        assert status.is_visible is False

    def test_civil_twilight_just_after_sunset(self, london, summer_solstice):
        """Should report civil twilight shortly after sunset."""
        sunset = calculate_sunset(london, summer_solstice)
        status = get_day_night_status(london, sunset + timedelta(minutes=10))
        assert status.status == "civil_twilight"

    def test_night(self, arctic, winter_solstice):
        """Should report night in the polar night."""
        status = get_day_night_status(arctic, datetime(2024, 12, 21, 0, 0))
        assert status.status == "night"
        assert status.is_visible is False

    def test_just_before_sunrise(self, sydney, summer_solstice):
        """Should not be visible before sunrise."""
        sunrise = calculate_sunrise(sydney, summer_solstice)
        status = get_day_night_status(sydney, sunrise - timedelta(minutes=5))
        assert status.is_visible is False

    def test_to_dict(self, london):
        """Should serialize status, position and visibility."""
        data = get_day_night_status(london, datetime(2024, 6, 21, 12, 0)).to_dict()
        assert data["status"] == "day"
        assert set(data["position"]) == {"azimuth", "elevation", "distance"}
        assert data["is_visible"] is True
