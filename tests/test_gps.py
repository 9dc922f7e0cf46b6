"""Tests for GPS reading classification and check-in verification."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from securyflex.core.errors import InvalidReadingError, LocationUnavailableError
from securyflex.models.enums import GPSStatus
from securyflex.modules.gps.classifier import (
    CHECK_IN_STATUSES,
    GPSThresholds,
    allows_check_in,
    classify,
    haversine_distance,
    mark_improving,
)
from securyflex.modules.gps.service import (
    CheckInVerifier,
    JobSite,
    LocationFix,
    StaticLocationProvider,
    check_geofences,
    is_impossible_movement,
    movement_speed_kmh,
)

FIX_TIME = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)

# Dam Square, Amsterdam
SITE = JobSite(site_id="site-dam", latitude=52.3731, longitude=4.8926, radius_m=100.0)


def _fix(lat: float = SITE.latitude, lon: float = SITE.longitude, accuracy: float = 4.0, mock=False):
    return LocationFix(
        latitude=lat,
        longitude=lon,
        accuracy_m=accuracy,
        is_mock_location=mock,
        timestamp=FIX_TIME,
    )


# ── classify ──────────────────────────────────────────────────────────────────


class TestClassify:
    def test_excellent(self):
        assert classify(3, 0, False, 50) == GPSStatus.EXCELLENT

    def test_pending_between_low_and_failed(self):
        assert classify(75, 0, False, 50) == GPSStatus.PENDING

    @pytest.mark.parametrize(
        "accuracy,expected",
        [
            (0.0, GPSStatus.EXCELLENT),
            (5.0, GPSStatus.EXCELLENT),
            (5.1, GPSStatus.VERIFIED),
            (10.0, GPSStatus.VERIFIED),
            (10.5, GPSStatus.LOW_ACCURACY),
            (50.0, GPSStatus.LOW_ACCURACY),
            (50.1, GPSStatus.PENDING),
            (100.0, GPSStatus.PENDING),
            (100.1, GPSStatus.FAILED),
        ],
    )
    def test_accuracy_bands(self, accuracy, expected):
        assert classify(accuracy, 10, False, 100) == expected

    def test_mock_flag_wins_over_perfect_fix(self):
        assert classify(1, 0, True, 100) == GPSStatus.MOCK_LOCATION

    def test_mock_flag_wins_over_out_of_range(self):
        assert classify(300, 5000, True, 100) == GPSStatus.MOCK_LOCATION

    def test_out_of_range(self):
        assert classify(3, 150, False, 100) == GPSStatus.OUT_OF_RANGE

    def test_distance_on_radius_is_in_range(self):
        assert classify(3, 100, False, 100) == GPSStatus.EXCELLENT

    def test_failed_accuracy_beats_out_of_range(self):
        assert classify(150, 5000, False, 100) == GPSStatus.FAILED

    def test_unknown_distance_skips_geofence(self):
        assert classify(8, None, False, 100) == GPSStatus.VERIFIED

    @pytest.mark.parametrize("accuracy,distance,radius", [(-1, 0, 50), (5, -1, 50), (5, 0, -1)])
    def test_negative_values_rejected(self, accuracy, distance, radius):
        with pytest.raises(InvalidReadingError):
            classify(accuracy, distance, False, radius)

    @pytest.mark.parametrize(
        "accuracy,distance,radius",
        [
            (3, math.nan, 50),
            (math.nan, 0, 50),
            (3, 0, math.nan),
            (math.inf, 0, 50),
            (3, math.inf, 50),
        ],
    )
    def test_non_finite_values_rejected(self, accuracy, distance, radius):
        with pytest.raises(InvalidReadingError):
            classify(accuracy, distance, False, radius)

    def test_mock_flag_wins_over_nan(self):
        assert classify(math.nan, math.nan, True, 50) == GPSStatus.MOCK_LOCATION

    def test_mock_checked_before_reading_validation(self):
        assert classify(-1, 0, True, 50) == GPSStatus.MOCK_LOCATION

    def test_suspicious_accuracy_flagged_as_mock(self):
        thresholds = GPSThresholds(suspicious_accuracy_m=1.0)
        assert classify(0.5, 0, False, 100, thresholds) == GPSStatus.MOCK_LOCATION
        assert classify(1.0, 0, False, 100, thresholds) == GPSStatus.EXCELLENT

    def test_custom_thresholds(self):
        thresholds = GPSThresholds(excellent_m=2, verified_m=4, low_accuracy_m=20, failed_m=30)
        assert classify(3, 0, False, 100, thresholds) == GPSStatus.VERIFIED
        assert classify(25, 0, False, 100, thresholds) == GPSStatus.PENDING
        assert classify(31, 0, False, 100, thresholds) == GPSStatus.FAILED

    def test_unordered_thresholds_rejected(self):
        with pytest.raises(ValueError):
            GPSThresholds(excellent_m=20, verified_m=10)

    def test_non_positive_speed_limit_rejected(self):
        with pytest.raises(ValueError):
            GPSThresholds(max_speed_kmh=0)


class TestCheckInAllowed:
    def test_allowed_statuses(self):
        assert CHECK_IN_STATUSES == {GPSStatus.EXCELLENT, GPSStatus.VERIFIED, GPSStatus.LOW_ACCURACY}

    @pytest.mark.parametrize("status", sorted(set(GPSStatus) - CHECK_IN_STATUSES, key=lambda s: s.value))
    def test_blocked_statuses(self, status):
        assert not allows_check_in(status)


class TestMarkImproving:
    def test_pending_improving(self):
        assert mark_improving(90, 70, GPSStatus.PENDING) == GPSStatus.IMPROVING

    def test_failed_improving(self):
        assert mark_improving(400, 150, GPSStatus.FAILED) == GPSStatus.IMPROVING

    def test_no_previous_reading(self):
        assert mark_improving(None, 70, GPSStatus.PENDING) == GPSStatus.PENDING

    def test_worse_accuracy_unchanged(self):
        assert mark_improving(60, 70, GPSStatus.PENDING) == GPSStatus.PENDING

    @pytest.mark.parametrize(
        "status",
        [
            GPSStatus.EXCELLENT,
            GPSStatus.VERIFIED,
            GPSStatus.LOW_ACCURACY,
            GPSStatus.OUT_OF_RANGE,
            GPSStatus.MOCK_LOCATION,
        ],
    )
    def test_final_verdicts_not_relabelled(self, status):
        assert mark_improving(90, 3, status) == status


class TestHaversine:
    def test_same_point(self):
        assert haversine_distance(52.0, 4.0, 52.0, 4.0) == 0.0

    def test_amsterdam_to_rotterdam(self):
        distance = haversine_distance(52.3731, 4.8926, 51.9225, 4.4792)
        assert distance == pytest.approx(57_500, rel=0.02)

    def test_symmetric(self):
        a = haversine_distance(52.3731, 4.8926, 52.0907, 5.1214)
        b = haversine_distance(52.0907, 5.1214, 52.3731, 4.8926)
        assert a == pytest.approx(b)


# ── CheckInVerifier ───────────────────────────────────────────────────────────


class TestCheckInVerifier:
    def test_on_site_excellent(self):
        result = CheckInVerifier(StaticLocationProvider(_fix())).verify(SITE)
        assert result.status == GPSStatus.EXCELLENT
        assert result.allowed
        assert result.reading.distance_m == pytest.approx(0.0, abs=1e-6)

    def test_off_site(self):
        # ~1.1 km north of the site
        fix = _fix(lat=SITE.latitude + 0.01)
        result = CheckInVerifier(StaticLocationProvider(fix)).verify(SITE)
        assert result.status == GPSStatus.OUT_OF_RANGE
        assert not result.allowed

    def test_mock_location(self):
        result = CheckInVerifier(StaticLocationProvider(_fix(mock=True))).verify(SITE)
        assert result.status == GPSStatus.MOCK_LOCATION
        assert not result.allowed

    def test_location_services_disabled(self):
        result = CheckInVerifier(StaticLocationProvider(None)).verify(SITE)
        assert result.status == GPSStatus.DISABLED
        assert not result.allowed
        assert result.reading is None

    def test_improving_with_previous_accuracy(self):
        fix = _fix(accuracy=80.0)
        result = CheckInVerifier(StaticLocationProvider(fix)).verify(SITE, previous_accuracy_m=95.0)
        assert result.status == GPSStatus.IMPROVING
        assert not result.allowed

    def test_custom_provider(self):
        class FlakyProvider:
            def current_fix(self):
                raise LocationUnavailableError("permission denied")

        result = CheckInVerifier(FlakyProvider()).verify(SITE)
        assert result.status == GPSStatus.DISABLED

    def test_thresholds_passed_through(self):
        thresholds = GPSThresholds(excellent_m=1, verified_m=2, low_accuracy_m=3, failed_m=4)
        result = CheckInVerifier(StaticLocationProvider(_fix(accuracy=4.0)), thresholds).verify(SITE)
        assert result.status == GPSStatus.PENDING

    def test_impossible_movement_is_mock(self):
        # Rotterdam one minute before arriving on site
        previous = LocationFix(51.9225, 4.4792, 5.0, False, FIX_TIME - timedelta(minutes=1))
        result = CheckInVerifier(StaticLocationProvider(_fix())).verify(SITE, previous_fix=previous)
        assert result.status == GPSStatus.MOCK_LOCATION
        assert not result.allowed

    def test_plausible_movement_allowed(self):
        previous = LocationFix(51.9225, 4.4792, 5.0, False, FIX_TIME - timedelta(hours=1))
        result = CheckInVerifier(StaticLocationProvider(_fix())).verify(SITE, previous_fix=previous)
        assert result.status == GPSStatus.EXCELLENT

    def test_previous_fix_supplies_accuracy(self):
        previous = LocationFix(SITE.latitude, SITE.longitude, 95.0, False, FIX_TIME - timedelta(seconds=30))
        result = CheckInVerifier(StaticLocationProvider(_fix(accuracy=80.0))).verify(
            SITE, previous_fix=previous
        )
        assert result.status == GPSStatus.IMPROVING


# ── movement and geofences ────────────────────────────────────────────────────


class TestMovement:
    def test_speed(self):
        previous = LocationFix(52.0, 4.0, 5.0, False, FIX_TIME)
        current = LocationFix(52.0 + 0.1, 4.0, 5.0, False, FIX_TIME + timedelta(hours=1))
        # 0.1 degree of latitude is ~11.1 km
        assert movement_speed_kmh(previous, current) == pytest.approx(11.1, abs=0.1)

    def test_no_elapsed_time(self):
        previous = LocationFix(52.0, 4.0, 5.0, False, FIX_TIME)
        current = LocationFix(53.0, 4.0, 5.0, False, FIX_TIME)
        assert movement_speed_kmh(previous, current) is None
        assert not is_impossible_movement(previous, current)

    def test_backwards_time_ignored(self):
        previous = LocationFix(52.0, 4.0, 5.0, False, FIX_TIME)
        current = LocationFix(53.0, 4.0, 5.0, False, FIX_TIME - timedelta(seconds=5))
        assert not is_impossible_movement(previous, current)

    def test_speed_threshold(self):
        previous = LocationFix(52.0, 4.0, 5.0, False, FIX_TIME)
        # ~111 km in 30 minutes is ~222 km/h
        current = LocationFix(53.0, 4.0, 5.0, False, FIX_TIME + timedelta(minutes=30))
        assert is_impossible_movement(previous, current)
        assert not is_impossible_movement(previous, current, max_speed_kmh=250)


class TestCheckGeofences:
    def test_per_site_results_in_order(self):
        sites = [
            JobSite("rotterdam", 51.9225, 4.4792, 500.0),
            SITE,
            JobSite("near", SITE.latitude + 0.001, SITE.longitude, 150.0),
        ]
        results = check_geofences(_fix(), sites)

        assert [r.site_id for r in results] == ["rotterdam", "site-dam", "near"]
        assert [r.inside for r in results] == [False, True, True]
        assert results[2].distance_m == pytest.approx(111.2, abs=0.5)

    def test_no_sites(self):
        assert check_geofences(_fix(), []) == []
