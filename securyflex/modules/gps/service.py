"""Check-in verification against an injected location provider."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import structlog

from securyflex.core.errors import LocationUnavailableError
from securyflex.models.enums import GPSStatus
from securyflex.modules.gps.classifier import (
    DEFAULT_THRESHOLDS,
    MAX_REASONABLE_SPEED_KMH,
    GPSReading,
    GPSThresholds,
    allows_check_in,
    classify_reading,
    haversine_distance,
    mark_improving,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class LocationFix:
    latitude: float
    longitude: float
    accuracy_m: float
    is_mock_location: bool
    timestamp: datetime


@dataclass(frozen=True)
class JobSite:
    site_id: str
    latitude: float
    longitude: float
    radius_m: float


@dataclass(frozen=True)
class CheckInResult:
    site_id: str
    status: GPSStatus
    allowed: bool
    reading: GPSReading | None = None


@dataclass(frozen=True)
class GeofenceResult:
    site_id: str
    distance_m: float
    inside: bool


def movement_speed_kmh(previous: LocationFix, current: LocationFix) -> float | None:
    """Ground speed implied by two fixes, or None when time did not advance."""
    elapsed_s = (current.timestamp - previous.timestamp).total_seconds()
    if elapsed_s <= 0:
        return None
    distance_m = haversine_distance(
        previous.latitude, previous.longitude, current.latitude, current.longitude
    )
    return (distance_m / 1000) / (elapsed_s / 3600)


def is_impossible_movement(
    previous: LocationFix,
    current: LocationFix,
    max_speed_kmh: float = MAX_REASONABLE_SPEED_KMH,
) -> bool:
    """True when the device moved faster than a guard plausibly can."""
    speed = movement_speed_kmh(previous, current)
    return speed is not None and speed > max_speed_kmh


def check_geofences(fix: LocationFix, sites: Sequence[JobSite]) -> list[GeofenceResult]:
    """Distance to every site and whether the fix lies inside its radius.

    Results keep the order of ``sites``; the boundary counts as inside.
    """
    results = []
    for site in sites:
        distance = haversine_distance(fix.latitude, fix.longitude, site.latitude, site.longitude)
        results.append(GeofenceResult(site.site_id, distance, distance <= site.radius_m))
    return results


class LocationProvider(Protocol):
    def current_fix(self) -> LocationFix:
        """Return the latest fix.

        Raises LocationUnavailableError when location services are off.
        """
        ...


class CheckInVerifier:
    """Turns provider fixes into check-in decisions for one job site.

    Stateless: callers pass the previous fix (or just its accuracy) to get the
    IMPROVING label and the impossible-movement check, and own sampling
    cadence and retries.
    """

    def __init__(
        self,
        provider: LocationProvider,
        thresholds: GPSThresholds = DEFAULT_THRESHOLDS,
    ):
        self.provider = provider
        self.thresholds = thresholds

    def verify(
        self,
        site: JobSite,
        previous_accuracy_m: float | None = None,
        previous_fix: LocationFix | None = None,
    ) -> CheckInResult:
        if previous_accuracy_m is None and previous_fix is not None:
            previous_accuracy_m = previous_fix.accuracy_m

        try:
            fix = self.provider.current_fix()
        except LocationUnavailableError as exc:
            logger.warning("check_in_location_unavailable", site_id=site.site_id, reason=str(exc))
            return CheckInResult(site.site_id, GPSStatus.DISABLED, allowed=False)

        reading = GPSReading(
            accuracy_m=fix.accuracy_m,
            distance_m=haversine_distance(
                fix.latitude, fix.longitude, site.latitude, site.longitude
            ),
            is_mock_location=fix.is_mock_location,
            timestamp=fix.timestamp,
        )
        status = classify_reading(reading, site.radius_m, self.thresholds)
        if previous_fix is not None and is_impossible_movement(
            previous_fix, fix, self.thresholds.max_speed_kmh
        ):
            logger.warning(
                "check_in_impossible_movement",
                site_id=site.site_id,
                speed_kmh=round(movement_speed_kmh(previous_fix, fix), 1),
            )
            status = GPSStatus.MOCK_LOCATION
        status = mark_improving(previous_accuracy_m, reading.accuracy_m, status)

        result = CheckInResult(site.site_id, status, allows_check_in(status), reading)
        log = logger.warning if status is GPSStatus.MOCK_LOCATION else logger.info
        log(
            "check_in_classified",
            site_id=site.site_id,
            status=status.value,
            allowed=result.allowed,
            accuracy_m=round(reading.accuracy_m, 1),
            distance_m=round(reading.distance_m, 1),
        )
        return result


class StaticLocationProvider:
    """Provider for a fix the device already captured, e.g. one posted to the API.

    ``None`` means the device reported location services as disabled.
    """

    def __init__(self, fix: LocationFix | None):
        self._fix = fix

    def current_fix(self) -> LocationFix:
        if self._fix is None:
            raise LocationUnavailableError("location services disabled on device")
        return self._fix
