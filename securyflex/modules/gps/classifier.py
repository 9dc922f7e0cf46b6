"""GPS check-in classification. Stateless; thresholds are policy, not physics.

Bands default to the accuracy descriptions shown to guards: <=5m excellent,
<=10m very good, <=50m moderate, above 100m unusable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from securyflex.core.errors import InvalidReadingError
from securyflex.models.enums import GPSStatus

EARTH_RADIUS_M = 6_371_000.0
MAX_REASONABLE_SPEED_KMH = 200.0

CHECK_IN_STATUSES: frozenset[GPSStatus] = frozenset({
    GPSStatus.EXCELLENT,
    GPSStatus.VERIFIED,
    GPSStatus.LOW_ACCURACY,
})

# States where the caller is still waiting for a better fix
_SEARCHING_STATUSES: frozenset[GPSStatus] = frozenset({GPSStatus.PENDING, GPSStatus.FAILED})


@dataclass(frozen=True)
class GPSThresholds:
    excellent_m: float = 5.0
    verified_m: float = 10.0
    low_accuracy_m: float = 50.0
    failed_m: float = 100.0
    suspicious_accuracy_m: float | None = None
    max_speed_kmh: float = MAX_REASONABLE_SPEED_KMH

    def __post_init__(self) -> None:
        if not 0 <= self.excellent_m <= self.verified_m <= self.low_accuracy_m <= self.failed_m:
            raise ValueError("GPS thresholds must satisfy 0 <= excellent <= verified <= low <= failed")
        if self.max_speed_kmh <= 0:
            raise ValueError("max_speed_kmh must be > 0")

    @classmethod
    def from_settings(cls, settings) -> GPSThresholds:
        return cls(
            excellent_m=settings.GPS_EXCELLENT_ACCURACY_M,
            verified_m=settings.GPS_VERIFIED_ACCURACY_M,
            low_accuracy_m=settings.GPS_LOW_ACCURACY_M,
            failed_m=settings.GPS_FAILED_ACCURACY_M,
            suspicious_accuracy_m=settings.GPS_SUSPICIOUS_ACCURACY_M,
            max_speed_kmh=settings.GPS_MAX_SPEED_KMH,
        )


DEFAULT_THRESHOLDS = GPSThresholds()


@dataclass(frozen=True)
class GPSReading:
    accuracy_m: float
    distance_m: float | None
    is_mock_location: bool
    timestamp: datetime


def classify(
    accuracy_m: float,
    distance_m: float | None,
    is_mock_location: bool,
    site_radius_m: float,
    thresholds: GPSThresholds = DEFAULT_THRESHOLDS,
) -> GPSStatus:
    """Classify one location sample for check-in.

    The mock flag wins over everything else, including a perfect fix. NaN,
    infinite or negative values raise InvalidReadingError.
    """
    if is_mock_location:
        return GPSStatus.MOCK_LOCATION

    values = [accuracy_m, site_radius_m]
    if distance_m is not None:
        values.append(distance_m)
    if not all(math.isfinite(v) and v >= 0 for v in values):
        raise InvalidReadingError(
            f"GPS values must be finite and non-negative: accuracy={accuracy_m}, "
            f"distance={distance_m}, radius={site_radius_m}"
        )

    if thresholds.suspicious_accuracy_m is not None and accuracy_m < thresholds.suspicious_accuracy_m:
        return GPSStatus.MOCK_LOCATION
    if accuracy_m > thresholds.failed_m:
        return GPSStatus.FAILED
    if distance_m is not None and distance_m > site_radius_m:
        return GPSStatus.OUT_OF_RANGE
    if accuracy_m <= thresholds.excellent_m:
        return GPSStatus.EXCELLENT
    if accuracy_m <= thresholds.verified_m:
        return GPSStatus.VERIFIED
    if accuracy_m <= thresholds.low_accuracy_m:
        return GPSStatus.LOW_ACCURACY
    return GPSStatus.PENDING


def classify_reading(
    reading: GPSReading,
    site_radius_m: float,
    thresholds: GPSThresholds = DEFAULT_THRESHOLDS,
) -> GPSStatus:
    return classify(
        reading.accuracy_m,
        reading.distance_m,
        reading.is_mock_location,
        site_radius_m,
        thresholds,
    )


def mark_improving(
    previous_accuracy_m: float | None,
    current_accuracy_m: float,
    status: GPSStatus,
) -> GPSStatus:
    """Relabel a still-searching status as IMPROVING when accuracy got better.

    Usable or final verdicts (low accuracy, verified, excellent, out of
    range, mock) are never relabelled.
    """
    if (
        previous_accuracy_m is not None
        and current_accuracy_m < previous_accuracy_m
        and status in _SEARCHING_STATUSES
    ):
        return GPSStatus.IMPROVING
    return status


def allows_check_in(status: GPSStatus) -> bool:
    return status in CHECK_IN_STATUSES


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
