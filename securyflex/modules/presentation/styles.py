"""Lookup tables from status enums to UI styling keys.

Colors are design-token names and icons are Material icon ids; the client
resolves both, plus the localized text behind each label key.
"""

from __future__ import annotations

from dataclasses import dataclass

from securyflex.models.enums import GPSStatus, ValidityState


@dataclass(frozen=True)
class StatusStyle:
    color: str
    icon: str
    label_key: str
    requires_attention: bool = False


GPS_STYLES: dict[GPSStatus, StatusStyle] = {
    GPSStatus.VERIFIED: StatusStyle("success", "location_on", "gps.verified"),
    GPSStatus.EXCELLENT: StatusStyle("success", "gps_fixed", "gps.excellent"),
    GPSStatus.PENDING: StatusStyle("info", "location_searching", "gps.pending"),
    GPSStatus.IMPROVING: StatusStyle("info", "trending_up", "gps.improving"),
    GPSStatus.FAILED: StatusStyle("error", "location_off", "gps.failed", True),
    GPSStatus.MOCK_LOCATION: StatusStyle("error", "warning", "gps.mock_location", True),
    GPSStatus.OUT_OF_RANGE: StatusStyle("error", "wrong_location", "gps.out_of_range", True),
    GPSStatus.DISABLED: StatusStyle("neutral", "location_disabled", "gps.disabled", True),
    GPSStatus.LOW_ACCURACY: StatusStyle("warning", "location_searching", "gps.low_accuracy", True),
}

VALIDITY_STYLES: dict[ValidityState, StatusStyle] = {
    ValidityState.VALID: StatusStyle("success", "verified", "certificate.valid"),
    ValidityState.EXPIRING_SOON: StatusStyle("warning", "schedule", "certificate.expiring_soon", True),
    ValidityState.EXPIRED: StatusStyle("error", "error", "certificate.expired", True),
}


def style_for(status: GPSStatus | ValidityState) -> StatusStyle:
    if isinstance(status, GPSStatus):
        return GPS_STYLES[status]
    return VALIDITY_STYLES[status]
