"""Closed value sets shared by the rules, the API schemas and the UI tables."""

import enum


# ── Certificates ─────────────────────────────────────────────────────────────


class CertificateType(str, enum.Enum):
    WPBR = "WPBR"
    VCA = "VCA"
    BHV = "BHV"
    EHBO = "EHBO"


class ValidityState(str, enum.Enum):
    VALID = "valid"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


class AlertType(str, enum.Enum):
    """Expiry reminder stages, 90/60/30/7/1 days out, then expired."""

    WARNING_90 = "warning_90"
    WARNING_60 = "warning_60"
    WARNING_30 = "warning_30"
    WARNING_7 = "warning_7"
    WARNING_1 = "warning_1"
    EXPIRED = "expired"

    @property
    def urgency_level(self) -> int:
        return _ALERT_URGENCY[self]


_ALERT_URGENCY: dict[AlertType, int] = {
    AlertType.WARNING_90: 1,
    AlertType.WARNING_60: 2,
    AlertType.WARNING_30: 3,
    AlertType.WARNING_7: 4,
    AlertType.WARNING_1: 5,
    AlertType.EXPIRED: 6,
}

# Days-before-expiry for each reminder stage
ALERT_STAGE_DAYS: dict[int, AlertType] = {
    90: AlertType.WARNING_90,
    60: AlertType.WARNING_60,
    30: AlertType.WARNING_30,
    7: AlertType.WARNING_7,
    1: AlertType.WARNING_1,
}


# ── Matching ─────────────────────────────────────────────────────────────────


class RequirementStatus(str, enum.Enum):
    MET = "met"
    EXPIRED = "expired"
    MISSING = "missing"


class MatchQuality(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    LIMITED = "limited"
    NONE = "none"


# ── GPS ──────────────────────────────────────────────────────────────────────


class GPSStatus(str, enum.Enum):
    VERIFIED = "verified"
    EXCELLENT = "excellent"
    IMPROVING = "improving"
    LOW_ACCURACY = "lowAccuracy"
    OUT_OF_RANGE = "outOfRange"
    MOCK_LOCATION = "mockLocation"
    DISABLED = "disabled"
    FAILED = "failed"
    PENDING = "pending"
