"""Domain models package: certificate record and shared enums."""

from securyflex.models.certificates import Certificate
from securyflex.models.enums import (
    ALERT_STAGE_DAYS,
    AlertType,
    CertificateType,
    GPSStatus,
    MatchQuality,
    RequirementStatus,
    ValidityState,
)

__all__ = [
    "ALERT_STAGE_DAYS",
    "AlertType",
    "Certificate",
    "CertificateType",
    "GPSStatus",
    "MatchQuality",
    "RequirementStatus",
    "ValidityState",
]
