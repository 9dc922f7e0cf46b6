"""Dutch security certificate catalog: codes, number formats, validity periods."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import datetime

from securyflex.models.enums import CertificateType


@dataclass(frozen=True)
class CertificateSpec:
    """Static facts about one certificate type."""

    type: CertificateType
    full_name: str
    number_pattern: re.Pattern[str]
    validity_years: int
    aliases: tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return f"{self.type.value} - {self.full_name}"


CATALOG: dict[CertificateType, CertificateSpec] = {
    CertificateType.WPBR: CertificateSpec(
        type=CertificateType.WPBR,
        full_name="Wet Particuliere Beveiligingsorganisaties",
        number_pattern=re.compile(r"^WPBR-\d{6}$", re.IGNORECASE),
        validity_years=5,
        aliases=(
            "wpbr a", "wpbr b", "wpbr diploma a", "wpbr diploma b",
            "beveiligingsdiploma a", "beveiligingsdiploma b",
            "beveiliger a", "beveiliger b",
        ),
    ),
    CertificateType.VCA: CertificateSpec(
        type=CertificateType.VCA,
        full_name="Veiligheid Checklist Aannemers",
        number_pattern=re.compile(r"^VCA-\d{8}$", re.IGNORECASE),
        validity_years=10,
        aliases=("vca certificaat", "vca diploma", "veiligheid certificaat"),
    ),
    CertificateType.BHV: CertificateSpec(
        type=CertificateType.BHV,
        full_name="Bedrijfshulpverlening",
        number_pattern=re.compile(r"^BHV-\d{7}$", re.IGNORECASE),
        validity_years=1,
        aliases=("bhv certificaat", "bhv diploma"),
    ),
    CertificateType.EHBO: CertificateSpec(
        type=CertificateType.EHBO,
        full_name="Eerste Hulp Bij Ongelukken",
        number_pattern=re.compile(r"^EHBO-\d{6}$", re.IGNORECASE),
        validity_years=3,
        aliases=("ehbo certificaat", "ehbo diploma", "eerste hulp"),
    ),
}


def _normalize(name: str) -> str:
    return re.sub(r"[\s_-]+", " ", name.strip().lower())


_LOOKUP: dict[str, CertificateType] = {}
for _spec in CATALOG.values():
    _LOOKUP[_normalize(_spec.type.value)] = _spec.type
    _LOOKUP[_normalize(_spec.full_name)] = _spec.type
    for _alias in _spec.aliases:
        _LOOKUP[_normalize(_alias)] = _spec.type


def resolve_category(name: str) -> CertificateType | None:
    """Map a requirement name or alias ("BHV certificaat") to its type.

    Returns None for anything that is not a known category, such as a
    certificate id.
    """
    return _LOOKUP.get(_normalize(name))


def validate_certificate_number(certificate_type: CertificateType, number: str) -> bool:
    return bool(CATALOG[certificate_type].number_pattern.match(number.strip()))


def default_expiration(certificate_type: CertificateType, issue_date: datetime) -> datetime:
    """Nominal expiration: issue date plus the type's validity period.

    A 29 February issue date rolls back to 28 February in non-leap years.
    """
    year = issue_date.year + CATALOG[certificate_type].validity_years
    day = min(issue_date.day, calendar.monthrange(year, issue_date.month)[1])
    return issue_date.replace(year=year, day=day)
