"""Job eligibility matching. Pure deterministic scoring, no I/O.

Every requirement of a job is checked against the holder's certificates using
the validity rules, and the outcome is stored per requirement so the result
can be explained to the guard and to the company.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from securyflex.models.certificates import Certificate
from securyflex.models.enums import (
    CertificateType,
    MatchQuality,
    RequirementStatus,
    ValidityState,
)
from securyflex.modules.certificates.catalog import resolve_category
from securyflex.modules.certificates.validity import (
    DEFAULT_WARNING_WINDOW_DAYS,
    evaluate_certificate,
)

# Lower is better when picking among several matching certificates
_PREFERENCE: dict[ValidityState, int] = {
    ValidityState.VALID: 0,
    ValidityState.EXPIRING_SOON: 1,
    ValidityState.EXPIRED: 2,
}

_QUALITY_BANDS: tuple[tuple[float, MatchQuality], ...] = (
    (0.90, MatchQuality.EXCELLENT),
    (0.75, MatchQuality.GOOD),
    (0.50, MatchQuality.FAIR),
    (0.25, MatchQuality.LIMITED),
)


@dataclass(frozen=True)
class RequirementOutcome:
    requirement: str
    status: RequirementStatus
    certificate_id: str | None = None
    validity: ValidityState | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "requirement": self.requirement,
            "status": self.status.value,
            "certificate_id": self.certificate_id,
            "validity": self.validity.value if self.validity else None,
        }


@dataclass
class EligibilityResult:
    requirements_met: dict[str, bool]
    missing_requirements: frozenset[str]
    expired_requirements: frozenset[str]
    expiring_requirements: frozenset[str]
    eligibility_score: float
    action_items: list[str]
    checked_at: datetime
    outcomes: dict[str, RequirementOutcome] = field(default_factory=dict)

    @property
    def is_eligible(self) -> bool:
        return self.eligibility_score >= 1.0

    @property
    def match_quality(self) -> MatchQuality:
        for threshold, quality in _QUALITY_BANDS:
            if self.eligibility_score >= threshold:
                return quality
        return MatchQuality.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "requirements_met": dict(self.requirements_met),
            "missing_requirements": sorted(self.missing_requirements),
            "expired_requirements": sorted(self.expired_requirements),
            "expiring_requirements": sorted(self.expiring_requirements),
            "eligibility_score": self.eligibility_score,
            "is_eligible": self.is_eligible,
            "match_quality": self.match_quality.value,
            "action_items": list(self.action_items),
            "checked_at": self.checked_at.isoformat(),
            "outcomes": {k: v.to_dict() for k, v in self.outcomes.items()},
        }


def _targets(requirement: str, refs: Sequence[str]) -> tuple[set[CertificateType], set[str]]:
    """Split a requirement and its refs into accepted categories and ids."""
    categories: set[CertificateType] = set()
    ids: set[str] = set()
    for name in (requirement, *refs):
        category = resolve_category(name)
        if category is not None:
            categories.add(category)
        else:
            ids.add(name)
    ids.discard(requirement)
    return categories, ids


def _evaluate_requirement(
    requirement: str,
    refs: Sequence[str],
    certificates: Sequence[Certificate],
    now: datetime,
    warning_window_days: int,
) -> RequirementOutcome:
    categories, ids = _targets(requirement, refs)
    matches = [
        (cert, evaluate_certificate(cert, now, warning_window_days))
        for cert in certificates
        if cert.category in categories or cert.id in ids
    ]
    if not matches:
        return RequirementOutcome(requirement, RequirementStatus.MISSING)

    # Best state, then latest expiration, then smallest id
    matches.sort(key=lambda m: m[0].id)
    matches.sort(key=lambda m: m[0].expiration_date, reverse=True)
    matches.sort(key=lambda m: _PREFERENCE[m[1]])
    best, state = matches[0]

    status = (
        RequirementStatus.EXPIRED
        if state is ValidityState.EXPIRED
        else RequirementStatus.MET
    )
    return RequirementOutcome(requirement, status, best.id, state)


def match(
    requirements: Mapping[str, Sequence[str]],
    holder_certificates: Sequence[Certificate],
    now: datetime,
    warning_window_days: int = DEFAULT_WARNING_WINDOW_DAYS,
) -> EligibilityResult:
    """Check a holder's certificates against a job's requirement set.

    A job without requirements is vacuously eligible (score 1.0).
    """
    outcomes = {
        name: _evaluate_requirement(name, refs, holder_certificates, now, warning_window_days)
        for name, refs in requirements.items()
    }

    met = {name: o.status is RequirementStatus.MET for name, o in outcomes.items()}
    missing = frozenset(n for n, o in outcomes.items() if o.status is RequirementStatus.MISSING)
    expired = frozenset(n for n, o in outcomes.items() if o.status is RequirementStatus.EXPIRED)
    expiring = frozenset(
        n for n, o in outcomes.items()
        if o.status is RequirementStatus.MET and o.validity is ValidityState.EXPIRING_SOON
    )

    score = sum(met.values()) / len(met) if met else 1.0

    action_items = (
        [f"obtain {n}" for n in sorted(missing)]
        + [f"renew {n}" for n in sorted(expired)]
        + [f"renew {n} before it expires" for n in sorted(expiring)]
    )

    return EligibilityResult(
        requirements_met=met,
        missing_requirements=missing,
        expired_requirements=expired,
        expiring_requirements=expiring,
        eligibility_score=score,
        action_items=action_items,
        checked_at=now,
        outcomes=outcomes,
    )


def rank_candidates(
    requirements: Mapping[str, Sequence[str]],
    candidates: Mapping[str, Sequence[Certificate]],
    now: datetime,
    warning_window_days: int = DEFAULT_WARNING_WINDOW_DAYS,
) -> list[tuple[str, EligibilityResult]]:
    """Score every holder for one job, best score first, ties by holder id."""
    results = [
        (holder_id, match(requirements, certs, now, warning_window_days))
        for holder_id, certs in candidates.items()
    ]
    results.sort(key=lambda x: (-x[1].eligibility_score, x[0]))
    return results
