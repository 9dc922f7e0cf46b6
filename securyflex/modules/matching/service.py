"""Eligibility service: loads a holder's certificates and runs the matcher."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from typing import Protocol

import structlog

from securyflex.core.clock import utc_now
from securyflex.core.config import settings
from securyflex.core.errors import CertificateNotFoundError
from securyflex.models.certificates import Certificate
from securyflex.modules.matching.algorithm import EligibilityResult, match, rank_candidates

logger = structlog.get_logger()


class CertificateStore(Protocol):
    def add(self, certificate: Certificate) -> None: ...

    def list_certificates(self, holder_id: str) -> Sequence[Certificate]:
        """Return every registered certificate of the holder.

        Raises CertificateNotFoundError for an unknown holder.
        """
        ...


class InMemoryCertificateStore:
    """Certificate store backed by a dict, keyed by holder id."""

    def __init__(self, certificates: Iterable[Certificate] = ()):
        self._by_holder: dict[str, list[Certificate]] = {}
        for cert in certificates:
            self.add(cert)

    def add(self, certificate: Certificate) -> None:
        """Register a certificate, replacing any earlier one with the same id."""
        self.revoke(certificate.id)
        self._by_holder.setdefault(certificate.holder_id, []).append(certificate)

    def revoke(self, certificate_id: str) -> bool:
        for certs in self._by_holder.values():
            for cert in certs:
                if cert.id == certificate_id:
                    certs.remove(cert)
                    return True
        return False

    def holders(self) -> list[str]:
        return sorted(self._by_holder)

    def list_certificates(self, holder_id: str) -> Sequence[Certificate]:
        try:
            return tuple(self._by_holder[holder_id])
        except KeyError:
            raise CertificateNotFoundError(
                f"no certificates registered for holder {holder_id}"
            ) from None


_default_store = InMemoryCertificateStore()


def get_certificate_store() -> CertificateStore:
    """FastAPI dependency: the process-wide certificate store."""
    return _default_store


class EligibilityService:
    """Eligibility checks against an injected store and clock."""

    def __init__(
        self,
        store: CertificateStore,
        clock: Callable[[], datetime] = utc_now,
        warning_window_days: int | None = None,
    ):
        self.store = store
        self.clock = clock
        self.warning_window_days = (
            settings.CERT_EXPIRY_WARNING_DAYS
            if warning_window_days is None
            else warning_window_days
        )

    def check_job_eligibility(
        self,
        holder_id: str,
        requirements: Mapping[str, Sequence[str]],
    ) -> EligibilityResult:
        certificates = self.store.list_certificates(holder_id)
        result = match(requirements, certificates, self.clock(), self.warning_window_days)
        logger.info(
            "eligibility_checked",
            holder_id=holder_id,
            requirements=len(requirements),
            score=result.eligibility_score,
            missing=sorted(result.missing_requirements),
            expired=sorted(result.expired_requirements),
        )
        return result

    def rank_holders(
        self,
        requirements: Mapping[str, Sequence[str]],
        holder_ids: Sequence[str],
    ) -> list[tuple[str, EligibilityResult]]:
        """Rank the given holders for a job. Unknown holders are skipped."""
        candidates: dict[str, Sequence[Certificate]] = {}
        for holder_id in holder_ids:
            try:
                candidates[holder_id] = self.store.list_certificates(holder_id)
            except CertificateNotFoundError:
                logger.warning("ranking_holder_unknown", holder_id=holder_id)
        ranked = rank_candidates(requirements, candidates, self.clock(), self.warning_window_days)
        logger.info("holders_ranked", candidates=len(candidates), requirements=len(requirements))
        return ranked
