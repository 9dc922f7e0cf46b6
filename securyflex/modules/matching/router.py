"""Matching API router: job eligibility for posted or registered certificates."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, status

from securyflex.core.clock import utc_now
from securyflex.core.config import settings
from securyflex.modules.matching.algorithm import match
from securyflex.modules.matching.schemas import (
    CertificateIn,
    CertificateRegisteredResponse,
    EligibilityRequest,
    EligibilityResponse,
    HolderEligibilityRequest,
    RankedHolderResponse,
    RankRequest,
)
from securyflex.modules.matching.service import (
    CertificateStore,
    EligibilityService,
    get_certificate_store,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/matching", tags=["matching"])


def _service(store: CertificateStore, now: datetime | None) -> EligibilityService:
    clock = utc_now if now is None else (lambda: now)
    return EligibilityService(store, clock=clock)


@router.post("/eligibility", response_model=EligibilityResponse)
async def check_eligibility(body: EligibilityRequest):
    """Score posted certificates against a job's requirement set."""
    certificates = [c.to_certificate() for c in body.certificates]
    result = match(
        body.requirements,
        certificates,
        body.now or utc_now(),
        settings.CERT_EXPIRY_WARNING_DAYS,
    )
    logger.info(
        "eligibility_checked",
        requirements=len(body.requirements),
        certificates=len(certificates),
        score=result.eligibility_score,
    )
    return EligibilityResponse.from_result(result)


# ── Registered holders ────────────────────────────────────────────────────────


@router.post(
    "/holders/{holder_id}/certificates",
    response_model=CertificateRegisteredResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_certificate(
    holder_id: str,
    body: CertificateIn,
    store: CertificateStore = Depends(get_certificate_store),
):
    """Register (or replace) a certificate for a holder."""
    certificate = body.to_certificate(holder_id=holder_id)
    store.add(certificate)
    logger.info("certificate_registered", holder_id=holder_id, certificate_id=certificate.id)
    return CertificateRegisteredResponse(
        holder_id=holder_id,
        certificate_id=certificate.id,
        certificate_count=len(store.list_certificates(holder_id)),
    )


@router.post("/holders/{holder_id}/eligibility", response_model=EligibilityResponse)
async def check_holder_eligibility(
    holder_id: str,
    body: HolderEligibilityRequest,
    store: CertificateStore = Depends(get_certificate_store),
):
    """Score a registered holder against a job; 404 for an unknown holder."""
    result = _service(store, body.now).check_job_eligibility(holder_id, body.requirements)
    return EligibilityResponse.from_result(result)


@router.post("/rank", response_model=list[RankedHolderResponse])
async def rank_holders(
    body: RankRequest,
    store: CertificateStore = Depends(get_certificate_store),
):
    """Rank registered holders for a job, best score first. Unknown ids are skipped."""
    ranked = _service(store, body.now).rank_holders(body.requirements, body.holder_ids)
    return [
        RankedHolderResponse(holder_id=holder_id, result=EligibilityResponse.from_result(result))
        for holder_id, result in ranked
    ]
