"""Certificate API router: catalog, validity and number checks."""

import structlog
from fastapi import APIRouter

from securyflex.core.clock import utc_now
from securyflex.core.config import settings
from securyflex.modules.certificates.catalog import CATALOG, validate_certificate_number
from securyflex.modules.certificates.schemas import (
    CertificateTypeResponse,
    NumberValidationRequest,
    NumberValidationResponse,
    ValidityRequest,
    ValidityResponse,
)
from securyflex.modules.certificates.validity import days_until_expiration, due_alert, evaluate
from securyflex.modules.presentation.schemas import StatusStyleResponse
from securyflex.modules.presentation.styles import style_for

logger = structlog.get_logger()

router = APIRouter(prefix="/certificates", tags=["certificates"])


@router.get("/types", response_model=list[CertificateTypeResponse])
async def list_certificate_types():
    """Recognised certificate types with their number format and validity."""
    return [
        CertificateTypeResponse(
            code=spec.type,
            full_name=spec.full_name,
            display_name=spec.display_name,
            validity_years=spec.validity_years,
            number_format=spec.number_pattern.pattern,
        )
        for spec in CATALOG.values()
    ]


@router.post("/validity", response_model=ValidityResponse)
async def check_validity(body: ValidityRequest):
    """Classify a certificate's validity and report the reminder that is due."""
    now = body.now or utc_now()
    window = (
        settings.CERT_EXPIRY_WARNING_DAYS
        if body.warning_window_days is None
        else body.warning_window_days
    )
    state = evaluate(body.issue_date, body.expiration_date, now, window)
    return ValidityResponse(
        state=state,
        days_until_expiration=days_until_expiration(body.expiration_date, now),
        due_alert=due_alert(
            body.expiration_date,
            now,
            schedule=settings.CERT_ALERT_SCHEDULE_DAYS,
            already_sent=body.alerts_sent,
        ),
        style=StatusStyleResponse.from_style(style_for(state)),
    )


@router.post("/validate-number", response_model=NumberValidationResponse)
async def check_number(body: NumberValidationRequest):
    """Check a certificate number against its type's format."""
    valid = validate_certificate_number(body.certificate_type, body.number)
    if not valid:
        logger.info(
            "certificate_number_rejected",
            certificate_type=body.certificate_type.value,
        )
    return NumberValidationResponse(
        certificate_type=body.certificate_type,
        number=body.number,
        valid=valid,
    )
