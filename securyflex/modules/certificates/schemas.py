"""Certificate module API schemas."""

from pydantic import BaseModel, Field

from securyflex.models.enums import AlertType, CertificateType, ValidityState
from securyflex.modules.presentation.schemas import StatusStyleResponse, UTCDateTime


class CertificateTypeResponse(BaseModel):
    code: CertificateType
    full_name: str
    display_name: str
    validity_years: int
    number_format: str


class ValidityRequest(BaseModel):
    issue_date: UTCDateTime
    expiration_date: UTCDateTime
    now: UTCDateTime | None = None          # defaults to server time
    warning_window_days: int | None = Field(None, ge=0)
    alerts_sent: list[AlertType] = []


class ValidityResponse(BaseModel):
    state: ValidityState
    days_until_expiration: int
    due_alert: AlertType | None
    style: StatusStyleResponse


class NumberValidationRequest(BaseModel):
    certificate_type: CertificateType
    number: str = Field(..., min_length=1, max_length=64)


class NumberValidationResponse(BaseModel):
    certificate_type: CertificateType
    number: str
    valid: bool
