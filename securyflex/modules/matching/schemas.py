"""Matching module API schemas."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from securyflex.models.certificates import Certificate
from securyflex.models.enums import (
    CertificateType,
    MatchQuality,
    RequirementStatus,
    ValidityState,
)
from securyflex.modules.matching.algorithm import EligibilityResult
from securyflex.modules.presentation.schemas import UTCDateTime


class CertificateIn(BaseModel):
    id: str = Field(..., min_length=1)
    category: CertificateType
    holder_id: str = ""
    issuing_authority: str = ""
    issue_date: UTCDateTime
    expiration_date: UTCDateTime
    authorizations: list[str] = []

    @field_validator("category", mode="before")
    @classmethod
    def _upper_category(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_certificate(self, holder_id: str | None = None) -> Certificate:
        return Certificate(
            id=self.id,
            category=self.category,
            holder_id=self.holder_id if holder_id is None else holder_id,
            issuing_authority=self.issuing_authority,
            issue_date=self.issue_date,
            expiration_date=self.expiration_date,
            authorizations=tuple(self.authorizations),
        )


class EligibilityRequest(BaseModel):
    requirements: dict[str, list[str]]
    certificates: list[CertificateIn] = []
    now: UTCDateTime | None = None


class RequirementOutcomeResponse(BaseModel):
    requirement: str
    status: RequirementStatus
    certificate_id: str | None
    validity: ValidityState | None


class EligibilityResponse(BaseModel):
    requirements_met: dict[str, bool]
    missing_requirements: list[str]
    expired_requirements: list[str]
    expiring_requirements: list[str]
    eligibility_score: float
    is_eligible: bool
    match_quality: MatchQuality
    action_items: list[str]
    checked_at: UTCDateTime
    outcomes: dict[str, RequirementOutcomeResponse]

    @classmethod
    def from_result(cls, result: EligibilityResult) -> "EligibilityResponse":
        return cls.model_validate(result.to_dict())


class CertificateRegisteredResponse(BaseModel):
    holder_id: str
    certificate_id: str
    certificate_count: int


class HolderEligibilityRequest(BaseModel):
    requirements: dict[str, list[str]]
    now: UTCDateTime | None = None


class RankRequest(BaseModel):
    requirements: dict[str, list[str]]
    holder_ids: list[str] = Field(..., min_length=1)
    now: UTCDateTime | None = None


class RankedHolderResponse(BaseModel):
    holder_id: str
    result: EligibilityResponse
