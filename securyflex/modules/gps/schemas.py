"""GPS module API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from securyflex.models.enums import GPSStatus
from securyflex.modules.presentation.schemas import StatusStyleResponse, UTCDateTime


class ClassifyRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    accuracy_m: float
    distance_m: float | None = None
    is_mock_location: bool = False
    site_radius_m: float | None = None           # defaults to GPS_DEFAULT_SITE_RADIUS_M
    previous_accuracy_m: float | None = None     # enables the "improving" label


class ClassifyResponse(BaseModel):
    status: GPSStatus
    allows_check_in: bool
    style: StatusStyleResponse


class FixIn(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy_m: float
    is_mock_location: bool = False
    timestamp: UTCDateTime


class SiteIn(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    site_id: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    radius_m: float | None = Field(None, ge=0)


class CheckInRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    site: SiteIn
    fix: FixIn | None = None                     # None: location services disabled
    previous_accuracy_m: float | None = None
    previous_fix: FixIn | None = None            # enables the impossible-movement check


class CheckInResponse(BaseModel):
    site_id: str
    status: GPSStatus
    allowed: bool
    accuracy_m: float | None
    distance_m: float | None
    style: StatusStyleResponse


class GeofenceRequest(BaseModel):
    fix: FixIn
    sites: list[SiteIn] = Field(..., min_length=1)


class GeofenceResultResponse(BaseModel):
    site_id: str
    distance_m: float
    inside: bool
