"""GPS API router: reading classification, check-in and geofence checks."""

from fastapi import APIRouter

from securyflex.core.config import settings
from securyflex.modules.gps.classifier import (
    GPSThresholds,
    allows_check_in,
    classify,
    mark_improving,
)
from securyflex.modules.gps.schemas import (
    CheckInRequest,
    CheckInResponse,
    ClassifyRequest,
    ClassifyResponse,
    FixIn,
    GeofenceRequest,
    GeofenceResultResponse,
    SiteIn,
)
from securyflex.modules.gps.service import (
    CheckInVerifier,
    JobSite,
    LocationFix,
    StaticLocationProvider,
    check_geofences,
)
from securyflex.modules.presentation.schemas import StatusStyleResponse
from securyflex.modules.presentation.styles import style_for

router = APIRouter(prefix="/gps", tags=["gps"])


def _thresholds() -> GPSThresholds:
    return GPSThresholds.from_settings(settings)


def _to_fix(fix: FixIn) -> LocationFix:
    return LocationFix(
        latitude=fix.latitude,
        longitude=fix.longitude,
        accuracy_m=fix.accuracy_m,
        is_mock_location=fix.is_mock_location,
        timestamp=fix.timestamp,
    )


def _to_site(site: SiteIn) -> JobSite:
    return JobSite(
        site_id=site.site_id,
        latitude=site.latitude,
        longitude=site.longitude,
        radius_m=site.radius_m if site.radius_m is not None else settings.GPS_DEFAULT_SITE_RADIUS_M,
    )


@router.post("/classify", response_model=ClassifyResponse)
async def classify_gps_reading(body: ClassifyRequest):
    """Classify a single reading the client already measured distance for."""
    radius = body.site_radius_m if body.site_radius_m is not None else settings.GPS_DEFAULT_SITE_RADIUS_M
    status = classify(
        body.accuracy_m,
        body.distance_m,
        body.is_mock_location,
        radius,
        _thresholds(),
    )
    status = mark_improving(body.previous_accuracy_m, body.accuracy_m, status)
    return ClassifyResponse(
        status=status,
        allows_check_in=allows_check_in(status),
        style=StatusStyleResponse.from_style(style_for(status)),
    )


@router.post("/check-in", response_model=CheckInResponse)
async def verify_check_in(body: CheckInRequest):
    """Verify a device fix against a job site's geofence."""
    fix = _to_fix(body.fix) if body.fix is not None else None
    previous_fix = _to_fix(body.previous_fix) if body.previous_fix is not None else None

    verifier = CheckInVerifier(StaticLocationProvider(fix), _thresholds())
    result = verifier.verify(
        _to_site(body.site),
        previous_accuracy_m=body.previous_accuracy_m,
        previous_fix=previous_fix,
    )

    return CheckInResponse(
        site_id=result.site_id,
        status=result.status,
        allowed=result.allowed,
        accuracy_m=result.reading.accuracy_m if result.reading else None,
        distance_m=result.reading.distance_m if result.reading else None,
        style=StatusStyleResponse.from_style(style_for(result.status)),
    )


@router.post("/geofences", response_model=list[GeofenceResultResponse])
async def check_site_geofences(body: GeofenceRequest):
    """Distance from one fix to several job sites, and whether it is inside each."""
    results = check_geofences(_to_fix(body.fix), [_to_site(s) for s in body.sites])
    return [
        GeofenceResultResponse(site_id=r.site_id, distance_m=r.distance_m, inside=r.inside)
        for r in results
    ]
