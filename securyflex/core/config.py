from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from securyflex.models.enums import ALERT_STAGE_DAYS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_ENV: str = "development"
    APP_VERSION: str | None = None  # e.g. "1.2.3" or git SHA, used as Sentry release tag
    FRONTEND_URL: str = "http://localhost:3000"

    # Sentry error monitoring; no-op when SENTRY_DSN is unset
    SENTRY_DSN: str | None = None
    SENTRY_ENVIRONMENT: str = "development"

    # Certificates
    CERT_EXPIRY_WARNING_DAYS: int = 30
    CERT_ALERT_SCHEDULE_DAYS: list[int] = [90, 60, 30, 7, 1]

    # GPS accuracy bands (metres)
    GPS_EXCELLENT_ACCURACY_M: float = 5.0
    GPS_VERIFIED_ACCURACY_M: float = 10.0
    GPS_LOW_ACCURACY_M: float = 50.0
    GPS_FAILED_ACCURACY_M: float = 100.0
    GPS_SUSPICIOUS_ACCURACY_M: float | None = None  # e.g. 1.0 to flag "too perfect" fixes
    GPS_DEFAULT_SITE_RADIUS_M: float = 100.0
    GPS_MAX_SPEED_KMH: float = 200.0  # faster movement between fixes is treated as spoofing

    @model_validator(mode="after")
    def _validate_thresholds(self) -> "Settings":
        bands = [
            self.GPS_EXCELLENT_ACCURACY_M,
            self.GPS_VERIFIED_ACCURACY_M,
            self.GPS_LOW_ACCURACY_M,
            self.GPS_FAILED_ACCURACY_M,
        ]
        if bands != sorted(bands):
            raise ValueError("GPS accuracy thresholds must be non-decreasing")
        if self.CERT_EXPIRY_WARNING_DAYS < 0:
            raise ValueError("CERT_EXPIRY_WARNING_DAYS must be >= 0")
        unknown_stages = set(self.CERT_ALERT_SCHEDULE_DAYS) - ALERT_STAGE_DAYS.keys()
        if unknown_stages:
            raise ValueError(
                f"CERT_ALERT_SCHEDULE_DAYS has no reminder stage for {sorted(unknown_stages)}; "
                f"allowed: {sorted(ALERT_STAGE_DAYS)}"
            )
        if self.GPS_MAX_SPEED_KMH <= 0:
            raise ValueError("GPS_MAX_SPEED_KMH must be > 0")
        return self


settings = Settings()
