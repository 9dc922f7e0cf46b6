"""Certificate validity rules as pure functions of (issue, expiration, now).

"now" is always passed in; nothing here reads the wall clock.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import datetime, timedelta

from securyflex.core.errors import InvalidRangeError
from securyflex.models.certificates import Certificate
from securyflex.models.enums import ALERT_STAGE_DAYS, AlertType, ValidityState

DEFAULT_WARNING_WINDOW_DAYS = 30
DEFAULT_ALERT_SCHEDULE: tuple[int, ...] = (90, 60, 30, 7, 1)


def evaluate(
    issue_date: datetime,
    expiration_date: datetime,
    now: datetime,
    warning_window_days: int = DEFAULT_WARNING_WINDOW_DAYS,
) -> ValidityState:
    """Classify a certificate as valid, expiring soon or expired at ``now``.

    A certificate is expired only strictly after its expiration instant, so
    at ``now == expiration_date`` it is still expiring soon.
    """
    if issue_date >= expiration_date:
        raise InvalidRangeError(issue_date, expiration_date)
    if warning_window_days < 0:
        raise ValueError("warning_window_days must be >= 0")

    if now > expiration_date:
        return ValidityState.EXPIRED
    if expiration_date - now <= timedelta(days=warning_window_days):
        return ValidityState.EXPIRING_SOON
    return ValidityState.VALID


def evaluate_certificate(
    certificate: Certificate,
    now: datetime,
    warning_window_days: int = DEFAULT_WARNING_WINDOW_DAYS,
) -> ValidityState:
    return evaluate(
        certificate.issue_date,
        certificate.expiration_date,
        now,
        warning_window_days,
    )


def days_until_expiration(expiration_date: datetime, now: datetime) -> int:
    """Whole days left, truncated toward zero; negative once expired."""
    return int((expiration_date - now) / timedelta(days=1))


def due_alert(
    expiration_date: datetime,
    now: datetime,
    schedule: Sequence[int] = DEFAULT_ALERT_SCHEDULE,
    already_sent: Collection[AlertType] = (),
) -> AlertType | None:
    """Pick the reminder to send for a certificate, if any.

    Expired certificates get ``EXPIRED``. Otherwise the tightest schedule
    stage the remaining days have reached wins, so a missed 60-day run does
    not resurface once the 30-day stage is due.
    """
    unknown = set(schedule) - ALERT_STAGE_DAYS.keys()
    if unknown:
        raise ValueError(f"no alert stage for {sorted(unknown)} days")

    if now > expiration_date:
        alert: AlertType | None = AlertType.EXPIRED
    else:
        remaining = days_until_expiration(expiration_date, now)
        reached = [d for d in schedule if remaining <= d]
        alert = ALERT_STAGE_DAYS[min(reached)] if reached else None

    if alert is None or alert in already_sent:
        return None
    return alert
