from datetime import datetime, timezone


def utc_now() -> datetime:
    """Wall-clock time for callers that own timing; the rules never call this."""
    return datetime.now(timezone.utc)
