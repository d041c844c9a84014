"""Time helpers for provider timestamps and archive keys."""

from datetime import datetime, timedelta, timezone


def parse_provider_time(value: str) -> datetime:
    """Parse an ISO-8601 provider timestamp into an aware UTC datetime.

    Naive timestamps are taken to be UTC. A trailing ``Z`` is accepted.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def apply_time_correction(captured: datetime, correction: timedelta) -> datetime:
    """Subtract the provider's capture-time lag."""
    return captured - correction


def iso_timestamp(dt: datetime) -> str:
    """Format as UTC ISO-8601 with millisecond precision, e.g. 2023-10-18T10:33:56.000Z."""
    utc = dt.astimezone(timezone.utc) if dt.tzinfo else dt
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def safe_timestamp(dt: datetime) -> str:
    """ISO timestamp with colons replaced, safe for object keys and filenames."""
    return iso_timestamp(dt).replace(":", "-")


def date_component(dt: datetime) -> str:
    """UTC calendar date as YYYY-MM-DD."""
    utc = dt.astimezone(timezone.utc) if dt.tzinfo else dt
    return utc.strftime("%Y-%m-%d")
