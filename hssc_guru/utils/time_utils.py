"""Timestamps and the countdown clock."""
from datetime import datetime, timezone


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_iso_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Accepts a trailing `Z`; naive values are taken as UTC. Anything else
    yields None.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_clock(seconds: int) -> str:
    """Remaining time as mm:ss; minutes keep counting past 59."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"
