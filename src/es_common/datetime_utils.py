"""UTC datetime utilities."""

from datetime import datetime, timezone

_NANOS_PER_SECOND = 1_000_000_000


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def from_nanos(nanos: int) -> datetime:
    """Actor timestamps are nanoseconds since the Unix epoch."""
    seconds, remainder = divmod(nanos, _NANOS_PER_SECOND)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(
        microsecond=remainder // 1000
    )
