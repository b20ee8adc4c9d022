"""Date parsing and formatting shared by the codec and the door registry.

Timestamps are exchanged as ISO-8601 UTC strings with a trailing ``Z`` and
millisecond precision, the format browsers produce for ``Date.toISOString``.
Parsing is best-effort and will not raise; callers should expect ``None``
when a value cannot be interpreted.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo


def local_timezone() -> tzinfo:
    """Return the machine's current local timezone."""
    tz = datetime.now().astimezone().tzinfo
    return tz if tz is not None else timezone.utc


def local_midnight(day: date, tz: tzinfo | None = None) -> datetime:
    """Return an aware datetime for 00:00 of `day` in `tz` (local by default)."""
    return datetime.combine(day, time.min, tzinfo=tz or local_timezone())


def format_iso_datetime(dt: datetime) -> str:
    """Format `dt` as ``YYYY-MM-DDTHH:MM:SS.sssZ`` in UTC.

    Naive datetimes are interpreted as local time. Sub-millisecond precision
    is kept (six fractional digits) so that formatting never loses data.
    """
    if dt.tzinfo is None:
        dt = dt.astimezone()
    utc = dt.astimezone(timezone.utc)
    if utc.microsecond % 1000:
        frac = f"{utc.microsecond:06d}"
    else:
        frac = f"{utc.microsecond // 1000:03d}"
    return utc.replace(tzinfo=None, microsecond=0).isoformat() + "." + frac + "Z"


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware datetime; None on failure."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _within_utc_range(dt)


def parse_date_input(value: str | None, tz: tzinfo | None = None) -> datetime | None:
    """Parse a ``YYYY-MM-DD`` form value into local midnight of that day."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        day = date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None
    return _within_utc_range(local_midnight(day, tz))


def _within_utc_range(dt: datetime) -> datetime | None:
    """Return `dt` made aware, or None when it has no UTC representation.

    Instants at the edges of year 1 or 9999 can be valid locally yet fall
    outside `datetime` once shifted to UTC.
    """
    try:
        if dt.tzinfo is None:
            dt = dt.astimezone()
        dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None
    return dt
