"""Publish date normalization for Atom and RSS output."""

from datetime import date, datetime, timezone, tzinfo
from email.utils import format_datetime

from dateutil import parser as date_parser
from dateutil import tz as date_tz

from .exceptions import DateParseError
from .models import DateFormat, FeedFormat


def get_timezone(name: str) -> tzinfo:
    """Resolve a timezone name, raising ValueError for unknown names."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    zone = date_tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone: {name}")
    return zone


def to_datetime(value, date_format: DateFormat, tz: tzinfo) -> datetime:
    """Read a raw publish date into an aware datetime.

    The representation is chosen by ``date_format``; values are never
    inspected to guess it.

    Raises:
        DateParseError: If ``value`` is not readable under ``date_format``
    """
    if date_format is DateFormat.STRUCTURED:
        if isinstance(value, datetime):
            result = value
        elif isinstance(value, date):
            result = datetime(value.year, value.month, value.day)
        else:
            raise DateParseError(value, date_format.value, "expected a date or datetime")

    elif date_format is DateFormat.TIMESTAMP:
        if isinstance(value, bool):
            raise DateParseError(value, date_format.value, "expected a number")
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            raise DateParseError(value, date_format.value, "expected a number") from None
        try:
            return datetime.fromtimestamp(seconds, tz)
        except (OverflowError, OSError, ValueError) as e:
            raise DateParseError(value, date_format.value, str(e)) from e

    else:
        if not isinstance(value, str) or not value.strip():
            raise DateParseError(value, date_format.value, "expected a date string")
        try:
            result = date_parser.parse(value)
        except (ValueError, OverflowError) as e:
            raise DateParseError(value, date_format.value, str(e)) from e

    # Naive values are wall-clock time in the feed's timezone
    if result.tzinfo is None:
        result = result.replace(tzinfo=tz)
    try:
        return result.astimezone(tz)
    except (OverflowError, ValueError) as e:
        raise DateParseError(value, date_format.value, str(e)) from e


def format_date(
    value,
    date_format: DateFormat = DateFormat.TEXTUAL,
    feed_format: FeedFormat = FeedFormat.ATOM,
    tz: tzinfo = timezone.utc,
) -> str:
    """Format a raw publish date for the given feed format.

    Atom dates are ISO-8601 with a numeric offset
    (``2024-01-02T15:04:05-07:00``), RSS dates are RFC-822
    (``Tue, 02 Jan 2024 15:04:05 -0700``).
    """
    moment = to_datetime(value, date_format, tz).replace(microsecond=0)
    if feed_format is FeedFormat.RSS:
        return format_datetime(moment)
    return moment.isoformat()


def now_rfc2822(tz: tzinfo = timezone.utc) -> str:
    """Current time as an RFC-2822 string."""
    return format_datetime(datetime.now(tz).replace(microsecond=0))
