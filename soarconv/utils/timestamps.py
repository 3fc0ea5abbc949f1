"""
Timestamp normalisation between FSR and FAS exports.

FSR stores Unix epoch seconds, FAS stores ISO-8601 strings. Both
conversions are total: malformed values fall back to the current time
and print a diagnostic instead of raising.

Numbers are disambiguated with a fixed threshold of 10,000,000,000: below it
a value is read as seconds, above it as milliseconds. Any epoch-seconds value
before the year 2286 is therefore treated as seconds.
"""

import math
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Optional

from .constants import EPOCH_MILLISECONDS_THRESHOLD

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_datetime(text: str) -> Optional[datetime]:
    """
    Parse a calendar/time string into an aware datetime.

    Accepts ISO-8601 (including a trailing ``Z``) and RFC 2822 dates.
    Strings without an offset are read as UTC.

    Args:
        text: Date string to parse

    Returns:
        Aware datetime, or None if the string is not a date
    """
    candidate = text.strip()
    if not candidate:
        return None

    iso_candidate = candidate
    if candidate[-1] in ("Z", "z"):
        iso_candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(iso_candidate)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(candidate)
        except (TypeError, ValueError, IndexError):
            return None
        if parsed is None:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_iso8601(moment: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    utc_moment = moment.astimezone(timezone.utc)
    return utc_moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TimestampNormalizer:
    """
    Converts timestamps between epoch seconds and ISO-8601 strings.

    The clock is injectable so fallbacks to "now" are deterministic in tests.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _utc_now

    def now(self) -> datetime:
        return self._clock()

    def now_epoch_seconds(self) -> int:
        return math.floor(self.now().timestamp())

    def now_iso8601(self) -> str:
        return format_iso8601(self.now())

    def to_epoch_seconds(self, value: Any) -> Any:
        """
        Convert a FAS date (ISO string) to FSR epoch seconds.

        Args:
            value: ISO string, epoch number, or None

        Returns:
            Whole seconds since the epoch. Numbers that already look like
            seconds are passed through unchanged.
        """
        if value is None or value == "":
            return self.now_epoch_seconds()

        if _is_number(value):
            if isinstance(value, float) and not math.isfinite(value):
                print(f"   ⚠️  Invalid date value: {value!r}, using current time")
                return self.now_epoch_seconds()
            if value > EPOCH_MILLISECONDS_THRESHOLD:
                return math.floor(value / 1000)
            return value

        if isinstance(value, str):
            parsed = parse_datetime(value)
            if parsed is not None:
                return math.floor(parsed.timestamp())

        print(f"   ⚠️  Invalid date value: {value!r}, using current time")
        return self.now_epoch_seconds()

    def to_iso8601(self, value: Any) -> str:
        """
        Convert an FSR date (epoch seconds or milliseconds) to a FAS ISO string.

        Args:
            value: Epoch number, ISO string, or None

        Returns:
            ISO-8601 string. Valid strings are returned unchanged.
        """
        if value is None or value == "":
            return self.now_iso8601()

        if isinstance(value, str):
            if parse_datetime(value) is not None:
                return value
            print(f"   ⚠️  Invalid date string: {value!r}, using current time")
            return self.now_iso8601()

        if _is_number(value):
            milliseconds = value * 1000 if value < EPOCH_MILLISECONDS_THRESHOLD else value
            try:
                return format_iso8601(EPOCH + timedelta(milliseconds=milliseconds))
            except (OverflowError, ValueError):
                pass

        print(f"   ⚠️  Invalid date value: {value!r}, using current time")
        return self.now_iso8601()
