"""
Value formatting for iCalendar content lines (RFC 5545).

Dates come in as "YYYY-MM-DD" strings and go out as DATE ("20201231") or
UTC DATE-TIME ("20201231T235959Z") values. TEXT values are escaped, then
folded into continuation lines.
"""

import re
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

REVIEW_TIMEZONE = "America/Los_Angeles"
REVIEW_HOUR = 9
FOLD_OCTETS = 72  # i.e. excluding the leading HTAB and trailing CRLF
FOLD_SEPARATOR = "\n\t"

_DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")


def _parse_date(text: str | None):
    if not text or not _DATE_ONLY.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        return None


def parse_date_only(text: str | None) -> datetime | None:
    """e.g. "2020-12-31" -> 2020-12-31T00:00:00Z"""
    parsed = _parse_date(text)
    if parsed is None:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def parse_review_start(text: str | None, zone: str = REVIEW_TIMEZONE) -> datetime | None:
    """e.g. "2020-12-31" -> 2020-12-31T09:00:00 in `zone`, as a UTC instant."""
    parsed = _parse_date(text)
    if parsed is None:
        return None
    local = parsed.replace(hour=REVIEW_HOUR, tzinfo=ZoneInfo(zone))
    return local.astimezone(timezone.utc)


def date_only(dt: datetime) -> str:
    """e.g. 2020-12-31T23:59:59Z -> "20201231" """
    return dt.astimezone(timezone.utc).strftime("%Y%m%d")


def date_time_utc(dt: datetime) -> str:
    """e.g. 2020-12-31T23:59:59Z -> "20201231T235959Z" """
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def day_duration(start: datetime, end: datetime | None) -> str:
    """Whole days from `start` to `end` as a DURATION, e.g. "P14D"."""
    days = (end - start).days if end is not None else 0
    return f"P{days}D"


def escape(text: str) -> str:
    """Escape a TEXT value. BACKSLASH, SEMICOLON, COMMA and LF must be escaped."""
    return (
        text.strip()
        .replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def fold(text: str) -> str:
    """
    Split `text` into chunks of at most FOLD_OCTETS UTF-8 octets, joined with
    LF + HTAB. A character is never cut in half, so a chunk ending in a
    multi-byte character may come up a few octets short.

    ICalendar.insert() turns the LF into CRLF.
    """
    chunks = []
    chunk = []
    size = 0
    for char in text:
        width = len(char.encode("utf-8"))
        if chunk and size + width > FOLD_OCTETS:
            chunks.append("".join(chunk))
            chunk = []
            size = 0
        chunk.append(char)
        size += width
    if chunk:
        chunks.append("".join(chunk))
    return FOLD_SEPARATOR.join(chunks)
