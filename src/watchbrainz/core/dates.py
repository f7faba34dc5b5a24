"""
Date helpers and the "unknown release date" sentinel (stdlib-only).

MusicBrainz leaves ``first-release-date`` empty for unannounced releases and
often only knows the year or the month. Dates are normalised to a full
calendar date before they reach the ledger:

    ""          → 2030-12-31  (UNSET_DATE)
    "2005"      → 2005-12-31
    "2005-02"   → 2005-02-28
    "2005-02-14"→ 2005-02-14
    "2030", "2030-12" → 2030-12-30  (one day short of the sentinel)

``UNSET_DATE`` is a real date so it sorts and compares in SQL, but Python
code must never do arithmetic on it: check ``is_unset_date()`` first.

STDLIB ONLY - NO PYDANTIC.
"""

from __future__ import annotations

import calendar
from datetime import UTC, date, datetime, timedelta

UNSET_DATE = date(2030, 12, 31)

DATE_FORMAT = "%Y-%m-%d"


def is_unset_date(value: date) -> bool:
    """True if *value* is the "release date unknown" sentinel."""
    return value == UNSET_DATE


def parse_catalog_date(value: str | None) -> date:
    """Parse a possibly-partial MusicBrainz date.

    Missing components round *up* (end of year / end of month) so that a
    release known only as "2031" is not treated as already out.

    Raises:
        ValueError: *value* is not ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``.
    """
    if value is None or not value.strip():
        return UNSET_DATE
    parts = value.strip().split("-")
    if len(parts) > 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Unparseable date: {value!r}")
    year = int(parts[0])
    if len(parts) == 3:
        return date(year, int(parts[1]), int(parts[2]))
    month = int(parts[1]) if len(parts) == 2 else 12
    rounded = date(year, month, calendar.monthrange(year, month)[1])
    # A partial date must stay distinguishable from the sentinel
    if rounded == UNSET_DATE:
        return rounded - timedelta(days=1)
    return rounded


def format_date(value: date) -> str:
    """Storage format for release dates (``YYYY-MM-DD``)."""
    return value.strftime(DATE_FORMAT)


def parse_stored_date(value: str) -> date:
    """Inverse of :func:`format_date`."""
    return datetime.strptime(value, DATE_FORMAT).date()


def year_or_present(value: date | None) -> str:
    """Year of *value*, or ``"present"`` when absent/unknown."""
    if value is None or is_unset_date(value):
        return "present"
    return str(value.year)


def to_rfc3339(dt: datetime) -> str:
    """Format as RFC 3339 UTC with a ``Z`` suffix."""
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def from_unix(seconds: int) -> datetime:
    """Timezone-aware UTC datetime for a unix timestamp."""
    return datetime.fromtimestamp(seconds, UTC)
