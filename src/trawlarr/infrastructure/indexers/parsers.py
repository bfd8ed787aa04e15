"""Text parsing helpers shared by scraping backends."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_SIZE_UNITS: dict[str, int] = {
    "B": 1,
    "BYTES": 1,
    "KB": 1024,
    "KIB": 1024,
    "MB": 1024**2,
    "MIB": 1024**2,
    "GB": 1024**3,
    "GIB": 1024**3,
    "TB": 1024**4,
    "TIB": 1024**4,
}

# Unit prefix -> seconds. Months and years are approximated.
_AGO_UNITS: tuple[tuple[str, int], ...] = (
    ("second", 1),
    ("minute", 60),
    ("hour", 3600),
    ("day", 86400),
    ("week", 7 * 86400),
    ("month", 30 * 86400),
    ("year", 365 * 86400),
)

_REQUEST_PREFIXES = ("[REQ]", "[REQUEST]", "[REQUESTED]")
_INT_RE = re.compile(r"^-?\d+$")


def parse_size(text: str) -> int | None:
    """``"1.5 GB"`` -> 1610612736. Binary multipliers; None when unparseable."""
    parts = text.strip().upper().split()
    if len(parts) < 2:
        return None
    multiplier = _SIZE_UNITS.get(parts[1])
    if multiplier is None:
        return None
    try:
        value = float(parts[0].replace(",", ""))
    except ValueError:
        return None
    return int(value * multiplier)


def parse_time_ago(text: str, *, now: datetime | None = None) -> datetime:
    """``"3 hours ago"`` -> now minus three hours; anything else -> now."""
    now = now or datetime.now(timezone.utc)
    parts = text.strip().lower().split()
    if len(parts) < 2:
        return now
    try:
        amount = int(parts[0])
    except ValueError:
        return now
    for prefix, seconds in _AGO_UNITS:
        if parts[1].startswith(prefix):
            return now - timedelta(seconds=amount * seconds)
    return now


def parse_int(text: str | None) -> int | None:
    if text is None:
        return None
    cleaned = text.strip().replace(",", "")
    if not _INT_RE.match(cleaned):
        return None
    return int(cleaned)


def clean_title(title: str) -> str:
    """Drop a leading request tag and surrounding ``-``/``:`` noise."""
    for prefix in _REQUEST_PREFIXES:
        if title.startswith(prefix):
            title = title[len(prefix) :].lstrip()
            break
    return title.strip().strip("-:").strip()
