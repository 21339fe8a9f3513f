"""Time conversion and visibility classification helpers.

All functions here are pure: "now" is always passed in by the caller, so the
same inputs always produce the same classification.

Upstream clock times are treated as UTC (USNO is queried with ``tz=0``) and
no timezone conversion is applied when combining them with a date.
"""

import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

import pytz

from skytonight.models import Visibility

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
CLOCK_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")

# Altitude above which an object is comfortably placed for naked-eye viewing
GOOD_ALTITUDE_DEG = 30.0

# Celestial navigation data has no rise/set times, so a half-day arc is assumed
ESTIMATED_HALF_ARC = timedelta(hours=6)


def utc_now() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(pytz.UTC)


def is_iso_date(value: str) -> bool:
    """Return True if value looks like ``YYYY-MM-DD``."""
    return isinstance(value, str) and ISO_DATE_PATTERN.fullmatch(value) is not None


def normalize_clock_time(value: str) -> str:
    """Reduce an upstream time string such as ``"6:34"`` or ``"06:34 ST"`` to ``"06:34"``.

    Raises:
        ValueError: If no HH:MM component can be found
    """
    match = CLOCK_TIME_PATTERN.search(value or "")
    if not match:
        raise ValueError(f"Unrecognized clock time: {value!r}")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def time_to_iso(date: str, time: str) -> str:
    """Combine a ``YYYY-MM-DD`` date and an ``HH:MM`` time into a UTC ISO datetime."""
    return f"{date}T{time}:00Z"


def next_day(date: str) -> str:
    """Return the calendar day after ``date`` as ``YYYY-MM-DD``."""
    day = datetime.strptime(date, "%Y-%m-%d")
    return (day + timedelta(days=1)).strftime("%Y-%m-%d")


def parse_iso(value: str) -> datetime:
    """Parse an ISO datetime string into an aware UTC datetime.

    Naive values are taken to be UTC.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return pytz.UTC.localize(parsed)
    return parsed.astimezone(pytz.UTC)


def to_iso(moment: datetime) -> str:
    """Format an aware datetime as a minute-precision UTC ISO string."""
    return moment.astimezone(pytz.UTC).strftime("%Y-%m-%dT%H:%M:00Z")


def format_time(iso_string: str) -> str:
    """Return the ``HH:MM`` part of an ISO datetime for display.

    Never raises; input that cannot be interpreted is returned unchanged.
    """
    if not isinstance(iso_string, str):
        return iso_string

    match = re.search(r"T(\d{2}):(\d{2})", iso_string)
    if match:
        return f"{match.group(1)}:{match.group(2)}"

    try:
        return parse_iso(iso_string).strftime("%H:%M")
    except (ValueError, TypeError, AttributeError):
        return iso_string


def sun_visibility(sunset: str, next_sunrise: Optional[str], now: datetime) -> Visibility:
    """Classify the Sun as ``poor`` between sunset and the next sunrise, else ``good``.

    Without a known next sunrise, any instant after sunset counts as night.
    """
    if now > parse_iso(sunset):
        if next_sunrise is None or now < parse_iso(next_sunrise):
            return Visibility.POOR
    return Visibility.GOOD


def moon_visibility(moonrise: str, moonset: str, now: datetime) -> Visibility:
    """Classify the Moon as ``good`` while it is up, else ``poor``.

    Handles the wraparound case where the set time precedes the rise time.
    """
    rise = parse_iso(moonrise)
    set_ = parse_iso(moonset)

    if set_ < rise:
        up = now >= rise or now < set_
    else:
        up = rise <= now < set_

    return Visibility.GOOD if up else Visibility.POOR


def altitude_visibility(altitude_deg: float) -> Visibility:
    """Classify by altitude: above 30° good, above the horizon ok, otherwise poor."""
    if altitude_deg > GOOD_ALTITUDE_DEG:
        return Visibility.GOOD
    if altitude_deg > 0:
        return Visibility.OK
    return Visibility.POOR


def estimate_rise_set(altitude_deg: float, now: datetime) -> Tuple[str, str]:
    """Estimate a rise/set window for an object with only a current altitude.

    Above the horizon: rose six hours ago, sets in six hours.
    Below the horizon: rises in six hours, sets in eighteen.

    Returns:
        Tuple of (rise_time, set_time) as ISO strings
    """
    now = now.replace(second=0, microsecond=0)
    if altitude_deg > 0:
        rise = now - ESTIMATED_HALF_ARC
        set_ = now + ESTIMATED_HALF_ARC
    else:
        rise = now + ESTIMATED_HALF_ARC
        set_ = now + 3 * ESTIMATED_HALF_ARC
    return to_iso(rise), to_iso(set_)
