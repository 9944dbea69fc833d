"""Moment-style datetime patterns.

Clients send device-time formats written for moment.js (`YYYY-MM-DDTHH:mm:ssZ`
and friends), so the patterns are rendered here token by token instead of
being translated to strftime. Text inside `[...]` is emitted literally and
characters that are not tokens are copied through.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

ISO8601_FORMAT = "YYYY-MM-DDTHH:mm:ssZ"

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_TOKEN_RE = re.compile(
    r"\[[^\]]*\]"
    r"|YYYY|YY|Q"
    r"|MMMM|MMM|MM|M"
    r"|DDDD|DDD|DD|Do|D"
    r"|dddd|ddd|dd|d|E"
    r"|HH|H|hh|h|kk|k"
    r"|mm|m|ss|s|SSS|SS|S"
    r"|A|a|ZZ|Z|X|x"
)


def _ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    return f"{n}" + {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def _offset(dt: datetime, sep: str) -> str:
    delta = dt.utcoffset() or timedelta(0)
    minutes = int(delta.total_seconds() // 60)
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}{sep}{mins:02d}"


def _hour12(dt: datetime) -> int:
    return dt.hour % 12 or 12


def _weekday_sunday_first(dt: datetime) -> int:
    return (dt.weekday() + 1) % 7


def _render(dt: datetime, token: str) -> str:
    if token.startswith("["):
        return token[1:-1]
    if token == "YYYY":
        return f"{dt.year:04d}"
    if token == "YY":
        return f"{dt.year % 100:02d}"
    if token == "Q":
        return str((dt.month - 1) // 3 + 1)
    if token == "MMMM":
        return _MONTHS[dt.month - 1]
    if token == "MMM":
        return _MONTHS[dt.month - 1][:3]
    if token == "MM":
        return f"{dt.month:02d}"
    if token == "M":
        return str(dt.month)
    if token == "DDDD":
        return f"{dt.timetuple().tm_yday:03d}"
    if token == "DDD":
        return str(dt.timetuple().tm_yday)
    if token == "DD":
        return f"{dt.day:02d}"
    if token == "Do":
        return _ordinal(dt.day)
    if token == "D":
        return str(dt.day)
    if token == "dddd":
        return _WEEKDAYS[_weekday_sunday_first(dt)]
    if token == "ddd":
        return _WEEKDAYS[_weekday_sunday_first(dt)][:3]
    if token == "dd":
        return _WEEKDAYS[_weekday_sunday_first(dt)][:2]
    if token == "d":
        return str(_weekday_sunday_first(dt))
    if token == "E":
        return str(dt.isoweekday())
    if token == "HH":
        return f"{dt.hour:02d}"
    if token == "H":
        return str(dt.hour)
    if token == "hh":
        return f"{_hour12(dt):02d}"
    if token == "h":
        return str(_hour12(dt))
    if token == "kk":
        return f"{dt.hour or 24:02d}"
    if token == "k":
        return str(dt.hour or 24)
    if token == "mm":
        return f"{dt.minute:02d}"
    if token == "m":
        return str(dt.minute)
    if token == "ss":
        return f"{dt.second:02d}"
    if token == "s":
        return str(dt.second)
    if token in ("S", "SS", "SSS"):
        return f"{dt.microsecond:06d}"[: len(token)]
    if token == "A":
        return "AM" if dt.hour < 12 else "PM"
    if token == "a":
        return "am" if dt.hour < 12 else "pm"
    if token == "ZZ":
        return _offset(dt, "")
    if token == "Z":
        return _offset(dt, ":")
    if token == "X":
        return str(int(dt.timestamp()))
    if token == "x":
        return str(int(dt.timestamp() * 1000))
    return token


def format_datetime(dt: datetime, pattern: str = ISO8601_FORMAT) -> str:
    """Render `dt` with a moment-style pattern.

    Naive datetimes are rendered with a `+00:00` offset.
    """

    return _TOKEN_RE.sub(lambda m: _render(dt, m.group(0)), pattern)
