"""Reconstruction of timezone-qualified instants from statement date/time cells.

Statement exports encode the operation date in several ways: native
spreadsheet dates, numeric day serials (Excel/Lotus epoch ``1899-12-30``),
``DD.MM.YYYY`` or ``YYYY-MM-DD`` strings with or without a time, and
occasionally a separate time column. :func:`reconstruct_instant` tries these
interpretations in a fixed order and returns an aware ``datetime`` in the
configured institutional zone.

Rows that carry only a calendar day get a synthesized placeholder time of
``(9 + row_index % 9):00:00``. The placeholder only spreads untimed rows of the
same day across a 9-hour window so their relative order is reproducible; it is
not a claim about when the operation happened.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

from dateutil import parser as dtparser

EXCEL_EPOCH = datetime(1899, 12, 30)
SECONDS_PER_DAY = 86_400

# Numeric strings are only read as day serials inside this window
# (1970-01-01 .. 2064-04-08); other bare numbers are not dates.
_SERIAL_STRING_MIN = 25_569
_SERIAL_STRING_MAX = 60_000

_PLACEHOLDER_BASE_HOUR = 9
_PLACEHOLDER_SPREAD = 9

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

_CLOCK = r"(\d{1,2}):(\d{2})(?::(\d{2})(?:[.,](\d{1,6})\d*)?)?"
_DMY_DATETIME_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})(?:\s+|T)?" + _CLOCK + r"$")
_YMD_DATETIME_RE = re.compile(
    r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:\s+|T)?" + _CLOCK + r"\s*(Z|[+-]\d{2}:?\d{2})?$"
)
_DMY_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})")
_YMD_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")

# dateutil fills missing date components from ``default``. A free-form string
# counts as a date only when two different defaults give the same calendar
# day, i.e. the text itself names day, month and year.
_FREEFORM_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


# ---------------------------------------------------------------------------
# Time-cell normalization
# ---------------------------------------------------------------------------


def _format_seconds(total: int) -> str:
    total %= SECONDS_PER_DAY
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def normalize_time_cell(value: Any) -> str | None:
    """Normalize a raw time cell to ``HH:MM:SS``; ``None`` when absent/invalid.

    - numbers are a fraction of a day, rounded to the nearest second;
    - strings must look like ``H:MM`` or ``H:MM:SS``;
    - native ``time``/``datetime`` cells contribute their time-of-day.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.strftime("%H:%M:%S")
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    if isinstance(value, int | float):
        if not math.isfinite(value) or value < 0:
            return None
        return _format_seconds(math.floor(value * SECONDS_PER_DAY + 0.5))
    if isinstance(value, str):
        m = _TIME_RE.match(value.strip())
        if not m:
            return None
        hours, minutes = int(m.group(1)), int(m.group(2))
        seconds = int(m.group(3) or 0)
        if hours > 23 or minutes > 59 or seconds > 59:
            return None
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return None


def _clock(hms: str) -> time:
    hours, minutes, seconds = (int(part) for part in hms.split(":"))
    return time(hours, minutes, seconds)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def placeholder_time(row_index: int) -> time:
    """Deterministic stand-in time for a row that has a date but no time."""

    return time(_PLACEHOLDER_BASE_HOUR + row_index % _PLACEHOLDER_SPREAD)


def _localize(naive: datetime, zone: tzinfo) -> datetime:
    return naive.replace(tzinfo=zone)


def _to_zone(value: datetime, zone: tzinfo) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        return _localize(value, zone)
    return value.astimezone(zone)


def _is_midnight(value: datetime) -> bool:
    return value.hour == 0 and value.minute == 0 and value.second == 0 and value.microsecond == 0


def _from_serial(serial: float, hms: str | None, zone: tzinfo) -> datetime | None:
    if not math.isfinite(serial):
        return None
    days = math.floor(serial)
    if hms is not None:
        t = _clock(hms)
        seconds = t.hour * 3600 + t.minute * 60 + t.second
    else:
        seconds = math.floor((serial - days) * SECONDS_PER_DAY + 0.5)
    try:
        return _localize(EXCEL_EPOCH + timedelta(days=days, seconds=seconds), zone)
    except OverflowError:
        return None


def _offset_tz(token: str) -> tzinfo:
    if token == "Z":
        return timezone.utc
    sign = -1 if token[0] == "-" else 1
    digits = token[1:].replace(":", "")
    return timezone(sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:])))


def _match_datetime(s: str, zone: tzinfo) -> datetime | None:
    m = _DMY_DATETIME_RE.match(s)
    if m:
        day, month, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        clock = m.groups()[3:]
        offset_token = None
    else:
        m = _YMD_DATETIME_RE.match(s)
        if not m:
            return None
        year, month, day = int(m.group(1)), int(m.group(2)), int(m.group(3))
        clock = m.groups()[3:7]
        offset_token = m.group(8)

    hours, minutes, seconds, fraction = clock
    micro = int((fraction or "0").ljust(6, "0"))
    try:
        naive = datetime(year, month, day, int(hours), int(minutes), int(seconds or 0), micro)
    except ValueError:
        return None
    if offset_token:
        return naive.replace(tzinfo=_offset_tz(offset_token)).astimezone(zone)
    return _localize(naive, zone)


def _match_date(s: str) -> date | None:
    m = _DMY_DATE_RE.match(s)
    if m:
        day, month, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
    else:
        m = _YMD_DATE_RE.match(s)
        if not m:
            return None
        year, month, day = int(m.group(1)), int(m.group(2)), int(m.group(3))
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_freeform(s: str, hms: str | None, zone: tzinfo) -> datetime | None:
    try:
        parsed = dtparser.parse(s, dayfirst=True, default=_FREEFORM_DEFAULTS[0])
        check = dtparser.parse(s, dayfirst=True, default=_FREEFORM_DEFAULTS[1])
    except (ValueError, OverflowError):
        return None
    if parsed.date() != check.date():
        # "12:30", "May", "5 March": no full date in the text
        return None
    if hms is not None and _is_midnight(parsed):
        parsed = datetime.combine(parsed.date(), _clock(hms), tzinfo=parsed.tzinfo)
    return _to_zone(parsed, zone)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def reconstruct_instant(
    date_value: Any,
    time_value: Any,
    row_index: int,
    zone: tzinfo,
) -> datetime | None:
    """Resolve raw date/time cells into an aware ``datetime`` in ``zone``.

    Resolution order (first success wins):

    1. native ``datetime``/``date`` values; a midnight value is combined with
       the time cell when one is present;
    2. numbers as day serials from ``1899-12-30`` (a time cell overrides the
       fractional part);
    3. strings: ``DD.MM.YYYY HH:MM[:SS]`` / ``YYYY-MM-DD HH:MM[:SS]``, then
       date-only ``DD.MM.YYYY`` / ``YYYY-MM-DD`` (time from the time cell or
       the row placeholder), then free-form parsing.

    Returns ``None`` when no interpretation succeeds.
    """

    hms = normalize_time_cell(time_value)

    if isinstance(date_value, datetime):
        if hms is not None and _is_midnight(date_value):
            spliced = datetime.combine(date_value.date(), _clock(hms), tzinfo=date_value.tzinfo)
            return _to_zone(spliced, zone)
        return _to_zone(date_value, zone)

    if isinstance(date_value, date):
        clock = _clock(hms) if hms is not None else time()
        return _localize(datetime.combine(date_value, clock), zone)

    if isinstance(date_value, bool):
        return None

    if isinstance(date_value, int | float):
        return _from_serial(float(date_value), hms, zone)

    if not isinstance(date_value, str):
        return None

    s = date_value.strip()
    if not s:
        return None

    if _NUMBER_RE.match(s):
        serial = float(s)
        if _SERIAL_STRING_MIN < serial < _SERIAL_STRING_MAX:
            return _from_serial(serial, hms, zone)
        return None

    combined = _match_datetime(s, zone)
    if combined is not None:
        return combined

    day = _match_date(s)
    if day is not None:
        clock = _clock(hms) if hms is not None else placeholder_time(row_index)
        return _localize(datetime.combine(day, clock), zone)

    return _parse_freeform(s, hms, zone)


def end_of_day(day: date, zone: tzinfo) -> datetime:
    """Last representable millisecond of ``day`` in ``zone``."""

    return datetime.combine(day, time(23, 59, 59, 999_000), tzinfo=zone)


def format_instant(value: datetime) -> str:
    """ISO-8601 with millisecond precision and UTC offset."""

    return value.isoformat(timespec="milliseconds")


__all__ = [
    "EXCEL_EPOCH",
    "end_of_day",
    "format_instant",
    "normalize_time_cell",
    "placeholder_time",
    "reconstruct_instant",
]
