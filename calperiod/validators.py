"""Boundary coercion for Interval inputs.

Callers may hand Interval either structured values (datetime, date,
relativedelta, timedelta, int) or raw text. These functions resolve raw text
once, through python-dateutil, so the rest of the package only ever sees the
structured form. They hold no state.
"""

import logging
import re
from datetime import date, datetime, time, timedelta
from typing import TypeAlias

from dateutil import parser as dateparser
from dateutil.relativedelta import relativedelta

from calperiod.config import DEFAULT_SETTINGS, Settings
from calperiod.errors import RangeError, ValidationError

logger = logging.getLogger(__name__)

Duration: TypeAlias = relativedelta | timedelta
InstantLike: TypeAlias = datetime | date | str
DurationLike: TypeAlias = relativedelta | timedelta | str

_INTEGER = re.compile(r"[+-]?\d+")

_ISO_DURATION = re.compile(
    r"(?P<sign>[+-])?P"
    r"(?:(?P<years>\d+)Y)?"
    r"(?:(?P<months>\d+)M)?"
    r"(?:(?P<weeks>\d+)W)?"
    r"(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?",
    re.IGNORECASE,
)

# Separators are mutually exclusive so a failed match backtracks linearly
_TERM = r"[+-]?\d+\s*[a-z]+"
_TEXT_DURATION = re.compile(
    rf"{_TERM}(?:(?:\s*,\s*|\s+and\s+|\s+){_TERM})*", re.IGNORECASE
)
_TEXT_TERM = re.compile(r"([+-]?\d+)\s*([a-z]+)", re.IGNORECASE)

# unit name -> (relativedelta keyword, multiplier)
_UNITS: dict[str, tuple[str, int]] = {
    "sec": ("seconds", 1),
    "second": ("seconds", 1),
    "min": ("minutes", 1),
    "minute": ("minutes", 1),
    "hour": ("hours", 1),
    "day": ("days", 1),
    "week": ("weeks", 1),
    "fortnight": ("weeks", 2),
    "month": ("months", 1),
    "quarter": ("months", 3),
    "semester": ("months", 6),
    "year": ("years", 1),
}


def validate_instant(value: InstantLike, settings: Settings | None = None) -> datetime:
    """Resolve an instant to a timezone-aware datetime.

    Naive datetimes, dates and strings without an offset are placed in the
    zone named by ``settings.tz``.

    Raises:
        ValidationError: If the value is not a datetime, date or parsable string
    """
    settings = settings or DEFAULT_SETTINGS

    if isinstance(value, datetime):
        resolved = value
    elif isinstance(value, date):
        resolved = datetime.combine(value, time.min)
    elif isinstance(value, str):
        resolved = _parse_instant(value, settings)
    else:
        raise ValidationError(
            f"Expected a datetime, date or string instant.\n"
            f"Got {type(value).__name__!r}: {value!r}"
        )

    if resolved.tzinfo is None:
        resolved = resolved.replace(tzinfo=settings.zone)
    return resolved


def _parse_instant(text: str, settings: Settings) -> datetime:
    text = text.strip()
    try:
        parsed = dateparser.isoparse(text)
        logger.debug("Parsed instant %r as ISO-8601", text)
        return parsed
    except (ValueError, OverflowError):
        pass

    try:
        parsed = dateparser.parse(
            text, dayfirst=settings.dayfirst, yearfirst=settings.yearfirst
        )
    except (ValueError, OverflowError) as exc:
        raise ValidationError(
            f"Could not parse {text!r} as an instant.\n"
            f"Examples: '2012-01-01', '2012-01-01T10:00:00+02:00', 'March 3 2014'"
        ) from exc
    logger.debug("Parsed instant %r with the free-form parser", text)
    return parsed


def validate_duration(value: DurationLike) -> Duration:
    """Resolve a duration to a relativedelta or timedelta.

    Strings may be ISO-8601 durations ("P3M", "PT12H") or human-readable
    expressions ("3 MONTHS", "1 year 2 days", "-1 day").

    Raises:
        ValidationError: If the value is neither a duration nor a parsable string
    """
    if isinstance(value, (relativedelta, timedelta)):
        return value
    if not isinstance(value, str):
        raise ValidationError(
            f"Expected a relativedelta, timedelta or string duration.\n"
            f"Got {type(value).__name__!r}: {value!r}"
        )

    text = value.strip()
    iso = _ISO_DURATION.fullmatch(text)
    if iso and any(v is not None for k, v in iso.groupdict().items() if k != "sign"):
        sign = -1 if iso["sign"] == "-" else 1
        parts = {
            k: sign * int(v)
            for k, v in iso.groupdict().items()
            if k != "sign" and v is not None
        }
        logger.debug("Parsed duration %r as ISO-8601", text)
        return relativedelta(**parts)

    if text and _TEXT_DURATION.fullmatch(text):
        fields: dict[str, int] = {}
        for amount, unit in _TEXT_TERM.findall(text):
            key = unit.lower()
            if key.endswith("s") and key[:-1] in _UNITS:
                key = key[:-1]
            if key not in _UNITS:
                raise ValidationError(
                    f"Unknown duration unit {unit!r} in {text!r}.\n"
                    f"Valid units: {', '.join(_UNITS)} (singular or plural)"
                )
            name, multiplier = _UNITS[key]
            fields[name] = fields.get(name, 0) + int(amount) * multiplier
        logger.debug("Parsed duration %r as a unit expression", text)
        return relativedelta(**fields)

    raise ValidationError(
        f"Could not parse {value!r} as a duration.\n"
        f"Examples: '3 MONTHS', '1 week', '2 days 4 hours', 'P3M', 'PT12H'"
    )


def _coerce_int(value: object, name: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER.fullmatch(value.strip()):
        return int(value.strip())
    raise ValidationError(f"{name} must be a valid integer, got {value!r}")


def validate_year(value: object) -> int:
    """Coerce a year to an int without losing information.

    Raises:
        ValidationError: If the value is not an integer (or integral text/float)
    """
    return _coerce_int(value, "year")


def validate_range(
    value: object, min_value: int, max_value: int, name: str = "value"
) -> int:
    """Coerce an integer and check it lies in [min_value, max_value].

    Raises:
        ValidationError: If the value is not an integer
        RangeError: If the integer falls outside the inclusive bounds
    """
    number = _coerce_int(value, name)
    if not (min_value <= number <= max_value):
        raise RangeError(
            f"{name} must be in range [{min_value}, {max_value}], got {number}"
        )
    return number
