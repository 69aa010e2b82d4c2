import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta
from typing_extensions import Self

from calperiod.config import DEFAULT_SETTINGS, Settings
from calperiod.errors import LogicError, OrderingError, ValidationError
from calperiod.util import MONTH, QUARTER, SEMESTER, WEEK, YEAR
from calperiod.validators import (
    Duration,
    DurationLike,
    InstantLike,
    validate_duration,
    validate_instant,
    validate_range,
    validate_year,
)

logger = logging.getLogger(__name__)

_CANONICAL = "%Y-%m-%dT%H:%M:%S%z"


def _shift(instant: datetime, duration: Duration, sign: int = 1) -> datetime:
    try:
        return instant + duration if sign > 0 else instant - duration
    except (OverflowError, ValueError) as exc:
        raise ValidationError(
            f"Shifting {instant.isoformat()} by {duration!r} leaves the "
            f"representable range of dates (years 1-9999)"
        ) from exc


@dataclass(frozen=True)
class Interval:
    """A half-open span of time, ``[start, end)``.

    Both endpoints accept datetimes, dates or strings; they are resolved to
    timezone-aware datetimes on construction. Every operation returns a new
    Interval built through this constructor, so ``start <= end`` always holds.

    Example:
        >>> Interval("2012-01-01", "2012-02-01").contains("2012-01-31")
        True
    """

    start: datetime
    end: datetime
    settings: Settings | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        start = validate_instant(self.start, self.settings)
        end = validate_instant(self.end, self.settings)
        if start > end:
            raise OrderingError(
                f"Interval start ({start.isoformat()}) must be <= end "
                f"({end.isoformat()})"
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def __str__(self) -> str:
        return f"{self.start.strftime(_CANONICAL)}/{self.end.strftime(_CANONICAL)}"

    def __contains__(self, instant: InstantLike) -> bool:
        return self.contains(instant)

    def _derive(self, start: InstantLike, end: InstantLike) -> Self:
        # Derived intervals resolve raw text with the receiver's settings
        return type(self)(start, end, self.settings)

    # Factories

    @classmethod
    def from_duration(
        cls,
        start: InstantLike,
        interval: DurationLike,
        settings: Settings | None = None,
    ) -> Self:
        """Build the interval that starts at ``start`` and lasts ``interval``.

        Raises:
            OrderingError: If the duration is negative
        """
        begin = validate_instant(start, settings)
        return cls(begin, _shift(begin, validate_duration(interval)), settings)

    @classmethod
    def from_week(
        cls, year: object, week: object, settings: Settings | None = None
    ) -> Self:
        """ISO week ``week`` of ``year``, Monday midnight to the next Monday.

        Week 53 of a year with only 52 ISO weeks rolls over into week 1 of the
        following year.
        """
        year = validate_year(year)
        week = validate_range(week, 1, 53, "week")
        zone = (settings or DEFAULT_SETTINGS).zone
        try:
            first_monday = datetime.fromisocalendar(year, 1, 1).replace(tzinfo=zone)
        except ValueError as exc:
            raise ValidationError(
                f"year must be within 1-9999 to resolve a week, got {year}"
            ) from exc
        start = _shift(first_monday, relativedelta(weeks=week - 1))
        logger.debug("Resolved week %d of %d to %s", week, year, start.isoformat())
        return cls.from_duration(start, WEEK, settings)

    @classmethod
    def from_month(
        cls, year: object, month: object, settings: Settings | None = None
    ) -> Self:
        """The calendar month ``month`` (1-12) of ``year``."""
        year = validate_year(year)
        month = validate_range(month, 1, 12, "month")
        return cls.from_duration(_month_start(year, month, settings), MONTH, settings)

    @classmethod
    def from_quarter(
        cls, year: object, quarter: object, settings: Settings | None = None
    ) -> Self:
        """The quarter ``quarter`` (1-4) of ``year``, three months long."""
        year = validate_year(year)
        quarter = validate_range(quarter, 1, 4, "quarter")
        month = (quarter - 1) * 3 + 1
        return cls.from_duration(
            _month_start(year, month, settings), QUARTER, settings
        )

    @classmethod
    def from_semester(
        cls, year: object, semester: object, settings: Settings | None = None
    ) -> Self:
        """The semester ``semester`` (1-2) of ``year``, six months long."""
        year = validate_year(year)
        semester = validate_range(semester, 1, 2, "semester")
        month = (semester - 1) * 6 + 1
        return cls.from_duration(
            _month_start(year, month, settings), SEMESTER, settings
        )

    @classmethod
    def from_year(cls, year: object, settings: Settings | None = None) -> Self:
        """January 1st of ``year`` to January 1st of the next year."""
        year = validate_year(year)
        return cls.from_duration(_month_start(year, 1, settings), YEAR, settings)

    # Endpoint and duration mutators. The receiver is never modified.

    def with_start(self, start: InstantLike) -> Self:
        return self._derive(start, self.end)

    def with_end(self, end: InstantLike) -> Self:
        return self._derive(self.start, end)

    def with_duration(self, interval: DurationLike) -> Self:
        """Keep the start, recompute the end as ``start + interval``."""
        return type(self).from_duration(self.start, interval, self.settings)

    def shifted_by(self, interval: DurationLike) -> Self:
        """Translate both endpoints by ``interval``.

        With a fixed timedelta the length is preserved exactly. Calendar
        offsets follow relativedelta rules, so shifting Jan 1 - Jan 31 by one
        month gives Feb 1 - Feb 28 (Feb 29 in leap years).
        """
        delta = validate_duration(interval)
        return self._derive(_shift(self.start, delta), _shift(self.end, delta))

    def add(self, interval: DurationLike) -> Self:
        """Move the end later by ``interval``; the start stays put."""
        return self._derive(self.start, _shift(self.end, validate_duration(interval)))

    def sub(self, interval: DurationLike) -> Self:
        """Move the end earlier by ``interval``; the start stays put.

        Raises:
            OrderingError: If the end would move before the start
        """
        return self._derive(
            self.start, _shift(self.end, validate_duration(interval), sign=-1)
        )

    def next(self, interval: DurationLike | None = None) -> Self:
        """The interval that starts where this one ends.

        Without ``interval`` the new interval lasts ``elapsed()``, the exact
        elapsed time of this one. That is not always the same calendar unit:
        ``from_month(2014, 2).next()`` covers 28 days of March, not all of it.
        Pass ``"1 MONTH"`` to step by calendar months.
        """
        delta = self.elapsed() if interval is None else validate_duration(interval)
        return self._derive(self.end, _shift(self.end, delta))

    def previous(self, interval: DurationLike | None = None) -> Self:
        """The interval that ends where this one starts. See ``next``."""
        delta = self.elapsed() if interval is None else validate_duration(interval)
        return self._derive(_shift(self.start, delta, sign=-1), self.start)

    # Durations

    def duration(self) -> relativedelta:
        """Calendar-aware length, e.g. ``relativedelta(months=+1)`` for a month."""
        return relativedelta(self.end, self.start)

    def elapsed(self) -> timedelta:
        return self.end - self.start

    def duration_greater_than(self, other: "Interval") -> bool:
        return self.end > _shift(self.start, other.duration())

    def same_duration_as(self, other: "Interval") -> bool:
        return self.end == _shift(self.start, other.duration())

    def range(self, interval: DurationLike) -> Iterator[datetime]:
        """Yield ``start``, ``start + interval``, ... while before ``end``.

        Each instant is computed from ``start`` directly, so month steps from
        Jan 31 give Feb 29, Mar 31, Apr 30 rather than drifting to the 28th.

        Raises:
            ValidationError: If ``interval`` is not a positive step
        """
        step = validate_duration(interval)
        if _shift(self.start, step) <= self.start:
            raise ValidationError(
                f"range() needs a positive step, got {step!r}.\n"
                f"Example: interval.range('1 day')"
            )

        def generate() -> Iterator[datetime]:
            count = 0
            current = self.start
            while current < self.end:
                yield current
                count += 1
                current = _shift(self.start, step * count)

        return generate()

    # Predicates and combinators

    def contains(self, instant: InstantLike) -> bool:
        """True if ``start <= instant < end``; the end itself is never contained."""
        moment = validate_instant(instant, self.settings)
        return self.start <= moment < self.end

    def overlaps(self, other: "Interval") -> bool:
        """True if the two intervals share at least one instant."""
        return self.start < other.end and other.start < self.end

    def abuts(self, other: "Interval") -> bool:
        """True if one interval ends exactly where the other starts."""
        return self.end == other.start or other.end == self.start

    def merge(self, other: "Interval", *others: "Interval") -> Self:
        """Smallest interval covering this one and every argument.

        The inputs need not overlap; any space between them is included.
        """
        everything = (self, other, *others)
        return self._derive(
            min(i.start for i in everything), max(i.end for i in everything)
        )

    def intersect(self, other: "Interval") -> Self:
        """The span shared by both intervals.

        Raises:
            LogicError: If the intervals do not overlap
        """
        if not self.overlaps(other):
            raise LogicError(
                f"Cannot intersect non-overlapping intervals {self} and {other}.\n"
                f"Hint: check overlaps() first, or use gap() for the space between"
            )
        return self._derive(max(self.start, other.start), min(self.end, other.end))

    def gap(self, other: "Interval") -> Self:
        """The span between two intervals that do not overlap.

        Adjacent intervals yield an empty interval at their shared boundary.

        Raises:
            LogicError: If the intervals overlap
        """
        if self.overlaps(other):
            raise LogicError(
                f"Cannot compute the gap between overlapping intervals "
                f"{self} and {other}.\n"
                f"Hint: use intersect() for the shared span"
            )
        earlier, later = sorted((self, other), key=lambda i: (i.start, i.end))
        return self._derive(earlier.end, later.start)


def _month_start(year: int, month: int, settings: Settings | None) -> datetime:
    zone = (settings or DEFAULT_SETTINGS).zone
    try:
        return datetime(year, month, 1, tzinfo=zone)
    except ValueError as exc:
        raise ValidationError(f"year must be within 1-9999, got {year}") from exc
