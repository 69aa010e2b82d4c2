import logging
from dataclasses import FrozenInstanceError
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from dateutil.relativedelta import relativedelta

from calperiod import (
    Interval,
    OrderingError,
    RangeError,
    Settings,
    ValidationError,
)

UTC = Settings(tz="UTC")


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=ZoneInfo("UTC"))


def test_constructor_resolves_strings() -> None:
    interval = Interval("2012-01-01", "2012-02-17", settings=UTC)

    assert interval.start == utc(2012, 1, 1)
    assert interval.end == utc(2012, 2, 17)


def test_constructor_accepts_dates_and_datetimes() -> None:
    interval = Interval(date(2012, 1, 1), datetime(2012, 1, 2, 12), settings=UTC)

    assert interval.start == utc(2012, 1, 1)
    assert interval.end == utc(2012, 1, 2, 12)


def test_constructor_keeps_aware_datetimes() -> None:
    start = datetime(2012, 1, 1, tzinfo=timezone(timedelta(hours=2)))
    interval = Interval(start, "2012-01-02T00:00:00+00:00")

    assert interval.start is start
    assert interval.start.utcoffset() == timedelta(hours=2)


def test_constructor_uses_settings_zone_for_naive_input() -> None:
    paris = Settings(tz="Europe/Paris")
    interval = Interval("2012-01-01", "2012-07-01", settings=paris)

    assert interval.start.utcoffset() == timedelta(hours=1)
    assert interval.end.utcoffset() == timedelta(hours=2)


def test_constructor_rejects_inverted_endpoints() -> None:
    with pytest.raises(OrderingError):
        Interval("2012-02-17", "2012-01-01")


def test_constructor_allows_empty_interval() -> None:
    interval = Interval("2012-01-01", "2012-01-01")

    assert interval.start == interval.end
    assert not interval.contains("2012-01-01")


@pytest.mark.parametrize("bad", ["not a date at all", 20120101, None])
def test_constructor_rejects_unparsable_instants(bad: object) -> None:
    with pytest.raises(ValidationError):
        Interval(bad, "2012-01-01")  # type: ignore[arg-type]


def test_interval_is_frozen() -> None:
    interval = Interval.from_month(2012, 1)

    with pytest.raises(FrozenInstanceError):
        interval.start = utc(2011, 1, 1)  # type: ignore[misc]


def test_equal_intervals_hash_alike() -> None:
    built = Interval.from_month(2012, 1)
    parsed = Interval("2012-01-01", "2012-02-01")

    assert built == parsed
    assert len({built, parsed}) == 1


def test_canonical_string() -> None:
    interval = Interval.from_month(2012, 1, settings=UTC)

    assert str(interval) == "2012-01-01T00:00:00+0000/2012-02-01T00:00:00+0000"


# --- Factories ---


def test_from_duration_with_text() -> None:
    interval = Interval.from_duration("2012-01-01", "3 MONTH", settings=UTC)

    assert interval.end == utc(2012, 4, 1)


def test_from_duration_with_structured_values() -> None:
    start = utc(2012, 1, 1)

    assert Interval.from_duration(start, relativedelta(months=3)).end == utc(2012, 4, 1)
    assert Interval.from_duration(start, timedelta(hours=6)).end == utc(2012, 1, 1, 6)


def test_from_duration_rejects_negative_duration() -> None:
    with pytest.raises(OrderingError):
        Interval.from_duration("2012-01-01", "-1 day")


def test_from_month() -> None:
    assert Interval.from_month(2012, 11) == Interval(
        "2012-11-01T00:00:00", "2012-12-01T00:00:00"
    )


def test_from_week_spans_seven_days_from_monday() -> None:
    interval = Interval.from_week(2012, 3, settings=UTC)

    assert interval.start == utc(2012, 1, 16)
    assert interval.start.weekday() == 0
    assert interval.start.isocalendar()[:2] == (2012, 3)
    assert interval.elapsed() == timedelta(days=7)


def test_from_week_53_rolls_over_in_short_years() -> None:
    # 2014 has 52 ISO weeks, 2015 has 53
    short = Interval.from_week(2014, 53, settings=UTC)
    long = Interval.from_week(2015, 53, settings=UTC)

    assert short.start == utc(2014, 12, 29)
    assert short.start.isocalendar()[:2] == (2015, 1)
    assert long.start == utc(2015, 12, 28)
    assert long.start.isocalendar()[:2] == (2015, 53)


def test_from_quarter() -> None:
    assert Interval.from_quarter(2012, 2) == Interval("2012-04-01", "2012-07-01")
    assert Interval.from_quarter(2012, 4) == Interval("2012-10-01", "2013-01-01")


def test_from_semester() -> None:
    assert Interval.from_semester(2012, 1) == Interval("2012-01-01", "2012-07-01")
    assert Interval.from_semester(2012, 2) == Interval("2012-07-01", "2013-01-01")


def test_from_year() -> None:
    assert Interval.from_year(2012) == Interval("2012-01-01", "2013-01-01")


def test_factories_accept_integer_text() -> None:
    assert Interval.from_month("2012", "11") == Interval.from_month(2012, 11)


@pytest.mark.parametrize(
    "factory,args",
    [
        (Interval.from_week, (2012, 54)),
        (Interval.from_week, (2012, 0)),
        (Interval.from_month, (2012, 13)),
        (Interval.from_quarter, (2012, 5)),
        (Interval.from_semester, (2012, 3)),
    ],
)
def test_factories_reject_out_of_range_units(factory, args) -> None:
    with pytest.raises(RangeError):
        factory(*args)


@pytest.mark.parametrize(
    "factory,args",
    [
        (Interval.from_month, (2012, "x")),
        (Interval.from_month, ("twenty", 1)),
        (Interval.from_week, (2012.5, 3)),
        (Interval.from_year, (None,)),
    ],
)
def test_factories_reject_non_integers(factory, args) -> None:
    with pytest.raises(ValidationError):
        factory(*args)


@pytest.mark.parametrize("year", [0, 9999, 10000])
def test_factories_reject_unrepresentable_years(year: int) -> None:
    # 9999 itself is fine as a start, but its end falls in year 10000
    with pytest.raises(ValidationError):
        Interval.from_year(year)


def test_from_week_logs_resolution(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="calperiod.interval"):
        Interval.from_week(2012, 3)

    assert "Resolved week 3 of 2012" in caplog.text
