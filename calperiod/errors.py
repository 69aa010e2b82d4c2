"""Exception hierarchy for calperiod.

Every failure raised by this package derives from CalperiodError, so callers
can catch the whole family at once or pick out a specific kind.
"""


class CalperiodError(Exception):
    """Base exception for all calperiod errors."""


class ValidationError(CalperiodError, ValueError):
    """An input could not be coerced to the structured type it stands for.

    Examples:
        - An instant string dateutil cannot parse
        - A duration expression with an unknown unit
        - A year (or week, month, ...) that is not an integer
    """


class RangeError(CalperiodError, ValueError):
    """An integer input fell outside its inclusive bounds.

    Examples:
        - Week outside 1-53
        - Month outside 1-12
        - Quarter outside 1-4
    """


class OrderingError(CalperiodError, ValueError):
    """A would-be interval has its start after its end."""


class LogicError(CalperiodError):
    """A combinator was called while its precondition does not hold.

    Examples:
        - intersect() on two intervals that do not overlap
        - gap() on two intervals that do overlap
    """
