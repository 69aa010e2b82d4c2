from .config import DEFAULT_SETTINGS, Settings
from .errors import (
    CalperiodError,
    LogicError,
    OrderingError,
    RangeError,
    ValidationError,
)
from .interval import Interval
from .util import DAY, MONTH, QUARTER, SEMESTER, WEEK, YEAR
from .validators import (
    validate_duration,
    validate_instant,
    validate_range,
    validate_year,
)

__all__ = [
    "Interval",
    "Settings",
    "DEFAULT_SETTINGS",
    "CalperiodError",
    "ValidationError",
    "RangeError",
    "OrderingError",
    "LogicError",
    "validate_instant",
    "validate_duration",
    "validate_year",
    "validate_range",
    "DAY",
    "WEEK",
    "MONTH",
    "QUARTER",
    "SEMESTER",
    "YEAR",
]
