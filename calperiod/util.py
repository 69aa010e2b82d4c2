"""Calendar unit constants for calperiod.

These are calendar-aware relativedelta values, so MONTH added to Jan 31 lands
on the last day of February rather than a fixed number of seconds later.
"""

from dateutil.relativedelta import relativedelta

DAY = relativedelta(days=1)
WEEK = relativedelta(weeks=1)
MONTH = relativedelta(months=1)
QUARTER = relativedelta(months=3)
SEMESTER = relativedelta(months=6)
YEAR = relativedelta(years=1)
