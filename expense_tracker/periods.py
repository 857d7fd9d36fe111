"""Calendar-aligned period boundaries.

All periods are closed intervals: a value is inside when
``start <= value <= end``. Starts are floored to midnight and ends are
ceiled to the last representable instant of the day.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from expense_tracker.domain import Granularity, Period, to_date

DateLike = Union[date, datetime, str]

# fixed English names; strftime %a/%b/%B follow the process locale
WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTH_ABBR = tuple(name[:3] for name in MONTH_NAMES)


def weekday_abbr(d: DateLike) -> str:
    return WEEKDAY_ABBR[to_date(d).weekday()]


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def month_abbr(month: int) -> str:
    return MONTH_ABBR[month - 1]


def start_of_day(d: DateLike) -> datetime:
    return datetime.combine(to_date(d), time.min)


def end_of_day(d: DateLike) -> datetime:
    return datetime.combine(to_date(d), time.max)


def week_start(d: DateLike) -> date:
    """Most recent Sunday at or before `d`."""
    day = to_date(d)
    # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday=0
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_end(d: DateLike) -> date:
    day = to_date(d)
    if day.month == 12:
        first_of_next = date(day.year + 1, 1, 1)
    else:
        first_of_next = date(day.year, day.month + 1, 1)
    return first_of_next - timedelta(days=1)


def resolve_period(granularity, reference_date: Optional[DateLike] = None) -> Period:
    granularity = Granularity(granularity)
    ref = to_date(reference_date) if reference_date is not None else date.today()

    if granularity is Granularity.WEEKLY:
        first = week_start(ref)
        return Period(start_of_day(first), end_of_day(first + timedelta(days=6)))
    if granularity is Granularity.MONTHLY:
        return Period(start_of_day(ref.replace(day=1)), end_of_day(month_end(ref)))
    if granularity is Granularity.YEARLY:
        return Period(start_of_day(date(ref.year, 1, 1)), end_of_day(date(ref.year, 12, 31)))
    raise ValueError("custom periods need explicit bounds; use resolve_custom_period")


def resolve_custom_period(start_date: DateLike, end_date: DateLike) -> Period:
    # no reordering: an inverted range simply contains nothing
    return Period(start_of_day(start_date), end_of_day(end_date))
