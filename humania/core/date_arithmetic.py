# Copyright (c) 2025 Ming Yu (yuming@oppo.com)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Date arithmetic primitives.

Every function is pure: it takes a datetime and returns a new one. Weekdays
are numbered 1 (Monday) to 7 (Sunday), weeks start on Monday.
"""

import calendar
from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from .errors import AmbiguousRangeError, ValidationFailure

UNITS = ("second", "minute", "hour", "day", "week", "month", "year")

# truncation applied after "<last|this|next> <unit>"
UNIT_TRUNCATION = {
    "second": None,
    "minute": "minute",
    "hour": "hour",
    "day": "day",
    "week": "day",
    "month": "month",
    "year": "year",
}

# (T < C, T == C, T > C) branch selectors for last / this / next
VARIANT_PARAMS = {
    -1: (-1, -1, -1),
    0: (0, 0, 0),
    1: (1, 1, 1),
}

WeekdayParams = Tuple[int, int, int]


def _check_unit(unit: str) -> str:
    if unit not in UNITS:
        raise ValueError(f"unknown unit: {unit!r}")
    return unit


def shift(moment: datetime, unit: str, amount: int) -> datetime:
    """Add amount units; month and year arithmetic clamps to the month end."""
    _check_unit(unit)
    return moment + relativedelta(**{unit + "s": amount})


def truncate(moment: datetime, unit: Optional[str]) -> datetime:
    """
    Zero every field finer than unit.

    Week truncation lands on Monday 00:00. None leaves the moment as is.
    """
    if unit is None:
        return moment
    _check_unit(unit)
    if unit == "second":
        return moment.replace(microsecond=0)
    if unit == "minute":
        return moment.replace(second=0, microsecond=0)
    if unit == "hour":
        return moment.replace(minute=0, second=0, microsecond=0)
    day = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if unit == "day":
        return day
    if unit == "week":
        return day - timedelta(days=day.weekday())
    if unit == "month":
        return day.replace(day=1)
    return day.replace(month=1, day=1)


def iso_weekday(moment: datetime) -> int:
    return moment.isoweekday()


def merge_params(base: WeekdayParams, overrides: Optional[Sequence[Optional[int]]]) -> WeekdayParams:
    """Replace the components of base that overrides sets (None keeps base)."""
    if not overrides:
        return base
    if len(overrides) != 3:
        raise ValueError(f"weekday overrides need three components, got {overrides!r}")
    return tuple(b if o is None else o for b, o in zip(base, overrides))


def weekday_delta(target: int, current: int, params: WeekdayParams) -> int:
    """
    Day offset from weekday current to weekday target.

    params picks, for T < C, T == C and T > C, whether to stay in the current
    week (0), go back a week (-1) or go forward a week (+1).
    """
    if not 1 <= target <= 7 or not 1 <= current <= 7:
        raise ValueError(f"weekday out of range: target={target}, current={current}")
    if target < current:
        branch = params[0]
    elif target == current:
        branch = params[1]
    else:
        branch = params[2]
    if branch not in (-1, 0, 1):
        raise ValueError(f"weekday branch selector out of range: {branch!r}")
    return (target - current) + 7 * branch


def calc_weekday(moment: datetime, target: int, params: WeekdayParams = (0, 0, 0)) -> datetime:
    return moment + timedelta(days=weekday_delta(target, iso_weekday(moment), params))


def unit_variant(moment: datetime, flag: int, unit: str, truncate_to: Optional[str] = None) -> datetime:
    """Add flag units (flag is -1, 0 or +1 for last, this, next), then truncate."""
    return truncate(shift(moment, unit, flag), truncate_to)


def relative_offset(moment: datetime, magnitude: int, unit: str, direction: int) -> datetime:
    """magnitude units before (direction -1) or after (direction +1) moment."""
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or 1, got {direction!r}")
    return shift(moment, unit, magnitude * direction)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_day_of(moment: datetime, unit: str) -> datetime:
    """First instant of the week, month or year containing moment."""
    if unit not in ("week", "month", "year"):
        raise ValueError(f"first day of a {unit} is undefined")
    return truncate(moment, unit)


def last_day_of(moment: datetime, unit: str) -> datetime:
    """Start of the last day of the unit: the day before the next unit starts."""
    start = first_day_of(moment, unit)
    return shift(start, unit, 1) - timedelta(days=1)


def nth_day_of_unit(moment: datetime, nth: int, unit: str) -> datetime:
    """
    Start of the nth day of the week, month or year containing moment.

    Raises:
        AmbiguousRangeError: the unit has fewer than nth days
    """
    start = first_day_of(moment, unit)
    length = (shift(start, unit, 1) - start).days
    if not 1 <= nth <= length:
        raise AmbiguousRangeError(f"day {nth} does not exist in a {unit} of {length} days")
    return start + timedelta(days=nth - 1)


def nth_month_of_year(moment: datetime, nth: int) -> datetime:
    if not 1 <= nth <= 12:
        raise AmbiguousRangeError(f"month {nth} does not exist in a year")
    return truncate(moment, "year").replace(month=nth)


def nth_weekday_of_month(year: int, month: int, weekday: int, nth: int) -> int:
    """
    Day of month of the nth given weekday.

    Raises:
        AmbiguousRangeError: the month has fewer than nth such weekdays
    """
    first = datetime(year, month, 1).isoweekday()
    day = 1 + (weekday - first) % 7 + 7 * (nth - 1)
    if nth < 1 or day > days_in_month(year, month):
        raise AmbiguousRangeError(
            f"{calendar.month_name[month]} {year} has no occurrence {nth} of weekday {weekday}"
        )
    return day


def last_weekday_of_month(year: int, month: int, weekday: int) -> int:
    last = days_in_month(year, month)
    return last - (datetime(year, month, last).isoweekday() - weekday) % 7


def set_date(moment: datetime, year: Optional[int] = None, month: Optional[int] = None, day: Optional[int] = None) -> datetime:
    """
    Replace date fields.

    Raises:
        AmbiguousRangeError: the resulting date does not exist
    """
    fields = {k: v for k, v in (("year", year), ("month", month), ("day", day)) if v is not None}
    try:
        return moment.replace(**fields)
    except ValueError as exc:
        raise AmbiguousRangeError(f"no such date: {fields} ({exc})") from exc


def resolve_meridiem(hour: int, meridiem: int) -> int:
    """
    24 hour value of an hour with an am (0) / pm (1) marker.

    Raises:
        ValidationFailure: hour outside 1 to 12
    """
    if not 1 <= hour <= 12:
        raise ValidationFailure(f"hour {hour} cannot take a meridiem marker", check="meridiem")
    if meridiem not in (0, 1):
        raise ValueError(f"meridiem must be 0 (am) or 1 (pm), got {meridiem!r}")
    if hour == 12:
        return 12 if meridiem else 0
    return hour + 12 if meridiem else hour


def set_time(moment: datetime, hour: int, minute: int = 0, second: int = 0) -> datetime:
    try:
        return moment.replace(hour=hour, minute=minute, second=second, microsecond=0)
    except ValueError as exc:
        raise ValidationFailure(f"invalid clock time {hour}:{minute}:{second}", check="clock") from exc


def prefer_future(moment: datetime, anchor: datetime, step: str, granularity: Optional[str] = None) -> datetime:
    """
    Move moment one step forward when it falls before the anchor.

    Both sides are compared after truncation to granularity, so a bare
    weekday resolving to today is not pushed to next week. Month and year
    steps keep the day of month: february 29 moves to the next leap year.

    Raises:
        AmbiguousRangeError: no later month or year has that day
    """
    if truncate(moment, granularity) >= truncate(anchor, granularity):
        return moment
    if step not in ("month", "year"):
        return shift(moment, step, 1)
    # relativedelta clamps to the month end, skip the months that lack the day
    for amount in range(1, 9):
        stepped = shift(moment, step, amount)
        if stepped.day == moment.day:
            return stepped
    raise AmbiguousRangeError(f"no later {step} has day {moment.day} of {moment:%B}")
