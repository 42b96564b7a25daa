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
Semantic resolver handlers.

A handler receives the moment built so far, the resolution context and
keyword values (resolved captures plus static options), and returns the new
moment. Rules refer to handlers by their key in HANDLERS.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Sequence

from . import date_arithmetic as da
from .errors import AmbiguousRangeError

# hour a bare day frame resolves to: morning, afternoon, evening, night
DAYFRAME_HOURS = {0: 8, 1: 14, 2: 20, 3: 22}


@dataclass(frozen=True)
class ResolutionContext:
    """Read-only state of one parse call."""

    anchor: datetime
    locale: Any


def no_op(moment: datetime, context: ResolutionContext) -> datetime:
    return moment


def unit_variant(moment, context, value: int, unit: str, truncate_to: Optional[str] = None) -> datetime:
    """Shift by value units. truncate_to="policy" picks the per unit truncation."""
    if truncate_to == "policy":
        truncate_to = da.UNIT_TRUNCATION[unit]
    return da.unit_variant(moment, value, unit, truncate_to)


def relative_offset(moment, context, count: int, unit: str, direction: int = -1) -> datetime:
    """count units ago/before (direction -1) or from now/after/in (direction 1)."""
    return da.relative_offset(moment, count, unit, direction)


def weekday(
    moment,
    context,
    weekday: int,
    variant: int = 0,
    overrides: Optional[Mapping[int, Sequence[Optional[int]]]] = None,
) -> datetime:
    """Weekday of the last, this or next week, with partial per variant overrides."""
    params = da.merge_params(da.VARIANT_PARAMS[variant], (overrides or {}).get(variant))
    return da.calc_weekday(moment, weekday, params)


def nth_day_of_unit(moment, context, nth: int, unit: str, variant: int = 0) -> datetime:
    return da.nth_day_of_unit(da.shift(moment, unit, variant), nth, unit)


def nth_month_of_year(moment, context, nth: int, variant: int = 0) -> datetime:
    return da.nth_month_of_year(da.shift(moment, "year", variant), nth)


def nth_weekday_of_month(
    moment, context, nth: int, weekday: int, month: Optional[int] = None, variant: int = 0
) -> datetime:
    """nth weekday of month (the current month when None) in the year selected by variant."""
    window = da.shift(moment, "year", variant)
    month = month or window.month
    day = da.nth_weekday_of_month(window.year, month, weekday, nth)
    return da.set_date(window, window.year, month, day)


def last_weekday_of_month(moment, context, weekday: int, month: Optional[int] = None, variant: int = 0) -> datetime:
    window = da.shift(moment, "year", variant)
    month = month or window.month
    day = da.last_weekday_of_month(window.year, month, weekday)
    return da.set_date(window, window.year, month, day)


def weekday_from_now(moment, context, count: int, weekday: int) -> datetime:
    """The count-th occurrence of weekday strictly after moment."""
    if count < 1:
        raise AmbiguousRangeError(f"occurrence {count} of a weekday is undefined")
    first = da.calc_weekday(moment, weekday, (1, 1, 0))
    return first + timedelta(weeks=count - 1)


def first_last_day(moment, context, which: int, unit: str) -> datetime:
    """which is 1 for the first day of unit, -1 for the last one."""
    if which == 1:
        return da.first_day_of(moment, unit)
    if which == -1:
        return da.last_day_of(moment, unit)
    raise ValueError(f"first/last selector must be 1 or -1, got {which!r}")


def set_date(moment, context, year: Optional[int] = None, month: Optional[int] = None, day: Optional[int] = None) -> datetime:
    return da.set_date(moment, year, month, day)


def set_time(
    moment,
    context,
    hour: int,
    minute: Optional[int] = None,
    second: Optional[int] = None,
    meridiem: Optional[int] = None,
) -> datetime:
    if meridiem is not None:
        hour = da.resolve_meridiem(hour, meridiem)
    return da.set_time(moment, hour, minute or 0, second or 0)


def daytime(moment, context, hour: int) -> datetime:
    """noon, midnight: a whole hour."""
    return da.set_time(moment, hour)


def dayframe(moment, context, frame: int, hour: Optional[int] = None) -> datetime:
    """
    A part of the day.

    Without an hour the frame's default hour is used ("this evening"), with
    one the frame acts as a meridiem marker ("9 in the evening").
    """
    if hour is None:
        return da.set_time(moment, DAYFRAME_HOURS[frame])
    return da.set_time(moment, da.resolve_meridiem(hour, 0 if frame == 0 else 1))


HANDLERS = {
    "no_op": no_op,
    "unit_variant": unit_variant,
    "relative_offset": relative_offset,
    "weekday": weekday,
    "nth_day_of_unit": nth_day_of_unit,
    "nth_month_of_year": nth_month_of_year,
    "nth_weekday_of_month": nth_weekday_of_month,
    "last_weekday_of_month": last_weekday_of_month,
    "weekday_from_now": weekday_from_now,
    "first_last_day": first_last_day,
    "set_date": set_date,
    "set_time": set_time,
    "daytime": daytime,
    "dayframe": dayframe,
}
