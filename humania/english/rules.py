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
Base rule set, in English word order.

Other locales reuse it through their token tables and override or remove
individual rules by name in their locale data.
"""

from ..core.grammar import action, check, rule

# "next friday" is the nearest following friday, "last friday" the nearest
# preceding one; "friday next week" keeps the full week semantics
NEAREST = {1: (None, None, 0), -1: (0, None, None)}

ORDINAL_CHECK = check("ordinal", "NTH", "SUFFIX")
SUFFIX_CHECK = check("suffix", "COUNT", "UNIT", flags={"UNIT": ("plural",)})
WEEKDAY_SUFFIX_CHECK = check("suffix", "COUNT", "WEEKDAYS", flags={"WEEKDAYS": ("plural",)})
TIME_CHECKS = (check("meridiem", "HOUR", "MERIDIEM"), check("clock", "HOUR", "MINUTE", "SECOND"))

SET_TIME = action("set_time", hour="HOUR", minute="MINUTE", second="SECOND", meridiem="MERIDIEM")
DAY_SHIFT = action("unit_variant", value="DAY_VARIANT", unit="day", truncate_to="day")
WEEKDAY = action("weekday", weekday="WEEKDAY")
NEAREST_WEEKDAY = action("weekday", weekday="WEEKDAY", variant="VARIANT", overrides=NEAREST)
AGO = action("relative_offset", count="COUNT", unit="UNIT", direction=-1)

BARE_WEEKDAY = ("week", "day")
BARE_TIME = ("day", None)

RULES = [
    # now, days and parts of days
    rule("now", "<NOW>", action("no_op")),
    rule("day", "<DAY_VARIANT>", DAY_SHIFT),
    rule("dayframe", "<DAYFRAME>", action("dayframe", frame="DAYFRAME")),
    rule("this_dayframe", "<THIS> <DAYFRAME>", action("dayframe", frame="DAYFRAME")),
    rule("day_dayframe", "<DAY_VARIANT> <DAYFRAME>", DAY_SHIFT, action("dayframe", frame="DAYFRAME")),
    rule("noon_midnight", "<NOON_MIDNIGHT>", action("daytime", hour="NOON_MIDNIGHT")),
    rule(
        "day_noon_midnight",
        ["<DAY_VARIANT> [<AT> ]<NOON_MIDNIGHT>", "<NOON_MIDNIGHT> <DAY_VARIANT>"],
        DAY_SHIFT,
        action("daytime", hour="NOON_MIDNIGHT"),
    ),
    rule(
        "noon_midnight_weekday",
        "<NOON_MIDNIGHT> <VARIANT> <WEEKDAY>",
        action("daytime", hour="NOON_MIDNIGHT"),
        NEAREST_WEEKDAY,
    ),
    rule(
        "dayframe_hour",
        "<HOUR> <IN> <THE> <DAYFRAME>",
        action("dayframe", frame="DAYFRAME", hour="HOUR"),
        checks=[check("meridiem", "HOUR", "DAYFRAME")],
    ),
    # last/this/next
    rule("variant_unit", "<VARIANT> <UNIT>", action("unit_variant", value="VARIANT", unit="UNIT", truncate_to="policy")),
    rule("weekday", "[<ON> ]<WEEKDAY>", WEEKDAY, truncate_to="day", prefer_future=BARE_WEEKDAY),
    rule("variant_weekday", "<VARIANT> <WEEKDAY>", NEAREST_WEEKDAY, truncate_to="day"),
    rule(
        "weekday_variant_week",
        ["<WEEKDAY> <VARIANT> <WEEK_WORD>", "<VARIANT> <WEEK_WORD> <WEEKDAY>"],
        action("weekday", weekday="WEEKDAY", variant="VARIANT"),
        truncate_to="day",
    ),
    rule("month_variant", "<VARIANT> <MONTH>", action("unit_variant", value="VARIANT", unit="year"), action("set_date", month="MONTH", day=1), truncate_to="day"),
    # ordinals within a unit
    rule(
        "nth_day_variant_week",
        "<ORDINAL> <DAY_WORD> <VARIANT> <WEEK_WORD>",
        action("nth_day_of_unit", nth="NTH", unit="week", variant="VARIANT"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "nth_day_variant_month",
        "<ORDINAL> <DAY_WORD> <VARIANT> <MONTH_WORD>",
        action("nth_day_of_unit", nth="NTH", unit="month", variant="VARIANT"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "nth_day_variant_year",
        "<ORDINAL> <DAY_WORD> <VARIANT> <YEAR_WORD>",
        action("nth_day_of_unit", nth="NTH", unit="year", variant="VARIANT"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "nth_month_variant_year",
        "<ORDINAL> <MONTH_WORD> <VARIANT> <YEAR_WORD>",
        action("nth_month_of_year", nth="NTH", variant="VARIANT"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "nth_weekday_variant_month",
        "<ORDINAL> <WEEKDAY> <VARIANT> <MONTH>",
        action("nth_weekday_of_month", nth="NTH", weekday="WEEKDAY", month="MONTH", variant="VARIANT"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "nth_weekday_in_month",
        ["<ORDINAL> <WEEKDAY> <IN> <MONTH>", "<ORDINAL> <WEEKDAY> <OF> <MONTH>"],
        action("nth_weekday_of_month", nth="NTH", weekday="WEEKDAY", month="MONTH"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "nth_weekday",
        "<ORDINAL> <WEEKDAY>",
        action("nth_weekday_of_month", nth="NTH", weekday="WEEKDAY"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "nth_day",
        "<ORDINAL> <DAY_WORD>",
        action("nth_day_of_unit", nth="NTH", unit="year"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "final_weekday_in_month",
        ["<FINAL> <WEEKDAY> <IN> <MONTH>", "<FINAL> <WEEKDAY> <OF> <MONTH>"],
        action("last_weekday_of_month", weekday="WEEKDAY", month="MONTH"),
        truncate_to="day",
    ),
    rule(
        "weekday_from_now",
        ["<NUMBER> <WEEKDAYS> <FROM_NOW>", "<NUMBER> <WEEKDAY:WEEKDAYS> <FROM_NOW>"],
        action("weekday_from_now", count="COUNT", weekday="WEEKDAYS"),
        checks=[WEEKDAY_SUFFIX_CHECK],
        truncate_to="day",
    ),
    # counted offsets
    rule("ago", "<NUMBER> <UNIT> <AGO>", AGO, checks=[SUFFIX_CHECK]),
    rule(
        "now_relative",
        "<NUMBER> <UNIT> <BEFORE_AFTER> <NOW>",
        action("relative_offset", count="COUNT", unit="UNIT", direction="BEFORE_AFTER"),
        checks=[SUFFIX_CHECK],
    ),
    rule(
        "in_count_unit",
        "<IN> <NUMBER> <UNIT>",
        action("relative_offset", count="COUNT", unit="UNIT", direction=1),
        checks=[SUFFIX_CHECK],
    ),
    rule(
        "day_relative",
        "<NUMBER> <UNIT> <BEFORE_AFTER> <DAY_VARIANT>",
        DAY_SHIFT,
        action("relative_offset", count="COUNT", unit="UNIT", direction="BEFORE_AFTER"),
        checks=[SUFFIX_CHECK],
    ),
    rule(
        "noon_midnight_relative",
        "<NUMBER> <UNIT> <BEFORE_AFTER> <NOON_MIDNIGHT>",
        action("daytime", hour="NOON_MIDNIGHT"),
        action("relative_offset", count="COUNT", unit="UNIT", direction="BEFORE_AFTER"),
        checks=[SUFFIX_CHECK],
    ),
    rule(
        "day_ago",
        "<DAY_VARIANT> <NUMBER> <UNIT> <AGO>",
        action("unit_variant", value="DAY_VARIANT", unit="day"),
        AGO,
        checks=[SUFFIX_CHECK],
    ),
    rule(
        "weekday_ago",
        "<WEEKDAY> <NUMBER> <UNIT> <AGO>",
        AGO,
        WEEKDAY,
        checks=[SUFFIX_CHECK],
        truncate_to="day",
    ),
    # clock times
    rule("time", "[<AT> ]<TIME>", SET_TIME, checks=TIME_CHECKS, prefer_future=BARE_TIME),
    rule(
        "day_time",
        ["<DAY_VARIANT> [<AT> ]<TIME>", "<DAY_VARIANT> <AT> <HOUR>", "<TIME> <DAY_VARIANT>"],
        DAY_SHIFT,
        SET_TIME,
        checks=TIME_CHECKS,
    ),
    rule(
        "weekday_time",
        ["[<ON> ]<WEEKDAY> [<AT> ]<TIME>", "<TIME> [<ON> ]<WEEKDAY>"],
        WEEKDAY,
        SET_TIME,
        checks=TIME_CHECKS,
        prefer_future=BARE_WEEKDAY,
    ),
    rule(
        "variant_weekday_time",
        ["<VARIANT> <WEEKDAY> [<AT> ]<TIME>", "<TIME> <VARIANT> <WEEKDAY>"],
        NEAREST_WEEKDAY,
        SET_TIME,
        checks=TIME_CHECKS,
    ),
    rule(
        "weekday_dayframe_hour",
        "<WEEKDAY> <HOUR> <IN> <THE> <DAYFRAME>",
        WEEKDAY,
        action("dayframe", frame="DAYFRAME", hour="HOUR"),
        checks=[check("meridiem", "HOUR", "DAYFRAME")],
        prefer_future=BARE_WEEKDAY,
    ),
    rule(
        "weekday_ago_time",
        "<WEEKDAY> <NUMBER> <UNIT> <AGO> <AT> <TIME>",
        AGO,
        WEEKDAY,
        SET_TIME,
        checks=(SUFFIX_CHECK,) + TIME_CHECKS,
    ),
    rule(
        "month_day_time",
        "<MONTH> <DAY> [<AT> ]<TIME>",
        action("set_date", month="MONTH", day="NTH"),
        SET_TIME,
        checks=(ORDINAL_CHECK,) + TIME_CHECKS,
        prefer_future=("year", "day"),
    ),
    # calendar dates
    rule("month", "[<IN> ]<MONTH>", action("set_date", month="MONTH", day=1), truncate_to="day", prefer_future=("year", "month")),
    rule(
        "month_day",
        ["<MONTH> <DAY>", "<DAY> [<OF> ]<MONTH>", "<THE> <DAY> <OF> <MONTH>"],
        action("set_date", month="MONTH", day="NTH"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
        prefer_future=("year", "day"),
    ),
    rule(
        "day_month_variant_year",
        "<DAY> <MONTH> <VARIANT> <YEAR_WORD>",
        action("unit_variant", value="VARIANT", unit="year"),
        action("set_date", month="MONTH", day="NTH"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule(
        "day_month_ago",
        "<DAY> <MONTH> <NUMBER> <UNIT> <AGO>",
        AGO,
        action("set_date", month="MONTH", day="NTH"),
        checks=[ORDINAL_CHECK, SUFFIX_CHECK],
        truncate_to="day",
    ),
    rule(
        "full_date",
        ["<MONTH> <DAY>[,] <YEAR>", "<DAY> [<OF> ]<MONTH>[,] <YEAR>"],
        action("set_date", year="YEAR", month="MONTH", day="NTH"),
        checks=[ORDINAL_CHECK],
        truncate_to="day",
    ),
    rule("month_year", "<MONTH>[,] <YEAR>", action("set_date", year="YEAR", month="MONTH", day=1), truncate_to="day"),
    rule("year", "[<IN> ]<YEAR>", action("set_date", year="YEAR", month=1, day=1), truncate_to="day"),
    # first and last days
    rule(
        "first_last_day_variant_unit",
        "<FIRST_LAST> <DAY_WORD> <OF> <VARIANT> <PERIOD>",
        action("unit_variant", value="VARIANT", unit="UNIT", flags={"UNIT": ("unit",)}),
        action("first_last_day", which="FIRST_LAST", unit="UNIT", flags={"UNIT": ("unit",)}),
        truncate_to="day",
    ),
    rule(
        "first_last_day_of_month",
        "<FIRST_LAST> <DAY_WORD> <OF> <MONTH>",
        action("set_date", month="MONTH", day=1),
        action("first_last_day", which="FIRST_LAST", unit="month"),
        truncate_to="day",
    ),
    rule(
        "first_last_day_of_year",
        "<FIRST_LAST> <DAY_WORD> <OF> <YEAR>",
        action("set_date", year="YEAR", month=1, day=1),
        action("first_last_day", which="FIRST_LAST", unit="year"),
        truncate_to="day",
    ),
]
