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
Extended validators.

Pure predicates over resolved slot values, called as
``check(context, *values)`` in the order the CheckBinding lists its slots.
A slot the rule did not capture arrives as None and never fails a check.
"""


def ordinal(context, number, suffix) -> bool:
    """The written suffix agrees with the number: 2nd, 3rd, 11th, 22nd."""
    if number is None or suffix is None or not isinstance(number, int):
        return True
    expected = context.locale.ordinal_suffix(number)
    if expected is None:
        return True
    return str(suffix) == expected


def meridiem(context, hour, marker) -> bool:
    """An hour paired with am/pm (or a day frame) lies in 1 to 12."""
    if hour is None or marker is None:
        return True
    return isinstance(hour, int) and 1 <= hour <= 12


def clock(context, hour=None, minute=None, second=None) -> bool:
    """Hour, minute and second fit a 24 hour clock."""
    for value, limit in ((hour, 23), (minute, 59), (second, 59)):
        if value is None:
            continue
        if not isinstance(value, int) or not 0 <= value <= limit:
            return False
    return True


def suffix(context, count, plural) -> bool:
    """
    Singular and plural unit words agree with the count.

    plural is the unit word resolved through the locale's plural table:
    1 for a plural form, 0 for a singular one, anything else when the
    locale does not inflect the word.
    """
    if count is None or not isinstance(count, int) or plural not in (0, 1):
        return True
    return bool(plural) == (count != 1)


CHECKS = {
    "ordinal": ordinal,
    "meridiem": meridiem,
    "clock": clock,
    "suffix": suffix,
}
