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

from datetime import datetime

import pytest

from humania.core import validators
from humania.core.handlers import ResolutionContext
from humania.core.locale import Locale


@pytest.fixture(scope="module")
def context():
    return ResolutionContext(anchor=datetime(2024, 1, 10, 15), locale=Locale.load("en"))


@pytest.mark.parametrize(
    "number, suffix, expected",
    [
        (1, "st", True),
        (2, "nd", True),
        (2, "rd", False),
        (3, "rd", True),
        (4, "th", True),
        (11, "th", True),
        (11, "st", False),
        (12, "nd", False),
        (13, "th", True),
        (21, "st", True),
        (22, "nd", True),
        (103, "rd", True),
        (112, "th", True),
        (2, None, True),
    ],
)
def test_ordinal(context, number, suffix, expected):
    assert validators.ordinal(context, number, suffix) is expected


@pytest.mark.parametrize(
    "hour, marker, expected",
    [(1, 0, True), (12, 1, True), (0, 1, False), (13, 1, False), (13, None, True), (None, 1, True)],
)
def test_meridiem(context, hour, marker, expected):
    assert validators.meridiem(context, hour, marker) is expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ((23, 59, 59), True),
        ((0, 0, None), True),
        ((24, 0, None), False),
        ((9, 60, None), False),
        ((9, 30, 60), False),
        ((9, None, None), True),
    ],
)
def test_clock(context, values, expected):
    assert validators.clock(context, *values) is expected


@pytest.mark.parametrize(
    "count, plural, expected",
    [(1, 0, True), (1, 1, False), (3, 0, False), (3, 1, True), (0, 1, True), (3, "hari", True), (None, 0, True)],
)
def test_suffix(context, count, plural, expected):
    assert validators.suffix(context, count, plural) is expected


def test_ordinal_suffix_is_inherited():
    assert Locale.load("id").ordinal_suffix(2) == "nd"
    assert Locale.load("base").ordinal_suffix(2) is None


def test_every_check_is_registered():
    assert set(validators.CHECKS) == {"ordinal", "meridiem", "clock", "suffix"}
