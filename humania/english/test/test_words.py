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
English number word tables
"""

import pytest

from humania.english import words


def test_cardinal_words():
    table = words.cardinal_words()
    assert table["one"] == 1
    assert table["twelve"] == 12
    assert table["twenty-one"] == 21
    assert table["twenty one"] == 21
    assert table["ninety-nine"] == 99
    assert "one hundred" not in table


def test_ordinal_words():
    table = words.ordinal_words()
    assert table["first"] == 1
    assert table["second"] == 2
    assert table["twelfth"] == 12
    assert table["thirty-first"] == 31
    assert table["thirty first"] == 31
    assert len(set(table.values())) == 31


@pytest.mark.parametrize(
    "number, suffix",
    [(1, "st"), (2, "nd"), (3, "rd"), (4, "th"), (11, "th"), (12, "th"), (13, "th"), (21, "st"), (101, "st"), (111, "th")],
)
def test_ordinal_suffix(number, suffix):
    assert words.ordinal_suffix(number) == suffix
