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

"""English number words generated with inflect."""

from typing import Dict

import inflect

_inflect = inflect.engine()


def _with_space_variant(table: Dict[str, int]) -> Dict[str, int]:
    # "twenty-one" is also written "twenty one"
    for word, value in list(table.items()):
        table.setdefault(word.replace("-", " "), value)
    return table


def cardinal_words(limit: int = 99) -> Dict[str, int]:
    """one .. ninety-nine -> 1 .. 99"""
    return _with_space_variant({_inflect.number_to_words(n): n for n in range(1, limit + 1)})


def ordinal_words(limit: int = 31) -> Dict[str, int]:
    """first .. thirty-first -> 1 .. 31"""
    table = {}
    for n in range(1, limit + 1):
        table[_inflect.ordinal(_inflect.number_to_words(n))] = n
    return _with_space_variant(table)


def ordinal_suffix(number: int) -> str:
    """Suffix of the written ordinal: 1 -> st, 12 -> th, 22 -> nd."""
    return _inflect.ordinal(number)[len(str(number)):]
