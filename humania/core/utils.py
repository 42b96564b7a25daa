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
FST building blocks shared by the pattern compiler.
"""

import re
from typing import Iterable

import pynini
from pynini.lib import byte, pynutil

NEMO_SPACE = " "
NEMO_DIGIT = byte.DIGIT

delete_space = pynutil.delete(NEMO_SPACE)

# characters that would corrupt the ``SLOT: "literal"`` output format
RESERVED_CHARS = frozenset('"{}')

_WHITESPACE = re.compile(r"\s+")


def normalize_space(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return _WHITESPACE.sub(NEMO_SPACE, text).strip()


def literal(text: str) -> pynini.Fst:
    """Acceptor for exactly text, escaped for pynini string compilation."""
    return pynini.accep(pynini.escape(text))


def string_union(alternatives: Iterable[str]) -> pynini.Fst:
    """Acceptor for any of the literal alternatives."""
    return pynini.union(*[literal(alt) for alt in alternatives]).optimize()


def digit_run(min_len: int, max_len: int) -> pynini.Fst:
    """Acceptor for min_len to max_len ASCII digits."""
    return pynini.closure(NEMO_DIGIT, min_len, max_len).optimize()


def regex_source(alternatives: Iterable[str]) -> str:
    """Regex rendering of a literal set, longest alternative first."""
    ordered = sorted(alternatives, key=lambda alt: (-len(alt), alt))
    return "(?:" + "|".join(re.escape(alt) for alt in ordered) + ")"
