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
Grammar driven parser of human date/time expressions.

    parser = DateTimeParser(locale="en")
    parser.parse("next friday", anchor=datetime(2024, 1, 10, 15))
    # datetime(2024, 1, 12, 0, 0)
"""

from .core.errors import (
    AmbiguousRangeError,
    CompileError,
    HumaniaError,
    NoMatch,
    Unimplemented,
    ValidationFailure,
)
from .parser import DateTimeParser

__all__ = [
    "DateTimeParser",
    "HumaniaError",
    "CompileError",
    "NoMatch",
    "ValidationFailure",
    "AmbiguousRangeError",
    "Unimplemented",
]
