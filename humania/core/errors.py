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

"""Exceptions raised by the grammar compiler, the dispatcher and the arithmetic engine."""

from typing import Any, Dict, Optional


class HumaniaError(Exception):
    """Base class of every humania error."""


class CompileError(HumaniaError):
    """Malformed grammar: unknown reference, cycle, duplicate capture name.

    Only raised while a parser is being constructed.
    """


class NoMatch(HumaniaError):
    """No rule accepted the input, or every accepting rule failed validation.

    parse() reports this as None, it is only raised in strict mode.
    """

    def __init__(self, text: str):
        super().__init__(f"no rule matches {text!r}")
        self.text = text


class ValidationFailure(HumaniaError):
    """A rule's captures were rejected; only that rule is skipped."""

    def __init__(
        self,
        message: str,
        rule: Optional[str] = None,
        check: Optional[str] = None,
        captures: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.rule = rule
        self.check = check
        self.captures = dict(captures or {})


class AmbiguousRangeError(HumaniaError, ValueError):
    """An ordinal or date asks for a day the resolved window does not have."""


class Unimplemented(HumaniaError, NotImplementedError):
    """Entry point intentionally not supported (durations, recurrences, formatting)."""
