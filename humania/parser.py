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

import os
import time
from datetime import datetime
from typing import List, Optional, Sequence

from dateutil import tz

from .core.dispatcher import DispatchResult, MatchDispatcher
from .core.errors import CompileError, NoMatch, Unimplemented
from .core.grammar import RuleSpec
from .core.handlers import HANDLERS
from .core.locale import Locale
from .core.logger import get_logger
from .core.pattern_compiler import PatternCompiler
from .core.token_registry import TokenRegistry
from .core.validators import CHECKS
from .english.rules import RULES

DEFAULT_LOCALE = "en"


class DateTimeParser:
    """
    Resolve human date/time expressions against an anchor moment.

    The grammar of the locale is compiled once, here; the compiled rules are
    read-only afterwards and parse calls share no mutable state.

    Args:
        locale: locale code, HUMANIA_LOCALE or "en" when None
        prefer_future: push bare weekdays, times and months that fall
                       before the anchor to their next occurrence
        timezone: IANA zone of the default anchor, local time when None
        rules: rule set to compile, the base rule set by default
    """

    def __init__(
        self,
        locale: Optional[str] = None,
        prefer_future: bool = True,
        timezone: Optional[str] = None,
        rules: Optional[Sequence[RuleSpec]] = None,
    ):
        self.logger = get_logger(__name__)
        start_time = time.time()

        self.locale = Locale.load(locale or os.environ.get("HUMANIA_LOCALE", DEFAULT_LOCALE))
        self.tzinfo = None
        if timezone is not None:
            self.tzinfo = tz.gettz(timezone)
            if self.tzinfo is None:
                raise CompileError(f"unknown timezone: {timezone}")

        self.registry = TokenRegistry()
        self.locale.register(self.registry)
        specs = self.locale.apply_rule_overrides(RULES if rules is None else rules)

        compiler = PatternCompiler(self.registry, self.locale.name, HANDLERS, CHECKS)
        self.rules = compiler.compile_rules(specs)
        self.combined = compiler.build_combined(self.rules)
        self.dispatcher = MatchDispatcher(self.rules, self.combined, self.locale, prefer_future=prefer_future)

        self.logger.info(
            f"compiled {len(self.rules)}/{len(specs)} rules for locale {self.locale.name} "
            f"in {time.time() - start_time:.2f}s"
        )

    @property
    def rule_names(self) -> List[str]:
        """Compiled rule names in priority order."""
        return [rule.name for rule in self.rules]

    def now(self) -> datetime:
        return datetime.now(self.tzinfo)

    def preprocess(self, text: str) -> str:
        return self.dispatcher.preprocess(text)

    def match(self, text: str, anchor: Optional[datetime] = None) -> DispatchResult:
        """Dispatch text and return the full trace (fired rules, validation failures)."""
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")
        return self.dispatcher.dispatch(text, anchor if anchor is not None else self.now())

    def parse(self, text: str, anchor: Optional[datetime] = None, strict: bool = False) -> Optional[datetime]:
        """
        Resolve text to a datetime.

        Args:
            text: the expression, e.g. "next friday" or "3 days ago"
            anchor: reference moment, now by default
            strict: raise NoMatch instead of returning None

        Raises:
            AmbiguousRangeError: an ordinal or date names a day that does not exist
        """
        result = self.match(text, anchor)
        if result.moment is None and strict:
            raise NoMatch(text)
        return result.moment

    def parse_duration(self, text: str, anchor: Optional[datetime] = None):
        """Spans such as "for 4 days" are not supported."""
        raise Unimplemented("duration parsing is not supported")

    def parse_recurrence(self, text: str, anchor: Optional[datetime] = None):
        """Recurrences such as "every monday" are not supported."""
        raise Unimplemented("recurrence parsing is not supported")

    def format_datetime(self, moment: datetime) -> str:
        raise Unimplemented("formatting a datetime back to text is not supported")
