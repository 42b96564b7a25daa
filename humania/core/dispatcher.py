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
Match dispatcher.

Normalizes the input, tests it against the combined acceptor and, when it is
accepted, runs every rule whose own tagger accepts it in priority order. Each
rule starts from the moment the previous rule returned.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from . import date_arithmetic as da
from .errors import ValidationFailure
from .handlers import ResolutionContext
from .logger import get_logger
from .pattern_compiler import CompiledRule
from .processor import Processor
from .utils import normalize_space


@dataclass
class DispatchResult:
    """Outcome of one dispatch: the moment (None for no match) and a trace."""

    text: str
    moment: Optional[datetime] = None
    fired: List[str] = field(default_factory=list)
    failures: List[ValidationFailure] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.moment is not None


def resolve_literal(literal: Optional[str], tables: Sequence[Mapping[str, Any]]) -> Any:
    """
    Semantic value of a captured literal.

    The first conversion table holding the literal wins, then ASCII digit
    strings become ints, anything else is returned unchanged.
    """
    if literal is None:
        return None
    for table in tables:
        if literal in table:
            return table[literal]
    if literal.isascii() and literal.isdigit():
        return int(literal)
    return literal


class MatchDispatcher:
    """
    Args:
        rules: compiled rules in priority order
        combined: processor holding the union acceptor of every rule
        locale: locale data exposed to checks through the context
        prefer_future: whether rules declaring prefer_future apply it
    """

    def __init__(self, rules: Sequence[CompiledRule], combined: Processor, locale: Any, prefer_future: bool = True):
        self.logger = get_logger(__name__)
        self.rules = tuple(rules)
        self.combined = combined
        self.locale = locale
        self.prefer_future = prefer_future

    @staticmethod
    def preprocess(text: str) -> str:
        """Case fold (host locale independent), trim and collapse whitespace."""
        return normalize_space(text.casefold())

    def dispatch(self, text: str, anchor: datetime) -> DispatchResult:
        normalized = self.preprocess(text)
        result = DispatchResult(normalized)
        if not normalized or not self.combined.accepts(normalized):
            self.logger.debug(f"no match: {normalized!r}")
            return result

        context = ResolutionContext(anchor=anchor, locale=self.locale)
        moment = anchor
        for rule in self.rules:
            captures = rule.tag(normalized)
            if captures is None:
                continue
            try:
                moment = self.fire(rule, captures, moment, context)
            except ValidationFailure as failure:
                failure.rule = failure.rule or rule.name
                failure.captures = failure.captures or dict(captures)
                result.failures.append(failure)
                self.logger.debug(f"rule {rule.name} skipped: {failure}")
                continue
            result.fired.append(rule.name)
            self.logger.debug(f"rule {rule.name} fired on {normalized!r}: {captures} -> {moment.isoformat()}")

        if result.fired:
            result.moment = moment
        else:
            self.logger.debug(f"no rule passed validation for {normalized!r}")
        return result

    def fire(self, rule: CompiledRule, captures: Dict[str, str], moment: datetime, context: ResolutionContext) -> datetime:
        """
        Run one rule's checks and handlers starting from moment.

        Raises:
            ValidationFailure: a check rejected the captures
        """
        for predicate, binding, tables in rule.checks:
            values = [resolve_literal(captures.get(slot), tables[slot]) for slot in binding.slots]
            if not predicate(context, *values):
                raise ValidationFailure(
                    f"check {binding.check} rejected {dict(zip(binding.slots, values))}",
                    rule=rule.name,
                    check=binding.check,
                    captures=captures,
                )

        for handler, binding, tables in rule.actions:
            kwargs = dict(binding.options)
            for param, slot in binding.args.items():
                value = resolve_literal(captures.get(slot), tables[slot])
                # optional captures that did not match leave the handler default
                if value is not None:
                    kwargs[param] = value
            moment = handler(moment, context, **kwargs)

        spec = rule.spec
        moment = da.truncate(moment, spec.truncate_to)
        if spec.prefer_future and self.prefer_future:
            step, granularity = spec.prefer_future
            moment = da.prefer_future(moment, context.anchor, step, granularity)
        return moment
