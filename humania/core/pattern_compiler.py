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
Pattern compiler.

Expands rule templates into character level FSTs:

    <NAME>         token captured as NAME, or nested pattern (not captured)
    <NAME:ALIAS>   token captured as ALIAS
    [ ... ]        optional group
    whitespace     one separating space
    anything else  literal text

A captured token emits ``NAME: "literal" ``, literals and separators are
deleted, so a rule tagger rewrites ``next friday`` into
``variant_weekday { VARIANT: "next" WEEKDAY: "friday" }``. Every rule also gets
a regex equivalent source string whose length orders rules by specificity.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

import pynini
from pynini.lib import pynutil

from .errors import CompileError
from .grammar import ActionBinding, CheckBinding, RuleSpec
from .logger import get_logger
from .processor import Processor
from .token_registry import Pattern, Token, TokenRegistry
from .utils import delete_space, digit_run, literal, regex_source, string_union

_TEMPLATE_TOKEN = re.compile(r"<(\w+)(?::(\w+))?>|\[|\]|\s+|[^<>\[\]\s]+|[<>]")

CaptureSets = FrozenSet[FrozenSet[str]]


@dataclass
class Fragment:
    """Compiled piece of a template.

    paths holds the capture names of every distinct concatenation path,
    flags the conversion tables of each capture name.
    """

    fst: pynini.Fst
    source: str
    paths: CaptureSets = frozenset([frozenset()])
    flags: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def captures(self) -> FrozenSet[str]:
        return frozenset().union(*self.paths)


def _epsilon() -> Fragment:
    return Fragment(pynini.accep(""), "")


def _merge_flags(target: Dict[str, Tuple[str, ...]], other: Mapping[str, Tuple[str, ...]]) -> None:
    for name, tables in other.items():
        known = target.get(name, ())
        target[name] = known + tuple(t for t in tables if t not in known)


def _concat(left: Fragment, right: Fragment, where: str) -> Fragment:
    paths = set()
    for lhs in left.paths:
        for rhs in right.paths:
            duplicates = lhs & rhs
            if duplicates:
                raise CompileError(
                    f"{where}: duplicate capture name(s) {', '.join(sorted(duplicates))}"
                )
            paths.add(lhs | rhs)
    flags = dict(left.flags)
    _merge_flags(flags, right.flags)
    return Fragment(left.fst + right.fst, left.source + right.source, frozenset(paths), flags)


def _union(fragments: Sequence[Fragment]) -> Fragment:
    if len(fragments) == 1:
        return fragments[0]
    fst = pynini.union(*[frag.fst for frag in fragments]).optimize()
    source = "(?:" + "|".join(frag.source for frag in fragments) + ")"
    paths = frozenset().union(*[frag.paths for frag in fragments])
    flags: Dict[str, Tuple[str, ...]] = {}
    for frag in fragments:
        _merge_flags(flags, frag.flags)
    return Fragment(fst, source, paths, flags)


def parse_template(template: str) -> List[tuple]:
    """
    Split a template into nodes.

    Returns a list of ("lit", text), ("space",), ("ref", name, alias) and
    ("opt", nodes) tuples.
    """
    stack: List[List[tuple]] = [[]]
    position = 0
    for match in _TEMPLATE_TOKEN.finditer(template):
        if match.start() != position:
            raise CompileError(f"template {template!r}: cannot parse at {position}")
        position = match.end()
        text = match.group(0)
        nodes = stack[-1]
        if match.group(1):
            nodes.append(("ref", match.group(1), match.group(2)))
        elif text == "[":
            stack.append([])
        elif text == "]":
            if len(stack) == 1:
                raise CompileError(f"template {template!r}: unbalanced ']'")
            inner = stack.pop()
            stack[-1].append(("opt", inner))
        elif text.isspace():
            if nodes and nodes[-1] == ("space",):
                continue
            nodes.append(("space",))
        elif text in "<>":
            raise CompileError(f"template {template!r}: malformed reference")
        elif nodes and nodes[-1][0] == "lit":
            nodes[-1] = ("lit", nodes[-1][1] + text)
        else:
            nodes.append(("lit", text))
    if position != len(template):
        raise CompileError(f"template {template!r}: cannot parse at {position}")
    if len(stack) != 1:
        raise CompileError(f"template {template!r}: unbalanced '['")
    return stack[0]


class CompiledRule(Processor):
    """
    A rule ready for dispatch.

    Attributes:
        spec: the RuleSpec it was built from
        order: declaration order, the priority tie-break
        source: regex rendering of its templates
        captures: every slot name any template can capture
        capture_flags: slot -> conversion tables of the capturing tokens
        actions: (handler, binding, slot tables) triples in call order
        checks: (predicate, binding, slot tables) triples
    """

    def __init__(self, spec: RuleSpec, order: int, fragment: Fragment):
        super().__init__(name=spec.name)
        self.spec = spec
        self.order = order
        self.source = fragment.source
        self.captures = fragment.captures
        self.capture_flags = dict(fragment.flags)
        self.actions: List[Tuple[Callable, ActionBinding, Dict[str, List[Mapping]]]] = []
        self.checks: List[Tuple[Callable, CheckBinding, Dict[str, List[Mapping]]]] = []
        self.tagger = self.add_tokens(fragment.fst)
        self.build_acceptor()

    @property
    def priority(self) -> Tuple[int, int]:
        return (-len(self.source), self.order)

    def __repr__(self):
        return f"CompiledRule({self.name!r}, priority={self.priority})"


class PatternCompiler:
    """
    Compile RuleSpecs for one locale of a TokenRegistry.

    Args:
        registry: tokens, nested patterns and conversion tables
        locale: locale whose inheritance chain resolves names
        handlers: handler name -> callable
        checks: check name -> predicate
    """

    def __init__(
        self,
        registry: TokenRegistry,
        locale: str,
        handlers: Mapping[str, Callable],
        checks: Mapping[str, Callable],
    ):
        self.logger = get_logger(__name__)
        self.registry = registry
        self.locale = locale
        self.handlers = handlers
        self.check_functions = checks
        self._patterns: Dict[str, Optional[Fragment]] = {}

    def compile_template(self, template: str, stack: Tuple[str, ...] = ()) -> Optional[Fragment]:
        """Compile one template; None when it references a removed token."""
        return self._sequence(parse_template(template), stack, where=repr(template))

    def _sequence(self, nodes: Sequence[tuple], stack: Tuple[str, ...], where: str) -> Optional[Fragment]:
        result = _epsilon()
        for node in nodes:
            kind = node[0]
            if kind == "lit":
                piece = Fragment(pynutil.delete(literal(node[1])), re.escape(node[1]))
            elif kind == "space":
                piece = Fragment(delete_space, r"\s")
            elif kind == "opt":
                inner = self._sequence(node[1], stack, where)
                if inner is None:
                    # an optional group over a removed token simply disappears
                    continue
                piece = Fragment(
                    pynini.closure(inner.fst, 0, 1),
                    f"(?:{inner.source})?",
                    inner.paths | frozenset([frozenset()]),
                    inner.flags,
                )
            else:
                piece = self._reference(node[1], node[2], stack)
                if piece is None:
                    return None
            result = _concat(result, piece, where)
        return result

    def _reference(self, name: str, alias: Optional[str], stack: Tuple[str, ...]) -> Optional[Fragment]:
        if name in stack:
            raise CompileError("cyclic reference: " + " -> ".join(stack + (name,)))
        definition = self.registry.resolve(name, self.locale)
        if isinstance(definition, Pattern):
            if alias:
                raise CompileError(f"pattern {name} cannot be captured as {alias}")
            return self.compile_pattern(name, stack)

        terminal = self._terminal(definition, stack)
        if terminal is None:
            return None
        acceptor, source, tables = terminal
        capture = alias or name
        fst = pynutil.insert(f'{capture}: "') + acceptor + pynutil.insert('" ')
        flags = {capture: tables} if tables else {}
        return Fragment(fst, f"(?P<{capture}>{source})", frozenset([frozenset([capture])]), flags)

    def _terminal(self, token: Token, stack: Tuple[str, ...]) -> Optional[Tuple[pynini.Fst, str, Tuple[str, ...]]]:
        """Acceptor, regex source and conversion tables of a token."""
        if token.removed:
            return None
        if token.alternatives:
            return string_union(token.alternatives), regex_source(token.alternatives), ()
        if token.flag:
            keys = list(self.registry.flags(token.flag, self.locale))
            if not keys:
                raise CompileError(f"token {token.name}: conversion table {token.flag} is empty")
            return string_union(keys), regex_source(keys), (token.flag,)
        if token.digits:
            low, high = token.digits
            return digit_run(low, high), rf"\d{{{low},{high}}}", ()

        # reference to another token or to a nested pattern
        inner_stack = stack + (token.name,)
        if token.ref in inner_stack:
            raise CompileError("cyclic reference: " + " -> ".join(inner_stack + (token.ref,)))
        target = self.registry.resolve(token.ref, self.locale)
        if isinstance(target, Token):
            return self._terminal(target, inner_stack)
        fragment = self.compile_pattern(target.name, inner_stack)
        if fragment is None:
            return None
        acceptor = fragment.fst.copy().project("input").rmepsilon().optimize()
        return acceptor, fragment.source, ()

    def compile_pattern(self, name: str, stack: Tuple[str, ...] = ()) -> Optional[Fragment]:
        """Compile a nested pattern, the union of its template alternatives."""
        if name in self._patterns:
            return self._patterns[name]
        definition = self.registry.resolve(name, self.locale)
        if not isinstance(definition, Pattern):
            raise CompileError(f"{name} is not a pattern")
        inner_stack = stack + (name,)
        fragments = []
        for template in definition.templates:
            fragment = self.compile_template(template, inner_stack)
            if fragment is not None:
                fragments.append(fragment)
        compiled = _union(fragments) if fragments else None
        if compiled is None:
            self.logger.info(f"pattern {name} dropped: every alternative uses a removed token")
        self._patterns[name] = compiled
        return compiled

    def _slot_tables(self, rule: CompiledRule, slots, explicit: Mapping[str, Tuple[str, ...]]) -> Dict[str, List[Mapping]]:
        tables = {}
        for slot in slots:
            names = explicit.get(slot, rule.capture_flags.get(slot, ()))
            if isinstance(names, str):
                names = (names,)
            tables[slot] = [self.registry.flags(table, self.locale) for table in names]
        return tables

    def compile_rule(self, spec: RuleSpec, order: int) -> Optional[CompiledRule]:
        """Compile one rule and bind its handlers and checks."""
        where = f"rule {spec.name}"
        if not spec.templates:
            raise CompileError(f"{where}: no templates")
        if not spec.actions:
            raise CompileError(f"{where}: no actions")

        fragments = []
        for template in spec.templates:
            fragment = self.compile_template(template)
            if fragment is not None:
                fragments.append(fragment)
        if not fragments:
            self.logger.info(f"{where} dropped: every template uses a removed token")
            return None

        compiled = CompiledRule(spec, order, _union(fragments))

        for binding in spec.actions:
            handler = self.handlers.get(binding.handler)
            if handler is None:
                raise CompileError(f"{where}: unknown handler {binding.handler}")
            missing = set(binding.args.values()) - compiled.captures
            if missing:
                raise CompileError(f"{where}: handler {binding.handler} reads uncaptured {sorted(missing)}")
            tables = self._slot_tables(compiled, binding.args.values(), binding.flags)
            compiled.actions.append((handler, binding, tables))

        for binding in spec.checks:
            predicate = self.check_functions.get(binding.check)
            if predicate is None:
                raise CompileError(f"{where}: unknown check {binding.check}")
            tables = self._slot_tables(compiled, binding.slots, binding.flags)
            compiled.checks.append((predicate, binding, tables))

        return compiled

    def compile_rules(self, specs: Sequence[RuleSpec]) -> List[CompiledRule]:
        """Compile every rule and return them in priority order."""
        seen = set()
        for spec in specs:
            if spec.name in seen:
                raise CompileError(f"duplicate rule name {spec.name}")
            seen.add(spec.name)

        rules = []
        for order, spec in enumerate(specs):
            compiled = self.compile_rule(spec, order)
            if compiled is not None:
                rules.append(compiled)
        if not rules:
            raise CompileError(f"locale {self.locale}: no rule compiled")
        rules.sort(key=lambda r: r.priority)
        return rules

    @staticmethod
    def build_combined(rules: Sequence[CompiledRule], name: str = "combined") -> Processor:
        """Union of every rule's acceptor, determinized and minimized."""
        combined = Processor(name)
        combined.acceptor = pynini.union(*[r.acceptor for r in rules]).optimize()
        return combined

