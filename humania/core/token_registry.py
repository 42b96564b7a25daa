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
Token registry.

Holds the named building blocks of a grammar per locale: tokens (literal
alternatives, conversion table keys, digit runs, references), nested
patterns (template alternatives) and conversion flag tables. Locales form an
inheritance chain; the nearest definition wins and replaces the inherited
one entirely.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import CompileError
from .utils import RESERVED_CHARS

REMOVED = "removed"

_NAME = re.compile(r"^\w+$")


@dataclass(frozen=True)
class Token:
    """A terminal: exactly one of alternatives, flag, ref, digits, or removed."""

    name: str
    locale: str
    alternatives: Tuple[str, ...] = ()
    flag: Optional[str] = None
    ref: Optional[str] = None
    digits: Optional[Tuple[int, int]] = None
    removed: bool = False


@dataclass(frozen=True)
class Pattern:
    """A nested, non-capturing pattern made of template alternatives."""

    name: str
    locale: str
    templates: Tuple[str, ...]


Definition = Union[Token, Pattern]


def _check_name(name: str) -> None:
    if not isinstance(name, str) or not _NAME.match(name):
        raise CompileError(f"invalid grammar name: {name!r}")


def _check_literal(name: str, text: Any) -> str:
    if not isinstance(text, str) or not text.strip():
        raise CompileError(f"token {name}: empty or non-string literal {text!r}")
    if RESERVED_CHARS.intersection(text):
        raise CompileError(f"token {name}: literal {text!r} contains a reserved character")
    return text


def build_token(name: str, locale: str, definition: Any) -> Token:
    """
    Build a Token from its data form.

    Accepted forms:
        ["now", "right now"]     literal alternatives
        {"flag": "weekday_name"} keys of a conversion table
        {"ref": "OTHER"}         another token or pattern
        {"digits": [1, 2]}       a run of 1 to 2 ASCII digits
        "removed"                explicit removal marker
    """
    _check_name(name)
    if isinstance(definition, Token):
        return definition
    if definition == REMOVED:
        return Token(name, locale, removed=True)
    if isinstance(definition, (list, tuple)):
        if not definition:
            raise CompileError(f"token {name}: no alternatives")
        alternatives = tuple(_check_literal(name, alt) for alt in definition)
        return Token(name, locale, alternatives=alternatives)
    if isinstance(definition, dict) and len(definition) == 1:
        kind, value = next(iter(definition.items()))
        if kind == "flag":
            _check_name(value)
            return Token(name, locale, flag=value)
        if kind == "ref":
            _check_name(value)
            return Token(name, locale, ref=value)
        if kind == "digits":
            low, high = value
            if not 0 < low <= high:
                raise CompileError(f"token {name}: bad digit range {value!r}")
            return Token(name, locale, digits=(int(low), int(high)))
    raise CompileError(f"token {name}: unsupported definition {definition!r}")


class TokenRegistry:
    """Locale scoped store of tokens, nested patterns and conversion tables."""

    def __init__(self):
        self._parents: Dict[str, Optional[str]] = {}
        self._definitions: Dict[str, Dict[str, Definition]] = {}
        self._flags: Dict[str, Dict[str, Mapping[str, Any]]] = {}

    def register_locale(self, locale: str, parent: Optional[str] = None) -> None:
        """Declare a locale and the locale it inherits from."""
        _check_name(locale)
        if parent is not None and parent not in self._parents:
            raise CompileError(f"locale {locale} inherits unknown locale {parent}")
        if locale in self._parents:
            if self._parents[locale] != parent:
                raise CompileError(f"locale {locale} is already registered")
            return
        self._parents[locale] = parent
        self._definitions[locale] = {}
        self._flags[locale] = {}

    def chain(self, locale: str) -> List[str]:
        """The locale followed by its ancestors, nearest first."""
        if locale not in self._parents:
            raise CompileError(f"unknown locale: {locale}")
        chain = []
        current: Optional[str] = locale
        while current is not None:
            chain.append(current)
            current = self._parents[current]
        return chain

    def _store(self, locale: str, definition: Definition) -> None:
        if locale not in self._definitions:
            raise CompileError(f"unknown locale: {locale}")
        scope = self._definitions[locale]
        if definition.name in scope:
            raise CompileError(f"{definition.name} is already registered for locale {locale}")
        scope[definition.name] = definition

    def register(self, name: str, locale: str, definition: Any) -> Token:
        """Register a token; see build_token for the accepted forms."""
        token = build_token(name, locale, definition)
        self._store(locale, token)
        return token

    def remove(self, name: str, locale: str) -> Token:
        """Mark an inherited token or pattern as removed for this locale."""
        return self.register(name, locale, REMOVED)

    def register_pattern(self, name: str, locale: str, templates: Sequence[str]) -> Pattern:
        """Register a nested pattern made of one or more template alternatives."""
        _check_name(name)
        if isinstance(templates, str):
            templates = [templates]
        if not templates or not all(isinstance(t, str) and t.strip() for t in templates):
            raise CompileError(f"pattern {name}: templates must be non-empty strings")
        pattern = Pattern(name, locale, tuple(templates))
        self._store(locale, pattern)
        return pattern

    def resolve(self, name: str, locale: str) -> Definition:
        """Nearest definition of name along the locale chain."""
        for scope in self.chain(locale):
            definition = self._definitions[scope].get(name)
            if definition is not None:
                return definition
        raise CompileError(f"unregistered token or pattern {name!r} (locale {locale})")

    def is_removed(self, name: str, locale: str) -> bool:
        definition = self.resolve(name, locale)
        return isinstance(definition, Token) and definition.removed

    def register_flags(self, table: str, locale: str, mapping: Mapping[str, Any]) -> None:
        """Register a conversion flag table, replacing any inherited table of that name."""
        _check_name(table)
        if locale not in self._flags:
            raise CompileError(f"unknown locale: {locale}")
        if table in self._flags[locale]:
            raise CompileError(f"conversion table {table} is already registered for locale {locale}")
        if not isinstance(mapping, Mapping):
            raise CompileError(f"conversion table {table} must be a mapping")
        for key in mapping:
            _check_literal(table, key)
        self._flags[locale][table] = MappingProxyType(dict(mapping))

    def has_flags(self, table: str, locale: str) -> bool:
        return any(table in self._flags[scope] for scope in self.chain(locale))

    def flags(self, table: str, locale: str) -> Mapping[str, Any]:
        """Nearest conversion table of that name along the locale chain."""
        for scope in self.chain(locale):
            mapping = self._flags[scope].get(table)
            if mapping is not None:
                return mapping
        raise CompileError(f"unknown conversion table {table!r} (locale {locale})")
