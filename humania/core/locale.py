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
Locale data.

A locale is a YAML document under humania/data:

    locale: id
    inherits: en
    ordinal_suffix: english          # named suffix function, inherited
    generate: {number_word: english_cardinals}
    flags: {last_this_next: {lalu: -1, ini: 0, depan: 1}}
    tokens: {AGO: [lalu, yang lalu], SUFFIX: removed}
    patterns: {NUMBER: ["<COUNT>"]}
    rules: {variant_unit: ["<UNIT> <VARIANT>"], weekday_from_now: removed}

Definitions of a locale replace inherited ones of the same name entirely.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import importlib_resources
import yaml

from ..english import words
from .errors import CompileError
from .grammar import RuleSpec
from .logger import get_logger
from .token_registry import REMOVED, TokenRegistry

GENERATORS: Dict[str, Callable[[], Mapping[str, Any]]] = {
    "english_cardinals": words.cardinal_words,
    "english_ordinals": words.ordinal_words,
}

SUFFIX_FUNCTIONS: Dict[str, Callable[[int], str]] = {
    "english": words.ordinal_suffix,
}

_KEYS = {"locale", "inherits", "ordinal_suffix", "generate", "flags", "tokens", "patterns", "rules"}


def _read(name: str) -> Dict[str, Any]:
    resource = importlib_resources.files("humania") / "data" / f"{name}.yaml"
    if not resource.is_file():
        raise CompileError(f"unknown locale: {name}")
    with resource.open("r", encoding="utf-8") as fin:
        data = yaml.safe_load(fin) or {}
    if not isinstance(data, dict):
        raise CompileError(f"locale {name}: top level must be a mapping")
    unknown = set(data) - _KEYS
    if unknown:
        raise CompileError(f"locale {name}: unknown keys {sorted(unknown)}")
    if data.get("locale", name) != name:
        raise CompileError(f"locale file {name}.yaml declares locale {data['locale']}")
    return data


class Locale:
    """
    One locale and its ancestors.

    Attributes:
        name: locale code
        parent: inherited locale, None for the root
        data: the parsed YAML document
    """

    def __init__(self, name: str, data: Mapping[str, Any], parent: Optional["Locale"] = None):
        self.name = name
        self.data = data
        self.parent = parent

    @classmethod
    def load(cls, name: str, _seen: Sequence[str] = ()) -> "Locale":
        """Load a packaged locale and its inheritance chain."""
        if name in _seen:
            raise CompileError("cyclic locale inheritance: " + " -> ".join(tuple(_seen) + (name,)))
        data = _read(name)
        parent_name = data.get("inherits")
        parent = cls.load(parent_name, tuple(_seen) + (name,)) if parent_name else None
        return cls(name, data, parent)

    def chain(self) -> List["Locale"]:
        """This locale and its ancestors, nearest first."""
        chain = []
        current: Optional[Locale] = self
        while current is not None:
            chain.append(current)
            current = current.parent
        return chain

    def ordinal_suffix(self, number: int) -> Optional[str]:
        """Written suffix of an ordinal number, None when the locale has none."""
        for locale in self.chain():
            if "ordinal_suffix" in locale.data:
                name = locale.data["ordinal_suffix"]
                if name is None:
                    return None
                return SUFFIX_FUNCTIONS[name](number)
        return None

    def _flag_tables(self) -> Dict[str, Dict[str, Any]]:
        tables: Dict[str, Dict[str, Any]] = {}
        for table, generator in (self.data.get("generate") or {}).items():
            if generator not in GENERATORS:
                raise CompileError(f"locale {self.name}: unknown generator {generator}")
            tables[table] = dict(GENERATORS[generator]())
        for table, mapping in (self.data.get("flags") or {}).items():
            if not isinstance(mapping, dict):
                raise CompileError(f"locale {self.name}: conversion table {table} must be a mapping")
            # explicit entries win over generated ones
            tables.setdefault(table, {}).update({str(k): v for k, v in mapping.items()})
        return tables

    def register(self, registry: TokenRegistry) -> None:
        """Register this locale and its ancestors, root first."""
        logger = get_logger(__name__)
        if self.parent is not None:
            self.parent.register(registry)
        registry.register_locale(self.name, self.parent.name if self.parent else None)

        suffix = self.data.get("ordinal_suffix")
        if suffix is not None and suffix not in SUFFIX_FUNCTIONS:
            raise CompileError(f"locale {self.name}: unknown ordinal suffix function {suffix}")

        tables = self._flag_tables()
        for table, mapping in tables.items():
            registry.register_flags(table, self.name, mapping)
        for name, definition in (self.data.get("tokens") or {}).items():
            registry.register(name, self.name, definition)
        for name, templates in (self.data.get("patterns") or {}).items():
            if templates == REMOVED:
                registry.remove(name, self.name)
            else:
                registry.register_pattern(name, self.name, templates)
        logger.debug(
            f"locale {self.name}: {len(tables)} tables, {len(self.data.get('tokens') or {})} tokens, "
            f"{len(self.data.get('patterns') or {})} patterns"
        )

    def apply_rule_overrides(self, specs: Sequence[RuleSpec]) -> List[RuleSpec]:
        """
        Apply the rule overrides of the whole chain, root first.

        An override is either a list of templates replacing the rule's own,
        or "removed" to drop the rule.
        """
        by_name = {spec.name: spec for spec in specs}
        order = [spec.name for spec in specs]
        for locale in reversed(self.chain()):
            for name, override in (locale.data.get("rules") or {}).items():
                if name not in by_name:
                    if name in order:
                        # removed by an ancestor
                        continue
                    raise CompileError(f"locale {locale.name}: override of unknown rule {name}")
                if override == REMOVED:
                    del by_name[name]
                else:
                    by_name[name] = by_name[name].with_templates(override)
        return [by_name[name] for name in order if name in by_name]
