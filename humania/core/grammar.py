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
Rule data model.

A grammar is a list of RuleSpec values: template alternatives, the checks
gating the rule and the ordered handler invocations it triggers. Handlers
and checks are referred to by name and bound at compile time.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class CheckBinding:
    """A named predicate over some captured slots."""

    check: str
    slots: Tuple[str, ...]
    flags: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class ActionBinding:
    """
    One handler invocation.

    Attributes:
        handler: name in the handler registry
        args: handler keyword argument -> captured slot feeding it
        flags: slot -> conversion tables resolving its literal, overriding
               the tables of the token that captured it
        options: static keyword arguments
    """

    handler: str
    args: Mapping[str, str] = field(default_factory=dict)
    flags: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RuleSpec:
    """
    A named pattern with its validators and handler bindings.

    truncate_to and prefer_future are applied after every action ran;
    prefer_future is a (step unit, comparison granularity) pair.
    """

    name: str
    templates: Tuple[str, ...]
    actions: Tuple[ActionBinding, ...]
    checks: Tuple[CheckBinding, ...] = ()
    truncate_to: Optional[str] = None
    prefer_future: Optional[Tuple[str, Optional[str]]] = None

    def with_templates(self, templates: Sequence[str]) -> "RuleSpec":
        if isinstance(templates, str):
            templates = [templates]
        return replace(self, templates=tuple(templates))


def rule(name, templates, *actions, checks=(), truncate_to=None, prefer_future=None) -> RuleSpec:
    """Shorthand used by the rule tables."""
    if isinstance(templates, str):
        templates = (templates,)
    return RuleSpec(
        name=name,
        templates=tuple(templates),
        actions=tuple(actions),
        checks=tuple(checks),
        truncate_to=truncate_to,
        prefer_future=prefer_future,
    )


def action(handler: str, flags=None, **kwargs) -> ActionBinding:
    """
    Shorthand for an ActionBinding.

    Upper case string values name captured slots, anything else is a static
    option: ``action("unit_variant", value="VARIANT", unit="day")``.
    """
    args = {}
    options = {}
    for key, value in kwargs.items():
        if isinstance(value, str) and value.isupper():
            args[key] = value
        else:
            options[key] = value
    return ActionBinding(handler=handler, args=args, flags=dict(flags or {}), options=options)


def check(name: str, *slots: str, flags=None) -> CheckBinding:
    return CheckBinding(check=name, slots=tuple(slots), flags=dict(flags or {}))
