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
Tests of the token registry and the template compiler on a small grammar
"""

import time

import pytest

from humania.core.errors import CompileError
from humania.core.grammar import action, check, rule
from humania.core.handlers import HANDLERS
from humania.core.pattern_compiler import PatternCompiler, parse_template
from humania.core.processor import Processor
from humania.core.token_registry import TokenRegistry
from humania.core.validators import CHECKS

VARIANT_WEEKDAY = rule("variant_weekday", "<VARIANT> <WEEKDAY>", action("weekday", weekday="WEEKDAY", variant="VARIANT"))
BARE_WEEKDAY = rule("weekday", "<WEEKDAY>", action("weekday", weekday="WEEKDAY"))


def make_registry():
    registry = TokenRegistry()
    registry.register_locale("base")
    registry.register_locale("xx", "base")
    registry.register_flags("last_this_next", "base", {"last": -1, "this": 0, "next": 1})
    registry.register_flags("weekday_name", "base", {"monday": 1, "friday": 5})
    registry.register("VARIANT", "base", {"flag": "last_this_next"})
    registry.register("WEEKDAY", "base", {"flag": "weekday_name"})
    registry.register("AT", "base", ["at"])
    registry.register("HOUR", "base", {"digits": [1, 2]})
    return registry


def make_compiler(registry=None, locale="base"):
    return PatternCompiler(registry or make_registry(), locale, HANDLERS, CHECKS)


def test_parse_template():
    assert parse_template("<VARIANT> <WEEKDAY>") == [("ref", "VARIANT", None), ("space",), ("ref", "WEEKDAY", None)]
    assert parse_template("<HOUR:START>-<HOUR:END>") == [
        ("ref", "HOUR", "START"),
        ("lit", "-"),
        ("ref", "HOUR", "END"),
    ]
    assert parse_template("<WEEKDAY>[ <AT>]") == [
        ("ref", "WEEKDAY", None),
        ("opt", [("space",), ("ref", "AT", None)]),
    ]


@pytest.mark.parametrize("template", ["<HOUR", "[<HOUR>", "<HOUR>]", "<>"])
def test_parse_template_rejects_malformed(template):
    with pytest.raises(CompileError):
        parse_template(template)


def test_rule_tags_captures():
    compiled = make_compiler().compile_rule(VARIANT_WEEKDAY, 0)
    assert compiled.tag("next friday") == {"VARIANT": "next", "WEEKDAY": "friday"}
    assert compiled.accepts("last monday")
    # anchored at both ends, one space between tokens
    assert compiled.tag("next") is None
    assert compiled.tag("next friday soon") is None
    assert compiled.tag("next  friday") is None
    assert compiled.capture_flags == {"VARIANT": ("last_this_next",), "WEEKDAY": ("weekday_name",)}


def test_optional_group():
    spec = rule("weekday_at", "<WEEKDAY>[ <AT> <HOUR>]", action("weekday", weekday="WEEKDAY"))
    compiled = make_compiler().compile_rule(spec, 0)
    assert compiled.tag("friday") == {"WEEKDAY": "friday"}
    assert compiled.tag("friday at 9") == {"WEEKDAY": "friday", "AT": "at", "HOUR": "9"}
    assert compiled.tag("friday at") is None


def test_alias_capture():
    spec = rule("hour_range", "<HOUR:START>-<HOUR:END>", action("no_op"))
    compiled = make_compiler().compile_rule(spec, 0)
    assert compiled.tag("9-17") == {"START": "9", "END": "17"}
    assert compiled.captures == frozenset({"START", "END"})


def test_alternatives_may_reuse_capture_names():
    spec = rule("hour", ["<HOUR>", "<AT> <HOUR>"], action("set_time", hour="HOUR"))
    compiled = make_compiler().compile_rule(spec, 0)
    assert compiled.tag("9") == {"HOUR": "9"}
    assert compiled.tag("at 9") == {"AT": "at", "HOUR": "9"}


@pytest.mark.parametrize("template", ["<HOUR> <HOUR>", "<HOUR>[ <HOUR>]", "<HOUR:X> <AT:X>"])
def test_duplicate_capture_on_one_path(template):
    with pytest.raises(CompileError, match="duplicate capture"):
        make_compiler().compile_template(template)


def test_unknown_name():
    with pytest.raises(CompileError, match="unregistered"):
        make_compiler().compile_template("<NOPE>")


def test_cyclic_patterns():
    registry = make_registry()
    registry.register_pattern("A", "base", ["<B>"])
    registry.register_pattern("B", "base", ["x <A>"])
    with pytest.raises(CompileError, match="cyclic"):
        make_compiler(registry).compile_template("<A>")


def test_self_referencing_pattern():
    registry = make_registry()
    registry.register_pattern("LIST", "base", ["<HOUR>", "<HOUR> <LIST>"])
    with pytest.raises(CompileError, match="cyclic"):
        make_compiler(registry).compile_template("<LIST>")


def test_cyclic_token_references():
    registry = make_registry()
    registry.register("T1", "base", {"ref": "T2"})
    registry.register("T2", "base", {"ref": "T1"})
    with pytest.raises(CompileError, match="cyclic"):
        make_compiler(registry).compile_template("<T1>")


def test_nested_pattern_is_not_captured():
    registry = make_registry()
    registry.register_pattern("WHEN", "base", ["<WEEKDAY>", "<AT> <HOUR>"])
    compiled = make_compiler(registry).compile_rule(rule("when", "<VARIANT> <WHEN>", action("no_op")), 0)
    assert compiled.tag("next friday") == {"VARIANT": "next", "WEEKDAY": "friday"}
    assert compiled.tag("next at 9") == {"VARIANT": "next", "AT": "at", "HOUR": "9"}
    with pytest.raises(CompileError):
        make_compiler(registry).compile_template("<WHEN:ALIAS>")


def test_token_reference_captures_under_own_name():
    registry = make_registry()
    registry.register("DAYNAME", "base", {"ref": "WEEKDAY"})
    compiled = make_compiler(registry).compile_rule(rule("dayname", "<DAYNAME>", action("no_op")), 0)
    assert compiled.tag("monday") == {"DAYNAME": "monday"}


def test_locale_definition_replaces_inherited():
    registry = make_registry()
    registry.register("AT", "xx", ["@"])
    registry.register_flags("weekday_name", "xx", {"jumat": 5})
    compiler = make_compiler(registry, "xx")
    compiled = compiler.compile_rule(rule("weekday_at", "<WEEKDAY> <AT> <HOUR>", action("no_op")), 0)
    assert compiled.tag("jumat @ 9") == {"WEEKDAY": "jumat", "AT": "@", "HOUR": "9"}
    assert compiled.tag("friday at 9") is None
    assert registry.flags("weekday_name", "xx") == {"jumat": 5}
    assert registry.flags("weekday_name", "base") == {"monday": 1, "friday": 5}


def test_removed_token_drops_alternative():
    registry = make_registry()
    registry.remove("AT", "xx")
    assert registry.is_removed("AT", "xx")
    assert not registry.is_removed("AT", "base")

    compiler = make_compiler(registry, "xx")
    compiled = compiler.compile_rule(rule("hour", ["<AT> <HOUR>", "<HOUR>"], action("no_op")), 0)
    assert compiled.tag("9") == {"HOUR": "9"}
    assert compiled.tag("at 9") is None
    assert compiler.compile_rule(rule("at_hour", "<AT> <HOUR>", action("no_op")), 1) is None


def test_optional_group_over_removed_token_vanishes():
    registry = make_registry()
    registry.remove("AT", "xx")
    compiled = make_compiler(registry, "xx").compile_rule(
        rule("weekday_at", "<WEEKDAY>[ <AT> <HOUR>]", action("no_op")), 0
    )
    assert compiled.tag("friday") == {"WEEKDAY": "friday"}
    assert not compiled.accepts("friday at 9")


def test_pattern_dropped_when_every_alternative_is_removed():
    registry = make_registry()
    registry.register_pattern("AT_HOUR", "base", ["<AT> <HOUR>"])
    registry.remove("AT", "xx")
    compiler = make_compiler(registry, "xx")
    assert compiler.compile_pattern("AT_HOUR") is None
    assert compiler.compile_rule(rule("at_hour", "<WEEKDAY> <AT_HOUR>", action("no_op")), 0) is None


def test_registry_rejects_bad_definitions():
    registry = make_registry()
    with pytest.raises(CompileError):
        registry.register("AT", "base", ["@"])
    with pytest.raises(CompileError):
        registry.register("QUOTE", "base", ['say "hi"'])
    with pytest.raises(CompileError):
        registry.register("EMPTY", "base", [])
    with pytest.raises(CompileError):
        registry.register("DIGITS", "base", {"digits": [3, 1]})
    with pytest.raises(CompileError):
        registry.register("AT", "yy", ["@"])
    with pytest.raises(CompileError):
        registry.register_locale("zz", "nowhere")
    with pytest.raises(CompileError):
        registry.flags("no_such_table", "xx")


def test_priority_orders_by_source_length_then_declaration():
    first = rule("first", "<WEEKDAY>", action("no_op"))
    second = rule("second", "<WEEKDAY>", action("no_op"))
    rules = make_compiler().compile_rules([first, second, VARIANT_WEEKDAY])
    assert [r.name for r in rules] == ["variant_weekday", "first", "second"]
    assert rules[0].priority < rules[1].priority < rules[2].priority


def test_compile_rules_rejects_duplicate_names():
    with pytest.raises(CompileError, match="duplicate rule name"):
        make_compiler().compile_rules([BARE_WEEKDAY, BARE_WEEKDAY])


@pytest.mark.parametrize(
    "spec",
    [
        rule("bad_handler", "<HOUR>", action("teleport", hour="HOUR")),
        rule("uncaptured", "<HOUR>", action("set_time", hour="MINUTE")),
        rule("bad_check", "<HOUR>", action("set_time", hour="HOUR"), checks=[check("astrology", "HOUR")]),
        rule("bad_table", "<HOUR>", action("set_time", hour="HOUR", flags={"HOUR": ("nope",)})),
        rule("no_actions", "<HOUR>"),
    ],
)
def test_compile_rule_rejects_bad_bindings(spec):
    with pytest.raises(CompileError):
        make_compiler().compile_rule(spec, 0)


def test_combined_acceptor():
    compiler = make_compiler()
    rules = compiler.compile_rules([BARE_WEEKDAY, VARIANT_WEEKDAY])
    combined = compiler.build_combined(rules)
    assert combined.accepts("friday")
    assert combined.accepts("next friday")
    assert not combined.accepts("friday next")
    assert not combined.accepts("")


def test_combined_acceptor_is_linear_on_adversarial_input():
    compiler = make_compiler()
    combined = compiler.build_combined(compiler.compile_rules([BARE_WEEKDAY, VARIANT_WEEKDAY]))
    text = "next " * 2000 + "friday"
    start_time = time.time()
    assert not combined.accepts(text)
    assert time.time() - start_time < 10


def test_parse_tags():
    tokens = Processor.parse_tags('variant_weekday { VARIANT: "next" WEEKDAY: "friday" }')
    assert tokens == [{"type": "variant_weekday", "VARIANT": "next", "WEEKDAY": "friday"}]
    tokens = Processor.parse_tags('day { DAY_VARIANT: "day after tomorrow" }')
    assert tokens[0]["DAY_VARIANT"] == "day after tomorrow"
