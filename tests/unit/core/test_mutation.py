"""Tests for anchors, edit plans and the serializer."""

from pathlib import Path

import pytest

from react_codemods.core.exceptions import TransformError
from react_codemods.core.mutation import (
    AnchorKind,
    CodeStyle,
    EditPlan,
    Insertion,
    Tier,
    apply_insertions,
    logged_before,
    resolve_anchor,
    serialize,
    top_level_bindings,
    value_expression,
)
from react_codemods.core.syntax import SourceDocument, node_text
from react_codemods.core.traversal import Visitor, walk


def _path_to(doc, call_text):
    """Ancestor path of the first call whose text is ``call_text``."""
    paths = []

    class Find(Visitor):
        def on_call(self, node, ctx):
            if not paths and node_text(node) == call_text:
                paths.append(ctx.path_to_current())

    walk(doc, Find())
    assert paths, call_text
    return paths[0]


def _node(doc, call_text):
    return _path_to(doc, call_text)[-1]


def _function(doc, name):
    found = []

    class Find(Visitor):
        def on_function(self, node, ctx):
            if ctx.scopes[-1].name == name:
                found.append(node)

    walk(doc, Find())
    return found[0]


class TestApplyInsertions:
    def test_same_offset_order(self):
        insertions = [
            Insertion(1, "[", Tier.OPEN),
            Insertion(1, "-"),
            Insertion(1, "]", Tier.CLOSE),
        ]
        assert apply_insertions(b"abc", insertions) == b"a]-[bc"

    def test_wider_node_opens_first(self):
        insertions = [
            Insertion(0, "<inner>", Tier.OPEN, -2),
            Insertion(0, "<outer>", Tier.OPEN, -3),
        ]
        assert apply_insertions(b"abc", insertions) == b"<outer><inner>abc"

    def test_equal_keys_keep_registration_order(self):
        insertions = [Insertion(0, "1"), Insertion(0, "2")]
        assert apply_insertions(b"x", insertions) == b"12x"

    def test_untouched_bytes_are_preserved(self):
        source = "a = 1;\r\n\tb = 'é';\r\n".encode()
        assert apply_insertions(source, [Insertion(len(source), "c;")]) == source + b"c;"

    def test_offset_out_of_range(self):
        with pytest.raises(TransformError):
            apply_insertions(b"abc", [Insertion(9, "x")])


class TestCodeStyle:
    def test_string_quotes_and_escapes(self):
        assert CodeStyle().string("it's") == "'it\\'s'"
        assert CodeStyle("double").string('say "hi"') == '"say \\"hi\\""'

    def test_log_call(self):
        style = CodeStyle(log_function="logger.debug")
        assert style.log_call("[A] x:", "x") == "logger.debug('[A] x:', x);"

    def test_is_log_call(self, parse):
        doc = parse("console.log('[A] ready', a);\nalert('[A] ready');\n")
        first, second = doc.root.named_children
        style = CodeStyle()
        assert style.is_log_call(first)
        assert style.is_log_call(first, "[A] ready")
        assert not style.is_log_call(first, "[B] ready")
        assert not style.is_log_call(second)


class TestValueExpression:
    @pytest.mark.parametrize(
        "expression", ["count", "count + 1", "user.name", "!open", "{ a: 1, b }", "[a, ...rest]"]
    )
    def test_side_effect_free_values_are_repeated(self, parse, expression):
        doc = parse(f"setValue({expression});\n")
        argument = _node(doc, f"setValue({expression})").child_by_field_name("arguments")
        assert value_expression(argument.named_children[0], CodeStyle()) == expression

    @pytest.mark.parametrize(
        "expression, logged",
        [
            ("load(id)", "'load(id)'"),
            ("prev => prev + 1", "'prev => prev + 1'"),
            ("items[next()]", "'items[next()]'"),
            ("`${a}`", "'`${a}`'"),
        ],
    )
    def test_other_values_are_logged_as_text(self, parse, expression, logged):
        doc = parse(f"setValue({expression});\n")
        argument = _node(doc, f"setValue({expression})").child_by_field_name("arguments")
        assert value_expression(argument.named_children[0], CodeStyle()) == logged

    def test_long_text_is_truncated(self, parse):
        expression = "compute(" + ", ".join(f"arg{i}" for i in range(30)) + ")"
        doc = parse(f"setValue({expression});\n")
        argument = _node(doc, f"setValue({expression})").child_by_field_name("arguments")
        logged = value_expression(argument.named_children[0], CodeStyle())
        assert logged.endswith("...'")
        assert len(logged) == 82

    def test_missing_value(self):
        assert value_expression(None, CodeStyle()) == "undefined"

    def test_deeply_nested_expression(self, parse):
        expression = " + ".join(f"a{i}" for i in range(3000))
        doc = parse(f"setValue({expression});\n")
        call = doc.root.named_children[0].named_children[0]
        argument = call.child_by_field_name("arguments").named_children[0]
        assert value_expression(argument, CodeStyle()) == expression

    def test_deeply_nested_call_is_logged_as_text(self, parse):
        expression = "load() + " + " + ".join(f"a{i}" for i in range(3000))
        doc = parse(f"setValue({expression});\n")
        call = doc.root.named_children[0].named_children[0]
        argument = call.child_by_field_name("arguments").named_children[0]
        logged = value_expression(argument, CodeStyle())
        assert logged.startswith("'load() + a0 + a1")
        assert logged.endswith("...'")


class TestResolveAnchor:
    def test_statement_in_block(self, parse):
        doc = parse("function A() {\n  go();\n}\n")
        anchor = resolve_anchor(_path_to(doc, "go()"))
        assert anchor.kind is AnchorKind.BEFORE
        assert anchor.node.type == "expression_statement"
        assert anchor.container.type == "statement_block"

    def test_unbraced_if_body(self, parse):
        doc = parse("if (x) go();\n")
        anchor = resolve_anchor(_path_to(doc, "go()"))
        assert anchor.kind is AnchorKind.SLOT

    def test_else_body(self, parse):
        doc = parse("if (x) a(); else go();\n")
        anchor = resolve_anchor(_path_to(doc, "go()"))
        assert anchor.kind is AnchorKind.SLOT

    def test_arrow_expression_body(self, parse):
        doc = parse("const f = () => go();\n")
        anchor = resolve_anchor(_path_to(doc, "go()"))
        assert anchor.kind is AnchorKind.ARROW_BODY
        assert anchor.node.type == "arrow_function"

    def test_switch_case_test_hoists_to_switch(self, parse):
        doc = parse("switch (x) {\n  case go():\n    break;\n}\n")
        anchor = resolve_anchor(_path_to(doc, "go()"))
        assert anchor.kind is AnchorKind.BEFORE
        assert anchor.node.type == "switch_statement"

    def test_no_enclosing_statement(self):
        with pytest.raises(TransformError):
            resolve_anchor([])


class TestEditPlan:
    def test_insert_before_keeps_indentation(self, parse):
        doc = parse("function A() {\n  if (x) {\n    go();\n  }\n}\n")
        plan = EditPlan(doc)
        plan.insert_before(resolve_anchor(_path_to(doc, "go()")), ["log();"])
        assert serialize(plan) == "function A() {\n  if (x) {\n    log();\n    go();\n  }\n}\n"

    def test_same_anchor_is_shared(self, parse):
        doc = parse("function A() {\n  go(a(), b());\n}\n")
        plan = EditPlan(doc)
        plan.insert_before(resolve_anchor(_path_to(doc, "a()")), ["one();"])
        plan.insert_before(resolve_anchor(_path_to(doc, "b()")), ["two();"])
        assert serialize(plan) == "function A() {\n  one();\n  two();\n  go(a(), b());\n}\n"

    def test_slot_is_braced(self, parse):
        doc = parse("if (x) go();\n")
        plan = EditPlan(doc)
        plan.insert_before(resolve_anchor(_path_to(doc, "go()")), ["log();"])
        assert serialize(plan) == "if (x) { log(); go(); }\n"

    def test_arrow_body_becomes_block(self, parse):
        doc = parse("const f = () => go();\n")
        plan = EditPlan(doc)
        plan.insert_before(resolve_anchor(_path_to(doc, "go()")), ["log();"])
        assert serialize(plan) == "const f = () => {\n  log();\n  return go();\n};\n"

    def test_prepend_to_multiline_block(self, parse):
        doc = parse("function A() {\n    go();\n}\n")
        plan = EditPlan(doc)
        plan.prepend_to_body(_function(doc, "A"), ["log();"])
        assert serialize(plan) == "function A() {\n    log();\n    go();\n}\n"

    def test_prepend_to_single_line_block(self, parse):
        doc = parse("function A() { go(); }\n")
        plan = EditPlan(doc)
        plan.prepend_to_body(_function(doc, "A"), ["log();"])
        assert serialize(plan) == "function A() { log(); go(); }\n"

    def test_prepend_to_empty_block(self, parse):
        doc = parse("function A() {\n}\n")
        plan = EditPlan(doc)
        plan.prepend_to_body(_function(doc, "A"), ["log();"])
        assert serialize(plan) == "function A() {\n  log();\n}\n"

    def test_tab_indentation_is_detected(self, parse):
        doc = parse("function A() {\n\tgo();\n}\n")
        assert EditPlan(doc).unit == "\t"

    def test_hoist_after_imports(self, parse):
        doc = parse("import a from 'a';\nimport b from 'b';\n\nfoo();\n")
        plan = EditPlan(doc)
        plan.hoist("let n = 0;")
        assert serialize(plan) == "import a from 'a';\nimport b from 'b';\nlet n = 0;\n\nfoo();\n"

    def test_hoist_after_directive(self, parse):
        doc = parse("'use client';\nfoo();\n")
        plan = EditPlan(doc)
        plan.hoist("let n = 0;")
        assert serialize(plan) == "'use client';\nlet n = 0;\nfoo();\n"

    def test_hoist_without_imports_goes_after_leading_comment(self, parse):
        doc = parse("// header\nfoo();\n")
        plan = EditPlan(doc)
        plan.hoist("let n = 0;")
        assert serialize(plan) == "// header\nlet n = 0;\n\nfoo();\n"

    def test_preamble_precedes_hoisted(self, parse):
        doc = parse("foo();\n")
        plan = EditPlan(doc)
        plan.hoist("let n = 0;")
        plan.add_preamble("import x from 'x';")
        assert serialize(plan) == "import x from 'x';\nlet n = 0;\n\nfoo();\n"

    def test_wrap(self, parse):
        doc = parse("const el = <div />;\n")
        element = doc.root.named_children[0].named_children[0].child_by_field_name("value")
        plan = EditPlan(doc)
        plan.wrap(element, "<Box>", "</Box>")
        assert serialize(plan) == "const el = <Box><div /></Box>;\n"

    def test_empty_plan_serializes_to_none(self, parse):
        plan = EditPlan(parse("foo();\n"))
        assert plan.is_empty
        assert serialize(plan) is None

    def test_unparsable_output_is_rejected(self, parse):
        doc = parse("function A() {\n  go();\n}\n")
        plan = EditPlan(doc)
        plan.insert_before(resolve_anchor(_path_to(doc, "go()")), ["log(;"])
        with pytest.raises(TransformError):
            serialize(plan)

    def test_counters(self, parse):
        plan = EditPlan(parse("foo();\n"))
        plan.record("Header")
        plan.record()
        plan.record_skip()
        assert (plan.sites, plan.skipped, plan.touched) == (2, 1, ["Header"])


class TestCrlfSources:
    @staticmethod
    def _crlf(text):
        return SourceDocument.from_source(text, Path("Component.jsx"))

    def test_newline_is_detected(self):
        assert EditPlan(self._crlf("foo();\r\n")).newline == "\r\n"
        assert EditPlan(self._crlf("foo();\n")).newline == "\n"

    def test_insert_before(self):
        doc = self._crlf("function A() {\r\n  go();\r\n}\r\n")
        plan = EditPlan(doc)
        plan.insert_before(resolve_anchor(_path_to(doc, "go()")), ["log();"])
        assert serialize(plan) == "function A() {\r\n  log();\r\n  go();\r\n}\r\n"

    def test_prepend_to_block(self):
        doc = self._crlf("function A() {\r\n  go();\r\n}\r\n")
        plan = EditPlan(doc)
        plan.prepend_to_body(_function(doc, "A"), ["a();", "b();"])
        assert serialize(plan) == "function A() {\r\n  a();\r\n  b();\r\n  go();\r\n}\r\n"

    def test_arrow_body_becomes_block(self):
        doc = self._crlf("const f = () => go();\r\n")
        plan = EditPlan(doc)
        plan.insert_before(resolve_anchor(_path_to(doc, "go()")), ["log();"])
        assert serialize(plan) == "const f = () => {\r\n  log();\r\n  return go();\r\n};\r\n"

    def test_hoist_after_imports(self):
        doc = self._crlf("import a from 'a';\r\nfoo();\r\n")
        plan = EditPlan(doc)
        plan.hoist("let n = 0;")
        plan.add_preamble("function helper() {\n  return 1;\n}")
        assert serialize(plan) == (
            "import a from 'a';\r\n"
            "function helper() {\r\n  return 1;\r\n}\r\n"
            "let n = 0;\r\n"
            "foo();\r\n"
        )

    def test_output_has_no_bare_newlines(self):
        doc = self._crlf("foo();\r\n")
        plan = EditPlan(doc)
        plan.hoist("let n = 0;")
        output = serialize(plan)
        assert output == "let n = 0;\r\n\r\nfoo();\r\n"
        assert output.count("\n") == output.count("\r\n")


class TestGuards:
    def test_logged_before(self, parse):
        doc = parse(
            "function A() {\n  console.log('[A] x:', x);\n  console.log('other');\n  go();\n}\n"
        )
        anchor = resolve_anchor(_path_to(doc, "go()"))
        style = CodeStyle()
        assert logged_before(anchor, style, "[A] x:")
        assert not logged_before(anchor, style, "[A] y:")

    def test_logged_before_stops_at_other_statements(self, parse):
        doc = parse("function A() {\n  console.log('[A] x:');\n  prepare();\n  go();\n}\n")
        anchor = resolve_anchor(_path_to(doc, "go()"))
        assert not logged_before(anchor, CodeStyle(), "[A] x:")

    def test_top_level_bindings(self, parse):
        doc = parse(
            """
            import React from 'react';
            function helper() {}
            export const onRender = () => {};
            export function Page() {}
            let a = 1, b;
            class Store {}
            """
        )
        assert top_level_bindings(doc.root) == {"helper", "onRender", "Page", "a", "b", "Store"}
