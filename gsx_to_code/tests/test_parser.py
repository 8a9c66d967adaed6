#!/usr/bin/env python3

from textwrap import dedent
from unittest import TestCase

import pytest

from gsx_to_code.pipeline import parse_source
from gsx_to_code.pipeline.gsx_ast import (
    BoolLit,
    ChildrenSlot,
    Component,
    ComponentCall,
    Element,
    FloatLit,
    ForLoop,
    GoCode,
    GoExpr,
    IfStmt,
    IntLit,
    LetBinding,
    StringLit,
    TextContent,
)


def parse(source: str):
    file, diagnostics = parse_source(dedent(source).lstrip())
    return file, [d.message for d in diagnostics]


def parse_ok(source: str):
    file, errors = parse(source)
    assert errors == [], errors
    return file


def first_component(source: str) -> Component:
    return parse_ok(source).components[0]


class TestFileStructure(TestCase):
    """Test package, imports and top-level declarations"""

    SOURCE = """
        package ui

        import (
            "fmt"
            tui "github.com/grindlemire/go-tui/pkg/tui" // runtime
        )

        // Header shows a title.
        @component Header(title string) {
            <div class="flex-col">
                <span>{title}</span>
            </div>
        }

        func helper() int {
            return 1
        }

        type Item struct {
            Name string
        }

        const limit = 10

        func Card(title string) Element {
            <div>{children...}</div>
        }
    """

    def setUp(self):
        self.file = parse_ok(self.SOURCE)

    def test_package_and_imports(self):
        self.assertEqual(self.file.package, "ui")
        self.assertEqual([imp.path for imp in self.file.imports], ["fmt", "github.com/grindlemire/go-tui/pkg/tui"])
        self.assertEqual(self.file.imports[1].alias, "tui")
        self.assertEqual(self.file.imports[1].trailing_comments.text, "runtime")

    def test_components(self):
        self.assertEqual([c.name for c in self.file.components], ["Header", "Card"])
        header = self.file.components[0]
        self.assertEqual([(p.name, p.type) for p in header.params], [("title", "string")])
        self.assertEqual(header.leading_comments.text, "Header shows a title.")

    def test_func_returning_element_is_component(self):
        card = self.file.components[1]
        self.assertIsInstance(card.body[0], Element)
        self.assertIsInstance(card.body[0].children[0], ChildrenSlot)

    def test_go_func_captured_verbatim(self):
        self.assertEqual(len(self.file.funcs), 1)
        self.assertEqual(self.file.funcs[0].code, "func helper() int {\n    return 1\n}")

    def test_go_decls(self):
        self.assertEqual([d.kind for d in self.file.decls], ["type", "const"])
        self.assertEqual(self.file.decls[0].code, "type Item struct {\n    Name string\n}")
        self.assertEqual(self.file.decls[1].code, "const limit = 10")

    def test_method_is_go_func(self):
        file = parse_ok(
            """
            package ui

            func (m *Model) View() Element {
                return nil
            }
            """
        )
        self.assertEqual(file.components, [])
        self.assertTrue(file.funcs[0].code.startswith("func (m *Model) View()"))

    def test_single_imports(self):
        file = parse_ok(
            """
            package ui

            import "fmt"
            import _ "embed"
            """
        )
        self.assertEqual([(i.alias, i.path) for i in file.imports], [("", "fmt"), ("_", "embed")])


class TestBody(TestCase):
    """Test body nodes and control flow"""

    SOURCE = """
        package ui

        @component List(items []string, show bool) {
            @let header = <span>Items</span>
            <div>
                {header}
                @for i, item := range items {
                    <span>{item}</span>
                }
                @if show {
                    <p>shown</p>
                } @else {
                    <p>hidden</p>
                }
                @Card("x", 1) {
                    <span>child</span>
                }
            </div>
        }
    """

    def setUp(self):
        self.comp = first_component(self.SOURCE)
        self.div = self.comp.body[1]

    def test_params(self):
        self.assertEqual([(p.name, p.type) for p in self.comp.params], [("items", "[]string"), ("show", "bool")])

    def test_let_binding(self):
        let = self.comp.body[0]
        self.assertIsInstance(let, LetBinding)
        self.assertEqual(let.name, "header")
        self.assertEqual(let.element.tag, "span")
        self.assertEqual(let.element.children, [TextContent("Items")])

    def test_children_kinds(self):
        kinds = [type(child) for child in self.div.children]
        self.assertEqual(kinds, [GoExpr, ForLoop, IfStmt, ComponentCall])
        self.assertEqual(self.div.children[0].code, "header")

    def test_for_loop(self):
        loop = self.div.children[1]
        self.assertEqual((loop.index, loop.value, loop.iterable), ("i", "item", "items"))
        self.assertEqual(loop.body[0].children, [GoExpr("item")])

    def test_if_else(self):
        stmt = self.div.children[2]
        self.assertEqual(stmt.condition, "show")
        self.assertEqual(stmt.then[0].children, [TextContent("shown")])
        self.assertEqual(stmt.else_[0].children, [TextContent("hidden")])

    def test_component_call(self):
        call = self.div.children[3]
        self.assertEqual(call.name, "Card")
        self.assertEqual(call.args, '"x", 1')
        self.assertEqual(call.children[0].tag, "span")

    def test_else_if_chain(self):
        comp = first_component(
            """
            package ui

            @component A(n int) {
                @if n > 1 {
                    <p>many</p>
                } @else @if n == 1 {
                    <p>one</p>
                } @else {
                    <p>none</p>
                }
            }
            """
        )
        stmt = comp.body[0]
        self.assertEqual(stmt.condition, "n > 1")
        nested = stmt.else_[0]
        self.assertIsInstance(nested, IfStmt)
        self.assertEqual(nested.condition, "n == 1")
        self.assertEqual(nested.else_[0].children, [TextContent("none")])

    def test_go_statements(self):
        comp = first_component(
            """
            package ui

            @component A() {
                count := tui.NewState(0)
                for i := 0; i < 3; i++ { total += i }
                x := 1; y := 2
                <div></div>
            }
            """
        )
        codes = [node.code for node in comp.body if isinstance(node, GoCode)]
        self.assertEqual(codes, ["count := tui.NewState(0)", "for i := 0; i < 3; i++ { total += i }", "x := 1", "y := 2"])


class TestElements(TestCase):
    """Test elements, attributes and text"""

    def element(self, markup: str) -> Element:
        comp = first_component(f"package ui\n\n@component A() {{\n    {markup}\n}}\n")
        return comp.body[0]

    def test_attribute_forms(self):
        elem = self.element('<input disabled width=10 grow=1.5 focusable=false label="hi" value={v} ref=other />')
        values = {attr.name: attr.value for attr in elem.attributes}
        self.assertEqual(values["disabled"], BoolLit(True))
        self.assertEqual(values["width"], IntLit(10))
        self.assertEqual(values["grow"], FloatLit(1.5))
        self.assertEqual(values["focusable"], BoolLit(False))
        self.assertEqual(values["label"], StringLit("hi"))
        self.assertEqual(values["value"], GoExpr("v"))
        self.assertEqual(values["ref"], GoExpr("other"))
        self.assertTrue(elem.self_close)

    def test_string_value_position_is_inside_quote(self):
        elem = self.element('<div class="flex"></div>')
        attr = elem.attributes[0]
        # `    <div class="flex">`: the quote is column 16
        self.assertEqual((attr.value_position.line, attr.value_position.column), (4, 17))

    def test_named_ref_and_key(self):
        elem = self.element('<li #Row key={item.ID} class="p-1"></li>')
        self.assertEqual(elem.named_ref, "Row")
        self.assertEqual(elem.ref_key, GoExpr("item.ID"))
        self.assertEqual([a.name for a in elem.attributes], ["class"])

    def test_multiline_attributes(self):
        elem = self.element('<div\n        class="flex"\n        gap=1>\n    </div>')
        self.assertEqual([a.name for a in elem.attributes], ["class", "gap"])

    def test_text_spacing(self):
        elem = self.element("<span>Use j/k to scroll, q to quit</span>")
        self.assertEqual(elem.children, [TextContent("Use j/k to scroll, q to quit")])

    def test_keywords_in_text(self):
        elem = self.element("<span>for each item in range</span>")
        self.assertEqual(elem.children, [TextContent("for each item in range")])

    def test_mixed_text_and_expressions(self):
        elem = self.element("<span>Count: {count}!</span>")
        self.assertEqual(elem.children, [TextContent("Count:"), GoExpr("count"), TextContent("!")])

    def test_expression_with_braces(self):
        elem = self.element('<span>{fmt.Sprintf("{%d}", n)}</span>')
        self.assertEqual(elem.children, [GoExpr('fmt.Sprintf("{%d}", n)')])


class TestComments(TestCase):
    """Test comment attachment"""

    def test_leading_trailing_and_orphan(self):
        comp = first_component(
            """
            package ui

            @component A() { // trailing
                // leads the div
                <div></div> // after div

                // orphan at end
            }
            """
        )
        self.assertEqual(comp.trailing_comments.text, "trailing")
        div = comp.body[0]
        self.assertEqual(div.leading_comments.text, "leads the div")
        self.assertEqual(div.trailing_comments.text, "after div")
        self.assertEqual([g.text for g in comp.orphan_comments], ["orphan at end"])

    def test_comment_inside_expression_stays_in_code(self):
        comp = first_component(
            """
            package ui

            @component A() {
                <span>{value // why
                }</span>
            }
            """
        )
        expr = comp.body[0].children[0]
        self.assertEqual(expr.code, "value // why")
        self.assertEqual(comp.orphan_comments, [])

    def test_orphans_inside_element(self):
        comp = first_component(
            """
            package ui

            @component A() {
                <div>
                    <span></span>
                    // left over
                </div>
            }
            """
        )
        self.assertEqual([g.text for g in comp.body[0].orphan_comments], ["left over"])


class TestErrors:
    """Test error reporting and recovery"""

    def test_missing_package(self):
        file, errors = parse("@component A() {}")
        assert file is None
        assert "expected 'package' declaration" in errors

    def test_mismatched_closing_tag(self):
        _, errors = parse(
            """
            package ui

            @component A() {
                <div></span>
            }
            """
        )
        assert "mismatched closing tag: expected </div>, got </span>" in errors

    def test_recovers_at_next_declaration(self):
        file, errors = parse(
            """
            package ui

            <div></div>

            @component Ok() {
                <div></div>
            }
            """
        )
        assert errors == ["unexpected token <, expected @component, func, type, const, or var"]
        assert [c.name for c in file.components] == ["Ok"]

    def test_unclosed_element_stops_at_component_end(self):
        file, errors = parse(
            """
            package ui

            @component A() {
                <div>
                    <span>x</span>
            }

            @component B() {
                <span>hi</span>
            }
            """
        )
        assert errors == ["expected closing tag </div>"]
        assert [c.name for c in file.components] == ["A", "B"]
        div = file.components[0].body[0]
        assert div.tag == "div"
        assert [child.tag for child in div.children] == ["span"]

    def test_unclosed_element_stops_at_next_declaration(self):
        file, errors = parse(
            """
            package ui

            @component A() {
                <div>
            @component B() {
                <span>hi</span>
            }

            func helper() string {
                return "x"
            }
            """
        )
        assert "expected closing tag </div>" in errors
        assert [c.name for c in file.components] == ["B"]
        (helper,) = file.funcs
        assert helper.code.startswith("func helper() string {")

    def test_func_keyword_in_text(self):
        elem = first_component(
            """
            package ui

            @component A() {
                <p>
                    func keys
                </p>
            }
            """
        ).body[0]
        assert elem.children == [TextContent("func keys")]

    def test_unterminated_braces_terminate(self):
        file, errors = parse(
            """
            package ui

            @component A() {
                <span>{oops</span>
            """
        )
        assert "unterminated braces: unmatched '{'" in errors
        assert file.components == []

    def test_bad_grouped_import_terminates(self):
        file, errors = parse(
            """
            package ui

            import (
                "fmt"
                42
                "strings"
            )
            """
        )
        assert errors == ["expected import path string"]
        assert [i.path for i in file.imports] == ["fmt", "strings"]

    def test_lexer_errors_are_merged(self):
        _, errors = parse(
            """
            package ui

            @component A() {
                <span>@oops</span>
            }
            """
        )
        assert "unknown @ keyword: @oops" in errors

    def test_positions_carry_file_name(self):
        _, diagnostics = parse_source("package ui\n\n@component A() {\n    <div></p>\n}\n", "a.gsx")
        assert str(diagnostics.errors[0].position) == "a.gsx:4:12"


if __name__ == "__main__":
    pytest.main([__file__])
