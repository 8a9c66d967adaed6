#!/usr/bin/env python3

from textwrap import dedent

import pytest

from gsx_to_code.pipeline import analyze_source
from gsx_to_code.pipeline.analyzer import detect_get_calls, infer_type
from gsx_to_code.pipeline.analyzer.state import DEPS_ARRAY_ERROR, DEPS_EXPRESSION_ERROR
from gsx_to_code.pipeline.errors import Severity


def analyze(source: str):
    return analyze_source(dedent(source).lstrip())


def analyze_body(body: str, params: str = ""):
    indented = "\n".join("    " + line if line else line for line in dedent(body).strip("\n").splitlines())
    return analyze_source(f"package ui\n\n@component Test({params}) {{\n{indented}\n}}\n")


class TestTypeInference:
    """Test type inference for state initializers"""

    @pytest.mark.parametrize(
        "expr,expected",
        [
            ("0", "int"),
            ("-5", "int"),
            ("  42  ", "int"),
            ("3.14", "float64"),
            ("-0.5", "float64"),
            ("true", "bool"),
            ("false", "bool"),
            ('"hello"', "string"),
            ("`raw`", "string"),
            ('""', "string"),
            ("nil", "any"),
            ("[]string{}", "[]string"),
            ('[]pkg.Item{{Name: "a"}}', "[]pkg.Item"),
            ("map[string]int{}", "map[string]int"),
            ("map[int]model.User{1: {}}", "map[int]model.User"),
            ("&Model{}", "*Model"),
            ("&ui.Model{Debug: true}", "*ui.Model"),
            ("Model{}", "Model"),
            ("pkg.Config{Debug: true}", "pkg.Config"),
            ("load()", "any"),
            ("x + 1", "any"),
            ("1e3", "any"),
            ("", "any"),
        ],
    )
    def test_infer_type(self, expr, expected):
        assert infer_type(expr) == expected


class TestGetCalls:
    """Test detection of state reads"""

    def test_plain_and_dereferenced(self):
        names = {"count", "name"}
        assert detect_get_calls("(*count).Get() + len(name.Get())", names) == ["count", "name"]

    def test_unknown_names_and_duplicates_are_dropped(self):
        assert detect_get_calls("a.Get() + other.Get() + a.Get()", {"a"}) == ["a"]

    def test_other_methods_are_ignored(self):
        assert detect_get_calls("count.Set(1) + count.GetAll()", {"count"}) == []


class TestStateVars:
    """Test state variable detection"""

    def test_parameters_and_declarations(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            items := tui.NewState([]string{})
            @if true {
                hidden := tui.NewState(1)
            }
            <div></div>
            """,
            params="shared *tui.State[string], title string",
        )
        state_vars = result.components[0].state_vars
        assert [(v.name, v.type, v.is_parameter) for v in state_vars] == [
            ("shared", "string", True),
            ("count", "int", False),
            ("items", "[]string", False),
        ]
        assert state_vars[1].init_expr == "0"
        assert state_vars[2].init_expr == "[]string{}"

    def test_generic_parameter_type(self):
        result = analyze_body("<div></div>", params="users *tui.State[map[string]User]")
        assert result.components[0].state_vars[0].type == "map[string]User"


class TestBindings:
    """Test state bindings and explicit dependencies"""

    def test_detected_bindings(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            <div class="flex-col">
                <span>{fmt.Sprintf("%d", count.Get())}</span>
                <span>{shared.Get()}</span>
                <span>static</span>
                <div class={style(count.Get())}></div>
            </div>
            """,
            params="shared *tui.State[string]",
        )
        assert result.error is None
        bindings = result.components[0].state_bindings
        assert [(b.element_name, b.attribute, b.state_vars) for b in bindings] == [
            ("__tmp_1", "text", ["count"]),
            ("__tmp_2", "text", ["shared"]),
            ("__tmp_4", "class", ["count"]),
        ]
        assert bindings[0].expr == 'fmt.Sprintf("%d", count.Get())'
        assert not any(b.explicit_deps for b in bindings)

    def test_text_child_binding_targets_text_element(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            <div>{fmt.Sprintf("%d", count.Get())}</div>
            <p>
                Count:
                {count.Get()}
            </p>
            """
        )
        analysis = result.components[0]
        assert [(n.name, n.child_targets) for n in analysis.element_names] == [
            ("__tmp_0", ["__tmp_1"]),
            ("__tmp_2", ["__tmp_3", "__tmp_4"]),
        ]
        assert [b.element_name for b in analysis.state_bindings] == ["__tmp_1", "__tmp_4"]
        assert [b.element.tag for b in analysis.state_bindings] == ["div", "p"]

    def test_named_ref_gives_binding_name(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            <span #Counter>{count.Get()}</span>
            """
        )
        (binding,) = result.components[0].state_bindings
        assert binding.element_name == "Counter"

    def test_no_bindings_inside_loops(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            @for _, x := range xs {
                <span>{count.Get()}</span>
            }
            """,
            params="xs []string",
        )
        assert result.components[0].state_bindings == []

    def test_no_state_no_bindings(self):
        result = analyze_body("<span>{count.Get()}</span>")
        assert result.components[0].state_bindings == []

    def test_explicit_deps(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            name := tui.NewState("x")
            <span deps={[count, name, count]}>{format(name)}</span>
            """
        )
        (binding,) = result.components[0].state_bindings
        assert binding.state_vars == ["count", "name"]
        assert binding.explicit_deps

    def test_empty_deps(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            <span deps={[]}>{count.Get()}</span>
            """
        )
        assert result.error is None
        (warning,) = result.diagnostics.warnings
        assert warning.message == "empty deps attribute has no effect"
        assert warning.severity is Severity.WARNING
        assert result.components[0].state_bindings == []

    def test_deps_must_be_expression(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            <span deps="count">{count.Get()}</span>
            """
        )
        assert [d.message for d in result.diagnostics.errors] == [DEPS_EXPRESSION_ERROR]

    def test_deps_must_be_array(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            <span deps={count}>{count.Get()}</span>
            """
        )
        assert [d.message for d in result.diagnostics.errors] == [DEPS_ARRAY_ERROR]

    def test_unknown_deps_name(self):
        result = analyze_body(
            """
            count := tui.NewState(0)
            <span deps={[count, missing]}>{label()}</span>
            """
        )
        assert [d.message for d in result.diagnostics.errors] == ['unknown state variable "missing" in deps']
        (binding,) = result.components[0].state_bindings
        assert binding.state_vars == ["count"]

    def test_unknown_deps_without_state(self):
        result = analyze_body("<span deps={[unknownName]}>x</span>")
        assert [d.message for d in result.diagnostics.errors] == ['unknown state variable "unknownName" in deps']

    def test_state_requires_tui_import(self):
        result = analyze_body(
            "<span>{value.Get()}</span>",
            params="value *tui.State[int]",
        )
        assert "github.com/grindlemire/go-tui/pkg/tui" in [imp.path for imp in result.file.imports]


class TestEndToEnd:
    """A state declaration feeding one element, with and without explicit deps"""

    SOURCE = """
        package counter

        @component Counter() {
            count := tui.NewState(0)
            <div class="flex-col gap-1">
                <span{deps}>{fmt.Sprintf("Count: %d", count.Get())}</span>
            </div>
        }
    """

    def analyze(self, deps: str):
        return analyze(self.SOURCE.replace("{deps}", deps))

    def test_detected(self):
        result = self.analyze("")
        assert result.error is None
        (binding,) = result.components[0].state_bindings
        assert binding.state_vars == ["count"]
        assert binding.explicit_deps is False

    def test_explicit(self):
        result = self.analyze(" deps={[count]}")
        assert result.error is None
        (binding,) = result.components[0].state_bindings
        assert binding.state_vars == ["count"]
        assert binding.explicit_deps is True


if __name__ == "__main__":
    pytest.main([__file__])
