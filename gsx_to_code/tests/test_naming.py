#!/usr/bin/env python3

from textwrap import dedent
from unittest import TestCase

import pytest

from gsx_to_code.pipeline import AnalyzerConfig, assign_element_names, parse_source


def body_of(markup: str):
    indented = "\n".join("    " + line if line else line for line in dedent(markup).strip("\n").splitlines())
    file, diagnostics = parse_source(f"package ui\n\n@component Test() {{\n{indented}\n}}\n")
    assert not diagnostics.has_errors(), str(diagnostics)
    return file.components[0].body


class TestAssignElementNames(TestCase):
    """Test the synthetic element naming shared by analysis and code emission"""

    def test_counter_in_document_order(self):
        names = assign_element_names(
            body_of(
                """
                <div>
                    <span>a</span>
                    <p>b</p>
                </div>
                """
            )
        )
        self.assertEqual([n.name for n in names], ["__tmp_0", "__tmp_1", "__tmp_2"])
        self.assertEqual([n.element.tag for n in names], ["div", "span", "p"])

    def test_text_children_take_slots(self):
        names = assign_element_names(
            body_of(
                """
                <div>
                    Total: {total}
                    <span>x</span>
                </div>
                """
            )
        )
        div, span = names
        self.assertEqual(div.name, "__tmp_0")
        self.assertEqual(div.child_targets, ["__tmp_1", "__tmp_2"])
        self.assertEqual(span.name, "__tmp_3")

    def test_inline_text_rides_on_element(self):
        names = assign_element_names(body_of("<span>{label}</span>\n<span>a {b}</span>"))
        self.assertEqual([n.name for n in names], ["__tmp_0", "__tmp_1"])
        self.assertEqual(names[0].child_targets, [])
        self.assertEqual(names[1].child_targets, ["__tmp_2", "__tmp_3"])

    def test_named_refs(self):
        names = assign_element_names(
            body_of(
                """
                <div #Panel>
                    <span>x</span>
                    @for _, item := range items {
                        <p #Row>{item}</p>
                    }
                </div>
                """
            )
        )
        self.assertEqual([(n.name, n.uses_counter, n.in_loop) for n in names], [
            ("Panel", False, False),
            ("__tmp_0", True, False),
            ("__tmp_1", True, True),
        ])

    def test_transparent_wrappers(self):
        names = assign_element_names(
            body_of(
                """
                @let header = <div><span>h</span></div>
                @if ok {
                    <p>yes</p>
                } @else {
                    <p>no</p>
                }
                @Card() {
                    <span>child</span>
                }
                """
            )
        )
        # The @let element itself is emitted by its binding, only its children are named here
        self.assertEqual([n.element.tag for n in names], ["span", "p", "p", "span"])
        self.assertEqual([n.name for n in names], ["__tmp_0", "__tmp_1", "__tmp_2", "__tmp_3"])

    def test_configured_prefix(self):
        config = AnalyzerConfig(element_name_prefix="el", inline_text_tags=[])
        names = assign_element_names(body_of("<span>{label}</span>"), config)
        self.assertEqual(names[0].name, "el0")
        self.assertEqual(names[0].child_targets, ["el1"])

    def test_analysis_exposes_names(self):
        from gsx_to_code.pipeline import analyze_source

        result = analyze_source("package ui\n\n@component A() {\n    <div><span>x</span></div>\n}\n")
        self.assertEqual([n.name for n in result.components[0].element_names], ["__tmp_0", "__tmp_1"])


if __name__ == "__main__":
    pytest.main([__file__])
