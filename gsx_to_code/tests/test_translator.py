#!/usr/bin/env python3

from unittest import TestCase

import pytest

from gsx_to_code.pipeline.classes import (
    classes_with_positions,
    find_similar_class,
    levenshtein_distance,
    needs_imports,
    parse_class,
    parse_classes,
    validate_class,
)


class TestParseClass:
    """Test translation of single utility classes"""

    @pytest.mark.parametrize(
        "cls,option",
        [
            ("flex-col", "tui.WithDirection(tui.Column)"),
            ("border-rounded", "tui.WithBorder(tui.BorderRounded)"),
            ("gap-2", "tui.WithGap(2)"),
            ("p-1", "tui.WithPadding(1)"),
            ("px-2", "tui.WithPaddingTRBL(0, 2, 0, 2)"),
            ("mt-3", "tui.WithMarginTRBL(3, 0, 0, 0)"),
            ("w-20", "tui.WithWidth(20)"),
            ("max-h-10", "tui.WithMaxHeight(10)"),
            ("w-1/2", "tui.WithWidthPercent(50.00)"),
            ("h-2/3", "tui.WithHeightPercent(66.67)"),
            ("w-full", "tui.WithWidthPercent(100.00)"),
            ("h-auto", "tui.WithHeightAuto()"),
            ("flex-grow-2", "tui.WithFlexGrow(2)"),
            ("bg-blue", "tui.WithBackground(tui.NewStyle().Background(tui.Blue))"),
        ],
    )
    def test_options(self, cls, option):
        mapping = parse_class(cls)
        assert mapping is not None
        assert mapping.option == option

    def test_text_styles(self):
        mapping = parse_class("font-bold")
        assert mapping.is_text_style
        assert mapping.text_method == "Bold()"
        assert parse_class("text-cyan").text_method == "Foreground(tui.Cyan)"

    @pytest.mark.parametrize("cls", ["", "   ", "flex-column", "gap-", "w-1/0", "p-x", "GAP-1"])
    def test_unknown(self, cls):
        assert parse_class(cls) is None

    def test_parse_classes(self):
        result = parse_classes("flex-col font-bold gap-1 nope text-red")
        assert result.options == ["tui.WithDirection(tui.Column)", "tui.WithGap(1)"]
        assert result.text_methods == ["Bold()", "Foreground(tui.Red)"]
        assert result.needs_imports == {"tui"}


class TestNeedsImports(TestCase):
    def test_imports(self):
        self.assertEqual(needs_imports("flex-col"), {"tui"})
        self.assertEqual(needs_imports("grow text-center font-bold"), set())
        self.assertEqual(needs_imports(""), set())


class TestSuggestions(TestCase):
    """Test validation and 'did you mean' suggestions"""

    def test_levenshtein(self):
        self.assertEqual(levenshtein_distance("", "abc"), 3)
        self.assertEqual(levenshtein_distance("kitten", "sitting"), 3)
        self.assertEqual(levenshtein_distance("gap-2", "gap-2"), 0)

    def test_alias_table_first(self):
        self.assertEqual(find_similar_class("flex-column"), "flex-col")
        self.assertEqual(find_similar_class("bold"), "font-bold")
        self.assertEqual(find_similar_class("center"), "text-center")

    def test_fuzzy_match(self):
        self.assertEqual(find_similar_class("gapx-2"), "gap-2")
        self.assertEqual(find_similar_class("itmes-center"), "items-center")

    def test_no_suggestion_when_too_far(self):
        self.assertEqual(find_similar_class("completely-unrelated"), "")

    def test_validate_class(self):
        self.assertTrue(validate_class("flex").valid)
        result = validate_class("boder")
        self.assertFalse(result.valid)
        self.assertEqual(result.suggestion, "border")

    def test_classes_with_positions(self):
        classes = classes_with_positions("flex-col  gapx-2\tp-1")
        self.assertEqual([(c.cls, c.start_col, c.end_col, c.valid) for c in classes], [
            ("flex-col", 0, 8, True),
            ("gapx-2", 10, 16, False),
            ("p-1", 17, 20, True),
        ])
        self.assertEqual(classes[1].suggestion, "gap-2")

    def test_classes_with_positions_offset(self):
        (cls,) = classes_with_positions("p-1", start_col=5)
        self.assertEqual((cls.start_col, cls.end_col), (5, 8))


if __name__ == "__main__":
    pytest.main([__file__])
