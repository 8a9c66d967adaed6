"""
Utility-class translator for class="..." attributes.

Maps Tailwind-style class names (flex-col, gap-2, text-cyan, ...) to go-tui
element options, validates class lists and suggests corrections for
unknown classes.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class ClassMapping:
    """The go-tui translation of one utility class."""

    option: str = ""  # Go option expression, e.g. "tui.WithGap(1)"
    needs_import: str = ""  # "tui", "layout" or ""
    is_text_style: bool = False
    text_method: str = ""  # method chained on tui.NewStyle(), e.g. "Bold()"


@dataclass
class ClassValidation:
    valid: bool = False
    cls: str = ""
    suggestion: str = ""


@dataclass
class ClassWithPosition:
    """A class token with its column span relative to the attribute value."""

    cls: str = ""
    start_col: int = 0
    end_col: int = 0
    valid: bool = False
    suggestion: str = ""


@dataclass
class ClassParseResult:
    options: list[str] = field(default_factory=list)
    text_methods: list[str] = field(default_factory=list)
    needs_imports: set[str] = field(default_factory=set)


_COLORS = ["red", "green", "blue", "cyan", "magenta", "yellow", "white", "black"]


def _option(option: str, needs_import: str = "tui") -> ClassMapping:
    return ClassMapping(option=option, needs_import=needs_import)


def _text_style(method: str, needs_import: str = "") -> ClassMapping:
    return ClassMapping(is_text_style=True, text_method=method, needs_import=needs_import)


STATIC_CLASSES: dict[str, ClassMapping] = {
    # Flex direction
    "flex": _option("tui.WithDirection(tui.Row)"),
    "flex-row": _option("tui.WithDirection(tui.Row)"),
    "flex-col": _option("tui.WithDirection(tui.Column)"),
    # Flex properties
    "flex-grow": _option("tui.WithFlexGrow(1)", ""),
    "flex-shrink": _option("tui.WithFlexShrink(1)", ""),
    "grow": _option("tui.WithFlexGrow(1)", ""),
    "grow-0": _option("tui.WithFlexGrow(0)", ""),
    "shrink": _option("tui.WithFlexShrink(1)", ""),
    "shrink-0": _option("tui.WithFlexShrink(0)", ""),
    "flex-1": _option("tui.WithFlexGrow(1)", ""),
    "flex-none": _option("tui.WithFlexGrow(0)", ""),
    # Justify content
    "justify-start": _option("tui.WithJustify(tui.JustifyStart)"),
    "justify-center": _option("tui.WithJustify(tui.JustifyCenter)"),
    "justify-end": _option("tui.WithJustify(tui.JustifyEnd)"),
    "justify-between": _option("tui.WithJustify(tui.JustifySpaceBetween)"),
    "justify-evenly": _option("tui.WithJustify(tui.JustifySpaceEvenly)"),
    "justify-around": _option("tui.WithJustify(tui.JustifySpaceAround)"),
    # Align items
    "items-start": _option("tui.WithAlign(tui.AlignStart)"),
    "items-center": _option("tui.WithAlign(tui.AlignCenter)"),
    "items-end": _option("tui.WithAlign(tui.AlignEnd)"),
    "items-stretch": _option("tui.WithAlign(tui.AlignStretch)"),
    # Self alignment
    "self-start": _option("tui.WithAlignSelf(tui.AlignStart)"),
    "self-center": _option("tui.WithAlignSelf(tui.AlignCenter)"),
    "self-end": _option("tui.WithAlignSelf(tui.AlignEnd)"),
    "self-stretch": _option("tui.WithAlignSelf(tui.AlignStretch)"),
    # Text alignment
    "text-left": _option("tui.WithTextAlign(tui.TextAlignLeft)", ""),
    "text-center": _option("tui.WithTextAlign(tui.TextAlignCenter)", ""),
    "text-right": _option("tui.WithTextAlign(tui.TextAlignRight)", ""),
    # Borders
    "border": _option("tui.WithBorder(tui.BorderSingle)"),
    "border-single": _option("tui.WithBorder(tui.BorderSingle)"),
    "border-rounded": _option("tui.WithBorder(tui.BorderRounded)"),
    "border-double": _option("tui.WithBorder(tui.BorderDouble)"),
    "border-thick": _option("tui.WithBorder(tui.BorderThick)"),
    # Text styles
    "font-bold": _text_style("Bold()"),
    "font-dim": _text_style("Dim()"),
    "text-dim": _text_style("Dim()"),
    "italic": _text_style("Italic()"),
    "underline": _text_style("Underline()"),
    "blink": _text_style("Blink()"),
    "reverse": _text_style("Reverse()"),
    "strikethrough": _text_style("Strikethrough()"),
    # Scroll
    "overflow-scroll": _option("tui.WithScrollable(tui.ScrollBoth)", ""),
    "overflow-y-scroll": _option("tui.WithScrollable(tui.ScrollVertical)", ""),
    "overflow-x-scroll": _option("tui.WithScrollable(tui.ScrollHorizontal)", ""),
}

for _color in _COLORS:
    _go_color = f"tui.{_color.capitalize()}"
    STATIC_CLASSES[f"border-{_color}"] = _option(f"tui.WithBorderStyle(tui.NewStyle().Foreground({_go_color}))")
    STATIC_CLASSES[f"text-{_color}"] = _text_style(f"Foreground({_go_color})", "tui")
    STATIC_CLASSES[f"bg-{_color}"] = _option(f"tui.WithBackground(tui.NewStyle().Background({_go_color}))")


def _percent(m: re.Match) -> str | None:
    numerator, denominator = int(m.group(1)), int(m.group(2))
    if denominator == 0:
        return None
    return f"{numerator / denominator * 100:.2f}"


# (pattern, builder) pairs tried in order after the static table
_PATTERN_CLASSES: list[tuple[re.Pattern, Callable[[re.Match], str | None]]] = [
    (re.compile(r"^gap-(\d+)$", re.ASCII), lambda m: f"tui.WithGap({int(m.group(1))})"),
    (re.compile(r"^p-(\d+)$", re.ASCII), lambda m: f"tui.WithPadding({int(m.group(1))})"),
    (re.compile(r"^px-(\d+)$", re.ASCII), lambda m: f"tui.WithPaddingTRBL(0, {int(m.group(1))}, 0, {int(m.group(1))})"),
    (re.compile(r"^py-(\d+)$", re.ASCII), lambda m: f"tui.WithPaddingTRBL({int(m.group(1))}, 0, {int(m.group(1))}, 0)"),
    (re.compile(r"^pt-(\d+)$", re.ASCII), lambda m: f"tui.WithPaddingTRBL({int(m.group(1))}, 0, 0, 0)"),
    (re.compile(r"^pr-(\d+)$", re.ASCII), lambda m: f"tui.WithPaddingTRBL(0, {int(m.group(1))}, 0, 0)"),
    (re.compile(r"^pb-(\d+)$", re.ASCII), lambda m: f"tui.WithPaddingTRBL(0, 0, {int(m.group(1))}, 0)"),
    (re.compile(r"^pl-(\d+)$", re.ASCII), lambda m: f"tui.WithPaddingTRBL(0, 0, 0, {int(m.group(1))})"),
    (re.compile(r"^m-(\d+)$", re.ASCII), lambda m: f"tui.WithMargin({int(m.group(1))})"),
    (re.compile(r"^mx-(\d+)$", re.ASCII), lambda m: f"tui.WithMarginTRBL(0, {int(m.group(1))}, 0, {int(m.group(1))})"),
    (re.compile(r"^my-(\d+)$", re.ASCII), lambda m: f"tui.WithMarginTRBL({int(m.group(1))}, 0, {int(m.group(1))}, 0)"),
    (re.compile(r"^mt-(\d+)$", re.ASCII), lambda m: f"tui.WithMarginTRBL({int(m.group(1))}, 0, 0, 0)"),
    (re.compile(r"^mr-(\d+)$", re.ASCII), lambda m: f"tui.WithMarginTRBL(0, {int(m.group(1))}, 0, 0)"),
    (re.compile(r"^mb-(\d+)$", re.ASCII), lambda m: f"tui.WithMarginTRBL(0, 0, {int(m.group(1))}, 0)"),
    (re.compile(r"^ml-(\d+)$", re.ASCII), lambda m: f"tui.WithMarginTRBL(0, 0, 0, {int(m.group(1))})"),
    (re.compile(r"^w-(\d+)$", re.ASCII), lambda m: f"tui.WithWidth({int(m.group(1))})"),
    (re.compile(r"^h-(\d+)$", re.ASCII), lambda m: f"tui.WithHeight({int(m.group(1))})"),
    (re.compile(r"^min-w-(\d+)$", re.ASCII), lambda m: f"tui.WithMinWidth({int(m.group(1))})"),
    (re.compile(r"^max-w-(\d+)$", re.ASCII), lambda m: f"tui.WithMaxWidth({int(m.group(1))})"),
    (re.compile(r"^min-h-(\d+)$", re.ASCII), lambda m: f"tui.WithMinHeight({int(m.group(1))})"),
    (re.compile(r"^max-h-(\d+)$", re.ASCII), lambda m: f"tui.WithMaxHeight({int(m.group(1))})"),
    (re.compile(r"^w-(\d+)/(\d+)$", re.ASCII), lambda m: (p := _percent(m)) and f"tui.WithWidthPercent({p})"),
    (re.compile(r"^h-(\d+)/(\d+)$", re.ASCII), lambda m: (p := _percent(m)) and f"tui.WithHeightPercent({p})"),
    (re.compile(r"^w-full$"), lambda m: "tui.WithWidthPercent(100.00)"),
    (re.compile(r"^w-auto$"), lambda m: "tui.WithWidthAuto()"),
    (re.compile(r"^h-full$"), lambda m: "tui.WithHeightPercent(100.00)"),
    (re.compile(r"^h-auto$"), lambda m: "tui.WithHeightAuto()"),
    (re.compile(r"^flex-grow-(\d+)$", re.ASCII), lambda m: f"tui.WithFlexGrow({int(m.group(1))})"),
    (re.compile(r"^flex-shrink-(\d+)$", re.ASCII), lambda m: f"tui.WithFlexShrink({int(m.group(1))})"),
]

# Common misspellings and alternatives
SIMILAR_CLASSES = {
    "flex-column": "flex-col",
    "flex-columns": "flex-col",
    "flex-rows": "flex-row",
    "col": "flex-col",
    "row": "flex-row",
    "column": "flex-col",
    "columns": "flex-col",
    "rows": "flex-row",
    "gap": "gap-1",
    "padding": "p-1",
    "margin": "m-1",
    "bold": "font-bold",
    "dim": "font-dim",
    "width": "w-1",
    "height": "h-1",
    "center": "text-center",
    "left": "text-left",
    "right": "text-right",
    "align-center": "text-center",
    "align-left": "text-left",
    "align-right": "text-right",
    "no-grow": "grow-0",
    "no-shrink": "shrink-0",
    "padding-top": "pt-1",
    "padding-bottom": "pb-1",
    "padding-left": "pl-1",
    "padding-right": "pr-1",
    "margin-top": "mt-1",
    "margin-bottom": "mb-1",
    "margin-left": "ml-1",
    "margin-right": "mr-1",
}

# Pattern-class examples offered as fuzzy-match candidates
_PATTERN_EXAMPLES = (
    [f"{prefix}-{n}" for prefix in ("gap", "p", "px", "py", "pt", "pr", "pb", "pl") for n in range(1, 5)]
    + [f"{prefix}-{n}" for prefix in ("m", "mx", "my", "mt", "mr", "mb", "ml") for n in range(1, 5)]
    + ["w-1", "w-10", "w-20", "w-50", "w-100", "w-full", "w-auto", "w-1/2", "w-1/3", "w-2/3", "w-1/4", "w-3/4"]
    + ["h-1", "h-10", "h-20", "h-50", "h-100", "h-full", "h-auto", "h-1/2", "h-1/3", "h-2/3", "h-1/4", "h-3/4"]
    + ["min-w-1", "min-w-10", "max-w-50", "max-w-100", "min-h-1", "min-h-10", "max-h-50", "max-h-100"]
    + ["flex-grow-0", "flex-grow-1", "flex-grow-2", "flex-shrink-0", "flex-shrink-1", "flex-shrink-2"]
)

KNOWN_CLASS_NAMES: list[str] = list(STATIC_CLASSES) + _PATTERN_EXAMPLES

# Only suggest classes at most this many edits away
MAX_SUGGESTION_DISTANCE = 3


def parse_class(cls: str) -> ClassMapping | None:
    """Translate a single class, or return None if it is unknown."""
    cls = cls.strip()
    if not cls:
        return None

    mapping = STATIC_CLASSES.get(cls)
    if mapping is not None:
        return mapping

    for pattern, build in _PATTERN_CLASSES:
        m = pattern.match(cls)
        if m is not None:
            option = build(m)
            if option:
                return ClassMapping(option=option)
    return None


def parse_classes(classes: str) -> ClassParseResult:
    """Translate a whitespace separated class list, ignoring unknown classes."""
    result = ClassParseResult()
    for cls in classes.split():
        mapping = parse_class(cls)
        if mapping is None:
            continue
        if mapping.is_text_style:
            result.text_methods.append(mapping.text_method)
        elif mapping.option:
            result.options.append(mapping.option)
        if mapping.needs_import:
            result.needs_imports.add(mapping.needs_import)
    return result


def needs_imports(classes: str) -> set[str]:
    """Return the import keys ("tui", "layout") a class list requires."""
    return parse_classes(classes).needs_imports


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def find_similar_class(cls: str) -> str:
    """Suggest a known class for an unknown one, or return ""."""
    suggestion = SIMILAR_CLASSES.get(cls)
    if suggestion is not None:
        return suggestion

    best, best_distance = "", MAX_SUGGESTION_DISTANCE + 1
    for known in KNOWN_CLASS_NAMES:
        distance = levenshtein_distance(cls, known)
        if distance < best_distance:
            best, best_distance = known, distance
    return best


def validate_class(cls: str) -> ClassValidation:
    cls = cls.strip()
    if not cls:
        return ClassValidation(valid=False, cls=cls)
    if parse_class(cls) is not None:
        return ClassValidation(valid=True, cls=cls)
    return ClassValidation(valid=False, cls=cls, suggestion=find_similar_class(cls))


def classes_with_positions(classes: str, start_col: int = 0) -> list[ClassWithPosition]:
    """
    Split a class list and validate each class, keeping its column span.

    Args:
        classes: The attribute value, e.g. "flex-col gap-1"
        start_col: Column offset added to every span

    Returns:
        One entry per class, in order
    """
    result = []
    for m in re.finditer(r"[^ \t]+", classes):
        validation = validate_class(m.group())
        result.append(
            ClassWithPosition(
                cls=m.group(),
                start_col=start_col + m.start(),
                end_col=start_col + m.end(),
                valid=validation.valid,
                suggestion=validation.suggestion,
            )
        )
    return result
