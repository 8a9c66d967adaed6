"""
Configuration for the GSX analyzer.

The defaults describe the element set of the go-tui runtime. A JSON file
passed with --config can override any field.
"""

from __future__ import annotations

from dataclasses import dataclass, field

ELEMENT_IMPORT = "github.com/grindlemire/go-tui/pkg/tui/element"
LAYOUT_IMPORT = "github.com/grindlemire/go-tui/pkg/layout"
TUI_IMPORT = "github.com/grindlemire/go-tui/pkg/tui"

DEFAULT_KNOWN_TAGS = ["div", "span", "p", "ul", "li", "button", "input", "table", "progress", "hr", "br"]

DEFAULT_VOID_TAGS = ["hr", "br", "input"]

DEFAULT_KNOWN_ATTRIBUTES = [
    # Dimensions
    "width",
    "widthPercent",
    "height",
    "heightPercent",
    "minWidth",
    "minHeight",
    "maxWidth",
    "maxHeight",
    # Flex container
    "direction",
    "justify",
    "align",
    "gap",
    # Flex item
    "flexGrow",
    "flexShrink",
    "alignSelf",
    # Spacing
    "padding",
    "margin",
    # Visual
    "border",
    "borderStyle",
    "background",
    # Text
    "text",
    "textStyle",
    "textAlign",
    # Focus
    "onFocus",
    "onBlur",
    "onEvent",
    "focusable",
    # Event handlers
    "onKeyPress",
    "onClick",
    # Watchers
    "onChannel",
    "onTimer",
    # Scroll
    "scrollable",
    "scrollOffset",
    "scrollbarStyle",
    "scrollbarThumbStyle",
    # Generic
    "disabled",
    "id",
    "class",
    "deps",
    "key",
]

# Keyed by the lowercased misspelling
DEFAULT_ATTRIBUTE_TYPOS = {
    "colour": "background",
    "color": "background",
    "onclick": "onEvent",
    "onfocus": "onFocus",
    "onblur": "onBlur",
    "flexgrow": "flexGrow",
    "flexshrink": "flexShrink",
    "textstyle": "textStyle",
    "textalign": "textAlign",
    "alignself": "alignSelf",
    "borderstyle": "borderStyle",
}


@dataclass
class AnalyzerConfig:
    """Configuration options for semantic analysis."""

    # Tags an element may use
    known_tags: list[str] = field(default_factory=lambda: list(DEFAULT_KNOWN_TAGS))

    # Tags that can never have children
    void_tags: list[str] = field(default_factory=lambda: list(DEFAULT_VOID_TAGS))

    # Attribute names an element may use
    known_attributes: list[str] = field(default_factory=lambda: list(DEFAULT_KNOWN_ATTRIBUTES))

    # Lowercased misspelling -> suggested attribute name
    attribute_typos: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ATTRIBUTE_TYPOS))

    # Imports added to the file when the matching feature is used
    element_import: str = ELEMENT_IMPORT
    layout_import: str = LAYOUT_IMPORT
    tui_import: str = TUI_IMPORT

    # Tags whose single text child is rendered by the element itself
    inline_text_tags: list[str] = field(default_factory=lambda: ["span", "p"])

    # Reactive state: `x := tui.NewState(init)`, params of type `*tui.State[T]`, reads via `x.Get()`
    state_constructor: str = "tui.NewState"
    state_type: str = "tui.State"
    state_accessor: str = "Get"

    # Prefix of synthetic element variable names
    element_name_prefix: str = "__tmp_"

    # Whether unknown utility classes in class="..." are reported
    validate_classes: bool = True

    def is_known_tag(self, tag: str) -> bool:
        return tag in self.known_tags

    def is_void_tag(self, tag: str) -> bool:
        return tag in self.void_tags

    def is_known_attribute(self, name: str) -> bool:
        return name in self.known_attributes

    def suggest_attribute(self, name: str) -> str:
        """Return the corrected name for a known misspelling, or ""."""
        return self.attribute_typos.get(name.lower(), "")

    @staticmethod
    def from_dict(d: dict) -> AnalyzerConfig:
        """Create a config from a dictionary."""
        config = AnalyzerConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "known_tags": self.known_tags,
            "void_tags": self.void_tags,
            "known_attributes": self.known_attributes,
            "attribute_typos": self.attribute_typos,
            "element_import": self.element_import,
            "layout_import": self.layout_import,
            "tui_import": self.tui_import,
            "inline_text_tags": self.inline_text_tags,
            "state_constructor": self.state_constructor,
            "state_type": self.state_type,
            "state_accessor": self.state_accessor,
            "element_name_prefix": self.element_name_prefix,
            "validate_classes": self.validate_classes,
        }
