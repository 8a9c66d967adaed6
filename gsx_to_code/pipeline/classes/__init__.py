"""
Classes - translation and validation of utility classes in class="...".
"""

from .translator import (
    ClassMapping,
    ClassValidation,
    ClassWithPosition,
    classes_with_positions,
    find_similar_class,
    levenshtein_distance,
    needs_imports,
    parse_class,
    parse_classes,
    validate_class,
)

__all__ = [
    "ClassMapping",
    "ClassValidation",
    "ClassWithPosition",
    "classes_with_positions",
    "find_similar_class",
    "levenshtein_distance",
    "needs_imports",
    "parse_class",
    "parse_classes",
    "validate_class",
]
