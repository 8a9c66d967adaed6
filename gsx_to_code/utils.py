"""
Utility functions for GSX identifiers.
"""

import re

# ASCII-only, as in Go
_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_simple_identifier(text: str) -> bool:
    """Check whether text is a single Go identifier with nothing around it.

    Examples:
        "header" -> True
        "_tmp2" -> True
        "item.Name" -> False
        "2x" -> False
    """
    return _IDENTIFIER_PATTERN.fullmatch(text) is not None


def is_valid_ref_name(name: str) -> bool:
    """Check whether name can be used as a #Ref: an exported Go identifier.

    The first character must be an uppercase letter, the rest letters,
    digits or underscores.
    """
    if not name or not name[0].isupper():
        return False
    return all(ch.isalpha() or ch.isdigit() or ch == "_" for ch in name[1:])
