"""
Type classification heuristics.

Generated tests decide how to build a value (flat literal, struct literal,
package-qualified name) from the *text* of a type rather than from a real type
system. All of those decisions live behind ``TypeClassifier`` so that a
type-system-backed implementation can replace the text heuristic without
touching the models or the render engine.
"""

from __future__ import annotations

from typing import Protocol

BASIC_TYPES = frozenset(
    {
        "bool",
        "string",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "byte",
        "rune",
        "float32",
        "float64",
        "complex64",
        "complex128",
    }
)

STRING_MAP_PREFIX = "map[string]"
STRUCT_PREFIX = "struct"
STRING_PLACEHOLDER = '"stringValue"'
NIL_VALUE = "nil"


class TypeClassifier(Protocol):
    """Decides how a type reference is treated when building test values."""

    def is_basic(self, type_text: str) -> bool:
        """Return True when ``type_text`` needs no further construction."""
        ...

    def zero_value(self, type_text: str) -> str:
        """Return the zero literal for a basic ``type_text``."""
        ...

    def is_struct(self, underlying: str) -> bool:
        """Return True when ``underlying`` is a struct literal shape."""
        ...

    def is_qualified(self, type_text: str) -> bool:
        """Return True when ``type_text`` already carries a package qualifier."""
        ...


class TextHeuristicClassifier:
    """
    Classifier working purely on type text.

    Known imprecision is kept on purpose: any string-keyed map counts as basic
    (and gets ``0`` as its zero literal), and a named type whose underlying
    text starts with ``struct`` is a struct regardless of aliasing.
    """

    def is_basic(self, type_text: str) -> bool:
        return type_text in BASIC_TYPES or type_text.startswith(STRING_MAP_PREFIX)

    def zero_value(self, type_text: str) -> str:
        if type_text == "bool":
            return "false"
        if type_text == "string":
            return STRING_PLACEHOLDER
        return "0"

    def is_struct(self, underlying: str) -> bool:
        return underlying.startswith(STRUCT_PREFIX)

    def is_qualified(self, type_text: str) -> bool:
        return "." in type_text


CLASSIFIER: TypeClassifier = TextHeuristicClassifier()
