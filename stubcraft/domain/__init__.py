"""Domain models and type classification for stubcraft."""

from .classification import CLASSIFIER, TextHeuristicClassifier, TypeClassifier
from .models import (
    Field,
    Function,
    Header,
    Import,
    Receiver,
    ReturnArity,
    SourcePath,
    StubCraftError,
    TypeExpression,
    capitalize,
)

__all__ = [
    "CLASSIFIER",
    "Field",
    "Function",
    "Header",
    "Import",
    "Receiver",
    "ReturnArity",
    "SourcePath",
    "StubCraftError",
    "TextHeuristicClassifier",
    "TypeClassifier",
    "TypeExpression",
    "capitalize",
]
