"""
stubcraft - unit-test stub generation from analyzed declarations.

The package turns a model of one analyzed function or method into test source
text by rendering it through a set of named, overridable Jinja2 templates.
"""

from .domain.models import (
    Field,
    Function,
    Header,
    Import,
    Receiver,
    ReturnArity,
    SourcePath,
    StubCraftError,
    TypeExpression,
)
from .ports.render_error import TemplateExecutionError, TemplateSourceError, WriteError
from .render.engine import FunctionView, RenderEngine
from .render.registry import TemplateRegistry, TemplateSlot

__version__ = "0.1.0"

__all__ = [
    "Field",
    "Function",
    "FunctionView",
    "Header",
    "Import",
    "Receiver",
    "RenderEngine",
    "ReturnArity",
    "SourcePath",
    "StubCraftError",
    "TemplateExecutionError",
    "TemplateRegistry",
    "TemplateSlot",
    "TemplateSourceError",
    "TypeExpression",
    "WriteError",
]
