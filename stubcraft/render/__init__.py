"""Template registry, helpers and render entry points."""

from .engine import FunctionView, RenderEngine
from .helpers import (
    add_package,
    field_name,
    got_name,
    param_name,
    receiver_name,
    want_name,
)
from .registry import MAX_CATALOG_ENTRIES, TemplateRegistry, TemplateSlot

__all__ = [
    "FunctionView",
    "MAX_CATALOG_ENTRIES",
    "RenderEngine",
    "TemplateRegistry",
    "TemplateSlot",
    "add_package",
    "field_name",
    "got_name",
    "param_name",
    "receiver_name",
    "want_name",
]
