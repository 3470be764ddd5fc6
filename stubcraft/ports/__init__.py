"""
Port interfaces for the stubcraft system.

This module contains the contracts between the render engine and its
collaborators: the byte sink generated text is written to and the error types
raised at the render boundary.
"""

from .render_error import (
    RenderError,
    TemplateExecutionError,
    TemplateSourceError,
    WriteError,
)
from .sink_port import ByteSink

__all__ = [
    "ByteSink",
    "RenderError",
    "TemplateExecutionError",
    "TemplateSourceError",
    "WriteError",
]
