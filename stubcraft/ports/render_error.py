"""Error types raised at the render engine boundary.

Each error keeps the underlying failure reachable through exception chaining
(``raise ... from e``) and carries the template source, slot or path involved
so callers can report it without parsing the message.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.models import StubCraftError


class RenderError(StubCraftError):
    """Base class for template loading, rendering and writing failures."""


@dataclass
class TemplateSourceError(RenderError):
    """Reading or compiling a template source failed.

    Attributes:
        message: Human-friendly error summary.
        source: Directory, file, catalog name or slot the failure came from.
    """

    message: str
    source: str | None = None

    def __str__(self) -> str:
        if self.source:
            return f"TemplateSourceError(source={self.source}): {self.message}"
        return f"TemplateSourceError: {self.message}"


@dataclass
class TemplateExecutionError(RenderError):
    """Executing a template against a model failed.

    Attributes:
        message: Human-friendly error summary.
        template: Slot being executed when the failure happened.
    """

    message: str
    template: str | None = None

    def __str__(self) -> str:
        if self.template:
            return f"TemplateExecutionError(template={self.template}): {self.message}"
        return f"TemplateExecutionError: {self.message}"


@dataclass
class WriteError(RenderError):
    """Writing generated output to a file sink failed.

    Attributes:
        message: Human-friendly error summary.
        path: Destination that could not be written.
    """

    message: str
    path: str | None = None

    def __str__(self) -> str:
        if self.path:
            return f"WriteError(path={self.path}): {self.message}"
        return f"WriteError: {self.message}"
