"""
Render engine entry points.

``RenderEngine`` owns one ``TemplateRegistry`` value and renders headers and
test functions into a caller-supplied byte sink. Output is streamed: chunks
are written as the template produces them, so a failing sink stops the render
mid-stream and leaves whatever was already written in place.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..domain.models import Function, Header
from ..ports.render_error import TemplateExecutionError
from ..ports.sink_port import ByteSink
from .registry import TemplateRegistry, TemplateSlot, TemplateText

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


@dataclass(frozen=True)
class FunctionView:
    """
    Everything the ``function`` template sees for one declaration.

    The flags only pick template branches; they never change the function or
    header data.
    """

    function: Function
    header: Header
    constructor: Function | None = None
    print_inputs: bool = False
    subtests: bool = False
    parallel: bool = False
    template_params: Mapping[str, Any] = field(default_factory=dict)

    def context(self) -> dict[str, Any]:
        return {
            "fn": self.function,
            "header": self.header,
            "constructor": self.constructor,
            "print_inputs": self.print_inputs,
            "subtests": self.subtests,
            "parallel": self.parallel,
            "params": MappingProxyType(dict(self.template_params)),
        }


class RenderEngine:
    """Renders declaration models through a named template registry."""

    def __init__(self, registry: TemplateRegistry | None = None) -> None:
        self._registry: TemplateRegistry | None = (
            registry if registry is not None else TemplateRegistry.from_defaults()
        )

    @property
    def registry(self) -> TemplateRegistry | None:
        return self._registry

    # ------------------------
    # Reloading
    # ------------------------
    # Every reload drops the current registry before building the next one.
    # If building fails the engine is left without templates until a later
    # reload succeeds.
    def reload_defaults(self) -> None:
        self._registry = None
        self._registry = TemplateRegistry.from_defaults()

    def reload_from_data(self, texts: Iterable[TemplateText] | Mapping[str, TemplateText]) -> None:
        self._registry = None
        self._registry = TemplateRegistry.from_data(texts)

    def reload_from_directory(self, directory: str | Path) -> None:
        self._registry = None
        self._registry = TemplateRegistry.from_directory(directory)

    def reload_from_name(self, name: str) -> None:
        self._registry = None
        self._registry = TemplateRegistry.from_name(name)

    # ------------------------
    # Rendering
    # ------------------------
    def render_header(self, sink: ByteSink, header: Header) -> None:
        """Render the ``header`` slot, then copy ``header.code`` verbatim."""
        self._execute(sink, TemplateSlot.HEADER, {"header": header})
        if header.code:
            sink.write(header.code)

    def render_function(
        self,
        sink: ByteSink,
        function: Function,
        header: Header,
        constructor: Function | None = None,
        print_inputs: bool = False,
        subtests: bool = False,
        parallel: bool = False,
        template_params: Mapping[str, Any] | None = None,
    ) -> None:
        """Render the ``function`` slot for one declaration."""
        view = FunctionView(
            function=function,
            header=header,
            constructor=constructor,
            print_inputs=print_inputs,
            subtests=subtests,
            parallel=parallel,
            template_params=template_params or {},
        )
        self.render_view(sink, view)

    def render_view(self, sink: ByteSink, view: FunctionView) -> None:
        logger.debug(f"Rendering {view.function.test_name}")
        self._execute(sink, TemplateSlot.FUNCTION, view.context())

    def _execute(self, sink: ByteSink, slot: TemplateSlot, context: dict[str, Any]) -> None:
        if self._registry is None:
            raise TemplateExecutionError(
                "No templates loaded; the last reload failed", template=slot.value
            )
        template = self._registry.get(slot)

        # Sink errors are raised from the write below, outside the guarded
        # template step, so they reach the caller unchanged.
        for chunk in self._generate(template.generate(context), slot):
            if chunk:
                sink.write(chunk.encode(ENCODING))

    @staticmethod
    def _generate(chunks: Iterator[str], slot: TemplateSlot) -> Iterator[str]:
        while True:
            try:
                chunk = next(chunks)
            except StopIteration:
                return
            except TemplateExecutionError:
                raise
            except Exception as e:
                error_msg = f"Failed to execute template '{slot.value}': {e}"
                logger.error(error_msg)
                raise TemplateExecutionError(error_msg, template=slot.value) from e
            yield chunk
