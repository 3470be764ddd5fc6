"""Global fixtures and utilities for the stubcraft test suite.

Model factories here build the declarations used across modules: a free
function, a method on an unexported struct, a function with an output-capture
writer and the matching test file headers.
"""

import pytest

from stubcraft.domain.models import (
    Field,
    Function,
    Header,
    Import,
    Receiver,
    TypeExpression,
)
from stubcraft.render.engine import RenderEngine
from stubcraft.render.registry import TemplateRegistry


class BufferSink:
    """Byte sink collecting everything written to it."""

    def __init__(self) -> None:
        self.chunks: list[bytes] = []

    def write(self, data: bytes) -> int:
        self.chunks.append(data)
        return len(data)

    @property
    def text(self) -> str:
        return b"".join(self.chunks).decode("utf-8")


def basic(value: str, **kwargs) -> TypeExpression:
    """Type expression whose underlying representation is the type itself."""
    return TypeExpression(value=value, underlying=kwargs.pop("underlying", value), **kwargs)


def field(name: str, type_: TypeExpression, index: int = 0) -> Field:
    return Field(name=name, type=type_, index=index)


# ================================================================================
# Model Fixtures
# ================================================================================

@pytest.fixture
def header():
    """Header of an in-package test file."""
    return Header(
        package="calc",
        test_package="calc",
        imports=[
            Import(path='"bytes"'),
            Import(path='"reflect"'),
            Import(path='"testing"'),
        ],
    )


@pytest.fixture
def external_header():
    """Header of a test file living in the external calc_test package."""
    return Header(
        package="calc",
        test_package="calc_test",
        imports=[Import(path='"testing"'), Import(name="calc", path='"example.com/calc"')],
    )


@pytest.fixture
def double_function():
    """func Double(x int) int"""
    return Function(
        name="Double",
        is_exported=True,
        parameters=[field("x", basic("int"))],
        results=[field("", basic("int"))],
    )


@pytest.fixture
def repo_receiver():
    """r *repo with a single db member."""
    return Receiver(
        name="r",
        type=TypeExpression(value="repo", is_star=True, underlying="struct{db *sql.DB}"),
        fields=[field("db", TypeExpression(value="sql.DB", is_star=True, underlying="struct{}"))],
    )


@pytest.fixture
def save_method(repo_receiver):
    """func (r *repo) Save() error"""
    return Function(name="Save", receiver=repo_receiver, returns_error=True)


@pytest.fixture
def print_function():
    """func Print(w io.Writer, msg string)"""
    return Function(
        name="Print",
        is_exported=True,
        parameters=[
            field("w", TypeExpression(value="io.Writer", is_writer=True, underlying="interface{Write([]byte) (int, error)}")),
            field("msg", basic("string"), index=1),
        ],
    )


@pytest.fixture
def buffer_sink():
    return BufferSink()


@pytest.fixture
def engine():
    """Render engine with the bundled default templates."""
    return RenderEngine(TemplateRegistry.from_defaults())
