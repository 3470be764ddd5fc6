"""
Naming and formatting helpers exposed to templates.

Every helper is a pure function of a single model value. They are registered
as Jinja2 filters, so a template writes ``{{ param | param_name }}``.
"""

from __future__ import annotations

from typing import Any, Callable

from jinja2.exceptions import TemplateRuntimeError

from ..domain.classification import CLASSIFIER
from ..domain.models import INPUT_PREFIX, Field, Receiver, TypeExpression, capitalize


def add_package(expr: TypeExpression) -> bool:
    """True when the type needs the package alias prefixed in an external test package."""
    return not CLASSIFIER.is_basic(expr.value) and not CLASSIFIER.is_qualified(expr.value)


def field_name(field: Field) -> str:
    if field.is_named:
        return field.name
    return str(field.type)


def receiver_name(receiver: Receiver) -> str:
    name = receiver.name if receiver.is_named else receiver.short_name
    if name == "name":
        # Clashes with the test table's "name" field.
        return "n"
    if name == "t":
        # Clashes with the *testing.T argument.
        return "tr"
    return name


def param_name(field: Field) -> str:
    if field.is_named:
        return field.name
    return f"{INPUT_PREFIX}{field.index}"


def _result_name(prefix: str, field: Field) -> str:
    if field.is_named:
        return prefix + capitalize(field.name)
    if field.index == 0:
        return prefix
    return f"{prefix}{field.index}"


def want_name(field: Field) -> str:
    return _result_name("expected", field)


def got_name(field: Field) -> str:
    return _result_name("actual", field)


def fail(message: str) -> None:
    """Abort rendering from inside a template."""
    raise TemplateRuntimeError(message)


TEMPLATE_FILTERS: dict[str, Callable[[Any], Any]] = {
    "capitalize_first": capitalize,
    "add_package": add_package,
    "field_name": field_name,
    "receiver_name": receiver_name,
    "param_name": param_name,
    "want_name": want_name,
    "got_name": got_name,
}

TEMPLATE_GLOBALS: dict[str, Callable[..., Any]] = {
    "fail": fail,
}
