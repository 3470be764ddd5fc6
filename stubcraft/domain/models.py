"""
Domain models for the stubcraft system.

These models describe one analyzed declaration (its types, fields, receiver
and signature) together with the file-level header of the test file being
generated. They are immutable snapshots built once by the analysis phase and
consumed read-only by the render engine. Derived, test-oriented views are
exposed as properties so templates can use them directly.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import Field as ModelField

from .classification import CLASSIFIER, NIL_VALUE

TEST_PREFIX = "Test"
SOURCE_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"
INPUT_PREFIX = "in"


class StubCraftError(Exception):
    """Base exception for stubcraft errors."""

    pass


def capitalize(text: str) -> str:
    """Upcase only the first character of ``text``."""
    if len(text) > 1:
        return text[0].upper() + text[1:]
    return text.upper()


class ReturnArity(str, Enum):
    """Mutually exclusive classification of what a function returns."""

    MULTIPLE = "multiple"
    ONE_VALUE = "one_value"
    ONLY_ERROR = "only_error"
    NONE = "none"


class TypeExpression(BaseModel):
    """A single type reference as it appears in a declaration."""

    model_config = ConfigDict(frozen=True)

    value: str = ModelField(..., min_length=1, description="Undecorated base type name")
    is_star: bool = ModelField(default=False, description="Pointer to the base type")
    is_variadic: bool = ModelField(default=False, description="Variadic parameter")
    is_writer: bool = ModelField(
        default=False, description="Parameter captured as an output channel"
    )
    underlying: str = ModelField(
        default="", description="Resolved representation without pointer/slice decoration"
    )

    def __str__(self) -> str:
        value = self.value
        if self.is_star:
            value = "*" + value
        if self.is_variadic:
            return "[]" + value
        return value


class Field(BaseModel):
    """A named or positional value slot: parameter, result or struct member."""

    model_config = ConfigDict(frozen=True)

    name: str = ModelField(default="", description="Declared name; empty or '_' if unnamed")
    type: TypeExpression = ModelField(..., description="Type of the slot")
    index: int = ModelField(default=0, ge=0, description="Position among siblings")

    @property
    def is_named(self) -> bool:
        return self.name not in ("", "_")

    @property
    def is_writer(self) -> bool:
        return self.type.is_writer

    @property
    def is_struct(self) -> bool:
        return CLASSIFIER.is_struct(self.type.underlying)

    @property
    def is_basic_type(self) -> bool:
        return CLASSIFIER.is_basic(str(self.type)) or CLASSIFIER.is_basic(
            self.type.underlying
        )

    @property
    def basic_value(self) -> str:
        """Zero literal for the field, taken from its type text or underlying."""
        for text in (str(self.type), self.type.underlying):
            if CLASSIFIER.is_basic(text):
                return CLASSIFIER.zero_value(text)
        return NIL_VALUE

    @property
    def has_no_package(self) -> bool:
        """True when the type is neither basic nor package-qualified."""
        return not CLASSIFIER.is_basic(str(self.type)) and not CLASSIFIER.is_qualified(
            self.type.value
        )

    @property
    def short_name(self) -> str:
        return self.type.value[0].lower()


def _check_indices(fields: list[Field], owner: str) -> None:
    indices = [field.index for field in fields]
    if indices != list(range(len(fields))):
        raise ValueError(f"{owner} indices must be contiguous from 0, got {indices}")


class Receiver(Field):
    """The bound value of a method plus the members of its owning type."""

    fields: list[Field] = ModelField(
        default_factory=list, description="Sibling struct members of the receiver type"
    )

    @model_validator(mode="after")
    def validate_field_indices(self) -> Receiver:
        _check_indices(self.fields, "Receiver field")
        return self


class Function(BaseModel):
    """
    Signature model of one function or method.

    ``results`` never contains the trailing error; ``returns_error`` records
    it instead.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ModelField(..., min_length=1, description="Function name")
    is_exported: bool = ModelField(default=False, description="Visible outside its package")
    is_constructor: bool = ModelField(
        default=False, description="Heuristically identified as a constructor"
    )
    receiver: Receiver | None = ModelField(
        default=None, description="Receiver for methods, None for free functions"
    )
    parameters: list[Field] = ModelField(default_factory=list, description="Ordered inputs")
    results: list[Field] = ModelField(
        default_factory=list, description="Ordered non-error results"
    )
    returns_error: bool = ModelField(default=False, description="Last result is an error")

    @model_validator(mode="after")
    def validate_indices(self) -> Function:
        _check_indices(self.parameters, "Parameter")
        _check_indices(self.results, "Result")
        return self

    @property
    def test_parameters(self) -> list[Field]:
        """Parameters a test case supplies, i.e. all but the writer-marked ones."""
        return [param for param in self.parameters if not param.is_writer]

    @property
    def test_results(self) -> list[Field]:
        """Results a test case checks, plus one captured string per writer parameter."""
        results = list(self.results)
        for param in self.parameters:
            if not param.is_writer:
                continue
            results.append(
                Field(
                    # Unnamed writers keep the buffer name of their parameter
                    name=param.name if param.is_named else f"{INPUT_PREFIX}{param.index}",
                    type=TypeExpression(value="string", is_writer=True, underlying="string"),
                    index=len(results),
                )
            )
        return results

    @property
    def arity(self) -> ReturnArity:
        count = len(self.results)
        if count > 1:
            return ReturnArity.MULTIPLE
        if count == 1 and not self.returns_error:
            return ReturnArity.ONE_VALUE
        if count == 0 and self.returns_error:
            return ReturnArity.ONLY_ERROR
        return ReturnArity.NONE

    @property
    def returns_multiple(self) -> bool:
        return self.arity is ReturnArity.MULTIPLE

    @property
    def only_returns_one_value(self) -> bool:
        return self.arity is ReturnArity.ONE_VALUE

    @property
    def only_returns_error(self) -> bool:
        return self.arity is ReturnArity.ONLY_ERROR

    @property
    def full_name(self) -> str:
        receiver_type = self.receiver.type.value if self.receiver else ""
        return capitalize(receiver_type) + capitalize(self.name)

    @property
    def test_name(self) -> str:
        """
        Name of the generated test function.

        The result always starts with ``Test`` followed by an uppercase letter
        or an underscore so the test runner picks it up, whatever the
        visibility of the declaration.
        """
        if self.name.startswith(TEST_PREFIX):
            return self.name
        if self.receiver is not None:
            receiver_type = self.receiver.type.value
            if receiver_type[0].islower():
                receiver_type = "_" + receiver_type
            return f"{TEST_PREFIX}{receiver_type}_{self.name}"
        if self.name[0].islower():
            return f"{TEST_PREFIX}_{self.name}"
        return TEST_PREFIX + self.name

    @property
    def is_naked(self) -> bool:
        return self.receiver is None and not self.parameters and not self.results


class Import(BaseModel):
    """One import of the test file; ``path`` is kept exactly as written."""

    model_config = ConfigDict(frozen=True)

    name: str = ModelField(default="", description="Import alias, empty for none")
    path: str = ModelField(..., description="Import path including quotes")


class Header(BaseModel):
    """File-level preamble of a generated test file."""

    model_config = ConfigDict(frozen=True)

    comments: list[str] = ModelField(default_factory=list, description="Leading comment lines")
    package: str = ModelField(..., description="Package of the code under test")
    test_package: str = ModelField(default="", description="Package of the test file")
    imports: list[Import] = ModelField(default_factory=list, description="Ordered imports")
    code: bytes = ModelField(default=b"", description="Raw code emitted verbatim after the header")

    @property
    def is_external(self) -> bool:
        """True when tests live in a package other than the one under test."""
        return bool(self.test_package) and self.test_package != self.package


class SourcePath(str):
    """A source file path able to name its sibling test file."""

    @property
    def is_test_path(self) -> bool:
        return self.endswith(TEST_SUFFIX)

    @property
    def test_path(self) -> SourcePath:
        if self.is_test_path:
            return self
        base = self[: -len(SOURCE_SUFFIX)] if self.endswith(SOURCE_SUFFIX) else str(self)
        return SourcePath(base + TEST_SUFFIX)
