"""
Declaration document loader.

Reads an already-analyzed description of one source file (its test header and
the declarations to generate tests for) from YAML or JSON and builds the
domain models from it. Indices may be omitted in the document; they are
assigned from list positions.

Example document::

    path: store/repo.go
    header:
      package: store
      imports:
        - path: '"testing"'
    constructors:
      repo: newRepo
    functions:
      - name: Save
        receiver:
          name: r
          type: {value: repo, is_star: true, underlying: "struct{db *sql.DB}"}
        returns_error: true
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ...domain.models import Function, Header, SourcePath, StubCraftError

logger = logging.getLogger(__name__)


class DeclarationError(StubCraftError):
    """Raised when a declaration document cannot be read or validated."""

    pass


def _with_indices(fields: list[Any] | None) -> list[Any]:
    indexed = []
    for position, field in enumerate(fields or []):
        if isinstance(field, dict) and "index" not in field:
            field = {**field, "index": position}
        indexed.append(field)
    return indexed


def _prepare_function(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw
    prepared = dict(raw)
    prepared["parameters"] = _with_indices(raw.get("parameters"))
    prepared["results"] = _with_indices(raw.get("results"))
    receiver = raw.get("receiver")
    if isinstance(receiver, dict):
        prepared["receiver"] = {**receiver, "fields": _with_indices(receiver.get("fields"))}
    return prepared


class DeclarationFile(BaseModel):
    """One analyzed source file: where it lives, its test header and its declarations."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path of the analyzed source file")
    header: Header = Field(..., description="Header of the generated test file")
    functions: list[Function] = Field(default_factory=list, description="Declarations to test")
    constructors: dict[str, str] = Field(
        default_factory=dict,
        description="Receiver type name to the name of the function constructing it",
    )

    @model_validator(mode="before")
    @classmethod
    def assign_indices(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("functions"), list):
            data = {**data, "functions": [_prepare_function(f) for f in data["functions"]]}
        return data

    @model_validator(mode="after")
    def validate_constructors(self) -> "DeclarationFile":
        names = {function.name for function in self.functions}
        unknown = sorted(set(self.constructors.values()) - names)
        if unknown:
            raise ValueError(f"Unknown constructor functions: {', '.join(unknown)}")
        return self

    @property
    def source_path(self) -> SourcePath:
        return SourcePath(self.path)

    def constructor_for(self, function: Function) -> Function | None:
        """The constructor registered for ``function``'s receiver type, if any."""
        if function.receiver is None:
            return None
        constructor_name = self.constructors.get(function.receiver.type.value)
        if constructor_name is None:
            return None
        for candidate in self.functions:
            if candidate.name == constructor_name:
                return candidate
        return None


def load_declarations(path: str | Path) -> DeclarationFile:
    """Load a declaration document from a YAML or JSON file.

    Raises:
        DeclarationError: If the file cannot be read, parsed or validated.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        error_msg = f"Failed to read {path}: {e}"
        logger.error(error_msg)
        raise DeclarationError(error_msg) from e

    try:
        if path.suffix.lower() == ".json":
            content = json.loads(text)
        else:
            content = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        error_msg = f"Invalid declaration document {path}: {e}"
        logger.error(error_msg)
        raise DeclarationError(error_msg) from e

    if not isinstance(content, dict):
        raise DeclarationError(f"Declaration document {path} must contain a mapping")

    try:
        declarations = DeclarationFile(**content)
    except ValidationError as e:
        error_msg = f"Declaration validation failed for {path}: {e}"
        logger.error(error_msg)
        raise DeclarationError(error_msg) from e

    logger.debug(f"Loaded {len(declarations.functions)} declarations from {path}")
    return declarations
