"""Tests for reading declaration documents."""

import json
from pathlib import Path

import pytest

from stubcraft.adapters.io.declaration_loader import (
    DeclarationError,
    DeclarationFile,
    load_declarations,
)

REPO_DOCUMENT = """
path: store/repo.go
header:
  comments: ["// Code generated by stubcraft."]
  package: store
  imports:
    - path: '"testing"'
constructors:
  repo: newRepo
functions:
  - name: newRepo
    is_constructor: true
    parameters:
      - name: dsn
        type: {value: string, underlying: string}
    results:
      - type: {value: repo, is_star: true, underlying: "struct{dsn string}"}
    returns_error: true
  - name: Save
    receiver:
      name: r
      type: {value: repo, is_star: true, underlying: "struct{dsn string}"}
      fields:
        - name: dsn
          type: {value: string, underlying: string}
    parameters:
      - name: key
        type: {value: string, underlying: string}
      - name: value
        type: {value: byte, is_variadic: true, underlying: byte}
    returns_error: true
  - name: Close
"""


def write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content)
    return path


class TestLoadDeclarations:
    """Test YAML and JSON documents."""

    def test_yaml_document(self, tmp_path):
        document = load_declarations(write(tmp_path, "repo.yaml", REPO_DOCUMENT))

        assert document.header.package == "store"
        assert document.header.comments == ["// Code generated by stubcraft."]
        assert [f.name for f in document.functions] == ["newRepo", "Save", "Close"]
        assert document.source_path.test_path == "store/repo_test.go"

    def test_indices_follow_positions(self, tmp_path):
        document = load_declarations(write(tmp_path, "repo.yaml", REPO_DOCUMENT))

        save = document.functions[1]
        assert [p.index for p in save.parameters] == [0, 1]
        assert save.parameters[1].type.is_variadic is True
        assert [f.index for f in save.receiver.fields] == [0]

    def test_constructor_lookup(self, tmp_path):
        document = load_declarations(write(tmp_path, "repo.yaml", REPO_DOCUMENT))
        new_repo, save, close = document.functions

        assert document.constructor_for(save) is new_repo
        assert document.constructor_for(close) is None
        assert document.constructor_for(new_repo) is None

    def test_json_document(self, tmp_path):
        content = {
            "path": "calc.go",
            "header": {"package": "calc", "code": "var _ = 1\n"},
            "functions": [
                {
                    "name": "Double",
                    "parameters": [{"name": "x", "type": {"value": "int", "underlying": "int"}}],
                    "results": [{"type": {"value": "int", "underlying": "int"}}],
                }
            ],
        }
        document = load_declarations(write(tmp_path, "calc.json", json.dumps(content)))

        assert isinstance(document, DeclarationFile)
        assert document.header.code == b"var _ = 1\n"
        assert document.functions[0].only_returns_one_value

    def test_unknown_constructor(self, tmp_path):
        content = REPO_DOCUMENT.replace("repo: newRepo", "repo: openRepo")
        with pytest.raises(DeclarationError, match="openRepo"):
            load_declarations(write(tmp_path, "repo.yaml", content))

    def test_explicit_indices_are_validated(self, tmp_path):
        content = """
path: calc.go
header: {package: calc}
functions:
  - name: Add
    parameters:
      - {name: a, index: 1, type: {value: int}}
"""
        with pytest.raises(DeclarationError, match="validation failed"):
            load_declarations(write(tmp_path, "calc.yaml", content))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(DeclarationError, match="Invalid declaration document"):
            load_declarations(write(tmp_path, "bad.yaml", "functions: [\n"))

    def test_document_must_be_mapping(self, tmp_path):
        with pytest.raises(DeclarationError, match="must contain a mapping"):
            load_declarations(write(tmp_path, "list.yaml", "- name: Add\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(DeclarationError, match="Failed to read"):
            load_declarations(tmp_path / "missing.yaml")
