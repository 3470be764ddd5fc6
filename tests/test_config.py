"""Tests for configuration models and the configuration loader."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from stubcraft.config.loader import ConfigLoader, ConfigurationError, load_config
from stubcraft.config.models import RenderConfig, StubCraftConfig, TemplateConfig


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep stray config files and STUBCRAFT_ variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    for key in [k for k in os.environ if k.startswith("STUBCRAFT_")]:
        monkeypatch.delenv(key)


class TestConfigModels:
    """Test model defaults and cross-field validation."""

    def test_defaults(self):
        config = StubCraftConfig()
        assert config.templates.directory is None
        assert config.templates.name is None
        assert config.templates.params == {}
        assert config.render.subtests is True
        assert config.render.parallel is False
        assert config.render.print_inputs is False
        assert config.logging.level == "INFO"

    def test_template_sources_are_exclusive(self):
        with pytest.raises(ValidationError, match="mutually exclusive"):
            TemplateConfig(directory="tpl", name="testify")

    def test_parallel_requires_subtests(self):
        with pytest.raises(ValidationError, match="requires render.subtests"):
            RenderConfig(subtests=False, parallel=True)

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            StubCraftConfig(output={})

    def test_get_nested_value(self):
        config = StubCraftConfig()
        assert config.get_nested_value("render.subtests") is True
        assert config.get_nested_value("render.missing", "fallback") == "fallback"


class TestConfigLoader:
    """Test file, environment and command line sources."""

    def test_defaults_without_file(self):
        config = ConfigLoader().load_config(env_overrides={})
        assert config == StubCraftConfig()

    def test_toml_file(self, tmp_path: Path):
        config_file = tmp_path / ".stubcraft.toml"
        config_file.write_text(
            """
[templates]
name = "testify"

[templates.params]
owner = "platform"

[render]
subtests = false
print_inputs = true
"""
        )

        config = ConfigLoader(config_file).load_config(env_overrides={})

        assert config.templates.name == "testify"
        assert config.templates.params == {"owner": "platform"}
        assert config.render.subtests is False
        assert config.render.print_inputs is True

    def test_yaml_file_found_in_working_directory(self, tmp_path: Path):
        (tmp_path / "stubcraft.yaml").write_text("render:\n  parallel: true\n")

        config = ConfigLoader().load_config(env_overrides={})

        assert config.render.parallel is True

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / ".stubcraft.toml"
        config_file.write_text("[render]\nsubtests = true\n")
        monkeypatch.setenv("STUBCRAFT_RENDER__PRINT_INPUTS", "yes")
        monkeypatch.setenv("STUBCRAFT_LOGGING__LEVEL", "DEBUG")

        config = ConfigLoader(config_file).load_config()

        assert config.render.print_inputs is True
        assert config.logging.level == "DEBUG"

    def test_cli_overrides_win(self, tmp_path: Path):
        config_file = tmp_path / ".stubcraft.toml"
        config_file.write_text("[render]\nprint_inputs = true\n")

        config = ConfigLoader(config_file).load_config(
            env_overrides={"render": {"print_inputs": True}},
            cli_overrides={"render": {"print_inputs": False}},
        )

        assert config.render.print_inputs is False
        assert config.render.subtests is True

    def test_config_is_cached(self, tmp_path: Path):
        config_file = tmp_path / ".stubcraft.toml"
        config_file.write_text("[render]\nparallel = true\n")
        loader = ConfigLoader(config_file)

        first = loader.load_config(env_overrides={})
        config_file.write_text("[render]\nparallel = false\n")

        assert loader.load_config(env_overrides={}) is first
        assert loader.load_config(env_overrides={}, reload=True).render.parallel is False

    def test_invalid_toml(self, tmp_path: Path):
        config_file = tmp_path / ".stubcraft.toml"
        config_file.write_text("[render\nsubtests = ")

        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            ConfigLoader(config_file).load_config(env_overrides={})

    def test_invalid_values(self, tmp_path: Path):
        config_file = tmp_path / ".stubcraft.toml"
        config_file.write_text('[logging]\nlevel = "LOUD"\n')

        with pytest.raises(ConfigurationError, match="validation failed"):
            ConfigLoader(config_file).load_config(env_overrides={})

    def test_yaml_must_be_a_mapping(self, tmp_path: Path):
        config_file = tmp_path / ".stubcraft.yml"
        config_file.write_text("- render\n")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            ConfigLoader(config_file).load_config(env_overrides={})

    def test_load_config_function(self, tmp_path: Path):
        config_file = tmp_path / ".stubcraft.toml"
        config_file.write_text('[templates]\ndirectory = "tpl"\n')

        config = load_config(config_file, env_overrides={})

        assert config.templates.directory == "tpl"
