"""Configuration models for stubcraft."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TemplateConfig(BaseModel):
    """Which template set the render engine loads."""

    directory: str | None = Field(
        default=None, description="Directory of custom templates; every file is loaded"
    )
    name: str | None = Field(
        default=None, description="Name of a bundled alternate template set (e.g. 'testify')"
    )
    params: dict[str, Any] = Field(
        default_factory=dict, description="Extra values exposed to templates as 'params'"
    )

    @model_validator(mode="after")
    def validate_single_source(self) -> "TemplateConfig":
        """Only one custom template source may be selected."""
        if self.directory and self.name:
            raise ValueError("templates.directory and templates.name are mutually exclusive")
        return self


class RenderConfig(BaseModel):
    """Flags selecting template branches."""

    print_inputs: bool = Field(
        default=False,
        description="Emit a test case filled with zero literals and print inputs in failures",
    )
    subtests: bool = Field(
        default=True, description="Wrap each test case in a named sub-test"
    )
    parallel: bool = Field(
        default=False, description="Mark sub-tests as independently schedulable"
    )

    @model_validator(mode="after")
    def validate_parallel(self) -> "RenderConfig":
        """Parallel marking only applies inside sub-tests."""
        if self.parallel and not self.subtests:
            raise ValueError("render.parallel requires render.subtests")
        return self


class LoggingConfig(BaseModel):
    """Configuration for logging behavior."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Log level of the console handler"
    )
    rich_tracebacks: bool = Field(
        default=True, description="Render exception tracebacks with rich"
    )


class StubCraftConfig(BaseModel):
    """Main configuration model for stubcraft."""

    model_config = ConfigDict(extra="forbid")

    templates: TemplateConfig = Field(
        default_factory=TemplateConfig, description="Template set selection"
    )
    render: RenderConfig = Field(
        default_factory=RenderConfig, description="Rendering flags"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging behavior configuration"
    )

    def get_nested_value(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation (e.g. 'render.subtests')."""
        value: Any = self
        for part in key.split("."):
            if not hasattr(value, part):
                return default
            value = getattr(value, part)
        return value
