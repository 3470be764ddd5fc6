"""Configuration management for stubcraft."""

from .loader import ConfigLoader, ConfigurationError, load_config
from .models import LoggingConfig, RenderConfig, StubCraftConfig, TemplateConfig

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "LoggingConfig",
    "RenderConfig",
    "StubCraftConfig",
    "TemplateConfig",
    "load_config",
]
