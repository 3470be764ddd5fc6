"""I/O adapters: declaration loading, file sinks and console logging."""

from .declaration_loader import DeclarationError, DeclarationFile, load_declarations
from .file_sink import TestFileSink
from .rich_logging import LoggerManager, setup_logging

__all__ = [
    "DeclarationError",
    "DeclarationFile",
    "LoggerManager",
    "TestFileSink",
    "load_declarations",
    "setup_logging",
]
