"""
Console logging with Rich.

Library modules only ever call ``logging.getLogger(__name__)``; the command
line entry point installs a single ``RichHandler`` on the root logger through
``setup_logging``.
"""

import logging
import threading

from rich.console import Console
from rich.logging import RichHandler


class LoggerManager:
    """Owns the one-time configuration of the root logger."""

    _console: Console | None = None
    _handler: RichHandler | None = None
    _setup_lock: threading.Lock = threading.Lock()

    @classmethod
    def setup_global_logging(
        cls,
        console: Console | None = None,
        level: int = logging.INFO,
        rich_tracebacks: bool = True,
    ) -> RichHandler:
        """Install the Rich handler on the root logger, once.

        Repeated calls only adjust the level.
        """
        with cls._setup_lock:
            root_logger = logging.getLogger()

            if cls._handler is not None and cls._handler in root_logger.handlers:
                root_logger.setLevel(level)
                return cls._handler

            # Replace foreign RichHandlers, keep any other handlers
            for handler in list(root_logger.handlers):
                if isinstance(handler, RichHandler):
                    root_logger.removeHandler(handler)

            cls._console = console or Console(stderr=True)
            rich_handler = RichHandler(
                console=cls._console,
                show_time=False,
                show_path=False,
                markup=False,
                rich_tracebacks=rich_tracebacks,
            )
            rich_handler.setFormatter(logging.Formatter(fmt="%(message)s"))

            root_logger.addHandler(rich_handler)
            root_logger.setLevel(level)
            cls._handler = rich_handler
            return rich_handler

    @classmethod
    def reset(cls) -> None:
        """Remove the installed handler (used by tests and embedding callers)."""
        with cls._setup_lock:
            if cls._handler is not None:
                logging.getLogger().removeHandler(cls._handler)
            cls._handler = None
            cls._console = None


def setup_logging(
    level: str | int = logging.INFO,
    console: Console | None = None,
    rich_tracebacks: bool = True,
) -> RichHandler:
    """Configure console logging for command line use."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    return LoggerManager.setup_global_logging(
        console=console, level=level, rich_tracebacks=rich_tracebacks
    )
