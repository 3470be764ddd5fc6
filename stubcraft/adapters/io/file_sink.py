"""
File sink for generated test source.

``TestFileSink`` implements the ``ByteSink`` port on top of a file opened in
binary mode. Any ``OSError`` raised while opening or writing is reported as
``WriteError``; bytes already written stay in the file.
"""

import logging
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from ...ports.render_error import WriteError

logger = logging.getLogger(__name__)


class TestFileSink:
    """Writes rendered bytes to a file."""

    __test__ = False  # not a pytest test class

    def __init__(self, path: str | Path, append: bool = False) -> None:
        self.path = Path(path)
        self.append = append
        self._handle: BinaryIO | None = None
        self.bytes_written = 0

    def open(self) -> "TestFileSink":
        mode = "ab" if self.append else "wb"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = open(self.path, mode)
        except OSError as e:
            error_msg = f"Failed to open {self.path}: {e}"
            logger.error(error_msg)
            raise WriteError(error_msg, path=str(self.path)) from e
        return self

    def write(self, data: bytes) -> int:
        if self._handle is None:
            raise WriteError("Sink is not open", path=str(self.path))
        try:
            written = self._handle.write(data)
        except OSError as e:
            error_msg = f"Failed to write {self.path}: {e}"
            logger.error(error_msg)
            raise WriteError(error_msg, path=str(self.path)) from e
        self.bytes_written += written
        return written

    def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except OSError as e:
            raise WriteError(f"Failed to close {self.path}: {e}", path=str(self.path)) from e
        logger.debug(f"Wrote {self.bytes_written} bytes to {self.path}")

    def __enter__(self) -> "TestFileSink":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
